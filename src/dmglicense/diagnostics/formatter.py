"""Error formatting service.

Renders dmglicense errors, including aggregates and causal chains, for
terminals, logs and tooling.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import StrEnum

from .codes import ErrorCode
from .errors import DMGLicenseError, MultiError

__all__ = [
    "ErrorFormatter",
    "OutputFormat",
    "format_error",
]


class OutputFormat(StrEnum):
    """Output format options for error formatting."""

    TREE = "tree"  # Multi-line, aggregates drawn as a tree (default)
    SIMPLE = "simple"  # Single line per error, no causes
    JSON = "json"  # JSON format for tooling integration


def _code_of(error: BaseException) -> ErrorCode | None:
    return error.code if isinstance(error, DMGLicenseError) else None


def _message_of(error: BaseException) -> str:
    if isinstance(error, MultiError):
        return f"{len(error.errors)} errors"
    if isinstance(error, DMGLicenseError):
        return error.message
    text = str(error)
    return f"{type(error).__name__}: {text}" if text else type(error).__name__


@dataclass(frozen=True, slots=True)
class ErrorFormatter:
    """Error formatting service.

    Attributes:
        output_format: Output style (tree, simple, json)
        show_causes: Follow ``__cause__`` chains in tree output
        max_cause_depth: Stop following causes after this many links

    Example:
        >>> formatter = ErrorFormatter()
        >>> print(formatter.format(MultiError([ValueError("a"), ValueError("b")])))
        2 errors:
        ├ ValueError: a
        └ ValueError: b
    """

    output_format: OutputFormat = OutputFormat.TREE
    show_causes: bool = True
    max_cause_depth: int = 16

    def format(self, error: BaseException) -> str:
        """Format a single error (which may be an aggregate).

        Args:
            error: Error to format

        Returns:
            Formatted error string
        """
        match self.output_format:
            case OutputFormat.TREE:
                return "\n".join(self._tree_lines(error))
            case OutputFormat.SIMPLE:
                return self._format_simple(error)
            case OutputFormat.JSON:
                return self._format_json(error)

    def _tree_lines(self, error: BaseException) -> list[str]:
        if isinstance(error, MultiError):
            match len(error.errors):
                case 0:
                    return ["0 errors (empty)"]
                case 1:
                    return self._tree_lines(error.errors[0])
            lines = [f"{len(error.errors)} errors:"]
            for index, inner in enumerate(error.errors):
                last = index + 1 == len(error.errors)
                first_prefix, rest_prefix = ("└", " ") if last else ("├", "│")
                for line_index, line in enumerate(self._tree_lines(inner)):
                    prefix = first_prefix if line_index == 0 else rest_prefix
                    lines.append(f"{prefix} {line}")
            return lines

        lines = [_message_of(error)]
        if self.show_causes:
            cause = error.__cause__
            depth = 0
            while cause is not None and depth < self.max_cause_depth:
                cause_lines = self._tree_lines(cause) if isinstance(cause, MultiError) else [
                    _message_of(cause)
                ]
                lines.append(f"  caused by: {cause_lines[0]}")
                lines.extend(f"  {line}" for line in cause_lines[1:])
                if isinstance(cause, MultiError):
                    break
                cause = cause.__cause__
                depth += 1
        return lines

    def _format_simple(self, error: BaseException) -> str:
        code = _code_of(error)
        message = _message_of(error)
        return f"{code.name}: {message}" if code is not None else message

    def _format_json(self, error: BaseException) -> str:
        import json  # noqa: PLC0415

        return json.dumps(self._as_dict(error), ensure_ascii=False)

    def _as_dict(self, error: BaseException) -> dict[str, object]:
        code = _code_of(error)
        data: dict[str, object] = {
            "type": type(error).__name__,
            "code": code.name if code is not None else None,
            "code_value": code.value if code is not None else None,
            "message": _message_of(error),
        }
        if isinstance(error, MultiError):
            data["errors"] = [self._as_dict(inner) for inner in error.errors]
        if self.show_causes and error.__cause__ is not None:
            data["cause"] = self._as_dict(error.__cause__)
        return data


def format_error(error: BaseException) -> str:
    """Render ``error`` with the default tree formatter."""
    return ErrorFormatter().format(error)
