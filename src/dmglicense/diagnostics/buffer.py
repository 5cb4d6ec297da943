"""Error accumulation for fan-out/fan-in stages.

Per-item failures inside a stage are written into an ErrorBuffer instead of
propagating. Once every unit of work has finished, the stage calls
``check()`` to surface nothing, the single collected error, or a MultiError.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterator
from contextlib import contextmanager
from typing import NoReturn, TypeVar

from .errors import MultiError

T = TypeVar("T")

__all__ = ["ErrorBuffer"]


class ErrorBuffer:
    """Accumulates errors so they can all be raised together.

    Nested MultiErrors are flattened on entry, and an error instance that
    reaches the buffer more than once (for example, a shared load that two
    languages both awaited) is kept only once.

    Example:
        >>> errors = ErrorBuffer()
        >>> with errors.catching():
        ...     raise ValueError("first")
        >>> errors.add(ValueError("second"))
        >>> len(errors)
        2
    """

    __slots__ = ("_errors", "_seen")

    def __init__(self) -> None:
        self._errors: list[BaseException] = []
        self._seen: set[int] = set()

    def add(self, *errors: BaseException) -> None:
        """Add errors, flattening aggregates and skipping repeated instances."""
        for error in errors:
            if isinstance(error, MultiError):
                self.add(*error.errors)
            elif id(error) not in self._seen:
                self._seen.add(id(error))
                self._errors.append(error)

    @contextmanager
    def catching(self) -> Iterator[None]:
        """Collect any Exception raised inside the ``with`` block."""
        try:
            yield
        except Exception as e:  # noqa: BLE001 - collected, surfaced by check()
            self.add(e)

    async def catching_async(self, awaitable: Awaitable[T]) -> T | None:
        """Await ``awaitable``, collecting its failure and returning None instead."""
        try:
            return await awaitable
        except Exception as e:  # noqa: BLE001 - collected, surfaced by check()
            self.add(e)
            return None

    @property
    def errors(self) -> tuple[BaseException, ...]:
        """Errors collected so far, in arrival order."""
        return tuple(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def to_error(self) -> BaseException | None:
        """Combine the collected errors into one, or None if there are none."""
        match len(self._errors):
            case 0:
                return None
            case 1:
                return self._errors[0]
            case _:
                return MultiError(self._errors)

    def check(self) -> None:
        """Raise the collected errors, if any."""
        error = self.to_error()
        if error is not None:
            raise error

    def raise_with(self, error: BaseException) -> NoReturn:
        """Add ``error`` and raise everything collected."""
        self.add(error)
        combined = self.to_error()
        assert combined is not None
        raise combined
