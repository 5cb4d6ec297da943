"""dmglicense exception hierarchy.

Every error carries an ErrorCode and the structured values that produced
it (languages, label field, file path, byte offset), so callers can react
to a failure without parsing its message.

Hierarchy:
    DMGLicenseError
    ├─ NoSuchLanguageError
    ├─ EmptyLanguageListError
    ├─ NoSuitableCharsetError
    ├─ LabelEncodingError
    │  └─ LanguageNameEncodingError
    ├─ NoDefaultLabelsError
    ├─ LabelSourceError
    ├─ InvalidResourceError
    ├─ ResourceDecodingError
    ├─ BodyPreparationError
    ├─ NoLicenseContentError
    ├─ LanguageCollisionError
    ├─ DefaultLanguageError
    └─ MultiError

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .codes import ErrorCode

if TYPE_CHECKING:
    from dmglicense.catalog.language import Language, LanguageSpecifier

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "DMGLicenseError",
    # Catalog
    "NoSuchLanguageError",
    "EmptyLanguageListError",
    # Charsets
    "NoSuitableCharsetError",
    # Labels
    "LabelEncodingError",
    "LanguageNameEncodingError",
    "NoDefaultLabelsError",
    "LabelSourceError",
    "ResourcePosition",
    "InvalidResourceError",
    "ResourceDecodingError",
    # Bodies
    "BodyPreparationError",
    # Assembly
    "NoLicenseContentError",
    "LanguageCollisionError",
    "DefaultLanguageError",
    # Aggregate
    "MultiError",
]


def describe_languages(languages: Iterable[Language]) -> str:
    """Join English names for messages, e.g. ``"English, French"``."""
    return ", ".join(language.english_name for language in languages)


class DMGLicenseError(Exception):
    """Base exception for all dmglicense errors.

    Attributes:
        code: Structured error code
    """

    default_code: ErrorCode = ErrorCode.GENERIC

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code

    @property
    def message(self) -> str:
        """Message text without the causal chain."""
        return str(self.args[0]) if self.args else ""


# ============================================================================
# CATALOG
# ============================================================================


class NoSuchLanguageError(DMGLicenseError):
    """A language specifier matched nothing in the catalog.

    Attributes:
        specifier: The unresolved ID, tag, or list of them
    """

    default_code = ErrorCode.NO_SUCH_LANGUAGE

    def __init__(self, specifier: LanguageSpecifier | Sequence[LanguageSpecifier]) -> None:
        if isinstance(specifier, (list, tuple)):
            shown = f"[{', '.join(str(s) for s in specifier)}]"
        else:
            shown = str(specifier)
        super().__init__(f"No known languages found for specification {shown}.")
        self.specifier = specifier


class EmptyLanguageListError(DMGLicenseError):
    """An entry in the specification declares no languages at all."""

    default_code = ErrorCode.EMPTY_LANGUAGE_LIST

    def __init__(self, kind: str) -> None:
        super().__init__(f"One or more license {kind} sections has an empty language list.")
        self.kind = kind


# ============================================================================
# CHARSETS
# ============================================================================


class NoSuitableCharsetError(DMGLicenseError):
    """Text cannot be encoded in a way every target language can decode.

    Raised either when the target languages share no character set, or when
    none of the shared character sets can represent the text. In the latter
    case the individual failures are available as ``__cause__``.

    Attributes:
        languages: Target languages of the failed encoding
        charsets: Candidate charsets that were attempted (empty if none shared)
    """

    default_code = ErrorCode.NO_SUITABLE_CHARSET

    def __init__(
        self,
        message: str,
        *,
        languages: Sequence[Language],
        charsets: Sequence[str] = (),
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.languages = tuple(languages)
        self.charsets = tuple(charsets)


# ============================================================================
# LABELS
# ============================================================================


class LabelEncodingError(DMGLicenseError):
    """A label could not be turned into an STR# field.

    Attributes:
        field: Label field name (``languageName``, ``agree``, ...)
        language: Language the label was being encoded for
        data: Offending encoded bytes, when the failure is an oversized field
    """

    default_code = ErrorCode.LABEL_ENCODING_FAILED

    def __init__(
        self,
        message: str,
        *,
        field: str,
        language: Language,
        data: bytes | None = None,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.field = field
        self.language = language
        self.data = data


class LanguageNameEncodingError(LabelEncodingError):
    """The implicit language name could not be encoded for a language.

    The language has no charset that can represent its own display name,
    so its labels have to be supplied as pre-encoded native bytes.
    """

    default_code = ErrorCode.LANGUAGE_NAME_UNENCODABLE

    def __init__(self, language: Language) -> None:
        super().__init__(
            f"Cannot encode a language name for {language.english_name}. "
            "Labels for this language must be supplied with charset “native”, "
            "including the “languageName” label.",
            field="languageName",
            language=language,
        )


class NoDefaultLabelsError(DMGLicenseError):
    """No explicit labels were given and the language has no predefined set."""

    default_code = ErrorCode.NO_DEFAULT_LABELS

    def __init__(self, language: Language) -> None:
        super().__init__(
            f"There are no default labels for {language.english_name}. "
            "You must provide your own labels for this language."
        )
        self.language = language


class LabelSourceError(DMGLicenseError):
    """A label file is unreadable or has the wrong shape.

    Attributes:
        path: File the labels were being loaded from (None for inline labels)
    """

    default_code = ErrorCode.LABEL_SOURCE_INVALID

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(f"[{path}] {message}" if path else message)
        self.path = path


@dataclass(frozen=True, slots=True)
class ResourcePosition:
    """Location of a resource inside a resource file, for diagnostics.

    Attributes:
        file: Resource file path
        res_type: Four-character resource type
        res_id: Resource ID
        res_name: Resource name (may be empty)
        byte: Byte offset inside the resource data (None for the whole resource)
    """

    file: str
    res_type: str = "STR#"
    res_id: int = 0
    res_name: str = ""
    byte: int | None = None

    def at(self, byte: int) -> ResourcePosition:
        """Return a copy pointing at ``byte``."""
        return ResourcePosition(self.file, self.res_type, self.res_id, self.res_name, byte)

    def __str__(self) -> str:
        name = f" {self.res_name}" if self.res_name else ""
        byte = "" if self.byte is None else f" byte {self.byte}"
        return f"file “{self.file}”, {self.res_type} resource {self.res_id}{name}{byte}"


class InvalidResourceError(DMGLicenseError):
    """Malformed STR# data in a predefined label resource.

    Attributes:
        position: Where the problem was found, including the byte offset
    """

    default_code = ErrorCode.INVALID_RESOURCE

    def __init__(self, message: str, *, position: ResourcePosition) -> None:
        super().__init__(f"[{position}]: {message}")
        self.position = position

    @property
    def offset(self) -> int | None:
        """Byte offset of the problem inside the resource data."""
        return self.position.byte


class ResourceDecodingError(DMGLicenseError):
    """A predefined STR# resource could not be decoded to text.

    Attributes:
        language: Language whose labels were being decoded
        charsets: Charsets that were tried
    """

    default_code = ErrorCode.RESOURCE_DECODING_FAILED

    def __init__(self, language: Language, charsets: Sequence[str]) -> None:
        super().__init__(
            f"Can't decode labels for {language.english_name} "
            f"from {', '.join(charsets) or 'any known charset'}."
        )
        self.language = language
        self.charsets = tuple(charsets)


# ============================================================================
# BODIES
# ============================================================================


class BodyPreparationError(DMGLicenseError):
    """A license body could not be read or encoded.

    Always raised ``from`` the underlying failure.

    Attributes:
        languages: Languages the body was being prepared for
        path: Source file path, when the body comes from a file
    """

    default_code = ErrorCode.BODY_PREPARATION_FAILED

    def __init__(
        self, message: str, *, languages: Sequence[Language], path: str | None = None
    ) -> None:
        super().__init__(message)
        self.languages = tuple(languages)
        self.path = path


# ============================================================================
# ASSEMBLY
# ============================================================================


class NoLicenseContentError(DMGLicenseError):
    """Nothing could be assembled for any language."""

    default_code = ErrorCode.NO_LICENSE_CONTENT


class LanguageCollisionError(DMGLicenseError):
    """More than one entry of the same kind declared the same language(s).

    Delivered through the non-fatal error sink; the first declared entry
    is used for every colliding language.

    Attributes:
        kind: Entry kind, e.g. ``"license body"`` or ``"label set"``
        languages: Colliding languages, in first-seen order
    """

    default_code = ErrorCode.LANGUAGE_COLLISION

    def __init__(self, kind: str, languages: Sequence[Language]) -> None:
        plural = len(languages) != 1
        listed = ", ".join(
            f"{language.english_name} ({'; '.join(language.tags)})" for language in languages
        )
        super().__init__(
            f"More than one {kind} was assigned to the language{'s' if plural else ''} "
            f"{listed}. {'In each case, t' if plural else 'T'}he first applicable "
            f"{kind} has been used."
        )
        self.kind = kind
        self.languages = tuple(languages)


class DefaultLanguageError(DMGLicenseError):
    """The configured default language is ambiguous or unusable.

    Attributes:
        candidates: Language IDs that were considered
    """

    default_code = ErrorCode.DEFAULT_LANGUAGE_UNUSABLE

    def __init__(
        self, message: str, *, candidates: Sequence[int] = (), code: ErrorCode | None = None
    ) -> None:
        super().__init__(message, code=code)
        self.candidates = tuple(candidates)


# ============================================================================
# AGGREGATE
# ============================================================================


class MultiError(DMGLicenseError):
    """Several errors surfaced together.

    ``str()`` enumerates every contained error, each with its own causal
    chain, as a tree.

    Attributes:
        errors: Contained errors in the order they were collected
    """

    default_code = ErrorCode.MULTIPLE_ERRORS

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors: tuple[BaseException, ...] = tuple(errors)
        super().__init__(f"{len(self.errors)} errors")

    def __str__(self) -> str:
        from .formatter import ErrorFormatter  # noqa: PLC0415 - circular

        return ErrorFormatter().format(self)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)
