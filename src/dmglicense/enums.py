"""Enumerations for dmglicense type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class BodyType(StrEnum):
    """Resource type code of a license body.

    The value is the four-character Mac resource type, so it can be used
    directly as a key in the resource map handed to the container writer.
    """

    TEXT = "TEXT"
    """Plain text in the language's legacy charset."""

    RTF = "RTF "
    """Rich Text Format. Note the trailing space: resource types are 4 bytes."""


class ContentType(StrEnum):
    """Declared content type of a body entry.

    StrEnum provides automatic string conversion: str(ContentType.RTF) == "rtf"
    """

    PLAIN = "plain"
    """Plain text body."""

    RTF = "rtf"
    """Rich text body."""

    @property
    def body_type(self) -> BodyType:
        """Resource type used to store a body of this content type."""
        return BodyType.RTF if self is ContentType.RTF else BodyType.TEXT


class LabelSourceKind(StrEnum):
    """Where a label entry gets its six strings from."""

    INLINE = "inline"
    """Strings given directly in the specification."""

    ONE_PER_FILE = "one-per-file"
    """Each label read from its own file."""

    DELIMITED = "delimited"
    """One file split on delimiters into 5 or 6 pieces."""

    RAW = "raw"
    """A file that already holds a packed STR# resource."""

    JSON = "json"
    """A file holding a JSON object of label strings."""


class Delimiter(StrEnum):
    """Named delimiters accepted by delimited label files."""

    TAB = "tab"
    LF = "lf"
    CR = "cr"
    CRLF = "crlf"
    NUL = "nul"
    EOL = "eol"
    """Any of CRLF, CR or LF."""


__all__ = [
    "BodyType",
    "ContentType",
    "Delimiter",
    "LabelSourceKind",
]
