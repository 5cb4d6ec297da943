"""Typed license specification.

A specification lists license bodies and label sets, each declared for one
or more languages, plus an optional default language. Label sets come from
one of several sources; each source kind is its own frozen dataclass and
LabelEntry is their union, so loaders dispatch with ``match``.

specification_from_mapping converts already-validated JSON data into these
types. Malformed structure is a programming error at this boundary and
raises TypeError or ValueError.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Literal, TypeAlias

from dmglicense.catalog.language import LanguageSpecifier, LanguageSpecifiers
from dmglicense.enums import ContentType, Delimiter, LabelSourceKind
from dmglicense.labels.labelset import LabelSet

__all__ = [
    "BodyEntry",
    "DelimitedLabels",
    "InlineLabels",
    "JsonLabels",
    "LabelEntry",
    "LicenseSpecification",
    "OnePerFileLabels",
    "RawLabels",
    "specification_from_mapping",
]

TransferEncoding: TypeAlias = Literal["base64"]


def _languages_tuple(languages: LanguageSpecifiers) -> tuple[LanguageSpecifier, ...]:
    if isinstance(languages, (int, str)):
        return (languages,)
    return tuple(languages)


@dataclass(frozen=True, slots=True)
class BodyEntry:
    """License body text for one or more languages.

    Exactly one of ``text`` and ``file`` must be given.

    Attributes:
        languages: Language IDs and/or tags this body is for
        text: Inline body text
        file: Path of a file holding the body
        content_type: Explicit content type; inferred from ``file`` when None
        charset: Source charset of file or base64 data (``"native"`` for
            pre-encoded data); UTF-8 when None
        encoding: ``"base64"`` when ``text`` or the file content is base64
        default: Marks this entry's first language as the default language
    """

    languages: tuple[LanguageSpecifier, ...]
    text: str | None = None
    file: str | None = None
    content_type: ContentType | None = None
    charset: str | None = None
    encoding: TransferEncoding | None = None
    default: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", _languages_tuple(self.languages))
        if (self.text is None) == (self.file is None):
            msg = "A license body needs exactly one of 'text' and 'file'"
            raise ValueError(msg)
        if self.encoding == "base64" and self.text is not None and self.charset is None:
            msg = "Inline base64 body text needs a 'charset'"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class InlineLabels:
    """Labels written directly in the specification."""

    kind: ClassVar[LabelSourceKind] = LabelSourceKind.INLINE

    languages: tuple[LanguageSpecifier, ...]
    labels: LabelSet[str]
    charset: str | None = None
    encoding: TransferEncoding | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", _languages_tuple(self.languages))


@dataclass(frozen=True, slots=True)
class OnePerFileLabels:
    """Each label read from its own file; ``files`` holds the paths."""

    kind: ClassVar[LabelSourceKind] = LabelSourceKind.ONE_PER_FILE

    languages: tuple[LanguageSpecifier, ...]
    files: LabelSet[str]
    charset: str | None = None
    encoding: TransferEncoding | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", _languages_tuple(self.languages))


@dataclass(frozen=True, slots=True)
class DelimitedLabels:
    """One file split into 5 or 6 labels.

    With 6 pieces the first is the language name.
    """

    kind: ClassVar[LabelSourceKind] = LabelSourceKind.DELIMITED

    languages: tuple[LanguageSpecifier, ...]
    file: str
    delimiters: tuple[Delimiter | bytes, ...]
    charset: str | None = None
    encoding: TransferEncoding | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", _languages_tuple(self.languages))
        object.__setattr__(
            self,
            "delimiters",
            tuple(d if isinstance(d, bytes) else Delimiter(d) for d in self.delimiters),
        )
        if not self.delimiters:
            msg = "Delimited labels need at least one delimiter"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class RawLabels:
    """A file that already holds a packed STR# resource."""

    kind: ClassVar[LabelSourceKind] = LabelSourceKind.RAW

    languages: tuple[LanguageSpecifier, ...]
    file: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", _languages_tuple(self.languages))


@dataclass(frozen=True, slots=True)
class JsonLabels:
    """A file holding a JSON object of label strings."""

    kind: ClassVar[LabelSourceKind] = LabelSourceKind.JSON

    languages: tuple[LanguageSpecifier, ...]
    file: str
    charset: str | None = None
    encoding: TransferEncoding | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", _languages_tuple(self.languages))


LabelEntry: TypeAlias = InlineLabels | OnePerFileLabels | DelimitedLabels | RawLabels | JsonLabels


@dataclass(frozen=True, slots=True)
class LicenseSpecification:
    """Everything needed to assemble license resources.

    Attributes:
        bodies: Body entries in declaration order
        labels: Label entries in declaration order
        default_language: Explicit default language ID or tag
    """

    bodies: tuple[BodyEntry, ...]
    labels: tuple[LabelEntry, ...] = ()
    default_language: LanguageSpecifier | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "bodies", tuple(self.bodies))
        object.__setattr__(self, "labels", tuple(self.labels))


# ============================================================================
# JSON CONVERSION
# ============================================================================


def _delimiter_from_json(value: str | Sequence[int]) -> Delimiter | bytes:
    if isinstance(value, str):
        return Delimiter(value)
    return bytes(value)


def _label_set_from_json(data: Mapping[str, Any]) -> LabelSet[str]:
    try:
        return LabelSet.from_mapping(data)
    except KeyError as e:
        msg = f"Label entry is missing the {e.args[0]!r} label"
        raise ValueError(msg) from e


def _label_entry_from_json(
    data: Mapping[str, Any], languages: LanguageSpecifiers
) -> LabelEntry:
    kind = LabelSourceKind(data.get("type") or LabelSourceKind.INLINE)
    charset = data.get("charset")
    encoding = data.get("encoding")
    match kind:
        case LabelSourceKind.INLINE:
            return InlineLabels(languages, _label_set_from_json(data), charset, encoding)
        case LabelSourceKind.ONE_PER_FILE:
            return OnePerFileLabels(languages, _label_set_from_json(data), charset, encoding)
        case LabelSourceKind.DELIMITED:
            return DelimitedLabels(
                languages,
                data["file"],
                tuple(_delimiter_from_json(d) for d in data["delimiters"]),
                charset,
                encoding,
            )
        case LabelSourceKind.RAW:
            return RawLabels(languages, data["file"])
        case LabelSourceKind.JSON:
            return JsonLabels(languages, data["file"], charset, encoding)


def _body_entry_from_json(data: Mapping[str, Any]) -> BodyEntry:
    content_type = data.get("type")
    return BodyEntry(
        languages=data["lang"],
        text=data.get("text"),
        file=data.get("file"),
        content_type=ContentType(content_type) if content_type else None,
        charset=data.get("charset"),
        encoding=data.get("encoding"),
        default=bool(data.get("default", False)),
    )


def specification_from_mapping(data: Mapping[str, Any]) -> LicenseSpecification:
    """Build a LicenseSpecification from JSON-shaped data.

    Shape::

        {
          "body": [{"lang": ["en-US", 2], "file": "license.rtf", "default": true,
                    "labels": {"type": "json", "file": "labels-en.json"}}],
          "labels": [{"lang": "fr", "agree": "...", ...}],
          "defaultLang": "en-US"
        }

    A ``labels`` object nested in a body item applies to that item's
    languages; top-level label items carry their own ``lang``.

    Raises:
        TypeError: If ``data`` is not a mapping
        ValueError: If an entry is structurally invalid
        KeyError: If a required key is missing
    """
    if not isinstance(data, Mapping):
        msg = f"Specification root must be an object, not {type(data).__name__}"
        raise TypeError(msg)

    bodies: list[BodyEntry] = []
    labels: list[LabelEntry] = []

    for item in data.get("body", ()):
        body = _body_entry_from_json(item)
        bodies.append(body)
        nested = item.get("labels")
        if nested is not None:
            labels.append(_label_entry_from_json(nested, body.languages))

    for item in data.get("labels", ()):
        labels.append(_label_entry_from_json(item, item["lang"]))

    return LicenseSpecification(
        bodies=tuple(bodies),
        labels=tuple(labels),
        default_language=data.get("defaultLang"),
    )
