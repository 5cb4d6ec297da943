"""STR# label resource codec.

Binary layout::

    uint16 BE   string count, always 6
    6 x {
        uint8   length (0-255)
        bytes   data[length]
    }

Strings in order: language name, Agree, Disagree, Print, Save, message.

pack_labels encodes every field, collecting per-field failures so that one
report lists every problem with a label set. unpack_labels is the inverse
used when reading predefined label resources.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import struct
from collections.abc import Iterator, Sequence
from typing import TypeAlias

from dmglicense.catalog.language import Language
from dmglicense.charsets import CodecCache, lookup_codec
from dmglicense.coded_text import CodedText
from dmglicense.constants import LABEL_FIELD_COUNT, MAX_LABEL_FIELD_BYTES, STR_LIST_MAGIC
from dmglicense.diagnostics import (
    DMGLicenseError,
    ErrorBuffer,
    ErrorCode,
    InvalidResourceError,
    LabelEncodingError,
    LanguageNameEncodingError,
    ResourceDecodingError,
    ResourcePosition,
)
from dmglicense.labels.labelset import LABEL_DESCRIPTIONS, LABEL_JSON_KEYS, LabelSet

__all__ = [
    "LabelValue",
    "decode_labels",
    "pack_labels",
    "unpack_labels",
]

LabelValue: TypeAlias = str | bytes | CodedText
"""A label as given: text to negotiate, ready bytes, or coded text."""

_MAGIC = struct.Struct(">H")


def _encode_value(value: LabelValue, language: Language, codecs: CodecCache) -> bytes:
    match value:
        case bytes():
            return value
        case CodedText():
            return value.encode([language], codecs)
        case str():
            return codecs.encode_for_all(value, [language])
        case _:
            msg = f"Label must be str, bytes or CodedText, not {type(value).__name__}"
            raise TypeError(msg)


def _check_length(data: bytes, field: str, language: Language) -> bytes:
    if len(data) > MAX_LABEL_FIELD_BYTES:
        msg = (
            f"{LABEL_DESCRIPTIONS[field]} for {language.english_name} is too large to "
            f"write into a STR# resource. The maximum size is {MAX_LABEL_FIELD_BYTES} "
            f"bytes, but it is {len(data)} bytes."
        )
        raise LabelEncodingError(
            msg,
            field=LABEL_JSON_KEYS[field],
            language=language,
            data=data,
            code=ErrorCode.LABEL_TOO_LONG,
        )
    return data


def _language_name(language: Language, codecs: CodecCache) -> bytes:
    """Encode the implicit language name: predefined label first, then localized name."""
    predefined = language.labels.language_name if language.labels is not None else None
    fallback: str | bytes = predefined if predefined is not None else language.localized_name
    try:
        return _encode_value(fallback, language, codecs)
    except (DMGLicenseError, ValueError) as e:
        raise LanguageNameEncodingError(language) from e


def pack_labels(
    labels: LabelSet[LabelValue], language: Language, codecs: CodecCache
) -> bytes:
    """Encode a label set for ``language`` as an STR# resource.

    Args:
        labels: Labels; ``language_name`` None means "use the language's own name"
        language: Language the labels are written for
        codecs: Codec cache used for negotiation

    Returns:
        Packed STR# resource data

    Raises:
        LabelEncodingError: If exactly one field fails
        MultiError: If several fields fail
    """
    errors = ErrorBuffer()
    fields: list[bytes] = []

    for field, value in labels.items():
        try:
            if value is None:
                data = _language_name(language, codecs)
            else:
                try:
                    data = _encode_value(value, language, codecs)
                except (DMGLicenseError, ValueError) as e:
                    msg = (
                        f"Cannot encode {LABEL_DESCRIPTIONS[field].lower()} "
                        f"for {language.english_name}"
                    )
                    raise LabelEncodingError(
                        msg, field=LABEL_JSON_KEYS[field], language=language
                    ) from e
            fields.append(_check_length(data, field, language))
        except LabelEncodingError as e:
            errors.add(e)

    errors.check()
    return _MAGIC.pack(STR_LIST_MAGIC) + b"".join(bytes([len(f)]) + f for f in fields)


def _split_strings(data: bytes, position: ResourcePosition) -> Iterator[bytes]:
    if len(data) < _MAGIC.size or _MAGIC.unpack_from(data)[0] != STR_LIST_MAGIC:
        msg = "Resource data does not start with the proper STR# signature, 00 06."
        raise InvalidResourceError(msg, position=position.at(0))

    offset = _MAGIC.size
    while offset < len(data):
        length = data[offset]
        remaining = len(data) - offset - 1
        if length > remaining:
            msg = (
                f"String length marker indicates that there should be {length} more "
                f"bytes, but only {remaining} bytes remain."
            )
            raise InvalidResourceError(msg, position=position.at(offset))
        yield data[offset + 1 : offset + 1 + length]
        offset += 1 + length


def unpack_labels(data: bytes, position: ResourcePosition | None = None) -> LabelSet[bytes]:
    """Parse an STR# label resource.

    Args:
        data: Resource data
        position: Where the data came from, for error messages

    Raises:
        InvalidResourceError: On a bad signature, a truncated string, or a
            string count other than 6
    """
    position = position if position is not None else ResourcePosition(file="<memory>")
    strings = list(_split_strings(data, position))
    if len(strings) != LABEL_FIELD_COUNT:
        msg = (
            f"There should be {LABEL_FIELD_COUNT} strings in this resource, "
            f"but instead there are {len(strings)}."
        )
        raise InvalidResourceError(msg, position=position)
    return LabelSet.from_sequence(strings)


def decode_labels(
    raw: LabelSet[bytes], language: Language, charsets: Sequence[str] | None = None
) -> LabelSet[str]:
    """Decode unpacked labels to text, trying each of the language's charsets.

    Raises:
        ResourceDecodingError: If no charset decodes every field
    """
    tried = list(charsets if charsets is not None else language.charsets)
    for charset in tried:
        try:
            codec = lookup_codec(charset)
            return raw.map(lambda value, _field: codec.decode(value, "strict")[0])
        except (LookupError, UnicodeError):
            continue
    raise ResourceDecodingError(language, tried)
