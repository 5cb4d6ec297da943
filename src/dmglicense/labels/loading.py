"""Async loading of label entries.

Loading is split in two so that one file read can serve many languages:
read_label_source() performs the I/O for an entry once, and
pack_label_source() turns the result into an STR# resource for each
language. load_labels() chains both for a single language and falls back
to the language's predefined labels when no entry applies.

File reads run in worker threads via asyncio.to_thread; everything else
runs on the event loop.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TypeAlias

from dmglicense.catalog.language import Language
from dmglicense.coded_text import CodedText
from dmglicense.constants import DEFAULT_SOURCE_CHARSET
from dmglicense.context import AssemblyContext
from dmglicense.diagnostics import ErrorBuffer, LabelSourceError
from dmglicense.labels.codec import LabelValue, pack_labels
from dmglicense.labels.delimited import split_delimited
from dmglicense.labels.labelset import LABEL_DESCRIPTIONS, LABEL_FIELDS, LABEL_JSON_KEYS, LabelSet
from dmglicense.specification import (
    DelimitedLabels,
    InlineLabels,
    JsonLabels,
    LabelEntry,
    OnePerFileLabels,
    RawLabels,
)

__all__ = [
    "LabelSource",
    "load_labels",
    "pack_label_source",
    "read_label_source",
]

logger = logging.getLogger(__name__)

LabelSource: TypeAlias = LabelSet[LabelValue] | bytes
"""Labels ready to pack, or an already packed STR# resource."""


async def _read_file(path: Path, description: str) -> bytes:
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        msg = f"Cannot read {description}: {e.strerror or e}"
        raise LabelSourceError(msg, path=str(path)) from e


async def _read_one_per_file(entry: OnePerFileLabels, context: AssemblyContext) -> LabelSource:
    charset = entry.charset or DEFAULT_SOURCE_CHARSET
    fields = [(field, path) for field, path in entry.files.items() if path is not None]
    errors = ErrorBuffer()
    contents = await asyncio.gather(
        *(
            errors.catching_async(
                _read_file(context.resolve_path(path), LABEL_DESCRIPTIONS[field].lower())
            )
            for field, path in fields
        )
    )
    errors.check()

    values: dict[str, LabelValue | None] = dict.fromkeys(LABEL_FIELDS)
    for (field, _), data in zip(fields, contents, strict=True):
        assert data is not None
        values[field] = CodedText(data, charset, entry.encoding)
    return LabelSet(**values)  # type: ignore[arg-type]


async def _read_delimited(entry: DelimitedLabels, context: AssemblyContext) -> LabelSource:
    path = context.resolve_path(entry.file)
    pieces = split_delimited(await _read_file(path, "delimited labels file"), entry.delimiters)
    if len(pieces) not in (5, 6):
        msg = (
            "Delimited labels file should have contained 5 or 6 parts, "
            f"but instead contains {len(pieces)}."
        )
        raise LabelSourceError(msg, path=str(path))
    charset = entry.charset or DEFAULT_SOURCE_CHARSET
    return LabelSet.from_sequence([CodedText(p, charset, entry.encoding) for p in pieces])


def _json_type_name(value: object) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case list():
            return "array"
        case dict():
            return "object"
        case _:
            return type(value).__name__


async def _read_json(entry: JsonLabels, context: AssemblyContext) -> LabelSource:
    path = context.resolve_path(entry.file)
    raw = await _read_file(path, "JSON labels file")
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        msg = f"Cannot parse JSON labels file: {e}"
        raise LabelSourceError(msg, path=str(path)) from e
    if not isinstance(data, dict):
        msg = "Root value of JSON file is not an object."
        raise LabelSourceError(msg, path=str(path))

    errors = ErrorBuffer()
    values: dict[str, LabelValue | None] = {}
    for field, key in LABEL_JSON_KEYS.items():
        value = data.get(key)
        if key not in data and field == "language_name":
            values[field] = None
        elif isinstance(value, str):
            values[field] = CodedText(value, entry.charset, entry.encoding)
        else:
            shown = "undefined" if key not in data else _json_type_name(value)
            msg = (
                f"Root object of JSON file's ‘{key}’ property has type {shown}, "
                "but should be string."
            )
            errors.add(LabelSourceError(msg, path=str(path)))
    errors.check()
    return LabelSet(**values)  # type: ignore[arg-type]


async def read_label_source(entry: LabelEntry, context: AssemblyContext) -> LabelSource:
    """Perform the I/O for a label entry.

    Raises:
        LabelSourceError: If a file cannot be read or has the wrong shape
        MultiError: If several files of one entry fail
    """
    match entry:
        case InlineLabels(labels=labels, charset=charset, encoding=encoding):
            return labels.map(lambda value, _field: CodedText(value, charset, encoding))
        case OnePerFileLabels():
            return await _read_one_per_file(entry, context)
        case DelimitedLabels():
            return await _read_delimited(entry, context)
        case RawLabels(file=file):
            return await _read_file(context.resolve_path(file), "raw STR# labels file")
        case JsonLabels():
            return await _read_json(entry, context)
        case _:
            msg = f"Unknown label entry type {type(entry).__name__}"
            raise TypeError(msg)


def pack_label_source(source: LabelSource, language: Language, context: AssemblyContext) -> bytes:
    """Pack a loaded label source for ``language``; raw resources pass through."""
    if isinstance(source, bytes):
        return source
    return pack_labels(source, language, context.codecs)


async def load_labels(
    entry: LabelEntry | None, language: Language, context: AssemblyContext
) -> bytes:
    """STR# resource for ``language``: from ``entry``, or predefined when None.

    Raises:
        NoDefaultLabelsError: If ``entry`` is None and there are no predefined labels
        LabelSourceError: If the entry's files are unusable
        LabelEncodingError: If a label cannot be encoded for ``language``
    """
    if entry is None:
        return context.default_labels_of(language)
    data = pack_label_source(await read_label_source(entry, context), language, context)
    logger.debug("Loaded %s labels for %s (%d bytes)", entry.kind, language, len(data))
    return data
