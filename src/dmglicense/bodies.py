"""License body preparation.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

from dmglicense.catalog.language import Language
from dmglicense.coded_text import CodedText
from dmglicense.context import AssemblyContext
from dmglicense.diagnostics import BodyPreparationError, DMGLicenseError
from dmglicense.diagnostics.errors import describe_languages
from dmglicense.enums import BodyType, ContentType
from dmglicense.specification import BodyEntry

__all__ = ["PreparedBody", "infer_body_type", "prepare_body"]


@dataclass(frozen=True, slots=True)
class PreparedBody:
    """Encoded body bytes plus the resource type they are stored as."""

    data: bytes
    type: BodyType


def infer_body_type(content_type: ContentType | None, file: str | None) -> BodyType:
    """Explicit content type wins; otherwise a ``.rtf`` file is RTF; otherwise TEXT."""
    if content_type is not None:
        return ContentType(content_type).body_type
    if file is not None and file.lower().endswith(".rtf"):
        return BodyType.RTF
    return BodyType.TEXT


async def prepare_body(
    entry: BodyEntry, languages: Sequence[Language], context: AssemblyContext
) -> PreparedBody:
    """Read and encode a body so every language in ``languages`` can display it.

    Raises:
        BodyPreparationError: Wrapping the read or encoding failure
    """
    body_type = infer_body_type(entry.content_type, entry.file)
    names = describe_languages(languages)

    if entry.file is not None:
        path = context.resolve_path(entry.file)
        try:
            data: str | bytes = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            msg = f"Cannot read {names} license text from “{path}”"
            raise BodyPreparationError(msg, languages=languages, path=str(path)) from e
        text = CodedText(data, entry.charset, entry.encoding)
    else:
        assert entry.text is not None
        path = None
        text = CodedText(entry.text, entry.charset, entry.encoding)

    try:
        encoded = text.encode(languages, context.codecs)
    except (DMGLicenseError, ValueError) as e:
        source = f" from “{path}”" if path is not None else ""
        msg = f"Cannot encode {names} license text{source}"
        raise BodyPreparationError(
            msg, languages=languages, path=None if path is None else str(path)
        ) from e

    return PreparedBody(encoded, body_type)
