"""Text with an optional source charset and transfer encoding.

Used wherever a specification can carry either ordinary text, which is
negotiated into a legacy charset, or data that is already bytes (base64
inline, or read from a file) with a known source charset.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from dmglicense.catalog.language import Language
from dmglicense.charsets import CodecCache
from dmglicense.constants import DEFAULT_SOURCE_CHARSET, NATIVE_CHARSET

__all__ = ["CodedText"]


@dataclass(frozen=True, slots=True)
class CodedText:
    """A piece of text as written in a specification.

    Attributes:
        data: Text, or raw bytes read from a file
        charset: Charset of the decoded bytes. ``"native"`` means the bytes
            are already in the target language's legacy charset and are
            written as-is. Ignored for plain text.
        encoding: Transfer encoding of ``data`` when it is text (``"base64"``)
    """

    data: str | bytes
    charset: str | None = None
    encoding: Literal["base64"] | None = None

    def raw(self) -> str | bytes:
        """Undo the transfer encoding.

        Returns:
            ``str`` for plain text, ``bytes`` otherwise (base64 input, inline
            or read from a file, always decodes to bytes)

        Raises:
            ValueError: If base64 data is malformed
        """
        if self.encoding == "base64":
            try:
                return base64.b64decode(self.data)
            except binascii.Error as e:
                msg = f"Invalid base64 data: {e}"
                raise ValueError(msg) from e
        return self.data

    @property
    def is_native(self) -> bool:
        """Whether the data bypasses charset negotiation."""
        return self.charset is not None and self.charset.lower() == NATIVE_CHARSET

    def encode(self, languages: Sequence[Language], codecs: CodecCache) -> bytes:
        """Produce bytes readable by every language in ``languages``.

        Raises:
            NoSuitableCharsetError: If negotiation fails
            ValueError: If base64 data is malformed
        """
        raw = self.raw()
        if isinstance(raw, str):
            return codecs.encode_for_all(raw, languages)
        if self.is_native:
            return raw
        return codecs.encode_for_all(raw, languages, self.charset or DEFAULT_SOURCE_CHARSET)
