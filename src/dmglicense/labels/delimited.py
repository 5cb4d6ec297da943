"""Splitting of delimited label files.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from dmglicense.enums import Delimiter

__all__ = ["delimiter_bytes", "split_delimited"]

_NAMED_DELIMITERS: Mapping[Delimiter, tuple[bytes, ...]] = {
    Delimiter.TAB: (b"\t",),
    Delimiter.LF: (b"\n",),
    Delimiter.CR: (b"\r",),
    Delimiter.CRLF: (b"\r\n",),
    Delimiter.NUL: (b"\x00",),
    # CRLF before CR so a CRLF line ending is consumed whole.
    Delimiter.EOL: (b"\r\n", b"\r", b"\n"),
}


def delimiter_bytes(delimiters: Sequence[Delimiter | str | bytes]) -> list[bytes]:
    """Expand named delimiters into byte needles, keeping their order.

    Raises:
        ValueError: If a name is unknown or a literal delimiter is empty
    """
    needles: list[bytes] = []
    for delimiter in delimiters:
        if isinstance(delimiter, bytes):
            if not delimiter:
                msg = "A delimiter must not be empty"
                raise ValueError(msg)
            needles.append(delimiter)
        else:
            needles.extend(_NAMED_DELIMITERS[Delimiter(delimiter)])
    return needles


def split_delimited(data: bytes, delimiters: Sequence[Delimiter | str | bytes]) -> list[bytes]:
    """Split ``data`` on any of ``delimiters``.

    At each position the earliest delimiter match wins; when two match at
    the same offset, the one listed first wins. A trailing delimiter does not
    produce a trailing empty piece.

    Example:
        >>> split_delimited(b"a\\tb\\r\\nc\\n", ["tab", "eol"])
        [b'a', b'b', b'c']
    """
    needles = delimiter_bytes(delimiters)
    pieces: list[bytes] = []
    pos = 0

    while pos < len(data):
        best: tuple[int, bytes] | None = None
        for needle in needles:
            index = data.find(needle, pos)
            if index >= 0 and (best is None or index < best[0]):
                best = (index, needle)
        if best is None:
            pieces.append(data[pos:])
            break
        index, needle = best
        pieces.append(data[pos:index])
        pos = index + len(needle)

    return pieces
