"""Charset negotiation: encode text so every target language can read it.

A language lists the legacy charsets it accepts, preferred first. Text meant
for several languages at once (a shared license body, a shared label set) is
encoded into a charset that appears in every target's list; candidates are
tried in the first target's order, and the first one that represents the
text without loss wins. Encoders are always strict: a character the charset
cannot represent is a failure, never a substitution.

Charset names in catalog data are IANA/Mac names (``macintosh``,
``x-mac-cyrillic``); they are mapped to Python codec names here. Mac
charsets without a Python codec are reported as unsupported per candidate.

Thread Safety:
    CodecCache is safe to share between threads and tasks. Lookups are
    memoized under an RLock; racing fills compute identical values.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import codecs
import logging
from collections import OrderedDict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from threading import RLock

from dmglicense.catalog.language import Language
from dmglicense.constants import DEFAULT_CODEC_CACHE_SIZE, DEFAULT_SOURCE_CHARSET, NATIVE_CHARSET
from dmglicense.diagnostics import ErrorCode, MultiError, NoSuitableCharsetError
from dmglicense.diagnostics.errors import describe_languages

__all__ = [
    "CodecCache",
    "Transcoder",
    "common_charsets",
    "lookup_codec",
    "normalize_charset",
]

logger = logging.getLogger(__name__)

# IANA / Mac charset names -> Python codec names.
_CODEC_ALIASES: Mapping[str, str] = {
    "macintosh": "mac_roman",
    "x-mac-roman": "mac_roman",
    "x-mac-cyrillic": "mac_cyrillic",
    "x-mac-greek": "mac_greek",
    "x-mac-icelandic": "mac_iceland",
    "x-mac-turkish": "mac_turkish",
    "x-mac-croatian": "mac_croatian",
    "x-mac-romanian": "mac_romanian",
    "x-mac-centraleurroman": "mac_latin2",
    "x-mac-ce": "mac_latin2",
    "x-mac-arabic": "mac_arabic",
    "x-mac-farsi": "mac_farsi",
    "x-mac-japanese": "shift_jis",
    "x-mac-korean": "euc_kr",
    "x-mac-chinesesimp": "gb2312",
    "x-mac-chinesetrad": "big5",
}

# Mac charsets with no codec in the standard library.
_UNSUPPORTED_CHARSETS: frozenset[str] = frozenset(
    {"x-mac-hebrew", "x-mac-thai", "x-mac-ukrainian"}
)


def normalize_charset(charset: str) -> str:
    """Canonical cache/comparison key for a charset name."""
    return charset.strip().lower()


def lookup_codec(charset: str) -> codecs.CodecInfo:
    """Find the Python codec for a charset name.

    Raises:
        LookupError: If the charset has no usable codec
    """
    key = normalize_charset(charset)
    if key == NATIVE_CHARSET:
        msg = f"'{NATIVE_CHARSET}' is not a codec; native data must bypass negotiation"
        raise LookupError(msg)
    if key in _UNSUPPORTED_CHARSETS:
        msg = f"unsupported charset: {charset}"
        raise LookupError(msg)
    return codecs.lookup(_CODEC_ALIASES.get(key, key))


def common_charsets(languages: Sequence[Language]) -> list[str]:
    """Charsets accepted by every language, in the first language's order.

    Comparison is case-insensitive. Returns an empty list when the
    languages share nothing (or when ``languages`` is empty).
    """
    if not languages:
        return []
    first, *rest = languages
    others = [{normalize_charset(c) for c in language.charsets} for language in rest]
    result: list[str] = []
    seen: set[str] = set()
    for charset in first.charsets:
        key = normalize_charset(charset)
        if key in seen:
            continue
        seen.add(key)
        if all(key in accepted for accepted in others):
            result.append(charset)
    return result


@dataclass(frozen=True, slots=True)
class Transcoder:
    """Strict conversion from a source charset (or text) to a target charset.

    Attributes:
        source: Codec for byte input, or None when only text is accepted
        target: Codec the output is encoded with
    """

    source: codecs.CodecInfo | None
    target: codecs.CodecInfo

    def transcode(self, data: str | bytes) -> bytes:
        """Convert ``data`` to target bytes.

        Raises:
            UnicodeError: If ``data`` cannot be decoded or encoded losslessly
            TypeError: If bytes are given to a text-only transcoder
        """
        if isinstance(data, bytes):
            if self.source is None:
                msg = "Byte input needs a source charset"
                raise TypeError(msg)
            data, _ = self.source.decode(data, "strict")
        encoded, _ = self.target.encode(data, "strict")
        return encoded


class CodecCache:
    """Two-level memo of transcoders: source charset -> target charset -> result.

    Failed lookups are remembered too, so an unsupported charset is only
    probed once. Each source level is an LRU bounded by ``max_per_source``.

    Example:
        >>> cache = CodecCache()
        >>> cache.get(None, "macintosh").transcode("Café")
        b'Caf\\x8e'
    """

    __slots__ = ("_cache", "_lock", "_max_per_source")

    def __init__(self, max_per_source: int = DEFAULT_CODEC_CACHE_SIZE) -> None:
        if max_per_source <= 0:
            msg = f"max_per_source must be positive, got {max_per_source}"
            raise ValueError(msg)
        self._max_per_source = max_per_source
        self._cache: dict[str, OrderedDict[str, Transcoder | str]] = {}
        self._lock = RLock()

    def get(self, source_charset: str | None, target_charset: str) -> Transcoder:
        """Return the transcoder from ``source_charset`` (None: text) to ``target_charset``.

        Raises:
            LookupError: If either charset has no usable codec
        """
        source_key = "" if source_charset is None else normalize_charset(source_charset)
        target_key = normalize_charset(target_charset)

        with self._lock:
            targets = self._cache.get(source_key)
            if targets is not None and target_key in targets:
                targets.move_to_end(target_key)
                cached = targets[target_key]
                if isinstance(cached, str):
                    raise LookupError(cached)
                return cached

        entry: Transcoder | str
        try:
            source = None if source_charset is None else lookup_codec(source_charset)
            entry = Transcoder(source, lookup_codec(target_charset))
        except LookupError as e:
            entry = str(e)

        with self._lock:
            targets = self._cache.setdefault(source_key, OrderedDict())
            targets[target_key] = entry
            targets.move_to_end(target_key)
            while len(targets) > self._max_per_source:
                targets.popitem(last=False)

        logger.debug(
            "Codec cache fill %s -> %s: %s",
            source_charset or "<text>",
            target_charset,
            "unsupported" if isinstance(entry, str) else entry.target.name,
        )
        if isinstance(entry, str):
            raise LookupError(entry)
        return entry

    def encode_for_all(
        self,
        text: str | bytes,
        targets: Sequence[Language],
        source_charset: str | None = None,
    ) -> bytes:
        """Encode ``text`` into a charset every language in ``targets`` accepts.

        Args:
            text: Text, or bytes in ``source_charset``
            targets: Languages that must all be able to read the result
            source_charset: Charset of ``text`` when it is bytes (default UTF-8)

        Returns:
            Bytes in the first candidate charset that represents ``text`` exactly

        Raises:
            ValueError: If ``targets`` is empty
            NoSuitableCharsetError: If the targets share no charset, or no
                shared charset can represent the text. In the latter case the
                per-candidate failures are the ``__cause__``.
        """
        if not targets:
            msg = "encode_for_all needs at least one target language"
            raise ValueError(msg)
        if isinstance(text, bytes) and source_charset is None:
            source_charset = DEFAULT_SOURCE_CHARSET
        elif isinstance(text, str):
            source_charset = None

        candidates = common_charsets(targets)
        if not candidates:
            msg = (
                "There is no character set that can be used for all of these "
                f"languages: {describe_languages(targets)}."
            )
            raise NoSuitableCharsetError(
                msg, languages=targets, code=ErrorCode.NO_COMMON_CHARSET
            )

        failures: list[Exception] = []
        for charset in candidates:
            try:
                return self.get(source_charset, charset).transcode(text)
            except (LookupError, UnicodeError) as e:
                failures.append(e)

        cause = failures[0] if len(failures) == 1 else MultiError(failures)
        msg = (
            f"Cannot encode text for {describe_languages(targets)} "
            f"in any of these character sets: {', '.join(candidates)}."
        )
        raise NoSuitableCharsetError(msg, languages=targets, charsets=candidates) from cause

    def clear(self) -> None:
        """Forget every cached transcoder."""
        with self._lock:
            self._cache.clear()

    def cache_info(self) -> dict[str, int]:
        """Number of source charsets and total cached pairs."""
        with self._lock:
            return {
                "sources": len(self._cache),
                "entries": sum(len(targets) for targets in self._cache.values()),
                "max_per_source": self._max_per_source,
            }
