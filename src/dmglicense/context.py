"""Per-invocation assembly context and its configuration.

AssemblyOptions is the immutable configuration a caller builds.
AssemblyContext holds the state shared by every task of one assembly:
the language catalog, the codec cache, the cache of predefined labels
packed per language, and the non-fatal error channel.

Non-fatal conditions come in two strengths:
    - warning(): delivered to the sink if there is one, otherwise dropped
    - non_fatal_error(): delivered to the sink if there is one, otherwise
      it becomes a fatal error of the assembly

An exception raised by the sink itself is collected like any other error.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from threading import RLock
from typing import TypeAlias

from dmglicense.catalog import Language, LanguageCatalog, LanguageSpecifiers, load_default_catalog
from dmglicense.charsets import CodecCache
from dmglicense.constants import DEFAULT_CODEC_CACHE_SIZE
from dmglicense.diagnostics import DMGLicenseError, ErrorBuffer, NoDefaultLabelsError
from dmglicense.labels.codec import pack_labels

__all__ = ["AssemblyContext", "AssemblyOptions", "NonFatalErrorSink"]

logger = logging.getLogger(__name__)

NonFatalErrorSink: TypeAlias = Callable[[DMGLicenseError], None]
"""Callback receiving warnings and non-fatal errors one at a time."""


@dataclass(frozen=True, slots=True)
class AssemblyOptions:
    """Immutable configuration for one assembly.

    All fields have defaults; ``AssemblyOptions()`` uses the bundled
    catalog, resolves paths against the working directory, and treats
    every non-fatal error as fatal.

    Attributes:
        base_dir: Directory relative file paths in the specification resolve against
        resolve_path: Overrides path resolution entirely when given
        on_non_fatal_error: Sink for warnings and non-fatal errors
        catalog: Language catalog (default: the bundled catalog)
        codec_cache_size: Transcoders remembered per source charset

    Example:
        >>> warnings = []
        >>> options = AssemblyOptions(base_dir="licenses", on_non_fatal_error=warnings.append)
    """

    base_dir: str | Path | None = None
    resolve_path: Callable[[str], str | Path] | None = None
    on_non_fatal_error: NonFatalErrorSink | None = None
    catalog: LanguageCatalog | None = None
    codec_cache_size: int = DEFAULT_CODEC_CACHE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If codec_cache_size is not positive
        """
        if self.codec_cache_size <= 0:
            msg = "codec_cache_size must be positive"
            raise ValueError(msg)


class AssemblyContext:
    """Shared state of one assembly.

    Every cache here is a pure memo (same key, same value), so concurrent
    fills are harmless.
    """

    __slots__ = ("_default_labels", "_lock", "catalog", "codecs", "options")

    def __init__(
        self,
        options: AssemblyOptions | None = None,
        *,
        codecs: CodecCache | None = None,
    ) -> None:
        self.options = options if options is not None else AssemblyOptions()
        self.catalog = (
            self.options.catalog if self.options.catalog is not None else load_default_catalog()
        )
        self.codecs = codecs if codecs is not None else CodecCache(self.options.codec_cache_size)
        self._default_labels: dict[int, bytes | DMGLicenseError] = {}
        self._lock = RLock()

    @classmethod
    def from_options(cls, options: AssemblyOptions | AssemblyContext | None) -> AssemblyContext:
        """Return ``options`` if it is already a context, else a new context for it."""
        if isinstance(options, AssemblyContext):
            return options
        return cls(options)

    @property
    def can_warn(self) -> bool:
        """Whether a non-fatal error sink is configured."""
        return self.options.on_non_fatal_error is not None

    def resolve_path(self, path: str) -> Path:
        """Resolve a specification path to a filesystem path."""
        if self.options.resolve_path is not None:
            return Path(self.options.resolve_path(path))
        if self.options.base_dir is not None:
            return Path(self.options.base_dir) / path
        return Path(path)

    def resolve_languages(
        self, specifiers: LanguageSpecifiers, errors: ErrorBuffer | None = None
    ) -> list[Language]:
        """Resolve specifiers through the catalog.

        With a sink configured, unknown specifiers are reported and skipped.

        Raises:
            NoSuchLanguageError: If nothing resolves, or something does not
                resolve and there is no sink
        """
        if not self.can_warn:
            return self.catalog.resolve(specifiers)
        return self.catalog.resolve(
            specifiers, on_error=lambda error: self.non_fatal_error(error, errors)
        )

    def default_labels_of(self, language: Language) -> bytes:
        """The language's predefined labels as an STR# resource.

        Packed on first use; the result (or the failure) is remembered.

        Raises:
            NoDefaultLabelsError: If the language has no predefined labels
            LabelEncodingError: If the predefined labels cannot be packed
        """
        with self._lock:
            cached = self._default_labels.get(language.id)
        if cached is None:
            try:
                if language.labels is None:
                    raise NoDefaultLabelsError(language)
                cached = pack_labels(language.labels, language, self.codecs)
            except DMGLicenseError as e:
                cached = e
            with self._lock:
                cached = self._default_labels.setdefault(language.id, cached)
            logger.debug(
                "Default labels for %s: %s",
                language,
                "failed" if isinstance(cached, DMGLicenseError) else f"{len(cached)} bytes",
            )
        if isinstance(cached, DMGLicenseError):
            raise cached
        return cached

    def warning(self, error: DMGLicenseError, errors: ErrorBuffer | None = None) -> None:
        """Deliver a warning to the sink; without a sink it is dropped."""
        sink = self.options.on_non_fatal_error
        if sink is None:
            logger.debug("Dropped warning (no sink): %s", error)
            return
        self._deliver(sink, error, errors)

    def non_fatal_error(self, error: DMGLicenseError, errors: ErrorBuffer | None = None) -> None:
        """Deliver a non-fatal error to the sink; without a sink it is fatal.

        Without a sink, the error is added to ``errors`` when given,
        otherwise raised immediately.
        """
        sink = self.options.on_non_fatal_error
        if sink is None:
            if errors is None:
                raise error
            errors.add(error)
            return
        self._deliver(sink, error, errors)

    @staticmethod
    def _deliver(
        sink: NonFatalErrorSink, error: DMGLicenseError, errors: ErrorBuffer | None
    ) -> None:
        if errors is None:
            sink(error)
            return
        with errors.catching():
            sink(error)
