"""Language entries of the classic Mac OS license catalog.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from dmglicense.labels.labelset import LabelSet

__all__ = [
    "Language",
    "LanguageSpecifier",
    "LanguageSpecifiers",
]

LanguageSpecifier: TypeAlias = int | str
"""Numeric classic Mac OS language ID (e.g., 0) or language tag (e.g., 'en-US')."""

LanguageSpecifiers: TypeAlias = LanguageSpecifier | Sequence[LanguageSpecifier]
"""One specifier or a list of them."""


@dataclass(frozen=True, slots=True)
class Language:
    """A language the classic license dialog knows about.

    Immutable, thread-safe, hashable.

    Attributes:
        id: Numeric language ID written into the LPic resource
        tags: Language tags resolving to this language (lookup is case-insensitive)
        charsets: Acceptable legacy charsets, preferred first
        english_name: Display name in English
        localized_name: Display name in the language itself
        double_byte: Whether the language's charset is a double-byte charset
        labels: Predefined label set, if the catalog ships one
    """

    id: int
    tags: tuple[str, ...]
    charsets: tuple[str, ...]
    english_name: str
    localized_name: str
    double_byte: bool = False
    labels: LabelSet[str | bytes] | None = None

    def __post_init__(self) -> None:
        """Validate catalog entry invariants.

        Raises:
            ValueError: If the ID is negative or no charset is given
        """
        if self.id < 0:
            msg = f"Language ID must be >= 0, got {self.id}"
            raise ValueError(msg)
        if not self.charsets:
            msg = f"Language {self.id} must have at least one charset"
            raise ValueError(msg)

    @property
    def charset(self) -> str:
        """Preferred charset."""
        return self.charsets[0]

    def __str__(self) -> str:
        tags = f"; {', '.join(self.tags)}" if self.tags else ""
        return f"{self.english_name} (language {self.id}{tags})"
