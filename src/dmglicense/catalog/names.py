"""Language display names from CLDR via Babel.

Catalog rows that do not carry English and self-localized names get them
here, looked up once per tag and cached.

Python 3.13+.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

__all__ = [
    "DisplayNames",
    "clear_name_cache",
    "display_names",
]


@dataclass(frozen=True, slots=True)
class DisplayNames:
    """English and self-localized display names of a language tag.

    Attributes:
        english: Name in English (e.g., 'German (Austria)')
        localized: Name in the language itself (e.g., 'Deutsch (Österreich)')
    """

    english: str
    localized: str


@functools.lru_cache(maxsize=256)
def display_names(tag: str) -> DisplayNames:
    """Look up display names for a BCP-47 language tag.

    Thread-safe via lru_cache internal locking.

    Args:
        tag: Language tag, hyphen or underscore separated (e.g., 'de-AT')

    Returns:
        DisplayNames for the tag

    Raises:
        ValueError: If Babel does not know the tag

    Example:
        >>> display_names("fr-CA")
        DisplayNames(english='French (Canada)', localized='français (Canada)')
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale, UnknownLocaleError  # noqa: PLC0415

    try:
        locale = Locale.parse(tag.replace("-", "_"))
    except (UnknownLocaleError, ValueError) as e:
        msg = f"No display names known for language tag '{tag}'"
        raise ValueError(msg) from e

    english = locale.get_display_name("en")
    localized = locale.get_display_name(locale)
    if not english or not localized:
        msg = f"No display names known for language tag '{tag}'"
        raise ValueError(msg)
    return DisplayNames(english=english, localized=localized)


def clear_name_cache() -> None:
    """Clear cached display name lookups."""
    display_names.cache_clear()
