"""Language catalog: lookup by ID or tag, and specifier resolution.

The catalog is built once from static data and never mutated afterwards.
The bundled catalog is loaded lazily and shared for the process lifetime;
tests and callers with their own data build a LanguageCatalog directly.

Data format (``languages.json``)::

    {
      "labels": {
        "en": {"languageName": "English", "agree": "Agree", ...},
        "xx": {"encoding": "native;base64", "agree": "QWdyZWU=", ...}
      },
      "languages": {
        "0": {
          "tags": ["en-US", "en"],
          "charsets": ["macintosh"],
          "englishName": "English",
          "localizedName": "English",
          "labels": "en",
          "doubleByteCharset": false
        }
      }
    }

``englishName``/``localizedName`` may be omitted; they are then looked up
from CLDR for the first tag.

Python 3.13+.
"""

from __future__ import annotations

import base64
import functools
import json
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from importlib.resources import files
from typing import Any

from dmglicense.catalog.language import Language, LanguageSpecifier, LanguageSpecifiers
from dmglicense.catalog.names import display_names
from dmglicense.diagnostics import NoSuchLanguageError
from dmglicense.labels.labelset import LABEL_JSON_KEYS, LabelSet

__all__ = [
    "LanguageCatalog",
    "load_default_catalog",
]

logger = logging.getLogger(__name__)

_NATIVE_BASE64 = "native;base64"


class LanguageCatalog:
    """Read-only table of known languages.

    Example:
        >>> catalog = load_default_catalog()
        >>> catalog.by_tag("EN-us").id
        0
        >>> [lang.id for lang in catalog.resolve(["fr", 3])]
        [1, 3]
    """

    __slots__ = ("_by_id", "_by_tag")

    def __init__(self, languages: Iterable[Language]) -> None:
        """Index ``languages`` by ID and lowercase tag.

        Raises:
            ValueError: If two languages share an ID or a tag
        """
        by_id: dict[int, Language] = {}
        by_tag: dict[str, Language] = {}
        for language in languages:
            if language.id in by_id:
                msg = f"Duplicate language ID {language.id}"
                raise ValueError(msg)
            by_id[language.id] = language
            for tag in language.tags:
                key = tag.lower()
                other = by_tag.get(key)
                if other is not None and other is not language:
                    msg = (
                        f"The language tag '{tag}' is shared by languages "
                        f"{other.id} and {language.id}"
                    )
                    raise ValueError(msg)
                by_tag[key] = language
        self._by_id = by_id
        self._by_tag = by_tag

    def by_id(self, language_id: int) -> Language | None:
        """Return the language with this numeric ID, if any."""
        return self._by_id.get(language_id)

    def by_tag(self, tag: str) -> Language | None:
        """Return the language with this tag (case-insensitive), if any."""
        return self._by_tag.get(tag.lower())

    def lookup(self, specifier: LanguageSpecifier) -> Language | None:
        """Return the language for a single ID or tag, if any."""
        if isinstance(specifier, bool):
            return None
        if isinstance(specifier, int):
            return self.by_id(specifier)
        return self.by_tag(specifier)

    def resolve(
        self,
        specifiers: LanguageSpecifiers,
        on_error: Callable[[NoSuchLanguageError], None] | None = None,
    ) -> list[Language]:
        """Resolve one specifier or a list of them to languages.

        Duplicates (including different tags for the same language) are
        returned once, in first-seen order.

        Args:
            specifiers: ID, tag, or list of IDs and tags
            on_error: Optional sink. When given, each unresolved specifier in
                a list is reported to it and skipped. Without a sink, any
                unresolved specifier fails the whole resolution.

        Returns:
            At least one Language

        Raises:
            NoSuchLanguageError: If nothing resolves, or (without a sink)
                if anything does not resolve
        """
        items = [specifiers] if isinstance(specifiers, (int, str)) else list(specifiers)
        resolved: list[Language] = []
        unresolved: list[LanguageSpecifier] = []

        for specifier in items:
            language = self.lookup(specifier)
            if language is None:
                unresolved.append(specifier)
            elif language not in resolved:
                resolved.append(language)

        if not resolved:
            raise NoSuchLanguageError(specifiers if isinstance(specifiers, (int, str)) else items)
        if unresolved:
            if on_error is None:
                raise NoSuchLanguageError(unresolved if len(unresolved) > 1 else unresolved[0])
            for specifier in unresolved:
                on_error(NoSuchLanguageError(specifier))
        return resolved

    def __iter__(self) -> Iterator[Language]:
        return iter(sorted(self._by_id.values(), key=lambda language: language.id))

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, language_id: object) -> bool:
        return language_id in self._by_id

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LanguageCatalog:
        """Build a catalog from the JSON-shaped data described in the module docstring.

        Raises:
            ValueError: If a row is malformed or references an unknown label set
        """
        label_sets = {
            name: _label_set_from_mapping(name, raw)
            for name, raw in data.get("labels", {}).items()
        }

        languages: list[Language] = []
        for id_str, row in data.get("languages", {}).items():
            tags = tuple(row.get("tags", ()))
            english_name = row.get("englishName")
            localized_name = row.get("localizedName")
            if english_name is None or localized_name is None:
                if not tags:
                    msg = f"Language {id_str} has no tags and no display names"
                    raise ValueError(msg)
                names = display_names(tags[0])
                english_name = english_name or names.english
                localized_name = localized_name or names.localized

            labels_ref = row.get("labels")
            if labels_ref is not None and labels_ref not in label_sets:
                msg = f"Language {id_str} references unknown label set '{labels_ref}'"
                raise ValueError(msg)

            languages.append(
                Language(
                    id=int(id_str),
                    tags=tags,
                    charsets=tuple(row["charsets"]),
                    english_name=english_name,
                    localized_name=localized_name,
                    double_byte=bool(row.get("doubleByteCharset", False)),
                    labels=label_sets[labels_ref] if labels_ref is not None else None,
                )
            )

        logger.debug(
            "Built language catalog: %d languages, %d label sets", len(languages), len(label_sets)
        )
        return cls(languages)


def _label_set_from_mapping(name: str, raw: Mapping[str, str]) -> LabelSet[str | bytes]:
    is_native = raw.get("encoding") == _NATIVE_BASE64
    values: dict[str, str | bytes] = {}
    for key in LABEL_JSON_KEYS.values():
        if key not in raw:
            continue
        values[key] = base64.b64decode(raw[key]) if is_native else raw[key]
    try:
        return LabelSet.from_mapping(values)
    except KeyError as e:
        msg = f"Label set '{name}' is missing the {e.args[0]!r} label"
        raise ValueError(msg) from e


@functools.lru_cache(maxsize=1)
def load_default_catalog() -> LanguageCatalog:
    """Load the catalog bundled with the package.

    Loaded on first call and shared afterwards.
    """
    source = files("dmglicense").joinpath("data", "languages.json")
    return LanguageCatalog.from_mapping(json.loads(source.read_text(encoding="utf-8")))
