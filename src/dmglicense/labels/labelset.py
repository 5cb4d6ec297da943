"""The six-string label set shown by the license agreement dialog.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

__all__ = [
    "LABEL_DESCRIPTIONS",
    "LABEL_FIELDS",
    "LABEL_JSON_KEYS",
    "LabelSet",
]

# Order of the strings inside an STR# resource.
LABEL_FIELDS: tuple[str, ...] = (
    "language_name",
    "agree",
    "disagree",
    "print",
    "save",
    "message",
)

# Keys used by JSON specifications and catalog data.
LABEL_JSON_KEYS: Mapping[str, str] = {
    "language_name": "languageName",
    "agree": "agree",
    "disagree": "disagree",
    "print": "print",
    "save": "save",
    "message": "message",
}

LABEL_DESCRIPTIONS: Mapping[str, str] = {
    "language_name": "Language name",
    "agree": "“Agree” button label",
    "disagree": "“Disagree” button label",
    "print": "“Print” button label",
    "save": "“Save” button label",
    "message": "License agreement instructions text",
}


@dataclass(frozen=True, slots=True)
class LabelSet(Generic[T]):
    """Language name plus the five UI strings of the license dialog.

    ``language_name`` may be None, meaning "derive it from the language"
    when the set is packed.

    Attributes:
        agree: "Agree" button label
        disagree: "Disagree" button label
        print: "Print" button label
        save: "Save" button label
        message: Instructions shown above the license text
        language_name: Name shown in the language pop-up menu (optional)
    """

    agree: T
    disagree: T
    print: T
    save: T
    message: T
    language_name: T | None = None

    def items(self) -> Iterator[tuple[str, T | None]]:
        """Yield ``(field, value)`` pairs in STR# order."""
        for field in LABEL_FIELDS:
            yield field, getattr(self, field)

    def map(self, fn: Callable[[T, str], U]) -> LabelSet[U]:
        """Apply ``fn(value, field)`` to every present field."""
        return LabelSet(
            agree=fn(self.agree, "agree"),
            disagree=fn(self.disagree, "disagree"),
            print=fn(self.print, "print"),
            save=fn(self.save, "save"),
            message=fn(self.message, "message"),
            language_name=(
                None if self.language_name is None else fn(self.language_name, "language_name")
            ),
        )

    @classmethod
    def from_sequence(cls, values: Sequence[T]) -> LabelSet[T]:
        """Build from 5 values (no language name) or 6 values (language name first).

        Raises:
            ValueError: If ``values`` does not hold 5 or 6 items
        """
        match len(values):
            case 6:
                language_name, agree, disagree, print_, save, message = values
                return cls(agree, disagree, print_, save, message, language_name)
            case 5:
                agree, disagree, print_, save, message = values
                return cls(agree, disagree, print_, save, message)
            case count:
                msg = f"A label set needs 5 or 6 values, got {count}"
                raise ValueError(msg)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, T]) -> LabelSet[T]:
        """Build from a mapping keyed by JSON names (``languageName``, ``agree``, ...).

        Raises:
            KeyError: If one of the five required labels is missing
        """
        values = {
            field: mapping[key]
            for field, key in LABEL_JSON_KEYS.items()
            if field != "language_name"
        }
        return cls(**values, language_name=mapping.get("languageName"))
