"""Language catalog package.

Submodules:
    language - Language entries and specifier type aliases
    catalog  - LanguageCatalog and the bundled catalog loader
    names    - CLDR display names via Babel

Python 3.13+.
"""

from .catalog import LanguageCatalog, load_default_catalog
from .language import Language, LanguageSpecifier, LanguageSpecifiers
from .names import DisplayNames, clear_name_cache, display_names

__all__ = [
    "DisplayNames",
    "Language",
    "LanguageCatalog",
    "LanguageSpecifier",
    "LanguageSpecifiers",
    "clear_name_cache",
    "display_names",
    "load_default_catalog",
]
