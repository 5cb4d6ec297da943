"""Language catalog: lookup, resolution, JSON loading, display names."""

import pytest

from dmglicense.catalog import (
    Language,
    LanguageCatalog,
    clear_name_cache,
    display_names,
    load_default_catalog,
)
from dmglicense.diagnostics import ErrorCode, NoSuchLanguageError
from tests.helpers.catalog import ENGLISH, FRENCH, GERMAN, JAPANESE


class TestLanguage:
    """Language entry validation."""

    def test_negative_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be >= 0"):
            Language(-1, ("xx",), ("macintosh",), "X", "X")

    def test_charsets_required(self) -> None:
        with pytest.raises(ValueError, match="at least one charset"):
            Language(5, ("xx",), (), "X", "X")

    def test_preferred_charset(self) -> None:
        assert JAPANESE.charset == "x-mac-japanese"

    def test_str(self) -> None:
        assert str(ENGLISH) == "English (language 0; en-US, en)"


class TestLookup:
    """by_id / by_tag / lookup."""

    def test_by_id(self, catalog: LanguageCatalog) -> None:
        assert catalog.by_id(3) is GERMAN
        assert catalog.by_id(999) is None

    def test_by_tag_is_case_insensitive(self, catalog: LanguageCatalog) -> None:
        assert catalog.by_tag("EN-us") is ENGLISH
        assert catalog.by_tag("Fr") is FRENCH

    def test_several_tags_same_language(self, catalog: LanguageCatalog) -> None:
        assert catalog.by_tag("en") is catalog.by_tag("en-US")

    def test_lookup_rejects_bool(self, catalog: LanguageCatalog) -> None:
        assert catalog.lookup(True) is None

    def test_iteration_is_sorted_by_id(self, catalog: LanguageCatalog) -> None:
        ids = [language.id for language in catalog]
        assert ids == sorted(ids)
        assert len(catalog) == len(ids)
        assert 0 in catalog
        assert 12345 not in catalog

    def test_duplicate_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate language ID 0"):
            LanguageCatalog([ENGLISH, Language(0, ("xx",), ("macintosh",), "X", "X")])

    def test_shared_tag_rejected(self) -> None:
        with pytest.raises(ValueError, match="shared by languages 0 and 7"):
            LanguageCatalog([ENGLISH, Language(7, ("EN",), ("macintosh",), "X", "X")])


class TestResolve:
    """Specifier resolution with and without a sink."""

    def test_single_specifier(self, catalog: LanguageCatalog) -> None:
        assert catalog.resolve("de") == [GERMAN]
        assert catalog.resolve(1) == [FRENCH]

    def test_list_keeps_order_and_deduplicates(self, catalog: LanguageCatalog) -> None:
        assert catalog.resolve(["fr", 3, "en", "EN-US", 0]) == [FRENCH, GERMAN, ENGLISH]

    def test_nothing_resolves(self, catalog: LanguageCatalog) -> None:
        with pytest.raises(NoSuchLanguageError) as exc_info:
            catalog.resolve("zz")
        assert str(exc_info.value) == "No known languages found for specification zz."
        assert exc_info.value.code is ErrorCode.NO_SUCH_LANGUAGE

    def test_partial_without_sink_fails(self, catalog: LanguageCatalog) -> None:
        with pytest.raises(NoSuchLanguageError) as exc_info:
            catalog.resolve(["en", "zz"])
        assert exc_info.value.specifier == "zz"

    def test_partial_with_sink_reports_each(self, catalog: LanguageCatalog) -> None:
        reported: list[NoSuchLanguageError] = []
        result = catalog.resolve(["zz", "en", 777], on_error=reported.append)
        assert result == [ENGLISH]
        assert [e.specifier for e in reported] == ["zz", 777]

    def test_all_unresolved_with_sink_still_fails(self, catalog: LanguageCatalog) -> None:
        reported: list[NoSuchLanguageError] = []
        with pytest.raises(NoSuchLanguageError, match=r"\[zz, yy\]"):
            catalog.resolve(["zz", "yy"], on_error=reported.append)
        assert reported == []


class TestFromMapping:
    """Catalog construction from JSON-shaped data."""

    def test_rows_and_label_sets(self) -> None:
        catalog = LanguageCatalog.from_mapping(
            {
                "labels": {
                    "en": {
                        "languageName": "English",
                        "agree": "Agree",
                        "disagree": "Disagree",
                        "print": "Print",
                        "save": "Save",
                        "message": "Message",
                    }
                },
                "languages": {
                    "0": {
                        "tags": ["en-US", "en"],
                        "charsets": ["macintosh"],
                        "englishName": "English",
                        "localizedName": "English",
                        "labels": "en",
                    },
                    "14": {
                        "tags": ["ja"],
                        "charsets": ["x-mac-japanese"],
                        "englishName": "Japanese",
                        "localizedName": "日本語",
                        "doubleByteCharset": True,
                    },
                },
            }
        )
        english = catalog.by_id(0)
        assert english is not None
        assert english.labels is not None
        assert english.labels.agree == "Agree"
        assert english.labels.language_name == "English"
        japanese = catalog.by_tag("ja")
        assert japanese is not None
        assert japanese.double_byte
        assert japanese.labels is None

    def test_native_base64_labels_become_bytes(self) -> None:
        catalog = LanguageCatalog.from_mapping(
            {
                "labels": {
                    "raw": {
                        "encoding": "native;base64",
                        "agree": "QWdyZWU=",
                        "disagree": "RGlzYWdyZWU=",
                        "print": "UHJpbnQ=",
                        "save": "U2F2ZQ==",
                        "message": "TWVzc2FnZQ==",
                    }
                },
                "languages": {
                    "0": {
                        "tags": ["en"],
                        "charsets": ["macintosh"],
                        "englishName": "English",
                        "localizedName": "English",
                        "labels": "raw",
                    }
                },
            }
        )
        english = catalog.by_id(0)
        assert english is not None
        assert english.labels is not None
        assert english.labels.agree == b"Agree"
        assert english.labels.message == b"Message"
        assert english.labels.language_name is None

    def test_unknown_label_set_reference(self) -> None:
        with pytest.raises(ValueError, match="unknown label set 'nope'"):
            LanguageCatalog.from_mapping(
                {
                    "languages": {
                        "0": {
                            "tags": ["en"],
                            "charsets": ["macintosh"],
                            "englishName": "English",
                            "localizedName": "English",
                            "labels": "nope",
                        }
                    }
                }
            )

    def test_incomplete_label_set(self) -> None:
        with pytest.raises(ValueError, match="missing the 'save' label"):
            LanguageCatalog.from_mapping(
                {
                    "labels": {
                        "en": {
                            "agree": "A",
                            "disagree": "D",
                            "print": "P",
                            "message": "M",
                        }
                    }
                }
            )

    def test_missing_names_come_from_cldr(self) -> None:
        catalog = LanguageCatalog.from_mapping(
            {"languages": {"17": {"tags": ["fi"], "charsets": ["macintosh"]}}}
        )
        finnish = catalog.by_id(17)
        assert finnish is not None
        assert finnish.english_name == "Finnish"
        assert finnish.localized_name == "suomi"


class TestDisplayNames:
    """Babel-backed display names."""

    def test_language_and_region(self) -> None:
        names = display_names("de-CH")
        assert names.english.startswith("German")
        assert names.localized.startswith("Deutsch")

    def test_unknown_tag(self) -> None:
        clear_name_cache()
        with pytest.raises(ValueError, match="No display names known"):
            display_names("qq-QQ-invalid")


class TestDefaultCatalog:
    """The catalog bundled with the package."""

    def test_loads_once(self) -> None:
        assert load_default_catalog() is load_default_catalog()

    def test_well_known_languages(self) -> None:
        catalog = load_default_catalog()
        english = catalog.by_tag("en-US")
        assert english is not None
        assert english.id == 0
        assert english.labels is not None
        assert english.labels.agree == "Agree"
        japanese = catalog.by_tag("ja")
        assert japanese is not None
        assert japanese.double_byte
        assert catalog.by_tag("nb") is catalog.by_tag("no")

    def test_names_filled_in_for_sparse_rows(self) -> None:
        finnish = load_default_catalog().by_tag("fi")
        assert finnish is not None
        assert finnish.english_name.startswith("Finnish")

    def test_regional_variants_share_label_sets(self) -> None:
        catalog = load_default_catalog()
        swiss_french = catalog.by_tag("fr-CH")
        french = catalog.by_tag("fr")
        assert swiss_french is not None
        assert french is not None
        assert swiss_french.labels is french.labels
