"""Resource table layout, LPic packing, and the resource map."""

import plistlib
import struct

import pytest

from dmglicense import build_license_resources
from dmglicense.assembly import AssembledLicense
from dmglicense.catalog import LanguageCatalog
from dmglicense.diagnostics import NoLicenseContentError
from dmglicense.enums import BodyType
from dmglicense.resources import LanguageMapping, build_resource_table, pack_lpic
from dmglicense.specification import BodyEntry, LicenseSpecification

ENGLISH_FRENCH = AssembledLicense(BodyType.TEXT, b"Hello", b"L1", (0, 1))
JAPANESE_RTF = AssembledLicense(BodyType.RTF, b"{\\rtf1}", b"L2", (14,))


class TestPackLpic:
    def test_layout(self) -> None:
        data = pack_lpic(2, [LanguageMapping(2, 0), LanguageMapping(14, 1, double_byte=True)])
        assert data == bytes([0, 2, 0, 2, 0, 2, 0, 0, 0, 0, 0, 14, 0, 1, 0, 1])

    def test_empty(self) -> None:
        assert pack_lpic(0, []) == b"\x00\x00\x00\x00"

    def test_negative_ids(self) -> None:
        assert pack_lpic(-1, [])[:2] == b"\xff\xff"

    def test_out_of_range(self) -> None:
        with pytest.raises(struct.error):
            pack_lpic(70000, [])


class TestResourceTable:
    def test_slots_and_mappings(self, catalog: LanguageCatalog) -> None:
        table = build_resource_table([ENGLISH_FRENCH, JAPANESE_RTF], 0, catalog=catalog)

        assert len(table) == 2
        assert table.language_slots == {0: 0, 1: 0, 14: 1}
        assert table.resource_id(1) == 5001
        assert table.mappings() == [
            LanguageMapping(0, 0),
            LanguageMapping(1, 0),
            LanguageMapping(14, 1, double_byte=True),
        ]
        assert table.lpic == bytes(
            [0, 0, 0, 3, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 14, 0, 1, 0, 1]
        )

    def test_resource_map(self, catalog: LanguageCatalog) -> None:
        table = build_resource_table([ENGLISH_FRENCH, JAPANESE_RTF], 1, catalog=catalog)
        resources = table.to_resource_map()

        assert set(resources) == {"LPic", "STR#", "TEXT", "RTF "}
        assert resources["LPic"] == [
            {"Attributes": "0x0000", "Data": table.lpic, "ID": "5000", "Name": ""}
        ]
        assert resources["STR#"] == [
            {"Attributes": "0x0000", "Data": b"L1", "ID": "5000", "Name": "English"},
            {"Attributes": "0x0000", "Data": b"L2", "ID": "5001", "Name": "Japanese"},
        ]
        assert resources["TEXT"] == [
            {"Attributes": "0x0000", "Data": b"Hello", "ID": "5000", "Name": "English SLA"}
        ]
        assert resources["RTF "][0]["ID"] == "5001"
        assert resources["RTF "][0]["Name"] == "Japanese SLA"

    def test_unused_body_type_omitted(self, catalog: LanguageCatalog) -> None:
        table = build_resource_table([ENGLISH_FRENCH], 0, catalog=catalog)
        assert "RTF " not in table.to_resource_map()

    def test_plist(self, catalog: LanguageCatalog) -> None:
        table = build_resource_table([ENGLISH_FRENCH, JAPANESE_RTF], 0, catalog=catalog)
        xml = table.to_plist()
        assert xml.startswith(b"<?xml")
        assert plistlib.loads(xml) == table.to_resource_map()

    def test_language_order(self, catalog: LanguageCatalog) -> None:
        table = build_resource_table(
            [ENGLISH_FRENCH, JAPANESE_RTF], 0, catalog=catalog, language_order=[14, 1, 0]
        )
        assert list(table.language_slots) == [14, 1, 0]
        assert table.lpic[4:6] == b"\x00\x0e"

    def test_repr(self, catalog: LanguageCatalog) -> None:
        table = build_resource_table([ENGLISH_FRENCH], 1, catalog=catalog)
        assert repr(table) == "ResourceTable(slots=1, languages=2, default_language_id=1)"


class TestTableInvariants:
    def test_empty(self, catalog: LanguageCatalog) -> None:
        with pytest.raises(NoLicenseContentError):
            build_resource_table([], 0, catalog=catalog)

    def test_license_without_languages(self, catalog: LanguageCatalog) -> None:
        with pytest.raises(ValueError, match="has no languages"):
            build_resource_table(
                [AssembledLicense(BodyType.TEXT, b"x", b"y", ())], 0, catalog=catalog
            )

    def test_duplicate_content(self, catalog: LanguageCatalog) -> None:
        twin = AssembledLicense(BodyType.TEXT, b"Hello", b"L1", (3,))
        with pytest.raises(ValueError, match="duplicates the content"):
            build_resource_table([ENGLISH_FRENCH, twin], 0, catalog=catalog)

    def test_language_in_two_slots(self, catalog: LanguageCatalog) -> None:
        other = AssembledLicense(BodyType.TEXT, b"Other", b"L1", (1,))
        with pytest.raises(ValueError, match="assigned to slots 0 and 1"):
            build_resource_table([ENGLISH_FRENCH, other], 0, catalog=catalog)

    def test_unmapped_default(self, catalog: LanguageCatalog) -> None:
        with pytest.raises(ValueError, match="Default language 3"):
            build_resource_table([ENGLISH_FRENCH], 3, catalog=catalog)

    def test_bad_language_order(self, catalog: LanguageCatalog) -> None:
        with pytest.raises(ValueError, match="language_order"):
            build_resource_table([ENGLISH_FRENCH], 0, catalog=catalog, language_order=[0])


class TestBundledCatalog:
    def test_single_english_license(self) -> None:
        table = build_license_resources(
            LicenseSpecification((BodyEntry("en-US", text="Terms"),))
        )
        assert table.lpic == bytes([0, 0, 0, 1, 0, 0, 0, 0, 0, 0])

        resources = table.to_resource_map()
        labels = resources["STR#"][0]["Data"]
        assert labels.startswith(b"\x00\x06\x07English\x05Agree\x08Disagree\x05Print\x07Save...")
        assert resources["TEXT"] == [
            {"Attributes": "0x0000", "Data": b"Terms", "ID": "5000", "Name": "English SLA"}
        ]

    def test_regional_variants_share_a_slot(self) -> None:
        table = build_license_resources(
            LicenseSpecification((BodyEntry(("en-US", "en-GB"), text="Terms"),))
        )
        assert len(table) == 1
        assert table.lpic == bytes([0, 0, 0, 2, 0, 0, 0, 0, 0, 0, 0, 2, 0, 0, 0, 0])
