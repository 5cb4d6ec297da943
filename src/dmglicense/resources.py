"""Resource table: slot layout, the LPic index, and the resource map.

Slot N holds one distinct license. Its STR# labels and its TEXT or RTF body
are stored at resource ID 5000 + N; the LPic resource (ID 5000) maps each
language to its slot.

LPic layout (big-endian)::

    int16   default language ID
    uint16  mapping count
    count x {
        int16   language ID
        int16   slot index (zero-based, not 5000-based)
        int16   double-byte charset flag (0 or 1)
    }

Python 3.13+.
"""

from __future__ import annotations

import logging
import plistlib
import struct
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from dmglicense.assembly import AssembledLicense, AssembledLicenseSet, assemble
from dmglicense.catalog import LanguageCatalog
from dmglicense.constants import BASE_RESOURCE_ID, RESOURCE_ATTRIBUTES
from dmglicense.context import AssemblyContext, AssemblyOptions
from dmglicense.diagnostics import NoLicenseContentError
from dmglicense.enums import BodyType
from dmglicense.specification import LicenseSpecification

__all__ = [
    "LanguageMapping",
    "ResourceTable",
    "build_license_resources",
    "build_resource_table",
    "pack_lpic",
    "table_from_assembly",
]

logger = logging.getLogger(__name__)

_LPIC_HEADER = struct.Struct(">hH")
_LPIC_MAPPING = struct.Struct(">hhh")


@dataclass(frozen=True, slots=True)
class LanguageMapping:
    """One LPic record."""

    language_id: int
    slot: int
    double_byte: bool = False


def pack_lpic(default_language_id: int, mappings: Iterable[LanguageMapping]) -> bytes:
    """Encode an LPic resource.

    Raises:
        struct.error: If an ID or slot does not fit in 16 bits
    """
    records = [
        _LPIC_MAPPING.pack(m.language_id, m.slot, 1 if m.double_byte else 0) for m in mappings
    ]
    return _LPIC_HEADER.pack(default_language_id, len(records)) + b"".join(records)


class ResourceTable:
    """Distinct licenses in slot order plus the language index.

    Build with build_resource_table(); instances are not modified afterwards.
    """

    __slots__ = ("_catalog", "_default_language_id", "_language_slots", "_slots")

    def __init__(
        self,
        slots: Sequence[AssembledLicense],
        language_slots: Mapping[int, int],
        default_language_id: int,
        catalog: LanguageCatalog,
    ) -> None:
        self._slots = tuple(slots)
        self._language_slots = dict(language_slots)
        self._default_language_id = default_language_id
        self._catalog = catalog

    @property
    def slots(self) -> tuple[AssembledLicense, ...]:
        """Licenses in slot order."""
        return self._slots

    @property
    def language_slots(self) -> Mapping[int, int]:
        """Language ID -> zero-based slot index, in first-assignment order."""
        return dict(self._language_slots)

    @property
    def default_language_id(self) -> int:
        return self._default_language_id

    def resource_id(self, slot: int) -> int:
        """Resource ID of the STR# and body resources of ``slot``."""
        return BASE_RESOURCE_ID + slot

    def mappings(self) -> list[LanguageMapping]:
        """LPic records, in first-assignment order."""
        result: list[LanguageMapping] = []
        for language_id, slot in self._language_slots.items():
            language = self._catalog.by_id(language_id)
            result.append(
                LanguageMapping(language_id, slot, language is not None and language.double_byte)
            )
        return result

    @property
    def lpic(self) -> bytes:
        """Packed LPic resource data."""
        return pack_lpic(self._default_language_id, self.mappings())

    def _slot_name(self, license_: AssembledLicense) -> str:
        language = self._catalog.by_id(license_.language_ids[0])
        return language.english_name if language is not None else str(license_.language_ids[0])

    def to_resource_map(self) -> dict[str, list[dict[str, Any]]]:
        """Resources keyed by type, as consumed by a UDIF resource writer.

        Body types with no resources are omitted.
        """
        result: dict[str, list[dict[str, Any]]] = {
            "LPic": [_resource(self.lpic, BASE_RESOURCE_ID, "")],
            "STR#": [],
            BodyType.RTF.value: [],
            BodyType.TEXT.value: [],
        }
        for slot, license_ in enumerate(self._slots):
            resource_id = self.resource_id(slot)
            name = self._slot_name(license_)
            result["STR#"].append(_resource(license_.labels, resource_id, name))
            result[license_.body_type.value].append(
                _resource(license_.body, resource_id, f"{name} SLA")
            )
        for body_type in BodyType:
            if not result[body_type.value]:
                del result[body_type.value]
        return result

    def to_plist(self) -> bytes:
        """Resource map as an XML property list."""
        return plistlib.dumps(self.to_resource_map(), fmt=plistlib.FMT_XML)

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return (
            f"ResourceTable(slots={len(self._slots)}, languages={len(self._language_slots)}, "
            f"default_language_id={self._default_language_id})"
        )


def _resource(data: bytes, resource_id: int, name: str) -> dict[str, Any]:
    return {
        "Attributes": RESOURCE_ATTRIBUTES,
        "Data": data,
        "ID": str(resource_id),
        "Name": name,
    }


def build_resource_table(
    licenses: Sequence[AssembledLicense],
    default_language_id: int,
    *,
    catalog: LanguageCatalog,
    language_order: Sequence[int] | None = None,
) -> ResourceTable:
    """Lay licenses out in slots, in the given order.

    Args:
        licenses: Distinct licenses; slot N is ``licenses[N]``
        default_language_id: Must be one of the licenses' languages
        catalog: Catalog supplying names and double-byte flags
        language_order: LPic record order (default: slot order, then
            each license's own language order)

    Raises:
        NoLicenseContentError: If ``licenses`` is empty
        ValueError: If a license has no languages, a language appears in
            two licenses, two licenses have identical content, or the
            default language is not mapped
    """
    if not licenses:
        msg = "A resource table needs at least one license."
        raise NoLicenseContentError(msg)

    language_slots: dict[int, int] = {}
    for slot, license_ in enumerate(licenses):
        if not license_.language_ids:
            msg = f"License in slot {slot} has no languages"
            raise ValueError(msg)
        for other in licenses[:slot]:
            if other.same_content(license_):
                msg = f"License in slot {slot} duplicates the content of an earlier slot"
                raise ValueError(msg)
        for language_id in license_.language_ids:
            if language_id in language_slots:
                msg = (
                    f"Language {language_id} is assigned to slots "
                    f"{language_slots[language_id]} and {slot}"
                )
                raise ValueError(msg)
            language_slots[language_id] = slot

    if language_order is not None:
        if sorted(language_order) != sorted(language_slots):
            msg = "language_order must list exactly the languages of the licenses"
            raise ValueError(msg)
        language_slots = {language_id: language_slots[language_id] for language_id in language_order}

    if default_language_id not in language_slots:
        msg = f"Default language {default_language_id} is not assigned to any slot"
        raise ValueError(msg)

    logger.debug("Resource table: %d slot(s), %d language(s)", len(licenses), len(language_slots))
    return ResourceTable(licenses, language_slots, default_language_id, catalog)


def table_from_assembly(
    assembled: AssembledLicenseSet, catalog: LanguageCatalog
) -> ResourceTable:
    """Resource table for an assembly result, keeping its language order."""
    return build_resource_table(
        assembled.in_order,
        assembled.default_language_id,
        catalog=catalog,
        language_order=list(assembled.by_language_id),
    )


def build_license_resources(
    spec: LicenseSpecification,
    options: AssemblyOptions | AssemblyContext | None = None,
) -> ResourceTable:
    """Assemble ``spec`` and lay the result out as a resource table.

    Raises:
        DMGLicenseError: As raised by assemble()
    """
    context = AssemblyContext.from_options(options)
    return table_from_assembly(assemble(spec, context), context.catalog)
