"""dmglicense - software license resources for disk images.

Builds the classic Mac OS license agreement resources (LPic, STR#, TEXT and
RTF) from a per-language license specification: text is encoded into each
language's legacy charset, label sets are packed into STR# resources,
identical results are shared, and a default language is chosen.

Public API:
    LicenseSpecification - Typed input (bodies, label sets, default language)
    specification_from_mapping - Build a LicenseSpecification from JSON data
    AssemblyOptions - Configuration (paths, non-fatal error sink, catalog)
    assemble_licenses - Async assembly to deduplicated per-language content
    assemble - Synchronous assemble_licenses
    build_license_resources - Assembly plus resource table layout
    ResourceTable - Slots, LPic index, resource map and plist output

Exceptions:
    DMGLicenseError - Base exception class
    MultiError - Several errors surfaced together

Submodules:
    dmglicense.catalog - Language catalog
    dmglicense.charsets - Charset negotiation
    dmglicense.labels - Label sets and the STR# codec
    dmglicense.diagnostics - Error types, codes, and formatting
"""

from .assembly import (
    AssembledLicense,
    AssembledLicenseSet,
    assemble,
    assemble_licenses,
    choose_default_language_id,
)
from .bodies import PreparedBody, infer_body_type, prepare_body
from .catalog import Language, LanguageCatalog, load_default_catalog
from .charsets import CodecCache
from .coded_text import CodedText
from .context import AssemblyContext, AssemblyOptions
from .diagnostics import DMGLicenseError, ErrorCode, MultiError, format_error
from .enums import BodyType, ContentType, Delimiter, LabelSourceKind
from .labels import LabelSet, decode_labels, pack_labels, unpack_labels
from .resources import (
    ResourceTable,
    build_license_resources,
    build_resource_table,
    pack_lpic,
    table_from_assembly,
)
from .specification import (
    BodyEntry,
    DelimitedLabels,
    InlineLabels,
    JsonLabels,
    LicenseSpecification,
    OnePerFileLabels,
    RawLabels,
    specification_from_mapping,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("dmglicense")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AssembledLicense",
    "AssembledLicenseSet",
    "AssemblyContext",
    "AssemblyOptions",
    "BodyEntry",
    "BodyType",
    "CodecCache",
    "CodedText",
    "ContentType",
    "DMGLicenseError",
    "DelimitedLabels",
    "Delimiter",
    "ErrorCode",
    "InlineLabels",
    "JsonLabels",
    "LabelSet",
    "LabelSourceKind",
    "Language",
    "LanguageCatalog",
    "LicenseSpecification",
    "MultiError",
    "OnePerFileLabels",
    "PreparedBody",
    "RawLabels",
    "ResourceTable",
    "__version__",
    "assemble",
    "assemble_licenses",
    "build_license_resources",
    "build_resource_table",
    "choose_default_language_id",
    "decode_labels",
    "format_error",
    "infer_body_type",
    "load_default_catalog",
    "pack_labels",
    "pack_lpic",
    "prepare_body",
    "specification_from_mapping",
    "table_from_assembly",
    "unpack_labels",
]
