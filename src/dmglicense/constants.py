"""Shared constants for dmglicense.

Centralizes the numbers that the classic Mac OS software license resources
are built around, plus cache sizing used by the negotiation layer.

Constants are grouped by domain:
- Resource layout: STR# and LPic binary format values
- Resource numbering: legacy resource ID convention
- Encoding: default source character set and the passthrough marker
- Cache limits: memory bounds for codec caching

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Resource layout
    "STR_LIST_MAGIC",
    "LABEL_FIELD_COUNT",
    "MAX_LABEL_FIELD_BYTES",
    "LPIC_HEADER_SIZE",
    "LPIC_MAPPING_SIZE",
    # Resource numbering
    "BASE_RESOURCE_ID",
    "RESOURCE_ATTRIBUTES",
    # Encoding
    "DEFAULT_SOURCE_CHARSET",
    "NATIVE_CHARSET",
    # Cache limits
    "DEFAULT_CODEC_CACHE_SIZE",
]

# ============================================================================
# RESOURCE LAYOUT
# ============================================================================

# An STR# resource starts with a big-endian 16-bit string count. The license
# dialog expects exactly six strings, so the count doubles as a signature.
STR_LIST_MAGIC: int = 6

# Language name, Agree, Disagree, Print, Save, Message.
LABEL_FIELD_COUNT: int = 6

# Pascal strings carry a single length byte.
MAX_LABEL_FIELD_BYTES: int = 255

# LPic header: default language ID (int16) + mapping count (uint16).
LPIC_HEADER_SIZE: int = 4

# LPic mapping: language ID, slot index, double-byte flag (3 x int16).
LPIC_MAPPING_SIZE: int = 6

# ============================================================================
# RESOURCE NUMBERING
# ============================================================================

# License resources are numbered from 5000 upward. The LPic resource itself
# is 5000; STR#/TEXT/RTF resources for slot N are 5000 + N.
BASE_RESOURCE_ID: int = 5000

# Resource attribute flags written for every generated resource.
RESOURCE_ATTRIBUTES: str = "0x0000"

# ============================================================================
# ENCODING
# ============================================================================

# Charset assumed for file contents and base64 payloads when none is given.
DEFAULT_SOURCE_CHARSET: str = "UTF-8"

# Charset marker meaning "these bytes are already in the target language's
# legacy encoding". Such data bypasses negotiation entirely.
NATIVE_CHARSET: str = "native"

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum distinct target charsets remembered per source charset.
# The bundled catalog uses fewer than 20 charsets in total.
DEFAULT_CODEC_CACHE_SIZE: int = 64
