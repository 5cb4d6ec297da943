"""Label sets and their STR# resource encoding.

Submodules:
    labelset  - LabelSet container and field metadata
    codec     - pack/unpack of STR# resources
    delimited - splitting of delimited label files
    loading   - async loaders for each label source kind (import directly)

Python 3.13+.
"""

from .codec import LabelValue, decode_labels, pack_labels, unpack_labels
from .delimited import delimiter_bytes, split_delimited
from .labelset import LABEL_DESCRIPTIONS, LABEL_FIELDS, LABEL_JSON_KEYS, LabelSet

__all__ = [
    "LABEL_DESCRIPTIONS",
    "LABEL_FIELDS",
    "LABEL_JSON_KEYS",
    "LabelSet",
    "LabelValue",
    "decode_labels",
    "delimiter_bytes",
    "pack_labels",
    "split_delimited",
    "unpack_labels",
]
