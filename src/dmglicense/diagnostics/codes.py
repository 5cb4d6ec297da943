"""Error codes attached to every dmglicense error.

Python 3.13+. Zero external dependencies.
"""

from enum import Enum

__all__ = ["ErrorCode"]


class ErrorCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Language catalog errors
        2000-2999: Charset negotiation errors
        3000-3999: Label errors (packing, loading, predefined resources)
        4000-4999: License body errors
        5000-5999: Assembly errors and warnings
        9000-9999: Aggregates
    """

    # Language catalog (1000-1999)
    NO_SUCH_LANGUAGE = 1001
    EMPTY_LANGUAGE_LIST = 1002

    # Charset negotiation (2000-2999)
    NO_SUITABLE_CHARSET = 2001
    NO_COMMON_CHARSET = 2002

    # Labels (3000-3999)
    LABEL_ENCODING_FAILED = 3001
    LABEL_TOO_LONG = 3002
    LANGUAGE_NAME_UNENCODABLE = 3003
    NO_DEFAULT_LABELS = 3004
    LABEL_SOURCE_INVALID = 3005
    INVALID_RESOURCE = 3101
    RESOURCE_DECODING_FAILED = 3102

    # Bodies (4000-4999)
    BODY_PREPARATION_FAILED = 4001

    # Assembly (5000-5999)
    NO_LICENSE_CONTENT = 5001
    LANGUAGE_COLLISION = 5002
    DEFAULT_LANGUAGE_CONFLICT = 5003
    DEFAULT_LANGUAGE_UNUSABLE = 5004

    # Aggregates (9000-9999)
    GENERIC = 9000
    MULTIPLE_ERRORS = 9001
