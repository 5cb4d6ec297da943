"""Diagnostic system for dmglicense.

Provides the error taxonomy, error codes, the ErrorBuffer accumulator used
by every fan-out stage, and formatting for aggregated errors.

Python 3.13+. Zero external dependencies.
"""

from .buffer import ErrorBuffer
from .codes import ErrorCode
from .errors import (
    BodyPreparationError,
    DefaultLanguageError,
    DMGLicenseError,
    EmptyLanguageListError,
    InvalidResourceError,
    LabelEncodingError,
    LabelSourceError,
    LanguageCollisionError,
    LanguageNameEncodingError,
    MultiError,
    NoDefaultLabelsError,
    NoLicenseContentError,
    NoSuchLanguageError,
    NoSuitableCharsetError,
    ResourceDecodingError,
    ResourcePosition,
)
from .formatter import ErrorFormatter, OutputFormat, format_error

__all__ = [
    "BodyPreparationError",
    "DMGLicenseError",
    "DefaultLanguageError",
    "EmptyLanguageListError",
    "ErrorBuffer",
    "ErrorCode",
    "ErrorFormatter",
    "InvalidResourceError",
    "LabelEncodingError",
    "LabelSourceError",
    "LanguageCollisionError",
    "LanguageNameEncodingError",
    "MultiError",
    "NoDefaultLabelsError",
    "NoLicenseContentError",
    "NoSuchLanguageError",
    "NoSuitableCharsetError",
    "OutputFormat",
    "ResourceDecodingError",
    "ResourcePosition",
    "format_error",
]
