"""
Core domain layer for edgarparse.

This module provides:
- Exception hierarchy for consistent error handling
- Shared type definitions

Usage:
    from edgarparse.core import EdgarError, ParsingError, ContextNotFoundError
    from edgarparse.core.base_types import Int32, Int64
"""

from .base_types import (
    CIK,
    AccessionNumber,
    DateLike,
    FormType,
    Int32,
    Int64,
    PeriodType,
)
from .exceptions import (
    ConfigurationError,
    ContextNotFoundError,
    EdgarError,
    FactConversionError,
    IndexParsingError,
    IngestionError,
    InstanceNotFoundError,
    LookupMissError,
    ParsingError,
    RateLimitCancelledError,
    RecordTooShortError,
    RequestError,
    SchemaError,
    SECApiError,
    UnsupportedFieldTypeError,
    UnsupportedTargetError,
    XBRLParsingError,
)

__all__ = [
    # Exceptions
    "EdgarError",
    "IngestionError",
    "SECApiError",
    "RequestError",
    "RateLimitCancelledError",
    "ParsingError",
    "IndexParsingError",
    "RecordTooShortError",
    "XBRLParsingError",
    "FactConversionError",
    "LookupMissError",
    "ContextNotFoundError",
    "InstanceNotFoundError",
    "SchemaError",
    "UnsupportedFieldTypeError",
    "UnsupportedTargetError",
    "ConfigurationError",
    # Types
    "FormType",
    "PeriodType",
    "CIK",
    "AccessionNumber",
    "Int32",
    "Int64",
    "DateLike",
]
