"""
Core exception hierarchy for edgarparse.

All custom exceptions inherit from EdgarError for consistent error handling.
Structural decode errors (ParsingError) and lookup misses (LookupMissError)
are separate branches so callers can tell "this filer has no data" apart
from "the data is corrupt".
"""

from typing import Optional


class EdgarError(Exception):
    """Base exception for all edgarparse errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | Context: {self.context}"
        return self.message


# Ingestion Errors
class IngestionError(EdgarError):
    """Error during data retrieval from SEC."""
    pass


class SECApiError(IngestionError):
    """Error communicating with SEC."""
    pass


class RequestError(SECApiError):
    """SEC answered with a non-success status."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        context = {"url": url} if url else None
        super().__init__(f"http request error: {status_code}", context)


class RateLimitCancelledError(SECApiError):
    """Waiting for a rate limiter token was cancelled or timed out."""
    pass


# Parsing Errors
class ParsingError(EdgarError):
    """Structural decode error in regulator-supplied data."""
    pass


class IndexParsingError(ParsingError):
    """Malformed field on a retained full-text index line."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        self.line_number = line_number
        self.line = line
        context = {}
        if line_number is not None:
            context["line_number"] = line_number
        if line is not None:
            context["line"] = line
        super().__init__(message, context)


class RecordTooShortError(IndexParsingError):
    """Line is shorter than a configured byte range."""
    pass


class XBRLParsingError(ParsingError):
    """Error parsing an XBRL document."""
    pass


class FactConversionError(ParsingError):
    """Fact text could not be converted to the field's declared type."""
    pass


# Lookup Errors
class LookupMissError(EdgarError):
    """Requested data is not present in the document."""
    pass


class ContextNotFoundError(LookupMissError):
    """No reporting context matches the requested entity (and instant)."""
    pass


class InstanceNotFoundError(LookupMissError):
    """Filing has no locatable XBRL instance document."""
    pass


# Schema Errors
class SchemaError(EdgarError):
    """Programmer error in a target record definition."""
    pass


class UnsupportedFieldTypeError(SchemaError):
    """Annotated field has a type with no defined conversion."""
    pass


class UnsupportedTargetError(SchemaError):
    """Populate target is not a mutable record instance."""
    pass


# Configuration Errors
class ConfigurationError(EdgarError):
    """Configuration error."""
    pass
