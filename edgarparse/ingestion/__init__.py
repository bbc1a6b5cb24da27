"""SEC data retrieval module."""

from .sec_api import Period, Quarter, SECClient, Taxonomy

__all__ = ["SECClient", "Quarter", "Taxonomy", "Period"]
