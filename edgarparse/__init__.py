"""
edgarparse
==========

Retrieval and decoding of SEC EDGAR disclosure data: the fixed-width
full-text filing index and XBRL instance documents.

Source code organization:
- core/        - Exceptions and shared type definitions
- ingestion/   - Rate-limited SEC client and endpoint URLs
- parsers/     - Full-text index parser, XBRL context resolution and record population
- utils/       - Shared utilities (config, logging, rate limiting)
"""

from .parsers import IndexEntry, XBRLDocument, process_index, unpack, xbrl_field

__version__ = "0.1.0"

__all__ = ["IndexEntry", "XBRLDocument", "process_index", "unpack", "xbrl_field"]
