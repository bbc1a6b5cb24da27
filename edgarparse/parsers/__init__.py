"""EDGAR index and XBRL parsers module."""

from .fixed_width import FieldSpec, PositionalRecordReader
from .index_parser import (
    HEADER_LINES,
    RETAINED_FORM_TYPES,
    IndexEntry,
    IndexParser,
    accession_from_path,
    iter_index,
    parse_filing_date,
    process_index,
)
from .xbrl_document import Context, XBRLDocument
from .xbrl_unpacker import (
    FieldBinding,
    FieldKind,
    RecordSchema,
    unpack,
    xbrl_field,
)

__all__ = [
    "FieldSpec",
    "PositionalRecordReader",
    "HEADER_LINES",
    "RETAINED_FORM_TYPES",
    "IndexEntry",
    "IndexParser",
    "accession_from_path",
    "iter_index",
    "parse_filing_date",
    "process_index",
    "Context",
    "XBRLDocument",
    "FieldBinding",
    "FieldKind",
    "RecordSchema",
    "unpack",
    "xbrl_field",
]
