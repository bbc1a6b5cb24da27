"""
Parser for EDGAR full-text index files (form.idx).

The index is a fixed-width manifest: 10 header lines followed by one line
per filing. Only the retained form types produce entries; every other
line is filtered without error.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import IO, Collection, Iterator

from ..core.base_types import CIK, AccessionNumber, FormType
from ..core.exceptions import IndexParsingError
from ..utils.logger import get_logger
from .fixed_width import FieldSpec, Line, PositionalRecordReader

logger = get_logger("edgarparse.parsers.index_parser")

# Header preamble of the archive's index format
HEADER_LINES = 10

RETAINED_FORM_TYPES = ("10-K", "10-Q")

FORM_IDX_FIELDS = (
    FieldSpec("form_type", 0, 12),
    FieldSpec("company_name", 12, 74, strip=False),
    FieldSpec("cik", 74, 86),
    FieldSpec("date_filed", 86, 96),
    FieldSpec("file_name", 98),
)

ACCESSION_PATTERN = re.compile(r"^\d{10}-\d{2}-\d{6}$", re.ASCII)
CIK_PATTERN = re.compile(r"^\d+$", re.ASCII)
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
ACCESSION_LENGTH = 20


@dataclass(frozen=True)
class IndexEntry:
    """One filing listed in the full-text index."""
    form_type: FormType
    company_name: str
    cik: CIK
    date_filed: date
    accession_number: AccessionNumber

    @property
    def cik_padded(self) -> str:
        """CIK as the 10-digit zero-padded string used in EDGAR URLs and XBRL."""
        return f"{self.cik:010d}"

    @property
    def accession_number_raw(self) -> str:
        """Accession number without dashes (for archive paths)."""
        return self.accession_number.replace("-", "")


def accession_from_path(path: str) -> str:
    """
    Derive the accession number from a filing path.

    Works for both the ``.txt`` submission path listed in form.idx and the
    ``-index.htm`` detail page:

        edgar/data/320193/0000320193-23-000106.txt       -> 0000320193-23-000106
        edgar/data/320193/0000320193-23-000106-index.htm -> 0000320193-23-000106

    Raises:
        ValueError: If the path does not end in an accession-bearing filename.
    """
    filename = path.strip().rsplit("/", 1)[-1]
    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    if stem.endswith("-index"):
        stem = stem[: -len("-index")]

    accession = stem[-ACCESSION_LENGTH:]
    if not ACCESSION_PATTERN.match(accession):
        raise ValueError(f"no accession number in path {path!r}")
    return accession


def parse_filing_date(raw: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` filing date.

    Every component must carry its full width; ``2023-1-5`` is rejected.

    Raises:
        ValueError: The text is not a zero-padded calendar date.
    """
    if not DATE_PATTERN.fullmatch(raw):
        raise ValueError("expected YYYY-MM-DD")
    return datetime.strptime(raw, "%Y-%m-%d").date()


class IndexParser:
    """
    Builds IndexEntry records from a full-text index line stream.

    The stream may yield str or bytes lines. It is never closed here; the
    caller owns it and controls rewinding.
    """

    def __init__(self, form_types: Collection[str] = RETAINED_FORM_TYPES) -> None:
        self.form_types = frozenset(form_types)
        self.reader = PositionalRecordReader(FORM_IDX_FIELDS)

    def parse_line(self, line: Line, line_number: int | None = None) -> IndexEntry | None:
        """
        Decode one data line.

        Returns:
            The entry, or None when the line is blank or its form type is not
            retained.

        Raises:
            IndexParsingError: A retained line has a malformed field.
        """
        if not line.strip():
            return None

        form_type = self.reader.extract(line, "form_type", strict=False)
        if form_type not in self.form_types:
            return None

        try:
            fields = self.reader.read(line)
        except IndexParsingError as e:
            e.line_number = line_number
            e.context["line_number"] = line_number
            raise

        raw_cik = fields["cik"]
        if not CIK_PATTERN.fullmatch(raw_cik):
            raise IndexParsingError(
                f"invalid CIK {raw_cik!r}", line_number=line_number, line=_text(line),
            )

        try:
            date_filed = parse_filing_date(fields["date_filed"])
        except ValueError as e:
            raise IndexParsingError(
                f"invalid filing date {fields['date_filed']!r}: {e}",
                line_number=line_number,
                line=_text(line),
            ) from e

        try:
            accession_number = accession_from_path(fields["file_name"])
        except ValueError as e:
            raise IndexParsingError(str(e), line_number=line_number, line=_text(line)) from e

        return IndexEntry(
            form_type=form_type,
            company_name=fields["company_name"],
            cik=int(raw_cik),
            date_filed=date_filed,
            accession_number=accession_number,
        )

    def iter_entries(self, stream: IO) -> Iterator[IndexEntry]:
        """
        Yield entries in file order, starting at the stream's current position.

        The first HEADER_LINES lines read are skipped.
        """
        kept = 0
        filtered = 0
        line_number = 0

        for line in stream:
            line_number += 1
            if line_number <= HEADER_LINES:
                continue

            entry = self.parse_line(line, line_number)
            if entry is None:
                filtered += 1
                continue

            kept += 1
            yield entry

        logger.debug(
            f"Index scan complete: {line_number} lines, {kept} entries kept, {filtered} filtered"
        )


def _text(line: Line) -> str:
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    return line.rstrip("\r\n")


def iter_index(stream: IO, form_types: Collection[str] = RETAINED_FORM_TYPES) -> Iterator[IndexEntry]:
    """Yield IndexEntry records from a full-text index stream."""
    return IndexParser(form_types).iter_entries(stream)


def process_index(stream: IO, form_types: Collection[str] = RETAINED_FORM_TYPES) -> list[IndexEntry]:
    """
    Read the index stream and return the 10-K and 10-Q entries.

    The stream is not closed after processing.
    """
    return list(iter_index(stream, form_types))
