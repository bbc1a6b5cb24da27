"""
Positional reader for fixed-width text records.

Splits a line into named byte ranges. The EDGAR full-text index has no
delimiters, so every field is addressed by its offsets.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from ..core.exceptions import RecordTooShortError

Line = Union[str, bytes]


@dataclass(frozen=True)
class FieldSpec:
    """A named range [start, end) of a fixed-width line. end=None runs to end of line."""
    name: str
    start: int
    end: Optional[int] = None
    strip: bool = True

    @property
    def min_length(self) -> int:
        """Shortest line that fully contains this range."""
        if self.end is None:
            return self.start + 1
        return self.end


def _chomp(line: Line) -> Line:
    if isinstance(line, bytes):
        return line.rstrip(b"\r\n")
    return line.rstrip("\r\n")


class PositionalRecordReader:
    """
    Extracts named fixed-width fields from text or byte lines.

    For bytes input the offsets are byte offsets and each slice is decoded
    on its own, so multi-byte characters in one field cannot shift another.
    """

    def __init__(self, fields: Iterable[FieldSpec], encoding: str = "utf-8") -> None:
        self.fields = {spec.name: spec for spec in fields}
        self.encoding = encoding
        self.min_length = max((spec.min_length for spec in self.fields.values()), default=0)

    def _slice(self, line: Line, spec: FieldSpec) -> str:
        raw = line[spec.start:spec.end]
        if isinstance(raw, bytes):
            raw = raw.decode(self.encoding, errors="replace")
        return raw.strip() if spec.strip else raw

    def extract(self, line: Line, name: str, strict: bool = True) -> str:
        """
        Return a single field.

        Args:
            line: The record.
            name: Configured field name.
            strict: Raise RecordTooShortError when the line does not cover
                the range. With strict=False a short line yields whatever
                part of the range exists.
        """
        spec = self.fields[name]
        line = _chomp(line)
        if strict and len(line) < spec.min_length:
            raise RecordTooShortError(
                f"line too short for field '{name}': "
                f"need {spec.min_length} characters, got {len(line)}",
                line=_display(line),
            )
        return self._slice(line, spec)

    def read(self, line: Line) -> dict[str, str]:
        """Return every configured field; the line must cover the widest range."""
        line = _chomp(line)
        if len(line) < self.min_length:
            short = [
                name for name, spec in self.fields.items()
                if len(line) < spec.min_length
            ]
            raise RecordTooShortError(
                f"line too short for field(s) {', '.join(short)}: "
                f"need {self.min_length} characters, got {len(line)}",
                line=_display(line),
            )
        return {name: self._slice(line, spec) for name, spec in self.fields.items()}


def _display(line: Line) -> str:
    if isinstance(line, bytes):
        return line.decode("utf-8", errors="replace")
    return line
