"""Tests for XBRL context resolution and record population."""

import io
from dataclasses import dataclass, field
from datetime import date, datetime
from types import SimpleNamespace
from typing import Optional

import pytest

from edgarparse.core.base_types import Int32, Int64
from edgarparse.core.exceptions import (
    ContextNotFoundError,
    FactConversionError,
    LookupMissError,
    ParsingError,
    UnsupportedFieldTypeError,
    UnsupportedTargetError,
    XBRLParsingError,
)
from edgarparse.parsers.xbrl_document import XBRLDocument
from edgarparse.parsers.xbrl_unpacker import (
    FieldBinding,
    FieldKind,
    RecordSchema,
    unpack,
    xbrl_field,
)


@dataclass
class CoverPage:
    registrant: str = xbrl_field("dei:EntityRegistrantName", default="")
    fiscal_year: Int32 = xbrl_field("dei:DocumentFiscalYearFocus")
    shares_outstanding: int = xbrl_field("dei:EntityCommonStockSharesOutstanding")
    revenue: Int64 = xbrl_field("us-gaap:Revenues")


@dataclass
class BalanceSheet:
    assets: int = xbrl_field("us-gaap:Assets")
    liabilities: int = xbrl_field("us-gaap:Liabilities")
    equity: int = xbrl_field("us-gaap:StockholdersEquity")
    goodwill: Optional[int] = xbrl_field("us-gaap:Goodwill", default=None)
    shares: Int64 = xbrl_field("us-gaap:CommonStockSharesOutstanding")
    note: str = "untouched"
    tags: list = field(default_factory=list)


@dataclass
class PayablesRecord:
    assets: int = xbrl_field("us-gaap:Assets")
    payables: int = xbrl_field("us-gaap:AccountsPayableCurrent")


@dataclass
class NarrowAssets:
    assets: Int32 = xbrl_field("us-gaap:Assets")


@dataclass
class RatioRecord:
    ratio: float = xbrl_field("us-gaap:Assets", default=0.0)


@dataclass(frozen=True)
class FrozenRecord:
    assets: int = xbrl_field("us-gaap:Assets")


class TestXBRLDocument:
    """Tests for parsing and context lookup."""

    def test_parse_sources(self, sample_instance_bytes, tmp_path):
        path = tmp_path / "aapl-20230930_htm.xml"
        path.write_bytes(sample_instance_bytes)

        for source in (sample_instance_bytes, io.BytesIO(sample_instance_bytes), path, str(path)):
            document = XBRLDocument.parse(source)
            assert document.find_context(320193) == "c-1"

    def test_malformed_document(self):
        with pytest.raises(XBRLParsingError):
            XBRLDocument.parse(b"<xbrli:xbrl><unclosed>")

    def test_contexts(self, sample_document):
        contexts = {c.id: c for c in sample_document.contexts()}

        assert list(contexts) == ["c-1", "c-seg", "c-scn", "c-plain", "c-prior", "c-other"]
        assert contexts["c-1"].period_type == "duration"
        assert contexts["c-1"].start_date == "2022-09-25"
        assert contexts["c-1"].end_date == "2023-09-30"
        assert contexts["c-plain"].period_type == "instant"
        assert contexts["c-plain"].entity_identifier == "0000320193"
        assert contexts["c-plain"].entity_scheme == "http://www.sec.gov/CIK"
        assert contexts["c-seg"].is_dimensional
        assert contexts["c-scn"].is_dimensional
        assert not contexts["c-plain"].is_dimensional

    def test_find_context_by_entity(self, sample_document):
        assert sample_document.find_context(320193) == "c-1"

    def test_find_context_miss(self, sample_document):
        with pytest.raises(ContextNotFoundError) as exc_info:
            sample_document.find_context(1234)
        assert "0000001234" in str(exc_info.value)
        assert isinstance(exc_info.value, LookupMissError)
        assert not isinstance(exc_info.value, ParsingError)

    def test_find_instant_context_skips_dimensional(self, sample_document):
        # c-seg and c-scn match entity and instant but carry qualifiers
        assert sample_document.find_instant_context(320193, "2023-09-30") == "c-plain"
        assert sample_document.find_instant_context(320193, date(2022, 9, 24)) == "c-prior"
        assert sample_document.find_instant_context(789019, "2023-09-30") == "c-other"

    def test_find_instant_context_accepts_datetime(self, sample_document):
        assert sample_document.find_instant_context(320193, datetime(2023, 9, 30, 16, 30)) == "c-plain"
        assert sample_document.find_instant_context(320193, datetime(2022, 9, 24)) == "c-prior"

    def test_find_context_trims_cik_text(self):
        document = XBRLDocument.parse(b"""<?xml version="1.0"?>
<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance"
            xmlns:dei="http://xbrl.sec.gov/dei/2023">
  <dei:EntityCentralIndexKey contextRef="FY2023">
    0000000042
  </dei:EntityCentralIndexKey>
  <dei:EntityCentralIndexKey contextRef="unpadded">42</dei:EntityCentralIndexKey>
</xbrli:xbrl>""")
        assert document.find_context(42) == "FY2023"
        with pytest.raises(ContextNotFoundError):
            document.find_context(43)

    def test_find_instant_context_ignores_durations(self, sample_document):
        with pytest.raises(ContextNotFoundError):
            sample_document.find_instant_context(320193, "2022-09-25")

    def test_find_instant_context_miss(self, sample_document):
        with pytest.raises(ContextNotFoundError, match="instant 2021-01-01"):
            sample_document.find_instant_context(320193, "2021-01-01")

    def test_instant_mode_never_returns_qualified_context(self):
        document = XBRLDocument.parse(b"""<?xml version="1.0"?>
<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance">
  <xbrli:context id="only-segment">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000000042</xbrli:identifier>
      <xbrli:segment><member/></xbrli:segment>
    </xbrli:entity>
    <xbrli:period><xbrli:instant>2023-12-31</xbrli:instant></xbrli:period>
  </xbrli:context>
</xbrli:xbrl>""")
        with pytest.raises(ContextNotFoundError):
            document.find_instant_context(42, "2023-12-31")

    def test_entity_mode_does_not_filter_dimensions(self):
        document = XBRLDocument.parse(b"""<?xml version="1.0"?>
<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance"
            xmlns:dei="http://xbrl.sec.gov/dei/2023">
  <xbrli:context id="dim">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000000042</xbrli:identifier>
      <xbrli:segment><member/></xbrli:segment>
    </xbrli:entity>
    <xbrli:period><xbrli:instant>2023-12-31</xbrli:instant></xbrli:period>
  </xbrli:context>
  <dei:EntityCentralIndexKey contextRef="dim">0000000042</dei:EntityCentralIndexKey>
</xbrli:xbrl>""")
        assert document.find_context(42) == "dim"

    def test_find_element(self, sample_document):
        element = sample_document.find_element("us-gaap:Assets", "c-prior")
        assert element.text == "352755000000"
        assert sample_document.find_element("us-gaap:Assets", "missing") is None
        assert sample_document.find_element("ifrs-full:Assets", "c-plain") is None


class TestUnpack:
    """Tests for record population."""

    def test_entity_mode(self, sample_document):
        cover = CoverPage()
        sample_document.unpack(cover, 320193)

        assert cover.registrant == "Apple Inc."
        assert cover.fiscal_year == 2023
        assert cover.shares_outstanding == 15552752000
        assert cover.revenue == 383285000000

    def test_instant_mode(self, sample_document):
        sheet = BalanceSheet()
        unpack(sample_document, sheet, 320193, instant="2023-09-30")

        assert sheet.assets == 352583000000
        assert sheet.liabilities == 290437000000
        assert sheet.shares == 15550061000

    def test_missing_and_empty_facts_keep_defaults(self, sample_document):
        sheet = BalanceSheet()
        unpack(sample_document, sheet, 320193, instant="2023-09-30")

        # Goodwill is not reported; equity is reported with empty text
        assert sheet.goodwill is None
        assert sheet.equity == 0
        assert sheet.note == "untouched"
        assert sheet.tags == []

    def test_entity_mode_uses_cover_context(self, sample_document):
        sheet = BalanceSheet()
        unpack(sample_document, sheet, 320193)
        # No balance-sheet facts are reported in the duration context
        assert sheet.assets == 0

    def test_thousands_separator_is_conversion_error(self, sample_document):
        record = PayablesRecord()
        with pytest.raises(FactConversionError) as exc_info:
            unpack(sample_document, record, 320193, instant="2023-09-30")

        assert exc_info.value.context["text"] == "1,234"
        assert exc_info.value.context["field"] == "payables"
        # Nothing is written when any field fails
        assert record.assets == 0
        assert record.payables == 0

    def test_int32_overflow(self, sample_document):
        with pytest.raises(FactConversionError, match="out of range"):
            unpack(sample_document, NarrowAssets(), 320193, instant="2023-09-30")

    def test_unsupported_type(self, sample_document):
        with pytest.raises(UnsupportedFieldTypeError, match="RatioRecord.ratio"):
            RecordSchema.for_record(RatioRecord)
        with pytest.raises(UnsupportedFieldTypeError):
            unpack(sample_document, RatioRecord(), 320193)

    def test_invalid_targets(self, sample_document):
        with pytest.raises(UnsupportedTargetError):
            unpack(sample_document, BalanceSheet, 320193)
        with pytest.raises(UnsupportedTargetError):
            unpack(sample_document, FrozenRecord(), 320193)
        with pytest.raises(UnsupportedTargetError):
            unpack(sample_document, SimpleNamespace(), 320193)

    def test_context_miss_propagates(self, sample_document):
        sheet = BalanceSheet()
        with pytest.raises(ContextNotFoundError):
            unpack(sample_document, sheet, 320193, instant="1999-12-31")
        assert sheet == BalanceSheet()

    def test_explicit_schema(self, sample_document):
        schema = RecordSchema([
            FieldBinding("us-gaap:Assets", "total_assets", FieldKind.INT64),
            FieldBinding("us-gaap:Goodwill", "goodwill", FieldKind.INT64),
        ])
        target = SimpleNamespace(total_assets=0, goodwill=0, label="kept")

        unpack(sample_document, target, 320193, instant="2022-09-24", schema=schema)

        assert target.total_assets == 352755000000
        assert target.goodwill == 0
        assert target.label == "kept"

    def test_schema_is_built_once(self):
        assert RecordSchema.for_record(BalanceSheet) is RecordSchema.for_record(BalanceSheet)
        attributes = [b.attribute for b in RecordSchema.for_record(BalanceSheet)]
        assert attributes == ["assets", "liabilities", "equity", "goodwill", "shares"]

    @pytest.mark.parametrize("raw,kind,expected", [
        ("42", FieldKind.INT32, 42),
        ("-7", FieldKind.INT64, -7),
        ("  15  ", FieldKind.INT64, 15),
        (" text kept ", FieldKind.TEXT, " text kept "),
    ])
    def test_converters(self, raw, kind, expected):
        assert kind.convert(raw) == expected

    @pytest.mark.parametrize("raw", ["1,234", "12.5", "1e6", "1_000", "abc"])
    def test_integer_converter_rejects(self, raw):
        with pytest.raises(ValueError):
            FieldKind.INT64.convert(raw)
