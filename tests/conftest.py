"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up environment for testing
os.environ.setdefault("EDGAR_ENV", "test")
os.environ.setdefault("SEC_API_USER_AGENT", "TestSuite test@example.com")


INDEX_HEADER = [
    "Description:           Master Index of EDGAR Dissemination Feed by Form Type",
    "Last Data Received:    September 30, 2023",
    "Comments:              webmaster@sec.gov",
    "Anonymous FTP:         ftp://ftp.sec.gov/edgar/",
    " ",
    " ",
    " ",
    " ",
    "Form Type   Company Name                                                  CIK         Date Filed  File Name",
    "-" * 141,
]


def make_index_line(form_type, company, cik, date_filed, path):
    """Build one fixed-width form.idx data line."""
    return f"{form_type:<12}{company:<62}{cik:<12}{date_filed:<10}  {path}"


@pytest.fixture(scope="session", autouse=True)
def setup_logging():
    """Set up logging for tests."""
    from edgarparse.utils.logger import setup_logging
    setup_logging(log_level="WARNING")


@pytest.fixture
def index_header():
    return list(INDEX_HEADER)


@pytest.fixture
def index_line():
    return make_index_line


@pytest.fixture
def sample_index_text():
    """Header plus one 10-K and one 8-K line."""
    lines = INDEX_HEADER + [
        make_index_line(
            "10-K", "APPLE INC", "320193", "2023-11-03",
            "edgar/data/320193/0000320193-23-000106.txt",
        ),
        make_index_line(
            "8-K", "APPLE INC", "320193", "2023-11-02",
            "edgar/data/320193/0000320193-23-000104.txt",
        ),
    ]
    return "\n".join(lines) + "\n"


SAMPLE_INSTANCE = b"""<?xml version="1.0" encoding="UTF-8"?>
<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance"
            xmlns:dei="http://xbrl.sec.gov/dei/2023"
            xmlns:us-gaap="http://fasb.org/us-gaap/2023"
            xmlns:xbrldi="http://xbrl.org/2006/xbrldi"
            xmlns:iso4217="http://www.xbrl.org/2003/iso4217">
  <xbrli:context id="c-1">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000320193</xbrli:identifier>
    </xbrli:entity>
    <xbrli:period>
      <xbrli:startDate>2022-09-25</xbrli:startDate>
      <xbrli:endDate>2023-09-30</xbrli:endDate>
    </xbrli:period>
  </xbrli:context>
  <xbrli:context id="c-seg">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000320193</xbrli:identifier>
      <xbrli:segment>
        <xbrldi:explicitMember dimension="us-gaap:StatementBusinessSegmentsAxis">aapl:AmericasSegmentMember</xbrldi:explicitMember>
      </xbrli:segment>
    </xbrli:entity>
    <xbrli:period>
      <xbrli:instant>2023-09-30</xbrli:instant>
    </xbrli:period>
  </xbrli:context>
  <xbrli:context id="c-scn">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000320193</xbrli:identifier>
    </xbrli:entity>
    <xbrli:period>
      <xbrli:instant>2023-09-30</xbrli:instant>
    </xbrli:period>
    <xbrli:scenario>
      <xbrldi:explicitMember dimension="us-gaap:RestatementAxis">us-gaap:ScenarioPreviouslyReportedMember</xbrldi:explicitMember>
    </xbrli:scenario>
  </xbrli:context>
  <xbrli:context id="c-plain">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000320193</xbrli:identifier>
    </xbrli:entity>
    <xbrli:period>
      <xbrli:instant>2023-09-30</xbrli:instant>
    </xbrli:period>
  </xbrli:context>
  <xbrli:context id="c-prior">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000320193</xbrli:identifier>
    </xbrli:entity>
    <xbrli:period>
      <xbrli:instant>2022-09-24</xbrli:instant>
    </xbrli:period>
  </xbrli:context>
  <xbrli:context id="c-other">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000789019</xbrli:identifier>
    </xbrli:entity>
    <xbrli:period>
      <xbrli:instant>2023-09-30</xbrli:instant>
    </xbrli:period>
  </xbrli:context>
  <xbrli:unit id="usd">
    <xbrli:measure>iso4217:USD</xbrli:measure>
  </xbrli:unit>
  <dei:EntityCentralIndexKey contextRef="c-1">0000320193</dei:EntityCentralIndexKey>
  <dei:EntityRegistrantName contextRef="c-1">Apple Inc.</dei:EntityRegistrantName>
  <dei:DocumentFiscalYearFocus contextRef="c-1">2023</dei:DocumentFiscalYearFocus>
  <dei:EntityCommonStockSharesOutstanding contextRef="c-1" decimals="INF">15552752000</dei:EntityCommonStockSharesOutstanding>
  <us-gaap:Revenues contextRef="c-1" unitRef="usd" decimals="-6">383285000000</us-gaap:Revenues>
  <us-gaap:Assets contextRef="c-seg" unitRef="usd" decimals="-6">167045000000</us-gaap:Assets>
  <us-gaap:Assets contextRef="c-scn" unitRef="usd" decimals="-6">350000000000</us-gaap:Assets>
  <us-gaap:Assets contextRef="c-plain" unitRef="usd" decimals="-6">352583000000</us-gaap:Assets>
  <us-gaap:Assets contextRef="c-prior" unitRef="usd" decimals="-6">352755000000</us-gaap:Assets>
  <us-gaap:Assets contextRef="c-other" unitRef="usd" decimals="-6">411976000000</us-gaap:Assets>
  <us-gaap:Liabilities contextRef="c-plain" unitRef="usd" decimals="-6">290437000000</us-gaap:Liabilities>
  <us-gaap:StockholdersEquity contextRef="c-plain" unitRef="usd" decimals="-6"></us-gaap:StockholdersEquity>
  <us-gaap:CommonStockSharesOutstanding contextRef="c-plain" decimals="-3">15550061000</us-gaap:CommonStockSharesOutstanding>
  <us-gaap:AccountsPayableCurrent contextRef="c-plain" unitRef="usd" decimals="-6">1,234</us-gaap:AccountsPayableCurrent>
</xbrli:xbrl>
"""


@pytest.fixture
def sample_instance_bytes():
    return SAMPLE_INSTANCE


@pytest.fixture
def sample_document(sample_instance_bytes):
    from edgarparse.parsers.xbrl_document import XBRLDocument
    return XBRLDocument.parse(sample_instance_bytes)
