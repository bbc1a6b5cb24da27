"""
SEC EDGAR client.

Fetches full-text indexes, XBRL instance documents and the XBRL JSON APIs.
Every request waits on the shared token-bucket limiter first, and every
non-200 answer is a RequestError; the client never interprets status codes
beyond that.
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import IO, Optional

import requests
from lxml import etree
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..core.base_types import CIK, AccessionNumber
from ..core.exceptions import (
    InstanceNotFoundError,
    RateLimitCancelledError,
    RequestError,
    SECApiError,
    XBRLParsingError,
)
from ..utils.config import get_settings
from ..utils.logger import get_logger, log_operation
from ..utils.rate_limiter import RateLimiter, get_rate_limiter

logger = get_logger("edgarparse.ingestion.sec_api")

CHUNK_SIZE = 64 * 1024

LINKBASE_SUFFIXES = ("_cal", "_def", "_lab", "_pre")


class Quarter(Enum):
    """Calendar quarters as named in the full-index archive."""
    Q1 = "QTR1"
    Q2 = "QTR2"
    Q3 = "QTR3"
    Q4 = "QTR4"

    @classmethod
    def from_number(cls, number: int) -> "Quarter":
        """Quarter 1-4 of the calendar year."""
        if not 1 <= number <= 4:
            raise ValueError(f"quarter must be 1-4, got {number}")
        return list(cls)[number - 1]


class Taxonomy(Enum):
    """XBRL taxonomies served by the company concept and frames APIs."""
    US_GAAP = "us-gaap"
    DEI = "dei"
    IFRS = "ifrs-full"
    SRT = "srt"


@dataclass(frozen=True)
class Period:
    """Frames API period: calendar year, quarter, or quarter-end instant."""
    year: int
    quarter: int = 0
    instant: bool = False

    def __str__(self) -> str:
        if self.instant:
            return f"CY{self.year}Q{self.quarter}I"
        if 0 < self.quarter <= 4:
            return f"CY{self.year}Q{self.quarter}"
        return f"CY{self.year}"


class SECClient:
    """
    Rate-limited SEC EDGAR client.

    Attributes:
        user_agent: User-Agent string required by SEC.
        rate_limiter: Token bucket acquired before each request.
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize SEC client.

        Args:
            user_agent: User-Agent string. Defaults to configuration.
            rate_limiter: Limiter to use. Defaults to the shared instance.
            session: Pre-built session (mainly for tests).
        """
        settings = get_settings()

        self.user_agent = user_agent or settings.sec_api.user_agent
        self.archives_url = settings.sec_api.archives_url.rstrip("/")
        self.data_url = settings.sec_api.data_url.rstrip("/")
        self.timeout = settings.sec_api.timeout
        self.rate_limiter = rate_limiter or get_rate_limiter()

        if session is None:
            session = requests.Session()
            retry_strategy = Retry(
                total=settings.sec_api.max_retries,
                backoff_factor=settings.sec_api.retry_delay_base,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET", "HEAD"],
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self.session = session

        self.session.headers.update({
            "User-Agent": self.user_agent,
            "Accept-Encoding": "gzip, deflate",
        })

        logger.info(f"SEC client initialized with User-Agent: {self.user_agent}")

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _acquire(self, cancel_event: Optional[threading.Event]) -> None:
        if not self.rate_limiter.acquire(cancel_event=cancel_event):
            raise RateLimitCancelledError("rate limiter wait cancelled")

    def _check(self, response: requests.Response, url: str) -> requests.Response:
        if response.status_code != 200:
            response.close()
            raise RequestError(response.status_code, url)
        return response

    def get(
        self,
        url: str,
        stream: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> requests.Response:
        """
        Make a rate-limited GET request.

        Raises:
            RateLimitCancelledError: cancel_event was set while waiting.
            RequestError: SEC answered with a non-200 status.
            SECApiError: Transport failure.
        """
        self._acquire(cancel_event)

        try:
            response = self.session.get(url, stream=stream, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"SEC request failed: {url} - {e}")
            raise SECApiError(f"Request failed: {e}", {"url": url}) from e

        return self._check(response, url)

    def post(
        self,
        url: str,
        data: bytes | str,
        content_type: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> requests.Response:
        """Make a rate-limited POST request."""
        self._acquire(cancel_event)

        try:
            response = self.session.post(
                url,
                data=data,
                headers={"Content-Type": content_type},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"SEC request failed: {url} - {e}")
            raise SECApiError(f"Request failed: {e}", {"url": url}) from e

        return self._check(response, url)

    def _copy(self, url: str, out: IO[bytes]) -> int:
        """Stream the body of ``url`` into ``out``; returns bytes written."""
        written = 0
        with self.get(url, stream=True) as response:
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    out.write(chunk)
                    written += len(chunk)
            except requests.RequestException as e:
                raise SECApiError(f"Download interrupted: {e}", {"url": url}) from e
        return written

    # -------------------------------------------------------------------------
    # Full-text index
    # -------------------------------------------------------------------------

    def index_url(self, year: int, quarter: Quarter | int) -> str:
        """URL of the form-type index for a past quarter."""
        if isinstance(quarter, int):
            quarter = Quarter.from_number(quarter)
        return f"{self.archives_url}/full-index/{year}/{quarter.value}/form.idx"

    def current_index_url(self) -> str:
        """URL of the form-type index for the current quarter."""
        return f"{self.archives_url}/full-index/form.idx"

    def download_index(
        self,
        out: IO[bytes],
        year: Optional[int] = None,
        quarter: Quarter | int | None = None,
        current: bool = False,
    ) -> int:
        """
        Download a form.idx into ``out``.

        With ``current=True`` the running quarter's index is fetched;
        otherwise ``year`` and ``quarter`` select it. The file is flushed
        and rewound to the start when seekable, ready for parsing.

        Returns:
            Number of bytes written.
        """
        if current:
            url = self.current_index_url()
        elif year is None or quarter is None:
            raise ValueError("year and quarter are required unless current=True")
        else:
            url = self.index_url(year, quarter)

        start_time = time.time()
        written = self._copy(url, out)
        out.flush()
        if out.seekable():
            out.seek(0)

        log_operation(
            logger,
            "download_index",
            success=True,
            duration_ms=(time.time() - start_time) * 1000,
            url=url,
            bytes=written,
        )
        return written

    # -------------------------------------------------------------------------
    # XBRL instance documents
    # -------------------------------------------------------------------------

    def filing_base_url(self, cik: CIK, accession_number: AccessionNumber) -> str:
        """Archive folder of one filing."""
        return f"{self.archives_url}/data/{cik:010d}/{accession_number.replace('-', '')}/"

    def get_instance_url(self, cik: CIK, accession_number: AccessionNumber) -> str:
        """
        Locate the XBRL instance of a filing through its FilingSummary.xml.

        A 404 RequestError here usually means the filing has no XBRL.

        Raises:
            InstanceNotFoundError: The summary names no instance document.
        """
        base_url = self.filing_base_url(cik, accession_number)

        response = self.get(base_url + "FilingSummary.xml")
        try:
            summary = etree.fromstring(
                response.content,
                etree.XMLParser(resolve_entities=False, no_network=True),
            )
        except etree.XMLSyntaxError as e:
            raise XBRLParsingError(f"invalid FilingSummary.xml: {e}", {"url": base_url}) from e

        # Inline filings name the instance on the report elements
        report = summary.find(".//MyReports/Report")
        if report is not None:
            instance = report.get("instance")
            if instance and instance.endswith(".htm"):
                return base_url + f"{instance[:-len('.htm')]}_htm.xml"

        instance_file = None
        for element in summary.findall(".//InputFiles/File"):
            name = (element.text or "").strip()
            if name.endswith(".xml") and not name[:-len(".xml")].endswith(LINKBASE_SUFFIXES):
                instance_file = name

        if instance_file is None:
            raise InstanceNotFoundError(
                f"no XBRL instance listed for filing {accession_number}",
                {"cik": cik, "accession_number": accession_number},
            )
        return base_url + instance_file

    def get_report(self, out: IO[bytes], cik: CIK, accession_number: AccessionNumber) -> int:
        """
        Copy the XBRL instance of a filing into ``out``.

        The result can be read with XBRLDocument.parse. Filings without an
        instance document cannot be downloaded.
        """
        url = self.get_instance_url(cik, accession_number)
        logger.debug(f"Downloading XBRL instance {url}")
        return self._copy(url, out)

    # -------------------------------------------------------------------------
    # XBRL JSON APIs
    # -------------------------------------------------------------------------

    def get_concept(self, out: IO[bytes], cik: CIK, taxonomy: Taxonomy, concept: str) -> int:
        """Copy the company concept JSON for one CIK and concept into ``out``."""
        url = f"{self.data_url}/api/xbrl/companyconcept/CIK{cik:010d}/{Taxonomy(taxonomy).value}/{concept}.json"
        return self._copy(url, out)

    def get_facts(self, out: IO[bytes], cik: CIK) -> int:
        """Copy the company facts JSON for one CIK into ``out``."""
        url = f"{self.data_url}/api/xbrl/companyfacts/CIK{cik:010d}.json"
        return self._copy(url, out)

    def get_frame(
        self,
        out: IO[bytes],
        taxonomy: Taxonomy,
        concept: str,
        units: str,
        period: Period,
    ) -> int:
        """Copy the frames JSON (one concept, all filers, one period) into ``out``."""
        url = f"{self.data_url}/api/xbrl/frames/{Taxonomy(taxonomy).value}/{concept}/{units}/{period}.json"
        return self._copy(url, out)

    def close(self) -> None:
        """Close the session."""
        self.session.close()

    def __enter__(self) -> "SECClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
