"""
XBRL instance document handle and reporting-context resolution.

An instance declares many contexts for the same entity and period: one
plain context for the headline values and dimensionally qualified ones
(segment/scenario) for breakdowns. Facts are only meaningful once the
right context id is known.
"""

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import IO, Optional, Union

from lxml import etree

from ..core.base_types import CIK, DateLike, PeriodType
from ..core.exceptions import ContextNotFoundError, XBRLParsingError
from ..utils.logger import get_logger

logger = get_logger("edgarparse.parsers.xbrl_document")

XBRLI_NS = "http://www.xbrl.org/2003/instance"

# Cover-page concept carrying the filer's CIK
ENTITY_CIK_TAG = "dei:EntityCentralIndexKey"


@dataclass(frozen=True)
class Context:
    """A reporting context declared in an instance document."""
    id: str
    entity_scheme: Optional[str]
    entity_identifier: Optional[str]
    period_type: PeriodType
    instant: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_dimensional: bool = False


def _xbrli(local: str) -> str:
    return f"{{{XBRLI_NS}}}{local}"


def _text(element) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _pad_cik(cik: CIK) -> str:
    return f"{int(cik):010d}"


def _date_string(value: DateLike) -> str:
    # Contexts carry dates only, so a timestamp is compared by its day
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    return value.strip()


class XBRLDocument:
    """
    Parsed XBRL instance, read-only after construction.

    Concurrent queries against one handle are safe; nothing mutates the tree.
    """

    def __init__(self, root) -> None:
        self._root = root
        self._nsmap = {prefix: uri for prefix, uri in root.nsmap.items()}

    @classmethod
    def parse(cls, source: Union[IO, bytes, str, Path]) -> "XBRLDocument":
        """
        Parse an instance document from a stream, raw bytes or a file path.

        Raises:
            XBRLParsingError: The input is not well-formed XML.
        """
        parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
        try:
            if isinstance(source, bytes):
                root = etree.fromstring(source, parser)
            elif isinstance(source, (str, Path)):
                root = etree.parse(str(source), parser).getroot()
            else:
                root = etree.parse(source, parser).getroot()
        except (etree.XMLSyntaxError, OSError) as e:
            raise XBRLParsingError(f"failed to parse XBRL instance: {e}") from e

        if root is None:
            raise XBRLParsingError("failed to parse XBRL instance: empty document")
        return cls(root)

    @property
    def root(self):
        return self._root

    @property
    def nsmap(self) -> dict:
        """Prefixes declared on the document root."""
        return dict(self._nsmap)

    def qualify(self, tag: str) -> Optional[str]:
        """
        Turn a ``prefix:Local`` concept name into Clark notation.

        Returns None when the prefix is not declared on the root, meaning no
        element of that name can exist in the document.
        """
        if tag.startswith("{"):
            return tag
        if ":" in tag:
            prefix, local = tag.split(":", 1)
            uri = self._nsmap.get(prefix)
            if uri is None:
                return None
            return f"{{{uri}}}{local}"
        uri = self._nsmap.get(None)
        return f"{{{uri}}}{tag}" if uri else tag

    def contexts(self) -> list[Context]:
        """All declared contexts in document order."""
        return [self._build_context(element) for element in self._root.iter(_xbrli("context"))]

    def _build_context(self, element) -> Context:
        identifier = element.find(f"{_xbrli('entity')}/{_xbrli('identifier')}")
        period = element.find(_xbrli("period"))

        instant = start_date = end_date = None
        period_type: PeriodType = "forever"
        if period is not None:
            instant_el = period.find(_xbrli("instant"))
            if instant_el is not None:
                period_type = "instant"
                instant = _text(instant_el)
            elif period.find(_xbrli("endDate")) is not None:
                period_type = "duration"
                start_date = _text(period.find(_xbrli("startDate"))) or None
                end_date = _text(period.find(_xbrli("endDate")))

        is_dimensional = (
            next(element.iter(_xbrli("segment")), None) is not None
            or next(element.iter(_xbrli("scenario")), None) is not None
        )

        return Context(
            id=element.get("id", ""),
            entity_scheme=identifier.get("scheme") if identifier is not None else None,
            entity_identifier=_text(identifier) if identifier is not None else None,
            period_type=period_type,
            instant=instant,
            start_date=start_date,
            end_date=end_date,
            is_dimensional=is_dimensional,
        )

    def find_context(self, cik: CIK) -> str:
        """
        Find the main context using the cover-page CIK element.

        Dimensional qualifiers are not checked in this mode.

        Raises:
            ContextNotFoundError: No EntityCentralIndexKey fact carries the CIK.
        """
        target = _pad_cik(cik)
        qualified = self.qualify(ENTITY_CIK_TAG)
        if qualified is not None:
            for element in self._root.iter(qualified):
                context_ref = element.get("contextRef")
                if _text(element) == target and context_ref:
                    return context_ref

        raise ContextNotFoundError(
            f"no context found for cik {target}", {"cik": target},
        )

    def find_instant_context(self, cik: CIK, instant: DateLike) -> str:
        """
        Find the plain context for an entity at a reporting instant.

        A context matches when its entity identifier equals the zero-padded
        CIK, it has neither segment nor scenario, and its instant equals the
        target date. The first match in document order wins.

        Raises:
            ContextNotFoundError: No context matches.
        """
        target = _pad_cik(cik)
        target_instant = _date_string(instant)

        for context in self.contexts():
            if context.entity_identifier != target:
                continue
            if context.is_dimensional:
                continue
            if context.period_type == "instant" and context.instant == target_instant:
                return context.id

        raise ContextNotFoundError(
            f"no context found for entity {target} at instant {target_instant}",
            {"cik": target, "instant": target_instant},
        )

    def find_element(self, tag: str, context_id: str):
        """First element named ``tag`` whose contextRef is ``context_id``, or None."""
        qualified = self.qualify(tag)
        if qualified is None:
            return None
        for element in self._root.iter(qualified):
            if element.get("contextRef") == context_id:
                return element
        return None

    def unpack(self, target, cik: CIK, instant: Optional[DateLike] = None, schema=None) -> None:
        """Populate ``target`` in place; see :func:`edgarparse.parsers.xbrl_unpacker.unpack`."""
        from .xbrl_unpacker import unpack

        unpack(self, target, cik, instant=instant, schema=schema)
