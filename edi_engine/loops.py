"""
Loop state machine shared by the 850/855/810 extractors.

X12 has no explicit loop markers: an N1 opens a party loop that owns the
following N3/N4, a PO1/IT1 opens a line item that owns the following
PID/ACK/DTM. LoopCursor tracks which loop is open and refuses segments that
the open loop cannot own, so nothing is attributed to the wrong party or line.

    Header --N1--> InPartyLoop --PO1/IT1--> InLineItemLoop --N1--> InPartyLoop
                                                              (end) --> Done
"""
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .code_tables import CodeTables
from .exceptions import EdiError, MalformedSegmentError, UnexpectedSegmentError
from .logger import get_logger
from .models import PARTY_SLOTS, Party
from .tokenizer import element

LINE_ITEM_TAGS = ("PO1", "IT1")
PARTY_TAGS = ("N1", "N3", "N4")


class LoopState(Enum):
    HEADER = "Header"
    IN_PARTY_LOOP = "InPartyLoop"
    IN_LINE_ITEM_LOOP = "InLineItemLoop"
    DONE = "Done"


def parse_decimal(value: str, segment_id: str, position: int, field_name: str) -> Optional[Decimal]:
    """Read an R (decimal) element; '' means not sent."""
    if value == "":
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise MalformedSegmentError(f"{field_name} is not numeric: '{value}'", segment_id, position)
    if not number.is_finite():
        raise MalformedSegmentError(f"{field_name} is not numeric: '{value}'", segment_id, position)
    return number


def parse_int(value: str, segment_id: str, position: int, field_name: str) -> Optional[int]:
    """Read an N0 (integer) element; '' means not sent."""
    if value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise MalformedSegmentError(f"{field_name} is not an integer: '{value}'", segment_id, position)


class LoopCursor:
    """
    Walks one transaction set and collects its parties and line items.

    The document-specific extractor feeds every segment to consume() first;
    anything the cursor does not own (header, DTM, ACK, CTT, TDS) is left to
    the extractor, which asks the cursor for the open line item when needed.
    """

    def __init__(self, line_tag: str, tables: CodeTables, strict_qualifiers: bool = False):
        self.line_tag = line_tag
        self.tables = tables
        self.strict_qualifiers = strict_qualifiers
        self.state = LoopState.HEADER
        self.warnings: List[EdiError] = []
        self.logger = get_logger()

        self._header_seen = False
        self._parties: List[Tuple[str, Dict[str, Any]]] = []
        self._items: List[Dict[str, Any]] = []
        self._party: Optional[Dict[str, Any]] = None
        self._item: Optional[Dict[str, Any]] = None

    # ------------------------------------------------------------------ header

    def open_header(self, segment: List[str], position: int) -> None:
        if self._header_seen or position != 0:
            raise UnexpectedSegmentError("Header segment must appear exactly once, first", segment[0], position)
        self._header_seen = True

    # ------------------------------------------------------------------ routing

    def consume(self, segment: List[str], position: int) -> bool:
        """
        Handle party and line-item loop segments.

        Returns:
            True if the segment was consumed, False if the caller must handle it.
        """
        tag = segment[0]
        if tag == "N1":
            self._open_party(segment, position)
        elif tag == "N3":
            party = self._require_party(tag, position)
            party["address1"] = element(segment, 1) or None
            party["address2"] = element(segment, 2) or None
        elif tag == "N4":
            party = self._require_party(tag, position)
            party["city"] = element(segment, 1) or None
            party["state"] = element(segment, 2) or None
            party["zip_code"] = element(segment, 3) or None
            party["country"] = element(segment, 4) or None
        elif tag == self.line_tag:
            self._open_line_item(segment, position)
        elif tag in LINE_ITEM_TAGS:
            raise UnexpectedSegmentError(f"{tag} is not valid here, expected {self.line_tag}", tag, position)
        elif tag == "PID":
            self._describe_item(segment, position)
        else:
            return False
        return True

    def require_item(self, tag: str, position: int) -> Dict[str, Any]:
        """Open line item, or UnexpectedSegmentError if none is open."""
        if self.state != LoopState.IN_LINE_ITEM_LOOP or self._item is None:
            raise UnexpectedSegmentError(f"{tag} outside of a {self.line_tag} loop", tag, position)
        return self._item

    def check_qualifier(self, table: str, code: str, segment_id: str, position: int) -> None:
        """Raise or record an unknown code depending on the qualifier policy."""
        error = self.tables.check(table, code, segment_id, position)
        if error is None:
            return
        if self.strict_qualifiers:
            raise error
        self.logger.warning(f"{error} - keeping raw code")
        self.warnings.append(error)

    # ------------------------------------------------------------------ party loop

    def _open_party(self, segment: List[str], position: int) -> None:
        qualifier = element(segment, 1)
        if not qualifier:
            raise MalformedSegmentError("N1 without entity identifier code", "N1", position)
        self.check_qualifier("party_roles", qualifier, "N1", position)

        self._party = {
            "qualifier": qualifier,
            "name": element(segment, 2),
            "identification_code_qualifier": element(segment, 3) or None,
            "identifier_code": element(segment, 4) or None,
        }
        self._parties.append((qualifier, self._party))
        self._item = None
        self.state = LoopState.IN_PARTY_LOOP
        self.logger.debug(f"[{position}] N1 opened party {qualifier}")

    def _require_party(self, tag: str, position: int) -> Dict[str, Any]:
        if self.state != LoopState.IN_PARTY_LOOP or self._party is None:
            raise UnexpectedSegmentError(f"{tag} outside of an N1 loop", tag, position)
        return self._party

    # ------------------------------------------------------------------ line item loop

    def _open_line_item(self, segment: List[str], position: int) -> None:
        tag = segment[0]
        uom = element(segment, 3)
        self.check_qualifier("units_of_measure", uom, tag, position)

        item: Dict[str, Any] = {
            "line_number": element(segment, 1),
            "quantity": parse_decimal(element(segment, 2), tag, position, "quantity"),
            "uom": uom or "EA",
            "unit_price": parse_decimal(element(segment, 4), tag, position, "unit price"),
            "price_basis": element(segment, 5) or None,
        }

        # Product ID pairs start at element 6: qualifier, value, qualifier, value...
        for idx in range(6, len(segment) - 1, 2):
            qualifier, value = segment[idx], segment[idx + 1]
            slot = self.tables.product_id_qualifiers.get(qualifier)
            if slot is None:
                if qualifier or value:
                    self.logger.debug(f"[{position}] {tag} ignoring product ID {qualifier}={value}")
                continue
            key = f"{slot}_sku"
            if value and not item.get(key):
                item[key] = value

        if not item.get("vendor_sku"):
            raise MalformedSegmentError(
                f"Line {item['line_number'] or '?'} has no vendor SKU (VP/VN)", tag, position
            )

        self._items.append(item)
        self._item = item
        self._party = None
        self.state = LoopState.IN_LINE_ITEM_LOOP
        self.logger.debug(f"[{position}] {tag} opened line {item['line_number']} ({item['vendor_sku']})")

    def _describe_item(self, segment: List[str], position: int) -> None:
        item = self.require_item("PID", position)
        description = element(segment, 5) or element(segment, 4)
        if item.get("description"):
            # TODO: confirm with vendors whether repeated PID should be concatenated instead
            self.logger.warning(
                f"[{position}] Line {item['line_number']} has more than one PID, keeping the last one"
            )
        item["description"] = description or None

    # ------------------------------------------------------------------ finish

    def finish(self) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Close the walk.

        Returns:
            (party fields for the document model, line item dicts in segment order)
        """
        self.state = LoopState.DONE
        slots = dict(PARTY_SLOTS)
        party_fields: Dict[str, Any] = {"additional_parties": []}

        for qualifier, data in self._parties:
            party = Party(**data)
            attr = slots.get(qualifier)
            if attr is None:
                party_fields["additional_parties"].append(party)
                continue
            if attr in party_fields:
                self.logger.warning(f"Duplicate N1 loop for {qualifier}, keeping the last one")
            party_fields[attr] = party

        return party_fields, list(self._items)
