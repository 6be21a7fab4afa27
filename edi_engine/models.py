"""
Normalized document model shared by the parser and the generator.

Field names are snake_case; every field also has a camelCase alias so the
JSON exchanged with the order/invoice layer keeps its established shape
(docType, poNumber, lineItems, ...). Both spellings are accepted on input.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .exceptions import EdiError


# Party role -> document attribute, in generation order.
PARTY_SLOTS: Tuple[Tuple[str, str], ...] = (
    ("ST", "ship_to"),
    ("BT", "bill_to"),
    ("VN", "vendor"),
    ("BY", "buyer"),
)


class EdiModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Party(EdiModel):
    """One N1 loop instance (N1 + N3 + N4)."""

    qualifier: str = Field(..., min_length=1, description="Entity identifier code: ST, BT, VN, BY")
    name: str = ""
    identification_code_qualifier: Optional[str] = Field(None, description="N1-03, e.g. 92 (assigned by buyer)")
    identifier_code: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zip")
    country: Optional[str] = None


class LineItem(EdiModel):
    """PO1 (850) / IT1 (810) line with its PID description."""

    line_number: str = ""
    quantity: Optional[Decimal] = None
    uom: str = "EA"
    unit_price: Optional[Decimal] = None
    price_basis: Optional[str] = Field(None, description="PO1-05 / IT1-05, e.g. PE (price per each)")
    vendor_sku: str = Field(..., min_length=1)
    buyer_sku: Optional[str] = None
    description: Optional[str] = None


class AcknowledgementLineItem(LineItem):
    """855 PO1 line plus its ACK status and confirmed date."""

    status: Optional[str] = Field(None, description="ACK-01: IA accepted, IB backordered, ...")
    confirmed_date: Optional[str] = None


class PartyLoops(EdiModel):
    """N1 loop slots common to all three transaction sets."""

    ship_to: Optional[Party] = None
    bill_to: Optional[Party] = None
    vendor: Optional[Party] = None
    buyer: Optional[Party] = None
    additional_parties: List[Party] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_party_roles(self):
        for role, attr in PARTY_SLOTS:
            party = getattr(self, attr)
            if party is not None and party.qualifier != role:
                raise ValueError(f"{attr} must carry qualifier {role}, got {party.qualifier}")
        return self

    def parties(self) -> Iterator[Party]:
        """Yield present parties in generation order."""
        for _role, attr in PARTY_SLOTS:
            party = getattr(self, attr)
            if party is not None:
                yield party
        yield from self.additional_parties


class Edi850PurchaseOrder(PartyLoops):
    doc_type: Literal["850"] = "850"
    purpose: str = "00"  # 00=Original, 01=Cancellation, 04=Change, 05=Replace
    order_type: str = "NE"
    po_number: str = ""
    po_date: str = ""  # CCYYMMDD
    delivery_date: Optional[str] = None
    line_items: List[LineItem] = Field(default_factory=list)
    total_lines: Optional[int] = None  # CTT-01 as declared


class Edi855PoAcknowledgement(PartyLoops):
    doc_type: Literal["855"] = "855"
    purpose: str = "00"
    ack_type: str = "AC"  # AC=Acknowledge with detail and change, RJ=Rejected, ...
    po_number: str = ""
    po_date: str = ""
    ack_date: Optional[str] = None
    line_items: List[AcknowledgementLineItem] = Field(default_factory=list)
    total_lines: Optional[int] = None


class Edi810Invoice(PartyLoops):
    doc_type: Literal["810"] = "810"
    invoice_number: str = ""
    invoice_date: str = ""
    po_number: Optional[str] = None
    po_date: Optional[str] = None
    line_items: List[LineItem] = Field(default_factory=list)
    total_amount: Optional[int] = Field(None, description="TDS-01 in minor units, 84000 = $840.00")
    total_lines: Optional[int] = None


EdiDocument = Union[Edi850PurchaseOrder, Edi855PoAcknowledgement, Edi810Invoice]


# The tokenizer trims these around segments, so they cannot act as delimiters.
# Control characters such as \x1c-\x1f are valid X12 delimiters.
_TRIMMED_CHARACTERS = (" ", "\r", "\n")


class X12Options(BaseModel):
    """Delimiters and qualifier policy, used by both parse and generate."""

    model_config = ConfigDict(frozen=True)

    segment_terminator: str = "~"
    element_separator: str = "*"
    composite_separator: str = ":"
    line_breaks: bool = False
    strict_qualifiers: bool = False

    @model_validator(mode="after")
    def _check_delimiters(self):
        delimiters = (self.segment_terminator, self.element_separator, self.composite_separator)
        for delimiter in delimiters:
            if len(delimiter) != 1 or delimiter.isalnum() or delimiter in _TRIMMED_CHARACTERS:
                raise ValueError(
                    f"Delimiter must be a single non-alphanumeric character other than space, CR or LF, got {delimiter!r}"
                )
        if len(set(delimiters)) != len(delimiters):
            raise ValueError("Segment, element and composite delimiters must differ")
        return self


@dataclass(frozen=True)
class ParseResult:
    """Parsed document together with the segments it came from."""

    document: EdiDocument
    segments: List[List[str]]
    raw: str
    warnings: List[EdiError] = field(default_factory=list)

    @property
    def doc_type(self) -> str:
        return self.document.doc_type

    @property
    def line_count(self) -> int:
        return len(self.document.line_items)

    @property
    def declared_line_count(self) -> Optional[int]:
        return self.document.total_lines
