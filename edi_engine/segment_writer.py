"""
Segment rendering helpers shared by the per-document generators.

Generators build segments as element lists; join_segments() turns them into
wire text using the configured delimiters.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from .exceptions import MalformedSegmentError
from .models import LineItem, Party, X12Options

TWO_PLACES = Decimal("0.01")


def format_quantity(quantity: Optional[Decimal]) -> str:
    """24 -> '24', 2.50 -> '2.5', None -> ''."""
    if quantity is None:
        return ""
    quantity = Decimal(quantity)
    if quantity == quantity.to_integral_value():
        return str(int(quantity))
    return format(quantity.normalize(), "f")


def format_price(price: Optional[Decimal]) -> str:
    """Always two decimal places: 12.5 -> '12.50'."""
    if price is None:
        return ""
    return str(Decimal(price).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def trim_trailing(elements: List[str]) -> List[str]:
    """Drop trailing empty elements; interior empties keep later positions aligned."""
    end = len(elements)
    while end > 1 and elements[end - 1] == "":
        end -= 1
    return elements[:end]


def party_loop(party: Party) -> List[List[str]]:
    """N1 [+ N3] [+ N4] for one party."""
    segments = [[
        "N1",
        party.qualifier,
        party.name,
        party.identification_code_qualifier or ("92" if party.identifier_code else ""),
        party.identifier_code or "",
    ]]
    if party.address1 or party.address2:
        segments.append(["N3", party.address1 or "", party.address2 or ""])
    if party.city or party.state or party.zip_code or party.country:
        segments.append(["N4", party.city or "", party.state or "", party.zip_code or "", party.country or ""])
    return segments


def line_item_segment(tag: str, item: LineItem, default_price_basis: str = "") -> List[str]:
    """PO1/IT1 with positional quantity/UOM/price followed by VP and BP pairs."""
    price_basis = item.price_basis
    if price_basis is None:
        price_basis = default_price_basis if item.unit_price is not None else ""

    elements = [
        tag,
        item.line_number,
        format_quantity(item.quantity),
        item.uom,
        format_price(item.unit_price),
        price_basis,
        "VP",
        item.vendor_sku,
    ]
    if item.buyer_sku:
        elements.extend(["BP", item.buyer_sku])
    return elements


def description_segment(item: LineItem) -> Optional[List[str]]:
    """PID*F****<description> (free-form description in PID-05)."""
    if not item.description:
        return None
    return ["PID", "F", "", "", "", item.description]


def join_segments(segments: List[List[str]], options: X12Options) -> str:
    """
    Serialize element lists, terminating every segment.

    Raises:
        MalformedSegmentError: an element value contains one of the delimiters
    """
    delimiters = (options.segment_terminator, options.element_separator, options.composite_separator)
    suffix = options.segment_terminator + ("\n" if options.line_breaks else "")

    lines = []
    for position, segment in enumerate(segments):
        for value in segment:
            if any(d in value for d in delimiters):
                raise MalformedSegmentError(
                    f"Element value contains a delimiter: '{value}'", segment[0], position
                )
        lines.append(options.element_separator.join(trim_trailing(segment)) + suffix)
    return "".join(lines)
