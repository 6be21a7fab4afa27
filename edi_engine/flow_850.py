"""
850 Purchase Order: extraction and generation.

    BEG*00*NE*PO123456**20231015~
    DTM*002*20231020~
    N1*ST*Pizza Palace*92*STORE001~ N3*... N4*...
    PO1*1*24*EA*12.50*PE*VP*MOZZ-001*BP*INV-MOZZ~
    PID*F****Mozzarella Cheese 5lb~
    CTT*2~
"""
from typing import List, Tuple

from .code_tables import CodeTables
from .exceptions import EdiError
from .logger import get_logger
from .loops import LoopCursor, LoopState, parse_int
from .models import Edi850PurchaseOrder, LineItem, X12Options
from .segment_writer import description_segment, line_item_segment, party_loop
from .tokenizer import element

HEADER_TAG = "BEG"
LINE_TAG = "PO1"
DELIVERY_QUALIFIERS = ("002", "010")  # 002 Delivery Requested, 010 Requested Ship


def extract(
    segments: List[List[str]],
    tables: CodeTables,
    options: X12Options,
) -> Tuple[Edi850PurchaseOrder, List[EdiError]]:
    """
    Walk an 850 segment list into an Edi850PurchaseOrder.

    Returns:
        (document, warnings collected under lenient qualifier policy)
    """
    logger = get_logger()
    cursor = LoopCursor(LINE_TAG, tables, options.strict_qualifiers)
    header = {}

    for position, segment in enumerate(segments):
        tag = segment[0]
        if cursor.consume(segment, position):
            continue

        if tag == HEADER_TAG:
            cursor.open_header(segment, position)
            header["purpose"] = element(segment, 1) or "00"
            header["order_type"] = element(segment, 2) or "NE"
            header["po_number"] = element(segment, 3)
            header["po_date"] = element(segment, 5)
        elif tag == "DTM":
            qualifier = element(segment, 1)
            if cursor.state != LoopState.IN_LINE_ITEM_LOOP and qualifier in DELIVERY_QUALIFIERS:
                header["delivery_date"] = element(segment, 2) or None
            else:
                logger.debug(f"[{position}] DTM*{qualifier} not mapped for 850 ({cursor.state.value})")
        elif tag == "CTT":
            header["total_lines"] = parse_int(element(segment, 1), tag, position, "CTT line count")
        else:
            logger.debug(f"[{position}] Skipping {tag}")

    party_fields, items = cursor.finish()
    document = Edi850PurchaseOrder(
        **header,
        **party_fields,
        line_items=[LineItem(**item) for item in items],
    )
    return document, cursor.warnings


def generate(document: Edi850PurchaseOrder) -> List[List[str]]:
    """Fixed segment order: BEG, DTM, N1 loops, PO1/PID per line, CTT."""
    segments = [[HEADER_TAG, document.purpose, document.order_type, document.po_number, "", document.po_date]]

    if document.delivery_date:
        segments.append(["DTM", "002", document.delivery_date])

    for party in document.parties():
        segments.extend(party_loop(party))

    for item in document.line_items:
        segments.append(line_item_segment(LINE_TAG, item, default_price_basis="PE"))
        pid = description_segment(item)
        if pid:
            segments.append(pid)

    segments.append(["CTT", str(len(document.line_items))])
    return segments
