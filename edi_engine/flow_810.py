"""
810 Invoice: extraction and generation.

    BIG*20231020*INV987654**PO123456~
    N1*BT*Pizza Palace HQ*92*CORP001~ N3*... N4*...
    IT1*1*24*EA*12.50**VP*MOZZ-001*BP*INV-MOZZ~
    PID*F****Mozzarella Cheese 5lb~
    TDS*84000~
    CTT*2~

TDS-01 is an N2 amount (implied two decimals) and stays in minor units.
"""
from typing import List, Tuple

from .code_tables import CodeTables
from .exceptions import EdiError
from .logger import get_logger
from .loops import LoopCursor, parse_int
from .models import Edi810Invoice, LineItem, X12Options
from .segment_writer import description_segment, line_item_segment, party_loop
from .tokenizer import element

HEADER_TAG = "BIG"
LINE_TAG = "IT1"


def extract(
    segments: List[List[str]],
    tables: CodeTables,
    options: X12Options,
) -> Tuple[Edi810Invoice, List[EdiError]]:
    logger = get_logger()
    cursor = LoopCursor(LINE_TAG, tables, options.strict_qualifiers)
    header = {}

    for position, segment in enumerate(segments):
        tag = segment[0]
        if cursor.consume(segment, position):
            continue

        if tag == HEADER_TAG:
            cursor.open_header(segment, position)
            header["invoice_date"] = element(segment, 1)
            header["invoice_number"] = element(segment, 2)
            header["po_date"] = element(segment, 3) or None
            header["po_number"] = element(segment, 4) or None
        elif tag == "TDS":
            header["total_amount"] = parse_int(element(segment, 1), tag, position, "TDS total amount")
        elif tag == "CTT":
            header["total_lines"] = parse_int(element(segment, 1), tag, position, "CTT line count")
        else:
            logger.debug(f"[{position}] Skipping {tag}")

    party_fields, items = cursor.finish()
    document = Edi810Invoice(
        **header,
        **party_fields,
        line_items=[LineItem(**item) for item in items],
    )
    return document, cursor.warnings


def generate(document: Edi810Invoice) -> List[List[str]]:
    """Fixed segment order: BIG, N1 loops, IT1/PID per line, CTT, TDS."""
    segments = [[
        HEADER_TAG,
        document.invoice_date,
        document.invoice_number,
        document.po_date or "",
        document.po_number or "",
    ]]

    for party in document.parties():
        segments.extend(party_loop(party))

    for item in document.line_items:
        segments.append(line_item_segment(LINE_TAG, item))
        pid = description_segment(item)
        if pid:
            segments.append(pid)

    segments.append(["CTT", str(len(document.line_items))])
    if document.total_amount is not None:
        segments.append(["TDS", str(document.total_amount)])
    return segments
