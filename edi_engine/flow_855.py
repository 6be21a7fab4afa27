"""
855 Purchase Order Acknowledgement: extraction and generation.

    BAK*00*AC*PO123456**20231015~
    DTM*004*20231015~
    PO1*1*24*EA*12.50*PE*VP*MOZZ-001~
    ACK*IA~
    DTM*002*20231018~
    CTT*2~
"""
from typing import List, Tuple

from .code_tables import CodeTables
from .exceptions import EdiError
from .logger import get_logger
from .loops import LoopCursor, LoopState, parse_int
from .models import AcknowledgementLineItem, Edi855PoAcknowledgement, X12Options
from .segment_writer import description_segment, line_item_segment, party_loop
from .tokenizer import element

HEADER_TAG = "BAK"
LINE_TAG = "PO1"
ACK_DATE_QUALIFIER = "004"  # Purchase Order date acknowledged
CONFIRMED_DATE_QUALIFIER = "002"


def extract(
    segments: List[List[str]],
    tables: CodeTables,
    options: X12Options,
) -> Tuple[Edi855PoAcknowledgement, List[EdiError]]:
    """Walk an 855 segment list; ACK and DTM*002 after a PO1 belong to that line."""
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
            header["ack_type"] = element(segment, 2) or "AC"
            header["po_number"] = element(segment, 3)
            header["po_date"] = element(segment, 5)
        elif tag == "ACK":
            item = cursor.require_item(tag, position)
            status = element(segment, 1)
            cursor.check_qualifier("ack_statuses", status, tag, position)
            item["status"] = status or None
        elif tag == "DTM":
            qualifier = element(segment, 1)
            value = element(segment, 2) or None
            if cursor.state == LoopState.IN_LINE_ITEM_LOOP:
                if qualifier == CONFIRMED_DATE_QUALIFIER:
                    cursor.require_item(tag, position)["confirmed_date"] = value
                else:
                    logger.debug(f"[{position}] Line-level DTM*{qualifier} not mapped for 855")
            elif qualifier == ACK_DATE_QUALIFIER:
                header["ack_date"] = value
            else:
                logger.debug(f"[{position}] Header DTM*{qualifier} not mapped for 855")
        elif tag == "CTT":
            header["total_lines"] = parse_int(element(segment, 1), tag, position, "CTT line count")
        else:
            logger.debug(f"[{position}] Skipping {tag}")

    party_fields, items = cursor.finish()
    document = Edi855PoAcknowledgement(
        **header,
        **party_fields,
        line_items=[AcknowledgementLineItem(**item) for item in items],
    )
    return document, cursor.warnings


def generate(document: Edi855PoAcknowledgement) -> List[List[str]]:
    """Fixed segment order: BAK, DTM*004, N1 loops, PO1/PID/ACK/DTM per line, CTT."""
    segments = [[HEADER_TAG, document.purpose, document.ack_type, document.po_number, "", document.po_date]]

    if document.ack_date:
        segments.append(["DTM", ACK_DATE_QUALIFIER, document.ack_date])

    for party in document.parties():
        segments.extend(party_loop(party))

    for item in document.line_items:
        segments.append(line_item_segment(LINE_TAG, item, default_price_basis="PE"))
        pid = description_segment(item)
        if pid:
            segments.append(pid)
        if item.status:
            segments.append(["ACK", item.status])
        if item.confirmed_date:
            segments.append(["DTM", CONFIRMED_DATE_QUALIFIER, item.confirmed_date])

    segments.append(["CTT", str(len(document.line_items))])
    return segments
