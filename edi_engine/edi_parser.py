"""
EDI Parser Module
Parses X12 850/855/810 transaction sets into normalized documents.
"""
from decimal import Decimal
from typing import List, Optional, Union

from .code_tables import DEFAULT_CODE_TABLES, CodeTables
from .exceptions import UnknownDocumentTypeError, ValidationMismatchError
from .logger import get_logger
from .models import EdiDocument, ParseResult, X12Options
from .registry import strategy_for
from .tokenizer import DEFAULT_OPTIONS, decode_text, parse_segments


def classify_document(segments: List[List[str]], tables: CodeTables = DEFAULT_CODE_TABLES) -> str:
    """
    Determine the transaction set from the first segment's tag.

    Raises:
        UnknownDocumentTypeError: leading tag is not BEG/BAK/BIG
    """
    if not segments:
        raise UnknownDocumentTypeError("No segments to classify")
    tag = segments[0][0]
    doc_type = tables.document_types.get(tag)
    if doc_type is None:
        raise UnknownDocumentTypeError(
            f"Unable to determine EDI document type from leading segment '{tag}'",
            segment_id=tag,
            segment_position=0,
        )
    return doc_type


def check_control_totals(document: EdiDocument) -> List[ValidationMismatchError]:
    """
    Compare declared CTT/TDS values with what the document actually holds.

    Declared values are reported, never corrected: trading partners are known
    to send inaccurate control totals.
    """
    mismatches = []
    actual_lines = len(document.line_items)
    if document.total_lines is not None and document.total_lines != actual_lines:
        mismatches.append(ValidationMismatchError("line count", document.total_lines, actual_lines, "CTT"))

    total_amount = getattr(document, "total_amount", None)
    if total_amount is not None:
        computed = compute_total_minor_units(document)
        if computed is not None and computed != total_amount:
            mismatches.append(ValidationMismatchError("total amount", total_amount, computed, "TDS"))

    return mismatches


def compute_total_minor_units(document: EdiDocument) -> Optional[int]:
    """Sum of quantity x unit price in cents, or None if any line lacks either."""
    total = Decimal("0")
    for item in document.line_items:
        if item.quantity is None or item.unit_price is None:
            return None
        total += item.quantity * item.unit_price
    return int((total * 100).to_integral_value())


def parse_x12(
    text: Union[str, bytes],
    options: Optional[X12Options] = None,
    tables: CodeTables = DEFAULT_CODE_TABLES,
) -> ParseResult:
    """
    Parse one X12 transaction set (no ISA/GS/ST envelope).

    Args:
        text: Raw X12 text
        options: Delimiters and qualifier policy
        tables: Code tables

    Returns:
        ParseResult with the normalized document, its segments, the raw text
        and any warnings (control total mismatches, unknown qualifiers under
        lenient policy)

    Raises:
        MalformedSegmentError: tokenizing or loop attribution failed, or input is not UTF-8
        UnknownDocumentTypeError: leading segment is not BEG/BAK/BIG
        UnknownQualifierError: unknown code under strict policy
    """
    options = options or DEFAULT_OPTIONS
    logger = get_logger()

    text = decode_text(text)
    segments = parse_segments(text, options)
    doc_type = classify_document(segments, tables)
    strategy = strategy_for(doc_type)

    document, warnings = strategy.extract(segments, tables, options)
    warnings = list(warnings)
    for mismatch in check_control_totals(document):
        logger.warning(f"{doc_type} {_identifier(document)}: {mismatch}")
        warnings.append(mismatch)

    logger.info(
        f"Parsed {doc_type} {_identifier(document)}: {len(segments)} segments, "
        f"{len(document.line_items)} line items, {len(warnings)} warnings"
    )
    return ParseResult(document=document, segments=segments, raw=text, warnings=warnings)


def _identifier(document: EdiDocument) -> str:
    return getattr(document, "invoice_number", None) or document.po_number or "<no number>"


def create_edi_summary(segments: List[List[str]]) -> str:
    """
    Create a human-readable summary of a segment list, one element reference
    per line (BEG03: PO123456). Empty elements are left out.
    """
    summary = "EDI Structure Summary:\n\n"
    for position, segment in enumerate(segments):
        seg_id = segment[0]
        summary += f"Segment {position}: {seg_id}\n"
        for i, elem in enumerate(segment[1:], 1):
            if elem and elem.strip():
                summary += f"    {seg_id}{i:02d}: {elem}\n"
    return summary
