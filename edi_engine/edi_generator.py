"""
EDI Generator Module
Serializes normalized 850/855/810 documents back to X12 text.
"""
from typing import Any, Dict, Optional, Union

from .code_tables import DEFAULT_CODE_TABLES, CodeTables
from .exceptions import MissingRequiredFieldError
from .logger import get_logger
from .models import EdiDocument, X12Options
from .registry import document_from_data, strategy_for
from .segment_writer import join_segments
from .tokenizer import DEFAULT_OPTIONS


def generate_x12(
    document: Union[EdiDocument, Dict[str, Any]],
    options: Optional[X12Options] = None,
    tables: CodeTables = DEFAULT_CODE_TABLES,
) -> str:
    """
    Generate X12 text for one document.

    Args:
        document: Document model, or normalized JSON (camelCase or snake_case keys)
        options: Delimiters; strict_qualifiers also rejects codes missing from the tables
        tables: Code tables

    Returns:
        Segment text, every segment terminated

    Raises:
        MissingRequiredFieldError: PO / invoice number is empty
        UnknownQualifierError: unknown code under strict policy
        MalformedSegmentError: an element value contains a delimiter
    """
    options = options or DEFAULT_OPTIONS
    logger = get_logger()

    if isinstance(document, dict):
        document = document_from_data(document)

    strategy = strategy_for(document.doc_type)
    identifier = getattr(document, strategy.identifier_field)
    if not identifier:
        raise MissingRequiredFieldError(strategy.identifier_field, strategy.doc_type)

    if options.strict_qualifiers:
        check_codes(document, tables)

    segments = strategy.generate(document)
    text = join_segments(segments, options)

    logger.info(
        f"Generated {strategy.doc_type} {identifier}: {len(segments)} segments, "
        f"{len(document.line_items)} line items"
    )
    return text


def check_codes(document: EdiDocument, tables: CodeTables) -> None:
    """Raise UnknownQualifierError for the first party role, UOM or ACK status not in the tables."""
    for party in document.parties():
        error = tables.check("party_roles", party.qualifier, "N1")
        if error:
            raise error

    strategy = strategy_for(document.doc_type)
    for item in document.line_items:
        error = tables.check("units_of_measure", item.uom, strategy.line_tag)
        if error:
            raise error
        status = getattr(item, "status", None)
        error = tables.check("ack_statuses", status, "ACK")
        if error:
            raise error
