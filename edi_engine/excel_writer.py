"""
Excel writer module for exporting parsed EDI documents.
One workbook per document, for operations staff reviewing vendor traffic.
"""
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Font

from .code_tables import DEFAULT_CODE_TABLES, CodeTables
from .logger import get_logger
from .models import ParseResult

HEADER_FONT = Font(bold=True)
TITLE_FONT = Font(bold=True, size=14)

_HEADER_FIELDS = {
    "850": [
        ("PO Number", "po_number"),
        ("PO Date", "po_date"),
        ("Purpose", "purpose"),
        ("Order Type", "order_type"),
        ("Delivery Date", "delivery_date"),
    ],
    "855": [
        ("PO Number", "po_number"),
        ("PO Date", "po_date"),
        ("Purpose", "purpose"),
        ("Ack Type", "ack_type"),
        ("Ack Date", "ack_date"),
    ],
    "810": [
        ("Invoice Number", "invoice_number"),
        ("Invoice Date", "invoice_date"),
        ("PO Number", "po_number"),
        ("PO Date", "po_date"),
        ("Total Amount (TDS)", "total_amount"),
    ],
}

_PARTY_COLUMNS = [
    "Role", "Role Description", "Name", "ID Qualifier", "Identifier",
    "Address 1", "Address 2", "City", "State", "Zip", "Country",
]

_LINE_COLUMNS = [
    "Line", "Vendor SKU", "Buyer SKU", "Description", "Quantity", "UOM",
    "UOM Description", "Unit Price", "Price Basis",
]

_ACK_COLUMNS = ["Status", "Status Description", "Confirmed Date"]


def write_document_workbook(
    result: ParseResult,
    output_dir: Union[str, Path],
    tables: CodeTables = DEFAULT_CODE_TABLES,
) -> str:
    """
    Write a parsed document to a new workbook.

    Args:
        result: ParseResult from parse_x12
        output_dir: Directory for the workbook (created if missing)
        tables: Code tables used for code descriptions

    Returns:
        Path of the written .xlsx file
    """
    logger = get_logger()
    document = result.document

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    identifier = getattr(document, "invoice_number", None) or document.po_number or "unnumbered"
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_file = output_path / f"edi_{document.doc_type}_{_safe_name(identifier)}_{timestamp}.xlsx"

    wb = Workbook()
    _write_header_sheet(wb.active, result)
    _write_parties_sheet(wb.create_sheet("Parties"), result, tables)
    _write_line_items_sheet(wb.create_sheet("Line Items"), result, tables)
    _write_segments_sheet(wb.create_sheet("Segments"), result)
    create_summary_sheet(wb.create_sheet("Summary"), result)

    wb.save(output_file)
    logger.info(f"Excel export written: {output_file}")
    return str(output_file)


def _write_header_sheet(ws, result: ParseResult) -> None:
    ws.title = "Header"
    document = result.document
    ws["A1"] = f"EDI {document.doc_type}"
    ws["A1"].font = TITLE_FONT

    for row, (label, attr) in enumerate(_HEADER_FIELDS[document.doc_type], start=3):
        ws.cell(row=row, column=1, value=label).font = HEADER_FONT
        _write_value(ws, row, 2, getattr(document, attr))


def _write_parties_sheet(ws, result: ParseResult, tables: CodeTables) -> None:
    _write_column_headers(ws, _PARTY_COLUMNS)
    for row, party in enumerate(result.document.parties(), start=2):
        values = [
            party.qualifier,
            tables.describe("party_roles", party.qualifier),
            party.name,
            party.identification_code_qualifier,
            party.identifier_code,
            party.address1,
            party.address2,
            party.city,
            party.state,
            party.zip_code,
            party.country,
        ]
        _write_row(ws, row, values)


def _write_line_items_sheet(ws, result: ParseResult, tables: CodeTables) -> None:
    is_ack = result.doc_type == "855"
    _write_column_headers(ws, _LINE_COLUMNS + (_ACK_COLUMNS if is_ack else []))

    for row, item in enumerate(result.document.line_items, start=2):
        values = [
            item.line_number,
            item.vendor_sku,
            item.buyer_sku,
            item.description,
            item.quantity,
            item.uom,
            tables.describe("units_of_measure", item.uom),
            item.unit_price,
            item.price_basis,
        ]
        if is_ack:
            values += [
                item.status,
                tables.describe("ack_statuses", item.status),
                item.confirmed_date,
            ]
        _write_row(ws, row, values)


def _write_segments_sheet(ws, result: ParseResult) -> None:
    """One row per segment; element references (BEG03) with their values."""
    _write_column_headers(ws, ["Position", "Segment", "Elements"])
    for row, segment in enumerate(result.segments, start=2):
        tag = segment[0]
        refs = [
            f"{tag}{i:02d}={value}"
            for i, value in enumerate(segment[1:], 1)
            if value
        ]
        _write_row(ws, row, [row - 2, tag, "  ".join(refs)])


def create_summary_sheet(ws, result: ParseResult) -> None:
    """
    Fill the summary sheet: counts, declared control totals and warnings.
    """
    ws["A1"] = "Processing Summary"
    ws["A1"].font = TITLE_FONT

    metrics = [
        ("Document Type", result.doc_type),
        ("Segments", len(result.segments)),
        ("Line Items", result.line_count),
        ("Declared Line Count (CTT)", _cell(result.declared_line_count)),
        ("Warnings", len(result.warnings)),
        ("Timestamp", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
    ]
    total_amount = getattr(result.document, "total_amount", None)
    if total_amount is not None:
        metrics.insert(4, ("Declared Total Amount (TDS)", total_amount))

    for idx, (metric, value) in enumerate(metrics, start=3):
        ws[f"A{idx}"] = metric
        ws[f"B{idx}"] = value

    if result.warnings:
        start = len(metrics) + 4
        ws.cell(row=start, column=1, value="Warnings").font = HEADER_FONT
        for offset, warning in enumerate(result.warnings, start=1):
            ws.cell(row=start + offset, column=1, value=type(warning).__name__)
            _write_value(ws, start + offset, 2, str(warning))


def _write_column_headers(ws, headers: List[str]) -> None:
    for col, header in enumerate(headers, start=1):
        ws.cell(row=1, column=col, value=header).font = HEADER_FONT


def _write_row(ws, row: int, values: List[Any]) -> None:
    for col, value in enumerate(values, start=1):
        _write_value(ws, row, col, value)


def _write_value(ws, row: int, column: int, value: Any) -> None:
    """Write vendor data; strings are always stored as text, never as formulas."""
    cell = ws.cell(row=row, column=column, value=_cell(value))
    if isinstance(cell.value, str):
        cell.data_type = "s"


def _cell(value: Any) -> Optional[Any]:
    """openpyxl stores Decimal as float; keep the exact text instead."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, str)):
        return value
    return str(value)


def _safe_name(value: str) -> str:
    return "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in value)
