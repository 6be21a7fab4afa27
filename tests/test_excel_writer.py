"""Tests for the Excel export."""

from pathlib import Path

from openpyxl import load_workbook

from edi_engine.edi_parser import parse_x12
from edi_engine.excel_writer import write_document_workbook


class TestWriteDocumentWorkbook:
    """Tests for write_document_workbook."""

    def test_sheets(self, tmp_path, sample_850_text):
        """Should write the five review sheets."""
        output = write_document_workbook(parse_x12(sample_850_text), tmp_path / "out")
        assert Path(output).exists()
        assert Path(output).name.startswith("edi_850_PO123456_")

        wb = load_workbook(output)
        assert wb.sheetnames == ["Header", "Parties", "Line Items", "Segments", "Summary"]

    def test_header_and_lines(self, tmp_path, sample_850_text):
        """Should export header fields and line items with code descriptions."""
        wb = load_workbook(write_document_workbook(parse_x12(sample_850_text), tmp_path))

        header = {row[0]: row[1] for row in wb["Header"].iter_rows(min_row=3, values_only=True)}
        assert header["PO Number"] == "PO123456"
        assert header["Delivery Date"] == "20231020"

        lines = list(wb["Line Items"].iter_rows(min_row=2, values_only=True))
        assert len(lines) == 2
        assert lines[0][:8] == ("1", "MOZZ-001", "INV-MOZZ", "Mozzarella Cheese 5lb", "24", "EA", "Each", "12.50")

        parties = list(wb["Parties"].iter_rows(min_row=2, values_only=True))
        assert [p[0] for p in parties] == ["ST", "BT"]
        assert parties[0][1] == "Ship To"

    def test_acknowledgement_columns(self, tmp_path, sample_855_text):
        """Should add status columns for an 855."""
        wb = load_workbook(write_document_workbook(parse_x12(sample_855_text), tmp_path))
        ws = wb["Line Items"]
        assert ws.cell(row=1, column=10).value == "Status"
        assert ws.cell(row=2, column=10).value == "IA"
        assert ws.cell(row=2, column=11).value == "Item Accepted"
        assert ws.cell(row=2, column=12).value == "20231018"

    def test_segments_and_summary(self, tmp_path, sample_810_text):
        """Should list segments with element references and summarize warnings."""
        result = parse_x12(sample_810_text.replace("CTT*2~", "CTT*5~"))
        wb = load_workbook(write_document_workbook(result, tmp_path))

        segments = list(wb["Segments"].iter_rows(min_row=2, values_only=True))
        assert segments[0][1] == "BIG"
        assert "BIG02=INV987654" in segments[0][2]

        summary = {row[0]: row[1] for row in wb["Summary"].iter_rows(min_row=3, max_row=9, values_only=True)}
        assert summary["Line Items"] == 2
        assert summary["Declared Line Count (CTT)"] == 5
        assert summary["Declared Total Amount (TDS)"] == 84000
        assert summary["Warnings"] == 1

    def test_vendor_text_is_never_a_formula(self, tmp_path, sample_850_text):
        """Should store vendor text that starts with '=' as a plain string."""
        formula = '=HYPERLINK("http://x","y")'
        text = sample_850_text.replace("PID*F****Mozzarella Cheese 5lb~", f"PID*F****{formula}~")
        wb = load_workbook(write_document_workbook(parse_x12(text), tmp_path))

        cell = wb["Line Items"].cell(row=2, column=4)
        assert cell.data_type == "s"
        assert cell.value == formula
