"""
Smoke check for the X12 mapping: parses and generates the samples in input/
and exits non-zero if any check fails.

    python verify_edi.py
"""
import json
import sys
from decimal import Decimal
from pathlib import Path

from edi_engine.edi_generator import generate_x12
from edi_engine.edi_parser import parse_x12
from edi_engine.exceptions import EdiError

INPUT_DIR = Path(__file__).parent / "input"


def read_sample(name):
    return (INPUT_DIR / name).read_text(encoding="utf-8")


def load_850_json():
    with open(INPUT_DIR / "sample_850.json", "r", encoding="utf-8") as f:
        return json.load(f)


def check(condition, label):
    if not condition:
        raise AssertionError(label)
    print(f"  [OK] {label}")


def verify_850_parsing():
    print("Testing EDI 850 Parsing (X12 -> JSON)...")
    po = parse_x12(read_sample("sample_850.txt")).document

    check(po.doc_type == "850", "Doc type is 850")
    check(po.po_number == "PO123456", "PO number parsed")
    check(po.po_date == "20231015", "PO date parsed")
    check(po.delivery_date == "20231020", "Delivery date parsed")
    check(po.ship_to is not None and po.ship_to.name == "Pizza Palace", "Ship-to name parsed")
    check(po.ship_to.identifier_code == "STORE001", "Ship-to identifier parsed")
    check(po.ship_to.identification_code_qualifier == "92", "Ship-to qualifier parsed")
    check(po.bill_to is not None and po.bill_to.identifier_code == "CORP001", "Bill-to identifier parsed")
    check(po.ship_to.city == "Chicago", "Ship-to city parsed")
    check(len(po.line_items) == 2, "Line items count correct")
    check(po.line_items[0].quantity == 24, "Line 1 quantity correct")
    check(po.line_items[0].vendor_sku == "MOZZ-001", "Line 1 vendor SKU correct")
    check(po.line_items[0].description == "Mozzarella Cheese 5lb", "Line 1 description correct")


def verify_850_generation():
    print("Testing EDI 850 Generation (JSON -> X12)...")
    x12 = generate_x12(load_850_json())

    check("BEG*00*NE*PO123456" in x12, "BEG segment generated")
    check("DTM*002*20231020" in x12, "DTM segment generated")
    check("N1*ST*Pizza Palace" in x12, "Ship-to N1 generated")
    check("PO1*1*24*EA*12.50" in x12, "PO1 line 1 generated")
    check("PID*F****Mozzarella Cheese 5lb" in x12, "PID description generated")
    check("CTT*2" in x12, "CTT line count generated")
    check(x12.endswith("~") and x12.count("~") == 13, "Every segment terminated")


def verify_855_parsing():
    print("Testing EDI 855 Parsing (X12 -> JSON)...")
    ack = parse_x12(read_sample("sample_855.txt")).document

    check(ack.doc_type == "855", "Doc type is 855")
    check(ack.ack_type == "AC", "Ack type parsed")
    check(ack.po_number == "PO123456", "PO number parsed")
    check(ack.ack_date == "20231015", "Ack date parsed")
    check(len(ack.line_items) == 2, "Line items count correct")
    check(ack.line_items[0].status == "IA", "Line 1 status (accepted) parsed")
    check(ack.line_items[0].confirmed_date == "20231018", "Line 1 confirmed date parsed")
    check(ack.line_items[1].status == "IB", "Line 2 status (backordered) parsed")


def verify_810_parsing():
    print("Testing EDI 810 Parsing (X12 -> JSON)...")
    result = parse_x12(read_sample("sample_810.txt"))
    invoice = result.document

    check(invoice.doc_type == "810", "Doc type is 810")
    check(invoice.invoice_number == "INV987654", "Invoice number parsed")
    check(invoice.po_number == "PO123456", "PO reference parsed")
    check(invoice.bill_to is not None and invoice.bill_to.name == "Pizza Palace HQ", "Bill-to name parsed")
    check(len(invoice.line_items) == 2, "Line items count correct")
    check(invoice.total_amount == 84000, "Total amount parsed")
    check(not result.warnings, "Control totals match")


def verify_round_trip():
    print("Testing Round-Trip Conversion (JSON -> X12 -> JSON)...")
    data = load_850_json()
    po = parse_x12(generate_x12(data)).document

    check(po.po_number == data["poNumber"], "PO number survived round-trip")
    check(po.po_date == data["poDate"], "PO date survived round-trip")
    check(po.ship_to.identifier_code == data["shipTo"]["identifierCode"], "Ship-to ID survived round-trip")
    check(po.bill_to.identifier_code == data["billTo"]["identifierCode"], "Bill-to ID survived round-trip")
    check(len(po.line_items) == len(data["lineItems"]), "Line count survived round-trip")
    check(po.line_items[0].vendor_sku == data["lineItems"][0]["vendorSku"], "SKU survived round-trip")
    check(po.line_items[0].unit_price == Decimal("12.50"), "Unit price survived round-trip")


SCENARIOS = [
    verify_850_parsing,
    verify_850_generation,
    verify_855_parsing,
    verify_810_parsing,
    verify_round_trip,
]


def main():
    print("\nRunning EDI X12 mapping checks...\n")
    print("=" * 50)

    failures = 0
    for scenario in SCENARIOS:
        try:
            scenario()
            print("  PASSED\n")
        except AssertionError as e:
            print(f"  [FAIL] {e}\n")
            failures += 1
        except EdiError as e:
            print(f"  [ERROR] {type(e).__name__}: {e}\n")
            failures += 1

    print("=" * 50)
    if failures:
        print(f"FAILURE: {failures} of {len(SCENARIOS)} scenarios failed.")
        return 1
    print("SUCCESS: all EDI checks passed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
