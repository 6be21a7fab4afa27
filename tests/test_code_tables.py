"""Tests for the qualifier code tables."""

import pytest

from edi_engine.code_tables import DEFAULT_CODE_TABLES, CodeTables, load_code_tables
from edi_engine.exceptions import ConfigurationError, UnknownQualifierError


class TestCodeTables:
    """Tests for CodeTables lookups."""

    def test_document_types(self):
        """Should map header tags to transaction sets."""
        assert dict(DEFAULT_CODE_TABLES.document_types) == {"BEG": "850", "BAK": "855", "BIG": "810"}

    def test_describe_known_code(self):
        """Should return the description of a known code."""
        assert DEFAULT_CODE_TABLES.describe("party_roles", "ST") == "Ship To"
        assert DEFAULT_CODE_TABLES.describe("units_of_measure", "CS") == "Case"
        assert DEFAULT_CODE_TABLES.describe("ack_statuses", "IB") == "Item Backordered"

    def test_describe_unknown_code(self):
        """Should return None for an unknown or empty code."""
        assert DEFAULT_CODE_TABLES.describe("units_of_measure", "ZZ") is None
        assert DEFAULT_CODE_TABLES.describe("units_of_measure", None) is None

    def test_check_returns_error_for_unknown_code(self):
        """Should return, not raise, an UnknownQualifierError."""
        error = DEFAULT_CODE_TABLES.check("party_roles", "XX", "N1", 3)
        assert isinstance(error, UnknownQualifierError)
        assert error.table == "party_roles"
        assert error.code == "XX"
        assert error.segment_id == "N1"
        assert error.segment_position == 3

    def test_check_known_or_empty_code(self):
        """Should return None for known and empty codes."""
        assert DEFAULT_CODE_TABLES.check("party_roles", "BT") is None
        assert DEFAULT_CODE_TABLES.check("party_roles", "") is None

    def test_tables_are_read_only(self):
        """Should not allow mutation of a table."""
        with pytest.raises(TypeError):
            DEFAULT_CODE_TABLES.units_of_measure["ZZ"] = "Mystery"

    def test_with_overrides_returns_new_instance(self):
        """Should merge extra codes without touching the original tables."""
        tables = DEFAULT_CODE_TABLES.with_overrides({"units_of_measure": {"TR": "Tray"}})
        assert tables.describe("units_of_measure", "TR") == "Tray"
        assert tables.describe("units_of_measure", "EA") == "Each"
        assert DEFAULT_CODE_TABLES.describe("units_of_measure", "TR") is None

    def test_with_overrides_rejects_unknown_table(self):
        """Should refuse overrides for tables that are not configurable."""
        with pytest.raises(ConfigurationError):
            CodeTables().with_overrides({"document_types": {"BSN": "856"}})


class TestLoadCodeTables:
    """Tests for load_code_tables."""

    def test_none_returns_defaults(self):
        """Should return the built-in tables without a file."""
        assert load_code_tables(None) is DEFAULT_CODE_TABLES

    def test_loads_overrides_from_yaml(self, tmp_path):
        """Should merge codes from a YAML file."""
        path = tmp_path / "codes.yaml"
        path.write_text("party_roles:\n  DA: Delivery Address\nack_statuses:\n  IW: Item On Hold\n")
        tables = load_code_tables(path)
        assert tables.describe("party_roles", "DA") == "Delivery Address"
        assert tables.describe("ack_statuses", "IW") == "Item On Hold"

    def test_missing_file(self, tmp_path):
        """Should raise ConfigurationError for a missing file."""
        with pytest.raises(ConfigurationError):
            load_code_tables(tmp_path / "missing.yaml")

    def test_non_mapping_file(self, tmp_path):
        """Should raise ConfigurationError when the file is not a mapping."""
        path = tmp_path / "codes.yaml"
        path.write_text("- EA\n- CS\n")
        with pytest.raises(ConfigurationError):
            load_code_tables(path)
