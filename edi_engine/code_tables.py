"""
Code Tables Module

Qualifier code tables used by extraction and generation: header tag to
transaction set, party roles (N1-01), units of measure, ACK line statuses and
product/service ID qualifiers.

Tables are immutable. Build one CodeTables instance at start-up (optionally
with overrides loaded from a YAML file) and pass it to the parser/generator.
"""
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigurationError, UnknownQualifierError
from .logger import get_logger


_DOCUMENT_TYPES = {
    "BEG": "850",
    "BAK": "855",
    "BIG": "810",
}

_PARTY_ROLES = {
    "ST": "Ship To",
    "BT": "Bill To",
    "VN": "Vendor",
    "BY": "Buying Party",
    "SF": "Ship From",
    "SE": "Selling Party",
    "RE": "Party to Receive Commercial Invoice Remittance",
    "RI": "Remit To",
}

_UNITS_OF_MEASURE = {
    "EA": "Each",
    "CS": "Case",
    "CA": "Case",
    "BX": "Box",
    "PK": "Package",
    "LB": "Pound",
    "OZ": "Ounce",
    "GA": "Gallon",
    "DZ": "Dozen",
    "BG": "Bag",
    "BO": "Bottle",
    "CN": "Can",
    "KG": "Kilogram",
}

_ACK_STATUSES = {
    "IA": "Item Accepted",
    "IB": "Item Backordered",
    "IC": "Item Accepted - Changes Made",
    "ID": "Item Deleted",
    "IP": "Item Accepted - Price Changed",
    "IQ": "Item Accepted - Quantity Changed",
    "IR": "Item Rejected",
    "IS": "Item Accepted - Substitution Made",
}

# Product/Service ID qualifier -> which SKU slot it fills
_PRODUCT_ID_QUALIFIERS = {
    "VP": "vendor",  # Vendor's (Seller's) Part Number
    "VN": "vendor",  # Vendor's (Seller's) Item Number
    "BP": "buyer",   # Buyer's Part Number
    "IN": "buyer",   # Buyer's Item Number
}

_ACK_TYPES = {
    "AC": "Acknowledge - With Detail and Change",
    "AD": "Acknowledge - With Detail, No Change",
    "AK": "Acknowledge - No Detail or Change",
    "RD": "Reject with Detail",
    "RJ": "Rejected - No Detail",
}

_OVERRIDABLE_TABLES = ("party_roles", "units_of_measure", "ack_statuses", "product_id_qualifiers")


def _frozen(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CodeTables:
    """Read-only qualifier tables."""

    document_types: Mapping[str, str] = field(default_factory=lambda: _frozen(_DOCUMENT_TYPES))
    party_roles: Mapping[str, str] = field(default_factory=lambda: _frozen(_PARTY_ROLES))
    units_of_measure: Mapping[str, str] = field(default_factory=lambda: _frozen(_UNITS_OF_MEASURE))
    ack_statuses: Mapping[str, str] = field(default_factory=lambda: _frozen(_ACK_STATUSES))
    product_id_qualifiers: Mapping[str, str] = field(default_factory=lambda: _frozen(_PRODUCT_ID_QUALIFIERS))
    ack_types: Mapping[str, str] = field(default_factory=lambda: _frozen(_ACK_TYPES))

    def describe(self, table: str, code: Optional[str]) -> Optional[str]:
        """Return the description of a code, or None if the code is not in the table."""
        if not code:
            return None
        return getattr(self, table).get(code)

    def check(
        self,
        table: str,
        code: Optional[str],
        segment_id: Optional[str] = None,
        segment_position: Optional[int] = None,
    ) -> Optional[UnknownQualifierError]:
        """
        Look a code up without deciding what to do about a miss.

        Returns:
            None when the code is known (or empty), otherwise an
            UnknownQualifierError for the caller to raise or collect.
        """
        if not code or code in getattr(self, table):
            return None
        return UnknownQualifierError(table, code, segment_id, segment_position)

    def with_overrides(self, overrides: Dict[str, Dict[str, str]]) -> "CodeTables":
        """Return a new CodeTables with extra codes merged over these ones."""
        merged: Dict[str, Any] = {}
        for table, codes in overrides.items():
            if table not in _OVERRIDABLE_TABLES:
                raise ConfigurationError(f"Unknown code table '{table}'")
            if not isinstance(codes, dict):
                raise ConfigurationError(f"Code table '{table}' must be a mapping of code to value")
            combined = dict(getattr(self, table))
            combined.update({str(k): str(v) for k, v in codes.items()})
            merged[table] = _frozen(combined)
        return CodeTables(
            document_types=self.document_types,
            party_roles=merged.get("party_roles", self.party_roles),
            units_of_measure=merged.get("units_of_measure", self.units_of_measure),
            ack_statuses=merged.get("ack_statuses", self.ack_statuses),
            product_id_qualifiers=merged.get("product_id_qualifiers", self.product_id_qualifiers),
            ack_types=self.ack_types,
        )


DEFAULT_CODE_TABLES = CodeTables()


def load_code_tables(path: Optional[Union[str, Path]] = None) -> CodeTables:
    """
    Build code tables, merging overrides from a YAML file if one is given.

    The file holds one mapping per table, e.g.:

        units_of_measure:
          TR: Tray
        party_roles:
          DA: Delivery Address

    Args:
        path: Override file, or None for the built-in tables

    Returns:
        CodeTables instance
    """
    if path is None:
        return DEFAULT_CODE_TABLES

    logger = get_logger()
    tables_file = Path(path)
    if not tables_file.exists():
        raise ConfigurationError(f"Code tables file not found: {tables_file}")

    try:
        with open(tables_file, "r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not read code tables file {tables_file}: {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Code tables file must contain a mapping: {tables_file}")

    tables = DEFAULT_CODE_TABLES.with_overrides(overrides)
    logger.info(f"Loaded code table overrides from {tables_file}: {sorted(overrides)}")
    return tables
