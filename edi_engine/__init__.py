"""Bidirectional EDI X12 850/855/810 mapping engine."""
