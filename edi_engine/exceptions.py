"""
Exceptions raised by the X12 engine.

Parse errors are fatal for the document being parsed. ValidationMismatchError
and (under lenient qualifier policy) UnknownQualifierError are never raised by
the parser; they are attached to ParseResult.warnings instead.
"""
from typing import Any, Optional


class EdiError(Exception):
    """Base class for all engine errors, with optional segment context."""

    def __init__(
        self,
        message: str,
        segment_id: Optional[str] = None,
        segment_position: Optional[int] = None,
    ):
        self.message = message
        self.segment_id = segment_id
        self.segment_position = segment_position
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.segment_id:
            parts.append(f"Segment: {self.segment_id}")
        if self.segment_position is not None:
            parts.append(f"Position: {self.segment_position}")
        return " | ".join(parts)


class MalformedSegmentError(EdiError):
    """Segment text cannot be tokenized or read (missing tag, bad numerics, empty input)."""
    pass


class UnexpectedSegmentError(MalformedSegmentError):
    """Segment appeared where the open loop cannot own it (e.g. N3 with no N1)."""
    pass


class UnknownDocumentTypeError(EdiError):
    """Leading segment tag does not map to a supported transaction set."""
    pass


class UnknownQualifierError(EdiError):
    """Qualifier code missing from the code tables."""

    def __init__(
        self,
        table: str,
        code: str,
        segment_id: Optional[str] = None,
        segment_position: Optional[int] = None,
    ):
        self.table = table
        self.code = code
        super().__init__(f"Unknown {table} code '{code}'", segment_id, segment_position)


class MissingRequiredFieldError(EdiError):
    """Document cannot be generated because an identifying field is empty."""

    def __init__(self, field_name: str, doc_type: Optional[str] = None):
        self.field_name = field_name
        self.doc_type = doc_type
        message = f"Missing required field '{field_name}'"
        if doc_type:
            message += f" for {doc_type} document"
        super().__init__(message)


class ValidationMismatchError(EdiError):
    """Declared control total disagrees with the value computed from the document."""

    def __init__(
        self,
        field_name: str,
        declared: Any,
        computed: Any,
        segment_id: Optional[str] = None,
    ):
        self.field_name = field_name
        self.declared = declared
        self.computed = computed
        super().__init__(
            f"Declared {field_name} {declared} does not match computed {computed}",
            segment_id,
        )


class ConfigurationError(EdiError):
    """Configuration file or value is invalid."""
    pass
