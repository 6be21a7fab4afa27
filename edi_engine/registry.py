"""
Document kinds and the strategy that handles each.

A document kind is identified by its doc_type discriminant ("850", "855",
"810"). Each kind is paired with a strategy value holding its model class and
its extract/generate functions; the kinds share no behaviour beyond the
tokenizer, code tables and loop cursor.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Tuple, Type

from . import flow_810, flow_850, flow_855
from .code_tables import CodeTables
from .exceptions import EdiError, UnknownDocumentTypeError
from .models import EdiDocument, Edi810Invoice, Edi850PurchaseOrder, Edi855PoAcknowledgement, X12Options


@dataclass(frozen=True)
class DocumentStrategy:
    doc_type: str
    header_tag: str
    line_tag: str
    model: Type[EdiDocument]
    identifier_field: str
    extract: Callable[[List[List[str]], CodeTables, X12Options], Tuple[EdiDocument, List[EdiError]]]
    generate: Callable[[Any], List[List[str]]]


STRATEGIES: Mapping[str, DocumentStrategy] = MappingProxyType({
    "850": DocumentStrategy(
        doc_type="850",
        header_tag=flow_850.HEADER_TAG,
        line_tag=flow_850.LINE_TAG,
        model=Edi850PurchaseOrder,
        identifier_field="po_number",
        extract=flow_850.extract,
        generate=flow_850.generate,
    ),
    "855": DocumentStrategy(
        doc_type="855",
        header_tag=flow_855.HEADER_TAG,
        line_tag=flow_855.LINE_TAG,
        model=Edi855PoAcknowledgement,
        identifier_field="po_number",
        extract=flow_855.extract,
        generate=flow_855.generate,
    ),
    "810": DocumentStrategy(
        doc_type="810",
        header_tag=flow_810.HEADER_TAG,
        line_tag=flow_810.LINE_TAG,
        model=Edi810Invoice,
        identifier_field="invoice_number",
        extract=flow_810.extract,
        generate=flow_810.generate,
    ),
})


def strategy_for(doc_type: str) -> DocumentStrategy:
    strategy = STRATEGIES.get(str(doc_type))
    if strategy is None:
        raise UnknownDocumentTypeError(f"Unsupported document type: {doc_type}")
    return strategy


def document_from_data(data: Dict[str, Any]) -> EdiDocument:
    """
    Build a document model from normalized JSON.

    Accepts camelCase (docType, poNumber, ...) or snake_case keys; the
    discriminant selects the model.
    """
    doc_type = data.get("docType", data.get("doc_type"))
    if doc_type is None:
        raise UnknownDocumentTypeError("Document has no docType")
    return strategy_for(doc_type).model.model_validate(data)
