"""
Batch parse/generate.

Each document in a batch is handled independently: a malformed document is
reported in its own outcome and its siblings are still processed.
"""
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .code_tables import DEFAULT_CODE_TABLES, CodeTables
from .edi_generator import generate_x12
from .edi_parser import parse_x12
from .models import X12Options
from .parallel_executor import DocumentOutcome, ParallelExecutor


@dataclass
class BatchReport:
    outcomes: List[DocumentOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[DocumentOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[DocumentOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def all_ok(self) -> bool:
        return not self.failed

    def get(self, key: str) -> Optional[DocumentOutcome]:
        return next((o for o in self.outcomes if o.key == key), None)


def _keyed(items: Union[Mapping[str, Any], Sequence[Any]]) -> Dict[str, Any]:
    if isinstance(items, Mapping):
        return {str(k): v for k, v in items.items()}
    return {str(i): item for i, item in enumerate(items)}


def parse_batch(
    texts: Union[Mapping[str, str], Sequence[str]],
    options: Optional[X12Options] = None,
    tables: CodeTables = DEFAULT_CODE_TABLES,
    max_threads: int = 5,
) -> BatchReport:
    """
    Parse many transaction sets concurrently.

    Args:
        texts: name -> X12 text, or a list (keys become "0", "1", ...)
        options: Delimiters and qualifier policy for every document
        tables: Code tables
        max_threads: Thread pool size

    Returns:
        BatchReport with one outcome per input, in input order
    """
    executor = ParallelExecutor(max_threads=max_threads)
    outcomes = executor.process_parallel(
        _keyed(texts),
        partial(parse_x12, options=options, tables=tables),
    )
    return BatchReport(outcomes=list(outcomes.values()))


def generate_batch(
    documents: Union[Mapping[str, Any], Sequence[Any]],
    options: Optional[X12Options] = None,
    tables: CodeTables = DEFAULT_CODE_TABLES,
    max_threads: int = 5,
) -> BatchReport:
    """Generate X12 for many documents; failed documents are reported, not sent."""
    executor = ParallelExecutor(max_threads=max_threads)
    outcomes = executor.process_parallel(
        _keyed(documents),
        partial(generate_x12, options=options, tables=tables),
    )
    return BatchReport(outcomes=list(outcomes.values()))
