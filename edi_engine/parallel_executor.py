"""
Parallel executor module for concurrent document processing.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .exceptions import EdiError
from .logger import get_logger


@dataclass(frozen=True)
class DocumentOutcome:
    """Result of one work item: either a result or the error that stopped it."""

    key: str
    result: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ParallelExecutor:
    """Runs independent documents on a thread pool; one failure never stops the others."""

    def __init__(self, max_threads: int = 5):
        """
        Initialize parallel executor.

        Args:
            max_threads: Maximum number of concurrent threads
        """
        if max_threads < 1:
            raise ValueError("max_threads must be at least 1")
        self.max_threads = max_threads
        self.logger = get_logger()

    def process_parallel(
        self,
        items: Dict[str, Any],
        processor_func: Callable[[Any], Any],
    ) -> Dict[str, DocumentOutcome]:
        """
        Process multiple documents in parallel.

        Args:
            items: Dictionary of key -> work item (raw text or document)
            processor_func: Function applied to each work item

        Returns:
            Dictionary of key -> DocumentOutcome, in the order of `items`
        """
        outcomes: Dict[str, DocumentOutcome] = {}
        total = len(items)

        self.logger.info(f"Starting parallel processing of {total} documents with {self.max_threads} threads")

        with ThreadPoolExecutor(max_workers=self.max_threads) as executor:
            future_to_key = {
                executor.submit(processor_func, item): key
                for key, item in items.items()
            }

            completed = 0
            for future in as_completed(future_to_key):
                key = future_to_key[future]
                completed += 1

                try:
                    outcomes[key] = DocumentOutcome(key=key, result=future.result())
                    self.logger.info(f"Completed document {key} ({completed}/{total})")
                except EdiError as e:
                    self.logger.error(f"Document {key} failed: {e}")
                    outcomes[key] = DocumentOutcome(key=key, error=e)
                except Exception as e:
                    self.logger.exception(f"Document {key} failed unexpectedly: {e}")
                    outcomes[key] = DocumentOutcome(key=key, error=e)

        failed = sum(1 for o in outcomes.values() if not o.ok)
        self.logger.info(f"Parallel processing complete: {total - failed}/{total} documents succeeded")

        return {key: outcomes[key] for key in items}
