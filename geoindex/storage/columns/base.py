"""
Column Store Interface
======================

Wide-column primitives the location index relies on: ordered range reads
within a row, and batched column insertions submitted with a retry budget.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import structlog

from geoindex.core.errors import WriteFailure
from geoindex.storage.codec import Column, IndexMutation

log = structlog.get_logger()


@dataclass(frozen=True)
class MutationBatch:
    """
    Immutable set of pending column insertions.

    Built up with with_mutation(), which returns a new batch, and submitted
    once.
    """
    mutations: Tuple[IndexMutation, ...] = ()

    def with_mutation(self, mutation: IndexMutation) -> "MutationBatch":
        return MutationBatch(self.mutations + (mutation,))

    def __len__(self) -> int:
        return len(self.mutations)

    def __iter__(self) -> Iterator[IndexMutation]:
        return iter(self.mutations)


class ColumnStore(ABC):
    """
    Base class for wide-column backends.

    Subclasses implement read() and _apply(); submit() wraps _apply() with
    the retry loop shared by every backend.
    """

    retry_delay: float = 0.05

    @abstractmethod
    async def read(
        self,
        row_key: bytes,
        start: Optional[bytes] = None,
        limit: int = 100,
        reverse: bool = False,
    ) -> List[Column]:
        """
        Range read within one row.

        Args:
            row_key: Serialized row key
            start: Inclusive bound; columns >= start (or <= start when reverse)
            limit: Maximum number of columns returned
            reverse: Return columns in descending name order

        Returns:
            Columns ordered by name, ascending or descending per reverse
        """

    @abstractmethod
    async def _apply(self, batch: MutationBatch) -> None:
        """Apply every mutation of batch, or raise."""

    async def submit(self, batch: MutationBatch, retry_count: int = 5) -> None:
        """
        Submit a batch, retrying failed attempts.

        Raises:
            WriteFailure: when all retry_count attempts failed
        """
        if not len(batch):
            return

        attempts = max(1, retry_count)
        last_error: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            try:
                await self._apply(batch)
                if attempt > 1:
                    log.info("Batch write succeeded after retry", attempt=attempt)
                return
            except Exception as e:
                last_error = e
                log.warning(
                    "Batch write attempt failed",
                    attempt=attempt,
                    max_attempts=attempts,
                    mutations=len(batch),
                    error=str(e),
                )
                if attempt < attempts and self.retry_delay > 0:
                    await asyncio.sleep(self.retry_delay)

        log.error("Batch write failed, retry budget exhausted", attempts=attempts)
        raise WriteFailure(
            f"Batch of {len(batch)} mutations failed after {attempts} attempts: {last_error}",
            attempts=attempts,
        ) from last_error

    async def close(self) -> None:
        """Release backend resources."""
