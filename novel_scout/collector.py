# File: novel_scout/collector.py
"""novel_scout.collector: restores reading order over out-of-order chapter completions."""

from __future__ import annotations

from contextlib import aclosing
from typing import AsyncIterator, Dict, List, Tuple, Union

from novel_scout.config import FailurePolicy
from novel_scout.errors import ChapterFailedError, IncompleteCollectionError
from novel_scout.logger import logger
from novel_scout.models import Chapter, ChapterFailure, IndexedResult

__all__ = ["OrderedCollector"]

_Slot = Union[Chapter, ChapterFailure]


class OrderedCollector:
    """
    Буфер «индекс → результат» с курсором следующего ожидаемого индекса.

    :meth:`push` accepts results in any order and returns the chapters that
    became releasable, always in increasing index order. A failed index is
    either fatal (``FailurePolicy.ABORT``) or skipped with a warning
    (``FailurePolicy.SKIP``).
    """

    def __init__(self, total: int, policy: FailurePolicy = FailurePolicy.ABORT) -> None:
        if total < 0:
            raise ValueError("total must be >= 0")
        self.total = total
        self.policy = FailurePolicy(policy)
        self._pending: Dict[int, _Slot] = {}
        self._next = 0
        self._skipped: List[int] = []

    @property
    def next_index(self) -> int:
        return self._next

    @property
    def done(self) -> bool:
        return self._next >= self.total

    @property
    def skipped(self) -> List[int]:
        return list(self._skipped)

    def push(self, result: IndexedResult) -> List[Tuple[int, Chapter]]:
        index = result.index
        if not 0 <= index < self.total:
            raise ValueError(f"index {index} out of range 0..{self.total - 1}")
        if index < self._next or index in self._pending:
            raise ValueError(f"duplicate result for index {index}")
        self._pending[index] = result.outcome
        return self._drain()

    def _drain(self) -> List[Tuple[int, Chapter]]:
        released: List[Tuple[int, Chapter]] = []
        while self._next in self._pending:
            index = self._next
            slot = self._pending.pop(index)
            self._next += 1
            if isinstance(slot, ChapterFailure):
                if self.policy is FailurePolicy.ABORT:
                    raise ChapterFailedError(index, slot.url, slot.error)
                logger.warning("Skipping chapter #%d (%s): %s", index, slot.url, slot.error)
                self._skipped.append(index)
                continue
            released.append((index, slot))
        return released

    def finish(self) -> None:
        """Call once the result stream is exhausted; raises if indices are still missing."""
        if not self.done:
            missing = [i for i in range(self._next, self.total) if i not in self._pending]
            raise IncompleteCollectionError(missing)

    async def collect(self, stream: AsyncIterator[IndexedResult]) -> AsyncIterator[Tuple[int, Chapter]]:
        """Re-emit *stream* in index order as ``(index, chapter)`` pairs."""
        async with aclosing(stream) as results:
            async for result in results:
                for item in self.push(result):
                    yield item
                if self.done:
                    break
        self.finish()
