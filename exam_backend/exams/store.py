"""
Storage abstraction for exam records.

Call sites depend only on the ``ExamStore`` protocol so the in-memory table
can be swapped for a persistent backend.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Callable, Dict, Optional, Protocol

from .schemas import Exam, Result


class ExamStore(Protocol):
    """Protocol defining the interface for exam storage backends."""

    async def create_or_replace(self, exam: Exam) -> Exam:
        """Store ``exam`` under its key, replacing any previous record."""
        ...

    async def get(self, exam_key: str) -> Optional[Exam]:
        """Return the exam stored under ``exam_key`` or None."""
        ...

    async def append_result(
        self, exam_key: str, build_result: Callable[[Exam], Result]
    ) -> Optional[Result]:
        """Build a result from the current record and append it atomically.

        ``build_result`` runs while the record is locked, so the result is
        graded against the same record it is appended to. Exceptions raised
        by ``build_result`` propagate and nothing is appended.

        Returns:
            The appended result, or None if no exam exists under ``exam_key``.
        """
        ...


class InMemoryExamStore:
    """Process-local exam table with one lock per exam key."""

    def __init__(self) -> None:
        self._exams: Dict[str, Exam] = {}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._state_lock = asyncio.Lock()

    async def _lock_for(self, exam_key: str) -> asyncio.Lock:
        async with self._state_lock:
            return self._locks[exam_key]

    async def create_or_replace(self, exam: Exam) -> Exam:
        lock = await self._lock_for(exam.exam_key)
        async with lock:
            self._exams[exam.exam_key] = exam
            return exam

    async def get(self, exam_key: str) -> Optional[Exam]:
        return self._exams.get(exam_key)

    async def append_result(
        self, exam_key: str, build_result: Callable[[Exam], Result]
    ) -> Optional[Result]:
        # Avoid allocating locks for keys that were never created.
        if exam_key not in self._exams:
            return None
        lock = await self._lock_for(exam_key)
        async with lock:
            exam = self._exams.get(exam_key)
            if exam is None:
                return None
            result = build_result(exam)
            exam.results.append(result)
            return result

    def __len__(self) -> int:
        return len(self._exams)


store = InMemoryExamStore()
