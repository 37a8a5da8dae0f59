from __future__ import annotations

import copy
import dataclasses
import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Dict, Iterable, Optional

from ..models.pattern import Pattern


@dataclass
class JobRecord:
    job_id: str
    status: str = "pending"
    progress: float = 0.0
    meta: dict = field(default_factory=dict)
    grid: Optional[dict] = None
    pattern: Optional[Pattern] = None
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())


class JobStore:
    """
    In-memory job registry. Patterns are never mutated in place: updates replace the
    stored Pattern with a new one, so records handed out can share it safely.
    """

    def __init__(self) -> None:
        self._jobs: Dict[str, JobRecord] = {}
        self._lock = Lock()

    @staticmethod
    def _snapshot(record: JobRecord) -> JobRecord:
        return dataclasses.replace(
            record,
            meta=copy.deepcopy(record.meta),
            grid=copy.deepcopy(record.grid),
        )

    def create(
        self,
        job_id: str,
        *,
        status: str = "processing",
        progress: float = 0.0,
        meta: Optional[dict] = None,
    ) -> JobRecord:
        record = JobRecord(job_id=job_id, status=status, progress=progress, meta=meta or {})
        with self._lock:
            self._jobs[job_id] = record
        return self._snapshot(record)

    def update(self, job_id: str, **fields) -> Optional[JobRecord]:
        with self._lock:
            record = self._jobs.get(job_id)
            if not record:
                return None
            for key, value in fields.items():
                if hasattr(record, key):
                    setattr(record, key, value)
                else:
                    record.meta[key] = value
            record.updated_at = time.time()
            return self._snapshot(record)

    def set_pattern(self, job_id: str, pattern: Pattern) -> Optional[JobRecord]:
        with self._lock:
            record = self._jobs.get(job_id)
            if not record:
                return None
            record.pattern = pattern
            record.grid = {"width": pattern.width, "height": pattern.height}
            record.updated_at = time.time()
            return self._snapshot(record)

    def update_pattern(self, job_id: str, updater: Callable[[Pattern], Pattern]) -> Optional[Pattern]:
        with self._lock:
            record = self._jobs.get(job_id)
            if not record or record.pattern is None:
                return None
            record.pattern = updater(record.pattern)
            record.updated_at = time.time()
            return record.pattern

    def get(self, job_id: str) -> Optional[JobRecord]:
        with self._lock:
            record = self._jobs.get(job_id)
            if not record:
                return None
            return self._snapshot(record)

    def list(
        self,
        *,
        status: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Iterable[JobRecord]:
        with self._lock:
            records = [self._snapshot(r) for r in self._jobs.values()]
        if status:
            records = [r for r in records if r.status == status]
        if query:
            query_lower = query.lower()
            records = [
                r
                for r in records
                if query_lower in r.job_id.lower()
                or any(query_lower in str(value).lower() for value in r.meta.values())
            ]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def clear(self) -> None:
        with self._lock:
            self._jobs.clear()


store = JobStore()
