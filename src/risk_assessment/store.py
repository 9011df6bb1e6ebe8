"""In-memory store of assessment sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Any

from .navigation import AssessmentNavigator


@dataclass
class StoredAssessment:
    """One live assessment session; `lock` guards the navigator."""

    assessment_id: str
    created_at: datetime
    navigator: AssessmentNavigator
    trace_id: str
    completed_at: datetime | None = None
    completed_event: dict[str, Any] | None = None
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)


class InMemoryAssessmentStore:
    """Thread-safe store of assessment sessions keyed by assessment ID."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._assessments: dict[str, StoredAssessment] = {}
            self._counter = 0

    def create(self, navigator: AssessmentNavigator, now: datetime, trace_id: str) -> StoredAssessment:
        with self._lock:
            self._counter += 1
            assessment_id = f"asm_{now.strftime('%Y%m%d')}_{self._counter:04d}"
            record = StoredAssessment(
                assessment_id=assessment_id,
                created_at=now,
                navigator=navigator,
                trace_id=trace_id,
            )
            self._assessments[assessment_id] = record
            return record

    def get(self, assessment_id: str) -> StoredAssessment | None:
        with self._lock:
            return self._assessments.get(assessment_id)

    def delete(self, assessment_id: str) -> bool:
        with self._lock:
            return self._assessments.pop(assessment_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._assessments)
