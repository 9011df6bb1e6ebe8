"""Assessment session lifecycle on top of the navigator and store."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
import logging
from typing import Iterator

from .catalog import QuestionCatalog
from .config import Settings
from .engine import RiskProfile, RiskScoringEngine
from .events import build_assessment_completed_event
from .navigation import AssessmentNavigator
from .observability import AssessmentMetrics, log_event
from .store import InMemoryAssessmentStore, StoredAssessment


logger = logging.getLogger("risk_assessment")


class AssessmentSessions:
    """Creates assessments, forwards navigation calls, publishes completions."""

    def __init__(
        self,
        *,
        settings: Settings,
        catalog: QuestionCatalog,
        store: InMemoryAssessmentStore,
        metrics: AssessmentMetrics,
    ) -> None:
        self._settings = settings
        self._catalog = catalog
        self._store = store
        self._metrics = metrics
        self._scorer = RiskScoringEngine(catalog, area_order=settings.area_order)

    @property
    def scorer(self) -> RiskScoringEngine:
        return self._scorer

    def reset_state_for_tests(self) -> None:
        """Drop every stored assessment."""

        self._store.reset()

    def create(self, trace_id: str) -> StoredAssessment:
        now = datetime.now(tz=timezone.utc)
        navigator = AssessmentNavigator(self._catalog, self._scorer)
        record = self._store.create(navigator, now, trace_id)
        navigator.on_complete = lambda profile: self._on_complete(record, profile)
        if self._settings.metrics_enabled:
            self._metrics.record_started()
        log_event(logger, "assessment_created", assessment_id=record.assessment_id, trace_id=trace_id)
        return record

    def get(self, assessment_id: str) -> StoredAssessment:
        record = self._store.get(assessment_id)
        if record is None:
            raise KeyError("ASSESSMENT_NOT_FOUND")
        return record

    @contextmanager
    def _session(self, assessment_id: str, trace_id: str) -> Iterator[StoredAssessment]:
        """Hold the assessment lock so each navigator call runs alone."""

        record = self.get(assessment_id)
        with record.lock:
            record.trace_id = trace_id
            yield record

    def delete(self, assessment_id: str) -> None:
        if not self._store.delete(assessment_id):
            raise KeyError("ASSESSMENT_NOT_FOUND")

    def record_answer(self, assessment_id: str, option_value: str, trace_id: str) -> tuple[StoredAssessment, bool]:
        with self._session(assessment_id, trace_id) as record:
            question_id = record.navigator.current_question.id
            accepted = record.navigator.record_answer(option_value)
        if accepted:
            log_event(
                logger,
                "assessment_answer_recorded",
                assessment_id=assessment_id,
                trace_id=trace_id,
                question_id=question_id,
                option_value=option_value,
            )
        else:
            if self._settings.metrics_enabled:
                self._metrics.record_ignored_answer()
            log_event(
                logger,
                "assessment_answer_ignored",
                assessment_id=assessment_id,
                trace_id=trace_id,
                question_id=question_id,
                option_value=option_value,
            )
        return record, accepted

    def advance(self, assessment_id: str, trace_id: str) -> StoredAssessment:
        with self._session(assessment_id, trace_id) as record:
            record.navigator.advance()
        return record

    def retreat(self, assessment_id: str, trace_id: str) -> StoredAssessment:
        with self._session(assessment_id, trace_id) as record:
            record.navigator.retreat()
        return record

    def restart(self, assessment_id: str, trace_id: str) -> StoredAssessment:
        with self._session(assessment_id, trace_id) as record:
            record.navigator.reset()
            record.completed_at = None
            record.completed_event = None
        log_event(logger, "assessment_restarted", assessment_id=assessment_id, trace_id=trace_id)
        return record

    def _on_complete(self, record: StoredAssessment, profile: RiskProfile) -> None:
        record.completed_at = datetime.now(tz=timezone.utc)
        if self._settings.metrics_enabled:
            self._metrics.record_completed(profile.overall_score)
        event = build_assessment_completed_event(
            assessment_id=record.assessment_id,
            completed_at=record.completed_at,
            profile=profile,
            answered_count=record.navigator.answered_count,
            trace_id=record.trace_id,
            produced_by=self._settings.event_produced_by,
        )
        record.completed_event = event
        log_event(
            logger,
            "assessment_completed_event",
            assessment_id=record.assessment_id,
            trace_id=record.trace_id,
            event_id=event["event_id"],
            overall_score=event["data"]["overall_score"],
            risk_level=event["data"]["risk_level"],
            recommendation_ids=event["data"]["recommendation_ids"],
        )
