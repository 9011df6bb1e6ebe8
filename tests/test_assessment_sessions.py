"""Tests for assessment session lifecycle and locking."""

from threading import Barrier, Thread
import time

import pytest

from risk_assessment.catalog import DEFAULT_CATALOG
from risk_assessment.config import Settings
from risk_assessment.engine import RiskProfile
from risk_assessment.navigation import AssessmentCompleteError
from risk_assessment.observability import AssessmentMetrics
from risk_assessment.sessions import AssessmentSessions
from risk_assessment.store import InMemoryAssessmentStore


HIGH_RISK_PATH = ["same-all", "never", "never", "no", "never-check", "never"]


@pytest.fixture
def metrics() -> AssessmentMetrics:
    return AssessmentMetrics()


@pytest.fixture
def sessions(metrics: AssessmentMetrics) -> AssessmentSessions:
    return AssessmentSessions(
        settings=Settings(),
        catalog=DEFAULT_CATALOG,
        store=InMemoryAssessmentStore(),
        metrics=metrics,
    )


def test_concurrent_final_answers_complete_once(
    sessions: AssessmentSessions, metrics: AssessmentMetrics, monkeypatch: pytest.MonkeyPatch
) -> None:
    assessment_id = sessions.create("trace-concurrent-0001").assessment_id
    for value in HIGH_RISK_PATH[:-1]:
        sessions.record_answer(assessment_id, value, "trace-concurrent-0001")

    evaluate = sessions.scorer.evaluate

    def slow_evaluate(answers) -> RiskProfile:
        time.sleep(0.05)
        return evaluate(answers)

    monkeypatch.setattr(sessions.scorer, "evaluate", slow_evaluate)

    barrier = Barrier(2)
    outcomes: list[str] = []

    def submit() -> None:
        barrier.wait()
        try:
            sessions.record_answer(assessment_id, HIGH_RISK_PATH[-1], "trace-concurrent-0002")
            outcomes.append("completed")
        except AssessmentCompleteError:
            outcomes.append("rejected")

    threads = [Thread(target=submit) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert sorted(outcomes) == ["completed", "rejected"]
    assert metrics.assessments_completed_total == 1
    assert sessions.get(assessment_id).navigator.profile.overall_score == 100


def test_restart_clears_completion(sessions: AssessmentSessions) -> None:
    assessment_id = sessions.create("trace-restart-0001").assessment_id
    for value in HIGH_RISK_PATH:
        sessions.record_answer(assessment_id, value, "trace-restart-0001")

    record = sessions.get(assessment_id)
    assert record.completed_at is not None
    assert record.completed_event is not None

    sessions.restart(assessment_id, "trace-restart-0002")
    assert record.completed_at is None
    assert record.completed_event is None
    assert record.navigator.profile is None
    assert record.trace_id == "trace-restart-0002"


def test_missing_assessment_raises_key_error(sessions: AssessmentSessions) -> None:
    with pytest.raises(KeyError):
        sessions.advance("asm_20000101_0001", "trace-missing-0001")
