"""Structured logging and in-memory metrics for the risk assessment service."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from threading import Lock
from typing import Any


def configure_logging(level: str) -> None:
    """Configure service logging format once."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
    )


def log_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one structured JSON log line."""

    payload = {
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "event": event,
        **fields,
    }
    logger.log(level, json.dumps(payload, default=str, separators=(",", ":")))


class AssessmentMetrics:
    """Thread-safe in-memory metrics for assessment and scoring calls."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.requests_total = 0
            self.success_total = 0
            self.errors_total = 0
            self.latency_ms_sum = 0.0
            self.latency_ms_count = 0
            self.assessments_started_total = 0
            self.assessments_completed_total = 0
            self.answers_ignored_total = 0
            self.last_overall_score = 0.0

    def record_request(self) -> None:
        with self._lock:
            self.requests_total += 1

    def record_success(self, latency_ms: float) -> None:
        with self._lock:
            self.success_total += 1
            self.latency_ms_sum += max(latency_ms, 0.0)
            self.latency_ms_count += 1

    def record_error(self, latency_ms: float = 0.0) -> None:
        with self._lock:
            self.errors_total += 1
            self.latency_ms_sum += max(latency_ms, 0.0)
            self.latency_ms_count += 1

    def record_started(self) -> None:
        with self._lock:
            self.assessments_started_total += 1

    def record_completed(self, overall_score: float) -> None:
        with self._lock:
            self.assessments_completed_total += 1
            self.last_overall_score = max(0.0, min(100.0, overall_score))

    def record_ignored_answer(self, count: int = 1) -> None:
        with self._lock:
            self.answers_ignored_total += max(count, 0)

    def render_prometheus(self) -> str:
        with self._lock:
            lines = [
                "# HELP risk_assessment_requests_total Total assessment API requests received.",
                "# TYPE risk_assessment_requests_total counter",
                f"risk_assessment_requests_total {self.requests_total}",
                "# HELP risk_assessment_success_total Total successful assessment API responses.",
                "# TYPE risk_assessment_success_total counter",
                f"risk_assessment_success_total {self.success_total}",
                "# HELP risk_assessment_errors_total Total failed assessment API requests.",
                "# TYPE risk_assessment_errors_total counter",
                f"risk_assessment_errors_total {self.errors_total}",
                "# HELP risk_assessment_latency_ms_sum Sum of request latency in milliseconds.",
                "# TYPE risk_assessment_latency_ms_sum counter",
                f"risk_assessment_latency_ms_sum {self.latency_ms_sum:.3f}",
                "# HELP risk_assessment_latency_ms_count Number of latency observations.",
                "# TYPE risk_assessment_latency_ms_count counter",
                f"risk_assessment_latency_ms_count {self.latency_ms_count}",
                "# HELP risk_assessment_started_total Assessments created.",
                "# TYPE risk_assessment_started_total counter",
                f"risk_assessment_started_total {self.assessments_started_total}",
                "# HELP risk_assessment_completed_total Assessments that reached the final question.",
                "# TYPE risk_assessment_completed_total counter",
                f"risk_assessment_completed_total {self.assessments_completed_total}",
                "# HELP risk_assessment_answers_ignored_total Answers dropped for unknown option values.",
                "# TYPE risk_assessment_answers_ignored_total counter",
                f"risk_assessment_answers_ignored_total {self.answers_ignored_total}",
                "# HELP risk_assessment_last_overall_score Last computed overall risk score.",
                "# TYPE risk_assessment_last_overall_score gauge",
                f"risk_assessment_last_overall_score {self.last_overall_score:.4f}",
            ]
        return "\n".join(lines) + "\n"


_metrics = AssessmentMetrics()


def get_metrics() -> AssessmentMetrics:
    """Return singleton metrics collector."""

    return _metrics
