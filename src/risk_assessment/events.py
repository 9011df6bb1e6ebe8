"""Event payload builders for completed assessments."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import uuid4

from .engine import RiskProfile


def build_assessment_completed_event(
    *,
    assessment_id: str,
    completed_at: datetime,
    profile: RiskProfile,
    answered_count: int,
    trace_id: str,
    produced_by: str,
) -> dict[str, Any]:
    """Build `assessment.completed` event envelope."""

    return {
        "event_id": str(uuid4()),
        "event_type": "assessment.completed",
        "event_version": "v1",
        "occurred_at": completed_at.isoformat(),
        "produced_by": produced_by,
        "trace_id": trace_id,
        "data": {
            "assessment_id": assessment_id,
            "completed_at": completed_at.isoformat(),
            "answered_count": answered_count,
            "overall_score": round(profile.overall_score, 4),
            "risk_level": profile.risk_level,
            "area_scores": [
                {"area_id": item.area_id, "score": round(item.score, 4)}
                for item in profile.area_scores
            ],
            "recommendation_ids": [item.id for item in profile.recommendations],
        },
    }
