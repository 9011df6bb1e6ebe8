"""Pydantic schemas for the risk assessment API."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


Priority = Literal["high", "medium", "low"]
RiskLevel = Literal["low", "medium", "high"]


class OptionView(BaseModel):
    value: str
    text: str
    risk_weight: int = Field(ge=0, le=10)


class QuestionView(BaseModel):
    id: str
    text: str
    options: list[OptionView]


class AreaView(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    questions: list[QuestionView]


class CatalogResponse(BaseModel):
    """Full question catalog in navigation order."""

    total_questions: int
    areas: list[AreaView]


class AnswerInput(BaseModel):
    """One answer submitted for stateless scoring."""

    question_id: str = Field(min_length=1)
    selected_value: str = Field(min_length=1)


class ScoreRequest(BaseModel):
    """Answers to score; later entries for the same question win."""

    answers: list[AnswerInput] = Field(default_factory=list)


class AreaScoreView(BaseModel):
    area_id: str
    name: str
    score: float = Field(ge=0, le=100)
    risk_level: RiskLevel


class RecommendationView(BaseModel):
    id: str
    title: str
    description: str
    priority: Priority
    priority_label: str
    action_steps: list[str]


class RiskProfileView(BaseModel):
    """Risk profile with recommendations ordered high -> low."""

    overall_score: float = Field(ge=0, le=100)
    risk_level: RiskLevel
    area_scores: list[AreaScoreView]
    recommendations: list[RecommendationView]


class ScoreResponse(BaseModel):
    """Envelope for stateless scoring."""

    data: RiskProfileView
    ignored: list[AnswerInput]


class RecordAnswerRequest(BaseModel):
    option_value: str = Field(min_length=1)


class AssessmentState(BaseModel):
    """Current position and progress of one assessment."""

    assessment_id: str
    created_at: datetime
    area_index: int
    question_index: int
    current_area_id: str
    current_question_id: str
    current_selection: str | None
    answered_count: int
    total_questions: int
    progress_percent: float = Field(ge=0, le=100)
    can_retreat: bool
    can_advance: bool
    complete: bool
    accepted: bool | None = None
    profile: RiskProfileView | None = None


class HealthResponse(BaseModel):
    """Health endpoint response."""

    status: Literal["ok"] = "ok"
    service: str
    version: str
    timestamp: datetime
