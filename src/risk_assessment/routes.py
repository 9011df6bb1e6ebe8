"""HTTP routes for the risk assessment service."""

from datetime import datetime, timezone
import logging
from time import perf_counter
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse

from .catalog import DEFAULT_CATALOG
from .config import get_settings
from .engine import Answer, RiskProfile
from .errors import ApiError
from .navigation import AssessmentCompleteError
from .observability import get_metrics, log_event
from .schemas import (
    AnswerInput,
    AreaScoreView,
    AreaView,
    AssessmentState,
    CatalogResponse,
    HealthResponse,
    OptionView,
    QuestionView,
    RecommendationView,
    RecordAnswerRequest,
    RiskProfileView,
    ScoreRequest,
    ScoreResponse,
)
from .sessions import AssessmentSessions
from .store import InMemoryAssessmentStore, StoredAssessment

router = APIRouter()
logger = logging.getLogger("risk_assessment")

_settings = get_settings()
_metrics = get_metrics()
_catalog = DEFAULT_CATALOG
_engine = AssessmentSessions(
    settings=_settings,
    catalog=_catalog,
    store=InMemoryAssessmentStore(),
    metrics=_metrics,
)


def _trace_id(request: Request) -> str:
    return request.headers.get("x-trace-id", "").strip() or uuid4().hex


def _begin() -> float:
    if _settings.metrics_enabled:
        _metrics.record_request()
    return perf_counter()


def _finish(started: float) -> None:
    if _settings.metrics_enabled:
        _metrics.record_success((perf_counter() - started) * 1000.0)


def _lookup(assessment_id: str, trace_id: str) -> StoredAssessment:
    try:
        return _engine.get(assessment_id)
    except KeyError as exc:
        raise ApiError.assessment_not_found(assessment_id, trace_id) from exc


def _profile_view(profile: RiskProfile) -> RiskProfileView:
    return RiskProfileView(
        overall_score=round(profile.overall_score, 4),
        risk_level=profile.risk_level,
        area_scores=[
            AreaScoreView(
                area_id=item.area_id,
                name=item.name,
                score=round(item.score, 4),
                risk_level=item.risk_level,
            )
            for item in profile.area_scores
        ],
        recommendations=[
            RecommendationView(
                id=item.id,
                title=item.title,
                description=item.description,
                priority=item.priority.value,
                priority_label=item.priority_label,
                action_steps=list(item.action_steps),
            )
            for item in profile.sorted_recommendations()
        ],
    )


def _state(record: StoredAssessment, accepted: bool | None = None) -> AssessmentState:
    navigator = record.navigator
    question = navigator.current_question
    return AssessmentState(
        assessment_id=record.assessment_id,
        created_at=record.created_at,
        area_index=navigator.area_index,
        question_index=navigator.question_index,
        current_area_id=navigator.current_area.id,
        current_question_id=question.id,
        current_selection=navigator.current_selection_for(question.id),
        answered_count=navigator.answered_count,
        total_questions=_catalog.total_questions,
        progress_percent=round(navigator.progress_percent(), 4),
        can_retreat=navigator.can_retreat,
        can_advance=navigator.can_advance,
        complete=navigator.is_complete,
        accepted=accepted,
        profile=_profile_view(navigator.profile) if navigator.profile is not None else None,
    )


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        service=_settings.service_name,
        version=_settings.service_version,
        timestamp=datetime.now(tz=timezone.utc),
    )


@router.get("/metrics", response_class=PlainTextResponse)
def metrics() -> str:
    if not _settings.metrics_enabled:
        raise HTTPException(status_code=404, detail="metrics endpoint disabled")
    return _metrics.render_prometheus()


@router.get("/catalog", response_model=CatalogResponse)
def catalog() -> CatalogResponse:
    return CatalogResponse(
        total_questions=_catalog.total_questions,
        areas=[
            AreaView(
                id=area.id,
                name=area.name,
                description=area.description,
                icon=area.icon,
                questions=[
                    QuestionView(
                        id=question.id,
                        text=question.text,
                        options=[
                            OptionView(value=option.value, text=option.text, risk_weight=option.risk_weight)
                            for option in question.options
                        ],
                    )
                    for question in area.questions
                ],
            )
            for area in _catalog.areas
        ],
    )


@router.post("/score", response_model=ScoreResponse)
def score(payload: ScoreRequest, request: Request) -> ScoreResponse:
    started = _begin()
    trace_id = _trace_id(request)

    answers: list[Answer] = []
    ignored: list[AnswerInput] = []
    for item in payload.answers:
        question = _catalog.question(item.question_id)
        option = question.option(item.selected_value) if question is not None else None
        if option is None:
            ignored.append(item)
            continue
        answers.append(
            Answer(question_id=question.id, selected_value=option.value, risk_weight=option.risk_weight)
        )

    profile = _engine.scorer.evaluate(answers)
    if ignored and _settings.metrics_enabled:
        _metrics.record_ignored_answer(len(ignored))

    log_event(
        logger,
        "risk_score_computed",
        trace_id=trace_id,
        answers=len(answers),
        ignored=len(ignored),
        overall_score=round(profile.overall_score, 4),
        recommendation_ids=[item.id for item in profile.recommendations],
    )
    _finish(started)
    return ScoreResponse(data=_profile_view(profile), ignored=ignored)


@router.post("/assessments", response_model=AssessmentState, status_code=201)
def create_assessment(request: Request) -> AssessmentState:
    started = _begin()
    record = _engine.create(_trace_id(request))
    _finish(started)
    return _state(record)


@router.get("/assessments/{assessment_id}", response_model=AssessmentState)
def get_assessment(assessment_id: str, request: Request) -> AssessmentState:
    started = _begin()
    record = _lookup(assessment_id, _trace_id(request))
    _finish(started)
    return _state(record)


@router.post("/assessments/{assessment_id}/answers", response_model=AssessmentState)
def record_answer(assessment_id: str, payload: RecordAnswerRequest, request: Request) -> AssessmentState:
    started = _begin()
    trace_id = _trace_id(request)
    _lookup(assessment_id, trace_id)
    try:
        record, accepted = _engine.record_answer(assessment_id, payload.option_value, trace_id)
    except AssessmentCompleteError as exc:
        raise ApiError.assessment_complete(assessment_id, trace_id) from exc
    _finish(started)
    return _state(record, accepted=accepted)


@router.post("/assessments/{assessment_id}/advance", response_model=AssessmentState)
def advance(assessment_id: str, request: Request) -> AssessmentState:
    started = _begin()
    trace_id = _trace_id(request)
    _lookup(assessment_id, trace_id)
    try:
        record = _engine.advance(assessment_id, trace_id)
    except AssessmentCompleteError as exc:
        raise ApiError.assessment_complete(assessment_id, trace_id) from exc
    _finish(started)
    return _state(record)


@router.post("/assessments/{assessment_id}/retreat", response_model=AssessmentState)
def retreat(assessment_id: str, request: Request) -> AssessmentState:
    started = _begin()
    trace_id = _trace_id(request)
    _lookup(assessment_id, trace_id)
    try:
        record = _engine.retreat(assessment_id, trace_id)
    except AssessmentCompleteError as exc:
        raise ApiError.assessment_complete(assessment_id, trace_id) from exc
    _finish(started)
    return _state(record)


@router.post("/assessments/{assessment_id}/reset", response_model=AssessmentState)
def reset(assessment_id: str, request: Request) -> AssessmentState:
    started = _begin()
    trace_id = _trace_id(request)
    _lookup(assessment_id, trace_id)
    record = _engine.restart(assessment_id, trace_id)
    _finish(started)
    return _state(record)


@router.delete("/assessments/{assessment_id}", status_code=204)
def delete_assessment(assessment_id: str, request: Request) -> Response:
    started = _begin()
    trace_id = _trace_id(request)
    _lookup(assessment_id, trace_id)
    _engine.delete(assessment_id)
    log_event(logger, "assessment_deleted", assessment_id=assessment_id, trace_id=trace_id)
    _finish(started)
    return Response(status_code=204)


@router.get("/assessments/{assessment_id}/result", response_model=RiskProfileView)
def result(assessment_id: str, request: Request) -> RiskProfileView:
    started = _begin()
    trace_id = _trace_id(request)
    record = _lookup(assessment_id, trace_id)
    profile = record.navigator.profile
    if profile is None:
        raise ApiError.assessment_incomplete(assessment_id, trace_id)
    _finish(started)
    return _profile_view(profile)
