"""Risk scoring engine: answers -> area scores -> overall score -> recommendations."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, Literal

from .catalog import DEFAULT_CATALOG, MAX_RISK_WEIGHT, Area, QuestionCatalog
from .observability import log_event
from .rules import DEFAULT_RULES, Recommendation, RecommendationRule, risk_level_for, sort_by_priority


AreaOrder = Literal["answer", "catalog"]

logger = logging.getLogger("risk_assessment")


@dataclass(frozen=True)
class Answer:
    """Selected option for one question; weight copied at selection time."""

    question_id: str
    selected_value: str
    risk_weight: int


@dataclass(frozen=True)
class AreaScore:
    """Score of one area in [0, 100]."""

    area_id: str
    name: str
    score: float

    @property
    def risk_level(self) -> str:
        return risk_level_for(self.score)


@dataclass(frozen=True)
class RiskProfile:
    """Complete output of one assessment run."""

    overall_score: float = 0.0
    area_scores: tuple[AreaScore, ...] = field(default_factory=tuple)
    recommendations: tuple[Recommendation, ...] = field(default_factory=tuple)

    @property
    def risk_level(self) -> str:
        return risk_level_for(self.overall_score)

    def sorted_recommendations(self) -> list[Recommendation]:
        return sort_by_priority(self.recommendations)


EMPTY_PROFILE = RiskProfile()


def deduplicate(answers: Iterable[Answer]) -> list[Answer]:
    """Keep the last answer per question; a re-answered question moves to the end."""

    latest: dict[str, Answer] = {}
    for answer in answers:
        latest.pop(answer.question_id, None)
        latest[answer.question_id] = answer
    return list(latest.values())


class RiskScoringEngine:
    """Pure scoring over a fixed catalog and rule table.

    Area scores use the full question count of the area as denominator,
    so a partially answered area scores lower than its answers alone would
    suggest. Areas without answers are left out of both `area_scores` and
    the overall mean.
    """

    def __init__(
        self,
        catalog: QuestionCatalog = DEFAULT_CATALOG,
        rules: tuple[RecommendationRule, ...] = DEFAULT_RULES,
        area_order: AreaOrder = "answer",
    ) -> None:
        self.catalog = catalog
        self.rules = rules
        self.area_order = area_order

    def _bucket(self, answers: list[Answer]) -> dict[str, list[Answer]]:
        buckets: dict[str, list[Answer]] = {}
        for answer in answers:
            area = self.catalog.area_for_question(answer.question_id)
            if area is None:
                log_event(
                    logger,
                    "risk_scoring_unknown_question",
                    level=logging.WARNING,
                    question_id=answer.question_id,
                )
                continue
            buckets.setdefault(area.id, []).append(answer)

        if self.area_order == "catalog":
            return {
                area.id: buckets[area.id]
                for area in self.catalog.areas
                if area.id in buckets
            }
        return buckets

    @staticmethod
    def _area_score(area: Area, answers: list[Answer]) -> AreaScore:
        possible = len(area.questions) * MAX_RISK_WEIGHT
        actual = sum(answer.risk_weight for answer in answers)
        return AreaScore(area_id=area.id, name=area.name, score=actual / possible * 100)

    def _recommendations(self, buckets: dict[str, list[Answer]]) -> list[Recommendation]:
        weights = {
            answer.question_id: answer.risk_weight
            for bucket in buckets.values()
            for answer in bucket
        }
        emitted: list[Recommendation] = []
        for rule in self.rules:
            weight = weights.get(rule.question_id)
            if weight is None:
                continue
            recommendation = rule.evaluate(weight)
            if recommendation is not None:
                emitted.append(recommendation)
        return emitted

    def evaluate(self, answers: Iterable[Answer]) -> RiskProfile:
        buckets = self._bucket(deduplicate(answers))
        if not buckets:
            return EMPTY_PROFILE

        area_scores = [
            self._area_score(self.catalog.area(area_id), bucket)
            for area_id, bucket in buckets.items()
        ]
        overall = sum(item.score for item in area_scores) / len(area_scores)
        return RiskProfile(
            overall_score=overall,
            area_scores=tuple(area_scores),
            recommendations=tuple(self._recommendations(buckets)),
        )


def calculate_risk_score(
    answers: Iterable[Answer],
    catalog: QuestionCatalog = DEFAULT_CATALOG,
    rules: tuple[RecommendationRule, ...] = DEFAULT_RULES,
    area_order: AreaOrder = "answer",
) -> RiskProfile:
    """Score a set of answers against the catalog."""

    return RiskScoringEngine(catalog, rules, area_order).evaluate(answers)
