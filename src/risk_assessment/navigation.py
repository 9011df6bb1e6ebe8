"""Question navigation state machine that collects answers."""

from __future__ import annotations

from typing import Callable

from .catalog import Area, Question, QuestionCatalog
from .engine import Answer, RiskProfile, RiskScoringEngine


CompletionHandler = Callable[[RiskProfile], None]


class AssessmentCompleteError(RuntimeError):
    """Raised when navigating an assessment that already produced its profile."""


class AssessmentNavigator:
    """Walks the (area, question) grid of a catalog and records answers.

    Advancing past the last question of the last area scores the full answer
    set once and enters the terminal state; only `reset()` leaves it.
    """

    def __init__(
        self,
        catalog: QuestionCatalog,
        scorer: RiskScoringEngine,
        on_complete: CompletionHandler | None = None,
    ) -> None:
        self.catalog = catalog
        self.scorer = scorer
        self.on_complete = on_complete
        self.reset()

    def reset(self) -> None:
        self.area_index = 0
        self.question_index = 0
        self._answers: dict[str, Answer] = {}
        self.profile: RiskProfile | None = None

    @property
    def is_complete(self) -> bool:
        return self.profile is not None

    @property
    def position(self) -> tuple[int, int]:
        return self.area_index, self.question_index

    @property
    def current_area(self) -> Area:
        return self.catalog.areas[self.area_index]

    @property
    def current_question(self) -> Question:
        return self.current_area.questions[self.question_index]

    @property
    def answers(self) -> tuple[Answer, ...]:
        return tuple(self._answers.values())

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def can_retreat(self) -> bool:
        return not self.is_complete and self.position != (0, 0)

    @property
    def can_advance(self) -> bool:
        return not self.is_complete and self.current_question.id in self._answers

    def _ensure_open(self) -> None:
        if self.is_complete:
            raise AssessmentCompleteError("assessment already complete; reset to start again")

    def current_selection_for(self, question_id: str) -> str | None:
        answer = self._answers.get(question_id)
        return answer.selected_value if answer else None

    def progress_percent(self) -> float:
        return self.answered_count / self.catalog.total_questions * 100

    def record_answer(self, option_value: str) -> bool:
        """Store the option for the current question and advance.

        Returns False, leaving state untouched, when the value is not one of
        the current question's options.
        """

        self._ensure_open()
        question = self.current_question
        option = question.option(option_value)
        if option is None:
            return False

        self._answers.pop(question.id, None)
        self._answers[question.id] = Answer(
            question_id=question.id,
            selected_value=option.value,
            risk_weight=option.risk_weight,
        )
        self.advance()
        return True

    def advance(self) -> RiskProfile | None:
        self._ensure_open()
        area = self.current_area
        if self.question_index < len(area.questions) - 1:
            self.question_index += 1
            return None
        if self.area_index < len(self.catalog.areas) - 1:
            self.area_index += 1
            self.question_index = 0
            return None

        self.profile = self.scorer.evaluate(self.answers)
        if self.on_complete is not None:
            self.on_complete(self.profile)
        return self.profile

    def retreat(self) -> bool:
        self._ensure_open()
        if self.question_index > 0:
            self.question_index -= 1
            return True
        if self.area_index > 0:
            self.area_index -= 1
            self.question_index = len(self.current_area.questions) - 1
            return True
        return False
