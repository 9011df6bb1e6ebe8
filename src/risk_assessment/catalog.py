"""Static question catalog: areas -> questions -> weighted options."""

from __future__ import annotations

from dataclasses import dataclass, field


MAX_RISK_WEIGHT = 10


class CatalogError(ValueError):
    """Raised when a catalog definition is malformed."""


@dataclass(frozen=True)
class Option:
    """One selectable answer with its risk weight."""

    value: str
    text: str
    risk_weight: int


@dataclass(frozen=True)
class Question:
    """Multiple-choice question with ordered options."""

    id: str
    text: str
    options: tuple[Option, ...]

    def option(self, value: str) -> Option | None:
        for candidate in self.options:
            if candidate.value == value:
                return candidate
        return None


@dataclass(frozen=True)
class Area:
    """Topical grouping of questions."""

    id: str
    name: str
    description: str
    icon: str
    questions: tuple[Question, ...]


@dataclass(frozen=True)
class QuestionCatalog:
    """Immutable, validated, ordered set of areas.

    Area order drives navigation and is significant. A question id -> area
    index is built once so scoring does not scan the areas per answer.
    """

    areas: tuple[Area, ...]
    _area_by_id: dict[str, tuple[int, Area]] = field(init=False, repr=False, compare=False)
    _question_by_id: dict[str, Question] = field(init=False, repr=False, compare=False)
    _area_id_by_question: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        areas = tuple(self.areas)
        if not areas:
            raise CatalogError("catalog must contain at least one area")

        area_by_id: dict[str, tuple[int, Area]] = {}
        question_by_id: dict[str, Question] = {}
        area_id_by_question: dict[str, str] = {}

        for index, area in enumerate(areas):
            if area.id in area_by_id:
                raise CatalogError(f"duplicate area id: {area.id}")
            if not area.questions:
                raise CatalogError(f"area {area.id} has no questions")
            area_by_id[area.id] = (index, area)

            for question in area.questions:
                if question.id in question_by_id:
                    raise CatalogError(f"duplicate question id: {question.id}")
                if not question.options:
                    raise CatalogError(f"question {question.id} has no options")
                values = [option.value for option in question.options]
                if len(set(values)) != len(values):
                    raise CatalogError(f"question {question.id} has duplicate option values")
                for option in question.options:
                    if not 0 <= option.risk_weight <= MAX_RISK_WEIGHT:
                        raise CatalogError(
                            f"option {question.id}/{option.value} weight {option.risk_weight} "
                            f"outside [0, {MAX_RISK_WEIGHT}]"
                        )
                question_by_id[question.id] = question
                area_id_by_question[question.id] = area.id

        object.__setattr__(self, "areas", areas)
        object.__setattr__(self, "_area_by_id", area_by_id)
        object.__setattr__(self, "_question_by_id", question_by_id)
        object.__setattr__(self, "_area_id_by_question", area_id_by_question)

    @property
    def total_questions(self) -> int:
        return len(self._question_by_id)

    def area(self, area_id: str) -> Area | None:
        entry = self._area_by_id.get(area_id)
        return entry[1] if entry else None

    def area_index(self, area_id: str) -> int | None:
        entry = self._area_by_id.get(area_id)
        return entry[0] if entry else None

    def question(self, question_id: str) -> Question | None:
        return self._question_by_id.get(question_id)

    def area_for_question(self, question_id: str) -> Area | None:
        area_id = self._area_id_by_question.get(question_id)
        if area_id is None:
            return None
        return self._area_by_id[area_id][1]


DEFAULT_CATALOG = QuestionCatalog(
    (
        Area(
            id="passwords",
            name="Passwords & Authentication",
            description="How strong your passwords are and how you manage them",
            icon="lock",
            questions=(
                Question(
                    id="pwd-1",
                    text="How do you manage your passwords?",
                    options=(
                        Option("same-all", "I use the same password for everything", 10),
                        Option("few-diff", "I have a few different passwords that I reuse", 7),
                        Option("many-diff", "I use different passwords for important services", 4),
                        Option("pwd-manager", "I use a password manager", 1),
                    ),
                ),
                Question(
                    id="pwd-2",
                    text="Do you use two-factor authentication (2FA)?",
                    options=(
                        Option("never", "Never", 10),
                        Option("some", "Only on some services", 5),
                        Option("critical", "On every critical service (email, banking)", 2),
                        Option("always", "On every service that offers it", 0),
                    ),
                ),
            ),
        ),
        Area(
            id="devices",
            name="Device Security",
            description="Protection of your computers and mobile devices",
            icon="smartphone",
            questions=(
                Question(
                    id="dev-1",
                    text="How often do you update your devices?",
                    options=(
                        Option("never", "Rarely or never", 10),
                        Option("when-broken", "Only when something stops working", 7),
                        Option("eventually", "Eventually, when I remember", 5),
                        Option("immediately", "As soon as updates are available", 1),
                    ),
                ),
                Question(
                    id="dev-2",
                    text="Do you use antivirus or other security software?",
                    options=(
                        Option("no", "I don't use any", 10),
                        Option("free-basic", "Only basic or free protection", 6),
                        Option("paid", "A paid, up-to-date solution", 2),
                        Option("comprehensive", "A full suite with firewall and other protections", 0),
                    ),
                ),
            ),
        ),
        Area(
            id="privacy",
            name="Online Privacy",
            description="Protection of personal data and online behaviour",
            icon="eye",
            questions=(
                Question(
                    id="priv-1",
                    text="How do you manage app permissions?",
                    options=(
                        Option("never-check", "I never check permissions", 10),
                        Option("accept-all", "I usually accept every request", 8),
                        Option("sometimes", "I sometimes check suspicious permissions", 4),
                        Option("always", "I always check and limit them to what is needed", 1),
                    ),
                ),
                Question(
                    id="priv-2",
                    text="Do you check that a website is genuine before entering information?",
                    options=(
                        Option("never", "I never check", 10),
                        Option("sometimes", "Sometimes, when it looks suspicious", 6),
                        Option("usually", "Usually, on important sites", 3),
                        Option("always", "Always, I check HTTPS and the source", 0),
                    ),
                ),
            ),
        ),
    )
)
