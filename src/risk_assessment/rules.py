"""Threshold rules mapping answered risk weights to recommendations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}

PRIORITY_LABELS: dict[Priority, str] = {
    Priority.HIGH: "High priority",
    Priority.MEDIUM: "Medium priority",
    Priority.LOW: "Low priority",
}


def risk_level_for(score: float) -> str:
    """Map a 0-100 score to the low/medium/high display band."""

    if score < 30:
        return "low"
    if score < 70:
        return "medium"
    return "high"


@dataclass(frozen=True)
class RecommendationContent:
    """Static advisory text attached to a rule."""

    id: str
    title: str
    description: str
    action_steps: tuple[str, ...]


@dataclass(frozen=True)
class Recommendation:
    """Recommendation emitted by one scoring run."""

    id: str
    title: str
    description: str
    priority: Priority
    action_steps: tuple[str, ...]

    @property
    def priority_label(self) -> str:
        return PRIORITY_LABELS[self.priority]


@dataclass(frozen=True)
class RecommendationRule:
    """Fires when the answer to `question_id` weighs more than `threshold`."""

    question_id: str
    threshold: int
    high_threshold: int
    base_priority: Priority
    content: RecommendationContent

    def evaluate(self, risk_weight: int) -> Recommendation | None:
        if risk_weight <= self.threshold:
            return None
        priority = Priority.HIGH if risk_weight > self.high_threshold else self.base_priority
        return Recommendation(
            id=self.content.id,
            title=self.content.title,
            description=self.content.description,
            priority=priority,
            action_steps=self.content.action_steps,
        )


def sort_by_priority(recommendations: tuple[Recommendation, ...] | list[Recommendation]) -> list[Recommendation]:
    """Stable sort high -> medium -> low."""

    return sorted(recommendations, key=lambda item: PRIORITY_RANK[item.priority])


DEFAULT_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        question_id="pwd-1",
        threshold=3,
        high_threshold=7,
        base_priority=Priority.MEDIUM,
        content=RecommendationContent(
            id="rec-pwd-manager",
            title="Use a password manager",
            description="Password managers help you create and store strong, unique passwords for every service.",
            action_steps=(
                "Pick a trusted password manager such as Bitwarden, 1Password or LastPass",
                "Create a strong, memorable master password",
                "Gradually replace old passwords with strong generated ones",
            ),
        ),
    ),
    RecommendationRule(
        question_id="pwd-2",
        threshold=2,
        high_threshold=7,
        base_priority=Priority.MEDIUM,
        content=RecommendationContent(
            id="rec-2fa",
            title="Turn on two-factor authentication",
            description="Two-factor authentication adds an extra layer of security to your accounts.",
            action_steps=(
                "Enable 2FA on your main email account",
                "Enable 2FA on financial and social media accounts",
                "Prefer authenticator apps over SMS where possible",
            ),
        ),
    ),
    RecommendationRule(
        question_id="dev-1",
        threshold=4,
        high_threshold=7,
        base_priority=Priority.MEDIUM,
        content=RecommendationContent(
            id="rec-updates",
            title="Keep your devices up to date",
            description="Software updates often include important security fixes.",
            action_steps=(
                "Turn on automatic updates wherever possible",
                "Check regularly for pending updates",
                "Never skip critical security updates",
            ),
        ),
    ),
    RecommendationRule(
        question_id="dev-2",
        threshold=5,
        high_threshold=8,
        base_priority=Priority.MEDIUM,
        content=RecommendationContent(
            id="rec-antivirus",
            title="Improve your malware protection",
            description="Effective security software can prevent many common threats.",
            action_steps=(
                "Install a trusted security solution",
                "Run regular scans on your devices",
                "Keep virus definitions up to date",
            ),
        ),
    ),
    RecommendationRule(
        question_id="priv-1",
        threshold=4,
        high_threshold=8,
        base_priority=Priority.MEDIUM,
        content=RecommendationContent(
            id="rec-permissions",
            title="Review app permissions",
            description="Many apps collect more data than they need to work.",
            action_steps=(
                "Review the permissions of the apps you already have",
                "Restrict permissions to the minimum required",
                "Uninstall apps you no longer use",
            ),
        ),
    ),
    RecommendationRule(
        question_id="priv-2",
        threshold=3,
        high_threshold=7,
        base_priority=Priority.LOW,
        content=RecommendationContent(
            id="rec-phishing",
            title="Learn to spot fake websites",
            description="Phishing attacks are one of the most common ways data gets stolen.",
            action_steps=(
                "Always check the URL before entering information",
                "Look for the padlock icon and a valid HTTPS certificate",
                "Be wary of unsolicited emails and links",
            ),
        ),
    ),
)
