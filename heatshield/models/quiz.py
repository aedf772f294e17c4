"""Home thermal assessment quiz models."""

from dataclasses import dataclass, field
from enum import StrEnum


class QuizTier(StrEnum):
    CRITICAL = "critical"
    NEEDS_IMPROVEMENT = "needs_improvement"
    GOOD = "good"
    VERY_GOOD = "very_good"
    EXCELLENT = "excellent"


class AnswerChoice(StrEnum):
    YES = "yes"
    PARTIAL = "partial"
    NO = "no"

    @property
    def points(self) -> int:
        return {AnswerChoice.YES: 2, AnswerChoice.PARTIAL: 1, AnswerChoice.NO: 0}[self]


@dataclass(frozen=True)
class QuizQuestion:
    prompt: str
    hint: str


@dataclass(frozen=True)
class TierProfile:
    tier: QuizTier
    label: str
    emoji: str
    summary: str
    min_score: int
    max_score: int
    recommendations: list[str]


@dataclass(frozen=True)
class EnergyExplanation:
    kind: str
    title: str
    description: str


@dataclass(frozen=True)
class QuizResult:
    answers: list[int]
    score: int
    profile: TierProfile
    savings_percent: int
    temperature_reduction_c: int
    thermal_efficiency_percent: int
    monthly_savings_mxn: int
    show_savings: bool
    explanations: list[EnergyExplanation] = field(default_factory=list)

    @property
    def tier(self) -> QuizTier:
        return self.profile.tier
