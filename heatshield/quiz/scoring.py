"""Quiz scoring: total score, tier band, savings estimate and explanations."""

from heatshield.models.quiz import (
    AnswerChoice,
    EnergyExplanation,
    QuizResult,
    TierProfile,
)
from heatshield.quiz.questions import MAX_SCORE, QUESTION_COUNT, TIERS

SAVINGS_PERCENT_PER_POINT = 15
# Savings section is hidden from this score upward.
SAVINGS_VISIBLE_BELOW = 14

# Average monthly electricity bill in Mexico (MXN) and the share spent on AC
# in hot climates.
AVERAGE_ELECTRIC_BILL_MXN = 2250
AC_SHARE_OF_BILL = 0.6

# (minimum missing points, explanation)
_EXPLANATIONS: list[tuple[int, EnergyExplanation]] = [
    (
        8,
        EnergyExplanation(
            kind="overheating",
            title="Sobrecalentamiento del hogar",
            description=(
                "Sin aislamiento y protección solar, tu hogar absorbe calor "
                "excesivo, forzando al AC a trabajar constantemente."
            ),
        ),
    ),
    (
        6,
        EnergyExplanation(
            kind="ventilation",
            title="Ventilación deficiente",
            description=(
                "La falta de ventilación cruzada obliga a usar aire "
                "acondicionado incluso cuando el exterior está fresco."
            ),
        ),
    ),
    (
        4,
        EnergyExplanation(
            kind="solar_gain",
            title="Ganancia solar directa",
            description=(
                "Ventanas sin protección y superficies oscuras aumentan la "
                "temperatura interior hasta 10°C más."
            ),
        ),
    ),
    (
        2,
        EnergyExplanation(
            kind="optimization",
            title="Optimización térmica",
            description=(
                "Pequeñas mejoras en aislamiento y sombra pueden generar "
                "ahorros significativos a largo plazo."
            ),
        ),
    ),
]


def total_score(answers: list[int]) -> int:
    """Sum the per-question answers.

    Raises:
        ValueError: if there are not exactly 8 answers or any is outside {0,1,2}.
    """
    if len(answers) != QUESTION_COUNT:
        raise ValueError(
            f"Expected {QUESTION_COUNT} answers, got {len(answers)}"
        )
    for i, a in enumerate(answers):
        if isinstance(a, bool) or a not in (0, 1, 2):
            raise ValueError(f"Answer {i + 1} must be 0, 1 or 2, got {a!r}")
    return sum(answers)


def tier_for_score(score: int) -> TierProfile:
    for profile in TIERS:
        if profile.min_score <= score <= profile.max_score:
            return profile
    raise ValueError(f"Score must be in [0, {MAX_SCORE}], got {score}")


def savings_percent(score: int) -> int:
    """Estimated AC energy savings: (16 - score) x 15 percent."""
    return (MAX_SCORE - score) * SAVINGS_PERCENT_PER_POINT


def thermal_efficiency(score: int) -> int:
    return int(score / MAX_SCORE * 100)


def monthly_savings_mxn(score: int) -> int:
    ac_cost = AVERAGE_ELECTRIC_BILL_MXN * AC_SHARE_OF_BILL
    return int(ac_cost * (savings_percent(score) / 100.0))


def energy_explanations(score: int) -> list[EnergyExplanation]:
    missing = MAX_SCORE - score
    return [exp for threshold, exp in _EXPLANATIONS if missing >= threshold]


def evaluate(answers: list[int]) -> QuizResult:
    score = total_score(answers)
    return QuizResult(
        answers=list(answers),
        score=score,
        profile=tier_for_score(score),
        savings_percent=savings_percent(score),
        temperature_reduction_c=MAX_SCORE - score,
        thermal_efficiency_percent=thermal_efficiency(score),
        monthly_savings_mxn=monthly_savings_mxn(score),
        show_savings=score < SAVINGS_VISIBLE_BELOW,
        explanations=energy_explanations(score),
    )


def parse_answers(raw: str) -> list[int]:
    """Parse a comma-separated answer string such as "2,1,0,2,2,1,0,2".

    Accepts numeric scores or the words si/sí/yes, parcial/partial, no.
    """
    words = {c.value: c.points for c in AnswerChoice}
    words.update({"si": 2, "sí": 2, "parcial": 1})
    answers = []
    for token in raw.split(","):
        token = token.strip().lower()
        if token in words:
            answers.append(words[token])
        else:
            try:
                answers.append(int(token))
            except ValueError:
                raise ValueError(f"Invalid answer: {token!r}") from None
    return answers
