"""The eight home-preparedness questions and the five result tiers."""

from heatshield.models.quiz import QuizQuestion, QuizTier, TierProfile

QUESTIONS: list[QuizQuestion] = [
    QuizQuestion(
        "¿Tu techo es de color claro o tiene material reflectante?",
        "Los techos claros pueden reducir hasta 30% del calor interior",
    ),
    QuizQuestion(
        "¿Tienes ventilación cruzada en tu hogar?",
        "Aberturas en lados opuestos permiten que el aire circule naturalmente",
    ),
    QuizQuestion(
        "¿Usas cortinas térmicas o persianas que bloqueen el sol?",
        "Pueden reducir hasta 77% del calor que entra por ventanas",
    ),
    QuizQuestion(
        "¿Tienes árboles o estructuras que den sombra a tu casa?",
        "La sombra puede reducir la temperatura exterior hasta 9°C",
    ),
    QuizQuestion(
        "¿Cuentas con aislamiento térmico en paredes y techo?",
        "El aislamiento mantiene temperaturas interiores estables",
    ),
    QuizQuestion(
        "¿Tienes ventiladores de techo o aire acondicionado?",
        "Mejoran la circulación y reducen la sensación térmica",
    ),
    QuizQuestion(
        "¿Las ventanas tienen doble vidrio o película solar?",
        "Reducen significativamente la transferencia de calor",
    ),
    QuizQuestion(
        "¿Mantienes cerradas puertas y ventanas durante el día?",
        "Evita que entre aire caliente del exterior",
    ),
]

QUESTION_COUNT = len(QUESTIONS)
MAX_POINTS_PER_ANSWER = 2
MAX_SCORE = QUESTION_COUNT * MAX_POINTS_PER_ANSWER

# Ordered from lowest to highest score band.
TIERS: list[TierProfile] = [
    TierProfile(
        tier=QuizTier.CRITICAL,
        label="Crítico",
        emoji="🚨",
        summary="Tu hogar necesita adaptaciones urgentes",
        min_score=0,
        max_score=2,
        recommendations=[
            "Aislamiento térmico inmediato",
            "Instalación de aire acondicionado",
            "Cortinas térmicas en todas las ventanas",
            "Ventilación forzada",
            "Techos reflectantes",
            "Sombra con árboles o toldos",
        ],
    ),
    TierProfile(
        tier=QuizTier.NEEDS_IMPROVEMENT,
        label="Necesita mejoras",
        emoji="⚠️",
        summary="Tu hogar requiere adaptaciones importantes",
        min_score=3,
        max_score=5,
        recommendations=[
            "Prioriza aislamiento térmico",
            "Instala ventiladores de techo",
            "Usa cortinas reflectantes",
            "Pinta superficies de colores claros",
            "Mejora ventilación",
        ],
    ),
    TierProfile(
        tier=QuizTier.GOOD,
        label="Bueno",
        emoji="👍",
        summary="Tu hogar tiene preparación moderada",
        min_score=6,
        max_score=9,
        recommendations=[
            "Instala cortinas térmicas",
            "Mejora la ventilación cruzada",
            "Considera pintar el techo de blanco",
            "Planta árboles estratégicamente",
        ],
    ),
    TierProfile(
        tier=QuizTier.VERY_GOOD,
        label="Muy Bueno",
        emoji="⭐",
        summary="Tu hogar tiene muy buena preparación térmica",
        min_score=10,
        max_score=13,
        recommendations=[
            "Optimiza horarios de ventilación",
            "Considera mejorar aislamiento",
            "Evalúa cortinas térmicas adicionales",
        ],
    ),
    TierProfile(
        tier=QuizTier.EXCELLENT,
        label="Excelente",
        emoji="🏆",
        summary="Tu hogar está óptimamente preparado contra el calor extremo",
        min_score=14,
        max_score=16,
        recommendations=[
            "Mantén las mejoras actuales",
            "Considera automatización domótica",
            "Evalúa sistemas de energía solar",
        ],
    ),
]
