"""Protective advice per heat index category, plus general safety tips."""

from heatshield.models.heat import HeatAdvice, HeatIndex, SafetyTip

HEAT_ADVICE: dict[HeatIndex, HeatAdvice] = {
    HeatIndex.SAFE: HeatAdvice(
        title="Condiciones Seguras",
        reason=(
            "La temperatura está en un rango cómodo y la humedad es tolerable. "
            "El riesgo de estrés por calor es mínimo."
        ),
        actions=[
            "Mantén actividades normales",
            "Hidratación regular cada hora",
            "Aprovecha para actividades al aire libre",
        ],
    ),
    HeatIndex.CAUTION: HeatAdvice(
        title="Precaución Necesaria",
        reason=(
            "El aumento de temperatura y humedad puede causar fatiga durante "
            "actividades prolongadas. El cuerpo comienza a trabajar más para "
            "mantener la temperatura."
        ),
        actions=[
            "Aumenta la frecuencia de hidratación",
            "Toma descansos en sombra cada 30 minutos",
            "Usa ropa ligera y de colores claros",
        ],
    ),
    HeatIndex.WARNING: HeatAdvice(
        title="Advertencia de Calor",
        reason=(
            "Las altas temperaturas interfieren significativamente con la "
            "capacidad del cuerpo para enfriarse. Riesgo moderado de calambres "
            "y agotamiento por calor."
        ),
        actions=[
            "Limita actividades exteriores intensas",
            "Busca aire acondicionado cada 2 horas",
            "Hidratación cada 15-20 minutos",
            "Monitorea síntomas de agotamiento",
        ],
    ),
    HeatIndex.DANGER: HeatAdvice(
        title="Peligro Inminente",
        reason=(
            "El sistema de enfriamiento natural del cuerpo está sobrecargado. "
            "Alto riesgo de golpe de calor, calambres severos y deshidratación "
            "grave."
        ),
        actions=[
            "Evita completamente el exterior",
            "Permanece en espacios climatizados",
            "Hidratación constante (pequeños sorbos)",
            "Aplica toallas frías en cuello y muñecas",
            "Contacta servicios médicos si hay síntomas",
        ],
    ),
    HeatIndex.EXTREME: HeatAdvice(
        title="Emergencia por Calor Extremo",
        reason=(
            "Condiciones potencialmente letales. El cuerpo no puede regular su "
            "temperatura, causando falla de órganos vitales. Riesgo inmediato "
            "de muerte."
        ),
        actions=[
            "BUSCA REFUGIO INMEDIATAMENTE",
            "Llama a servicios de emergencia",
            "Enfriamiento corporal agresivo",
            "No salgas bajo ninguna circunstancia",
            "Monitoreo médico continuo",
        ],
    ),
}

SAFETY_TIPS: list[SafetyTip] = [
    SafetyTip(
        "💧",
        "Hidratación constante cada 15-20 minutos",
        "Bebe agua aunque no tengas sed. En calor extremo, necesitas "
        "250-300ml cada 15-20 minutos.",
    ),
    SafetyTip(
        "🌳",
        "Búsqueda activa de áreas sombreadas",
        "La sombra puede reducir la temperatura hasta 15°C. Busca árboles, "
        "toldos o estructuras.",
    ),
    SafetyTip(
        "👕",
        "Vestimenta ligera en tonos claros",
        "Usa ropa de algodón o materiales transpirables en colores blancos o "
        "claros que reflejen el calor.",
    ),
    SafetyTip(
        "⏰",
        "Evitar exposición 12:00 - 16:00 hrs",
        "Las horas de mayor radiación solar. Si debes salir, usa protección "
        "extra.",
    ),
    SafetyTip(
        "🧴",
        "Protección solar cada 2 horas",
        "Usa factor 30+ y reaplica frecuentemente, especialmente después de "
        "sudar.",
    ),
    SafetyTip(
        "❄️",
        "Toallas húmedas en puntos de pulso",
        "Aplica en cuello, muñecas y sienes para enfriar la sangre que va al "
        "cerebro.",
    ),
    SafetyTip(
        "🏠",
        "Crear corrientes de aire en casa",
        "Abre ventanas opuestas durante las horas frescas para crear "
        "ventilación cruzada.",
    ),
    SafetyTip(
        "🚗",
        "Nunca dejes personas/mascotas en vehículos",
        "Un auto puede alcanzar 60°C en 20 minutos, incluso con ventanas "
        "abiertas.",
    ),
]


def advice_for(heat_index: HeatIndex) -> HeatAdvice:
    return HEAT_ADVICE[heat_index]
