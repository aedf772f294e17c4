"""Heat index category model."""

from dataclasses import dataclass
from enum import StrEnum


class HeatIndex(StrEnum):
    SAFE = "safe"
    CAUTION = "caution"
    WARNING = "warning"
    DANGER = "danger"
    EXTREME = "extreme"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_LABELS = {
    HeatIndex.SAFE: "Seguro",
    HeatIndex.CAUTION: "Precaución",
    HeatIndex.WARNING: "Advertencia",
    HeatIndex.DANGER: "Peligro",
    HeatIndex.EXTREME: "Extremo",
}

_SEVERITY = {
    HeatIndex.SAFE: 0,
    HeatIndex.CAUTION: 1,
    HeatIndex.WARNING: 2,
    HeatIndex.DANGER: 3,
    HeatIndex.EXTREME: 4,
}


@dataclass(frozen=True)
class HeatAdvice:
    title: str
    reason: str
    actions: list[str]


@dataclass(frozen=True)
class SafetyTip:
    emoji: str
    title: str
    detail: str
