"""CGM trend directions."""

from __future__ import annotations

from enum import Enum


class Trend(str, Enum):
    """Direction of glucose change reported alongside a sensor reading."""

    DOUBLE_UP = "DoubleUp"
    SINGLE_UP = "SingleUp"
    FORTY_FIVE_UP = "FortyFiveUp"
    FLAT = "Flat"
    FORTY_FIVE_DOWN = "FortyFiveDown"
    SINGLE_DOWN = "SingleDown"
    DOUBLE_DOWN = "DoubleDown"
    NONE = "NONE"
    NOT_COMPUTABLE = "NOT COMPUTABLE"
    RATE_OUT_OF_RANGE = "RATE OUT OF RANGE"

    @classmethod
    def _missing_(cls, value: object) -> Trend:
        # Uploaders occasionally invent directions; keep the reading usable.
        return cls.NOT_COMPUTABLE

    @property
    def arrow(self) -> str:
        return _ARROWS.get(self, "↮")

    def __str__(self) -> str:
        return self.arrow


_ARROWS = {
    Trend.DOUBLE_UP: "↑↑",
    Trend.SINGLE_UP: "↑",
    Trend.FORTY_FIVE_UP: "↗",
    Trend.FLAT: "→",
    Trend.FORTY_FIVE_DOWN: "↘",
    Trend.SINGLE_DOWN: "↓",
    Trend.DOUBLE_DOWN: "↓↓",
}
