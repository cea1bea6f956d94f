"""Level comparison: forecast support/resistance levels vs the realized range."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from reportdesk.schemas.report import AlertDirection, ExtractedDailyReport

logger = logging.getLogger(__name__)


class LevelType(str, Enum):
    SUPPORT = "support"
    RESISTANCE = "resistance"


class InvalidRealizedRange(ValueError):
    """Realized prices that cannot be scored (high < low, non-positive, NaN)."""


@dataclass(frozen=True)
class ForecastLevel:
    name: str
    price: float
    type: LevelType


@dataclass(frozen=True)
class RealizedRange:
    high: float
    low: float
    open: float | None = None
    close: float | None = None

    @property
    def midpoint(self) -> float:
        return (self.high + self.low) / 2

    @property
    def range_pct(self) -> float | None:
        """Day's range as a percentage of the open."""
        if not self.open:
            return None
        return (self.high - self.low) / self.open * 100


@dataclass(frozen=True)
class LevelOutcome:
    level: ForecastLevel
    hit: bool
    distance: float  # negative on a hit = overshoot; positive on a miss = gap left


def _valid_price(value: float | None) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def check_range(realized: RealizedRange) -> None:
    """Raise ``InvalidRealizedRange`` unless ``realized`` is a usable day range."""
    for name in ("high", "low"):
        if not _valid_price(getattr(realized, name)):
            raise InvalidRealizedRange(f"Realized {name} must be a positive finite price, got {getattr(realized, name)!r}")
    for name in ("open", "close"):
        value = getattr(realized, name)
        if value is not None and not _valid_price(value):
            raise InvalidRealizedRange(f"Realized {name} must be a positive finite price, got {value!r}")
    if realized.high < realized.low:
        raise InvalidRealizedRange(f"Realized high {realized.high} is below low {realized.low}")


def _outcome(level: ForecastLevel, realized: RealizedRange) -> LevelOutcome:
    if level.type == LevelType.RESISTANCE:
        hit = realized.high >= level.price
        distance = level.price - realized.high
    else:
        hit = realized.low <= level.price
        distance = realized.low - level.price
    return LevelOutcome(level=level, hit=hit, distance=round(distance, 4))


def compare(
    levels: list[ForecastLevel],
    realized: RealizedRange,
    reference_price: float | None = None,
) -> list[LevelOutcome]:
    """Score each forecast level against the realized high/low.

    Levels are deduplicated on (type, price) and returned nearest to the
    reference price first (the realized open by default, else the range
    midpoint), so R1/S1 always name the nearest level.
    """
    check_range(realized)
    if reference_price is None:
        reference_price = realized.open if realized.open is not None else realized.midpoint

    unique: dict[tuple[LevelType, float], ForecastLevel] = {}
    for level in levels:
        if not _valid_price(level.price):
            logger.warning(f"Skipping level '{level.name}' with unusable price {level.price!r}")
            continue
        unique.setdefault((level.type, level.price), level)

    ranked = sorted(unique.values(), key=lambda lv: abs(lv.price - reference_price))
    return [_outcome(level, realized) for level in ranked]


def levels_from_report(record: ExtractedDailyReport) -> list[ForecastLevel]:
    """Forecast levels implied by a daily report.

    Alerts map directly (upside → resistance, downside → support). Reports
    without alerts fall back to actionable rows of the levels map, typed by
    which side of the close they sit on.
    """
    if record.alerts:
        return [
            ForecastLevel(
                name=alert.level_name,
                price=alert.price,
                type=LevelType.RESISTANCE if alert.direction == AlertDirection.UPSIDE else LevelType.SUPPORT,
            )
            for alert in record.alerts
        ]

    close = record.price.close
    if close is None:
        return []
    levels = []
    for entry in record.levels_map:
        if not entry.action or entry.price == close:
            continue
        level_type = LevelType.RESISTANCE if entry.price > close else LevelType.SUPPORT
        levels.append(ForecastLevel(name=entry.name, price=entry.price, type=level_type))
    return levels
