"""Day and week accuracy scoring.

Level accuracy ("were the price targets right") and mode assessment ("was the
risk regime call right") are scored separately and only combined in the
weekly composite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

import numpy as np

from reportdesk.analysis.accuracy.comparator import (
    InvalidRealizedRange,
    LevelOutcome,
    RealizedRange,
    check_range,
)
from reportdesk.core.modes import Mode, coerce_mode, daily_cap_for


# Weekly composite weights
WEEKLY_SCORE_WEIGHTS = {
    "level_accuracy": 0.7,
    "mode_accuracy": 0.3,
}

# Minimum accuracy_pct → grade on a 5-point scale
GRADE_THRESHOLDS = ((90, 5), (75, 4), (60, 3), (40, 2))
MAX_GRADE = 5

# Later-half vs earlier-half mean accuracy, in percentage points
TREND_THRESHOLD = 5.0


class ModeAssessment(str, Enum):
    CORRECT = "Correct"
    INCORRECT = "Incorrect"


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    FLAT = "flat"


def grade_for(accuracy_pct: float) -> int:
    for minimum, grade in GRADE_THRESHOLDS:
        if accuracy_pct >= minimum:
            return grade
    return 1


@dataclass
class DayAccuracy:
    date: date | None
    levels: list[LevelOutcome]
    accuracy_pct: float
    mode_assessment: ModeAssessment
    mode: Mode
    range_pct: float
    daily_cap: float

    @property
    def hits(self) -> int:
        return sum(1 for outcome in self.levels if outcome.hit)

    @property
    def total(self) -> int:
        return len(self.levels)

    @property
    def grade(self) -> int:
        return grade_for(self.accuracy_pct)


@dataclass
class ModeStats:
    days: int = 0
    correct: int = 0
    avg_accuracy: float = 0.0


@dataclass
class WeekScorecard:
    week_label: str
    trading_days: list[DayAccuracy]
    weekly_score: float
    overall_level_accuracy: float
    best_day: DayAccuracy | None
    worst_day: DayAccuracy | None
    trend: Trend = Trend.FLAT
    mode_accuracy: float = 0.0
    mode_breakdown: dict[Mode, ModeStats] = field(default_factory=dict)


def score_day(
    outcomes: list[LevelOutcome],
    mode: Mode | str,
    daily_open: float,
    realized: RealizedRange,
    day: date | None = None,
    daily_cap: float | None = None,
) -> DayAccuracy:
    """Score one trading day.

    ``daily_cap`` overrides the mode's default cap when the report stated its
    own. Raises ``InvalidRealizedRange`` for an unusable open or range.
    """
    check_range(realized)
    if not isinstance(daily_open, (int, float)) or not np.isfinite(daily_open) or daily_open <= 0:
        raise InvalidRealizedRange(f"Daily open must be a positive finite price, got {daily_open!r}")

    resolved = coerce_mode(mode)
    if resolved is None:
        raise ValueError(f"Unknown mode {mode!r}")

    hits = sum(1 for outcome in outcomes if outcome.hit)
    accuracy_pct = round(hits / len(outcomes) * 100, 2) if outcomes else 0.0

    cap = daily_cap_for(resolved, daily_cap)
    exact_range_pct = (realized.high - realized.low) / daily_open * 100
    assessment = ModeAssessment.CORRECT if exact_range_pct <= cap else ModeAssessment.INCORRECT
    range_pct = round(exact_range_pct, 2)

    return DayAccuracy(
        date=day,
        levels=list(outcomes),
        accuracy_pct=accuracy_pct,
        mode_assessment=assessment,
        mode=resolved,
        range_pct=range_pct,
        daily_cap=cap,
    )


def _date_key(day: DayAccuracy) -> date:
    return day.date or date.max


def _trend(days: list[DayAccuracy]) -> Trend:
    if len(days) < 2:
        return Trend.FLAT
    ordered = sorted(days, key=_date_key)
    half = len(ordered) // 2
    earlier = [d.accuracy_pct for d in ordered[:half]]
    later = [d.accuracy_pct for d in ordered[len(ordered) - half:]]
    delta = float(np.mean(later) - np.mean(earlier))
    if delta > TREND_THRESHOLD:
        return Trend.IMPROVING
    if delta < -TREND_THRESHOLD:
        return Trend.DECLINING
    return Trend.FLAT


def aggregate_week(days: list[DayAccuracy], week_label: str = "") -> WeekScorecard:
    """Roll a week of day scores into a scorecard.

    ``overall_level_accuracy`` pools every level of the week (Σhits / Σlevels)
    rather than averaging the daily percentages.
    """
    if not days:
        return WeekScorecard(
            week_label=week_label, trading_days=[], weekly_score=0.0,
            overall_level_accuracy=0.0, best_day=None, worst_day=None,
        )

    total_levels = sum(d.total for d in days)
    total_hits = sum(d.hits for d in days)
    overall = round(total_hits / total_levels * 100, 2) if total_levels else 0.0

    correct = sum(1 for d in days if d.mode_assessment == ModeAssessment.CORRECT)
    mode_accuracy = round(correct / len(days) * 100, 2)

    weekly_score = round(
        WEEKLY_SCORE_WEIGHTS["level_accuracy"] * overall
        + WEEKLY_SCORE_WEIGHTS["mode_accuracy"] * mode_accuracy,
        2,
    )

    breakdown: dict[Mode, ModeStats] = {}
    for d in days:
        stats = breakdown.setdefault(d.mode, ModeStats())
        stats.days += 1
        stats.correct += d.mode_assessment == ModeAssessment.CORRECT
    for mode, stats in breakdown.items():
        stats.avg_accuracy = round(float(np.mean([d.accuracy_pct for d in days if d.mode == mode])), 2)

    return WeekScorecard(
        week_label=week_label,
        trading_days=sorted(days, key=_date_key),
        weekly_score=weekly_score,
        overall_level_accuracy=overall,
        best_day=min(days, key=lambda d: (-d.accuracy_pct, _date_key(d))),
        worst_day=min(days, key=lambda d: (d.accuracy_pct, _date_key(d))),
        trend=_trend(days),
        mode_accuracy=mode_accuracy,
        mode_breakdown=breakdown,
    )
