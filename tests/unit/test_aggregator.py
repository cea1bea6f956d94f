"""Tests for day scoring and weekly aggregation."""

from datetime import date

import pytest

from reportdesk.analysis.accuracy import (
    WEEKLY_SCORE_WEIGHTS,
    ForecastLevel,
    InvalidRealizedRange,
    LevelOutcome,
    LevelType,
    ModeAssessment,
    RealizedRange,
    Trend,
    aggregate_week,
    score_day,
)
from reportdesk.analysis.accuracy.aggregator import grade_for
from reportdesk.core.modes import Mode

QUIET_DAY = RealizedRange(high=410.0, low=398.0, open=400.0)


def _outcomes(hits: int, misses: int) -> list[LevelOutcome]:
    level = ForecastLevel(name="Level", price=405.0, type=LevelType.RESISTANCE)
    return (
        [LevelOutcome(level=level, hit=True, distance=-1.0)] * hits
        + [LevelOutcome(level=level, hit=False, distance=1.0)] * misses
    )


def _day(day: date, hits: int, misses: int, mode: Mode = Mode.YELLOW, realized: RealizedRange = QUIET_DAY):
    return score_day(_outcomes(hits, misses), mode, realized.open, realized, day=day)


class TestScoreDay:
    def test_level_accuracy(self):
        day = score_day(_outcomes(3, 1), Mode.YELLOW, 400.0, QUIET_DAY)
        assert day.accuracy_pct == 75.0
        assert (day.hits, day.total) == (3, 4)
        assert day.grade == 4

    def test_no_levels_scores_zero(self):
        day = score_day([], Mode.YELLOW, 400.0, QUIET_DAY)
        assert day.accuracy_pct == 0.0
        assert day.total == 0

    def test_range_within_cap_is_correct(self):
        day = score_day([], Mode.YELLOW, 400.0, RealizedRange(high=410.0, low=398.0))
        assert day.range_pct == 3.0
        assert day.daily_cap == 15
        assert day.mode_assessment == ModeAssessment.CORRECT

    def test_range_above_cap_is_incorrect(self):
        day = score_day([], Mode.RED, 400.0, RealizedRange(high=430.0, low=395.0))
        assert day.range_pct == 8.75
        assert day.daily_cap == 5
        assert day.mode_assessment == ModeAssessment.INCORRECT

    def test_range_equal_to_cap_is_correct(self):
        day = score_day([], Mode.RED, 400.0, RealizedRange(high=410.0, low=390.0))
        assert day.range_pct == 5.0
        assert day.mode_assessment == ModeAssessment.CORRECT

    def test_range_just_over_cap_is_incorrect(self):
        # 5.005% displays as 5.0 but still breaks the RED cap
        day = score_day([], Mode.RED, 400.0, RealizedRange(high=420.02, low=400.0))
        assert day.range_pct == 5.0
        assert day.mode_assessment == ModeAssessment.INCORRECT

    def test_stated_cap_overrides_mode(self):
        day = score_day([], Mode.YELLOW, 400.0, QUIET_DAY, daily_cap=2.0)
        assert day.daily_cap == 2.0
        assert day.mode_assessment == ModeAssessment.INCORRECT

    def test_mode_text_accepted(self):
        day = score_day([], "🟠 Orange (Deteriorating)", 400.0, QUIET_DAY)
        assert day.mode == Mode.ORANGE

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown mode"):
            score_day([], "purple", 400.0, QUIET_DAY)

    @pytest.mark.parametrize("daily_open", [0, -1.0, float("nan")])
    def test_invalid_open(self, daily_open):
        with pytest.raises(InvalidRealizedRange):
            score_day([], Mode.YELLOW, daily_open, QUIET_DAY)

    def test_invalid_range(self):
        with pytest.raises(InvalidRealizedRange):
            score_day([], Mode.YELLOW, 400.0, RealizedRange(high=390.0, low=398.0))


class TestGrade:
    @pytest.mark.parametrize("accuracy, grade", [(100, 5), (90, 5), (75, 4), (60, 3), (40, 2), (39.99, 1), (0, 1)])
    def test_thresholds(self, accuracy, grade):
        assert grade_for(accuracy) == grade


class TestAggregateWeek:
    def test_pooled_level_accuracy(self):
        days = [_day(date(2026, 1, 26), 3, 0), _day(date(2026, 1, 27), 0, 1)]
        week = aggregate_week(days, week_label="Jan 26 - Jan 30, 2026")
        assert week.overall_level_accuracy == 75.0
        assert week.mode_accuracy == 100.0
        assert week.weekly_score == 82.5
        assert week.week_label == "Jan 26 - Jan 30, 2026"

    def test_weights(self):
        assert WEEKLY_SCORE_WEIGHTS == {"level_accuracy": 0.7, "mode_accuracy": 0.3}

    def test_best_and_worst_day(self):
        days = [_day(date(2026, 1, 26), 1, 1), _day(date(2026, 1, 27), 2, 0), _day(date(2026, 1, 28), 0, 2)]
        week = aggregate_week(days)
        assert week.best_day.date == date(2026, 1, 27)
        assert week.worst_day.date == date(2026, 1, 28)

    def test_ties_go_to_earliest_day(self):
        days = [_day(date(2026, 1, 28), 1, 1), _day(date(2026, 1, 26), 1, 1)]
        week = aggregate_week(days)
        assert week.best_day.date == date(2026, 1, 26)
        assert week.worst_day.date == date(2026, 1, 26)
        assert [d.date for d in week.trading_days] == [date(2026, 1, 26), date(2026, 1, 28)]

    def test_mode_breakdown(self):
        volatile = RealizedRange(high=430.0, low=395.0, open=400.0)
        days = [
            _day(date(2026, 1, 26), 1, 1, Mode.YELLOW),
            _day(date(2026, 1, 27), 2, 0, Mode.YELLOW),
            _day(date(2026, 1, 28), 0, 1, Mode.RED, volatile),
        ]
        week = aggregate_week(days)
        assert set(week.mode_breakdown) == {Mode.YELLOW, Mode.RED}
        yellow = week.mode_breakdown[Mode.YELLOW]
        assert (yellow.days, yellow.correct, yellow.avg_accuracy) == (2, 2, 75.0)
        red = week.mode_breakdown[Mode.RED]
        assert (red.days, red.correct, red.avg_accuracy) == (1, 0, 0.0)
        assert week.mode_accuracy == 66.67

    @pytest.mark.parametrize("first, second, trend", [
        ((0, 2), (2, 0), Trend.IMPROVING),
        ((2, 0), (0, 2), Trend.DECLINING),
        ((1, 1), (1, 1), Trend.FLAT),
    ])
    def test_trend(self, first, second, trend):
        days = [_day(date(2026, 1, 26), *first), _day(date(2026, 1, 30), *second)]
        assert aggregate_week(days).trend == trend

    def test_single_day_trend_is_flat(self):
        assert aggregate_week([_day(date(2026, 1, 26), 1, 0)]).trend == Trend.FLAT

    def test_empty_week(self):
        week = aggregate_week([])
        assert week.trading_days == []
        assert week.weekly_score == 0.0
        assert week.best_day is None
        assert week.mode_breakdown == {}
