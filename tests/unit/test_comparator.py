"""Tests for forecast level comparison."""

import math

import pytest

from reportdesk.analysis.accuracy import (
    ForecastLevel,
    InvalidRealizedRange,
    LevelType,
    RealizedRange,
    compare,
    levels_from_report,
)
from reportdesk.analysis.accuracy.comparator import check_range
from reportdesk.schemas.report import (
    ExtractedDailyReport,
    LevelMapEntry,
    ModeCall,
    ReportPrice,
)
from reportdesk.core.modes import Mode


def _resistance(price, name="R"):
    return ForecastLevel(name=name, price=price, type=LevelType.RESISTANCE)


def _support(price, name="S"):
    return ForecastLevel(name=name, price=price, type=LevelType.SUPPORT)


class TestCompare:
    def test_resistance_hit_overshoot_is_negative(self):
        [outcome] = compare([_resistance(450.0)], RealizedRange(high=451.0, low=440.0))
        assert outcome.hit is True
        assert outcome.distance == -1.0

    def test_support_miss_gap_is_positive(self):
        [outcome] = compare([_support(430.0)], RealizedRange(high=451.0, low=440.0))
        assert outcome.hit is False
        assert outcome.distance == 10.0

    def test_touch_counts_as_hit(self):
        outcomes = compare([_resistance(451.0), _support(440.0)], RealizedRange(high=451.0, low=440.0))
        assert all(o.hit for o in outcomes)
        assert all(o.distance == 0 for o in outcomes)

    def test_sorted_nearest_to_open_first(self):
        levels = [_resistance(470.0, "R2"), _support(430.0, "S1"), _resistance(455.0, "R1")]
        outcomes = compare(levels, RealizedRange(high=451.0, low=440.0, open=448.0))
        assert [o.level.name for o in outcomes] == ["R1", "S1", "R2"]

    def test_midpoint_reference_without_open(self):
        levels = [_support(400.0, "far"), _resistance(446.0, "near")]
        outcomes = compare(levels, RealizedRange(high=450.0, low=440.0))
        assert [o.level.name for o in outcomes] == ["near", "far"]

    def test_duplicates_collapsed(self):
        levels = [_resistance(450.0, "Call Wall"), _resistance(450.0, "Gamma Strike"), _support(450.0)]
        outcomes = compare(levels, RealizedRange(high=451.0, low=440.0))
        assert len(outcomes) == 2
        assert {o.level.type for o in outcomes} == {LevelType.RESISTANCE, LevelType.SUPPORT}

    def test_unusable_level_price_skipped(self):
        outcomes = compare([_resistance(0.0), _support(math.nan), _support(445.0)],
                           RealizedRange(high=451.0, low=440.0))
        assert [o.level.price for o in outcomes] == [445.0]

    def test_distance_rounded(self):
        [outcome] = compare([_resistance(450.123456)], RealizedRange(high=451.0, low=440.0))
        assert outcome.distance == -0.8765

    def test_no_levels(self):
        assert compare([], RealizedRange(high=451.0, low=440.0)) == []


class TestRealizedRange:
    @pytest.mark.parametrize("realized", [
        RealizedRange(high=440.0, low=451.0),
        RealizedRange(high=0.0, low=0.0),
        RealizedRange(high=math.nan, low=440.0),
        RealizedRange(high=451.0, low=-1.0),
        RealizedRange(high=451.0, low=440.0, open=-5.0),
    ])
    def test_invalid(self, realized):
        with pytest.raises(InvalidRealizedRange):
            check_range(realized)
        with pytest.raises(InvalidRealizedRange):
            compare([_resistance(450.0)], realized)

    def test_range_pct(self):
        realized = RealizedRange(high=410.0, low=398.0, open=400.0)
        assert realized.range_pct == pytest.approx(3.0)
        assert realized.midpoint == 404.0
        assert RealizedRange(high=410.0, low=398.0).range_pct is None


class TestLevelsFromReport:
    def test_alerts_map_to_types(self, parsed_daily):
        levels = levels_from_report(parsed_daily)
        assert [(lv.name, lv.type) for lv in levels] == [
            ("Call Wall", LevelType.RESISTANCE),
            ("Gamma Strike", LevelType.RESISTANCE),
            ("Put Wall", LevelType.SUPPORT),
        ]

    def test_levels_map_fallback(self):
        record = ExtractedDailyReport(
            mode=ModeCall(current=Mode.YELLOW, label="YELLOW MODE"),
            price=ReportPrice(close=420.0),
            levels_map=[
                LevelMapEntry(name="Call Wall", price=445.0, action="Trim"),
                LevelMapEntry(name="Info only", price=430.0),
                LevelMapEntry(name="Put Wall", price=410.0, action="Nibble"),
            ],
        )
        levels = levels_from_report(record)
        assert [(lv.name, lv.type) for lv in levels] == [
            ("Call Wall", LevelType.RESISTANCE),
            ("Put Wall", LevelType.SUPPORT),
        ]

    def test_nothing_to_score(self):
        record = ExtractedDailyReport(
            mode=ModeCall(current=Mode.YELLOW, label="YELLOW MODE"),
            price=ReportPrice(),
        )
        assert levels_from_report(record) == []
