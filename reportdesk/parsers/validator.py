"""Structural and consistency checks over extracted records.

Structural errors mean the record is unusable and must be rejected;
consistency errors flag contradictions (an upside alert below the close, a
week longer than seven days) but the record is still stored.
"""

from __future__ import annotations

from functools import singledispatch

from reportdesk.schemas.report import (
    AlertDirection,
    ErrorCategory,
    ExtractedDailyReport,
    RecordError,
)
from reportdesk.schemas.weekly_review import ExtractedWeeklyReport

MAX_WEEK_DAYS = 7


def _structural(field: str, message: str) -> RecordError:
    return RecordError(field=field, message=message, category=ErrorCategory.STRUCTURAL)


def _consistency(field: str, message: str) -> RecordError:
    return RecordError(field=field, message=message, category=ErrorCategory.CONSISTENCY)


@singledispatch
def validate(record) -> list[RecordError]:
    """Return every violation found in ``record``. Never raises for content."""
    raise TypeError(f"Cannot validate {type(record).__name__}")


@validate.register
def _validate_daily(record: ExtractedDailyReport) -> list[RecordError]:
    errors: list[RecordError] = []
    close = record.price.close

    if record.master_eject is None:
        errors.append(_structural("master_eject", "Master Eject price is required"))
    if close is None:
        errors.append(_structural("price.close", "Close price is required"))

    if close is not None:
        for i, alert in enumerate(record.alerts):
            if alert.direction == AlertDirection.UPSIDE and alert.price < close:
                errors.append(_consistency(
                    f"alerts[{i}]",
                    f"Upside alert '{alert.level_name}' at ${alert.price:g} is below close ${close:g}",
                ))
            elif alert.direction == AlertDirection.DOWNSIDE and alert.price > close:
                errors.append(_consistency(
                    f"alerts[{i}]",
                    f"Downside alert '{alert.level_name}' at ${alert.price:g} is above close ${close:g}",
                ))
        if record.master_eject is not None and record.master_eject.price >= close:
            errors.append(_consistency(
                "master_eject",
                f"Master Eject ${record.master_eject.price:g} is at or above close ${close:g}",
            ))

    upside = [a.price for a in record.alerts if a.direction == AlertDirection.UPSIDE]
    downside = [a.price for a in record.alerts if a.direction == AlertDirection.DOWNSIDE]
    if upside and downside and min(upside) < max(downside):
        errors.append(_consistency(
            "alerts",
            f"Lowest upside alert ${min(upside):g} is below highest downside alert ${max(downside):g}",
        ))

    high, low = record.price.high, record.price.low
    if high is not None and low is not None and high < low:
        errors.append(_consistency("price", f"Session high ${high:g} is below low ${low:g}"))

    return errors


@validate.register
def _validate_weekly(record: ExtractedWeeklyReport) -> list[RecordError]:
    errors: list[RecordError] = []
    candle = record.weekly_candle

    if record.week_start is None:
        errors.append(_structural("week_start", "Week start date is required"))
    if record.week_end is None:
        errors.append(_structural("week_end", "Week end date is required"))
    if candle.close is None or candle.close <= 0:
        errors.append(_structural("weekly_candle.close", "Valid candle close price is required"))
    if not record.what_happened.strip():
        errors.append(_structural("what_happened", "'What Happened' narrative is required"))

    if record.week_start and record.week_end:
        if record.week_end < record.week_start:
            errors.append(_consistency("week_end", "Week ends before it starts"))
        elif (record.week_end - record.week_start).days + 1 > MAX_WEEK_DAYS:
            errors.append(_consistency("week_end", f"Week window exceeds {MAX_WEEK_DAYS} days"))

    if candle.high is not None and candle.low is not None:
        if candle.high < candle.low:
            errors.append(_consistency("weekly_candle", f"Candle high ${candle.high:g} is below low ${candle.low:g}"))
        else:
            for name in ("open", "close"):
                value = getattr(candle, name)
                if value is not None and not candle.low <= value <= candle.high:
                    errors.append(_consistency(
                        f"weekly_candle.{name}",
                        f"Candle {name} ${value:g} is outside the ${candle.low:g}-${candle.high:g} range",
                    ))

    seen = set()
    for i, scenario in enumerate(record.scenarios):
        if scenario.type in seen:
            errors.append(_consistency(f"scenarios[{i}]", f"Duplicate {scenario.type.value} scenario"))
        seen.add(scenario.type)
        if not 0 <= scenario.probability <= 100:
            errors.append(_consistency(
                f"scenarios[{i}].probability",
                f"Probability {scenario.probability} is outside 0-100",
            ))

    return errors


def blocking(errors: list[RecordError]) -> list[RecordError]:
    """The subset of ``errors`` that prevents a record from being stored."""
    return [e for e in errors if e.category == ErrorCategory.STRUCTURAL]
