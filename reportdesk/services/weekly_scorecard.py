"""Weekly accuracy scorecard.

Scores each trading day (Mon-Fri) of an ISO week that has both a stored
report and realized prices, then rolls the days into a ``WeekScorecard``.
Days missing either input are skipped, not scored as zero.
"""

import logging
import re
from datetime import date, timedelta
from typing import Callable

from reportdesk.analysis.accuracy import (
    DayAccuracy,
    InvalidRealizedRange,
    RealizedRange,
    WeekScorecard,
    aggregate_week,
    compare,
    levels_from_report,
    score_day,
)
from reportdesk.core.metrics import SCORECARDS_BUILT
from reportdesk.schemas.report import ExtractedDailyReport

logger = logging.getLogger(__name__)

_WEEK_STRING = re.compile(r"^(\d{4})-W?(\d{1,2})$", re.IGNORECASE)

ReportLoader = Callable[[date], ExtractedDailyReport | None]
RangeLoader = Callable[[date], RealizedRange | None]


def parse_week(week: str) -> tuple[date, date]:
    """Monday and Friday of ``week``.

    Accepts ISO week strings (``2026-05``, ``2026-W05``) or any date inside
    the week (``2026-01-28``).
    """
    text = week.strip()
    match = _WEEK_STRING.match(text)
    if match:
        monday = date.fromisocalendar(int(match.group(1)), int(match.group(2)), 1)
    else:
        day = date.fromisoformat(text)
        monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=4)


def trading_days(monday: date) -> list[date]:
    return [monday + timedelta(days=i) for i in range(5)]


def week_label(monday: date, friday: date) -> str:
    """``"Jan 26 - Jan 30, 2026"``."""
    return f"{monday.strftime('%b')} {monday.day} - {friday.strftime('%b')} {friday.day}, {friday.year}"


def score_report_day(
    record: ExtractedDailyReport,
    realized: RealizedRange,
    day: date | None = None,
) -> DayAccuracy:
    """Score one stored daily report against that day's realized prices.

    The report's own daily cap, when stated, overrides the mode default.
    """
    outcomes = compare(levels_from_report(record), realized, reference_price=record.price.close)
    daily_open = realized.open if realized.open is not None else record.price.close
    if daily_open is None:
        raise InvalidRealizedRange("No open price to measure the day's range against")
    daily_cap = record.positioning.daily_cap_pct if record.positioning else None
    return score_day(
        outcomes,
        record.mode.current,
        daily_open,
        realized,
        day=day or record.report_date,
        daily_cap=daily_cap,
    )


def build_week_scorecard(week: str, load_report: ReportLoader, load_range: RangeLoader) -> WeekScorecard:
    """Build the scorecard for ``week`` from the given loaders."""
    monday, friday = parse_week(week)
    days: list[DayAccuracy] = []

    for day in trading_days(monday):
        record = load_report(day)
        if record is None:
            logger.debug(f"No report for {day}, skipping")
            continue
        realized = load_range(day)
        if realized is None:
            logger.debug(f"No realized prices for {day}, skipping")
            continue
        try:
            days.append(score_report_day(record, realized, day=day))
        except InvalidRealizedRange as e:
            logger.warning(f"Skipping {day}: {e}")

    scorecard = aggregate_week(days, week_label=week_label(monday, friday))
    SCORECARDS_BUILT.labels(scope="week").inc()
    logger.info(
        f"Week {scorecard.week_label}: {len(days)} trading days scored, "
        f"weekly score {scorecard.weekly_score}"
    )
    return scorecard
