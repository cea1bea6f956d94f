"""Forecast accuracy endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reportdesk.analysis.accuracy import (
    ForecastLevel,
    InvalidRealizedRange,
    RealizedRange,
    compare,
    score_day,
)
from reportdesk.api.v1.deps import get_prices
from reportdesk.config import get_settings
from reportdesk.core.metrics import SCORECARDS_BUILT
from reportdesk.db.session import get_db
from reportdesk.integrations.prices.base import PriceProvider
from reportdesk.models.report import DailyReport
from reportdesk.schemas.accuracy import (
    DayAccuracySchema,
    DayScoreRequest,
    DayScoreResponse,
    LevelOutcomeSchema,
    WeekScorecardSchema,
)
from reportdesk.schemas.report import ExtractedDailyReport
from reportdesk.services.weekly_scorecard import build_week_scorecard, parse_week, trading_days

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/day", response_model=DayScoreResponse)
async def score_single_day(request: DayScoreRequest):
    """Score forecast levels against one day's realized range."""
    realized = RealizedRange(**request.realized.model_dump())
    levels = [ForecastLevel(name=lv.name, price=lv.price, type=lv.type) for lv in request.levels]
    daily_open = request.daily_open if request.daily_open is not None else realized.open
    if daily_open is None:
        raise HTTPException(status_code=422, detail="daily_open or realized.open is required")

    try:
        outcomes = compare(levels, realized)
        day = score_day(outcomes, request.mode, daily_open, realized, day=request.date, daily_cap=request.daily_cap)
    except InvalidRealizedRange as e:
        raise HTTPException(status_code=422, detail=str(e))

    SCORECARDS_BUILT.labels(scope="day").inc()
    return DayScoreResponse(
        level_outcomes=[LevelOutcomeSchema.model_validate(o) for o in outcomes],
        day_accuracy=DayAccuracySchema.model_validate(day),
    )


@router.get("/weekly", response_model=WeekScorecardSchema)
async def weekly_scorecard(
    week: str = Query(..., description="ISO week (2026-05, 2026-W05) or any date in the week"),
    db: AsyncSession = Depends(get_db),
    prices: PriceProvider = Depends(get_prices),
):
    """Weekly scorecard from stored reports and realized prices."""
    try:
        monday, friday = parse_week(week)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid week '{week}'")

    stmt = (
        select(DailyReport)
        .where(DailyReport.report_date >= monday, DailyReport.report_date <= friday)
        .order_by(DailyReport.report_date, DailyReport.version.desc())
    )
    result = await db.execute(stmt)
    reports: dict = {}
    for row in result.scalars().all():
        # latest version per day
        if row.report_date not in reports:
            reports[row.report_date] = ExtractedDailyReport.model_validate(row.extracted_data)

    symbol = get_settings().price_symbol
    ranges = {}
    for day in trading_days(monday):
        if day in reports:
            ranges[day] = await asyncio.to_thread(prices.get_daily_range, symbol, day)

    scorecard = build_week_scorecard(week, reports.get, ranges.get)
    return WeekScorecardSchema.model_validate(scorecard)
