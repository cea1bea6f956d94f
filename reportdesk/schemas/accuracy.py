"""Request/response models for the accuracy endpoints."""

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from reportdesk.analysis.accuracy import LevelType, ModeAssessment, Trend
from reportdesk.core.modes import Mode, coerce_mode


class ForecastLevelSchema(BaseModel):
    name: str
    price: float = Field(gt=0)
    type: LevelType

    model_config = {"from_attributes": True}


class RealizedRangeSchema(BaseModel):
    high: float
    low: float
    open: float | None = None
    close: float | None = None


class DayScoreRequest(BaseModel):
    levels: list[ForecastLevelSchema]
    realized: RealizedRangeSchema
    mode: Mode
    daily_open: float | None = None  # defaults to realized.open
    daily_cap: float | None = None  # overrides the mode's cap
    date: dt.date | None = None

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value):
        return coerce_mode(value) or value


class LevelOutcomeSchema(BaseModel):
    level: ForecastLevelSchema
    hit: bool
    distance: float

    model_config = {"from_attributes": True}


class DayAccuracySchema(BaseModel):
    date: dt.date | None
    accuracy_pct: float
    mode_assessment: ModeAssessment
    mode: Mode
    range_pct: float
    daily_cap: float
    hits: int
    total: int
    grade: int
    levels: list[LevelOutcomeSchema]

    model_config = {"from_attributes": True}


class DayScoreResponse(BaseModel):
    level_outcomes: list[LevelOutcomeSchema]
    day_accuracy: DayAccuracySchema


class ModeStatsSchema(BaseModel):
    days: int
    correct: int
    avg_accuracy: float

    model_config = {"from_attributes": True}


class WeekScorecardSchema(BaseModel):
    week_label: str
    trading_days: list[DayAccuracySchema]
    weekly_score: float
    overall_level_accuracy: float
    best_day: DayAccuracySchema | None
    worst_day: DayAccuracySchema | None
    trend: Trend
    mode_accuracy: float
    mode_breakdown: dict[Mode, ModeStatsSchema]

    model_config = {"from_attributes": True}
