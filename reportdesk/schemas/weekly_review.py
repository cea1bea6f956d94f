"""Structured records extracted from weekly review reports."""

import datetime as dt
from datetime import date
from enum import Enum

from pydantic import BaseModel

from reportdesk.core.modes import Mode
from reportdesk.schemas.report import Signal


class ThesisStatus(str, Enum):
    INTACT = "intact"
    STRENGTHENING = "strengthening"
    WEAKENING = "weakening"
    UNDER_REVIEW = "under_review"


class ScenarioType(str, Enum):
    BULL = "bull"
    BASE = "base"
    BEAR = "bear"


class MAPosition(str, Enum):
    ABOVE = "above"
    BELOW = "below"


class WeeklyCandle(BaseModel):
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    change_dollars: float | None = None
    change_pct: float | None = None


class TimeframeRead(BaseModel):
    signal: Signal = Signal.YELLOW
    trend_color: str = ""  # BX-Trender bar color: "green" | "red"
    trend_pattern: str = ""  # HH | HL | LH | LL
    structure: str = ""
    ema_9: MAPosition | None = None
    ema_21: MAPosition | None = None
    ema_13: MAPosition | None = None  # weekly tier only
    interpretation: str = ""


class Confluence(BaseModel):
    reading: str
    explanation: str = ""


class KeyLevel(BaseModel):
    price: float
    name: str
    emoji: str = "📍"
    category: str = "marker"
    description: str = ""


class ThesisCheck(BaseModel):
    status: ThesisStatus = ThesisStatus.INTACT
    supporting_points: list[str] = []
    concerning_points: list[str] = []
    narrative: str = ""


class Scenario(BaseModel):
    type: ScenarioType
    probability: int
    trigger: str = ""
    response: str = ""


class Lessons(BaseModel):
    what_worked: list[str] = []
    what_didnt: list[str] = []
    lessons_forward: list[str] = []


class Catalyst(BaseModel):
    when: str  # as written in the report, e.g. "Wed Feb 4"
    date: dt.date | None = None
    event: str
    impact: str | None = None


class LevelShift(BaseModel):
    start: float
    end: float


class GammaShifts(BaseModel):
    call_wall: LevelShift | None = None
    gamma_strike: LevelShift | None = None
    hedge_wall: LevelShift | None = None
    put_wall: LevelShift | None = None
    interpretation: str = ""


class ExtractedWeeklyReport(BaseModel):
    week_start: date | None = None
    week_end: date | None = None
    mode: Mode
    mode_guidance: str = ""
    daily_cap_pct: float
    weekly_candle: WeeklyCandle
    monthly: TimeframeRead
    weekly: TimeframeRead
    daily: TimeframeRead
    confluence: Confluence
    what_happened: str = ""
    lessons: Lessons
    thesis_check: ThesisCheck
    looking_ahead: str = ""
    key_levels: list[KeyLevel] = []
    scenarios: list[Scenario] = []
    catalysts: list[Catalyst] = []
    gamma_shifts: GammaShifts | None = None
    take: str = ""
