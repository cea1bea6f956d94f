"""Structured records extracted from daily trading reports."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from reportdesk.core.modes import Mode


class ReportKind(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class Severity(str, Enum):
    SOFT = "soft"
    HARD = "hard"


class ErrorCategory(str, Enum):
    STRUCTURAL = "structural"
    CONSISTENCY = "consistency"


class AlertDirection(str, Enum):
    UPSIDE = "upside"
    DOWNSIDE = "downside"


class Signal(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


class RawReport(BaseModel):
    """Report text as submitted. Kept verbatim for later re-parsing."""

    text: str
    report_date: date
    kind: ReportKind = ReportKind.DAILY

    model_config = {"frozen": True}


class ParserWarning(BaseModel):
    field: str
    message: str
    severity: Severity = Severity.SOFT


class RecordError(BaseModel):
    field: str
    message: str
    category: ErrorCategory


class ModeCall(BaseModel):
    current: Mode
    label: str
    summary: str = ""


class ReportPrice(BaseModel):
    close: float | None = None
    change_pct: float | None = None
    open: float | None = None
    high: float | None = None
    low: float | None = None
    volume: float | None = None


class MasterEject(BaseModel):
    price: float
    action: str


class ReportAlert(BaseModel):
    direction: AlertDirection
    level_name: str
    price: float
    action: str
    reason: str | None = None


class LevelMapEntry(BaseModel):
    name: str
    price: float
    action: str = ""
    source: str = ""
    depth: str = ""


class Positioning(BaseModel):
    posture: str = ""
    daily_cap: str = ""
    daily_cap_pct: float | None = None  # explicit cap stated by the report
    vehicle: str = ""


class TierSignals(BaseModel):
    regime: Signal
    trend: Signal
    timing: Signal
    flow: Signal


class EntryQuality(BaseModel):
    score: int = Field(ge=0, le=5)
    factors: list[str] = []


class PerformanceReview(BaseModel):
    score: int
    total: int


class GamePlanStep(BaseModel):
    condition: str
    action: str


class ExtractedDailyReport(BaseModel):
    report_date: date | None = None
    mode: ModeCall
    price: ReportPrice
    master_eject: MasterEject | None = None
    alerts: list[ReportAlert] = []
    levels_map: list[LevelMapEntry] = []
    positioning: Positioning | None = None
    tiers: TierSignals | None = None
    entry_quality: EntryQuality | None = None
    performance: PerformanceReview | None = None
    game_plan: list[GamePlanStep] = []
