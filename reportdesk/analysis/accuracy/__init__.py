from reportdesk.analysis.accuracy.comparator import (  # noqa: F401
    ForecastLevel,
    InvalidRealizedRange,
    LevelOutcome,
    LevelType,
    RealizedRange,
    compare,
    levels_from_report,
)
from reportdesk.analysis.accuracy.aggregator import (  # noqa: F401
    WEEKLY_SCORE_WEIGHTS,
    DayAccuracy,
    ModeAssessment,
    Trend,
    WeekScorecard,
    aggregate_week,
    score_day,
)
