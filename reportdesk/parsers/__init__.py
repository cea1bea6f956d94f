from reportdesk.parsers.daily import DAILY_PARSER_VERSION, DailyParseResult, parse_daily
from reportdesk.parsers.validator import blocking, validate
from reportdesk.parsers.weekly import WEEKLY_PARSER_VERSION, WeeklyParseResult, parse_weekly

__all__ = [
    "DAILY_PARSER_VERSION",
    "DailyParseResult",
    "parse_daily",
    "WEEKLY_PARSER_VERSION",
    "WeeklyParseResult",
    "parse_weekly",
    "validate",
    "blocking",
]
