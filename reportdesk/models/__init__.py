from reportdesk.models.base import Base
from reportdesk.models.report import DailyReport
from reportdesk.models.weekly_review import WeeklyReview

__all__ = ["Base", "DailyReport", "WeeklyReview"]
