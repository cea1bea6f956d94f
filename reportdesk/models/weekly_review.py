"""Parsed weekly review model. One row per week, upserted on re-parse."""

from datetime import date

from sqlalchemy import Date, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from reportdesk.models.base import Base, UUIDMixin, TimestampMixin


class WeeklyReview(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "weekly_reviews"
    __table_args__ = (UniqueConstraint("week_start", "week_end", name="uq_weekly_reviews_week"),)

    week_start: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    week_end: Mapped[date] = mapped_column(Date, nullable=False)
    mode: Mapped[str] = mapped_column(String(10), nullable=False)

    raw_text: Mapped[str] = mapped_column(Text, nullable=False)
    extracted_data: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    parser_version: Mapped[str] = mapped_column(String(20), nullable=False)
    parser_warnings: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    consistency_errors: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
