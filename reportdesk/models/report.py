"""Parsed daily trading report model."""

from datetime import date

from sqlalchemy import Date, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from reportdesk.models.base import Base, UUIDMixin, TimestampMixin


class DailyReport(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "reports"
    __table_args__ = (UniqueConstraint("report_date", "version", name="uq_reports_date_version"),)

    report_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    # Re-parsing the same day creates a new row with version + 1
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Source markdown, kept verbatim for re-parsing
    raw_text: Mapped[str] = mapped_column(Text, nullable=False)
    # ExtractedDailyReport as JSON
    extracted_data: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    parser_version: Mapped[str] = mapped_column(String(20), nullable=False)
    # [{"field": ..., "message": ..., "severity": "soft" | "hard"}]
    parser_warnings: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    # Non-blocking validator findings, kept for human review
    consistency_errors: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
