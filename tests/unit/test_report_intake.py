"""Tests for the report intake service."""

import logging
from datetime import date

from reportdesk.core.metrics import REPORTS_PARSED
from reportdesk.parsers import DAILY_PARSER_VERSION, WEEKLY_PARSER_VERSION
from reportdesk.schemas.report import ErrorCategory, RawReport, ReportKind
from reportdesk.services.report_intake import intake


def _raw(text: str, kind: ReportKind = ReportKind.DAILY, report_date: date = date(2026, 1, 27)) -> RawReport:
    return RawReport(text=text, report_date=report_date, kind=kind)


class TestDailyIntake:
    def test_accepted(self, daily_report_text):
        result = intake(_raw(daily_report_text))
        assert result.accepted is True
        assert result.kind == ReportKind.DAILY
        assert result.parser_version == DAILY_PARSER_VERSION
        assert result.errors == []
        assert result.rejected_fields == []

    def test_rejected_without_master_eject(self, caplog):
        with caplog.at_level(logging.WARNING, logger="reportdesk.services.report_intake"):
            result = intake(_raw("## Mode: 🟢 GREEN\n\nClose: $300\n"))
        assert result.accepted is False
        assert result.rejected_fields == ["master_eject"]
        assert any("master_eject" in w.field for w in result.warnings)
        assert "Rejected daily report" in caplog.text

    def test_consistency_errors_do_not_block(self):
        text = (
            "## Mode: 🟢 GREEN\n\nClose: $300\n\n**Master Eject:** $280\n\n"
            "## Alerts\n\n- Stale Resistance: $290 - Trim\n"
        )
        result = intake(_raw(text))
        assert result.accepted is True
        assert [e.field for e in result.consistency_errors] == ["alerts[0]"]
        assert all(e.category == ErrorCategory.CONSISTENCY for e in result.consistency_errors)

    def test_report_date_filled_from_submission(self, minimal_daily_text):
        result = intake(_raw(minimal_daily_text, report_date=date(2026, 2, 3)))
        assert result.record.report_date == date(2026, 2, 3)

    def test_report_date_in_text_kept(self, daily_report_text):
        result = intake(_raw(daily_report_text, report_date=date(2026, 1, 28)))
        assert result.record.report_date == date(2026, 1, 27)

    def test_outcome_counted(self, daily_report_text):
        counter = REPORTS_PARSED.labels(kind="daily", outcome="accepted")
        before = counter._value.get()
        intake(_raw(daily_report_text))
        assert counter._value.get() == before + 1


class TestWeeklyIntake:
    def test_accepted(self, weekly_review_text):
        result = intake(_raw(weekly_review_text, kind=ReportKind.WEEKLY))
        assert result.accepted is True
        assert result.parser_version == WEEKLY_PARSER_VERSION
        assert result.record.week_start == date(2026, 1, 26)

    def test_rejected_without_dates(self):
        result = intake(_raw("## What Happened\n\nStuff.", kind=ReportKind.WEEKLY))
        assert result.accepted is False
        assert result.rejected_fields == ["week_start", "week_end", "weekly_candle.close"]
