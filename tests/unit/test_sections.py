"""Tests for heading vocabularies and section splitting."""

from reportdesk.parsers.sections import canonicalize, match_heading, split_sections
from reportdesk.schemas.report import ReportKind


class TestCanonicalize:
    def test_emoji_and_punctuation_removed(self):
        assert canonicalize("🚦 Mode: 🟢 GREEN") == "mode green"

    def test_numbering_removed(self):
        assert canonicalize("3. 🚦 Mode: 🟢 GREEN") == "mode green"
        assert canonicalize("## 2) Executive Summary") == "executive summary"

    def test_curly_apostrophe(self):
        assert canonicalize("Tesla’s Take") == "tesla's take"


class TestMatchHeading:
    def test_daily_aliases(self):
        assert match_heading("📊 Executive Summary", ReportKind.DAILY) == "executive summary"
        assert match_heading("Regime Status", "daily") == "mode"
        assert match_heading("Tesla's Take", "daily") == "take"
        assert match_heading("🎯 Alerts to Set", "daily") == "alerts"
        assert match_heading("📐 Position Sizing", "daily") == "positioning"

    def test_weekly_aliases(self):
        assert match_heading("📊 The Week in Numbers", ReportKind.WEEKLY) == "weekly candle"
        assert match_heading("🔭 Multi-Timeframe", "weekly") == "multi-timeframe"
        assert match_heading("💬 Take", "weekly") == "take"

    def test_unknown_heading(self):
        assert match_heading("Random Musings", "daily") is None


class TestSplitSections:
    def test_daily_report(self, daily_report_text):
        sections = split_sections(daily_report_text, ReportKind.DAILY)
        assert {"header", "mode", "executive summary", "alerts", "levels map",
                "positioning", "game plan"} <= set(sections)
        assert sections["executive summary"].startswith("| Metric | Value |")
        assert "## " not in sections["game plan"]

    def test_unmatched_headings_stay_in_body(self):
        text = "## Weekly Candle\n\nOpen: $1\n\n### Notes\n\nstill the candle"
        sections = split_sections(text, "weekly")
        assert "### Notes" in sections["weekly candle"]
        assert sections["weekly candle"].endswith("still the candle")

    def test_repeated_section_is_appended(self):
        text = "## Alerts\n\nfirst\n\n## Game Plan\n\nplan\n\n## Alerts\n\nsecond"
        sections = split_sections(text, "daily")
        assert "first" in sections["alerts"]
        assert "second" in sections["alerts"]

    def test_text_before_first_heading_ignored(self):
        sections = split_sections("preamble\n\n## Game Plan\n\nplan", "daily")
        assert sections == {"game plan": "plan"}
