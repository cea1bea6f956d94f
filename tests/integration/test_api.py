"""Integration tests for the Report Desk HTTP API.

Requests go through the full FastAPI stack (routing, validation, middleware,
serialization). The database session and price provider are replaced with
in-memory doubles so no Postgres or network access is needed.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from reportdesk.analysis.accuracy import RealizedRange
from reportdesk.api.v1.deps import get_prices
from reportdesk.db.session import get_db
from reportdesk.main import JSONFormatter, create_app


class MockResult:
    def __init__(self, items=None, value=None):
        self._items = items or []
        self._value = value

    def scalars(self):
        return self

    def all(self):
        return self._items

    def scalar(self):
        return self._value

    def scalar_one(self):
        return self._value

    def scalar_one_or_none(self):
        return self._items[0] if self._items else None


# ─── Fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def fake_db():
    db = MagicMock()
    db.execute = AsyncMock(return_value=MockResult())
    db.flush = AsyncMock()
    return db


@pytest.fixture
def fake_prices():
    prices = MagicMock()
    prices.get_daily_range.return_value = RealizedRange(high=436.0, low=412.0, open=420.0, close=419.0)
    return prices


@pytest.fixture
def app(fake_db, fake_prices):
    app = create_app()

    async def _db():
        yield fake_db

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_prices] = lambda: fake_prices
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ─── Reports ─────────────────────────────────────────────────────────

class TestReportsAPI:
    @pytest.mark.asyncio
    async def test_parse_preview(self, client, daily_report_text):
        resp = await client.post("/api/v1/reports/parse",
                                 json={"text": daily_report_text, "report_date": "2026-01-27"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["accepted"] is True
        assert data["parser_version"] == "3.2.0"
        assert data["record"]["mode"]["label"] == "YELLOW (Improving) MODE"
        assert [a["price"] for a in data["record"]["alerts"]] == [445.0, 432.0, 410.0]

    @pytest.mark.asyncio
    async def test_store_report(self, client, fake_db, daily_report_text):
        fake_db.execute.return_value = MockResult(value=None)
        resp = await client.post("/api/v1/reports",
                                 json={"text": daily_report_text, "report_date": "2026-01-27"})
        assert resp.status_code == 201
        data = resp.json()
        assert data["version"] == 1
        assert data["extracted_data"]["report_date"] == "2026-01-27"

    @pytest.mark.asyncio
    async def test_store_rejected_report(self, client, fake_db):
        resp = await client.post("/api/v1/reports",
                                 json={"text": "## Mode: 🟢 GREEN\n\nClose: $300", "report_date": "2026-01-27"})
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["rejected_fields"] == ["master_eject"]
        assert detail["errors"][0]["category"] == "structural"
        fake_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_report(self, client):
        resp = await client.get("/api/v1/reports/2026-01-27")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_submission(self, client):
        resp = await client.post("/api/v1/reports/parse", json={"text": "x", "report_date": "not a date"})
        assert resp.status_code == 422


class TestWeeklyReviewsAPI:
    @pytest.mark.asyncio
    async def test_upsert(self, client, fake_db, weekly_review_text):
        row_id = uuid.uuid4()
        fake_db.execute.return_value = MockResult(value=row_id)
        resp = await client.post("/api/v1/weekly-reviews",
                                 json={"text": weekly_review_text, "report_date": "2026-01-31"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == str(row_id)
        assert data["week_start"] == "2026-01-26"
        assert data["mode"] == "orange"


# ─── Accuracy ────────────────────────────────────────────────────────

class TestAccuracyAPI:
    @pytest.mark.asyncio
    async def test_score_day(self, client):
        resp = await client.post("/api/v1/accuracy/day", json={
            "levels": [{"name": "Call Wall", "price": 450, "type": "resistance"}],
            "realized": {"high": 451, "low": 440, "open": 445},
            "mode": "Yellow (Improving)",
            "date": "2026-01-27",
        })
        assert resp.status_code == 200
        day = resp.json()["day_accuracy"]
        assert day["accuracy_pct"] == 100.0
        assert day["mode"] == "yellow"
        assert day["grade"] == 5

    @pytest.mark.asyncio
    async def test_score_day_bad_mode(self, client):
        resp = await client.post("/api/v1/accuracy/day", json={
            "levels": [], "realized": {"high": 451, "low": 440, "open": 445}, "mode": "purple",
        })
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_weekly_scorecard(self, client, fake_db, parsed_daily):
        row = MagicMock(report_date=parsed_daily.report_date, version=1,
                        extracted_data=parsed_daily.model_dump(mode="json"))
        fake_db.execute.return_value = MockResult(items=[row])
        resp = await client.get("/api/v1/accuracy/weekly", params={"week": "2026-05"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["week_label"] == "Jan 26 - Jan 30, 2026"
        assert data["weekly_score"] == 53.33
        assert data["mode_breakdown"]["yellow"]["days"] == 1

    @pytest.mark.asyncio
    async def test_weekly_scorecard_bad_week(self, client):
        resp = await client.get("/api/v1/accuracy/weekly", params={"week": "someday"})
        assert resp.status_code == 422


# ─── Operational endpoints ───────────────────────────────────────────

class TestOperational:
    @pytest.mark.asyncio
    async def test_metrics(self, client, daily_report_text):
        await client.post("/api/v1/reports/parse", json={"text": daily_report_text, "report_date": "2026-01-27"})
        resp = await client.get("/metrics")
        assert resp.status_code == 200
        assert "reportdesk_reports_parsed_total" in resp.text
        assert "reportdesk_http_requests_total" in resp.text

    @pytest.mark.asyncio
    async def test_health(self, client):
        engine = MagicMock()
        engine.connect.return_value.__aenter__.return_value = AsyncMock()
        with patch("reportdesk.main.engine", engine):
            resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "database": "ok"}

    @pytest.mark.asyncio
    async def test_health_degraded(self, client):
        engine = MagicMock()
        engine.connect.side_effect = ConnectionRefusedError("db down")
        with patch("reportdesk.main.engine", engine):
            resp = await client.get("/health")
        assert resp.json()["status"] == "degraded"

    def test_json_formatter(self):
        import json
        import logging

        record = logging.LogRecord("reportdesk", logging.INFO, __file__, 1, "Accepted %s report", ("daily",), None)
        payload = json.loads(JSONFormatter().format(record))
        assert payload["msg"] == "Accepted daily report"
        assert payload["level"] == "INFO"
