import json
import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from reportdesk.config import get_settings
from reportdesk.db.session import engine
from reportdesk.api.v1.router import api_router


# ── JSON Structured Logging ──────────────────────────────────


class JSONFormatter(logging.Formatter):
    """Outputs log records as single-line JSON for production log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging():
    """Configure structured JSON logging for production."""
    settings = get_settings()

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if settings.debug:
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
    else:
        handler.setFormatter(JSONFormatter())

    root.handlers = [handler]

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("yfinance").setLevel(logging.WARNING)


logger = logging.getLogger("reportdesk")


# ── Lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    from reportdesk.core.metrics import APP_INFO
    APP_INFO.info({"version": "0.1.0", "name": "Report Desk"})
    logger.info("Report Desk starting up")
    yield
    logger.info("Report Desk shutting down")
    await engine.dispose()


# ── App Factory ──────────────────────────────────────────────


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "## Report Desk — Trading Report Parsing & Forecast Accuracy\n\n"
            "- **Report intake** — daily and weekly markdown reports parsed into "
            "structured records, validated, and versioned\n"
            "- **Accuracy scoring** — forecast levels compared against realized "
            "high/low, rolled up into weekly scorecards\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "reports", "description": "Daily report parsing, preview and storage"},
            {"name": "weekly-reviews", "description": "Weekly review parsing and storage"},
            {"name": "accuracy", "description": "Level accuracy for a day and weekly scorecards"},
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

    # Request timing middleware
    @app.middleware("http")
    async def timing_middleware(request: Request, call_next):
        from reportdesk.core.metrics import HTTP_REQUESTS, HTTP_REQUEST_DURATION

        start = time.monotonic()
        response: Response = await call_next(request)
        duration = time.monotonic() - start

        path = request.url.path
        HTTP_REQUESTS.labels(
            method=request.method,
            path=path,
            status_code=str(response.status_code),
        ).inc()
        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            path=path,
        ).observe(duration)

        return response

    app.include_router(api_router, prefix="/api/v1")

    # ── Prometheus metrics endpoint ──────────────────────────

    @app.get("/metrics")
    async def metrics():
        from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    # ── Health check ─────────────────────────────────────────

    @app.get("/health")
    async def health():
        from sqlalchemy import text

        checks = {"status": "ok"}
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            checks["database"] = "ok"
        except Exception as e:
            checks["database"] = f"error: {e}"
            checks["status"] = "degraded"
        return checks

    return app


app = create_app()
