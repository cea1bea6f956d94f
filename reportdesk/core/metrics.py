"""Prometheus metrics for Report Desk.

Pipeline metrics: reports parsed, parser warnings, validation errors, scorecards
System metrics: HTTP requests, price provider fetches
"""

from prometheus_client import Counter, Histogram, Info

# ── Pipeline Metrics ─────────────────────────────────────────

REPORTS_PARSED = Counter(
    "reportdesk_reports_parsed_total",
    "Total reports run through a parser",
    ["kind", "outcome"],
)

PARSER_WARNINGS = Counter(
    "reportdesk_parser_warnings_total",
    "Parser warnings by field",
    ["kind", "field", "severity"],
)

VALIDATION_ERRORS = Counter(
    "reportdesk_validation_errors_total",
    "Validator findings",
    ["kind", "category"],
)

PARSE_DURATION = Histogram(
    "reportdesk_parse_duration_seconds",
    "Time spent parsing and validating one report",
    ["kind"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25],
)

SCORECARDS_BUILT = Counter(
    "reportdesk_scorecards_built_total",
    "Accuracy scorecards built",
    ["scope"],
)

# ── System Metrics ───────────────────────────────────────────

PRICE_FETCHES = Counter(
    "reportdesk_price_fetches_total",
    "Realized price lookups",
    ["provider", "status"],
)

HTTP_REQUESTS = Counter(
    "reportdesk_http_requests_total",
    "Total HTTP requests to the API",
    ["method", "path", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "reportdesk_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

APP_INFO = Info("reportdesk_app", "Report Desk application info")
