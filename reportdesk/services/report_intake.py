"""Report intake: parse → validate → log → metrics.

Content problems never raise here; they come back as warnings and errors on
the ``IntakeResult`` so callers can show the author exactly what to fix.
"""

import logging
import time
from dataclasses import dataclass

from reportdesk.core.metrics import PARSE_DURATION, PARSER_WARNINGS, REPORTS_PARSED, VALIDATION_ERRORS
from reportdesk.parsers import blocking, parse_daily, parse_weekly, validate
from reportdesk.schemas.report import (
    ErrorCategory,
    ExtractedDailyReport,
    ParserWarning,
    RawReport,
    RecordError,
    ReportKind,
)
from reportdesk.schemas.weekly_review import ExtractedWeeklyReport

logger = logging.getLogger(__name__)


@dataclass
class IntakeResult:
    accepted: bool
    kind: ReportKind
    record: ExtractedDailyReport | ExtractedWeeklyReport
    warnings: list[ParserWarning]
    errors: list[RecordError]
    parser_version: str

    @property
    def rejected_fields(self) -> list[str]:
        """Fields whose structural errors blocked the record."""
        return [e.field for e in blocking(self.errors)]

    @property
    def consistency_errors(self) -> list[RecordError]:
        return [e for e in self.errors if e.category == ErrorCategory.CONSISTENCY]


def intake(raw: RawReport) -> IntakeResult:
    """Parse and validate one submitted report."""
    start = time.perf_counter()
    kind = ReportKind(raw.kind)

    if kind == ReportKind.DAILY:
        parsed = parse_daily(raw.text)
        record = parsed.record
        if record.report_date is None:
            record = record.model_copy(update={"report_date": raw.report_date})
        elif record.report_date != raw.report_date:
            logger.info(f"Report text is dated {record.report_date}, submitted for {raw.report_date}")
    else:
        parsed = parse_weekly(raw.text)
        record = parsed.record

    errors = validate(record)
    accepted = not blocking(errors)

    PARSE_DURATION.labels(kind=kind.value).observe(time.perf_counter() - start)
    REPORTS_PARSED.labels(kind=kind.value, outcome="accepted" if accepted else "rejected").inc()
    for warning in parsed.warnings:
        PARSER_WARNINGS.labels(kind=kind.value, field=warning.field, severity=warning.severity.value).inc()
    for error in errors:
        VALIDATION_ERRORS.labels(kind=kind.value, category=error.category.value).inc()

    result = IntakeResult(
        accepted=accepted,
        kind=kind,
        record=record,
        warnings=list(parsed.warnings),
        errors=errors,
        parser_version=parsed.parser_version,
    )
    if accepted:
        logger.info(
            f"Accepted {kind.value} report for {raw.report_date} "
            f"({len(result.warnings)} warnings, {len(errors)} consistency errors)"
        )
    else:
        logger.warning(
            f"Rejected {kind.value} report for {raw.report_date}: "
            f"missing {', '.join(result.rejected_fields)}"
        )
    return result
