"""Daily report endpoints: preview, store (versioned) and fetch."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reportdesk.db.session import get_db
from reportdesk.models.report import DailyReport
from reportdesk.schemas.report import ParserWarning, RawReport, RecordError, ReportKind
from reportdesk.services.report_intake import IntakeResult, intake

router = APIRouter()


class ReportSubmission(BaseModel):
    text: str
    report_date: date


class IntakeResponse(BaseModel):
    accepted: bool
    kind: ReportKind
    parser_version: str
    record: dict
    warnings: list[ParserWarning]
    errors: list[RecordError]
    rejected_fields: list[str]


class StoredReportResponse(BaseModel):
    id: str
    report_date: date
    version: int
    parser_version: str
    extracted_data: dict
    parser_warnings: list[dict]
    consistency_errors: list[dict]


def to_intake_response(result: IntakeResult) -> IntakeResponse:
    return IntakeResponse(
        accepted=result.accepted,
        kind=result.kind,
        parser_version=result.parser_version,
        record=result.record.model_dump(mode="json"),
        warnings=result.warnings,
        errors=result.errors,
        rejected_fields=result.rejected_fields,
    )


def reject(result: IntakeResult) -> HTTPException:
    """400 carrying the exact fields the author must fix."""
    return HTTPException(
        status_code=400,
        detail={
            "message": "Report is missing required fields",
            "rejected_fields": result.rejected_fields,
            "errors": [e.model_dump(mode="json") for e in result.errors],
        },
    )


def _stored(row: DailyReport) -> StoredReportResponse:
    return StoredReportResponse(
        id=str(row.id),
        report_date=row.report_date,
        version=row.version,
        parser_version=row.parser_version,
        extracted_data=row.extracted_data,
        parser_warnings=row.parser_warnings,
        consistency_errors=row.consistency_errors,
    )


@router.post("/parse", response_model=IntakeResponse)
async def preview_report(submission: ReportSubmission):
    """Parse and validate without storing."""
    raw = RawReport(text=submission.text, report_date=submission.report_date, kind=ReportKind.DAILY)
    return to_intake_response(intake(raw))


@router.post("", response_model=StoredReportResponse, status_code=201)
async def create_report(
    submission: ReportSubmission,
    db: AsyncSession = Depends(get_db),
):
    """Store a daily report. Re-submitting a date stores a new version."""
    raw = RawReport(text=submission.text, report_date=submission.report_date, kind=ReportKind.DAILY)
    result = intake(raw)
    if not result.accepted:
        raise reject(result)

    latest = await db.execute(
        select(func.max(DailyReport.version)).where(DailyReport.report_date == submission.report_date)
    )
    version = (latest.scalar() or 0) + 1

    row = DailyReport(
        id=uuid.uuid4(),
        report_date=submission.report_date,
        version=version,
        raw_text=submission.text,
        extracted_data=result.record.model_dump(mode="json"),
        parser_version=result.parser_version,
        parser_warnings=[w.model_dump(mode="json") for w in result.warnings],
        consistency_errors=[e.model_dump(mode="json") for e in result.consistency_errors],
    )
    db.add(row)
    await db.flush()
    return _stored(row)


@router.get("/{report_date}", response_model=StoredReportResponse)
async def get_report(
    report_date: date,
    db: AsyncSession = Depends(get_db),
):
    """Latest stored version of the report for ``report_date``."""
    stmt = (
        select(DailyReport)
        .where(DailyReport.report_date == report_date)
        .order_by(DailyReport.version.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    row = result.scalar_one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail="Report not found")
    return _stored(row)
