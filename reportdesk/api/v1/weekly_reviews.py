"""Weekly review endpoints: preview and upsert on (week_start, week_end)."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from reportdesk.api.v1.reports import IntakeResponse, reject, to_intake_response
from reportdesk.db.session import get_db
from reportdesk.models.weekly_review import WeeklyReview
from reportdesk.schemas.report import RawReport, ReportKind
from reportdesk.services.report_intake import intake

router = APIRouter()


class WeeklySubmission(BaseModel):
    text: str
    # date the review was submitted for; the week itself comes from the text
    report_date: date


class StoredWeeklyResponse(BaseModel):
    id: str
    week_start: date
    week_end: date
    mode: str
    parser_version: str
    parser_warnings: list[dict]
    consistency_errors: list[dict]


def _raw(submission: WeeklySubmission) -> RawReport:
    return RawReport(text=submission.text, report_date=submission.report_date, kind=ReportKind.WEEKLY)


@router.post("/parse", response_model=IntakeResponse)
async def preview_weekly_review(submission: WeeklySubmission):
    """Parse and validate without storing."""
    return to_intake_response(intake(_raw(submission)))


@router.post("", response_model=StoredWeeklyResponse)
async def upsert_weekly_review(
    submission: WeeklySubmission,
    db: AsyncSession = Depends(get_db),
):
    """Store a weekly review, replacing any earlier parse of the same week."""
    result = intake(_raw(submission))
    if not result.accepted:
        raise reject(result)

    record = result.record
    values = {
        "mode": record.mode.value,
        "raw_text": submission.text,
        "extracted_data": record.model_dump(mode="json"),
        "parser_version": result.parser_version,
        "parser_warnings": [w.model_dump(mode="json") for w in result.warnings],
        "consistency_errors": [e.model_dump(mode="json") for e in result.consistency_errors],
    }
    stmt = (
        insert(WeeklyReview)
        .values(id=uuid.uuid4(), week_start=record.week_start, week_end=record.week_end, **values)
        .on_conflict_do_update(
            constraint="uq_weekly_reviews_week",
            set_={**values, "updated_at": func.now()},
        )
        .returning(WeeklyReview.id)
    )
    row_id = (await db.execute(stmt)).scalar_one()

    return StoredWeeklyResponse(
        id=str(row_id),
        week_start=record.week_start,
        week_end=record.week_end,
        mode=values["mode"],
        parser_version=result.parser_version,
        parser_warnings=values["parser_warnings"],
        consistency_errors=values["consistency_errors"],
    )
