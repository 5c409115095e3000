"""Report submission and retrieval endpoints"""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from minci.core.database import get_db
from minci.dependencies.submission import signed_submission
from minci.schemas.report import ReportListResponse, ReportResponse, SignedSubmission
from minci.services.ingestion_service import IngestionService
from minci.services.report_service import ReportService, day_bounds

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", status_code=status.HTTP_201_CREATED, response_class=Response)
async def submit_report(
    signed: SignedSubmission = Depends(signed_submission),
    session: AsyncSession = Depends(get_db),
) -> Response:
    """
    Accept a signed report from a CI runner.

    Answers 201 with no body. Every rejection is a bare 403, raised as a
    SubmissionRejected and turned into a response by the app's handler.
    """
    await IngestionService.submit(session, signed)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("", response_model=ReportListResponse)
async def list_reports_for_day(
    day: date = Query(..., description="UTC day, YYYY-MM-DD"),
    session: AsyncSession = Depends(get_db),
) -> ReportListResponse:
    """List every report accepted during one UTC day, newest first."""
    start, end = day_bounds(day)
    reports = await ReportService.list_by_ctime_range(session, start, end)
    return ReportListResponse(reports=[ReportResponse.model_validate(r) for r in reports])


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: int,
    session: AsyncSession = Depends(get_db),
) -> ReportResponse:
    report = await ReportService.get_report_by_id(session, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return ReportResponse.model_validate(report)
