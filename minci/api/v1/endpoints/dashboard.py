"""Aggregated dashboard and per-project / per-machine listing endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from minci.core.database import get_db
from minci.schemas.dashboard import DashboardRow
from minci.schemas.report import ReportListResponse, ReportResponse
from minci.services.dashboard_service import aggregate_dashboard, newest_fetchhead
from minci.services.report_service import ReportService

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=list[DashboardRow])
async def get_dashboard(session: AsyncSession = Depends(get_db)) -> list[DashboardRow]:
    """
    One row per project: newest commit, how many machines have built it
    and how many of those succeeded. An empty store gives an empty list.
    """
    reports = await ReportService.list_dashboard(session)
    return aggregate_dashboard(reports)


@router.get("/projects/{name}/reports", response_model=ReportListResponse)
async def list_project_reports(
    name: str, session: AsyncSession = Depends(get_db)
) -> ReportListResponse:
    reports = await ReportService.list_by_project_name(session, name)
    return ReportListResponse(
        newest_fetchhead=newest_fetchhead(reports),
        reports=[ReportResponse.model_validate(r) for r in reports],
    )


@router.get("/machines/{machine_hash}/reports", response_model=ReportListResponse)
async def list_machine_reports(
    machine_hash: str, session: AsyncSession = Depends(get_db)
) -> ReportListResponse:
    reports = await ReportService.list_by_machine_hash(session, machine_hash)
    return ReportListResponse(reports=[ReportResponse.model_validate(r) for r in reports])
