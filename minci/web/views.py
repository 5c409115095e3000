"""HTML views of the dashboard, report listings and single reports.

Every view carries a Last-Modified header taken from the newest report, so
browsers revalidate cheaply with If-Modified-Since.
"""
from datetime import date
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from minci.core.config import settings
from minci.core.database import get_db
from minci.services.dashboard_service import aggregate_dashboard, newest_fetchhead
from minci.services.report_service import ReportService, day_bounds
from minci.web.filters import FILTERS

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(BASE_DIR / "templates"))
TEMPLATES.env.filters.update(FILTERS)

router = APIRouter(include_in_schema=False)


def not_modified(request: Request, mtime: int | None) -> bool:
    """True when the client's cached copy is at least as new as mtime."""
    header = request.headers.get("if-modified-since")
    if mtime is None or not header:
        return False
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    return mtime <= int(since.timestamp())


def stamp(response: Response, mtime: int | None) -> Response:
    if mtime is not None:
        response.headers["Last-Modified"] = formatdate(mtime, usegmt=True)
    return response


async def _render(
    request: Request,
    session: AsyncSession,
    template: str,
    build_context,
) -> Response:
    mtime = await ReportService.latest_ctime(session)
    if not_modified(request, mtime):
        return stamp(Response(status_code=status.HTTP_304_NOT_MODIFIED), mtime)
    context = await build_context()
    context.setdefault("settings", settings)
    return stamp(TEMPLATES.TemplateResponse(request, template, context), mtime)


@router.get("/", response_class=HTMLResponse)
async def dashboard_view(request: Request, session: AsyncSession = Depends(get_db)):
    async def context():
        reports = await ReportService.list_dashboard(session)
        projects = {r.project_id: r.project for r in reports}
        rows = [(row, projects[row.project_id]) for row in aggregate_dashboard(reports)]
        return {"rows": rows}

    return await _render(request, session, "dashboard.html", context)


@router.get("/projects/{name}", response_class=HTMLResponse)
async def project_view(name: str, request: Request, session: AsyncSession = Depends(get_db)):
    async def context():
        reports = await ReportService.list_by_project_name(session, name)
        return {
            "title": name,
            "table_class": "projtable",
            "reports": reports,
            "newest": newest_fetchhead(reports),
        }

    return await _render(request, session, "reports.html", context)


@router.get("/machines/{machine_hash}", response_class=HTMLResponse)
async def machine_view(
    machine_hash: str, request: Request, session: AsyncSession = Depends(get_db)
):
    async def context():
        reports = await ReportService.list_by_machine_hash(session, machine_hash)
        return {
            "title": "Machine Dashboard",
            "table_class": "unametable",
            "reports": reports,
            "newest": None,
        }

    return await _render(request, session, "reports.html", context)


@router.get("/days/{day}", response_class=HTMLResponse)
async def day_view(day: date, request: Request, session: AsyncSession = Depends(get_db)):
    async def context():
        start, end = day_bounds(day)
        reports = await ReportService.list_by_ctime_range(session, start, end)
        return {
            "title": day.isoformat(),
            "table_class": "datetable",
            "reports": reports,
            "newest": None,
        }

    return await _render(request, session, "reports.html", context)


@router.get("/reports/{report_id}", response_class=HTMLResponse)
async def report_view(report_id: int, request: Request, session: AsyncSession = Depends(get_db)):
    report = await ReportService.get_report_by_id(session, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")

    async def context():
        return {"report": report}

    return await _render(request, session, "report.html", context)


@router.get("/reports/{report_id}/log", response_class=PlainTextResponse)
async def report_log_view(
    report_id: int, request: Request, session: AsyncSession = Depends(get_db)
):
    report = await ReportService.get_report_by_id(session, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    mtime = await ReportService.latest_ctime(session)
    if not_modified(request, mtime):
        return stamp(Response(status_code=status.HTTP_304_NOT_MODIFIED), mtime)
    return stamp(PlainTextResponse(report.log), mtime)
