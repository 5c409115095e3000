"""Report store: inserting reports and the queries behind each listing"""
from datetime import date, datetime, timezone

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from minci.models.project import Project
from minci.models.report import Report
from minci.schemas.report import ReportSubmission
from minci.services import store

DAY_SECONDS = 86400


def day_bounds(day: date) -> tuple[int, int]:
    """Epoch seconds covering one UTC day, as a half-open range."""
    start = int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp())
    return start, start + DAY_SECONDS


def _latest_per_machine(*filters):
    """Select the most recent report of every project/machine pair matching filters.

    Exactly one report per pair: reports accepted in the same second are
    ordered by id, so a retried submission replaces the earlier one.
    """
    ranked = (
        select(
            Report.id.label("id"),
            func.row_number()
            .over(
                partition_by=Report.project_machine_hash,
                order_by=(Report.ctime.desc(), Report.id.desc()),
            )
            .label("rank"),
        )
        .where(*filters)
        .subquery()
    )
    return (
        select(Report)
        .join(ranked, Report.id == ranked.c.id)
        .where(ranked.c.rank == 1)
        .order_by(Report.ctime.desc(), Report.id.desc())
    )


class ReportService:
    """Service for report persistence and retrieval"""

    @staticmethod
    async def insert_report(
        session: AsyncSession,
        project_id: int,
        user_id: int,
        submission: ReportSubmission,
        ctime: int,
        machine_hash: str,
        project_machine_hash: str,
    ) -> Report:
        """
        Persist an accepted submission.

        Args:
            session: Database session
            project_id: Resolved project
            user_id: Resolved submitting user
            submission: Validated submission fields
            ctime: Server acceptance time
            machine_hash: Digest of the machine descriptor
            project_machine_hash: Digest of project id and machine descriptor

        Returns:
            Report: The stored report with its id assigned

        Raises:
            StoreFailure: If the insert fails
        """
        report = Report(
            project_id=project_id,
            user_id=user_id,
            start=submission.start,
            env=submission.env,
            depend=submission.depend,
            build=submission.build,
            test=submission.test,
            install=submission.install,
            distcheck=submission.distcheck,
            ctime=ctime,
            log=submission.log,
            fetchhead=submission.fetchhead or "",
            unamem=submission.unamem,
            unamen=submission.unamen,
            unamer=submission.unamer,
            unames=submission.unames,
            unamev=submission.unamev,
            machine_hash=machine_hash,
            project_machine_hash=project_machine_hash,
        )
        return await store.insert(session, report)

    @staticmethod
    async def get_report_by_id(session: AsyncSession, report_id: int) -> Report | None:
        stmt = select(Report).where(Report.id == report_id)
        return await store.fetch_one(session, stmt)

    @staticmethod
    async def list_dashboard(session: AsyncSession) -> list[Report]:
        """Most recent report of every machine for every project."""
        return await store.fetch_all(session, _latest_per_machine())

    @staticmethod
    async def list_by_project_name(session: AsyncSession, name: str) -> list[Report]:
        """Most recent report of every machine building the named project, newest first."""
        project_id = select(Project.id).where(Project.name == name).correlate(None).scalar_subquery()
        return await store.fetch_all(session, _latest_per_machine(Report.project_id == project_id))

    @staticmethod
    async def list_by_machine_hash(session: AsyncSession, machine_hash: str) -> list[Report]:
        """Most recent report of every project built on one machine, newest first."""
        return await store.fetch_all(
            session, _latest_per_machine(Report.machine_hash == machine_hash)
        )

    @staticmethod
    async def list_by_ctime_range(session: AsyncSession, start: int, end: int) -> list[Report]:
        """Every report accepted in [start, end), newest first."""
        stmt = (
            select(Report)
            .where(Report.ctime >= start, Report.ctime < end)
            .order_by(Report.ctime.desc(), Report.id.desc())
        )
        return await store.fetch_all(session, stmt)

    @staticmethod
    async def latest_ctime(session: AsyncSession) -> int | None:
        """Acceptance time of the newest report, None for an empty store."""
        return await store.fetch_scalar(session, select(func.max(Report.ctime)))
