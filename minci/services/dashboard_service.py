"""Dashboard aggregation over the stored report history.

The dashboard answers, per project: which commit is the newest one any
runner has reported, how many runners have caught up with it, and how many
of those succeeded.
"""
from dataclasses import dataclass
from typing import Iterable

from minci.models.report import Report
from minci.schemas.dashboard import DashboardRow


@dataclass
class _Accumulator:
    project_id: int
    project_name: str
    newest_fetchhead: str = ""
    newest_ctime: int | None = None
    latest_ctime: int = 0
    finished: int = 0
    success: int = 0
    pending: int = 0

    def to_row(self) -> DashboardRow:
        return DashboardRow(
            project_id=self.project_id,
            project_name=self.project_name,
            newest_fetchhead=self.newest_fetchhead,
            # Without any commit the row still shows when it last heard from a runner
            newest_ctime=self.newest_ctime if self.newest_ctime is not None else self.latest_ctime,
            finished=self.finished,
            success=self.success,
            pending=self.pending,
        )


def aggregate_dashboard(reports: Iterable[Report]) -> list[DashboardRow]:
    """
    Reduce reports to one DashboardRow per project.

    The newest commit of a project is the fetchhead of its most recently
    accepted report that has one; a report without a commit never wins, and
    among equal ctimes the first one seen does. Reports built against the
    newest commit are finished, all others pending.

    Args:
        reports: Reports in any order, read twice

    Returns:
        list[DashboardRow]: Rows sorted by project name
    """
    reports = list(reports)
    groups: dict[int, _Accumulator] = {}

    for report in reports:
        acc = groups.get(report.project_id)
        if acc is None:
            acc = groups[report.project_id] = _Accumulator(
                project_id=report.project_id, project_name=report.project_name
            )
        acc.latest_ctime = max(acc.latest_ctime, report.ctime)
        if not report.fetchhead:
            continue
        if acc.newest_ctime is None or report.ctime > acc.newest_ctime:
            acc.newest_fetchhead = report.fetchhead
            acc.newest_ctime = report.ctime

    for report in reports:
        acc = groups[report.project_id]
        if acc.newest_fetchhead and report.fetchhead == acc.newest_fetchhead:
            acc.finished += 1
            if report.distcheck != 0:
                acc.success += 1
        else:
            acc.pending += 1

    return sorted((acc.to_row() for acc in groups.values()), key=lambda row: row.project_name)


def newest_fetchhead(reports: Iterable[Report]) -> str | None:
    """Commit of the first report carrying one, for listings ordered newest first."""
    for report in reports:
        if report.fetchhead:
            return report.fetchhead
    return None
