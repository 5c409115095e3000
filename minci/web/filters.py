"""Jinja2 filters used by the HTML views"""
from datetime import datetime, timezone

from minci.core.stages import STAGES
from minci.models.report import Report


def commit_short(fetchhead: str) -> str:
    return fetchhead[:7]


def report_number(report_id: int) -> str:
    return f"{report_id:04d}"


def _format_epoch(epoch: int, fmt: str) -> str:
    """Format a Unix time in UTC, or show the raw number when no calendar date fits."""
    try:
        return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime(fmt)
    except (ValueError, OverflowError, OSError):
        return str(epoch)


def epoch_date(epoch: int) -> str:
    return _format_epoch(epoch, "%Y-%m-%d")


def epoch_datetime(epoch: int) -> str:
    return _format_epoch(epoch, "%Y-%m-%d %H:%M:%S")


def uname(report: Report) -> str:
    """Short machine description: OS name, release and architecture."""
    return f"{report.unames} {report.unamer} {report.unamem}"


def stage_offsets(report: Report) -> list[tuple[str, int | None]]:
    """Seconds each stage took after its predecessor, None when not reached."""
    stages = report.stages
    return [
        (STAGES[i], stages[i] - stages[i - 1] if stages[i] != 0 else None)
        for i in range(1, len(STAGES))
    ]


def log_tail(log: str, lines: int = 16) -> str:
    return "".join(log.splitlines(keepends=True)[-lines:])


FILTERS = {
    "commit_short": commit_short,
    "report_number": report_number,
    "epoch_date": epoch_date,
    "epoch_datetime": epoch_datetime,
    "uname": uname,
    "stage_offsets": stage_offsets,
    "log_tail": log_tail,
}
