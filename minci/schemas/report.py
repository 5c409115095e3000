"""Pydantic schemas for report submissions and report views"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _stage(alias: str):
    return Field(..., alias=alias, ge=INT64_MIN, le=INT64_MAX)


def _uname(alias: str):
    return Field(..., alias=alias, min_length=1)


class ReportSubmission(BaseModel):
    """
    The typed fields of a report submission, as posted by a CI runner.

    Field aliases are the form keys the runner sends. Stage timestamps are
    Unix times, 0 meaning the stage was not reached. The signature travels
    alongside these fields but is not one of them.
    """

    project_name: str = Field(..., alias="project-name", min_length=1)
    start: int = _stage("report-start")
    env: int = _stage("report-env")
    depend: int = _stage("report-depend")
    build: int = _stage("report-build")
    test: int = _stage("report-test")
    install: int = _stage("report-install")
    distcheck: int = _stage("report-distcheck")
    log: str = Field(..., alias="report-log")
    fetchhead: Optional[str] = Field(default=None, alias="report-fetchhead")
    unamem: str = _uname("report-unamem")
    unamen: str = _uname("report-unamen")
    unamer: str = _uname("report-unamer")
    unames: str = _uname("report-unames")
    unamev: str = _uname("report-unamev")
    apikey: int = Field(..., alias="user-apikey", ge=INT64_MIN, le=INT64_MAX)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @property
    def stages(self) -> tuple[int, ...]:
        """Stage timestamps in pipeline order, start through distcheck."""
        return (
            self.start,
            self.env,
            self.depend,
            self.build,
            self.test,
            self.install,
            self.distcheck,
        )


class SignedSubmission(BaseModel):
    """A parsed submission together with its out-of-band signature."""

    submission: ReportSubmission
    signature: str
    # The log exactly as posted; its digest is what the runner signed
    log_bytes: bytes | None = None


class ReportResponse(BaseModel):
    """Schema for a stored report. The log is served separately."""

    id: int
    project_id: int
    project_name: str
    ctime: int
    start: int
    env: int
    depend: int
    build: int
    test: int
    install: int
    distcheck: int
    fetchhead: str
    unamem: str
    unamen: str
    unamer: str
    unames: str
    unamev: str
    machine_hash: str
    passed: bool
    has_log: bool

    model_config = ConfigDict(from_attributes=True)


class ReportListResponse(BaseModel):
    """A chronological listing; newest_fetchhead is only set for project listings."""

    newest_fetchhead: Optional[str] = None
    reports: list[ReportResponse]
