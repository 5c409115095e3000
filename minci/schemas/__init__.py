"""Pydantic schemas for request/response"""
from minci.schemas.report import (
    ReportSubmission,
    SignedSubmission,
    ReportResponse,
    ReportListResponse,
)
from minci.schemas.dashboard import DashboardRow

__all__ = [
    "ReportSubmission",
    "SignedSubmission",
    "ReportResponse",
    "ReportListResponse",
    "DashboardRow",
]
