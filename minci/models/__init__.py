"""SQLAlchemy models"""
from minci.models.user import User
from minci.models.project import Project
from minci.models.report import Report

__all__ = ["User", "Project", "Report"]
