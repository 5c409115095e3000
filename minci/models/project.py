"""Project SQLAlchemy model"""
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from minci.core.config import settings
from minci.core.database import Base


class Project(Base):
    """
    Project model representing a tracked code base.
    Attributes:
        id: Primary key
        name: Unique project name, used in URLs and signed by runners
        repository: Base URL of the commit-hosting location
        created_at: Timestamp
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    repository = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    reports = relationship("Report", back_populates="project")

    def commit_url(self, fetchhead: str) -> str:
        base = self.repository or f"{settings.COMMIT_BASE}/{self.name}"
        return f"{base.rstrip('/')}/tree/{fetchhead}"
