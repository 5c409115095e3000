"""Project service for project lookups and administration"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from minci.models.project import Project
from minci.services import store


class ProjectService:
    @staticmethod
    async def create_project(
        session: AsyncSession, name: str, repository: str | None = None
    ) -> Project:
        return await store.insert(session, Project(name=name, repository=repository))

    @staticmethod
    async def get_project_by_name(session: AsyncSession, name: str) -> Project | None:
        """
        Get project by its unique name.

        Args:
            session: Database session
            name: Project name

        Returns:
            Project: Project object if found, None otherwise
        """
        stmt = select(Project).where(Project.name == name)
        return await store.fetch_one(session, stmt)
