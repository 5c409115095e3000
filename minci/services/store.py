"""Helpers for running statements against the report store"""
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from minci.core.errors import StoreFailure


async def fetch_all(session: AsyncSession, stmt: Any) -> list[Any]:
    """Execute a select and return its ORM rows."""
    try:
        result = await session.execute(stmt)
        return list(result.unique().scalars().all())
    except SQLAlchemyError as e:
        raise StoreFailure("query failed") from e


async def fetch_one(session: AsyncSession, stmt: Any) -> Any | None:
    try:
        result = await session.execute(stmt)
        return result.unique().scalars().first()
    except SQLAlchemyError as e:
        raise StoreFailure("query failed") from e


async def fetch_scalar(session: AsyncSession, stmt: Any) -> Any | None:
    try:
        result = await session.execute(stmt)
        return result.scalar()
    except SQLAlchemyError as e:
        raise StoreFailure("query failed") from e


async def insert(session: AsyncSession, row: Any) -> Any:
    """Add a single row and commit, rolling back on failure."""
    session.add(row)
    try:
        await session.commit()
        await session.refresh(row)
        return row
    except SQLAlchemyError as e:
        await session.rollback()
        raise StoreFailure(f"could not insert {type(row).__name__}") from e
