"""Pytest configuration and fixtures"""
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from minci.main import app
from minci.core.database import Base, get_db
from minci.core.security import build_canonical_message, sign_message
from minci.schemas.report import ReportSubmission
from minci.services.project_service import ProjectService
from minci.services.user_service import UserService

API_KEY = 4242
API_SECRET = "runner-secret"


@pytest_asyncio.fixture
async def test_db():
    """Create in-memory test database"""
    # One shared connection so every session sees the same in-memory database
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
        poolclass=StaticPool,
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    TestSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async def override_get_db():
        async with TestSessionLocal() as session:
            yield session

    # Override dependency
    app.dependency_overrides[get_db] = override_get_db

    yield TestSessionLocal

    # Cleanup
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest_asyncio.fixture
async def client(test_db):
    """Create test client"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def runner(test_db):
    """A project and a user allowed to report on it"""
    async with test_db() as session:
        project = await ProjectService.create_project(session, "kcgi")
        other = await ProjectService.create_project(
            session, "lowdown", repository="https://example.org/lowdown"
        )
        user = await UserService.create_user(session, API_KEY, API_SECRET, "ci@example.org")
    return {"project": project, "other": other, "user": user}


def report_fields(**overrides) -> dict:
    """Form fields of a successful run, keyed by form name."""
    fields = {
        "project-name": "kcgi",
        "report-start": "1000",
        "report-env": "1010",
        "report-depend": "1020",
        "report-build": "1030",
        "report-test": "1040",
        "report-install": "1050",
        "report-distcheck": "1060",
        "report-log": "",
        "report-fetchhead": "0123456789abcdef0123456789abcdef01234567",
        "report-unamem": "amd64",
        "report-unamen": "builder",
        "report-unamer": "7.4",
        "report-unames": "OpenBSD",
        "report-unamev": "GENERIC.MP#1",
        "user-apikey": str(API_KEY),
    }
    fields.update(overrides)
    return {key: value for key, value in fields.items() if value is not None}


def sign_fields(fields: dict, secret: str = API_SECRET) -> dict:
    """Return fields with the signature a runner holding secret would add."""
    submission = ReportSubmission.model_validate(fields)
    signed = dict(fields)
    signed["signature"] = sign_message(build_canonical_message(submission, secret))
    return signed


@pytest.fixture
def signed_report():
    """Factory for signed submission forms"""

    def make(secret: str = API_SECRET, **overrides) -> dict:
        return sign_fields(report_fields(**overrides), secret)

    return make
