"""Tests for dashboard, listing and HTML view endpoints"""
from datetime import datetime, timezone
from email.utils import formatdate

import pytest
import pytest_asyncio

from minci.core.security import machine_hash, project_machine_hash
from minci.schemas.report import ReportSubmission
from minci.services.report_service import ReportService

from conftest import report_fields

DAY = int(datetime(2020, 3, 14, tzinfo=timezone.utc).timestamp())
LINUX = ("x86_64", "box", "5.4", "Linux", "#1 SMP")
BSD = ("amd64", "builder", "7.4", "OpenBSD", "GENERIC.MP#1")


async def _insert(test_db, project, user, ctime, fetchhead, uname=BSD, **overrides):
    fields = report_fields(**{
        "project-name": project.name,
        "report-fetchhead": fetchhead,
        "report-unamem": uname[0],
        "report-unamen": uname[1],
        "report-unamer": uname[2],
        "report-unames": uname[3],
        "report-unamev": uname[4],
        **overrides,
    })
    async with test_db() as session:
        return await ReportService.insert_report(
            session,
            project_id=project.id,
            user_id=user.id,
            submission=ReportSubmission.model_validate(fields),
            ctime=ctime,
            machine_hash=machine_hash(*uname),
            project_machine_hash=project_machine_hash(project.id, *uname),
        )


@pytest_asyncio.fixture
async def history(test_db, runner):
    """Two machines building kcgi, one building lowdown"""
    kcgi, lowdown, user = runner["project"], runner["other"], runner["user"]
    failed = {"report-distcheck": "0", "report-log": "regress failed\n"}
    # Superseded by the later run on the same machine
    await _insert(test_db, kcgi, user, DAY + 10, "aaaaaaa1", BSD)
    await _insert(test_db, kcgi, user, DAY + 20, "bbbbbbb2", BSD, **failed)
    await _insert(test_db, kcgi, user, DAY + 15, "aaaaaaa1", LINUX)
    await _insert(test_db, lowdown, user, DAY + 86400 + 5, "ccccccc3", LINUX)
    return runner


@pytest.mark.asyncio
async def test_dashboard_empty(client, test_db):
    response = await client.get("/api/v1/dashboard")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_dashboard_rows(client, history):
    response = await client.get("/api/v1/dashboard")

    assert response.status_code == 200
    kcgi, lowdown = response.json()
    assert kcgi["project_name"] == "kcgi"
    assert kcgi["newest_fetchhead"] == "bbbbbbb2"
    assert kcgi["newest_ctime"] == DAY + 20
    assert (kcgi["finished"], kcgi["success"], kcgi["pending"]) == (1, 0, 1)
    assert kcgi["success_rate"] == 0
    assert kcgi["finished_rate"] == 50
    assert kcgi["passed"] is False
    assert lowdown["project_name"] == "lowdown"
    assert (lowdown["finished"], lowdown["success"], lowdown["pending"]) == (1, 1, 0)
    assert lowdown["success_rate"] == 100
    assert lowdown["passed"] is True


@pytest.mark.asyncio
async def test_dashboard_is_repeatable(client, history):
    first = await client.get("/api/v1/dashboard")
    second = await client.get("/api/v1/dashboard")
    assert first.json() == second.json()


@pytest.mark.asyncio
async def test_project_listing(client, history):
    response = await client.get("/api/v1/projects/kcgi/reports")

    assert response.status_code == 200
    data = response.json()
    assert data["newest_fetchhead"] == "bbbbbbb2"
    assert [r["ctime"] for r in data["reports"]] == [DAY + 20, DAY + 15]


@pytest.mark.asyncio
async def test_unknown_project_listing_is_empty(client, history):
    response = await client.get("/api/v1/projects/nonesuch/reports")

    assert response.status_code == 200
    assert response.json() == {"newest_fetchhead": None, "reports": []}


@pytest.mark.asyncio
async def test_machine_listing(client, history):
    response = await client.get(f"/api/v1/machines/{machine_hash(*LINUX)}/reports")

    assert response.status_code == 200
    reports = response.json()["reports"]
    assert [(r["project_name"], r["ctime"]) for r in reports] == [
        ("lowdown", DAY + 86400 + 5),
        ("kcgi", DAY + 15),
    ]


@pytest.mark.asyncio
async def test_day_listing(client, history):
    response = await client.get("/api/v1/reports", params={"day": "2020-03-14"})

    assert response.status_code == 200
    assert [r["ctime"] for r in response.json()["reports"]] == [DAY + 20, DAY + 15, DAY + 10]


@pytest.mark.asyncio
async def test_html_dashboard(client, history):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["last-modified"] == formatdate(DAY + 86400 + 5, usegmt=True)
    assert "kcgi" in response.text
    assert "https://example.org/lowdown/tree/ccccccc3" in response.text
    assert "https://github.com/kristapsdz/kcgi/tree/bbbbbbb2" in response.text


@pytest.mark.asyncio
async def test_html_dashboard_empty(client, test_db):
    response = await client.get("/")

    assert response.status_code == 200
    assert "last-modified" not in response.headers


@pytest.mark.asyncio
async def test_html_not_modified(client, history):
    headers = {"If-Modified-Since": formatdate(DAY + 86400 + 5, usegmt=True)}

    response = await client.get("/", headers=headers)

    assert response.status_code == 304


@pytest.mark.asyncio
async def test_html_modified_since_older(client, history):
    headers = {"If-Modified-Since": formatdate(DAY, usegmt=True)}

    response = await client.get("/projects/kcgi", headers=headers)

    assert response.status_code == 200
    assert "notnewest" in response.text


@pytest.mark.asyncio
async def test_html_listings(client, history):
    machine = await client.get(f"/machines/{machine_hash(*BSD)}")
    day = await client.get("/days/2020-03-14")

    assert machine.status_code == 200
    assert "Machine Dashboard" in machine.text
    assert day.status_code == 200
    assert "2020-03-14" in day.text


@pytest.mark.asyncio
async def test_html_report_and_log(client, history):
    report = await client.get("/reports/2")
    log = await client.get("/reports/2/log")

    assert report.status_code == 200
    assert "regress failed" in report.text
    assert "report-failure" in report.text
    assert log.status_code == 200
    assert log.headers["content-type"].startswith("text/plain")
    assert log.text == "regress failed\n"


@pytest.mark.asyncio
async def test_html_missing_report(client, history):
    assert (await client.get("/reports/99")).status_code == 404
    assert (await client.get("/reports/99/log")).status_code == 404


@pytest.mark.asyncio
async def test_same_second_reports_count_once(client, test_db, runner):
    """A machine reporting twice in one second is one dashboard entry, the later report"""
    kcgi, user = runner["project"], runner["user"]
    await _insert(test_db, kcgi, user, 1000, "aaaaaaa1", BSD)
    await _insert(test_db, kcgi, user, 1000, "bbbbbbb2", BSD, **{"report-distcheck": "0"})

    dashboard = (await client.get("/api/v1/dashboard")).json()
    listing = (await client.get("/api/v1/projects/kcgi/reports")).json()

    assert len(dashboard) == 1
    row = dashboard[0]
    assert row["finished"] + row["pending"] == 1
    assert row["newest_fetchhead"] == "bbbbbbb2"
    assert [r["id"] for r in listing["reports"]] == [2]


@pytest.mark.asyncio
async def test_html_views_with_far_future_stages(client, test_db, runner):
    far = str(10**13)
    stages = {f"report-{s}": far for s in ("start", "env", "depend", "build", "test", "install", "distcheck")}
    await _insert(test_db, runner["project"], runner["user"], DAY, "aaaaaaa1", BSD, **stages)

    report = await client.get("/reports/1")
    listing = await client.get("/projects/kcgi")
    day = await client.get("/days/2020-03-14")

    assert report.status_code == 200
    assert far in report.text
    assert listing.status_code == 200
    assert day.status_code == 200
