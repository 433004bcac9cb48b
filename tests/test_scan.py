import io
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from saferoads.config import settings
from saferoads.database import async_session
from saferoads.main import app
from saferoads.models.report import Report

COMPLETION = "saferoads.services.assessment._request_completion"


def _image(content_type="image/jpeg", size=100):
    return {"image": ("road.jpg", io.BytesIO(b"\xff\xd8\xff\xe0" + b"\x00" * size), content_type)}


async def _count_reports() -> int:
    async with async_session() as db:
        return (await db.execute(select(func.count(Report.id)))).scalar_one()


@pytest.fixture
def gemini_key(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "test-key")


@pytest.mark.asyncio
async def test_scan_auto_reports_high_score(gemini_key):
    with patch(COMPLETION, new=AsyncMock(return_value='Result: {"damage_score": 90}')):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/scan", files=_image())

    assert response.status_code == 200
    assert response.json() == {"success": True, "damage_score": 90, "auto_reported": True}
    assert await _count_reports() == 1


@pytest.mark.asyncio
async def test_scan_boundary_score_not_auto_reported(gemini_key):
    with patch(COMPLETION, new=AsyncMock(return_value='{"damage_score": 75}')):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/scan", files=_image())

    assert response.status_code == 200
    assert response.json()["auto_reported"] is False
    assert await _count_reports() == 1


@pytest.mark.asyncio
async def test_scan_without_key_is_simulated():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/scan", files=_image())

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert 0 <= body["damage_score"] <= 100
    assert body["auto_reported"] == (body["damage_score"] > 75)


@pytest.mark.asyncio
async def test_scan_unparseable_reply_is_500_and_not_stored(gemini_key):
    with patch(COMPLETION, new=AsyncMock(return_value="The road looks fine to me.")):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/scan", files=_image())

    assert response.status_code == 500
    assert response.json() == {"error": "AI Scan Failed"}
    assert await _count_reports() == 0


@pytest.mark.asyncio
async def test_scan_upstream_error_is_500(gemini_key):
    with patch(COMPLETION, new=AsyncMock(side_effect=RuntimeError("timeout"))):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/scan", files=_image())

    assert response.status_code == 500
    assert response.json() == {"error": "AI Scan Failed"}


@pytest.mark.asyncio
async def test_scan_rejects_unsupported_type():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/scan", files=_image(content_type="image/gif"))

    assert response.status_code == 500
    assert "error" in response.json()
    assert await _count_reports() == 0


@pytest.mark.asyncio
async def test_scan_missing_image_is_500():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/scan")

    assert response.status_code == 500
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_reports_newest_first(gemini_key):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        with patch(COMPLETION, new=AsyncMock(return_value='{"damage_score": 40}')):
            await client.post("/scan", files=_image())
        with patch(COMPLETION, new=AsyncMock(return_value='{"damage_score": 90}')):
            await client.post("/scan", files=_image())

        response = await client.get("/reports")

    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 2
    assert [r["damage_score"] for r in rows] == [90, 40]
    assert rows[0]["id"] > rows[1]["id"]
    assert rows[0]["created_at"] >= rows[1]["created_at"]


@pytest.mark.asyncio
async def test_reports_empty():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/reports")

    assert response.status_code == 200
    assert response.json() == []
