import asyncio
import os
import tempfile

import pytest

# must be set before saferoads.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(), "test.db")
os.environ["GEMINI_API_KEY"] = ""
os.environ["OPENWEATHER_API_KEY"] = ""


@pytest.fixture(autouse=True, scope="session")
def setup_test_db():
    from saferoads.config import settings
    settings.gemini_api_key = ""
    settings.openweather_api_key = ""

    from saferoads.database import create_tables

    asyncio.run(create_tables())


@pytest.fixture(autouse=True)
def clean_state():
    """Empty the reports table and reseed the shared portal page before each test."""
    from sqlalchemy import delete

    from saferoads.database import async_session
    from saferoads.main import app
    from saferoads.models.report import Report
    from saferoads.portal.seed import seed_state
    from saferoads.portal.state import PortalState

    async def _clean():
        async with async_session() as session:
            await session.execute(delete(Report))
            await session.commit()

    asyncio.run(_clean())
    app.state.portal = seed_state(PortalState())
