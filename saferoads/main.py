import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from saferoads.config import settings
from saferoads.database import create_tables
from saferoads.portal.seed import seed_state
from saferoads.portal.state import PortalState
from saferoads.routers.places import router as places_router
from saferoads.routers.portal import router as portal_router
from saferoads.routers.scan import router as scan_router
from saferoads.utils.exceptions import register_exception_handlers

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info("SafeRoads backend started (damage threshold %d)", settings.damage_threshold)
    yield


app = FastAPI(
    title="SafeRoads API",
    description="Road damage reporting: AI scan, priority reports, emergency services and air quality",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# one shared demo page; no per-user isolation
app.state.portal = seed_state(PortalState())

app.include_router(scan_router)
app.include_router(places_router)
app.include_router(portal_router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "saferoads-api", "version": VERSION}
