"""API router initialization."""

from fastapi import APIRouter
from loguru import logger

from taskboard_server.api.auth import router as auth_router
from taskboard_server.api.projects import router as projects_router
from taskboard_server.api.teams import router as teams_router

# Create main API router
router = APIRouter()

# Mount API endpoints
router.include_router(auth_router, tags=["auth"])
router.include_router(teams_router, tags=["teams"])
router.include_router(projects_router, tags=["projects"])

logger.debug("API router initialized (auth, teams, projects routers mounted)")
