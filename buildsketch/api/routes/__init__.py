from fastapi import APIRouter

from buildsketch.api.routes import health, projects, stages

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(stages.router, prefix="/stages", tags=["stages"])
