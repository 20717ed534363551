"""Project lifecycle API routes: thin callers of the engine services."""

import uuid

from fastapi import APIRouter, Depends

from buildsketch.api.deps import get_clock, require_actor
from buildsketch.core.clock import Clock
from buildsketch.db.base import get_session_factory
from buildsketch.domain.actors import Actor
from buildsketch.schemas.projects import (
    HistoryEntryResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from buildsketch.services.project_engine import ProjectUpdateEngine
from buildsketch.services.project_service import ProjectService
from buildsketch.services.sla_monitor import SlaMonitor

router = APIRouter()


@router.post("/", response_model=ProjectResponse, status_code=201)
async def create_project(
    request: ProjectCreate,
    actor: Actor = Depends(require_actor),
    clock: Clock = Depends(get_clock),
):
    """Create a project at its first stage."""
    service = ProjectService(get_session_factory(), clock)
    project = await service.create_project(request, actor)
    return ProjectResponse.model_validate(project)


@router.get("/", response_model=list[ProjectResponse])
async def list_projects(clock: Clock = Depends(get_clock)):
    service = ProjectService(get_session_factory(), clock)
    projects = await service.list_projects()
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: uuid.UUID, clock: Clock = Depends(get_clock)):
    """Get a project. Viewing a project runs the SLA catch-up scan first."""
    service = ProjectService(get_session_factory(), clock)
    project = await service.get_project(project_id)
    return ProjectResponse.model_validate(project)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: uuid.UUID,
    request: ProjectUpdate,
    actor: Actor = Depends(require_actor),
    clock: Clock = Depends(get_clock),
):
    """Apply a partial update through the lifecycle engine."""
    engine = ProjectUpdateEngine(get_session_factory(), clock)
    project = await engine.apply_update(project_id, request, actor)
    return ProjectResponse.model_validate(project)


@router.post("/{project_id}/compliance")
async def check_compliance(project_id: uuid.UUID, clock: Clock = Depends(get_clock)):
    """Run an SLA compliance scan on demand."""
    monitor = SlaMonitor(get_session_factory(), clock)
    changed = await monitor.check_compliance(project_id)
    return {"project_id": str(project_id), "changed": changed}


@router.get("/{project_id}/history", response_model=list[HistoryEntryResponse])
async def get_history(project_id: uuid.UUID, clock: Clock = Depends(get_clock)):
    """Audit trail, oldest first."""
    service = ProjectService(get_session_factory(), clock)
    entries = await service.get_history(project_id)
    return [HistoryEntryResponse.model_validate(e) for e in entries]
