"""Stage catalog API routes."""

from fastapi import APIRouter, Depends

from buildsketch.api.deps import get_clock
from buildsketch.core.clock import Clock
from buildsketch.db.base import get_session_factory
from buildsketch.domain.stages import HouseType
from buildsketch.schemas.projects import StageResponse
from buildsketch.services.project_service import ProjectService

router = APIRouter()


@router.get("/{house_type}", response_model=list[StageResponse])
async def list_stages(house_type: HouseType, clock: Clock = Depends(get_clock)):
    """Ordered stages for one house type."""
    service = ProjectService(get_session_factory(), clock)
    stages = await service.list_stages(house_type)
    return [StageResponse.model_validate(s) for s in stages]
