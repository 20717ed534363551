"""Re-export all models so Base.metadata sees them."""

from buildsketch.db.models.project import Project
from buildsketch.db.models.project_history import ProjectHistory
from buildsketch.db.models.stage_config import StageConfig

__all__ = [
    "Project",
    "ProjectHistory",
    "StageConfig",
]
