"""Host, workspace and release domain model."""

from .host import Host, Stage
from .release import Release
from .workspace import Workspace, maintenance_path, release_path, stage_path

__all__ = [
    "Host",
    "Release",
    "Stage",
    "Workspace",
    "maintenance_path",
    "release_path",
    "stage_path",
]
