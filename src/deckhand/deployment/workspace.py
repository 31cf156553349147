"""Remote directory layout of a host during a deployment run."""

from typing import Optional

MAINTENANCE_DIRECTORY = "maintenance"
RELEASES_DIRECTORY = "releases"


def maintenance_path(root: str, subdirectory: Optional[str] = None) -> str:
    """Return the maintenance page directory, optionally a document root below it."""
    return f"{root}/{MAINTENANCE_DIRECTORY}/{subdirectory or ''}"


def stage_path(root: str, stage: str) -> str:
    """Return the path of the symbolic link serving a stage."""
    return f"{root}/{stage}"


def release_path(root: str, version: str) -> str:
    """Return the directory a release version is installed in."""
    return f"{root}/{RELEASES_DIRECTORY}/{version}"


class Workspace:
    """The directory structure managed on one host for one deployment run."""

    def __init__(self, host, path: Optional[str] = None):
        """Initialize workspace.

        Args:
            host: Host the workspace lives on
            path: Workspace root (defaults to the host path)
        """
        self.host = host
        self.path = host.path if path is None else path

    @property
    def releases_directory(self) -> str:
        return f"{self.path}/{RELEASES_DIRECTORY}"

    @property
    def stage_path(self) -> str:
        return stage_path(self.path, self.host.stage)

    def maintenance_path(self, subdirectory: Optional[str] = None) -> str:
        return maintenance_path(self.path, subdirectory)

    def release_path(self, version: str) -> str:
        return release_path(self.path, version)

    def __repr__(self) -> str:
        return f"Workspace(host={self.host.hostname!r}, path={self.path!r})"
