"""Versioned deployment artifacts."""

from typing import Optional

from ..utils.version import parse_version


class Release:
    """One versioned release, addressable on a host through its workspace."""

    def __init__(self, version: str, workspace=None):
        """Initialize release.

        Args:
            version: Semantic version string (major.minor.patch[-pre][+build])
            workspace: Workspace the release is installed in

        Raises:
            ValueError: If version cannot be parsed
        """
        parse_version(version)
        self.version = version
        self.workspace = workspace

    @property
    def path(self) -> Optional[str]:
        """Directory of the release on its host, if it belongs to a workspace."""
        if self.workspace is None:
            return None
        return self.workspace.release_path(self.version)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Release):
            return NotImplemented
        return self.version == other.version and self.workspace is other.workspace

    def __hash__(self) -> int:
        return hash((self.version, id(self.workspace)))

    def __repr__(self) -> str:
        return f"Release(version={self.version!r})"
