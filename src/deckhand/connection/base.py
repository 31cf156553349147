"""Base connection adapter interface."""

from abc import ABC, abstractmethod
from typing import Optional


class ConnectionAdapter(ABC):
    """Uniform capability interface over a remote or local filesystem.

    Every operation reports its outcome as a boolean. Ordinary I/O failures
    (missing paths, permission errors, dropped sessions) never raise; the
    calling task decides how severe a failed operation is.
    """

    @abstractmethod
    def connect(self) -> bool:
        """Establish the connection.

        Returns:
            True when the adapter is connected afterwards
        """
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Return whether the connection is established."""
        pass

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        """Return whether path is an existing directory."""
        pass

    @abstractmethod
    def create_directory(self, path: str) -> bool:
        """Create a directory, including missing parents.

        Args:
            path: Directory to create

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def is_file(self, path: str) -> bool:
        """Return whether path is an existing regular file."""
        pass

    @abstractmethod
    def is_link(self, path: str) -> bool:
        """Return whether path is a symbolic link."""
        pass

    @abstractmethod
    def link(self, target: str, link_path: str) -> bool:
        """Create a symbolic link at link_path pointing to target.

        Args:
            target: Path the link points to
            link_path: Location of the link

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def read_link(self, path: str) -> Optional[str]:
        """Return the target of a symbolic link, or None."""
        pass

    @abstractmethod
    def delete(self, path: str, recursive: bool = False) -> bool:
        """Delete a file, link or directory.

        Args:
            path: Path to delete
            recursive: Remove directory contents as well

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def put_file(self, local_path: str, remote_path: str) -> bool:
        """Upload a local file.

        Args:
            local_path: Source file on this machine
            remote_path: Destination path on the host

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def get_file(self, remote_path: str, local_path: str) -> bool:
        """Download a file from the host.

        Args:
            remote_path: Source path on the host
            local_path: Destination file on this machine

        Returns:
            True on success
        """
        pass
