"""Local filesystem connection adapter."""

import os
import shutil
from typing import Optional

import structlog

from .base import ConnectionAdapter

logger = structlog.get_logger()


class LocalConnectionAdapter(ConnectionAdapter):
    """Connection adapter executing operations on the local filesystem."""

    def __init__(self, hostname: str = "localhost"):
        self.hostname = hostname
        self._connected = False

    def connect(self) -> bool:
        self._connected = True
        logger.debug("local.connected", host=self.hostname)
        return True

    def is_connected(self) -> bool:
        return self._connected

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def create_directory(self, path: str) -> bool:
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            logger.debug("local.create_directory_failed", path=path, error=str(e))
            return False
        return True

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_link(self, path: str) -> bool:
        return os.path.islink(path)

    def link(self, target: str, link_path: str) -> bool:
        try:
            os.symlink(target, link_path)
        except OSError as e:
            logger.debug(
                "local.link_failed", target=target, link=link_path, error=str(e)
            )
            return False
        return True

    def read_link(self, path: str) -> Optional[str]:
        try:
            return os.readlink(path)
        except OSError:
            return None

    def delete(self, path: str, recursive: bool = False) -> bool:
        try:
            if os.path.islink(path) or os.path.isfile(path):
                os.remove(path)
            elif os.path.isdir(path):
                if recursive:
                    shutil.rmtree(path)
                else:
                    os.rmdir(path)
            else:
                return False
        except OSError as e:
            logger.debug("local.delete_failed", path=path, error=str(e))
            return False
        return True

    def put_file(self, local_path: str, remote_path: str) -> bool:
        return self._copy(local_path, remote_path)

    def get_file(self, remote_path: str, local_path: str) -> bool:
        return self._copy(remote_path, local_path)

    def _copy(self, source: str, destination: str) -> bool:
        """Copy a regular file.

        Args:
            source: File to copy
            destination: Target file path

        Returns:
            True on success
        """
        if not os.path.isfile(source):
            return False
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            logger.debug(
                "local.copy_failed", src=source, dest=destination, error=str(e)
            )
            return False
        return True
