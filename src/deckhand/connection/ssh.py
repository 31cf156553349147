"""SSH/SFTP connection adapter backed by paramiko."""

import posixpath
import stat
from typing import Optional

import paramiko
import structlog

from .base import ConnectionAdapter

logger = structlog.get_logger()

# Errors paramiko and the underlying socket raise for ordinary I/O outcomes
_SFTP_ERRORS = (OSError, EOFError, paramiko.SSHException)


class SSHConnectionAdapter(ConnectionAdapter):
    """Connection adapter executing operations on a remote host over SFTP."""

    def __init__(
        self,
        hostname: str,
        username: Optional[str] = None,
        port: int = 22,
        password: Optional[str] = None,
        key_filename: Optional[str] = None,
        timeout: float = 10,
        strict_host_key_checking: bool = True,
    ):
        """Initialize SSH adapter.

        Args:
            hostname: Remote host name or IP address
            username: Login user (defaults to the local user)
            port: SSH port
            password: Password or private key passphrase
            key_filename: Path to a private key file
            timeout: TCP connect and banner timeout in seconds
            strict_host_key_checking: Reject hosts missing from known_hosts
        """
        self.hostname = hostname
        self.username = username
        self.port = port
        self.password = password
        self.key_filename = key_filename
        self.timeout = timeout
        self.strict_host_key_checking = strict_host_key_checking

        self.client: Optional[paramiko.SSHClient] = None
        self.sftp: Optional[paramiko.SFTPClient] = None

    def connect(self) -> bool:
        client = paramiko.SSHClient()
        if self.strict_host_key_checking:
            client.load_system_host_keys()
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        try:
            client.connect(
                self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                key_filename=self.key_filename,
                timeout=self.timeout,
                banner_timeout=self.timeout,
            )
            sftp = client.open_sftp()
        except _SFTP_ERRORS as e:
            logger.warning(
                "ssh.connect_failed",
                host=self.hostname,
                port=self.port,
                error=str(e),
            )
            client.close()
            return False

        self.client = client
        self.sftp = sftp
        logger.info("ssh.connected", host=self.hostname, port=self.port)
        return True

    def is_connected(self) -> bool:
        if self.client is None or self.sftp is None:
            return False
        transport = self.client.get_transport()
        return transport is not None and transport.is_active()

    def is_directory(self, path: str) -> bool:
        mode = self._stat_mode(path)
        return mode is not None and stat.S_ISDIR(mode)

    def create_directory(self, path: str) -> bool:
        if not self.is_connected():
            return False

        # SFTP mkdir is not recursive; create missing parents first
        missing = []
        current = path.rstrip("/") or "/"
        while current not in ("", "/") and not self.is_directory(current):
            missing.append(current)
            current = posixpath.dirname(current)

        try:
            for directory in reversed(missing):
                self.sftp.mkdir(directory)
        except _SFTP_ERRORS as e:
            logger.debug(
                "ssh.create_directory_failed",
                host=self.hostname,
                path=path,
                error=str(e),
            )
            return False
        return True

    def is_file(self, path: str) -> bool:
        mode = self._stat_mode(path)
        return mode is not None and stat.S_ISREG(mode)

    def is_link(self, path: str) -> bool:
        mode = self._stat_mode(path, follow_links=False)
        return mode is not None and stat.S_ISLNK(mode)

    def link(self, target: str, link_path: str) -> bool:
        if not self.is_connected():
            return False
        try:
            self.sftp.symlink(target, link_path)
        except _SFTP_ERRORS as e:
            logger.debug(
                "ssh.link_failed",
                host=self.hostname,
                target=target,
                link=link_path,
                error=str(e),
            )
            return False
        return True

    def read_link(self, path: str) -> Optional[str]:
        if not self.is_connected():
            return None
        try:
            return self.sftp.readlink(path)
        except _SFTP_ERRORS:
            return None

    def delete(self, path: str, recursive: bool = False) -> bool:
        mode = self._stat_mode(path, follow_links=False)
        if mode is None:
            return False

        try:
            if stat.S_ISDIR(mode):
                if recursive:
                    self._remove_tree(path)
                else:
                    self.sftp.rmdir(path)
            else:
                self.sftp.remove(path)
        except _SFTP_ERRORS as e:
            logger.debug(
                "ssh.delete_failed", host=self.hostname, path=path, error=str(e)
            )
            return False
        return True

    def put_file(self, local_path: str, remote_path: str) -> bool:
        if not self.is_connected():
            return False
        try:
            self.sftp.put(local_path, remote_path)
        except _SFTP_ERRORS as e:
            logger.debug(
                "ssh.put_file_failed",
                host=self.hostname,
                src=local_path,
                dest=remote_path,
                error=str(e),
            )
            return False
        return True

    def get_file(self, remote_path: str, local_path: str) -> bool:
        if not self.is_connected():
            return False
        try:
            self.sftp.get(remote_path, local_path)
        except _SFTP_ERRORS as e:
            logger.debug(
                "ssh.get_file_failed",
                host=self.hostname,
                src=remote_path,
                dest=local_path,
                error=str(e),
            )
            return False
        return True

    def close(self):
        """Close the SFTP session and the SSH connection."""
        if self.sftp is not None:
            self.sftp.close()
            self.sftp = None
        if self.client is not None:
            self.client.close()
            self.client = None
        logger.debug("ssh.closed", host=self.hostname)

    def _stat_mode(self, path: str, follow_links: bool = True) -> Optional[int]:
        """Return the st_mode of a remote path, or None if it cannot be read."""
        if not self.is_connected():
            return None
        try:
            attributes = self.sftp.stat(path) if follow_links else self.sftp.lstat(path)
        except _SFTP_ERRORS:
            return None
        return attributes.st_mode

    def _remove_tree(self, path: str):
        """Recursively remove a remote directory without following links."""
        for entry in self.sftp.listdir_attr(path):
            entry_path = posixpath.join(path, entry.filename)
            if stat.S_ISDIR(entry.st_mode):
                self._remove_tree(entry_path)
            else:
                self.sftp.remove(entry_path)
        self.sftp.rmdir(path)
