"""Deployment target hosts."""

from enum import Enum
from typing import Any, Dict, Optional

import structlog

from ..connection import ConnectionAdapter, create_connection_adapter
from ..exceptions import ConnectionConfigurationError

logger = structlog.get_logger()


class Stage(str, Enum):
    """Deployment environment tier."""

    TEST = "test"
    ACCEPTANCE = "acceptance"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value) -> "Stage":
        """Return the stage for a name.

        Raises:
            ValueError: If value is not a known stage
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"'{value}' is not a valid stage.") from None


class Host:
    """A deployment target belonging to a stage.

    The host exclusively owns its connection adapter, which is created on the
    first call to get_connection() and reused for the lifetime of the host.
    """

    def __init__(
        self,
        hostname: str,
        stage,
        path: str,
        connection_type: Optional[str] = None,
        connection_options: Optional[Dict[str, Any]] = None,
    ):
        """Initialize host.

        Args:
            hostname: Host name or IP address
            stage: Stage (or stage name) the host belongs to
            path: Root path of the deployment workspace on the host
            connection_type: Connection adapter type ('local' or 'ssh')
            connection_options: Extra connection adapter arguments
        """
        self.hostname = hostname
        self.stage = Stage.parse(stage).value
        self.path = path
        self.connection_type = connection_type
        self.connection_options = dict(connection_options or {})
        self._connection: Optional[ConnectionAdapter] = None

    def has_connection(self) -> bool:
        """Return whether a connection type is configured for this host."""
        return bool(self.connection_type)

    def get_connection(self) -> ConnectionAdapter:
        """Return the connection adapter, constructing it on first use.

        Raises:
            ConnectionConfigurationError: If no connection type is configured
        """
        if self._connection is None:
            if not self.has_connection():
                raise ConnectionConfigurationError(
                    f'Host "{self.hostname}" has no connection configured.'
                )
            self._connection = create_connection_adapter(
                self.connection_type, self.hostname, self.connection_options
            )
            logger.debug(
                "host.connection_created",
                host=self.hostname,
                connection_type=self.connection_type,
            )
        return self._connection

    def __repr__(self) -> str:
        return f"Host(hostname={self.hostname!r}, stage={self.stage!r}, path={self.path!r})"
