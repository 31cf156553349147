"""Connection adapters for executing deployment operations on hosts."""

from typing import Any, Dict, Optional

from ..exceptions import ConnectionConfigurationError
from .base import ConnectionAdapter
from .local import LocalConnectionAdapter
from .ssh import SSHConnectionAdapter

CONNECTION_TYPES = {
    "local": LocalConnectionAdapter,
    "ssh": SSHConnectionAdapter,
}


def create_connection_adapter(
    connection_type: str,
    hostname: str,
    options: Optional[Dict[str, Any]] = None,
) -> ConnectionAdapter:
    """Construct the connection adapter for a host.

    Args:
        connection_type: Key in CONNECTION_TYPES
        hostname: Host the adapter connects to
        options: Extra constructor arguments for the adapter

    Returns:
        A new, unconnected ConnectionAdapter

    Raises:
        ConnectionConfigurationError: On unknown type or invalid options
    """
    adapter_class = CONNECTION_TYPES.get(connection_type)
    if adapter_class is None:
        raise ConnectionConfigurationError(
            f'Unknown connection type "{connection_type}".',
            context=f"Host: {hostname}, available: {', '.join(sorted(CONNECTION_TYPES))}",
        )

    try:
        return adapter_class(hostname=hostname, **(options or {}))
    except TypeError as e:
        raise ConnectionConfigurationError(
            f'Invalid options for connection type "{connection_type}".',
            context=f"Host: {hostname}, {e}",
        ) from e


__all__ = [
    "CONNECTION_TYPES",
    "ConnectionAdapter",
    "LocalConnectionAdapter",
    "SSHConnectionAdapter",
    "create_connection_adapter",
]
