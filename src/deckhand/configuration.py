"""Deployment configuration file loading and validation."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from .deployment import Host, Stage
from .events import LifecycleEvent
from .exceptions import (
    ConfigurationError,
    ConfigurationNotFoundError,
    ConfigurationSyntaxError,
    ConfigurationValidationError,
)

logger = structlog.get_logger()

EXTEND_KEY = "$extend"


class HostConfig(BaseModel):
    """Host entry of the configuration file."""

    hostname: str
    stage: Stage
    path: str
    connection_type: Optional[str] = Field(default=None, alias="connectionType")
    connection_options: Dict[str, Any] = Field(
        default_factory=dict, alias="connectionOptions"
    )

    class Config:
        populate_by_name = True
        extra = "forbid"


class SubscriberConfig(BaseModel):
    """Event subscriber entry: a class path plus its constructor arguments."""

    class_path: str = Field(alias="class")

    class Config:
        populate_by_name = True
        extra = "allow"


class EventsConfig(BaseModel):
    """Event subscribers and listeners registered before deployment."""

    subscribers: List[SubscriberConfig] = Field(default_factory=list)
    listeners: Dict[LifecycleEvent, List[str]] = Field(default_factory=dict)

    class Config:
        extra = "forbid"

    @field_validator("subscribers", mode="before")
    @classmethod
    def expand_class_paths(cls, value):
        """Accept a bare class path as shorthand for {"class": path}."""
        if not isinstance(value, list):
            return value
        return [{"class": item} if isinstance(item, str) else item for item in value]


class DeploymentConfiguration(BaseModel):
    """Root of the configuration file."""

    hosts: List[HostConfig] = Field(min_length=1)
    events: EventsConfig = Field(default_factory=EventsConfig)
    deployment: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "forbid"


def merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two configuration dicts; lists and scalars in override win."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Configuration:
    """Deployment configuration loaded from a JSON file."""

    def __init__(self, connection_defaults: Optional[Dict[str, Dict[str, Any]]] = None):
        """Initialize configuration.

        Args:
            connection_defaults: Default connection options per connection type,
                overridden by the options configured on a host
        """
        self.connection_defaults = connection_defaults or {}
        self.path: Optional[Path] = None
        self._configuration: Optional[DeploymentConfiguration] = None
        self._hosts: Optional[List[Host]] = None

    def load(self, path):
        """Load and validate a configuration file.

        Raises:
            ConfigurationNotFoundError: If the file does not exist
            ConfigurationSyntaxError: If the file is not valid JSON
            ConfigurationValidationError: If the configuration does not match the schema
            ConfigurationError: If $extend references form a cycle
        """
        path = Path(path)
        data = self._read(path, ())
        try:
            configuration = DeploymentConfiguration.model_validate(data)
        except ValidationError as e:
            raise ConfigurationValidationError(str(path), e.errors()) from e

        self.path = path
        self._configuration = configuration
        self._hosts = None
        logger.info(
            "configuration.loaded",
            path=str(path),
            hosts=len(configuration.hosts),
            subscribers=len(configuration.events.subscribers),
        )

    def _read(self, path: Path, seen: tuple) -> Dict[str, Any]:
        """Read a configuration file, resolving $extend recursively."""
        resolved = path.resolve()
        if resolved in seen:
            raise ConfigurationError(
                "The configuration extends itself.",
                context=" -> ".join(str(item) for item in seen + (resolved,)),
            )
        if not path.is_file():
            raise ConfigurationNotFoundError(str(path))

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationSyntaxError(str(path), e.lineno, e.colno, e.msg) from e

        if not isinstance(data, dict):
            raise ConfigurationValidationError(
                str(path), [{"loc": (), "msg": "Configuration must be a JSON object"}]
            )

        parent = data.pop(EXTEND_KEY, None)
        if parent is None:
            return data

        logger.debug("configuration.extending", path=str(path), extends=parent)
        parent_data = self._read(path.parent / parent, seen + (resolved,))
        return merge(parent_data, data)

    def to_dict(self) -> Dict[str, Any]:
        if self._configuration is None:
            return {}
        return self._configuration.model_dump(mode="json", by_alias=True)

    def get_hosts(self) -> List[Host]:
        """Return the configured hosts; the same Host instances on every call."""
        if self._configuration is None:
            return []

        if self._hosts is None:
            self._hosts = [
                Host(
                    hostname=host.hostname,
                    stage=host.stage,
                    path=host.path,
                    connection_type=host.connection_type,
                    connection_options=merge(
                        self.connection_defaults.get(host.connection_type, {}),
                        host.connection_options,
                    ),
                )
                for host in self._configuration.hosts
            ]
        return list(self._hosts)

    def get_hosts_by_stage(self, stage) -> List[Host]:
        """Return the hosts of a stage.

        Raises:
            ValueError: If stage is not a valid stage
        """
        stage = Stage.parse(stage)
        return [host for host in self.get_hosts() if host.stage == stage.value]

    def get_event_subscribers(self) -> List[Dict[str, Any]]:
        """Return subscriber entries, each a dict with a 'class' key."""
        if self._configuration is None:
            return []
        return [
            subscriber.model_dump(by_alias=True)
            for subscriber in self._configuration.events.subscribers
        ]

    def get_event_listeners(self) -> Dict[LifecycleEvent, List[str]]:
        """Return 'module:callable' listener references per lifecycle event."""
        if self._configuration is None:
            return {}
        return {
            event: list(references)
            for event, references in self._configuration.events.listeners.items()
        }
