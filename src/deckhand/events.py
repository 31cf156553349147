"""Lifecycle events and the payloads dispatched with them."""

from enum import Enum
from typing import Any, Dict, Optional


class LifecycleEvent(str, Enum):
    """Fixed points in the deployment pipeline tasks may subscribe to."""

    PREPARE_WORKSPACE = "deckhand.prepare_workspace"
    PREPARE_DEPLOY_RELEASE = "deckhand.prepare_deploy_release"
    DEPLOY_RELEASE = "deckhand.deploy_release"
    LOG = "deckhand.log"

    @classmethod
    def parse(cls, value) -> "LifecycleEvent":
        """Return the lifecycle event for a member or its name.

        Raises:
            ValueError: If value is not a known lifecycle event
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"'{value}' is not a valid lifecycle event.") from None


class LogLevel(str, Enum):
    """Severity of a log sub-event."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Event:
    """Base payload carrier for one dispatch."""

    def __init__(self):
        self._propagation_stopped = False

    @property
    def propagation_stopped(self) -> bool:
        return self._propagation_stopped

    def stop_propagation(self):
        """Skip the remaining listeners of the current dispatch."""
        self._propagation_stopped = True


class WorkspaceEvent(Event):
    """Event carrying the workspace being prepared."""

    def __init__(self, workspace):
        super().__init__()
        self._workspace = workspace

    @property
    def workspace(self):
        return self._workspace


class PrepareDeployReleaseEvent(WorkspaceEvent):
    """Event carrying the pending release and the release currently deployed."""

    def __init__(self, workspace, release, current_release=None):
        super().__init__(workspace)
        self._release = release
        self._current_release = current_release

    @property
    def release(self):
        return self._release

    @property
    def current_release(self):
        """Release currently deployed, None on a first deployment."""
        return self._current_release


class DeployReleaseEvent(PrepareDeployReleaseEvent):
    """Event activating the pending release."""

    pass


class LogEvent(Event):
    """Nested sub-event reporting task progress."""

    def __init__(
        self,
        level,
        message: str,
        event_name: Optional[LifecycleEvent] = None,
        task=None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize log event.

        Args:
            level: LogLevel (or its name)
            message: Human readable message
            event_name: Lifecycle event being handled when the message was emitted
            task: Task emitting the message
            context: Additional structured data
        """
        super().__init__()
        self._level = LogLevel(level)
        self._message = message
        self._event_name = event_name
        self._task = task
        self._context = dict(context or {})

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def message(self) -> str:
        return self._message

    @property
    def event_name(self) -> Optional[LifecycleEvent]:
        return self._event_name

    @property
    def task(self):
        return self._task

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)
