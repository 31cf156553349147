"""Base class and failure policy shared by deployment tasks."""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..connection import ConnectionAdapter
from ..events import LifecycleEvent, LogEvent, LogLevel
from ..exceptions import TaskRuntimeError

Subscription = Tuple[str, int]


class Criticality(Enum):
    """How much a failed connection operation matters to a task."""

    TOLERATED = "tolerated"
    SOFT = "soft"
    HARD = "hard"


class Verdict(Enum):
    """What a task does after a connection operation."""

    CONTINUE = "continue"
    SOFT_FAIL = "soft_fail"
    HARD_FAIL = "hard_fail"


@dataclass(frozen=True)
class Outcome:
    """Verdict on a connection operation, with the reason for failures."""

    verdict: Verdict
    reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.verdict is not Verdict.CONTINUE

    def raise_for_failure(self, task=None):
        """Raise TaskRuntimeError when the outcome is a hard failure."""
        if self.verdict is Verdict.HARD_FAIL:
            raise TaskRuntimeError(self.reason, task=task)


def judge(succeeded: bool, criticality: Criticality, reason: Optional[str] = None) -> Outcome:
    """Map a connection operation result onto the task's failure policy."""
    if succeeded or criticality is Criticality.TOLERATED:
        return Outcome(Verdict.CONTINUE)
    if criticality is Criticality.SOFT:
        return Outcome(Verdict.SOFT_FAIL, reason)
    return Outcome(Verdict.HARD_FAIL, reason)


class Phase:
    """Handle yielded by Task.phase() to report a soft failure."""

    def __init__(self, title: str):
        self.title = title
        self.reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.reason is not None

    def soft_fail(self, reason: str):
        self.reason = reason


class Task:
    """Base class for deployment tasks.

    Subclasses declare their handlers in get_subscribed_events() and keep no
    state between invocations besides their construction-time configuration.
    """

    @classmethod
    def get_subscribed_events(
        cls,
    ) -> Dict[LifecycleEvent, Union[Subscription, List[Subscription]]]:
        """Map lifecycle events to (handler method name, priority) pairs."""
        return {}

    def log(
        self,
        dispatcher,
        event_name: LifecycleEvent,
        level: LogLevel,
        message: str,
        **context,
    ):
        """Dispatch a log sub-event on behalf of this task."""
        dispatcher.dispatch(
            LifecycleEvent.LOG,
            LogEvent(level, message, event_name=event_name, task=self, context=context),
        )

    @contextmanager
    def phase(self, dispatcher, event_name: LifecycleEvent, title: str) -> Iterator[Phase]:
        """Bracket a unit of work with start and end log sub-events.

        The end sub-event is dispatched on every exit path, including errors.
        """
        phase = Phase(title)
        self.log(dispatcher, event_name, LogLevel.INFO, f"{title}...", phase="start")

        status = "failed"
        try:
            yield phase
            status = "skipped" if phase.skipped else "completed"
        finally:
            if status == "completed":
                level, message = LogLevel.INFO, f"{title} completed."
            elif status == "skipped":
                level, message = LogLevel.WARNING, f"{title} skipped: {phase.reason}"
            else:
                level, message = LogLevel.ERROR, f"{title} failed."
            self.log(dispatcher, event_name, level, message, phase="end", status=status)

    def ensure_connection(self, host) -> ConnectionAdapter:
        """Return the connected adapter of a host.

        Raises:
            TaskRuntimeError: If the host has no connection or connecting fails
        """
        if not host.has_connection():
            raise TaskRuntimeError(
                f'No connection configured for host "{host.hostname}".', task=self
            )

        connection = host.get_connection()
        if not connection.is_connected() and not connection.connect():
            raise TaskRuntimeError(
                f'Could not connect to host "{host.hostname}".', task=self
            )
        return connection
