"""Priority-ordered event dispatcher driving the deployment pipeline."""

from dataclasses import dataclass
from typing import Callable, Dict, List

import structlog

from .events import Event, LifecycleEvent
from .exceptions import DispatcherLockedError

logger = structlog.get_logger()

Handler = Callable[[Event, LifecycleEvent, "EventDispatcher"], None]


@dataclass(frozen=True)
class Listener:
    """Registered listener record."""

    handler: Handler
    priority: int = 0


class EventDispatcher:
    """Synchronous publish/subscribe dispatcher.

    Listeners run in descending priority order; listeners with equal priority
    run in registration order. Once lock() is called the subscription table
    is read-only, so it can be shared between host runs without locking.
    """

    def __init__(self):
        self._listeners: Dict[LifecycleEvent, List[Listener]] = {}
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self):
        """Make the subscription table read-only."""
        self._locked = True
        logger.debug(
            "dispatcher.locked",
            events={event.value: len(items) for event, items in self._listeners.items()},
        )

    def add_listener(self, event_name, handler: Handler, priority: int = 0):
        """Register a handler for a lifecycle event.

        Args:
            event_name: LifecycleEvent (or its value)
            handler: Callable invoked as handler(event, event_name, dispatcher)
            priority: Higher priorities run first

        Raises:
            ValueError: If event_name is not a lifecycle event
            DispatcherLockedError: If the dispatcher is locked
        """
        if self._locked:
            raise DispatcherLockedError(
                "Cannot register listeners after the dispatcher is locked."
            )
        event_name = LifecycleEvent.parse(event_name)
        if not callable(handler):
            raise ValueError(f"Listener for '{event_name.value}' is not callable.")

        listeners = self._listeners.setdefault(event_name, [])
        listeners.append(Listener(handler=handler, priority=priority))
        # sort is stable, equal priorities keep registration order
        listeners.sort(key=lambda listener: -listener.priority)

    def add_subscriber(self, subscriber):
        """Register every handler a subscriber declares.

        The subscriber's get_subscribed_events() maps each event to a
        (method_name, priority) pair or a list of such pairs.
        """
        for event_name, subscriptions in subscriber.get_subscribed_events().items():
            if isinstance(subscriptions, tuple):
                subscriptions = [subscriptions]

            for method_name, priority in subscriptions:
                handler = getattr(subscriber, method_name, None)
                if handler is None:
                    raise ValueError(
                        f"{type(subscriber).__name__} has no handler '{method_name}'."
                    )
                self.add_listener(event_name, handler, priority)

    def get_listeners(self, event_name) -> List[Handler]:
        """Return handlers for an event in dispatch order."""
        event_name = LifecycleEvent.parse(event_name)
        return [listener.handler for listener in self._listeners.get(event_name, [])]

    def has_listeners(self, event_name) -> bool:
        return bool(self._listeners.get(LifecycleEvent.parse(event_name)))

    def dispatch(self, event_name, event: Event):
        """Invoke every listener of event_name with the event.

        Exceptions raised by a listener abort the dispatch and propagate to
        the caller.
        """
        event_name = LifecycleEvent.parse(event_name)
        for listener in tuple(self._listeners.get(event_name, ())):
            if event.propagation_stopped:
                if event_name is not LifecycleEvent.LOG:
                    logger.debug("dispatcher.propagation_stopped", event=event_name.value)
                break
            listener.handler(event, event_name, self)
