"""Structured logging setup."""

import logging
import sys

import structlog

from ..events import LifecycleEvent, LogEvent

logger = structlog.get_logger()


def setup_logging(level: str = "INFO", json_format: bool = False):
    """Configure structlog.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: Render JSON lines instead of colored console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)
    # paramiko logs every channel operation at INFO
    logging.getLogger("paramiko").setLevel(max(log_level, logging.WARNING))


class LogEventListener:
    """Forwards task log sub-events to structlog."""

    @classmethod
    def get_subscribed_events(cls):
        return {LifecycleEvent.LOG: ("on_log", 0)}

    def on_log(self, event: LogEvent, event_name, dispatcher):
        task = type(event.task).__name__ if event.task is not None else None
        lifecycle_event = event.event_name.value if event.event_name is not None else None
        log = getattr(logger, event.level.value)
        log(
            event.message,
            task=task,
            lifecycle_event=lifecycle_event,
            **event.context,
        )
