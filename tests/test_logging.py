"""Tests for deckhand.utils.logging."""

import logging

import structlog
from structlog.testing import capture_logs

from deckhand.events import LifecycleEvent, LogEvent, LogLevel
from deckhand.tasks import MaintenanceModeTask
from deckhand.utils.logging import LogEventListener, setup_logging


def test_log_event_listener_forwards_to_structlog():
    event = LogEvent(
        LogLevel.WARNING,
        "Removing existing link failed.",
        event_name=LifecycleEvent.PREPARE_DEPLOY_RELEASE,
        task=MaintenanceModeTask(),
        context={"path": "/var/www/test"},
    )

    with capture_logs() as logs:
        LogEventListener().on_log(event, LifecycleEvent.LOG, None)

    assert logs == [
        {
            "event": "Removing existing link failed.",
            "log_level": "warning",
            "task": "MaintenanceModeTask",
            "lifecycle_event": "deckhand.prepare_deploy_release",
            "path": "/var/www/test",
        }
    ]


def test_log_event_listener_subscription():
    assert LogEventListener.get_subscribed_events() == {LifecycleEvent.LOG: ("on_log", 0)}


def test_setup_logging_quiets_paramiko():
    setup_logging("DEBUG", json_format=True)

    assert logging.getLogger("paramiko").level == logging.WARNING
    assert structlog.is_configured()
