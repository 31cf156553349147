"""End-to-end tests for deckhand.deployer using the local connection adapter."""

import json
import os

import pytest

from deckhand.configuration import Configuration
from deckhand.deployer import Deployer, import_object
from deckhand.dispatcher import EventDispatcher
from deckhand.events import LifecycleEvent, LogEvent
from deckhand.exceptions import ConfigurationError, TaskRuntimeError
from deckhand.tasks import MaintenanceModeTask

from . import listeners
from .conftest import RecordingConnection


@pytest.fixture(autouse=True)
def clear_listener():
    listeners.received.clear()
    yield
    listeners.received.clear()


def make_root(tmp_path, name, versions=("1.0.0", "2.0.0", "1.1.0"), current="1.0.0"):
    root = tmp_path / name
    for version in versions:
        (root / "releases" / version).mkdir(parents=True)
    if current:
        os.symlink(str(root / "releases" / current), str(root / "test"))
    return root


def write_configuration(tmp_path, roots, subscribers):
    path = tmp_path / "deckhand.json"
    path.write_text(
        json.dumps(
            {
                "hosts": [
                    {
                        "hostname": f"host{index}",
                        "stage": "test",
                        "path": str(root),
                        "connectionType": "local",
                    }
                    for index, root in enumerate(roots)
                ],
                "events": {
                    "subscribers": subscribers,
                    "listeners": {"deckhand.log": ["tests.listeners:record"]},
                },
            }
        )
    )
    configuration = Configuration()
    configuration.load(path)
    return configuration


@pytest.fixture
def subscribers(maintenance_source):
    return [
        {"class": "deckhand.tasks.MaintenanceModeTask", "source_directory": str(maintenance_source)},
        {"class": "deckhand.tasks.DeployReleaseTask"},
    ]


def log_messages():
    return [event.message for _, event in listeners.received if isinstance(event, LogEvent)]


def test_deploys_major_release_through_maintenance(tmp_path, subscribers):
    root = make_root(tmp_path, "www")
    deployer = Deployer.from_configuration(write_configuration(tmp_path, [root], subscribers))

    (result,) = deployer.deploy("2.0.0", "test")

    assert result.succeeded
    assert result.hostname == "host0"
    assert (root / "maintenance" / "index.html").is_file()
    assert os.readlink(root / "test") == f"{root}/releases/2.0.0"
    assert "Linking maintenance page to stage..." in log_messages()
    assert all(name is LifecycleEvent.LOG for name, _ in listeners.received)


def test_minor_release_skips_maintenance(tmp_path, subscribers):
    root = make_root(tmp_path, "www")
    deployer = Deployer.from_configuration(write_configuration(tmp_path, [root], subscribers))

    (result,) = deployer.deploy("1.1.0", "test")

    assert result.succeeded
    assert os.readlink(root / "test") == f"{root}/releases/1.1.0"
    assert any(message.startswith("Skipped linking maintenance page") for message in log_messages())
    assert "Linking maintenance page to stage..." not in log_messages()


def test_first_deployment(tmp_path, subscribers):
    root = make_root(tmp_path, "www", versions=("0.1.0",), current=None)
    deployer = Deployer.from_configuration(write_configuration(tmp_path, [root], subscribers))

    (result,) = deployer.deploy("0.1.0", "test")

    assert result.succeeded
    assert os.readlink(root / "test") == f"{root}/releases/0.1.0"


def test_failed_host_does_not_stop_other_hosts(tmp_path, subscribers):
    broken = make_root(tmp_path, "broken", versions=("1.0.0",))
    healthy = make_root(tmp_path, "healthy")
    deployer = Deployer.from_configuration(
        write_configuration(tmp_path, [broken, healthy], subscribers)
    )

    first, second = deployer.deploy("2.0.0", "test")

    assert first.status == "failed"
    assert "Release directory" in first.error
    assert os.readlink(broken / "test") == f"{broken}/maintenance/"
    assert second.succeeded
    assert os.readlink(healthy / "test") == f"{healthy}/releases/2.0.0"


def test_stage_without_hosts(tmp_path, subscribers):
    root = make_root(tmp_path, "www")
    deployer = Deployer.from_configuration(write_configuration(tmp_path, [root], subscribers))

    assert deployer.deploy("2.0.0", "production") == []


def test_invalid_stage_and_version(tmp_path, subscribers):
    root = make_root(tmp_path, "www")
    deployer = Deployer.from_configuration(write_configuration(tmp_path, [root], subscribers))

    with pytest.raises(ValueError, match="'staging' is not a valid stage."):
        deployer.deploy("2.0.0", "staging")
    with pytest.raises(ValueError, match="is not a valid version"):
        deployer.deploy("latest", "test")


def test_dispatcher_is_locked(tmp_path, subscribers):
    deployer = Deployer.from_configuration(
        write_configuration(tmp_path, [make_root(tmp_path, "www")], subscribers)
    )
    assert deployer.dispatcher.locked
    assert deployer.dispatcher.has_listeners(LifecycleEvent.DEPLOY_RELEASE)


def test_subscriber_defaults(tmp_path, maintenance_source):
    configuration = write_configuration(
        tmp_path, [make_root(tmp_path, "www")], [{"class": "deckhand.tasks.MaintenanceModeTask"}]
    )

    deployer = Deployer.from_configuration(
        configuration, {MaintenanceModeTask: {"source_directory": str(maintenance_source)}}
    )

    (handler,) = deployer.dispatcher.get_listeners(LifecycleEvent.PREPARE_WORKSPACE)
    assert handler.__self__.local_maintenance_directory == maintenance_source.resolve()


def test_invalid_subscriber_arguments(tmp_path):
    configuration = write_configuration(
        tmp_path,
        [make_root(tmp_path, "www")],
        [{"class": "deckhand.tasks.MaintenanceModeTask", "strategy": 99}],
    )

    with pytest.raises(ConfigurationError, match="Could not create event subscriber"):
        Deployer.from_configuration(configuration)


class TestImportObject:
    def test_dotted_reference(self):
        assert import_object("deckhand.tasks.MaintenanceModeTask") is MaintenanceModeTask

    def test_colon_reference(self):
        assert import_object("tests.listeners:record") is listeners.record

    @pytest.mark.parametrize("reference", ["deckhand.tasks.Missing", "missing.module:thing", "plain"])
    def test_invalid_reference(self, reference):
        with pytest.raises(ConfigurationError):
            import_object(reference)


class ClosingConnection(RecordingConnection):
    def close(self):
        self.calls.append(("close",))


class TestConnectionClosing:
    @pytest.fixture
    def setup(self, tmp_path):
        configuration = write_configuration(tmp_path, [tmp_path / "www"], [])
        (host,) = configuration.get_hosts()
        host._connection = ClosingConnection()
        return configuration, host

    def test_closed_after_pipeline(self, setup):
        configuration, host = setup

        (result,) = Deployer(configuration).deploy("1.0.0", "test")

        assert result.succeeded
        assert host.get_connection().method_names()[-1] == "close"

    def test_closed_after_failure(self, setup):
        configuration, host = setup
        dispatcher = EventDispatcher()

        def fail(event, event_name, dispatcher):
            raise TaskRuntimeError("broken")

        dispatcher.add_listener(LifecycleEvent.DEPLOY_RELEASE, fail)

        (result,) = Deployer(configuration, dispatcher).deploy("1.0.0", "test")

        assert result.status == "failed"
        assert host.get_connection().calls_to("close") == [()]
