"""Bootstrapper and sequential run orchestrator."""

import importlib
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import structlog

from .configuration import Configuration
from .deployment import Host, Release, Stage, Workspace
from .dispatcher import EventDispatcher
from .events import (
    DeployReleaseEvent,
    LifecycleEvent,
    PrepareDeployReleaseEvent,
    WorkspaceEvent,
)
from .exceptions import ConfigurationError, DeckhandError
from .utils.logging import LogEventListener

logger = structlog.get_logger()


@dataclass
class HostDeploymentResult:
    """Result of deploying a release to one host."""

    hostname: str
    stage: str
    version: str
    status: str  # "success" or "failed"
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


def import_object(reference: str):
    """Import an object from a 'package.module.Name' or 'package.module:name' reference.

    Raises:
        ConfigurationError: If the reference cannot be imported
    """
    if ":" in reference:
        module_name, _, attribute = reference.partition(":")
    else:
        module_name, _, attribute = reference.rpartition(".")

    if not module_name or not attribute:
        raise ConfigurationError(f'Invalid object reference "{reference}".')

    try:
        module = importlib.import_module(module_name)
        obj = module
        for part in attribute.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(
            f'Could not import "{reference}".', context=str(e)
        ) from e
    return obj


class Deployer:
    """Runs the deployment pipeline for every host of a stage, one host at a time."""

    def __init__(self, configuration: Configuration, dispatcher: Optional[EventDispatcher] = None):
        """Initialize deployer.

        Args:
            configuration: Loaded deployment configuration
            dispatcher: Dispatcher with all tasks registered
        """
        self.configuration = configuration
        self.dispatcher = dispatcher or EventDispatcher()

    @classmethod
    def from_configuration(
        cls,
        configuration: Configuration,
        subscriber_defaults: Optional[Dict[type, Dict[str, Any]]] = None,
    ) -> "Deployer":
        """Build a deployer with the configured subscribers and listeners registered.

        Args:
            configuration: Loaded deployment configuration
            subscriber_defaults: Default constructor arguments per subscriber base
                class, overridden by the arguments in the configuration

        Raises:
            ConfigurationError: If a subscriber or listener cannot be created
        """
        dispatcher = EventDispatcher()
        dispatcher.add_subscriber(LogEventListener())

        for entry in configuration.get_event_subscribers():
            options = dict(entry)
            subscriber_class = import_object(options.pop("class"))

            arguments: Dict[str, Any] = {}
            for base, defaults in (subscriber_defaults or {}).items():
                if isinstance(subscriber_class, type) and issubclass(subscriber_class, base):
                    arguments.update(defaults)
            arguments.update(options)

            try:
                subscriber = subscriber_class(**arguments)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f'Could not create event subscriber "{entry["class"]}".',
                    context=str(e),
                ) from e
            dispatcher.add_subscriber(subscriber)
            logger.debug("deployer.subscriber_registered", subscriber=entry["class"])

        for event_name, references in configuration.get_event_listeners().items():
            for reference in references:
                dispatcher.add_listener(event_name, import_object(reference))
                logger.debug(
                    "deployer.listener_registered",
                    listener=reference,
                    event=event_name.value,
                )

        dispatcher.lock()
        return cls(configuration, dispatcher)

    def deploy(self, version: str, stage) -> List[HostDeploymentResult]:
        """Deploy a release version to every host of a stage.

        A failure on one host is recorded in its result and does not stop the
        deployment to the remaining hosts.

        Raises:
            ValueError: If stage or version are invalid
        """
        hosts = self.configuration.get_hosts_by_stage(stage)
        Release(version)

        logger.info(
            "deployer.deploy_starting",
            version=version,
            stage=Stage.parse(stage).value,
            hosts=len(hosts),
        )

        results = []
        for host in hosts:
            try:
                self._deploy_host(host, version)
            except DeckhandError as e:
                logger.error(
                    "deployer.host_failed",
                    host=host.hostname,
                    version=version,
                    error=str(e),
                    exc_info=True,
                )
                results.append(
                    HostDeploymentResult(
                        hostname=host.hostname,
                        stage=host.stage,
                        version=version,
                        status="failed",
                        error=str(e),
                    )
                )
            else:
                logger.info("deployer.host_completed", host=host.hostname, version=version)
                results.append(
                    HostDeploymentResult(
                        hostname=host.hostname,
                        stage=host.stage,
                        version=version,
                        status="success",
                    )
                )

        logger.info(
            "deployer.deploy_finished",
            version=version,
            failed=sum(1 for result in results if not result.succeeded),
        )
        return results

    def _deploy_host(self, host: Host, version: str):
        """Dispatch the lifecycle events for one host."""
        try:
            workspace = Workspace(host)
            self.dispatcher.dispatch(LifecycleEvent.PREPARE_WORKSPACE, WorkspaceEvent(workspace))

            release = Release(version, workspace)
            current_release = self._detect_current_release(workspace)
            logger.info(
                "deployer.release_resolved",
                host=host.hostname,
                version=version,
                current_version=current_release.version if current_release else None,
            )

            self.dispatcher.dispatch(
                LifecycleEvent.PREPARE_DEPLOY_RELEASE,
                PrepareDeployReleaseEvent(workspace, release, current_release),
            )
            self.dispatcher.dispatch(
                LifecycleEvent.DEPLOY_RELEASE,
                DeployReleaseEvent(workspace, release, current_release),
            )
        finally:
            self._close_connection(host)

    def _close_connection(self, host: Host):
        """Close the host session opened during its pipeline."""
        if not host.has_connection():
            return
        close = getattr(host.get_connection(), "close", None)
        if close is not None:
            close()

    def _detect_current_release(self, workspace: Workspace) -> Optional[Release]:
        """Return the release the stage link points to, if any.

        Raises:
            DeckhandError: If the host connection cannot be established
        """
        host = workspace.host
        if not host.has_connection():
            return None

        connection = host.get_connection()
        if not connection.is_connected() and not connection.connect():
            raise DeckhandError(f'Could not connect to host "{host.hostname}".')

        target = connection.read_link(workspace.stage_path)
        prefix = workspace.releases_directory + "/"
        if not target or not target.startswith(prefix):
            return None

        version = target[len(prefix):].strip("/")
        try:
            return Release(version, workspace)
        except ValueError:
            logger.warning(
                "deployer.current_release_unparseable",
                host=host.hostname,
                target=target,
            )
            return None
