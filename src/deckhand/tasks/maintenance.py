"""Maintenance mode task: stages a maintenance page and points the stage at it."""

from pathlib import Path
from typing import Optional

import structlog

from ..deployment.workspace import maintenance_path, stage_path
from ..events import LifecycleEvent, LogLevel
from ..utils.version import MATCH_MAJOR_DIFFERENCE, categorize, validate_strategy
from .base import Criticality, Task, judge

logger = structlog.get_logger()

DEFAULT_MAINTENANCE_DIRECTORY = Path(__file__).resolve().parent.parent / "resources" / "maintenance"


class MaintenanceModeTask(Task):
    """Serves a maintenance page from the stage link while a release is deployed.

    The maintenance page is uploaded while the workspace is prepared. When the
    difference between the pending and the current release matches the
    strategy, the stage link is pointed at the maintenance directory before
    the release is deployed.
    """

    def __init__(
        self,
        strategy: int = MATCH_MAJOR_DIFFERENCE,
        subdirectory: Optional[str] = None,
        source_directory: Optional[str] = None,
    ):
        """Initialize maintenance mode task.

        Args:
            strategy: Version categories (bitmask) that require maintenance mode
            subdirectory: Document root below the maintenance directory
            source_directory: Local maintenance page tree to upload

        Raises:
            ValueError: If strategy is not a valid strategy bitmask
        """
        self.strategy = validate_strategy(strategy)
        self.subdirectory = subdirectory.strip("/") if subdirectory else None
        self.local_maintenance_directory = Path(
            source_directory or DEFAULT_MAINTENANCE_DIRECTORY
        ).resolve()

    @classmethod
    def get_subscribed_events(cls):
        return {
            LifecycleEvent.PREPARE_WORKSPACE: ("on_prepare_workspace_upload_maintenance_page", 0),
            LifecycleEvent.PREPARE_DEPLOY_RELEASE: (
                "on_prepare_deploy_release_link_maintenance_page_to_stage",
                0,
            ),
        }

    def on_prepare_workspace_upload_maintenance_page(self, event, event_name, dispatcher):
        """Upload the maintenance page into the workspace.

        A maintenance directory that cannot be created skips the upload
        without failing the deployment.
        """
        with self.phase(dispatcher, event_name, "Uploading maintenance page") as phase:
            host = event.workspace.host
            connection = self.ensure_connection(host)

            remote_directory = maintenance_path(host.path, self.subdirectory)
            if not connection.is_directory(remote_directory):
                created = connection.create_directory(remote_directory)
                if created:
                    self.log(
                        dispatcher,
                        event_name,
                        LogLevel.INFO,
                        f'Created maintenance directory "{remote_directory}".',
                        path=remote_directory,
                    )
            else:
                self.log(
                    dispatcher,
                    event_name,
                    LogLevel.INFO,
                    f'Maintenance directory "{remote_directory}" exists.',
                    path=remote_directory,
                )

            outcome = judge(
                connection.is_directory(remote_directory),
                Criticality.SOFT,
                f'Maintenance directory "{remote_directory}" could not be created.',
            )
            if outcome.failed:
                phase.soft_fail(outcome.reason)
                return

            self._upload_directory(connection, remote_directory, dispatcher, event_name)

    def on_prepare_deploy_release_link_maintenance_page_to_stage(
        self, event, event_name, dispatcher
    ):
        """Point the stage link at the maintenance directory.

        Only runs when the version difference between the pending and the
        current release matches the strategy, or when nothing is deployed yet.

        Raises:
            TaskRuntimeError: If the stage link cannot be created
        """
        release = event.release
        current_release = event.current_release
        if current_release is not None:
            category = categorize(release.version, current_release.version)
            if not category & self.strategy:
                self.log(
                    dispatcher,
                    event_name,
                    LogLevel.INFO,
                    "Skipped linking maintenance page: the version difference "
                    "does not require maintenance mode.",
                    category=category.name,
                    version=release.version,
                    current_version=current_release.version,
                )
                return

        with self.phase(dispatcher, event_name, "Linking maintenance page to stage"):
            host = event.workspace.host
            connection = self.ensure_connection(host)

            stage_link = stage_path(host.path, host.stage)
            maintenance_directory = maintenance_path(host.path, self.subdirectory)

            if connection.is_link(stage_link):
                # a stale link that cannot be removed surfaces as a link failure below
                if not connection.delete(stage_link, False):
                    self.log(
                        dispatcher,
                        event_name,
                        LogLevel.WARNING,
                        f'Removing existing link "{stage_link}" failed.',
                        path=stage_link,
                    )

            judge(
                connection.link(maintenance_directory, stage_link),
                Criticality.HARD,
                f'Linking "{stage_link}" to maintenance page failed.',
            ).raise_for_failure(task=self)

    def _upload_directory(self, connection, remote_directory: str, dispatcher, event_name):
        """Recursively upload the local maintenance tree, preserving its structure."""
        remote_base = remote_directory.rstrip("/")

        for local_path in sorted(self.local_maintenance_directory.rglob("*")):
            relative = local_path.relative_to(self.local_maintenance_directory).as_posix()
            remote_path = f"{remote_base}/{relative}"

            if local_path.is_dir():
                if not connection.create_directory(remote_path):
                    logger.warning("maintenance.create_subdirectory_failed", path=remote_path)
                continue

            if connection.put_file(str(local_path), remote_path):
                self.log(
                    dispatcher,
                    event_name,
                    LogLevel.DEBUG,
                    f'Uploaded "{remote_path}".',
                    path=remote_path,
                )
            else:
                self.log(
                    dispatcher,
                    event_name,
                    LogLevel.WARNING,
                    f'Uploading "{remote_path}" failed.',
                    path=remote_path,
                )
