"""Release activation task: points the stage link at the installed release."""

from ..deployment.workspace import release_path, stage_path
from ..events import LifecycleEvent, LogLevel
from .base import Criticality, Task, judge


class DeployReleaseTask(Task):
    """Activates the pending release by relinking the stage to its directory."""

    @classmethod
    def get_subscribed_events(cls):
        return {
            LifecycleEvent.DEPLOY_RELEASE: ("on_deploy_release_link_release_to_stage", 0),
        }

    def on_deploy_release_link_release_to_stage(self, event, event_name, dispatcher):
        """Replace the stage link with a link to the release directory.

        Raises:
            TaskRuntimeError: If the release is not installed or linking fails
        """
        release = event.release
        with self.phase(dispatcher, event_name, f"Activating release {release.version}"):
            host = event.workspace.host
            connection = self.ensure_connection(host)

            release_directory = release_path(host.path, release.version)
            stage_link = stage_path(host.path, host.stage)

            judge(
                connection.is_directory(release_directory),
                Criticality.HARD,
                f'Release directory "{release_directory}" does not exist.',
            ).raise_for_failure(task=self)

            if connection.is_link(stage_link) and not connection.delete(stage_link, False):
                self.log(
                    dispatcher,
                    event_name,
                    LogLevel.WARNING,
                    f'Removing existing link "{stage_link}" failed.',
                    path=stage_link,
                )

            judge(
                connection.link(release_directory, stage_link),
                Criticality.HARD,
                f'Linking "{stage_link}" to release "{release.version}" failed.',
            ).raise_for_failure(task=self)
