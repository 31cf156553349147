"""Main entry point for Deckhand."""

import sys

import click

from .config import DeckhandSettings
from .configuration import Configuration
from .deployer import Deployer
from .deployment import Stage
from .exceptions import ConfigurationError
from .tasks import MaintenanceModeTask
from .utils.logging import setup_logging


@click.group()
def main():
    """Deploy releases to the hosts of a stage."""


@main.command()
@click.argument("version")
@click.argument("stage", type=click.Choice([stage.value for stage in Stage]))
@click.option("-c", "--config", "config_file", default=None, help="Deployment configuration file")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
def deploy(version, stage, config_file, log_level):
    """Deploy VERSION to every host of STAGE."""
    settings = DeckhandSettings()
    setup_logging(log_level or settings.log_level, json_format=settings.log_json)

    configuration = Configuration(
        connection_defaults={"ssh": {"timeout": settings.ssh_timeout}}
    )
    subscriber_defaults = {}
    if settings.maintenance_source_directory:
        subscriber_defaults[MaintenanceModeTask] = {
            "source_directory": settings.maintenance_source_directory
        }

    try:
        configuration.load(config_file or settings.config_file)
        deployer = Deployer.from_configuration(configuration, subscriber_defaults)
        results = deployer.deploy(version, stage)
    except (ConfigurationError, ValueError) as e:
        click.echo(f"Deployment failed: {e}", err=True)
        sys.exit(1)

    for result in results:
        line = f"{result.hostname} ({result.stage}): {result.status}"
        if result.error:
            line += f" - {result.error}"
        click.echo(line)

    if not results:
        click.echo(f"No hosts configured for stage '{stage}'.")
    if any(not result.succeeded for result in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
