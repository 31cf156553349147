"""Runtime settings for Deckhand."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class DeckhandSettings(BaseSettings):
    """Settings from environment variables."""

    config_file: str = Field(
        default="deckhand.json",
        description="Path to the deployment configuration file"
    )

    # SSH connections
    ssh_timeout: float = Field(
        default=10,
        description="SSH connect timeout in seconds, unless set per host"
    )

    # Maintenance mode
    maintenance_source_directory: Optional[str] = Field(
        default=None,
        description="Local maintenance page tree (defaults to the bundled page)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON lines"
    )

    class Config:
        """Pydantic config."""
        env_prefix = "DECKHAND_"
        case_sensitive = False
