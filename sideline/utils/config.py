"""Runtime configuration and logging setup for the Sideline Manager."""
import logging
import os
from dataclasses import dataclass

from .constants import DEFAULT_DATA_FILE, DEFAULT_HOST, DEFAULT_LINEUPS_FILE, DEFAULT_PORT

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class AppConfig:
    """
    Settings for running the web server.

    Attributes:
        data_file: JSON document backing the file gateway
        lineups_file: JSON document holding saved planning lineups
        host: Address the web server binds to
        port: Port the web server listens on
        log_level: Name of the root logging level
    """
    data_file: str = DEFAULT_DATA_FILE
    lineups_file: str = DEFAULT_LINEUPS_FILE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build configuration from ``SIDELINE_*`` environment variables."""
        port_text = os.environ.get("SIDELINE_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_text)
        except ValueError:
            raise ValueError(f"SIDELINE_PORT must be an integer, got {port_text!r}")
        return cls(
            data_file=os.environ.get("SIDELINE_DATA_FILE", DEFAULT_DATA_FILE),
            lineups_file=os.environ.get("SIDELINE_LINEUPS_FILE", DEFAULT_LINEUPS_FILE),
            host=os.environ.get("SIDELINE_HOST", DEFAULT_HOST),
            port=port,
            log_level=os.environ.get("SIDELINE_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a basic stream handler on the root logger."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
