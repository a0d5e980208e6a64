"""
Configuration settings with environment variable loading.

Values come from the process environment, optionally seeded from a .env
file. Environment variables always win over the file.
"""

import os
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_URL = (
    "https://api.github.com/repos/moishe1/updaterbasic2/contents/whitelist.json?ref=main"
)
DEFAULT_TIMEOUT_SECONDS = 30.0


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class RemoteConfig:
    """Remote whitelist source configuration."""
    source_url: str = DEFAULT_SOURCE_URL
    connect_timeout: float = DEFAULT_TIMEOUT_SECONDS
    read_timeout: float = DEFAULT_TIMEOUT_SECONDS
    enabled_by_default: bool = True

    def __post_init__(self):
        if not self.source_url:
            raise ConfigurationError("WHITELIST_SOURCE_URL is required")
        if not self.source_url.startswith(("https://", "http://")):
            raise ConfigurationError("WHITELIST_SOURCE_URL must be an http(s) URL")
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise ConfigurationError("Whitelist timeouts must be positive")


@dataclass(frozen=True)
class StorageConfig:
    """Persistent storage configuration."""
    database_path: Path = field(default_factory=lambda: Path("data/whitelist_state.db"))

    def __post_init__(self):
        object.__setattr__(self, 'database_path', Path(self.database_path))


@dataclass(frozen=True)
class Settings:
    """
    Application settings container.

    All configuration is loaded from environment variables.
    """
    remote: RemoteConfig
    storage: StorageConfig
    log_level: str = "INFO"

    def __repr__(self) -> str:
        return (
            f"Settings(\n"
            f"  remote={self.remote},\n"
            f"  storage={self.storage},\n"
            f"  log_level='{self.log_level}'\n"
            f")"
        )


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from environment variables.

    Optionally loads from a .env file first.

    Args:
        env_file: Optional path to .env file

    Returns:
        Configured Settings instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if env_file and env_file.exists():
        _load_env_file(env_file)
    elif Path(".env").exists():
        _load_env_file(Path(".env"))

    try:
        remote = RemoteConfig(
            source_url=os.getenv("WHITELIST_SOURCE_URL", DEFAULT_SOURCE_URL).strip(),
            connect_timeout=float(os.getenv("WHITELIST_CONNECT_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))),
            read_timeout=float(os.getenv("WHITELIST_READ_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))),
            enabled_by_default=os.getenv("WHITELIST_ENABLED_DEFAULT", "true").lower() == "true",
        )

        storage = StorageConfig(
            database_path=Path(os.getenv("STORAGE_DATABASE_PATH", "data/whitelist_state.db")),
        )

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        settings = Settings(
            remote=remote,
            storage=storage,
            log_level=log_level,
        )

        logger.info("Configuration loaded successfully")
        logger.debug(f"Settings: {settings}")

        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Failed to load configuration: {e}") from e


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for applications embedding the synchronizer.

    Args:
        level: Log level name, e.g. "DEBUG"
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Reduce noise from external libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def _load_env_file(path: Path) -> None:
    """
    Load environment variables from a file.

    Simple .env parser that handles:
    - KEY=value
    - KEY="quoted value"
    - # comments
    - Empty lines
    """
    logger.debug(f"Loading environment from {path}")

    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                logger.warning(f"Invalid line {line_num} in {path}: no '=' found")
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if value.startswith('"') and value.endswith('"'):
                value = value[1:-1]
            elif value.startswith("'") and value.endswith("'"):
                value = value[1:-1]

            # Env vars take precedence
            if key not in os.environ:
                os.environ[key] = value
