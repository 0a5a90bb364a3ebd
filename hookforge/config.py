import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import logfire
import yaml
from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

CONFIG_FILE_ENV = "HOOKFORGE_CONFIG_FILE"
DEFAULT_CONFIG_FILE = Path("config") / "config.yaml"


# =============================================================================
# Application Configuration
# =============================================================================


def config_file_path() -> Path:
    """Config file named by HOOKFORGE_CONFIG_FILE, or the default location."""
    return Path(os.environ.get(CONFIG_FILE_ENV) or DEFAULT_CONFIG_FILE)


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from the YAML file named by HOOKFORGE_CONFIG_FILE."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        path = config_file_path()
        if path.exists():
            return yaml.safe_load(path.read_text()) or {}
        return {}


def normalize_base_path(base_path: str) -> str:
    """Normalize a route prefix to "" or "/segment" with no trailing slash."""
    base_path = base_path.strip()
    if not base_path:
        return ""
    if not base_path.startswith("/"):
        base_path = "/" + base_path
    return base_path.rstrip("/")


class Server(BaseModel):
    """HTTP server configuration (nested in Config, uses env_nested_delimiter)."""

    name: str = "hookforge"
    version: str = "1.0.0"
    description: str = "Token-guarded webhooks that drop flag files"
    host: str = "127.0.0.1"
    port: int = 8080
    base_path: str = ""  # e.g. "/hooks" when proxied behind nginx
    admin_token: str = ""  # Empty = admin API refuses every request

    @field_validator("base_path")
    @classmethod
    def _normalize_base_path(cls, value: str) -> str:
        return normalize_base_path(value)


class HooksConfig(BaseModel):
    """Hook store and flag file locations."""

    storage_path: Path = Path("data") / "hooks.json"
    flags_dir: Path = Path("data") / "flags"


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file: str | None = None  # Log to this file instead of stderr
    max_size_mb: int = 100  # Rotate the log file at this size
    max_backups: int = 5  # Rotated files to keep


class Config(BaseSettings):
    server: Server = Server()
    hooks: HooksConfig = HooksConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = {
        "env_prefix": "HOOKFORGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows HOOKFORGE_SERVER__ADMIN_TOKEN override
        "extra": "ignore",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - HOOKFORGE_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def save_config(config: Config, path: Path) -> None:
    """Write the configuration to a YAML file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False))


def ensure_config_file(path: Path) -> Path:
    """Write a default configuration to `path` if nothing is there yet."""
    if not path.exists():
        save_config(Config(), path)
        logging.info("Wrote default configuration to %s", path)
    return path


# =============================================================================
# Logging
# =============================================================================


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so all module loggers
    pick up the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    handler: logging.Handler
    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.max_backups,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)


def configure_logfire(server: Server) -> None:
    """Configure logfire tracing. Data is only exported when a token is present."""
    logfire.configure(
        service_name=server.name,
        service_version=server.version,
        send_to_logfire="if-token-present",
        console=False,
    )
