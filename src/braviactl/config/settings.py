"""Configuration management for braviactl.

Loads settings from a YAML configuration file with environment variable
overrides for sensitive values (the pre-shared key). Supports .env files.
The file is only ever read; braviactl never writes configuration back.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

from braviactl.commands.resolver import DEFAULT_DIRECT_COMMANDS, DIRECT_OPERATIONS
from braviactl.discovery.ssdp import SCALAR_WEB_API_SERVICE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/braviactl.yaml")


class DeviceConfig(BaseModel):
    host: str | None = Field(default=None, description="TV IPv4 address")
    timeout: float = Field(default=5.0, gt=0, description="Per-request timeout in seconds")


class DiscoveryConfig(BaseModel):
    timeout: int = Field(default=3, ge=1, description="Search window in seconds, also sent as MX")
    search_target: str = Field(default=SCALAR_WEB_API_SERVICE)


class CommandsConfig(BaseModel):
    direct_commands: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DIRECT_COMMANDS),
        description="Operations callable as name(args) in a command batch",
    )

    @field_validator("direct_commands")
    @classmethod
    def _known_operations(cls, value: list[str]) -> list[str]:
        unknown = [name for name in value if name not in DIRECT_OPERATIONS]
        if unknown:
            raise ValueError(f"Unknown direct command(s): {', '.join(unknown)}")
        return value


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for braviactl.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "BRAVIACTL_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    psk: SecretStr = Field(default=SecretStr(""))

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    commands: CommandsConfig = Field(default_factory=CommandsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: BRAVIA_HOST/BRAVIA_PSK > YAML file > prefixed env vars > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply the short, non-prefixed BRAVIA_* variables."""
    host = os.environ.get("BRAVIA_HOST", "")
    psk = os.environ.get("BRAVIA_PSK", "")

    if psk:
        yaml_data["psk"] = psk

    if host:
        yaml_data.setdefault("device", {})
        yaml_data["device"]["host"] = host
