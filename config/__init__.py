"""
Configuration loading utilities for MegaGecko.

Static tables (target tokens, DEX programs) live as YAML next to this module.
Runtime settings come from the environment, with .env support.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from core.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_NETWORK,
    DEFAULT_REQUEST_DELAY_SECONDS,
    GECKO_TERMINAL_API,
)
from core.exceptions import ConfigError


CONFIG_DIR = Path(__file__).parent


def load_yaml(filename: str, config_dir: Path = CONFIG_DIR) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory
        config_dir: Directory to read from

    Returns:
        Parsed YAML as dict
    """
    filepath = config_dir / filename
    if not filepath.exists():
        raise ConfigError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file must contain a mapping: {filepath}",
            details={"type": type(data).__name__},
        )
    return data


def load_core_tokens(config_dir: Path = CONFIG_DIR) -> Dict[str, Any]:
    """Load target tokens table."""
    return load_yaml("core_tokens.yaml", config_dir)


def load_dexes(config_dir: Path = CONFIG_DIR) -> Dict[str, Any]:
    """Load DEX program table."""
    return load_yaml("dexes.yaml", config_dir)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for a fetch run."""
    api_base_url: str = GECKO_TERMINAL_API
    network: str = DEFAULT_NETWORK
    logs_dir: Path = Path("logs")
    request_delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    log_level: str = "INFO"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{name} must be >= 0, got {raw!r}")
    return value


def load_settings(env_file: str | None = None) -> Settings:
    """
    Build Settings from the environment.

    Environment variables:
        GECKO_API_BASE_URL: API base URL
        GECKO_NETWORK: Network identifier (default: solana)
        POOL_LOGS_DIR: Directory for run logs (default: logs)
        GECKO_REQUEST_DELAY_SECONDS: Pause between requests (default: 2)
        GECKO_HTTP_TIMEOUT_SECONDS: HTTP timeout (default: 10)
        LOG_LEVEL: Log level (default: INFO)
    """
    load_dotenv(env_file)

    return Settings(
        api_base_url=os.getenv("GECKO_API_BASE_URL", GECKO_TERMINAL_API).rstrip("/"),
        network=os.getenv("GECKO_NETWORK", DEFAULT_NETWORK),
        logs_dir=Path(os.getenv("POOL_LOGS_DIR", "logs")),
        request_delay_seconds=_env_float(
            "GECKO_REQUEST_DELAY_SECONDS", DEFAULT_REQUEST_DELAY_SECONDS
        ),
        http_timeout_seconds=_env_float(
            "GECKO_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS
        ),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
