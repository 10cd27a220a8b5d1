"""Configuration management for the Uptime Kuma MCP server."""

import os
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Union
from urllib.parse import urlparse

import tomli
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class KumaConfig(BaseModel):
    """Configuration for the Uptime Kuma Socket.IO connection."""

    url: Optional[str] = Field(None, description="Uptime Kuma base URL")
    username: Optional[str] = Field(None, description="Uptime Kuma username")
    password: Optional[str] = Field(None, description="Uptime Kuma password")
    api_key: Optional[str] = Field(None, description="Uptime Kuma API key / login token")
    request_timeout: float = Field(default=30.0, description="Acknowledgment timeout in seconds")
    connect_timeout: float = Field(default=10.0, description="Connection timeout in seconds")
    list_timeout: float = Field(default=10.0, description="Wait for the monitor list push in seconds")
    reconnection_attempts: int = Field(default=3, description="Transport reconnect attempts")
    reconnection_delay: float = Field(default=1.0, description="Delay between reconnect attempts")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate that url is an absolute http(s) URL."""
        if v is None or not v.strip():
            return None

        v = v.strip().rstrip('/')
        parsed = urlparse(v)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValueError(f"Invalid Uptime Kuma URL: {v}")

        return v

    @field_validator('username', 'password', 'api_key')
    @classmethod
    def empty_string_as_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v

    @field_validator('request_timeout', 'connect_timeout', 'list_timeout')
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        if v > 300:
            raise ValueError("timeouts should not exceed 300 seconds")
        return v

    def has_credentials(self) -> bool:
        """Whether a token or a complete username/password pair is configured."""
        return bool(self.api_key) or bool(self.username and self.password)


class AppConfig(BaseModel):
    """Main application configuration."""

    kuma: KumaConfig = Field(default_factory=KumaConfig)
    log_level: str = Field(default="INFO", description="Logging level")


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from a YAML, TOML or JSON file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger = logging.getLogger(__name__)
    suffix = config_path.suffix.lower()

    try:
        if suffix in ['.yaml', '.yml']:
            with open(config_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}

        elif suffix == '.toml':
            with open(config_path, 'rb') as f:
                return tomli.load(f)

        elif suffix == '.json':
            with open(config_path, 'r', encoding='utf-8') as f:
                return json.load(f) or {}

        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    except Exception as e:
        logger.error(f"Failed to load config file {config_path}: {e}")
        raise


def find_config_file() -> Optional[Path]:
    """Find configuration file in standard locations."""
    search_paths = [
        Path.cwd() / ".kuma-mcp.yaml",
        Path.cwd() / ".kuma-mcp.yml",
        Path.cwd() / ".kuma-mcp.toml",
        Path.cwd() / ".kuma-mcp.json",
        Path.home() / ".config" / "kuma-mcp" / "config.yaml",
        Path.home() / ".config" / "kuma-mcp" / "config.yml",
        Path.home() / ".config" / "kuma-mcp" / "config.toml",
        Path.home() / ".config" / "kuma-mcp" / "config.json",
    ]

    for config_path in search_paths:
        if config_path.exists():
            return config_path

    return None


def merge_config(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Merge configuration dictionaries with override taking precedence."""
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value

    return merged


def _remove_none_values(d: Any) -> Any:
    if isinstance(d, dict):
        return {k: _remove_none_values(v) for k, v in d.items() if v is not None}
    return d


def load_config(config_file: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load configuration from multiple sources with priority order.

    Priority (highest to lowest):
    1. Environment variables (a ``.env`` file in the working directory is
       loaded first and never overrides variables already set)
    2. Specified config file (if provided)
    3. Auto-discovered config file
    4. Default values

    A missing URL is not an error here: the server starts without a client
    and every tool call reports that the client is not initialized.
    """
    logger = logging.getLogger(__name__)

    config_data: Dict[str, Any] = {}

    if config_file:
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Specified config file not found: {config_path}")
        config_data = load_config_file(config_path)
        logger.info(f"Loaded configuration from: {config_path}")
    else:
        config_path = find_config_file()
        if config_path:
            config_data = load_config_file(config_path)
            logger.info(f"Auto-discovered configuration file: {config_path}")

    load_dotenv()

    env_config = _remove_none_values({
        "kuma": {
            "url": os.getenv("UPTIME_KUMA_URL"),
            "username": os.getenv("UPTIME_KUMA_USERNAME"),
            "password": os.getenv("UPTIME_KUMA_PASSWORD"),
            "api_key": os.getenv("UPTIME_KUMA_API_KEY"),
            "request_timeout": os.getenv("UPTIME_KUMA_REQUEST_TIMEOUT"),
        },
        "log_level": os.getenv("LOG_LEVEL"),
    })

    final_config = merge_config(config_data, env_config)

    return AppConfig(
        kuma=KumaConfig(**final_config.get("kuma", {})),
        log_level=final_config.get("log_level", "INFO"),
    )


def default_local_url() -> str:
    """URL of a local Uptime Kuma instance, honouring UPTIME_KUMA_PORT."""
    port = os.getenv("UPTIME_KUMA_PORT") or "3001"
    return f"http://localhost:{port}"
