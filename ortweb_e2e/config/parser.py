"""YAML configuration parser for ortweb-e2e.

This module provides parsing and validation for ortweb-e2e.yaml configuration
files. Only the workspace locations, the browser name and the static server
port can be configured; the test command matrix is fixed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from ortweb_e2e.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "ortweb-e2e.yaml"
DEFAULT_BROWSER = "Chrome_default"
DEFAULT_SERVER_PORT = 8081


@dataclass
class WorkspaceConfig:
    """Workspace location overrides (relative paths resolve against the JS root)."""

    template_dir: Optional[str] = None
    run_folder: Optional[str] = None
    npm_cache_folder: Optional[str] = None
    user_data_folder: Optional[str] = None


@dataclass
class ServerConfig:
    """Static file server configuration."""

    port: int = DEFAULT_SERVER_PORT


@dataclass
class E2EConfig:
    """Complete ortweb-e2e configuration."""

    version: int = 1
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    browser: str = DEFAULT_BROWSER
    server: ServerConfig = field(default_factory=ServerConfig)
    lock_timeout: float = 0


def parse_config(config_path: Path) -> E2EConfig:
    """
    Parse ortweb-e2e.yaml configuration file.

    Args:
        config_path: Path to ortweb-e2e.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigurationError: If configuration is missing or invalid
    """
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigurationError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping")

    return _parse_and_validate(data)


def load_config(js_root: Path, config_path: Optional[Path] = None) -> E2EConfig:
    """
    Load configuration for a JS root.

    An explicit config_path must exist. Without one, ortweb-e2e.yaml in the JS
    root is used when present, otherwise defaults apply.
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default_path = Path(js_root) / DEFAULT_CONFIG_FILENAME
    if default_path.exists():
        logger.debug(f"Loading configuration from {default_path}")
        return parse_config(default_path)

    logger.debug(f"Config file not found (optional): {default_path}")
    return E2EConfig()


def _parse_and_validate(data: dict) -> E2EConfig:
    """Parse and validate configuration data."""
    version = data.get("version", 1)
    if version != 1:
        raise ConfigurationError(f"Unsupported version: {version} (expected 1)")

    browser = data.get("browser", DEFAULT_BROWSER)
    if not isinstance(browser, str) or not browser:
        raise ConfigurationError("browser must be a non-empty string")

    lock_timeout = data.get("lock_timeout", 0)
    if isinstance(lock_timeout, bool) or not isinstance(lock_timeout, (int, float)):
        raise ConfigurationError("lock_timeout must be a number of seconds")
    if lock_timeout < 0:
        raise ConfigurationError("lock_timeout cannot be negative")

    return E2EConfig(
        version=version,
        workspace=_parse_workspace(data.get("workspace") or {}),
        browser=browser,
        server=_parse_server(data.get("server") or {}),
        lock_timeout=lock_timeout,
    )


def _parse_workspace(data: dict) -> WorkspaceConfig:
    """Parse workspace configuration."""
    if not isinstance(data, dict):
        raise ConfigurationError("workspace must be a dictionary")

    known = ["template_dir", "run_folder", "npm_cache_folder", "user_data_folder"]
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigurationError(f"Unknown workspace keys: {', '.join(unknown)}")

    for key in known:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"workspace.{key} must be a path string")

    return WorkspaceConfig(**{key: data.get(key) for key in known})


def _parse_server(data: dict) -> ServerConfig:
    """Parse static server configuration."""
    if not isinstance(data, dict):
        raise ConfigurationError("server must be a dictionary")

    port = data.get("port", DEFAULT_SERVER_PORT)
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigurationError(f"Invalid server port: {port}")

    return ServerConfig(port=port)
