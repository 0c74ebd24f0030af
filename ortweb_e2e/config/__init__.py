"""Configuration loading for ortweb-e2e."""

from .parser import (
    DEFAULT_BROWSER,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_SERVER_PORT,
    E2EConfig,
    ServerConfig,
    WorkspaceConfig,
    load_config,
    parse_config,
)

__all__ = [
    "DEFAULT_BROWSER",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_SERVER_PORT",
    "E2EConfig",
    "ServerConfig",
    "WorkspaceConfig",
    "load_config",
    "parse_config",
]
