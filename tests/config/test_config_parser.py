"""
Tests for ortweb-e2e.yaml parsing.
"""

import pytest

from ortweb_e2e.config.parser import (
    DEFAULT_BROWSER,
    DEFAULT_SERVER_PORT,
    E2EConfig,
    load_config,
    parse_config,
)
from ortweb_e2e.core.exceptions import ConfigurationError


def write_config(tmp_path, content: str):
    config_file = tmp_path / "ortweb-e2e.yaml"
    config_file.write_text(content)
    return config_file


class TestParseConfig:
    """Test parse_config."""

    def test_full_config(self, tmp_path):
        config_file = write_config(
            tmp_path,
            """version: 1
workspace:
  run_folder: ../out/e2e
  npm_cache_folder: ../out/cache
browser: ChromeHeadless
server:
  port: 9090
lock_timeout: 2.5
""",
        )

        config = parse_config(config_file)

        assert config.version == 1
        assert config.workspace.run_folder == "../out/e2e"
        assert config.workspace.npm_cache_folder == "../out/cache"
        assert config.workspace.template_dir is None
        assert config.browser == "ChromeHeadless"
        assert config.server.port == 9090
        assert config.lock_timeout == 2.5

    def test_minimal_config_uses_defaults(self, tmp_path):
        config = parse_config(write_config(tmp_path, "version: 1\n"))

        assert config.browser == DEFAULT_BROWSER
        assert config.server.port == DEFAULT_SERVER_PORT
        assert config.lock_timeout == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            parse_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="empty"):
            parse_config(write_config(tmp_path, ""))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            parse_config(write_config(tmp_path, "version: [1\n"))

    def test_unsupported_version(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Unsupported version"):
            parse_config(write_config(tmp_path, "version: 2\n"))

    def test_unknown_workspace_key(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Unknown workspace keys: cache"):
            parse_config(write_config(tmp_path, "workspace:\n  cache: x\n"))

    @pytest.mark.parametrize("port", ["0", "70000", "true", "'8081'"])
    def test_invalid_port(self, tmp_path, port):
        with pytest.raises(ConfigurationError, match="Invalid server port"):
            parse_config(write_config(tmp_path, f"server:\n  port: {port}\n"))

    def test_negative_lock_timeout(self, tmp_path):
        with pytest.raises(ConfigurationError, match="negative"):
            parse_config(write_config(tmp_path, "lock_timeout: -1\n"))


class TestLoadConfig:
    """Test load_config lookup rules."""

    def test_defaults_without_file(self, tmp_path):
        assert load_config(tmp_path) == E2EConfig()

    def test_default_file_in_js_root(self, tmp_path):
        write_config(tmp_path, "browser: Firefox\n")

        assert load_config(tmp_path).browser == "Firefox"

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(tmp_path, tmp_path / "custom.yaml")
