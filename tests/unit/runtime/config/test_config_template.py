"""Unit tests for config_template module."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from userstore.runtime.config.config_data import ConfigData
from userstore.runtime.config.config_template import (
    load_config,
    load_templated_yaml,
    substitute_env_vars,
)


class TestSubstituteEnvVars:
    """Test cases for substitute_env_vars function."""

    def test_substitute_simple_env_var(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert substitute_env_vars("${TEST_VAR}") == "test_value"

    def test_substitute_env_var_in_text(self):
        with patch.dict(os.environ, {"DB_HOST": "localhost", "DB_PORT": "5432"}):
            text = "postgresql://${DB_HOST}:${DB_PORT}/users"
            assert substitute_env_vars(text) == "postgresql://localhost:5432/users"

    def test_substitute_env_var_with_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-default_value}") == "default_value"

    def test_substitute_env_var_with_default_when_set(self):
        with patch.dict(os.environ, {"PRESENT_VAR": "actual_value"}):
            assert substitute_env_vars("${PRESENT_VAR:-default_value}") == "actual_value"

    def test_substitute_env_var_with_empty_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-}") == ""

    def test_substitute_required_env_var_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(
                ValueError, match="Required environment variable MISSING_VAR not set"
            ):
                substitute_env_vars("${MISSING_VAR}")

    def test_substitute_env_var_with_custom_error(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(
                ValueError,
                match="Required environment variable MISSING_VAR: needed for the database",
            ):
                substitute_env_vars("${MISSING_VAR:?needed for the database}")

    def test_text_without_placeholders_unchanged(self):
        assert substitute_env_vars("sqlite:///./users.db") == "sqlite:///./users.db"


class TestLoadTemplatedYaml:
    """Test cases for load_templated_yaml and load_config."""

    def _write(self, tmp_path: Path, content: str) -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(content)
        return path

    def test_load_full_config(self, tmp_path: Path):
        path = self._write(
            tmp_path,
            """
config:
  app:
    environment: test
  logging:
    level: DEBUG
  database:
    url: ${TEST_DB_URL:-sqlite:///./fallback.db}
  users:
    case_sensitive_usernames: false
""",
        )

        with patch.dict(os.environ, {"TEST_DB_URL": "sqlite:///./from-env.db"}):
            config = load_templated_yaml(path)

        assert config.app.environment == "test"
        assert config.logging.level == "DEBUG"
        assert config.database.url == "sqlite:///./from-env.db"
        assert config.users.case_sensitive_usernames is False

    def test_missing_sections_use_defaults(self, tmp_path: Path):
        path = self._write(tmp_path, "config:\n  logging:\n    level: WARNING\n")

        config = load_templated_yaml(path)

        assert config.logging.level == "WARNING"
        assert config.database == ConfigData().database
        assert config.users.case_sensitive_usernames is True

    def test_environment_prefixed_override(self, tmp_path: Path):
        path = self._write(tmp_path, "config:\n  database:\n    url: ${OVERRIDE_DB_URL}\n")
        env = {
            "APP_ENVIRONMENT": "production",
            "PRODUCTION_OVERRIDE_DB_URL": "postgresql://app@db:5432/users",
        }

        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(path)

        assert config.database.url == "postgresql://app@db:5432/users"

    def test_invalid_configuration(self, tmp_path: Path):
        path = self._write(tmp_path, "config:\n  app:\n    environment: staging\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = self._write(tmp_path, "config: [unclosed\n")

        with pytest.raises(ValueError, match="Error parsing YAML"):
            load_templated_yaml(path)

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_templated_yaml(tmp_path / "absent.yaml")

    def test_load_config_falls_back_to_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "absent.yaml")

        assert config == ConfigData()


class TestShippedConfig:
    """The repository's own config.yaml loads without any environment set."""

    CONFIG_PATH = Path(__file__).resolve().parents[4] / "config.yaml"

    def test_shipped_config_loads_with_clean_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_config(self.CONFIG_PATH)

        assert self.CONFIG_PATH.exists()
        assert config.app.environment == "development"
        assert config.database.url == "sqlite:///./users.db"
        assert config.logging.file == ""
        assert config.users.case_sensitive_usernames is True
