"""Unit tests for configuration loading and validation."""

from pathlib import Path

import pytest

from aperflow import AperConfig, ConfigValidationError, MemoryBackend, YamlFileBackend
from aperflow.constants import (
    DEFAULT_BACKEND,
    DEFAULT_DUE_DAYS,
    DEFAULT_LOG_LEVEL,
    ENV_BACKEND,
    ENV_DUE_DAYS,
    ENV_EXPORT_DIR,
    ENV_LOG_LEVEL,
    ENV_STORAGE_DIR,
    ENVIRONMENT_VARIABLE_DOCS,
)
from aperflow.hooks import HookEvent


@pytest.fixture
def clean_env(monkeypatch):
    for name in (ENV_STORAGE_DIR, ENV_BACKEND, ENV_DUE_DAYS, ENV_EXPORT_DIR, ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFromEnv:
    """Test suite for AperConfig.from_env."""

    def test_defaults(self, clean_env):
        """Verify defaults apply when no environment variable is set."""
        # Act
        config = AperConfig.from_env()

        # Assert
        assert config.backend == DEFAULT_BACKEND
        assert config.due_days == DEFAULT_DUE_DAYS
        assert config.log_level == DEFAULT_LOG_LEVEL
        assert config.export_dir is None
        assert config.storage_dir.is_absolute()

    def test_environment_overrides(self, clean_env, tmp_path):
        """Verify every setting can be given through the environment."""
        # Arrange
        clean_env.setenv(ENV_STORAGE_DIR, str(tmp_path / "store"))
        clean_env.setenv(ENV_BACKEND, "MEMORY")
        clean_env.setenv(ENV_DUE_DAYS, "14")
        clean_env.setenv(ENV_EXPORT_DIR, str(tmp_path / "exports"))
        clean_env.setenv(ENV_LOG_LEVEL, "debug")

        # Act
        config = AperConfig.from_env()

        # Assert
        assert config.storage_dir == (tmp_path / "store").resolve()
        assert config.backend == "memory"
        assert config.due_days == 14
        assert config.export_dir == (tmp_path / "exports").resolve()
        assert config.log_level == "DEBUG"

    def test_non_numeric_due_days_falls_back_to_default(self, clean_env):
        clean_env.setenv(ENV_DUE_DAYS, "soon")
        assert AperConfig.from_env().due_days == DEFAULT_DUE_DAYS

    def test_unsupported_backend_raises(self, clean_env):
        """Verify an unknown backend is reported with its config key."""
        clean_env.setenv(ENV_BACKEND, "postgres")
        with pytest.raises(ConfigValidationError) as exc_info:
            AperConfig.from_env()
        assert exc_info.value.config_key == "backend"

    def test_environment_variables_are_documented(self):
        for name in (ENV_STORAGE_DIR, ENV_BACKEND, ENV_DUE_DAYS, ENV_EXPORT_DIR, ENV_LOG_LEVEL):
            assert name in ENVIRONMENT_VARIABLE_DOCS


class TestValidation:
    """Test suite for AperConfig validation and dict conversion."""

    def test_negative_due_days_raises(self, tmp_path):
        with pytest.raises(ConfigValidationError, match="due_days"):
            AperConfig(storage_dir=tmp_path, due_days=-1)

    def test_invalid_log_level_raises(self, tmp_path):
        with pytest.raises(ConfigValidationError) as exc_info:
            AperConfig(storage_dir=tmp_path, log_level="LOUD")
        assert exc_info.value.config_key == "log_level"

    def test_from_dict_round_trip(self, tmp_path):
        """Verify from_dict and to_dict agree."""
        # Arrange
        data = {
            "storage_dir": str(tmp_path),
            "backend": "memory",
            "due_days": "7",
            "export_dir": None,
            "log_level": "info",
        }

        # Act
        config = AperConfig.from_dict(data)

        # Assert
        assert config.due_days == 7
        assert config.log_level == "INFO"
        assert AperConfig.from_dict(config.to_dict()) == config

    def test_from_dict_invalid_due_days(self, tmp_path):
        with pytest.raises(ConfigValidationError):
            AperConfig.from_dict({"storage_dir": str(tmp_path), "due_days": "soon"})


class TestBuild:
    """Test suite for building stores from configuration."""

    def test_memory_backend(self, tmp_path):
        assert isinstance(AperConfig(storage_dir=tmp_path, backend="memory").build_backend(), MemoryBackend)

    def test_yaml_backend(self, tmp_path):
        backend = AperConfig(storage_dir=tmp_path / "data").build_backend()
        assert isinstance(backend, YamlFileBackend)
        assert backend.root == tmp_path / "data"

    def test_store_uses_configured_due_days(self, tmp_path):
        store = AperConfig(storage_dir=tmp_path, backend="memory", due_days=10).build_store()
        assert store.default_due_days == 10

    def test_export_dir_registers_export_hook(self, tmp_path):
        """Verify an export directory wires the YAML export hook."""
        # Act
        store = AperConfig(storage_dir=tmp_path, backend="memory", export_dir=Path(tmp_path / "out")).build_store()

        # Assert
        assert [h.name for h in store.hooks.hooks_for(HookEvent.ADVANCED)] == ["yaml_export"]

    def test_no_export_dir_registers_nothing(self, tmp_path):
        store = AperConfig(storage_dir=tmp_path, backend="memory").build_store()
        assert store.hooks.hooks_for(HookEvent.ADVANCED) == []
