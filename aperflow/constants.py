"""Constants and default values for APERFlow configuration.

This module centralizes all configuration constants and environment variable
settings used by the record store and the CLI.
"""

import os
from typing import Final

# =============================================================================
# Environment Variable Names
# =============================================================================

ENV_VAR_PREFIX: Final[str] = "APERFLOW_"

ENV_STORAGE_DIR: Final[str] = f"{ENV_VAR_PREFIX}STORAGE_DIR"
ENV_BACKEND: Final[str] = f"{ENV_VAR_PREFIX}BACKEND"
ENV_DUE_DAYS: Final[str] = f"{ENV_VAR_PREFIX}DUE_DAYS"
ENV_EXPORT_DIR: Final[str] = f"{ENV_VAR_PREFIX}EXPORT_DIR"
ENV_LOG_LEVEL: Final[str] = f"{ENV_VAR_PREFIX}LOG_LEVEL"


# =============================================================================
# Default Configuration Values
# =============================================================================

DEFAULT_STORAGE_DIR: Final[str] = "~/.aperflow/"
DEFAULT_BACKEND: Final[str] = "yaml"
DEFAULT_DUE_DAYS: Final[int] = 30
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"

SUPPORTED_BACKENDS: Final[tuple[str, ...]] = ("yaml", "memory")
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# =============================================================================
# Helper Functions
# =============================================================================


def get_env_int(env_var: str, default: int) -> int:
    """
    Get integer value from environment variable.

    Args:
        env_var: Environment variable name
        default: Default value if not set

    Returns:
        Integer value from environment or default
    """
    try:
        return int(os.getenv(env_var, str(default)))
    except ValueError:
        return default


def get_env_str(env_var: str, default: str) -> str:
    return os.getenv(env_var, default)


def get_storage_dir() -> str:
    return get_env_str(ENV_STORAGE_DIR, DEFAULT_STORAGE_DIR)


def get_backend() -> str:
    return get_env_str(ENV_BACKEND, DEFAULT_BACKEND).lower()


def get_due_days() -> int:
    return get_env_int(ENV_DUE_DAYS, DEFAULT_DUE_DAYS)


def get_export_dir() -> str | None:
    return os.getenv(ENV_EXPORT_DIR) or None


def get_log_level() -> str:
    return get_env_str(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()


ENVIRONMENT_VARIABLE_DOCS = """
Environment Variables Reference:

  APERFLOW_STORAGE_DIR   - Directory holding records and drafts
                           Default: ~/.aperflow/
  APERFLOW_BACKEND       - Storage backend: yaml|memory
                           Default: yaml
  APERFLOW_DUE_DAYS      - Days from creation until an evaluation is due
                           Default: 30
  APERFLOW_EXPORT_DIR    - Archive countersigned records here (optional)
  APERFLOW_LOG_LEVEL     - DEBUG|INFO|WARNING|ERROR|CRITICAL
                           Default: WARNING
"""
