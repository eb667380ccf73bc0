import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TypedDict

from aperflow.constants import (
    DEFAULT_BACKEND,
    DEFAULT_DUE_DAYS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STORAGE_DIR,
    LOG_LEVELS,
    SUPPORTED_BACKENDS,
    get_backend,
    get_due_days,
    get_export_dir,
    get_log_level,
    get_storage_dir,
)
from aperflow.exceptions import ConfigValidationError
from aperflow.hooks import HookRegistry, YamlExportHook
from aperflow.store import MemoryBackend, RecordStore, StorageBackend, YamlFileBackend


class AperConfigDict(TypedDict, total=False):
    """TypedDict for configuration dictionaries"""
    storage_dir: str
    backend: str
    due_days: int
    export_dir: str | None
    log_level: str


@dataclass(frozen=True)
class AperConfig:
    """Configuration for the APERFlow record store and CLI"""

    storage_dir: Path
    backend: str = DEFAULT_BACKEND
    due_days: int = DEFAULT_DUE_DAYS
    export_dir: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.backend not in SUPPORTED_BACKENDS:
            raise ConfigValidationError(
                f"Unsupported backend '{self.backend}'. Expected one of: {', '.join(SUPPORTED_BACKENDS)}",
                config_key="backend",
            )
        if self.due_days < 0:
            raise ConfigValidationError("due_days must be non-negative", config_key="due_days")
        if self.log_level not in LOG_LEVELS:
            raise ConfigValidationError(f"Invalid log_level: {self.log_level}", config_key="log_level")

    @classmethod
    def from_env(cls) -> 'AperConfig':
        """Create configuration from environment variables"""
        export_dir = get_export_dir()
        return cls(
            storage_dir=Path(get_storage_dir()).expanduser().resolve(),
            backend=get_backend(),
            due_days=get_due_days(),
            export_dir=Path(export_dir).expanduser().resolve() if export_dir else None,
            log_level=get_log_level(),
        )

    @classmethod
    def from_dict(cls, config_dict: AperConfigDict) -> 'AperConfig':
        """Create configuration from typed dictionary"""
        export_dir = config_dict.get('export_dir')
        due_days = config_dict.get('due_days', DEFAULT_DUE_DAYS)
        try:
            due_days = int(due_days)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"Invalid due_days: {due_days}", config_key="due_days") from e

        return cls(
            storage_dir=Path(config_dict.get('storage_dir', DEFAULT_STORAGE_DIR)).expanduser().resolve(),
            backend=str(config_dict.get('backend', DEFAULT_BACKEND)).lower(),
            due_days=due_days,
            export_dir=Path(export_dir).expanduser().resolve() if export_dir else None,
            log_level=str(config_dict.get('log_level', DEFAULT_LOG_LEVEL)).upper(),
        )

    def to_dict(self) -> AperConfigDict:
        return {
            'storage_dir': str(self.storage_dir),
            'backend': self.backend,
            'due_days': self.due_days,
            'export_dir': str(self.export_dir) if self.export_dir else None,
            'log_level': self.log_level,
        }

    def build_backend(self) -> StorageBackend:
        if self.backend == "memory":
            return MemoryBackend()
        return YamlFileBackend(self.storage_dir)

    def build_store(self) -> RecordStore:
        """Create a RecordStore wired to this configuration's backend and hooks"""
        hooks = HookRegistry()
        if self.export_dir is not None:
            YamlExportHook(self.export_dir).register(hooks)
        return RecordStore(backend=self.build_backend(), hooks=hooks, default_due_days=self.due_days)

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
