"""
Storage backends for records and drafts.

The core only needs durable get/put semantics per namespace. Two backends
are provided:

- MemoryBackend: process-local dictionaries, used by tests and the
  ``memory`` configuration
- YamlFileBackend: one YAML document per key under a directory, written with
  ruamel.yaml the same way process files are kept on disk
"""

import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from copy import deepcopy
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from aperflow.exceptions import InvalidStorageKeyError, StorageUnavailableError

logger = logging.getLogger(__name__)

RECORDS_NAMESPACE = "records"
DRAFTS_NAMESPACE = "drafts"


class StorageBackend(ABC):
    """Key-value document storage, partitioned by namespace."""

    @abstractmethod
    def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        """Return a copy of the document stored under ``key``, or None."""

    @abstractmethod
    def put(self, namespace: str, key: str, document: dict[str, Any]) -> None:
        """Store ``document`` under ``key``, replacing any previous document."""

    @abstractmethod
    def delete(self, namespace: str, key: str) -> bool:
        """Delete the document under ``key``. Returns True if it existed."""

    @abstractmethod
    def keys(self, namespace: str) -> list[str]:
        """List the keys stored in ``namespace``, sorted."""


class MemoryBackend(StorageBackend):
    """In-process storage. Documents are deep-copied on the way in and out."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        with self._lock:
            document = self._data.get(namespace, {}).get(key)
            return deepcopy(document) if document is not None else None

    def put(self, namespace: str, key: str, document: dict[str, Any]) -> None:
        with self._lock:
            self._data.setdefault(namespace, {})[key] = deepcopy(document)

    def delete(self, namespace: str, key: str) -> bool:
        with self._lock:
            return self._data.get(namespace, {}).pop(key, None) is not None

    def keys(self, namespace: str) -> list[str]:
        with self._lock:
            return sorted(self._data.get(namespace, {}))


class YamlFileBackend(StorageBackend):
    """
    Directory-backed storage: ``<root>/<namespace>/<key>.yaml``.

    Writes go to a temporary file that is renamed into place, so a reader
    never sees a partially written document.
    """

    SUFFIX = ".yaml"

    def __init__(self, root: Path | str, create_dir_if_missing: bool = True):
        self.root = Path(root).expanduser()
        self._yaml = YAML(typ="safe", pure=True)
        self._yaml.default_flow_style = False
        self._yaml.indent(mapping=2, sequence=4, offset=2)
        if create_dir_if_missing:
            try:
                self.root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageUnavailableError(f"Cannot create storage directory {self.root}: {e}") from e

    def _path(self, namespace: str, key: str) -> Path:
        if not key or "/" in key or key.startswith("."):
            raise InvalidStorageKeyError(key)
        return self.root / namespace / f"{key}{self.SUFFIX}"

    def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        path = self._path(namespace, key)
        try:
            with path.open("r", encoding="utf-8") as f:
                document = self._yaml.load(f)
        except FileNotFoundError:
            return None
        except (OSError, YAMLError) as e:
            raise StorageUnavailableError(f"Failed to read {path}: {e}") from e
        return dict(document) if document is not None else None

    def put(self, namespace: str, key: str, document: dict[str, Any]) -> None:
        path = self._path(namespace, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=self.SUFFIX)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    self._yaml.dump(document, f)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, YAMLError) as e:
            raise StorageUnavailableError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {namespace}/{key}")

    def delete(self, namespace: str, key: str) -> bool:
        path = self._path(namespace, key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageUnavailableError(f"Failed to delete {path}: {e}") from e
        return True

    def keys(self, namespace: str) -> list[str]:
        directory = self.root / namespace
        if not directory.exists():
            return []
        try:
            return sorted(
                p.name[: -len(self.SUFFIX)]
                for p in directory.iterdir()
                if p.is_file() and p.name.endswith(self.SUFFIX) and not p.name.startswith(".")
            )
        except OSError as e:
            raise StorageUnavailableError(f"Failed to list {directory}: {e}") from e
