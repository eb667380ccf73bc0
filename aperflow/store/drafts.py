"""Draft cache: stage-scoped scratch storage for in-progress sections."""

import logging
from typing import Any

from aperflow.models import DraftEntry, DraftKey, Stage, utcnow

from .backends import DRAFTS_NAMESPACE, MemoryBackend, StorageBackend

logger = logging.getLogger(__name__)


class DraftCache:
    """
    Per-(record, stage) draft payloads.

    - Saving overwrites any prior draft for the exact key (last write wins)
    - Each stage is its own namespace: a reporting officer's draft is never
      read while the countersigning officer works on the same record
    - Payloads are copied on save and load
    """

    def __init__(self, backend: StorageBackend | None = None):
        self._backend = backend if backend is not None else MemoryBackend()

    def save_draft(self, record_id: str, stage: Stage, payload: dict[str, Any]) -> DraftEntry:
        if not isinstance(payload, dict):
            raise TypeError(f"Draft payload must be a mapping, got {type(payload).__name__}")
        entry = DraftEntry(key=DraftKey(record_id, Stage(stage)), payload=dict(payload), modified_at=utcnow())
        self._backend.put(DRAFTS_NAMESPACE, entry.key.storage_key, entry.to_dict())
        logger.debug(f"Saved draft for record '{record_id}' at stage '{entry.key.stage}'")
        return entry

    def load_entry(self, record_id: str, stage: Stage) -> DraftEntry | None:
        key = DraftKey(record_id, Stage(stage))
        document = self._backend.get(DRAFTS_NAMESPACE, key.storage_key)
        if document is None:
            return None
        return DraftEntry.from_dict(document)

    def load_draft(self, record_id: str, stage: Stage) -> dict[str, Any] | None:
        entry = self.load_entry(record_id, stage)
        return entry.payload if entry is not None else None

    def clear_draft(self, record_id: str, stage: Stage) -> bool:
        key = DraftKey(record_id, Stage(stage))
        removed = self._backend.delete(DRAFTS_NAMESPACE, key.storage_key)
        if removed:
            logger.debug(f"Cleared draft for record '{record_id}' at stage '{key.stage}'")
        return removed

    def clear_record(self, record_id: str) -> int:
        """Remove every draft belonging to ``record_id``. Returns the count removed."""
        return sum(1 for stage in Stage if self.clear_draft(record_id, stage))
