"""
Storage layer for APERFlow.

- backends: key-value document storage (memory, YAML files)
- drafts: stage-scoped draft cache
- records: the gated record store
"""

from .backends import (
    DRAFTS_NAMESPACE,
    RECORDS_NAMESPACE,
    MemoryBackend,
    StorageBackend,
    YamlFileBackend,
)
from .drafts import DraftCache
from .records import CommitResult, RecordStore

__all__ = [
    "DRAFTS_NAMESPACE",
    "RECORDS_NAMESPACE",
    "CommitResult",
    "DraftCache",
    "MemoryBackend",
    "RecordStore",
    "StorageBackend",
    "YamlFileBackend",
]
