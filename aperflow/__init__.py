"""
APERFlow: lifecycle engine for annual performance evaluation reports.

An evaluation record moves through three roles, each owning one section of
the same document: Employee, Reporting Officer, Countersigning Officer. A
single stage gate decides which role may act on a record in which stage; the
record store applies the decisions atomically.

Core Components:
    - StageGate: Authorization and completeness checks for every action
    - RecordStore: Canonical records and their gated mutations
    - DraftCache: Stage-scoped work-in-progress payloads
    - SectionComposer: Read-only view of the sections a role may see
    - StatusProjector: Display status with the overdue overlay

Example Usage:
    ```python
    from aperflow import RecordStore, Role

    store = RecordStore()
    record_id = store.create(employee_name="Sarah Johnson")
    store.save_draft(record_id, Role.EMPLOYEE, {"fullName": "Sarah Johnson"})
    result = store.commit_section(
        record_id,
        Role.EMPLOYEE,
        {"fullName": "Sarah Johnson", "employeeId": "EMP001", "department": "Engineering"},
    )
    print(result.record.stage)  # submitted_by_employee
    ```
"""

__version__ = "0.1.0"

from .composer import FieldGroup, ReadOnlyView, SectionComposer, SectionView
from .config import AperConfig
from .exceptions import (
    AccessDeniedError,
    AperFlowError,
    ConfigValidationError,
    InvalidStorageKeyError,
    RecordNotFoundError,
    StorageUnavailableError,
)
from .gate import Allowed, Decision, Denied, Gate, GateResult, StageGate
from .hooks import HookEvent, HookRegistry, YamlExportHook
from .lock import Lock, LockResult, LockType
from .models import (
    Action,
    Actor,
    DenialReason,
    DisplayStatus,
    DraftEntry,
    DraftKey,
    EvaluationRecord,
    Role,
    Section,
    Stage,
)
from .status import DashboardStats, StatusProjector
from .store import (
    CommitResult,
    DraftCache,
    MemoryBackend,
    RecordStore,
    StorageBackend,
    YamlFileBackend,
)

__all__ = [
    # Core functionality
    "StageGate",
    "RecordStore",
    "DraftCache",
    "SectionComposer",
    "StatusProjector",
    "AperConfig",
    "__version__",
    # Data types and results
    "Action",
    "Actor",
    "Allowed",
    "CommitResult",
    "DashboardStats",
    "Decision",
    "DenialReason",
    "Denied",
    "DisplayStatus",
    "DraftEntry",
    "DraftKey",
    "EvaluationRecord",
    "FieldGroup",
    "Gate",
    "GateResult",
    "Lock",
    "LockResult",
    "LockType",
    "ReadOnlyView",
    "Role",
    "Section",
    "SectionView",
    "Stage",
    # Storage and hooks
    "HookEvent",
    "HookRegistry",
    "MemoryBackend",
    "StorageBackend",
    "YamlExportHook",
    "YamlFileBackend",
    # Errors
    "AccessDeniedError",
    "AperFlowError",
    "ConfigValidationError",
    "InvalidStorageKeyError",
    "RecordNotFoundError",
    "StorageUnavailableError",
]
