"""Evaluation record, draft entry and actor models."""

from copy import deepcopy
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, TypedDict

from .enums import Role, Section, Stage


def utcnow() -> datetime:
    """Timezone-aware current time; every timestamp in the core is UTC."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through unchanged."""
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def _dump_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _load_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    return as_utc(parsed)


class EvaluationRecordDict(TypedDict):
    """Serialized form of an EvaluationRecord, as storage backends keep it."""

    id: str
    stage: str
    employee_name: str
    employee_section: dict[str, Any] | None
    officer_section: dict[str, Any] | None
    countersign_section: dict[str, Any] | None
    created_at: str | None
    updated_at: str | None
    submitted_at: str | None
    due_at: str | None
    rejected_at: str | None
    countersigned_at: str | None
    rejection_count: int


@dataclass(frozen=True)
class Actor:
    """Acting user as supplied by the identity provider."""

    name: str
    email: str
    role: Role


@dataclass(frozen=True)
class EvaluationRecord:
    """
    One annual performance evaluation moving through the pipeline.

    Records are never mutated in place: every state change produces a new
    record through ``dataclasses.replace`` so that a reader holding a record
    never observes a half-applied change.

    Attributes:
        id: Stable unique identifier
        stage: Current lifecycle stage
        employee_name: Name of the evaluated employee, from the identity provider
        employee_section: Committed employee payload, or None
        officer_section: Committed reporting officer payload, or None
        countersign_section: Committed countersign payload, or None
        submitted_at: Time of the most recent successful advance
        due_at: Deadline driving the overdue display overlay
        rejected_at: Time of the most recent rejection
        rejection_count: How many times the record has been rejected
    """

    id: str
    stage: Stage = Stage.DRAFT
    employee_name: str = ""
    employee_section: dict[str, Any] | None = None
    officer_section: dict[str, Any] | None = None
    countersign_section: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    submitted_at: datetime | None = None
    due_at: datetime | None = None
    rejected_at: datetime | None = None
    countersigned_at: datetime | None = None
    rejection_count: int = 0

    @property
    def writable_section(self) -> Section | None:
        """The single section writable in the current stage, if any."""
        owner = self.stage.owner
        return Section.for_role(owner) if owner is not None else None

    @property
    def was_rejected(self) -> bool:
        return self.rejection_count > 0

    @property
    def display_name(self) -> str:
        """Employee name from the committed section, falling back to the creator's name."""
        if self.employee_section and self.employee_section.get("fullName"):
            return str(self.employee_section["fullName"])
        return self.employee_name

    def section(self, section: Section) -> dict[str, Any] | None:
        """Return a copy of a committed section payload."""
        value = getattr(self, section.value)
        return deepcopy(value) if value is not None else None

    def with_section(self, section: Section, payload: dict[str, Any] | None, **changes: Any) -> "EvaluationRecord":
        """Return a new record with ``section`` replaced and other fields changed."""
        changes[section.value] = deepcopy(payload) if payload is not None else None
        return replace(self, **changes)

    def to_dict(self) -> EvaluationRecordDict:
        """Convert record to a YAML/JSON-serializable dictionary."""
        return {
            "id": self.id,
            "stage": self.stage.value,
            "employee_name": self.employee_name,
            "employee_section": deepcopy(self.employee_section),
            "officer_section": deepcopy(self.officer_section),
            "countersign_section": deepcopy(self.countersign_section),
            "created_at": _dump_time(self.created_at),
            "updated_at": _dump_time(self.updated_at),
            "submitted_at": _dump_time(self.submitted_at),
            "due_at": _dump_time(self.due_at),
            "rejected_at": _dump_time(self.rejected_at),
            "countersigned_at": _dump_time(self.countersigned_at),
            "rejection_count": self.rejection_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvaluationRecord":
        """Create a record from its serialized form."""
        return cls(
            id=str(data["id"]),
            stage=Stage(data.get("stage", Stage.DRAFT.value)),
            employee_name=data.get("employee_name") or "",
            employee_section=_load_section(data.get("employee_section")),
            officer_section=_load_section(data.get("officer_section")),
            countersign_section=_load_section(data.get("countersign_section")),
            created_at=_load_time(data.get("created_at")),
            updated_at=_load_time(data.get("updated_at")),
            submitted_at=_load_time(data.get("submitted_at")),
            due_at=_load_time(data.get("due_at")),
            rejected_at=_load_time(data.get("rejected_at")),
            countersigned_at=_load_time(data.get("countersigned_at")),
            rejection_count=int(data.get("rejection_count") or 0),
        )


def _load_section(value: Any) -> dict[str, Any] | None:
    return dict(value) if value is not None else None


@dataclass(frozen=True)
class DraftKey:
    """Composite key of a draft: one namespace per (record, stage)."""

    record_id: str
    stage: Stage

    @property
    def storage_key(self) -> str:
        return f"{self.record_id}.{self.stage.value}"


@dataclass(frozen=True)
class DraftEntry:
    """A partially-filled section payload plus its modification time."""

    key: DraftKey
    payload: dict[str, Any] = field(default_factory=dict)
    modified_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.key.record_id,
            "stage": self.key.stage.value,
            "payload": deepcopy(self.payload),
            "modified_at": _dump_time(self.modified_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DraftEntry":
        return cls(
            key=DraftKey(record_id=str(data["record_id"]), stage=Stage(data["stage"])),
            payload=dict(data.get("payload") or {}),
            modified_at=_load_time(data.get("modified_at")),
        )
