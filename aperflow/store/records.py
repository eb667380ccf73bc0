"""
Record store: the canonical set of evaluation records.

All mutations go through the stage gate and are applied as a single record
replacement under the store lock, so a reader sees either the old record or
the fully advanced one, never a mix.
"""

import logging
import threading
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any

from aperflow.constants import DEFAULT_DUE_DAYS
from aperflow.exceptions import (
    AccessDeniedError,
    InvalidStorageKeyError,
    RecordNotFoundError,
    StorageUnavailableError,
)
from aperflow.gate import Allowed, Decision, Denied, StageGate
from aperflow.hooks import HookEvent, HookRegistry
from aperflow.models import (
    Action,
    DisplayStatus,
    EvaluationRecord,
    Role,
    Section,
    Stage,
    as_utc,
    utcnow,
)
from aperflow.status import StatusProjector

from .backends import RECORDS_NAMESPACE, MemoryBackend, StorageBackend
from .drafts import DraftCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitResult:
    """Outcome of a gated mutation.

    ``record`` is the record after the operation: the updated record on
    success, the untouched current record on denial.
    """

    record: EvaluationRecord
    decision: Decision

    @property
    def success(self) -> bool:
        return self.decision.allowed

    @property
    def denied(self) -> Denied | None:
        return self.decision if isinstance(self.decision, Denied) else None

    def raise_if_denied(self) -> EvaluationRecord:
        """Return the record, or raise AccessDeniedError if the action was denied."""
        if isinstance(self.decision, Denied):
            raise AccessDeniedError(self.decision, context={"record_id": self.record.id})
        return self.record


class RecordStore:
    """
    Evaluation records plus their stage-gated mutations.

    Key capabilities:
    - create / get / list / delete records
    - commit a role's section and advance the stage atomically
    - reject and reopen
    - gated access to the draft cache for the role's own stage
    """

    def __init__(
        self,
        backend: StorageBackend | None = None,
        drafts: DraftCache | None = None,
        gate: StageGate | None = None,
        hooks: HookRegistry | None = None,
        projector: StatusProjector | None = None,
        default_due_days: int = DEFAULT_DUE_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._backend = backend if backend is not None else MemoryBackend()
        self.drafts = drafts if drafts is not None else DraftCache(self._backend)
        self.gate = gate if gate is not None else StageGate()
        self.hooks = hooks if hooks is not None else HookRegistry()
        self.projector = projector if projector is not None else StatusProjector()
        self.default_due_days = default_due_days
        self._clock = clock
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, record_id: str) -> EvaluationRecord | None:
        try:
            document = self._backend.get(RECORDS_NAMESPACE, record_id)
        except InvalidStorageKeyError:
            return None
        return EvaluationRecord.from_dict(document) if document is not None else None

    def require(self, record_id: str) -> EvaluationRecord:
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    def all(self) -> list[EvaluationRecord]:
        records = []
        for key in self._backend.keys(RECORDS_NAMESPACE):
            record = self.get(key)
            if record is not None:
                records.append(record)
        records.sort(key=lambda r: (r.created_at is None, r.created_at, r.id))
        return records

    def list(
        self,
        name_query: str = "",
        statuses: Iterable[DisplayStatus | str] | None = None,
        now: datetime | None = None,
    ) -> list[EvaluationRecord]:
        """
        List records matching a name query AND a set of display statuses.

        Args:
            name_query: Case-insensitive substring of the employee name; blank matches all
            statuses: Display statuses to keep; empty or None matches all
            now: Reference time for the overdue overlay

        Returns:
            Matching records, oldest first
        """
        wanted = {DisplayStatus(s) for s in statuses or ()}
        query = (name_query or "").strip().lower()
        now = as_utc(now) if now is not None else self._clock()

        matches = []
        for record in self.all():
            if query and not self._name_matches(record, query):
                continue
            if wanted and self.projector.project(record, now) not in wanted:
                continue
            matches.append(record)
        return matches

    @staticmethod
    def _name_matches(record: EvaluationRecord, query: str) -> bool:
        names = {record.employee_name, record.display_name}
        return any(query in name.lower() for name in names if name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, employee_name: str = "", due_at: datetime | None = None) -> str:
        """Create a record in DRAFT and return its id."""
        now = self._clock()
        record = EvaluationRecord(
            id=uuid.uuid4().hex,
            stage=Stage.DRAFT,
            employee_name=employee_name,
            created_at=now,
            updated_at=now,
            due_at=as_utc(due_at) if due_at is not None else now + timedelta(days=self.default_due_days),
        )
        with self._lock:
            self._put(record)
        logger.info(f"Created evaluation record '{record.id}' for '{employee_name}'")
        return record.id

    def delete(self, record_id: str) -> bool:
        with self._lock:
            try:
                removed = self._backend.delete(RECORDS_NAMESPACE, record_id)
            except InvalidStorageKeyError:
                return False
            if removed:
                self.drafts.clear_record(record_id)
        return removed

    def commit_section(self, record_id: str, role: Role, payload: dict[str, Any]) -> CommitResult:
        """
        Commit ``role``'s section and advance the record one stage.

        The stage is checked again under the lock, so a duplicate or stale
        submission is denied with ``wrong_stage`` and changes nothing.

        Raises:
            RecordNotFoundError: If the record does not exist
            StorageUnavailableError: If the backend fails before the commit lands
        """
        with self._lock:
            record = self.require(record_id)
            decision = self.gate.authorize(record, role, Action.ADVANCE, payload)
            if not isinstance(decision, Allowed):
                logger.info(
                    f"Commit by '{role}' on record '{record_id}' denied: {decision.reason}"
                )
                return CommitResult(record, decision)

            now = self._clock()
            prior_stage = record.stage
            next_stage = decision.next_stage
            updated = record.with_section(
                Section.for_role(role),
                decision.payload,
                stage=next_stage,
                submitted_at=now,
                updated_at=now,
                countersigned_at=now if next_stage == Stage.COUNTERSIGNED else record.countersigned_at,
            )
            self._put(updated)
            self._clear_draft_quietly(record_id, prior_stage)

        logger.info(f"Record '{record_id}' advanced from '{prior_stage}' to '{next_stage}' by '{role}'")
        self.hooks.fire(HookEvent.ADVANCED, updated)
        return CommitResult(updated, decision)

    def reject(self, record_id: str, role: Role) -> CommitResult:
        """Move the record to REJECTED. Countersigning officer only."""
        with self._lock:
            record = self.require(record_id)
            decision = self.gate.authorize(record, role, Action.REJECT)
            if not isinstance(decision, Allowed):
                logger.info(f"Reject by '{role}' on record '{record_id}' denied: {decision.reason}")
                return CommitResult(record, decision)

            now = self._clock()
            updated = replace(
                record,
                stage=Stage.REJECTED,
                rejected_at=now,
                rejection_count=record.rejection_count + 1,
                updated_at=now,
            )
            self._put(updated)
            for stage in Stage:
                self._clear_draft_quietly(record_id, stage)

        logger.info(f"Record '{record_id}' rejected by '{role}'")
        self.hooks.fire(HookEvent.REJECTED, updated)
        return CommitResult(updated, decision)

    def reopen(self, record_id: str, role: Role) -> CommitResult:
        """Reset a rejected record to DRAFT, clearing the officer and countersign sections."""
        with self._lock:
            record = self.require(record_id)
            decision = self.gate.authorize(record, role, Action.REOPEN)
            if not isinstance(decision, Allowed):
                logger.info(f"Reopen by '{role}' on record '{record_id}' denied: {decision.reason}")
                return CommitResult(record, decision)

            updated = replace(
                record,
                stage=Stage.DRAFT,
                officer_section=None,
                countersign_section=None,
                updated_at=self._clock(),
            )
            self._put(updated)

        logger.info(f"Record '{record_id}' reopened by '{role}'")
        self.hooks.fire(HookEvent.REOPENED, updated)
        return CommitResult(updated, decision)

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def save_draft(self, record_id: str, role: Role, payload: dict[str, Any]) -> Decision:
        """Save ``role``'s draft for the record's current stage, if the stage is the role's."""
        with self._lock:
            record = self.require(record_id)
            decision = self.gate.authorize(record, role, Action.SAVE_DRAFT)
            if isinstance(decision, Allowed):
                self.drafts.save_draft(record_id, record.stage, payload)
            return decision

    def load_draft(self, record_id: str, role: Role) -> dict[str, Any] | None:
        """Load ``role``'s draft; None when there is none or the stage is not the role's."""
        record = self.require(record_id)
        if not self.gate.authorize(record, role, Action.EDIT_OWN_SECTION).allowed:
            return None
        return self.drafts.load_draft(record_id, record.stage)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _put(self, record: EvaluationRecord) -> None:
        self._backend.put(RECORDS_NAMESPACE, record.id, dict(record.to_dict()))

    def _clear_draft_quietly(self, record_id: str, stage: Stage) -> None:
        # Draft cleanup never blocks a transition that already landed
        try:
            self.drafts.clear_draft(record_id, stage)
        except StorageUnavailableError as e:
            logger.warning(f"Could not clear draft for record '{record_id}' at stage '{stage}': {e}")
