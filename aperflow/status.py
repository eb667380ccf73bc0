"""Status projection: derived, display-only status for list and dashboard views."""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from aperflow.models import (
    SECTION_MODELS,
    DisplayStatus,
    EvaluationRecord,
    Role,
    Section,
    Stage,
    as_utc,
    utcnow,
)

STAGE_STATUS: dict[Stage, DisplayStatus] = {
    Stage.DRAFT: DisplayStatus.DRAFT,
    Stage.SUBMITTED_BY_EMPLOYEE: DisplayStatus.PENDING_REVIEW,
    Stage.ASSESSED_BY_OFFICER: DisplayStatus.UNDER_REVIEW,
    Stage.COUNTERSIGNED: DisplayStatus.COMPLETED,
    Stage.REJECTED: DisplayStatus.REJECTED,
}


@dataclass(frozen=True)
class DashboardStats:
    """Counts shown on a role's dashboard."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    rejected: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class StatusProjector:
    """
    Maps a record to its DisplayStatus.

    The overdue overlay applies to every non-terminal stage once ``now`` is
    past ``due_at``. It changes only what is displayed; the stage is untouched.
    """

    def project(self, record: EvaluationRecord, now: datetime | None = None) -> DisplayStatus:
        now = as_utc(now) if now is not None else utcnow()
        if not record.stage.is_terminal and record.due_at is not None and now > record.due_at:
            return DisplayStatus.OVERDUE
        return STAGE_STATUS[record.stage]

    def completion(self, record: EvaluationRecord, draft: dict[str, Any] | None = None) -> int:
        """
        Percentage of the pipeline completed, for progress bars.

        Each committed section counts as a third; the section in progress
        contributes the share of its fields filled in ``draft``.
        """
        if record.stage == Stage.COUNTERSIGNED:
            return 100

        committed = sum(1 for section in Section if getattr(record, section.value) is not None)
        fraction = 0.0
        active = record.writable_section
        if active is not None and draft:
            fields = SECTION_MODELS[active].wire_fields()
            filled = sum(1 for name in fields if draft.get(name) not in (None, "", [], {}))
            fraction = filled / len(fields)

        return min(100, round((committed + fraction) / len(Section) * 100))

    def summarize(
        self,
        records: Iterable[EvaluationRecord],
        role: Role,
        now: datetime | None = None,
    ) -> DashboardStats:
        """Aggregate dashboard counts; ``pending`` counts records awaiting ``role``."""
        now = as_utc(now) if now is not None else utcnow()
        total = completed = pending = overdue = rejected = 0
        for record in records:
            total += 1
            status = self.project(record, now)
            if status == DisplayStatus.COMPLETED:
                completed += 1
            elif status == DisplayStatus.REJECTED:
                rejected += 1
            elif status == DisplayStatus.OVERDUE:
                overdue += 1
            if record.stage.owner == role:
                pending += 1
        return DashboardStats(
            total=total,
            completed=completed,
            pending=pending,
            overdue=overdue,
            rejected=rejected,
        )


_default_projector = StatusProjector()


def project(record: EvaluationRecord, now: datetime | None = None) -> DisplayStatus:
    """Module-level shortcut for ``StatusProjector().project``."""
    return _default_projector.project(record, now)
