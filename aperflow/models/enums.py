"""
Enums for the APERFlow evaluation lifecycle.

This module defines every token the core exchanges with its callers so that
no magic strings travel through the codebase.

Note: This module must NOT import from any other aperflow module to keep the
models package at the bottom of the import hierarchy.

Usage:
    from aperflow.models.enums import Stage, Role, Action
"""

from enum import StrEnum

# ============================================================================
# Pipeline Enums
# ============================================================================


class Role(StrEnum):
    """Pipeline roles, in pipeline order.

    The role is self-asserted by the identity provider; the core trusts it.
    """

    EMPLOYEE = "employee"
    REPORTING_OFFICER = "reporting_officer"
    COUNTERSIGNING_OFFICER = "countersigning_officer"

    @property
    def position(self) -> int:
        """Ordinal rank of the role in the pipeline (Employee is 0)."""
        return list(Role).index(self)

    @property
    def section_stage(self) -> "Stage":
        """Stage during which this role's section is writable."""
        return _SECTION_STAGES[self]


class Stage(StrEnum):
    """Lifecycle stage of an evaluation record.

    - DRAFT: Employee section is writable
    - SUBMITTED_BY_EMPLOYEE: Reporting officer section is writable
    - ASSESSED_BY_OFFICER: Countersign section is writable
    - COUNTERSIGNED: Terminal, the record is immutable
    - REJECTED: Recoverable terminal, re-enters DRAFT only via reopen
    """

    DRAFT = "draft"
    SUBMITTED_BY_EMPLOYEE = "submitted_by_employee"
    ASSESSED_BY_OFFICER = "assessed_by_officer"
    COUNTERSIGNED = "countersigned"
    REJECTED = "rejected"

    @property
    def owner(self) -> Role | None:
        """Role whose section is writable in this stage, if any."""
        return _STAGE_OWNERS.get(self)

    @property
    def position(self) -> int:
        """Pipeline position used for view authorization.

        Terminal stages sit at position 0 so that every role may open a
        finished or rejected record.
        """
        owner = self.owner
        return owner.position if owner is not None else 0

    @property
    def is_terminal(self) -> bool:
        return self in (Stage.COUNTERSIGNED, Stage.REJECTED)

    @property
    def next_stage(self) -> "Stage | None":
        """Next stage in pipeline order, or None past the end of the pipeline."""
        try:
            index = PIPELINE.index(self)
        except ValueError:
            return None
        if index + 1 >= len(PIPELINE):
            return None
        return PIPELINE[index + 1]


PIPELINE: tuple[Stage, ...] = (
    Stage.DRAFT,
    Stage.SUBMITTED_BY_EMPLOYEE,
    Stage.ASSESSED_BY_OFFICER,
    Stage.COUNTERSIGNED,
)

_SECTION_STAGES: dict[Role, Stage] = {
    Role.EMPLOYEE: Stage.DRAFT,
    Role.REPORTING_OFFICER: Stage.SUBMITTED_BY_EMPLOYEE,
    Role.COUNTERSIGNING_OFFICER: Stage.ASSESSED_BY_OFFICER,
}

_STAGE_OWNERS: dict[Stage, Role] = {stage: role for role, stage in _SECTION_STAGES.items()}


# ============================================================================
# Authorization Enums
# ============================================================================


class Action(StrEnum):
    """Actions a role may attempt on a record."""

    VIEW = "view"
    EDIT_OWN_SECTION = "edit_own_section"
    SAVE_DRAFT = "save_draft"
    ADVANCE = "advance"
    REJECT = "reject"
    REOPEN = "reopen"


class DenialReason(StrEnum):
    """Reason tokens carried by a denied decision."""

    WRONG_STAGE = "wrong_stage"
    WRONG_ROLE = "wrong_role"
    INCOMPLETE_FIELDS = "incomplete_fields"


# ============================================================================
# Display Enums
# ============================================================================


class DisplayStatus(StrEnum):
    """Presentation-facing status labels.

    IN_PROGRESS belongs to the dashboard vocabulary and is accepted by list
    filters, but the projector never derives it.
    """

    DRAFT = "draft"
    IN_PROGRESS = "in-progress"
    PENDING_REVIEW = "pending-review"
    UNDER_REVIEW = "under-review"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    REJECTED = "rejected"


class Section(StrEnum):
    """Section names, keyed the way records store them."""

    EMPLOYEE = "employee_section"
    OFFICER = "officer_section"
    COUNTERSIGN = "countersign_section"

    @classmethod
    def for_role(cls, role: Role) -> "Section":
        return {
            Role.EMPLOYEE: cls.EMPLOYEE,
            Role.REPORTING_OFFICER: cls.OFFICER,
            Role.COUNTERSIGNING_OFFICER: cls.COUNTERSIGN,
        }[role]

    @property
    def owner(self) -> Role:
        return {
            Section.EMPLOYEE: Role.EMPLOYEE,
            Section.OFFICER: Role.REPORTING_OFFICER,
            Section.COUNTERSIGN: Role.COUNTERSIGNING_OFFICER,
        }[self]
