"""Stage gate: authorization and completeness logic for APERFlow.

Every action on a record goes through ``StageGate.authorize``, a pure
function of the record's stage, the acting role and (for ``advance``) the
submitted payload. It never mutates anything; the record store applies the
decision.
"""

from dataclasses import dataclass, field
from typing import Any, TypedDict

from aperflow.lock import Lock, LockDefinitionDict, LockFactory, LockResult
from aperflow.models import (
    Action,
    DenialReason,
    EvaluationRecord,
    Role,
    Section,
    Stage,
    validate_section,
)


class GateDefinition(TypedDict):
    name: str
    description: str
    role: str
    locks: list[LockDefinitionDict]


@dataclass(frozen=True)
class GateResult:
    """Result of a completeness gate evaluated against a payload."""

    success: bool
    success_rate: float = 0.0
    failed: list[LockResult] = field(default_factory=list)
    passed: list[LockResult] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        """Aggregate messages from all failed locks."""
        return [result.error_message for result in self.failed if result.error_message]

    @property
    def missing_fields(self) -> list[str]:
        return [result.property_path for result in self.failed]


class Gate:
    """
    Completeness check that validates a payload against multiple Locks, in order.
    """

    name: str
    role: Role
    _locks: list[Lock]

    def __init__(self, gate_config: GateDefinition):
        name = gate_config.get("name")
        if not name:
            raise ValueError("Gate must have a name")
        self.name = name
        self.description = gate_config.get("description", "")
        self.role = Role(gate_config.get("role"))
        locks = [LockFactory.create(lock_def) for lock_def in gate_config.get("locks", [])]
        if not locks:
            raise ValueError(f"Gate '{name}' must have at least one lock")
        self._locks = locks

    @property
    def locks(self) -> list[Lock]:
        return list(self._locks)

    @property
    def required_fields(self) -> list[str]:
        return [lock.property_path for lock in self._locks]

    def evaluate(self, payload: dict[str, Any]) -> GateResult:
        """Evaluate payload against all locks using AND logic."""
        passed = []
        failed = []

        for lock in self._locks:
            result = lock.validate(payload)
            if result.success:
                passed.append(result)
            else:
                failed.append(result)

        return GateResult(
            success=not failed,
            success_rate=len(passed) / len(self._locks),
            failed=failed,
            passed=passed,
        )


# Required fields per role, as recovered from the evaluation forms
COMPLETENESS_GATES: list[GateDefinition] = [
    {
        "name": "employee_submission",
        "description": "Employee identity must be filled in before submitting",
        "role": Role.EMPLOYEE.value,
        "locks": [
            {"property_path": "fullName", "type": "exists"},
            {"property_path": "employeeId", "type": "exists"},
            {"property_path": "department", "type": "exists"},
        ],
    },
    {
        "name": "officer_assessment",
        "description": "Overall rating and final comments are required",
        "role": Role.REPORTING_OFFICER.value,
        "locks": [
            {"property_path": "overallRating", "type": "exists"},
            {"property_path": "officerComments", "type": "exists"},
        ],
    },
    {
        "name": "countersign_approval",
        "description": "Approval status, comments and authorization acknowledgement are required",
        "role": Role.COUNTERSIGNING_OFFICER.value,
        "locks": [
            {"property_path": "finalApprovalStatus", "type": "exists"},
            {"property_path": "countersignComments", "type": "exists"},
            {"property_path": "authorizationAcknowledged", "type": "is_true"},
        ],
    },
]


# ============================================================================
# Decisions
# ============================================================================


@dataclass(frozen=True)
class Allowed:
    """The action may proceed.

    For ``advance``, ``payload`` holds the validated section payload and
    ``next_stage`` the stage the record moves to.
    """

    action: Action
    next_stage: Stage | None = None
    payload: dict[str, Any] | None = None

    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True)
class Denied:
    """The action may not proceed, and why."""

    action: Action
    reason: DenialReason
    fields: tuple[str, ...] = ()
    messages: tuple[str, ...] = ()

    @property
    def allowed(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "reason": self.reason.value,
            "fields": list(self.fields),
            "messages": list(self.messages),
        }


Decision = Allowed | Denied


class StageGate:
    """
    Central authorization for every action on an evaluation record.

    Rules:
    - view: the role's pipeline position must be >= the stage's position
    - edit_own_section / save_draft: the stage must be the role's own stage
    - advance: as edit, plus the role's completeness gate must pass
    - reject: countersigning officer only, from assessed_by_officer
    - reopen: from rejected only
    """

    def __init__(self, gates: list[GateDefinition] | None = None):
        definitions = gates if gates is not None else COMPLETENESS_GATES
        self._gates: dict[Role, Gate] = {}
        for definition in definitions:
            gate = Gate(definition)
            self._gates[gate.role] = gate

    def gate_for(self, role: Role) -> Gate | None:
        return self._gates.get(role)

    def authorize(
        self,
        record: EvaluationRecord,
        role: Role,
        action: Action,
        payload: dict[str, Any] | None = None,
    ) -> Decision:
        """
        Decide whether ``role`` may perform ``action`` on ``record``.

        Args:
            record: Record in its current state
            role: Acting role
            action: Attempted action
            payload: Section payload, required to evaluate ``advance``

        Returns:
            Allowed or Denied
        """
        stage = record.stage

        if action == Action.VIEW:
            if role.position >= stage.position:
                return Allowed(action)
            return Denied(action, DenialReason.WRONG_STAGE)

        if action in (Action.EDIT_OWN_SECTION, Action.SAVE_DRAFT):
            if stage.owner == role:
                return Allowed(action)
            return Denied(action, DenialReason.WRONG_STAGE)

        if action == Action.ADVANCE:
            if stage.owner != role:
                return Denied(action, DenialReason.WRONG_STAGE)
            return self._check_completeness(role, stage, payload or {})

        if action == Action.REJECT:
            if role != Role.COUNTERSIGNING_OFFICER:
                return Denied(action, DenialReason.WRONG_ROLE)
            if stage != Stage.ASSESSED_BY_OFFICER:
                return Denied(action, DenialReason.WRONG_STAGE)
            return Allowed(action, next_stage=Stage.REJECTED)

        if action == Action.REOPEN:
            if stage != Stage.REJECTED:
                return Denied(action, DenialReason.WRONG_STAGE)
            return Allowed(action, next_stage=Stage.DRAFT)

        raise ValueError(f"Unsupported action: {action}")

    def allowed_actions(self, record: EvaluationRecord, role: Role) -> set[Action]:
        """Actions open to ``role``, ignoring payload completeness."""
        actions = set()
        for action in Action:
            if action == Action.ADVANCE:
                if record.stage.owner == role:
                    actions.add(action)
                continue
            if self.authorize(record, role, action).allowed:
                actions.add(action)
        return actions

    def _check_completeness(self, role: Role, stage: Stage, payload: dict[str, Any]) -> Decision:
        normalized, invalid = validate_section(Section.for_role(role), payload)
        if invalid:
            return Denied(
                Action.ADVANCE,
                DenialReason.INCOMPLETE_FIELDS,
                fields=tuple(invalid),
                messages=tuple(f"Field '{name}' has an invalid value" for name in invalid),
            )

        gate = self._gates.get(role)
        if gate is not None:
            result = gate.evaluate(normalized)
            if not result.success:
                return Denied(
                    Action.ADVANCE,
                    DenialReason.INCOMPLETE_FIELDS,
                    fields=tuple(result.missing_fields),
                    messages=tuple(result.messages),
                )

        return Allowed(Action.ADVANCE, next_stage=stage.next_stage, payload=normalized)
