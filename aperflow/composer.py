"""Section composer: read-only views of the sections a role may see."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from aperflow.exceptions import AccessDeniedError
from aperflow.gate import Denied, StageGate
from aperflow.models import Action, EvaluationRecord, Role, Section, Stage, requires_concerns

# Group layout per section: (group title, wire field names)
SECTION_LAYOUTS: dict[Section, tuple[tuple[str, tuple[str, ...]], ...]] = {
    Section.EMPLOYEE: (
        (
            "Employee Info",
            (
                "fullName",
                "employeeId",
                "department",
                "designation",
                "grade",
                "dateOfBirth",
                "dateOfJoining",
                "reportingOfficer",
            ),
        ),
        ("Current Assignment", ("currentPostingPlace", "periodFrom", "periodTo")),
        ("Job Description", ("mainDuties", "additionalResponsibilities", "achievementsHighlights")),
        ("Training & Development", ("trainingAttended", "skillsDeveloped", "areasForImprovement")),
    ),
    Section.OFFICER: (
        (
            "Assessment Summary",
            (
                "overallRating",
                "performanceRating",
                "reliabilityRating",
                "initiativeRating",
                "qualityOfWorkRating",
                "strengthsComments",
                "areasForImprovement",
                "achievementHighlights",
                "goalProgress",
            ),
        ),
        (
            "Competencies",
            ("leadershipSkills", "technicalCompetency", "teamwork", "communicationSkills", "problemSolving"),
        ),
        (
            "Recommendations",
            ("promotionRecommendation", "trainingRecommendations", "nextYearGoals", "officerComments"),
        ),
    ),
    Section.COUNTERSIGN: (
        (
            "Countersign Review",
            (
                "finalApprovalStatus",
                "ratingAgreement",
                "reviewerConcerns",
                "promotionEndorsement",
                "countersignComments",
                "additionalRecommendations",
                "hrNotifications",
                "executiveSummary",
                "finalSignatureDate",
                "authorizationAcknowledged",
            ),
        ),
    ),
}


@dataclass(frozen=True)
class FieldGroup:
    title: str
    fields: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "fields": dict(self.fields)}


@dataclass(frozen=True)
class SectionView:
    section: Section
    owner: Role
    groups: tuple[FieldGroup, ...]

    def group(self, title: str) -> FieldGroup | None:
        return next((g for g in self.groups if g.title == title), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "section": self.section.value,
            "owner": self.owner.value,
            "groups": [g.to_dict() for g in self.groups],
        }


@dataclass(frozen=True)
class ReadOnlyView:
    """Sections of one record visible to one role, as nested read-only groups."""

    record_id: str
    stage: Stage
    role: Role
    sections: tuple[SectionView, ...]

    def section(self, section: Section) -> SectionView | None:
        return next((s for s in self.sections if s.section == section), None)

    @property
    def section_names(self) -> list[Section]:
        return [s.section for s in self.sections]

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "stage": self.stage.value,
            "role": self.role.value,
            "sections": [s.to_dict() for s in self.sections],
        }


class SectionComposer:
    """
    Builds the read-only view a role sees before acting on a record.

    A section is included only when it has been committed and its owner's
    pipeline position is at or below the viewing role's.
    """

    def __init__(self, gate: StageGate | None = None):
        self.gate = gate if gate is not None else StageGate()

    def compose(self, record: EvaluationRecord, for_role: Role) -> ReadOnlyView:
        """
        Compose the view of ``record`` for ``for_role``.

        Raises:
            AccessDeniedError: If the role may not view the record in its current stage
        """
        decision = self.gate.authorize(record, for_role, Action.VIEW)
        if isinstance(decision, Denied):
            raise AccessDeniedError(decision, context={"record_id": record.id})

        sections = []
        for section in Section:
            if section.owner.position > for_role.position:
                continue
            payload = record.section(section)
            if payload is None:
                continue
            sections.append(self._build_section(section, payload))

        return ReadOnlyView(
            record_id=record.id,
            stage=record.stage,
            role=for_role,
            sections=tuple(sections),
        )

    def _build_section(self, section: Section, payload: dict[str, Any]) -> SectionView:
        groups = []
        for title, names in SECTION_LAYOUTS[section]:
            values = {}
            for name in names:
                if name == "reviewerConcerns" and not requires_concerns(payload.get("ratingAgreement")):
                    continue
                values[name] = payload.get(name)
            groups.append(FieldGroup(title=title, fields=MappingProxyType(values)))
        return SectionView(section=section, owner=section.owner, groups=tuple(groups))
