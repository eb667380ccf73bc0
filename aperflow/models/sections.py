"""
Section payload models with validation.

Single file containing:
- Pydantic models for the three section payloads
- Enumerated value sets used by the select-style fields
- Helpers validating a raw payload into its wire (camelCase) form

Payloads travel as plain dictionaries keyed the way the presentation layer
sends them (camelCase). The models only validate and normalize; records and
drafts store dictionaries.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .enums import Section

Rating = Literal["1", "2", "3", "4", "5"]
Grade = Literal["A", "B", "C", "D"]
PromotionRecommendation = Literal[
    "strongly-recommend", "recommend", "consider", "maintain", "improvement-needed"
]
ApprovalStatus = Literal["approved", "approved-with-conditions", "requires-revision", "rejected"]
RatingAgreement = Literal["fully-agree", "mostly-agree", "partially-agree", "disagree"]
PromotionEndorsement = Literal[
    "strongly-endorse", "endorse", "endorse-with-conditions", "defer", "do-not-endorse"
]

# Agreement levels that call for the reviewer-concerns field
CONCERN_AGREEMENTS: frozenset[str] = frozenset({"disagree", "partially-agree"})


# ============================================================================
# Section Models
# ============================================================================


class SectionModel(BaseModel):
    """Base for section payloads: camelCase on the wire, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    @classmethod
    def wire_fields(cls) -> list[str]:
        """Field names as they appear in payloads, in declaration order."""
        return [info.alias or name for name, info in cls.model_fields.items()]


class EmployeeSection(SectionModel):
    """Identity, assignment, duties and training, written by the employee."""

    # Personal information
    full_name: str | None = None
    employee_id: str | None = None
    department: str | None = None
    designation: str | None = None
    grade: Grade | None = None
    date_of_birth: str | None = None
    date_of_joining: str | None = None
    reporting_officer: str | None = None

    # Current assignment
    current_posting_place: str | None = None
    period_from: str | None = None
    period_to: str | None = None

    # Job description
    main_duties: str | None = None
    additional_responsibilities: str | None = None
    achievements_highlights: str | None = None

    # Training & development
    training_attended: str | None = None
    skills_developed: str | None = None
    areas_for_improvement: str | None = None


class OfficerSection(SectionModel):
    """Ratings, competencies and recommendations from the reporting officer."""

    performance_rating: Rating | None = None
    strengths_comments: str | None = None
    areas_for_improvement: str | None = None
    achievement_highlights: str | None = None
    goal_progress: str | None = None

    leadership_skills: str | None = None
    technical_competency: str | None = None
    teamwork: str | None = None
    communication_skills: str | None = None
    problem_solving: str | None = None

    overall_rating: Rating | None = None
    reliability_rating: Rating | None = None
    initiative_rating: Rating | None = None
    quality_of_work_rating: Rating | None = None

    promotion_recommendation: PromotionRecommendation | None = None
    training_recommendations: str | None = None
    next_year_goals: str | None = None
    officer_comments: str | None = None

    @field_validator(
        "performance_rating",
        "overall_rating",
        "reliability_rating",
        "initiative_rating",
        "quality_of_work_rating",
        mode="before",
    )
    @classmethod
    def coerce_rating(cls, v: Any) -> Any:
        # Ratings arrive as "1".."5" from select widgets, ints from scripts
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class CountersignSection(SectionModel):
    """Final approval decision from the countersigning officer."""

    final_approval_status: ApprovalStatus | None = None
    countersign_comments: str | None = None
    rating_agreement: RatingAgreement | None = None
    promotion_endorsement: PromotionEndorsement | None = None
    additional_recommendations: str | None = None
    hr_notifications: str | None = None
    final_signature_date: str | None = None
    reviewer_concerns: str | None = None
    executive_summary: str | None = None
    authorization_acknowledged: bool | None = None


SECTION_MODELS: dict[Section, type[SectionModel]] = {
    Section.EMPLOYEE: EmployeeSection,
    Section.OFFICER: OfficerSection,
    Section.COUNTERSIGN: CountersignSection,
}


# ============================================================================
# Helpers
# ============================================================================


def validate_section(section: Section, payload: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """
    Validate a raw payload against its section model.

    Args:
        section: Section the payload belongs to
        payload: Raw payload keyed by wire (camelCase) names

    Returns:
        Tuple of (normalized payload, invalid field names). The normalized
        payload keeps only the keys the caller set. When validation fails the
        normalized payload is empty.
    """
    model_cls = SECTION_MODELS[section]
    try:
        model = model_cls.model_validate(payload)
    except ValidationError as e:
        invalid = []
        for error in e.errors():
            loc = error.get("loc") or ("<payload>",)
            name = str(loc[0])
            if name not in invalid:
                invalid.append(name)
        return {}, invalid

    return model.model_dump(mode="json", by_alias=True, exclude_unset=True), []


def requires_concerns(rating_agreement: str | None) -> bool:
    """Whether the reviewer-concerns field applies for this agreement level."""
    return rating_agreement in CONCERN_AGREEMENTS
