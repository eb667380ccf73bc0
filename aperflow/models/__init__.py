"""
Data models for APERFlow.

- enums: pipeline, authorization and display tokens
- sections: pydantic payload models for the three sections
- record: EvaluationRecord, DraftEntry and Actor
"""

from .enums import (
    PIPELINE,
    Action,
    DenialReason,
    DisplayStatus,
    Role,
    Section,
    Stage,
)
from .record import (
    Actor,
    DraftEntry,
    DraftKey,
    EvaluationRecord,
    EvaluationRecordDict,
    as_utc,
    utcnow,
)
from .sections import (
    CONCERN_AGREEMENTS,
    SECTION_MODELS,
    CountersignSection,
    EmployeeSection,
    OfficerSection,
    SectionModel,
    requires_concerns,
    validate_section,
)

__all__ = [
    # Enums
    "PIPELINE",
    "Action",
    "DenialReason",
    "DisplayStatus",
    "Role",
    "Section",
    "Stage",
    # Records
    "Actor",
    "DraftEntry",
    "DraftKey",
    "EvaluationRecord",
    "EvaluationRecordDict",
    "as_utc",
    "utcnow",
    # Sections
    "CONCERN_AGREEMENTS",
    "SECTION_MODELS",
    "CountersignSection",
    "EmployeeSection",
    "OfficerSection",
    "SectionModel",
    "requires_concerns",
    "validate_section",
]
