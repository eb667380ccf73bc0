"""Unit tests for section payload models and validation helpers."""

import pytest

from aperflow.models import (
    CountersignSection,
    EmployeeSection,
    OfficerSection,
    Section,
    requires_concerns,
    validate_section,
)


class TestValidateSection:
    """Test suite for validate_section."""

    def test_keeps_only_fields_that_were_set(self, employee_payload):
        """Verify normalization does not invent unset fields."""
        # Act
        normalized, invalid = validate_section(Section.EMPLOYEE, employee_payload)

        # Assert
        assert invalid == []
        assert normalized == employee_payload

    def test_integer_ratings_are_coerced_to_strings(self):
        """Verify ratings given as integers are stored as select-style strings."""
        # Act
        normalized, invalid = validate_section(Section.OFFICER, {"overallRating": 4, "performanceRating": "3"})

        # Assert
        assert invalid == []
        assert normalized == {"overallRating": "4", "performanceRating": "3"}

    def test_snake_case_input_is_emitted_in_camel_case(self):
        """Verify field names may be given in snake case but are stored in camel case."""
        normalized, _ = validate_section(Section.EMPLOYEE, {"full_name": "Sarah Johnson"})
        assert normalized == {"fullName": "Sarah Johnson"}

    def test_unknown_field_is_invalid(self):
        """Verify keys outside the section model are rejected."""
        # Act
        normalized, invalid = validate_section(Section.EMPLOYEE, {"fullName": "A", "salary": 100})

        # Assert
        assert normalized == {}
        assert invalid == ["salary"]

    @pytest.mark.parametrize(
        "section,payload,field",
        [
            (Section.EMPLOYEE, {"grade": "Z"}, "grade"),
            (Section.OFFICER, {"overallRating": "6"}, "overallRating"),
            (Section.OFFICER, {"promotionRecommendation": "maybe"}, "promotionRecommendation"),
            (Section.COUNTERSIGN, {"finalApprovalStatus": "pending"}, "finalApprovalStatus"),
            (Section.COUNTERSIGN, {"ratingAgreement": "unsure"}, "ratingAgreement"),
        ],
    )
    def test_enumerated_fields_reject_unknown_values(self, section, payload, field):
        """Verify select-style fields only accept their listed options."""
        _, invalid = validate_section(section, payload)
        assert invalid == [field]

    def test_empty_payload_is_valid(self):
        """Verify an empty payload validates; completeness is checked separately."""
        assert validate_section(Section.COUNTERSIGN, {}) == ({}, [])


class TestSectionModels:
    """Test suite for the pydantic section models."""

    def test_wire_fields_are_camel_case(self):
        """Verify wire field names match what the forms send."""
        assert EmployeeSection.wire_fields()[:3] == ["fullName", "employeeId", "department"]
        assert "qualityOfWorkRating" in OfficerSection.wire_fields()
        assert "authorizationAcknowledged" in CountersignSection.wire_fields()

    def test_section_field_counts(self):
        """Verify each section carries its full set of form fields."""
        assert len(EmployeeSection.wire_fields()) == 17
        assert len(OfficerSection.wire_fields()) == 18
        assert len(CountersignSection.wire_fields()) == 10


class TestRequiresConcerns:
    """Test suite for the reviewer-concerns rule."""

    @pytest.mark.parametrize(
        "agreement,expected",
        [
            ("disagree", True),
            ("partially-agree", True),
            ("mostly-agree", False),
            ("fully-agree", False),
            (None, False),
        ],
    )
    def test_requires_concerns(self, agreement, expected):
        """Verify concerns apply to disagreement and partial agreement."""
        assert requires_concerns(agreement) is expected
