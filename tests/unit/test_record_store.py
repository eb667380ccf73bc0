"""Unit tests for RecordStore: creation, listing and gated mutations."""

import logging
from datetime import timedelta

import pytest

from aperflow import (
    AccessDeniedError,
    DenialReason,
    DisplayStatus,
    DraftCache,
    MemoryBackend,
    RecordNotFoundError,
    RecordStore,
    Role,
    Stage,
    StorageUnavailableError,
    YamlFileBackend,
)
from aperflow.store import DRAFTS_NAMESPACE
from tests.fixtures.sample_data import advance_to


class FlakyDraftBackend(MemoryBackend):
    """Memory backend whose draft deletes fail."""

    def delete(self, namespace, key):
        if namespace == DRAFTS_NAMESPACE:
            raise StorageUnavailableError("draft storage offline")
        return super().delete(namespace, key)


class TestCreateAndRead:
    """Test suite for record creation and reads."""

    def test_create_starts_in_draft(self, store, clock):
        """Verify a new record is a draft with no committed sections."""
        # Act
        record_id = store.create(employee_name="Sarah Johnson")
        record = store.get(record_id)

        # Assert
        assert record.stage == Stage.DRAFT
        assert record.employee_name == "Sarah Johnson"
        assert record.employee_section is None
        assert record.created_at == clock.now
        assert record.due_at == clock.now + timedelta(days=30)

    def test_create_with_explicit_due_date(self, store, clock):
        """Verify an explicit due date overrides the default."""
        due = clock.now + timedelta(days=5)
        record = store.get(store.create("A", due_at=due))
        assert record.due_at == due

    def test_ids_are_unique(self, store):
        """Verify every created record gets its own id."""
        ids = {store.create(f"Employee {i}") for i in range(10)}
        assert len(ids) == 10

    def test_get_unknown_returns_none(self, store):
        assert store.get("missing") is None

    def test_require_unknown_raises(self, store):
        """Verify require raises RecordNotFoundError for unknown ids."""
        with pytest.raises(RecordNotFoundError) as exc_info:
            store.require("missing")
        assert exc_info.value.record_id == "missing"

    @pytest.mark.parametrize("record_id", ["../evil", "a/b", ".hidden", ""])
    def test_malformed_id_on_file_backend_is_not_found(self, tmp_path, record_id):
        """Verify ids that cannot name a file behave like unknown records."""
        # Arrange
        store = RecordStore(backend=YamlFileBackend(tmp_path))

        # Act & Assert
        assert store.get(record_id) is None
        assert store.delete(record_id) is False
        with pytest.raises(RecordNotFoundError):
            store.require(record_id)

    def test_all_is_ordered_by_creation(self, store, clock):
        """Verify records are listed oldest first."""
        first = store.create("First")
        clock.advance(minutes=1)
        second = store.create("Second")
        assert [r.id for r in store.all()] == [first, second]

    def test_delete(self, store, record_id):
        """Verify delete removes the record and its drafts."""
        store.save_draft(record_id, Role.EMPLOYEE, {"fullName": "Sarah"})
        assert store.delete(record_id) is True
        assert store.get(record_id) is None
        assert store.drafts.load_draft(record_id, Stage.DRAFT) is None
        assert store.delete(record_id) is False


class TestList:
    """Test suite for name and status filtering."""

    @pytest.fixture
    def populated(self, store, clock):
        ids = {
            "sarah": store.create("Sarah Johnson"),
            "michael": store.create("Michael Chen"),
            "emily": store.create("Emily Rodriguez"),
        }
        advance_to(store, ids["michael"], Stage.SUBMITTED_BY_EMPLOYEE)
        advance_to(store, ids["emily"], Stage.COUNTERSIGNED)
        return ids

    def test_blank_query_matches_all(self, store, populated):
        assert len(store.list()) == 3

    def test_name_query_is_case_insensitive_substring(self, store, populated):
        """Verify the name filter matches any case-insensitive substring."""
        assert [r.id for r in store.list(name_query="CHEN")] == [populated["michael"]]
        assert [r.id for r in store.list(name_query="  rodri ")] == [populated["emily"]]

    def test_status_filter(self, store, populated):
        """Verify the status filter uses the display status."""
        pending = store.list(statuses=[DisplayStatus.PENDING_REVIEW])
        assert [r.id for r in pending] == [populated["michael"]]

    def test_status_filter_accepts_strings(self, store, populated):
        completed = store.list(statuses=["completed", "draft"])
        assert {r.id for r in completed} == {populated["emily"], populated["sarah"]}

    def test_filters_combine_with_and(self, store, populated):
        """Verify a record must match both the name query and the status set."""
        assert store.list(name_query="sarah", statuses=["completed"]) == []

    def test_overdue_status_filter(self, store, populated, clock):
        """Verify records past due appear under overdue instead of their stage status."""
        # Act
        later = clock.now + timedelta(days=31)
        overdue = store.list(statuses=[DisplayStatus.OVERDUE], now=later)

        # Assert
        assert {r.id for r in overdue} == {populated["sarah"], populated["michael"]}

    def test_naive_reference_time_is_treated_as_utc(self, store, populated, clock):
        """Verify a naive reference time filters the same as its UTC equivalent."""
        # Arrange
        later = clock.now + timedelta(days=31)

        # Act
        overdue = store.list(statuses=[DisplayStatus.OVERDUE], now=later.replace(tzinfo=None))

        # Assert
        assert {r.id for r in overdue} == {populated["sarah"], populated["michael"]}

    def test_unknown_status_raises(self, store):
        with pytest.raises(ValueError):
            store.list(statuses=["archived"])


class TestCommitSection:
    """Test suite for commit_section."""

    def test_commit_advances_and_stores_section(self, store, record_id, employee_payload, clock):
        """Verify a complete commit advances the stage and stamps submitted_at."""
        # Arrange
        clock.advance(hours=2)

        # Act
        result = store.commit_section(record_id, Role.EMPLOYEE, employee_payload)

        # Assert
        assert result.success
        assert result.denied is None
        record = store.get(record_id)
        assert record.stage == Stage.SUBMITTED_BY_EMPLOYEE
        assert record.employee_section == employee_payload
        assert record.submitted_at == clock.now
        assert record.display_name == "Sarah Johnson"

    def test_incomplete_commit_changes_nothing(self, store, record_id):
        """Verify an incomplete commit is denied and the record is untouched."""
        # Arrange
        before = store.get(record_id)

        # Act
        result = store.commit_section(record_id, Role.EMPLOYEE, {"fullName": "Sarah Johnson"})

        # Assert
        assert not result.success
        assert result.denied.reason == DenialReason.INCOMPLETE_FIELDS
        assert set(result.denied.fields) == {"employeeId", "department"}
        assert store.get(record_id) == before

    def test_duplicate_commit_is_wrong_stage(self, store, record_id, employee_payload):
        """Verify re-submitting a committed section is denied and changes nothing."""
        # Arrange
        store.commit_section(record_id, Role.EMPLOYEE, employee_payload)
        after_first = store.get(record_id)

        # Act
        result = store.commit_section(record_id, Role.EMPLOYEE, employee_payload)

        # Assert
        assert result.denied.reason == DenialReason.WRONG_STAGE
        assert store.get(record_id) == after_first

    def test_commit_clears_prior_stage_draft(self, store, record_id, employee_payload):
        """Verify the committing role's draft is removed after advancing."""
        # Arrange
        store.save_draft(record_id, Role.EMPLOYEE, {"fullName": "Sarah"})

        # Act
        store.commit_section(record_id, Role.EMPLOYEE, employee_payload)

        # Assert
        assert store.drafts.load_draft(record_id, Stage.DRAFT) is None

    def test_countersign_stamps_countersigned_at(self, store, record_id, clock):
        """Verify completing the pipeline records the countersign time."""
        advance_to(store, record_id, Stage.COUNTERSIGNED)
        record = store.get(record_id)
        assert record.countersigned_at == clock.now
        assert record.writable_section is None

    def test_commit_unknown_record_raises(self, store, employee_payload):
        with pytest.raises(RecordNotFoundError):
            store.commit_section("missing", Role.EMPLOYEE, employee_payload)

    def test_raise_if_denied(self, store, record_id):
        """Verify a denied result can be turned into AccessDeniedError."""
        result = store.commit_section(record_id, Role.REPORTING_OFFICER, {})
        with pytest.raises(AccessDeniedError) as exc_info:
            result.raise_if_denied()
        assert exc_info.value.reason == DenialReason.WRONG_STAGE
        assert exc_info.value.context == {"record_id": record_id}

    def test_draft_clear_failure_does_not_block_commit(self, clock, employee_payload, caplog):
        """Verify a failing draft cleanup is logged and the commit still lands."""
        # Arrange
        backend = FlakyDraftBackend()
        store = RecordStore(backend=backend, drafts=DraftCache(backend), clock=clock)
        record_id = store.create("Sarah Johnson")

        # Act
        with caplog.at_level(logging.WARNING, logger="aperflow.store.records"):
            result = store.commit_section(record_id, Role.EMPLOYEE, employee_payload)

        # Assert
        assert result.success
        assert store.get(record_id).stage == Stage.SUBMITTED_BY_EMPLOYEE
        assert "Could not clear draft" in caplog.text


class TestRejectAndReopen:
    """Test suite for reject and reopen transitions."""

    def test_reject_sets_rejected(self, store, record_id, clock):
        """Verify rejecting an assessed record records when and how often."""
        # Arrange
        advance_to(store, record_id, Stage.ASSESSED_BY_OFFICER)

        # Act
        result = store.reject(record_id, Role.COUNTERSIGNING_OFFICER)

        # Assert
        assert result.success
        record = store.get(record_id)
        assert record.stage == Stage.REJECTED
        assert record.rejected_at == clock.now
        assert record.rejection_count == 1
        assert record.was_rejected

    def test_reject_by_officer_is_wrong_role(self, store, record_id):
        advance_to(store, record_id, Stage.ASSESSED_BY_OFFICER)
        result = store.reject(record_id, Role.REPORTING_OFFICER)
        assert result.denied.reason == DenialReason.WRONG_ROLE
        assert store.get(record_id).stage == Stage.ASSESSED_BY_OFFICER

    def test_reject_clears_drafts(self, store, record_id):
        """Verify a rejection discards the countersigning officer's draft."""
        advance_to(store, record_id, Stage.ASSESSED_BY_OFFICER)
        store.save_draft(record_id, Role.COUNTERSIGNING_OFFICER, {"countersignComments": "WIP"})
        store.reject(record_id, Role.COUNTERSIGNING_OFFICER)
        assert store.drafts.load_draft(record_id, Stage.ASSESSED_BY_OFFICER) is None

    def test_reopen_keeps_employee_section_only(self, store, record_id, employee_payload):
        """Verify reopening returns to draft, keeping the employee section."""
        # Arrange
        advance_to(store, record_id, Stage.ASSESSED_BY_OFFICER)
        store.reject(record_id, Role.COUNTERSIGNING_OFFICER)

        # Act
        result = store.reopen(record_id, Role.EMPLOYEE)

        # Assert
        assert result.success
        record = store.get(record_id)
        assert record.stage == Stage.DRAFT
        assert record.employee_section == employee_payload
        assert record.officer_section is None
        assert record.countersign_section is None
        assert record.rejection_count == 1

    def test_reopen_requires_rejected(self, store, record_id):
        result = store.reopen(record_id, Role.EMPLOYEE)
        assert result.denied.reason == DenialReason.WRONG_STAGE


class TestDraftAccess:
    """Test suite for gated draft access through the store."""

    def test_owner_can_save_and_load(self, store, record_id):
        """Verify the stage owner may save and load its draft."""
        decision = store.save_draft(record_id, Role.EMPLOYEE, {"fullName": "Sarah"})
        assert decision.allowed
        assert store.load_draft(record_id, Role.EMPLOYEE) == {"fullName": "Sarah"}

    def test_non_owner_save_is_wrong_stage(self, store, record_id):
        """Verify another role cannot save a draft for the current stage."""
        decision = store.save_draft(record_id, Role.REPORTING_OFFICER, {"overallRating": "3"})
        assert decision.reason == DenialReason.WRONG_STAGE
        assert store.drafts.load_draft(record_id, Stage.DRAFT) is None

    def test_non_owner_load_returns_none(self, store, record_id):
        """Verify a role that does not own the stage never reads its draft."""
        store.save_draft(record_id, Role.EMPLOYEE, {"fullName": "Sarah"})
        assert store.load_draft(record_id, Role.REPORTING_OFFICER) is None
