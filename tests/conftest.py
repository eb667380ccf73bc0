"""Pytest configuration and fixtures for APERFlow tests.

Shared fixtures build an in-memory record store driven by a fake clock, so
timestamps and the overdue overlay are deterministic.
"""

from copy import deepcopy

import pytest

from aperflow import DraftCache, MemoryBackend, RecordStore, StageGate
from tests.fixtures.sample_data import (
    COUNTERSIGN_PAYLOAD,
    EMPLOYEE_PAYLOAD,
    OFFICER_PAYLOAD,
    FakeClock,
)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend, clock):
    """Record store over an in-memory backend, due dates 30 days out."""
    return RecordStore(backend=backend, drafts=DraftCache(backend), clock=clock, default_due_days=30)


@pytest.fixture
def gate():
    return StageGate()


@pytest.fixture
def record_id(store):
    return store.create(employee_name="Sarah Johnson")


@pytest.fixture
def employee_payload():
    return deepcopy(EMPLOYEE_PAYLOAD)


@pytest.fixture
def officer_payload():
    return deepcopy(OFFICER_PAYLOAD)


@pytest.fixture
def countersign_payload():
    return deepcopy(COUNTERSIGN_PAYLOAD)
