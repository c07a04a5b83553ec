"""Shared fixtures / test helpers."""

from datetime import datetime, timezone

import pytest

from use_cases.scheduling.data.repository import InMemoryPolicyRepository
from use_cases.scheduling.domain.models import Policy, PolicyKind, validate_policy_data
from use_cases.scheduling.service import SchedulingPolicyService, set_policy_service

# Saturday morning before the sample week
NOW = datetime(2026, 1, 31, 9, 0)
PROVIDER = "dr-hill"


@pytest.fixture
def office_hours_data():
    return {
        "recurrence": {"type": "weekly", "daysOfWeek": [1, 2, 3, 4, 5], "startDate": "2026-01-30", "endDate": None},
        "timeWindows": [{"start": "09:00", "end": "17:00"}],
    }


@pytest.fixture
def lunch_block_data():
    return {
        "recurrence": {"type": "daily", "startDate": "2026-01-30", "endDate": None},
        "timeWindows": [{"start": "12:00", "end": "13:00"}],
        "reason": "Lunch break",
    }


@pytest.fixture
def booking_window_data():
    return {"minAdvanceHours": 24, "maxAdvanceDays": 30}


@pytest.fixture
def repository():
    return InMemoryPolicyRepository()


@pytest.fixture
def service(repository):
    return SchedulingPolicyService(repository, clock=lambda: NOW)


@pytest.fixture
def installed_service(service):
    """Make `service` the one the tools and HTTP app use."""
    set_policy_service(service)
    yield service
    set_policy_service(None)


@pytest.fixture
def make_policy():
    """Build a Policy without a repository, for pure engine tests."""
    counter = {"n": 0}

    def _make(kind: str, data: dict, label: str = "Policy", active: bool = True) -> Policy:
        outcome = validate_policy_data(data, PolicyKind(kind))
        assert outcome.success, outcome.errors
        counter["n"] += 1
        stamp = datetime(2026, 1, 1, tzinfo=timezone.utc)
        return Policy(
            id=f"pol-{counter['n']}",
            provider_id=PROVIDER,
            kind=PolicyKind(kind),
            label=label,
            data=outcome.data,
            is_active=active,
            created_at=stamp,
            updated_at=stamp,
        )

    return _make
