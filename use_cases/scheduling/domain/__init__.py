"""Scheduling domain layer - pure business logic."""

from .models import (
    KIND_LABELS,
    BookingAction,
    Policy,
    PolicyKind,
    Recurrence,
    TimeWindow,
    validate_policy_data,
)
from .policies import (
    ConflictContext,
    ConflictRules,
    evaluate_conflicts,
    is_within,
    matches_date,
)

__all__ = [
    "KIND_LABELS",
    "BookingAction",
    "Policy",
    "PolicyKind",
    "Recurrence",
    "TimeWindow",
    "validate_policy_data",
    "ConflictContext",
    "ConflictRules",
    "evaluate_conflicts",
    "is_within",
    "matches_date",
]
