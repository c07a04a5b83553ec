"""
Scheduling Conflict Policies.

Pure business rules deciding whether a proposed action at a date-time
conflicts with a provider's active policies.
These classes have NO I/O dependencies - they can be unit tested in isolation.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional

from core.domain import PolicyDecision, PolicyEngine, PolicyResult

from .models import (
    AppointmentTypeData,
    AvailabilityData,
    BlockData,
    BookingAction,
    BookingWindowData,
    DurationData,
    OverrideData,
    Policy,
    Recurrence,
    TimeWindow,
    whole_number,
)

logger = logging.getLogger(__name__)


# =============================================================================
# MATCHERS
# =============================================================================

def matches_date(recurrence: Recurrence, day_of_week: int, on_date: date) -> bool:
    """
    Check whether a calendar date falls under a recurrence rule.

    Args:
        recurrence: The rule (bounds are inclusive; a null end date is open-ended)
        day_of_week: 0=Sunday .. 6=Saturday
        on_date: The date being checked

    Biweekly is evaluated exactly like weekly; monthly never matches.
    """
    if on_date < recurrence.start_date:
        return False
    if recurrence.end_date is not None and on_date > recurrence.end_date:
        return False

    if recurrence.type == "daily":
        return True
    if recurrence.type in ("weekly", "biweekly"):
        return day_of_week in (recurrence.days_of_week or [])
    if recurrence.type == "once":
        return on_date == recurrence.start_date

    logger.debug(f"Recurrence type '{recurrence.type}' never matches")
    return False


def is_within(time_hhmm: str, windows: Iterable[TimeWindow]) -> bool:
    """True if the HH:MM time is inside any [start, end) window."""
    return any(w.start <= time_hhmm < w.end for w in windows)


def sunday_based_weekday(moment: datetime) -> int:
    """Day of week with 0=Sunday, matching recurrence daysOfWeek."""
    return (moment.weekday() + 1) % 7


# =============================================================================
# CONFLICT RULES
# =============================================================================

@dataclass
class ConflictContext:
    """Context for conflict evaluation."""
    action: BookingAction
    requested_datetime: datetime
    current_datetime: datetime
    duration_minutes: int = 30
    policies: List[Policy] = field(default_factory=list)

    @property
    def day_of_week(self) -> int:
        return sunday_based_weekday(self.requested_datetime)

    @property
    def time_hhmm(self) -> str:
        return self.requested_datetime.strftime("%H:%M")

    @property
    def requested_date(self) -> date:
        return self.requested_datetime.date()

    @property
    def hours_until(self) -> float:
        return (self.requested_datetime - self.current_datetime).total_seconds() / 3600


class ConflictRules(PolicyEngine):
    """
    Rules for whether an action conflicts with a provider's policies.

    Evaluates every policy independently, in the order given, and
    accumulates the reasons. An OVERRIDE marking a slot available does not
    cancel a BLOCK conflict for the same slot. Only the book action is
    gated; block and reschedule always pass.
    """

    def evaluate(self, context: ConflictContext) -> PolicyDecision:
        conflicts: List[str] = []
        evaluated = 0
        for policy in context.policies:
            if not policy.is_active:
                continue
            evaluated += 1
            conflicts.extend(self.check_policy(policy, context))
        metadata = {"policies_evaluated": evaluated}

        if conflicts:
            return PolicyDecision(
                result=PolicyResult.DENIED,
                reason=f"{len(conflicts)} policy conflict(s)",
                conflicts=conflicts,
                metadata=metadata,
            )
        return PolicyDecision(
            result=PolicyResult.APPROVED,
            reason="No policy conflicts",
            metadata=metadata,
        )

    def check_policy(self, policy: Policy, context: ConflictContext) -> List[str]:
        """Conflict messages one policy raises against the context."""
        data = policy.data
        if context.action != BookingAction.BOOK:
            return []

        if isinstance(data, AvailabilityData):
            return self._check_availability(policy, data, context)
        if isinstance(data, BlockData):
            return self._check_block(policy, data, context)
        if isinstance(data, OverrideData):
            return self._check_override(policy, data, context)
        if isinstance(data, BookingWindowData):
            return self._check_booking_window(data, context)
        if isinstance(data, (DurationData, AppointmentTypeData)):
            # Informational and catalog policies never conflict
            return []

        logger.debug(f"Ignoring policy {policy.id} with unrecognized kind {policy.kind}")
        return []

    def _check_availability(self, policy: Policy, data: AvailabilityData, context: ConflictContext) -> List[str]:
        on_day = matches_date(data.recurrence, context.day_of_week, context.requested_date)
        if on_day and not is_within(context.time_hhmm, data.time_windows):
            return [f"Outside working hours ({policy.label})"]
        return []

    def _check_block(self, policy: Policy, data: BlockData, context: ConflictContext) -> List[str]:
        on_day = matches_date(data.recurrence, context.day_of_week, context.requested_date)
        if on_day and is_within(context.time_hhmm, data.time_windows):
            return [f"Time is blocked: {data.reason or policy.label}"]
        return []

    def _check_override(self, policy: Policy, data: OverrideData, context: ConflictContext) -> List[str]:
        if data.date != context.requested_date:
            return []
        if data.action == "block" and is_within(context.time_hhmm, data.time_windows):
            return [f"Override block: {data.reason or policy.label}"]
        return []

    def _check_booking_window(self, data: BookingWindowData, context: ConflictContext) -> List[str]:
        messages = []
        hours_until = context.hours_until
        if hours_until < data.min_advance_hours:
            messages.append(f"Must book at least {whole_number(data.min_advance_hours)} hours in advance")
        if hours_until / 24 > data.max_advance_days:
            messages.append(f"Cannot book more than {whole_number(data.max_advance_days)} days in advance")
        return messages


def evaluate_conflicts(
    policies: List[Policy],
    action: BookingAction,
    requested_datetime: datetime,
    current_datetime: Optional[datetime] = None,
    duration_minutes: int = 30,
) -> PolicyDecision:
    """Convenience wrapper running ConflictRules over a policy snapshot."""
    context = ConflictContext(
        action=action,
        requested_datetime=requested_datetime,
        current_datetime=current_datetime or datetime.now(),
        duration_minutes=duration_minutes,
        policies=policies,
    )
    return ConflictRules().evaluate(context)
