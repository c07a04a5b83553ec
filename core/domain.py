"""
Domain Layer Base Classes.

The domain layer contains pure business logic with no external dependencies.
This makes business rules:
- Easy to test (no mocking needed)
- Reusable across different interfaces
- Clear and self-documenting

Example Usage:
    class BookingWindowRules(PolicyEngine):
        def evaluate(self, context: dict) -> PolicyDecision:
            # Pure business logic here
            ...
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum


class PolicyResult(Enum):
    """Result of a policy evaluation."""
    APPROVED = "approved"
    DENIED = "denied"


@dataclass
class PolicyDecision:
    """
    The outcome of a policy evaluation.

    Attributes:
        result: The policy decision result
        reason: Human-readable summary
        conflicts: Ordered reasons the action was denied (empty when approved)
        metadata: Additional context for the decision
    """
    result: PolicyResult
    reason: str
    conflicts: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_approved(self) -> bool:
        return self.result == PolicyResult.APPROVED

    @property
    def is_denied(self) -> bool:
        return self.result == PolicyResult.DENIED


class PolicyEngine(ABC):
    """
    Abstract base class for policy engines.

    A PolicyEngine encapsulates a set of business rules that can be
    evaluated against a context to produce a decision.

    Example:
        class MinimumNoticeRule(PolicyEngine):
            def evaluate(self, context) -> PolicyDecision:
                if context.hours_until < 24:
                    return PolicyDecision(
                        result=PolicyResult.DENIED,
                        reason="Too short notice",
                        conflicts=["Must book at least 24 hours in advance"],
                    )
                return PolicyDecision(
                    result=PolicyResult.APPROVED,
                    reason="Enough notice",
                )
    """

    @abstractmethod
    def evaluate(self, context: Any) -> PolicyDecision:
        """
        Evaluate the policy against the given context.

        Args:
            context: Object or dictionary containing all data needed for evaluation

        Returns:
            PolicyDecision with the result and explanation
        """
        pass

    def explain(self, context: Any) -> str:
        """
        Provide a human-readable explanation of how the policy would be applied.

        Default implementation returns the reason from evaluate().
        Override for more detailed explanations.
        """
        decision = self.evaluate(context)
        return decision.reason


@dataclass
class ValidationError:
    """A validation error with field path and message."""
    field: str
    message: str
    code: str = "invalid"

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class DomainValidationError(Exception):
    """Raised when input fails domain validation. Carries every error found."""

    def __init__(self, errors: List[ValidationError], message: str = "Validation failed"):
        super().__init__(message)
        self.message = message
        self.errors = errors


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def parse_local_datetime(value: str) -> Optional[datetime]:
    """
    Parse an ISO format date-time string into a naive local wall-clock datetime.

    Offset-aware inputs ("Z" or "+HH:MM") are converted to the local zone
    and stripped of tzinfo; naive inputs are taken as local already.
    Returns None when the string cannot be parsed.
    """
    if not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
