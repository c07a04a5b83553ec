"""
Scheduling Policy Service.

Wires the policy repository to the domain rules: validated CRUD on
policies, conflict checks, and explanations. The repository is passed in
at construction; get_policy_service() builds the process-wide default from
settings for the tool surface.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from core.data import QueryOptions
from core.domain import DomainValidationError, ValidationError

from .data.repository import InMemoryPolicyRepository, PolicyRepository
from .domain.models import BookingAction, Policy, PolicyKind, parse_kind, validate_policy_data
from .domain.policies import ConflictContext, ConflictRules
from .presentation.formatters import explain_policies, format_conflicts

logger = logging.getLogger(__name__)


class PolicyValidationError(DomainValidationError):
    """A policy payload or its metadata failed validation."""

    def __init__(self, errors: List[ValidationError]):
        super().__init__(errors, message="Invalid policy")


@dataclass
class ConflictCheckResult:
    """Whether an action is allowed, and every reason it is not."""
    allowed: bool
    conflicts: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"allowed": self.allowed, "conflicts": list(self.conflicts)}


class SchedulingPolicyService:
    """
    Application service for scheduling policies.

    Every call reads fresh from the repository; nothing is cached and the
    service holds no state besides its collaborators.
    """

    def __init__(
        self,
        repository: PolicyRepository,
        clock: Callable[[], datetime] = datetime.now,
        rules: Optional[ConflictRules] = None,
    ):
        self.repository = repository
        self._clock = clock
        self._rules = rules or ConflictRules()

    # =========================================================================
    # POLICY CRUD
    # =========================================================================

    def list_policies(
        self,
        provider_id: Optional[str] = None,
        kind: Optional[PolicyKind] = None,
        active_only: bool = True,
    ) -> List[Policy]:
        return self.repository.list(QueryOptions(provider_id=provider_id, kind=kind, active_only=active_only))

    def get_policy(self, policy_id: str) -> Optional[Policy]:
        return self.repository.get_by_id(policy_id)

    def create_policy(self, provider_id: str, kind: Any, label: str, data: Any) -> Policy:
        """
        Validate and store a new policy.

        Raises:
            PolicyValidationError: with every problem found, nothing stored
        """
        errors: List[ValidationError] = []
        if not isinstance(provider_id, str) or not provider_id.strip():
            errors.append(ValidationError("providerId", "Provider ID is required"))
        if not isinstance(label, str) or not label.strip():
            errors.append(ValidationError("label", "Label is required"))

        policy_kind = parse_kind(kind)
        if policy_kind is None:
            errors.append(ValidationError(
                "kind", "Kind must be one of " + ", ".join(k.value for k in PolicyKind)
            ))
            raise PolicyValidationError(errors)

        outcome = validate_policy_data(data, policy_kind)
        if not outcome.success:
            errors.extend(_prefixed(outcome.errors, "data"))
        if errors:
            raise PolicyValidationError(errors)

        return self.repository.create(provider_id, policy_kind, label, outcome.data)

    def update_policy(
        self,
        policy_id: str,
        label: Optional[str] = None,
        data: Optional[Any] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[Policy]:
        """
        Update label, data or active flag in place; id and kind never change.

        Returns None if the policy does not exist.

        Raises:
            PolicyValidationError: if the new data does not fit the policy's kind
        """
        existing = self.repository.get_by_id(policy_id)
        if existing is None:
            return None

        errors: List[ValidationError] = []
        if label is not None and (not isinstance(label, str) or not label.strip()):
            errors.append(ValidationError("label", "Label must not be empty"))
        if is_active is not None and not isinstance(is_active, bool):
            errors.append(ValidationError("isActive", "isActive must be a boolean"))

        validated = None
        if data is not None:
            outcome = validate_policy_data(data, existing.kind)
            if outcome.success:
                validated = outcome.data
            else:
                errors.extend(_prefixed(outcome.errors, "data"))
        if errors:
            raise PolicyValidationError(errors)

        return self.repository.update(policy_id, label=label, data=validated, is_active=is_active)

    def delete_policy(self, policy_id: str) -> bool:
        """Soft-delete. True only when an active policy was deactivated."""
        return self.repository.delete(policy_id)

    # =========================================================================
    # EVALUATION
    # =========================================================================

    def check_conflicts(
        self,
        provider_id: str,
        action: BookingAction,
        date_time: datetime,
        duration_minutes: int = 30,
    ) -> ConflictCheckResult:
        """Check a proposed action against the provider's active policies."""
        policies = self.list_policies(provider_id=provider_id, active_only=True)
        context = ConflictContext(
            action=action,
            requested_datetime=date_time,
            current_datetime=self._clock(),
            duration_minutes=duration_minutes,
            policies=policies,
        )
        decision = self._rules.evaluate(context)
        result = ConflictCheckResult(allowed=decision.is_approved, conflicts=decision.conflicts)
        logger.info(
            f"Checked {action.value} for {provider_id} at {date_time.isoformat()} "
            f"against {decision.metadata['policies_evaluated']} policies: {format_conflicts(result.allowed, result.conflicts)}"
        )
        return result

    def explain(self, provider_id: str) -> str:
        """Human-readable summary of the provider's active policies."""
        return explain_policies(self.list_policies(provider_id=provider_id, active_only=True))


def _prefixed(errors: List[ValidationError], prefix: str) -> List[ValidationError]:
    return [
        ValidationError(f"{prefix}.{e.field}" if e.field != prefix else prefix, e.message, e.code)
        for e in errors
    ]


# Singleton instance
_service: Optional[SchedulingPolicyService] = None


def build_repository(store: str) -> PolicyRepository:
    """Create the repository named by the POLICY_STORE setting."""
    if store == "memory":
        return InMemoryPolicyRepository()
    if store == "cosmos":
        from .data.cosmos_client import PolicyCosmosRepository
        return PolicyCosmosRepository()
    raise ValueError(f"Unknown policy store: {store}")


def get_policy_service() -> SchedulingPolicyService:
    """Get the singleton policy service, built from settings on first use."""
    global _service
    if _service is None:
        from config import settings
        logger.info(f"Initializing policy service with '{settings.policy_store}' store")
        _service = SchedulingPolicyService(build_repository(settings.policy_store))
    return _service


def set_policy_service(service: Optional[SchedulingPolicyService]) -> None:
    """Replace the singleton (tests, alternative wiring). None resets it."""
    global _service
    _service = service
