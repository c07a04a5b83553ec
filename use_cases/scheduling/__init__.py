"""
Scheduling Policy Use Case.

Manages scheduling policies for medical-practice calendars and judges
whether a proposed booking action conflicts with them.

Structure:
- domain/: Pure business logic (no I/O)
  - models.py: policy kinds, payload variants, validation
  - policies.py: recurrence/time-window matchers, ConflictRules
- data/: Data access layer
  - repository.py: PolicyRepository contract, in-memory store
  - cosmos_client.py: Cosmos DB store
- presentation/: Text rendering
  - formatters.py: policy explanations
- service.py: SchedulingPolicyService
- tools.py: Agent tool catalog and dispatcher
"""

from .service import (
    ConflictCheckResult,
    PolicyValidationError,
    SchedulingPolicyService,
    get_policy_service,
    set_policy_service,
)
from .tools import POLICY_TOOLS, TOOL_REGISTRY, execute_tool

__all__ = [
    "ConflictCheckResult",
    "PolicyValidationError",
    "SchedulingPolicyService",
    "get_policy_service",
    "set_policy_service",
    "POLICY_TOOLS",
    "TOOL_REGISTRY",
    "execute_tool",
]
