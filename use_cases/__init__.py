"""
Use Cases Package.

Each use case is a self-contained module with its own:
- Domain rules
- Repositories
- Presentation helpers
- Tools

Available use cases:
- scheduling: Scheduling policy management and conflict checks

Architecture:
Each use case follows the layered architecture pattern defined in core/:
- domain/: Pure business logic (policies, models)
- data/: Repository pattern for data access
- presentation/: Text formatting
- service.py: Application service wiring repository and domain
- tools.py: Agent tools over the service
"""

from use_cases.scheduling import (
    SchedulingPolicyService,
    POLICY_TOOLS,
    execute_tool,
)

__all__ = [
    "SchedulingPolicyService",
    "POLICY_TOOLS",
    "execute_tool",
]
