"""
Core Framework for Use Cases.

This module provides the extensible base classes and interfaces
that all use cases should implement. The layered architecture ensures:

1. Domain Layer - Pure business rules, no I/O
2. Data Layer - Repository pattern for data access
3. Orchestration Layer - Tools that wire everything together

Each use case follows this pattern for consistency and reusability.
"""

from .domain import PolicyDecision, PolicyEngine, PolicyResult, ValidationError
from .data import QueryOptions, Repository, RepositoryError
from .orchestration import ToolDefinition, ToolRegistry

__all__ = [
    # Domain
    "PolicyDecision",
    "PolicyEngine",
    "PolicyResult",
    "ValidationError",
    # Data
    "QueryOptions",
    "Repository",
    "RepositoryError",
    # Orchestration
    "ToolDefinition",
    "ToolRegistry",
]
