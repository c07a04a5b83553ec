"""Scheduling data layer - policy repositories."""

from .repository import InMemoryPolicyRepository, PolicyRepository
from .cosmos_client import PolicyCosmosRepository

__all__ = [
    "PolicyRepository",
    "InMemoryPolicyRepository",
    "PolicyCosmosRepository",
]
