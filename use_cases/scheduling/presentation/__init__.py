"""Scheduling presentation layer."""

from .formatters import NO_POLICIES_MESSAGE, explain_policies, format_conflicts

__all__ = ["NO_POLICIES_MESSAGE", "explain_policies", "format_conflicts"]
