"""
AI Tools for the Scheduling Policy Use Case.

These tools let an agent manage a provider's scheduling policies and ask
whether a proposed booking action conflicts with them. Results are always
JSON (plain text for policy_explain); failures come back as
{"error": ...} payloads rather than exceptions.
"""

import logging
from typing import Any, Dict, Optional

from core.domain import parse_local_datetime
from core.orchestration import ToolRegistry

from .domain.models import BookingAction, PolicyKind, parse_kind
from .service import PolicyValidationError, get_policy_service

logger = logging.getLogger(__name__)

POLICY_KINDS = [k.value for k in PolicyKind]
BOOKING_ACTIONS = [a.value for a in BookingAction]


# =============================================================================
# TOOL DEFINITIONS (for OpenAI function calling)
# =============================================================================

POLICY_TOOLS = [
    {
        "type": "function",
        "function": {
            "name": "policy_list",
            "description": "List scheduling policies, optionally filtered by provider or kind.",
            "parameters": {
                "type": "object",
                "properties": {
                    "providerId": {"type": "string", "description": "Filter by provider ID"},
                    "kind": {
                        "type": "string",
                        "enum": POLICY_KINDS,
                        "description": "Filter by policy kind",
                    },
                    "activeOnly": {
                        "type": "boolean",
                        "description": "Only return active policies",
                        "default": True,
                    },
                },
                "required": [],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "policy_get",
            "description": "Get a single policy by ID.",
            "parameters": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Policy ID"},
                },
                "required": ["id"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "policy_create",
            "description": "Create a new scheduling policy for a provider.",
            "parameters": {
                "type": "object",
                "properties": {
                    "providerId": {"type": "string", "description": "Provider this policy applies to"},
                    "kind": {
                        "type": "string",
                        "enum": POLICY_KINDS,
                        "description": "Kind of policy",
                    },
                    "label": {"type": "string", "description": "Human-readable label for this policy"},
                    "data": {"type": "object", "description": "Policy configuration (shape depends on kind)"},
                },
                "required": ["providerId", "kind", "label", "data"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "policy_update",
            "description": "Update an existing policy's label, data or active flag.",
            "parameters": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Policy ID to update"},
                    "label": {"type": "string", "description": "New label (optional)"},
                    "data": {"type": "object", "description": "New policy data, same kind (optional)"},
                    "isActive": {"type": "boolean", "description": "Set active/inactive (optional)"},
                },
                "required": ["id"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "policy_delete",
            "description": "Delete (deactivate) a policy.",
            "parameters": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Policy ID to delete"},
                },
                "required": ["id"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "policy_check",
            "description": "Check if a proposed action conflicts with a provider's active policies.",
            "parameters": {
                "type": "object",
                "properties": {
                    "providerId": {"type": "string", "description": "Provider to check policies for"},
                    "action": {
                        "type": "string",
                        "enum": BOOKING_ACTIONS,
                        "description": "Action to check",
                    },
                    "dateTime": {"type": "string", "description": "ISO date-time of the action (local wall-clock)"},
                    "duration": {"type": "integer", "description": "Duration in minutes"},
                },
                "required": ["providerId", "action", "dateTime"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "policy_explain",
            "description": "Get a human-readable explanation of a provider's active policies.",
            "parameters": {
                "type": "object",
                "properties": {
                    "providerId": {"type": "string", "description": "Provider to explain policies for"},
                },
                "required": ["providerId"],
            },
        },
    },
]


# =============================================================================
# TOOL IMPLEMENTATIONS
# =============================================================================

NOT_FOUND = {"error": "Policy not found"}
PROVIDER_REQUIRED = {"error": "providerId is required"}


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _invalid(e: PolicyValidationError) -> Dict[str, Any]:
    return {"error": e.message, "details": [err.to_dict() for err in e.errors]}


def policy_list(provider_id: Optional[str] = None, kind: Optional[str] = None, active_only: bool = True) -> Any:
    """List policies with optional filters."""
    policy_kind = None
    if kind is not None:
        policy_kind = parse_kind(kind)
        if policy_kind is None:
            return {"error": f"Unknown policy kind: {kind}"}

    policies = get_policy_service().list_policies(
        provider_id=provider_id,
        kind=policy_kind,
        active_only=active_only is not False,
    )
    logger.info(f"Listed {len(policies)} policies (provider={provider_id}, kind={kind})")
    return [p.to_dict() for p in policies]


def policy_get(id: str) -> Dict[str, Any]:
    """Get a single policy."""
    policy = get_policy_service().get_policy(id)
    if policy is None:
        return dict(NOT_FOUND)
    return policy.to_dict()


def policy_create(provider_id: str, kind: str, label: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and create a policy."""
    try:
        policy = get_policy_service().create_policy(provider_id, kind, label, data)
    except PolicyValidationError as e:
        logger.info(f"Rejected {kind} policy for {provider_id}: {len(e.errors)} validation error(s)")
        return _invalid(e)
    return policy.to_dict()


def policy_update(
    id: str,
    label: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    is_active: Optional[bool] = None,
) -> Dict[str, Any]:
    """Update a policy in place."""
    try:
        policy = get_policy_service().update_policy(id, label=label, data=data, is_active=is_active)
    except PolicyValidationError as e:
        return _invalid(e)
    if policy is None:
        return dict(NOT_FOUND)
    return policy.to_dict()


def policy_delete(id: str) -> Dict[str, Any]:
    """Soft-delete a policy."""
    return {"success": get_policy_service().delete_policy(id)}


def policy_check(
    provider_id: str,
    action: str,
    date_time: str,
    duration: Optional[int] = None,
) -> Dict[str, Any]:
    """Check a proposed action against the provider's policies."""
    if _blank(provider_id):
        return dict(PROVIDER_REQUIRED)

    try:
        booking_action = BookingAction(action)
    except ValueError:
        return {"error": f"Unknown action: {action}. Expected one of {', '.join(BOOKING_ACTIONS)}"}

    when = parse_local_datetime(date_time) if isinstance(date_time, str) else None
    if when is None:
        return {"error": f"Invalid dateTime: {date_time!r}. Use ISO 8601, e.g. 2026-02-02T10:00:00"}

    if not duration:
        from config import settings
        duration = settings.default_check_duration_minutes

    result = get_policy_service().check_conflicts(provider_id, booking_action, when, int(duration))
    return result.to_dict()


def policy_explain(provider_id: str) -> Any:
    """Explain a provider's policies in plain language."""
    if _blank(provider_id):
        return dict(PROVIDER_REQUIRED)
    return get_policy_service().explain(provider_id)


# =============================================================================
# TOOL EXECUTION
# =============================================================================

TOOL_FUNCTIONS = {
    "policy_list": policy_list,
    "policy_get": policy_get,
    "policy_create": policy_create,
    "policy_update": policy_update,
    "policy_delete": policy_delete,
    "policy_check": policy_check,
    "policy_explain": policy_explain,
}

TEXT_TOOLS = {"policy_explain"}

READ_ONLY_TOOLS = {"policy_list", "policy_get", "policy_check", "policy_explain"}


def build_tool_registry() -> ToolRegistry:
    """Register every policy tool, grouped into query and admin categories."""
    registry = ToolRegistry()
    for entry in POLICY_TOOLS:
        spec = entry["function"]
        name = spec["name"]
        registry.register(
            name=name,
            description=spec["description"],
            function=TOOL_FUNCTIONS[name],
            parameters=spec["parameters"],
            category="query" if name in READ_ONLY_TOOLS else "admin",
            returns_text=name in TEXT_TOOLS,
        )
    return registry


TOOL_REGISTRY = build_tool_registry()


def execute_tool(tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
    """Execute a tool and return the result as JSON string (text for policy_explain)."""
    logger.info(f"Executing tool {tool_name}")
    return TOOL_REGISTRY.execute(tool_name, arguments)


__all__ = [
    "POLICY_TOOLS",
    "TOOL_FUNCTIONS",
    "TOOL_REGISTRY",
    "build_tool_registry",
    "execute_tool",
]
