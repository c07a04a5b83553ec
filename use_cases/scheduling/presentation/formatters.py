"""
Text formatting for scheduling policies.

Renders policies into the short markdown summaries agents relay to people.
"""

from typing import Dict, List

from ..domain.models import KIND_LABELS, Policy, PolicyKind

NO_POLICIES_MESSAGE = "No scheduling policies configured."


def explain_policies(policies: List[Policy]) -> str:
    """
    Summarize policies grouped by kind.

    Kinds appear in the order they are first seen; each kind gets a bold
    heading followed by one bullet per policy label.
    """
    if not policies:
        return NO_POLICIES_MESSAGE

    by_kind: Dict[PolicyKind, List[Policy]] = {}
    for policy in policies:
        by_kind.setdefault(policy.kind, []).append(policy)

    sections = []
    for kind, kind_policies in by_kind.items():
        heading = KIND_LABELS.get(kind, str(kind))
        items = "\n".join(f"  • {p.label}" for p in kind_policies)
        sections.append(f"**{heading}:**\n{items}")

    return "\n\n".join(sections)


def format_conflicts(allowed: bool, conflicts: List[str]) -> str:
    """One-line verdict for logs and plain-text callers."""
    if allowed:
        return "Allowed: no policy conflicts"
    return "Not allowed: " + "; ".join(conflicts)
