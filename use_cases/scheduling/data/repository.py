"""
Policy Repository.

The contract the scheduling service depends on, plus an in-process
implementation used for local development and tests.
"""

import logging
import threading
import uuid
from abc import abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from core.data import QueryOptions, Repository

from ..domain.models import Policy, PolicyData, PolicyKind

logger = logging.getLogger(__name__)


class PolicyRepository(Repository[Policy]):
    """
    Storage contract for scheduling policies.

    Implementations persist rows keyed by policy id. Payloads reaching
    create() and update() are already validated; repositories do not
    re-check them.
    """

    @abstractmethod
    def create(self, provider_id: str, kind: PolicyKind, label: str, data: PolicyData) -> Policy:
        """Insert a new active policy with a fresh id and timestamps."""
        pass

    @abstractmethod
    def update(
        self,
        id: str,
        label: Optional[str] = None,
        data: Optional[PolicyData] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[Policy]:
        """Apply the given changes and refresh updated_at. None if not found."""
        pass


def new_policy_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _copy(policy: Policy) -> Policy:
    return replace(policy, data=policy.data.model_copy(deep=True))


class InMemoryPolicyRepository(PolicyRepository):
    """
    Policy rows kept in process memory.

    A lock guards the rows so concurrent requests see a coherent list.
    Returned policies are copies; mutating them does not touch the store.
    """

    def __init__(self):
        self._rows: Dict[str, Policy] = {}
        self._lock = threading.Lock()

    def list(self, options: Optional[QueryOptions] = None) -> List[Policy]:
        options = options or QueryOptions()
        with self._lock:
            rows = list(self._rows.values())

        # Insertion order is creation order; newest first
        result = []
        for policy in reversed(rows):
            if options.provider_id is not None and policy.provider_id != options.provider_id:
                continue
            if options.kind and policy.kind != options.kind:
                continue
            if options.active_only and not policy.is_active:
                continue
            result.append(_copy(policy))
        return result

    def get_by_id(self, id: str) -> Optional[Policy]:
        with self._lock:
            policy = self._rows.get(id)
        return _copy(policy) if policy else None

    def create(self, provider_id: str, kind: PolicyKind, label: str, data: PolicyData) -> Policy:
        now = utcnow()
        policy = Policy(
            id=new_policy_id(),
            provider_id=provider_id,
            kind=kind,
            label=label,
            data=data,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._rows[policy.id] = policy
        logger.info(f"Created {kind.value} policy {policy.id} for provider {provider_id}")
        return _copy(policy)

    def update(
        self,
        id: str,
        label: Optional[str] = None,
        data: Optional[PolicyData] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[Policy]:
        with self._lock:
            existing = self._rows.get(id)
            if existing is None:
                return None
            updated = replace(
                existing,
                label=existing.label if label is None else label,
                data=existing.data if data is None else data,
                is_active=existing.is_active if is_active is None else is_active,
                updated_at=utcnow(),
            )
            self._rows[id] = updated
        logger.info(f"Updated policy {id}")
        return _copy(updated)

    def delete(self, id: str) -> bool:
        with self._lock:
            existing = self._rows.get(id)
            if existing is None or not existing.is_active:
                return False
            self._rows[id] = replace(existing, is_active=False, updated_at=utcnow())
        logger.info(f"Deactivated policy {id}")
        return True
