"""
Cosmos DB Repository for Scheduling Policies.

Persists policy rows in an Azure Cosmos DB container.
Uses DefaultAzureCredential for flexible authentication.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from azure.cosmos import CosmosClient
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError
from azure.identity import DefaultAzureCredential

from core.data import QueryOptions, RepositoryError

# Import shared configuration
from shared.cosmos_config import (
    COSMOS_ENDPOINT,
    DATABASE_NAME,
    get_policy_container_name,
)

from ..domain.models import Policy, PolicyData, PolicyKind, parse_kind, validate_policy_data
from .repository import PolicyRepository, new_policy_id, utcnow

logger = logging.getLogger(__name__)


class PolicyCosmosRepository(PolicyRepository):
    """Policy repository backed by a Cosmos DB container (partition /id)."""

    def __init__(self, container=None):
        """
        Initialize the Cosmos DB client.

        Args:
            container: An existing container client. When omitted, one is
                created from the shared endpoint/database configuration.
        """
        if container is None:
            logger.info("Initializing Policy Cosmos DB client...")
            self._credential = DefaultAzureCredential()
            self._client = CosmosClient(COSMOS_ENDPOINT, credential=self._credential)
            database = self._client.get_database_client(DATABASE_NAME)
            container = database.get_container_client(get_policy_container_name("policies"))
            logger.info("Policy Cosmos DB client initialized")
        self._container = container

    # =========================================================================
    # QUERIES
    # =========================================================================

    def list(self, options: Optional[QueryOptions] = None) -> List[Policy]:
        """List policies matching the filters, newest first."""
        options = options or QueryOptions()
        clauses = []
        params = []
        if options.provider_id is not None:
            clauses.append("c.provider_id = @provider_id")
            params.append({"name": "@provider_id", "value": options.provider_id})
        if options.kind:
            clauses.append("c.kind = @kind")
            params.append({"name": "@kind", "value": str(getattr(options.kind, "value", options.kind))})
        if options.active_only:
            clauses.append("c.is_active = true")

        query = "SELECT * FROM c"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY c.created_at DESC"

        try:
            items = list(self._container.query_items(
                query, parameters=params, enable_cross_partition_query=True
            ))
        except CosmosHttpResponseError as e:
            raise RepositoryError(f"Failed to list policies: {e.message}") from e
        return [self._doc_to_policy(doc) for doc in items]

    def get_by_id(self, id: str) -> Optional[Policy]:
        """Get a single policy by ID."""
        doc = self._read(id)
        return self._doc_to_policy(doc) if doc else None

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def create(self, provider_id: str, kind: PolicyKind, label: str, data: PolicyData) -> Policy:
        now = utcnow().isoformat()
        doc = {
            "id": new_policy_id(),
            "provider_id": provider_id,
            "kind": kind.value,
            "label": label,
            "data": data.to_dict(),
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        try:
            created = self._container.create_item(doc)
        except CosmosHttpResponseError as e:
            raise RepositoryError(f"Failed to create policy: {e.message}") from e
        logger.info(f"Created {kind.value} policy {doc['id']} for provider {provider_id}")
        return self._doc_to_policy(created or doc)

    def update(
        self,
        id: str,
        label: Optional[str] = None,
        data: Optional[PolicyData] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[Policy]:
        doc = self._read(id)
        if doc is None:
            return None

        if label is not None:
            doc["label"] = label
        if data is not None:
            doc["data"] = data.to_dict()
        if is_active is not None:
            doc["is_active"] = is_active
        doc["updated_at"] = utcnow().isoformat()

        replaced = self._replace(doc)
        logger.info(f"Updated policy {id}")
        return self._doc_to_policy(replaced)

    def delete(self, id: str) -> bool:
        """Soft-delete a policy (set inactive)."""
        doc = self._read(id)
        if doc is None or not doc.get("is_active", False):
            return False
        doc["is_active"] = False
        doc["updated_at"] = utcnow().isoformat()
        self._replace(doc)
        logger.info(f"Deactivated policy {id}")
        return True

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _read(self, id: str) -> Optional[Dict[str, Any]]:
        try:
            return self._container.read_item(item=id, partition_key=id)
        except CosmosResourceNotFoundError:
            return None
        except CosmosHttpResponseError as e:
            raise RepositoryError(f"Failed to read policy {id}: {e.message}") from e

    def _replace(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self._container.replace_item(item=doc["id"], body=doc) or doc
        except CosmosHttpResponseError as e:
            raise RepositoryError(f"Failed to update policy {doc['id']}: {e.message}") from e

    @staticmethod
    def _doc_to_policy(doc: Dict[str, Any]) -> Policy:
        kind = parse_kind(doc.get("kind"))
        if kind is None:
            raise RepositoryError(f"Stored policy {doc.get('id')} has unknown kind {doc.get('kind')!r}")
        outcome = validate_policy_data(doc.get("data"), kind)
        if not outcome.success:
            details = "; ".join(str(e) for e in outcome.errors)
            raise RepositoryError(f"Stored policy {doc.get('id')} has invalid data: {details}")
        return Policy(
            id=doc["id"],
            provider_id=doc["provider_id"],
            kind=kind,
            label=doc.get("label", ""),
            data=outcome.data,
            is_active=bool(doc.get("is_active", True)),
            created_at=datetime.fromisoformat(doc["created_at"]),
            updated_at=datetime.fromisoformat(doc["updated_at"]),
        )
