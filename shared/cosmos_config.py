"""
Azure Cosmos DB Configuration.

Centralized configuration for all Cosmos DB settings used across the application.
This ensures consistency between the application, scripts, and seeding tools.

Environment Variables (optional overrides):
    COSMOS_ENDPOINT - Override the default Cosmos DB endpoint
    COSMOS_DATABASE - Override the default database name
    COSMOS_POLICY_CONTAINER - Override the policy container name
"""

import os

# =============================================================================
# COSMOS DB CONNECTION
# =============================================================================

COSMOS_ENDPOINT = os.getenv(
    "COSMOS_ENDPOINT",
    "https://localhost:8081/"
)

DATABASE_NAME = os.getenv(
    "COSMOS_DATABASE",
    "scheduling"
)

# =============================================================================
# POLICY DATA CONTAINERS
# =============================================================================

# Format: logical_name -> (container_name, partition_key_path)
POLICY_CONTAINERS = {
    "policies": (os.getenv("COSMOS_POLICY_CONTAINER", "Scheduling_Policies"), "/id"),
}

# Simple container name lookup (without partition key)
POLICY_CONTAINER_NAMES = {
    key: name for key, (name, _) in POLICY_CONTAINERS.items()
}

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_policy_container_name(logical_name: str) -> str:
    """Get the actual container name for a logical policy container name."""
    if logical_name in POLICY_CONTAINER_NAMES:
        return POLICY_CONTAINER_NAMES[logical_name]
    return logical_name


def get_policy_container_config(logical_name: str) -> tuple:
    """Get (container_name, partition_key_path) for a policy container."""
    if logical_name in POLICY_CONTAINERS:
        return POLICY_CONTAINERS[logical_name]
    raise ValueError(f"Unknown policy container: {logical_name}")
