"""
Shared modules for the Scheduling Policy service.

This package contains shared configuration and utilities used across the application.
"""

from shared.cosmos_config import (
    COSMOS_ENDPOINT,
    DATABASE_NAME,
    POLICY_CONTAINERS,
)

__all__ = [
    "COSMOS_ENDPOINT",
    "DATABASE_NAME",
    "POLICY_CONTAINERS",
]
