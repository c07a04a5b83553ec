"""
Seed sample scheduling policies.

Creates Dr. Hill's office hours, lunch block, new-patient appointment type
and booking window in the configured policy store, then runs two conflict
checks and prints the explanation.

Usage:
    python scripts/seed_policies.py [provider_id]

Environment:
    POLICY_STORE - 'memory' (default, useful as a dry run) or 'cosmos'
    COSMOS_ENDPOINT / COSMOS_DATABASE - used when POLICY_STORE=cosmos
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from shared.cosmos_config import DATABASE_NAME, get_policy_container_config
from use_cases.scheduling import PolicyValidationError, get_policy_service
from use_cases.scheduling.domain.models import BookingAction

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


SAMPLE_POLICIES: List[Dict[str, Any]] = [
    {
        "kind": "AVAILABILITY",
        "label": "Office Hours",
        "data": {
            "recurrence": {"type": "weekly", "daysOfWeek": [1, 2, 3, 4, 5], "startDate": "2026-01-30", "endDate": None},
            "timeWindows": [{"start": "09:00", "end": "17:00"}],
        },
    },
    {
        "kind": "BLOCK",
        "label": "Lunch Break",
        "data": {
            "recurrence": {"type": "daily", "startDate": "2026-01-30", "endDate": None},
            "timeWindows": [{"start": "12:00", "end": "13:00"}],
            "reason": "Lunch break",
        },
    },
    {
        "kind": "APPOINTMENT_TYPE",
        "label": "New Patient Visit",
        "data": {"typeName": "New Patient", "duration": 45, "color": "#4CAF50"},
    },
    {
        "kind": "BOOKING_WINDOW",
        "label": "Advance Booking",
        "data": {"minAdvanceHours": 24, "maxAdvanceDays": 30},
    },
]


def main():
    provider_id = sys.argv[1] if len(sys.argv) > 1 else "dr-hill"
    service = get_policy_service()

    container_name, partition_key = get_policy_container_config("policies")
    logger.info(f"Seeding policies for {provider_id} ({DATABASE_NAME}/{container_name}, partition {partition_key})")

    for sample in SAMPLE_POLICIES:
        try:
            policy = service.create_policy(provider_id, sample["kind"], sample["label"], sample["data"])
        except PolicyValidationError as e:
            logger.error(f"  {sample['label']}: rejected ({'; '.join(str(err) for err in e.errors)})")
            continue
        logger.info(f"  {policy.kind.value}: {policy.label} -> {policy.id}")

    for when in ("2026-02-02T10:00:00", "2026-02-02T12:30:00"):
        result = service.check_conflicts(provider_id, BookingAction.BOOK, datetime.fromisoformat(when))
        logger.info(f"Book at {when}: allowed={result.allowed} conflicts={result.conflicts}")

    logger.info("\n" + service.explain(provider_id))


if __name__ == "__main__":
    main()
