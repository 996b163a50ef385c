from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from formstash.mapping import serialize_payload
from formstash.storage import SubmissionRepository
from formstash.utils import new_ulid, now_utc

logger = logging.getLogger(__name__)

DEMO_FORM_TYPE = "contact"

# (age, payload); oldest first
DEMO_SUBMISSIONS: list[tuple[timedelta, dict[str, Any]]] = [
    (timedelta(hours=5), {"name": "John Smith", "selected": "A", "checked": True, "picked": "One", "date": "2024-01-15"}),
    (timedelta(hours=4), {"name": "maryjohnson@mail.test", "selected": "B", "checked": False, "picked": "Two", "date": "2024-02-20"}),
    (timedelta(hours=3), {"name": "William Brown", "selected": "C", "checked": True, "picked": "One", "date": "2024-03-10"}),
    (timedelta(hours=2), {"name": "alice.wonder@email.com", "selected": "A", "checked": True, "picked": "Two", "date": "2024-04-05"}),
    (timedelta(hours=1), {"name": "Bob Anderson", "selected": "B", "checked": False, "picked": "One", "date": "2024-05-12"}),
    (timedelta(minutes=45), {"name": "Charlie Davis", "selected": "C", "checked": True, "picked": "Two", "date": "2024-06-18"}),
    (timedelta(minutes=30), {"name": "diana.prince@hero.com", "selected": "A", "checked": False, "picked": "One", "date": "2024-07-22"}),
    (timedelta(minutes=15), {"name": "Eve Martinez", "selected": "B", "checked": True, "picked": "Two", "date": "2024-08-30"}),
]


def seed_demo_data(repo: SubmissionRepository) -> int:
    """Insert the demo submissions into an empty repository.

    Timestamps are backdated relative to now, which is why this goes straight
    to the repository instead of through ``SubmissionStore.create``. Returns
    the number of records inserted (0 when data already exists).
    """
    if repo.count() > 0:
        logger.info("Store already contains data, skipping seed")
        return 0

    logger.info("Seeding demo data...")
    now = now_utc()
    for age, payload in DEMO_SUBMISSIONS:
        repo.insert(
            {
                "id": new_ulid(),
                "form_type": DEMO_FORM_TYPE,
                "data_json": serialize_payload(payload),
                "submitted_at": now - age,
            }
        )
    logger.info("Seeded %d demo submissions", len(DEMO_SUBMISSIONS))
    return len(DEMO_SUBMISSIONS)
