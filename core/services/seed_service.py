# =============================================================================
# core/services/seed_service.py - Fixture Seeding
# =============================================================================
# Seeds every resource in dependency order:
#   indicators -> questions -> questionnaires
#
# Each resource is seeded idempotently (see ResourceService.seed). The first
# failure stops the remaining resources; callers running this at startup let
# the error propagate so the process doesn't serve a half-seeded store.
# =============================================================================

from __future__ import annotations

import logging
from typing import Sequence

from .resource_service import ResourceService

logger = logging.getLogger(__name__)


async def seed_all(services: Sequence[ResourceService]) -> dict[str, int]:
    """
    Seed resources one after another.

    Args:
        services: Services in seeding order

    Returns:
        Number of seeded documents per table
    """
    counts: dict[str, int] = {}
    for service in services:
        try:
            seeded = await service.seed()
        except Exception as e:
            logger.error(f"Seeding {service.table} failed: {e}")
            raise
        counts[service.table] = len(seeded)

    logger.info(f"Seeding complete: {counts}")
    return counts
