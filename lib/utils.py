# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - UUID normalization for queries
# - snake_case names derived from human readable labels
# - random light colors for indicators
# - deep-equality de-duplication of seed records
# =============================================================================

import json
import re
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import randomcolor


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Args:
        value: UUID as string or UUID object

    Returns:
        String representation of the UUID

    Example:
        indicator_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        indicator_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Text Utilities
# =============================================================================

def snake_case(text: str | None) -> str:
    """
    Convert human readable text to a snake_case variable name.

    Example:
        "Was there water supply before?" -> "was_there_water_supply_before"
        "waterSupply" -> "water_supply"
    """
    if not text:
        return ""
    # Remove special characters except spaces and underscores
    name = re.sub(r"[^\w\s]", " ", str(text))
    # Split camelCase before lowercasing
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"\s+", "_", name.strip())
    # Lowercase and clean up multiple underscores
    name = re.sub(r"_+", "_", name.lower())
    return name.strip("_")


# =============================================================================
# Color Utilities
# =============================================================================

def random_light_color() -> str:
    """
    Generate a random light color as an upper-cased hex code (e.g. "#B3F0C4").
    """
    color = randomcolor.RandomColor().generate(luminosity="light")[0]
    return color.upper()


# =============================================================================
# Record Utilities
# =============================================================================

def _fingerprint(record: Any) -> str:
    return json.dumps(record, sort_keys=True, default=str)


def unique_records(records: list[Any]) -> list[Any]:
    """
    Drop null entries and structural duplicates, preserving first occurrence order.

    Two records are duplicates when they are deeply equal, regardless of
    key order.
    """
    seen: set[str] = set()
    unique: list[Any] = []
    for record in records:
        if record is None:
            continue
        key = _fingerprint(record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
