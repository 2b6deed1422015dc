# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for table operations
#   (import it as `from lib.supabase_client import SupabaseClient`; it reads
#   app settings on import, so it is not re-exported here)
# - utils.py: Shared helpers (UUIDs, snake_case names, colors, dedupe)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.utils import (
    normalize_uuid,
    random_light_color,
    snake_case,
    unique_records,
    utc_now_iso,
)

__all__ = [
    "normalize_uuid",
    "random_light_color",
    "snake_case",
    "unique_records",
    "utc_now_iso",
]
