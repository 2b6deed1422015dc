#!/usr/bin/env python3
# =============================================================================
# scripts/seed.py - Seed Fixtures Without Starting the API
# =============================================================================
# Upserts indicators, questions and questionnaires from the seed files.
# Running it twice leaves the tables unchanged (apart from updated_at).
#
# Usage:
#   python scripts/seed.py
#   SEEDS_PATH=/path/to/fixtures python scripts/seed.py
#
# Prerequisites:
#   - Tables created from supabase/schema.sql
#   - Environment variables must be set (.env file)
# =============================================================================

import asyncio
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.config import settings
from app.dependencies import build_services
from core.services import seed_all
from lib.supabase_client import SupabaseClient

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def main() -> int:
    """Seed every resource; returns the process exit code."""
    print("=" * 60)
    print("EMIS Questionnaire Seeding")
    print("=" * 60)
    print(f"Seeds: {settings.seeds_dir}")
    print()

    try:
        counts = asyncio.run(seed_all(build_services(settings, SupabaseClient)))
    except Exception as e:
        print(f"Seeding failed: {e}")
        return 1

    for table, count in counts.items():
        print(f"  {table}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
