# =============================================================================
# tests/test_seed.py - Seeding Tests
# =============================================================================
# This module contains tests for:
# - Loading seed files (missing, malformed, object vs array)
# - Idempotent seeding with de-duplication
# - Ordered seeding of all resources (seed_all)
# =============================================================================

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.exceptions import DocumentValidationError, InvalidReferenceError, InvalidSeedFileError
from core.services import IndicatorService, QuestionnaireService, QuestionService, seed_all

SEEDS_DIR = Path(__file__).resolve().parent.parent / "seeds"


def make_services(options, store, seeds_dir):
    common = {"seeds_dir": seeds_dir}
    return [
        IndicatorService(options, store, seed_name="indicators", **common),
        QuestionService(options, store, seed_name="questions", **common),
        QuestionnaireService(options, store, seed_name="questionnaires", **common),
    ]


# =============================================================================
# Seed File Tests
# =============================================================================

class TestLoadSeeds:
    """Test reading <seeds_dir>/<seed_name>.json."""

    def test_missing_file_yields_nothing(self, options, store, tmp_path):
        service = IndicatorService(options, store, seeds_dir=tmp_path, seed_name="indicators")

        assert service.load_seeds() == []
        assert asyncio.run(service.seed()) == []

    def test_unset_location_yields_nothing(self, indicator_service):
        assert indicator_service.load_seeds() == []

    def test_single_object_file(self, options, store, tmp_path):
        (tmp_path / "indicators.json").write_text(json.dumps({"subject": "Water", "topic": "Water Supply"}))
        service = IndicatorService(options, store, seeds_dir=tmp_path, seed_name="indicators")

        assert service.load_seeds() == [{"subject": "Water", "topic": "Water Supply"}]

    @pytest.mark.parametrize("content", ["{not json", "42"])
    def test_malformed_file_raises(self, options, store, tmp_path, content):
        (tmp_path / "indicators.json").write_text(content)
        service = IndicatorService(options, store, seeds_dir=tmp_path, seed_name="indicators")

        with pytest.raises(InvalidSeedFileError):
            service.load_seeds()


# =============================================================================
# Resource Seeding Tests
# =============================================================================

class TestSeed:
    """Test ResourceService.seed."""

    def test_explicit_seeds_deduplicated(self, indicator_service, store):
        seeds = [
            {"subject": "Water", "topic": "Water Supply"},
            {"topic": "Water Supply", "subject": "Water"},
            None,
            {"subject": "Health", "topic": "Clinics"},
        ]

        seeded = asyncio.run(indicator_service.seed(seeds))

        assert len(seeded) == 2
        assert len(store.tables["indicators"]) == 2

    def test_same_key_seeds_merge_instead_of_conflicting(self, indicator_service, store):
        seeds = [
            {"subject": "Water", "topic": "Water Supply"},
            {"subject": "Water", "topic": "Water Supply", "description": "Sources"},
        ]

        asyncio.run(indicator_service.seed(seeds))

        rows = list(store.tables["indicators"].values())
        assert len(rows) == 1
        assert rows[0]["description"] == "Sources"

    def test_reseeding_keeps_existing_ids(self, indicator_service, store):
        first = asyncio.run(indicator_service.seed([{"subject": "Water", "topic": "Water Supply"}]))
        second = asyncio.run(
            indicator_service.seed([{"subject": "Water", "topic": "Water Supply", "icon": "drop.svg"}])
        )

        assert second[0]["id"] == first[0]["id"]
        assert second[0]["icon"] == "drop.svg"
        assert second[0]["color"] == first[0]["color"]

    def test_base_seeded_before_derived(self, indicator_service, store):
        base_id = "5c1e0b7a-3f1e-4c8a-9a2b-1d2f3e4a5b01"
        seeds = [
            {"subject": "Water", "topic": "Water Quality", "base": base_id},
            {"id": base_id, "subject": "Water", "topic": "Water Supply"},
        ]

        asyncio.run(indicator_service.seed(seeds))

        assert len(store.tables["indicators"]) == 2

    def test_non_object_seed_rejected(self, indicator_service):
        with pytest.raises(DocumentValidationError):
            asyncio.run(indicator_service.seed(["Water"]))

    def test_invalid_seed_stops_seeding(self, question_service):
        with pytest.raises(InvalidReferenceError):
            asyncio.run(
                question_service.seed(
                    [{"indicator": "5c1e0b7a-3f1e-4c8a-9a2b-1d2f3e4a5b99", "label": "How many?"}]
                )
            )


# =============================================================================
# seed_all Tests
# =============================================================================

class TestSeedAll:
    """Test seeding every resource from the bundled fixtures."""

    def test_bundled_fixtures(self, options, store):
        counts = asyncio.run(seed_all(make_services(options, store, SEEDS_DIR)))

        assert counts == {"indicators": 4, "questions": 4, "questionnaires": 1}

    def test_idempotent(self, options, store):
        services = make_services(options, store, SEEDS_DIR)

        asyncio.run(seed_all(services))
        snapshot = {table: set(rows) for table, rows in store.tables.items()}
        asyncio.run(seed_all(services))

        assert {table: set(rows) for table, rows in store.tables.items()} == snapshot

    def test_reseeding_restores_fixture_values(self, options, store):
        services = make_services(options, store, SEEDS_DIR)
        asyncio.run(seed_all(services))
        supply_id = "5c1e0b7a-3f1e-4c8a-9a2b-1d2f3e4a5b01"
        services[0].patch(supply_id, {"description": "Edited by hand", "icon": "drop.svg"})

        asyncio.run(seed_all(services))
        found = services[0].get_by_id(supply_id)

        assert found["description"] == "Availability and sources of drinking water"
        assert found["icon"] == "drop.svg"

    def test_reseeding_keeps_renamed_question(self, options, store):
        services = make_services(options, store, SEEDS_DIR)
        asyncio.run(seed_all(services))
        question_id = "7d2f1c8b-4a2f-4d9b-8b3c-2e3f4a5b6c01"
        services[1].patch(question_id, {"name": "prior_water_supply"})

        asyncio.run(seed_all(services))
        found = services[1].get_by_id(question_id)

        assert found["name"] == "prior_water_supply"
        assert found["label"] == "Was there water supply before?"

    def test_seeded_questionnaire_populated_in_order(self, options, store):
        services = make_services(options, store, SEEDS_DIR)
        asyncio.run(seed_all(services))

        questionnaire = services[2].get_by_id("9e3a2d9c-5b3a-4eac-9c4d-3f4a5b6c7d01")

        assert [q["name"] for q in questionnaire["questions"]] == [
            "how_many_households_lack_drinking_water",
            "what_health_services_are_most_needed",
            "was_there_water_supply_before",
        ]

    def test_runs_in_order_and_stops_on_failure(self):
        calls = []

        def service(table, error=None):
            mock = MagicMock()
            mock.table = table

            async def seed():
                calls.append(table)
                if error:
                    raise error
                return [{}]

            mock.seed = AsyncMock(side_effect=seed)
            return mock

        services = [
            service("indicators"),
            service("questions", error=RuntimeError("boom")),
            service("questionnaires"),
        ]

        with pytest.raises(RuntimeError):
            asyncio.run(seed_all(services))

        assert calls == ["indicators", "questions"]
