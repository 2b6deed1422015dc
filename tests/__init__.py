# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the EMIS Questionnaire API:
# - test_utils.py: Name derivation, colors, de-duplication
# - test_models.py: Unit tests for Pydantic model validation
# - test_services.py: CRUD, references, population and listing
# - test_seed.py: Seed files and idempotent seeding
# - test_api.py: Endpoint tests through TestClient
# - test_config.py: Settings parsing
#
# Run tests with: pytest
# =============================================================================
