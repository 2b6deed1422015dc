# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the questionnaire web API:
# - main.py: App entry point, middleware setup, error handlers, seeding
# - config.py: Environment variable loading and settings
# - dependencies.py: Store, option and service injection
# - exceptions.py: Error types and their JSON responses
# - routers/: API endpoint definitions organized by resource
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
