# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the assessment business logic:
# - models/: Pydantic schemas for indicators, questions and questionnaires
# - services/: CRUD, listing, population and seeding per resource
#
# Services raise the exceptions defined in app/exceptions.py; routing,
# request parsing and responses stay in app/, storage access in lib/.
# =============================================================================
