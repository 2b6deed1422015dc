# =============================================================================
# app/routers/questionnaires.py - Questionnaire Endpoints
# =============================================================================
# Questionnaires hold an ordered list of question ids, populated in order.
# =============================================================================

from app.dependencies import get_questionnaire_service
from app.routers.resource import build_router

router = build_router(get_questionnaire_service, "questionnaire")
