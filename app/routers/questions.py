# =============================================================================
# app/routers/questions.py - Question Endpoints
# =============================================================================
# Questions belong to one indicator. A missing name is derived from the label
# ("Was there water supply before?" -> "was_there_water_supply_before").
# =============================================================================

from app.dependencies import get_question_service
from app.routers.resource import build_router

router = build_router(get_question_service, "question")
