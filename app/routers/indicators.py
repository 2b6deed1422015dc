# =============================================================================
# app/routers/indicators.py - Indicator Endpoints
# =============================================================================
# Indicators group questions by subject and topic. Each may point to a base
# indicator, populated as {id, subject, topic, color}.
# =============================================================================

from app.dependencies import get_indicator_service
from app.routers.resource import build_router

router = build_router(get_indicator_service, "indicator")
