# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Tests swap the store with app.dependency_overrides[get_store].
# =============================================================================

from typing import Annotated, Any

from fastapi import Depends, Request
from pydantic import ValidationError

from app.config import Settings, settings
from app.exceptions import InvalidQueryError
from core.models.listing import ListOptions
from core.models.options import AssessmentOptions
from core.services import (
    Collections,
    IndicatorService,
    QuestionnaireService,
    QuestionService,
    ResourceService,
)
from lib.supabase_client import SupabaseClient


def get_store() -> Any:
    """
    Get the document store.

    Returns the Supabase client wrapper class (all its methods are class
    methods).
    """
    return SupabaseClient


def get_options() -> AssessmentOptions:
    """Get the immutable assessment value sets."""
    return settings.assessment_options


def build_services(app_settings: Settings, store: Any) -> list[ResourceService]:
    """
    Build the three resource services in seeding order.

    Returns:
        [IndicatorService, QuestionService, QuestionnaireService]
    """
    common = {
        "collections": _collections(app_settings),
        "seeds_dir": app_settings.seeds_dir,
    }
    options = app_settings.assessment_options
    return [
        IndicatorService(options, store, seed_name=app_settings.INDICATOR_SEED, **common),
        QuestionService(options, store, seed_name=app_settings.QUESTION_SEED, **common),
        QuestionnaireService(options, store, seed_name=app_settings.QUESTIONNAIRE_SEED, **common),
    ]


def _collections(app_settings: Settings = settings) -> Collections:
    return Collections(
        indicators=app_settings.INDICATOR_COLLECTION_NAME,
        questions=app_settings.QUESTION_COLLECTION_NAME,
        questionnaires=app_settings.QUESTIONNAIRE_COLLECTION_NAME,
    )


def get_indicator_service(
    store: Annotated[Any, Depends(get_store)],
    options: Annotated[AssessmentOptions, Depends(get_options)],
) -> IndicatorService:
    return IndicatorService(options, store, collections=_collections())


def get_question_service(
    store: Annotated[Any, Depends(get_store)],
    options: Annotated[AssessmentOptions, Depends(get_options)],
) -> QuestionService:
    return QuestionService(options, store, collections=_collections())


def get_questionnaire_service(
    store: Annotated[Any, Depends(get_store)],
    options: Annotated[AssessmentOptions, Depends(get_options)],
) -> QuestionnaireService:
    return QuestionnaireService(options, store, collections=_collections())


def get_list_options(request: Request) -> ListOptions:
    """
    Parse list options from the query string.

    Raises:
        InvalidQueryError: If limit, skip or page are malformed
    """
    try:
        return ListOptions.from_query(request.query_params.multi_items())
    except ValidationError as e:
        raise InvalidQueryError(
            "Invalid list options",
            details={
                "errors": [
                    {"field": ".".join(str(p) for p in error["loc"]), "message": error["msg"]}
                    for error in e.errors()
                ]
            },
        )


# Type alias for dependency injection
ListOptionsDep = Annotated[ListOptions, Depends(get_list_options)]
