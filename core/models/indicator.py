# =============================================================================
# core/models/indicator.py - Indicator Schemas
# =============================================================================
# An indicator is a measure used to assess need, situation and
# characteristics of a disaster (or emergency) event, e.g.
# subject "Water" / topic "Water Supply".
#
# Indicators may reference a generic (base) indicator they are derived from.
# The (subject, topic) pair is unique across all indicators.
#
# See:
# - https://www.spherestandards.org/handbook/
# - http://xlsform.org/en/
# =============================================================================

from pydantic import Field, ValidationInfo, field_validator

from lib.utils import random_light_color

from .common import AssessmentDocument, Reference, check_choice, options_from


class IndicatorDocument(AssessmentDocument):
    """
    Schema of an indicator as it is validated and stored.

    Example:
        {
            "subject": "Water",
            "topic": "Water Supply",
            "color": "#20687C"
        }
    """

    # Top (generic or main) indicator this one is derived from.
    # When not set the indicator is treated as generic.
    base: Reference | None = Field(
        default=None,
        description="Base (generic) indicator id"
    )

    subject: str = Field(
        ...,
        min_length=1,
        description="Human readable subject of the indicator (e.g. Water)"
    )

    topic: str = Field(
        ...,
        min_length=1,
        description="Human readable topic of the indicator (e.g. Water Supply)"
    )

    description: str | None = Field(
        default=None,
        description="Brief summary (definition) of the indicator"
    )

    # Assigned a random light color when empty, always stored upper-cased
    color: str | None = Field(
        default=None,
        validate_default=True,
        description="Hex color code used to differentiate indicators visually"
    )

    icon: str | None = Field(
        default=None,
        description="Icon (url, base64 or svg) used to differentiate indicators visually"
    )

    @field_validator("subject", mode="after")
    @classmethod
    def _check_subject(cls, value: str, info: ValidationInfo) -> str:
        return check_choice("subject", value, options_from(info))

    @field_validator("color", mode="after")
    @classmethod
    def _ensure_color(cls, value: str | None) -> str:
        if not value:
            value = random_light_color()
        return value.upper()
