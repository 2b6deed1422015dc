# =============================================================================
# core/models/question.py - Question Schemas
# =============================================================================
# A question assesses exactly one indicator. It carries the literal prompt
# (label), the entry type and, for selection types, an ordered set of choices.
#
# The question name is its unique variable name, used to tell responses to
# one question apart from another during analysis. When no name is supplied
# it is derived from the label:
#
#   "Was there water supply before?" -> "was_there_water_supply_before"
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lib.utils import snake_case

from .common import ClassifiedDocument, Reference


def derive_name_from_label(data: Any) -> Any:
    """Fill an empty `name` from `label`; an explicit name is never touched."""
    if not isinstance(data, dict):
        return data
    name = data.get("name")
    if isinstance(name, str) and name.strip():
        return data
    derived = snake_case(data.get("label"))
    data = {key: value for key, value in data.items() if key != "name"}
    if derived:
        data["name"] = derived
    return data


class Choice(BaseModel):
    """
    A single allowed option of a selection question.

    Example:
        {"label": "Yes", "name": "yes"}
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    label: str = Field(
        ...,
        min_length=1,
        description="Human readable label of the choice"
    )

    name: str = Field(
        ...,
        min_length=1,
        description="Value recorded when the choice is selected"
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_name(cls, data: Any) -> Any:
        return derive_name_from_label(data)


class QuestionDocument(ClassifiedDocument):
    """
    Schema of a question as it is validated and stored.

    Example:
        {
            "indicator": "5bcda2c0-73dd-4700-848f-b84600000001",
            "assess": "Need",
            "stage": "Before",
            "type": "select_one",
            "label": "Was there water supply before the disaster?",
            "choices": [{"label": "Yes"}, {"label": "No"}]
        }
    """

    indicator: Reference = Field(
        ...,
        description="Id of the indicator the question assesses"
    )

    name: str = Field(
        ...,
        min_length=1,
        description="Unique variable name (defaults to snake_case of label)"
    )

    label: str = Field(
        ...,
        min_length=1,
        description="The actual question respondents get asked"
    )

    help: str | None = Field(
        default=None,
        description="Additional details that clarify the question"
    )

    choices: list[Choice] | None = Field(
        default=None,
        description="Allowed choices (selection options) of the question"
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_name(cls, data: Any) -> Any:
        return derive_name_from_label(data)
