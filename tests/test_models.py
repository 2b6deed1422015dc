# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the document and listing models to ensure:
# - Valid data is accepted and defaults are derived
# - Invalid data raises ValidationError
# - Enumerations follow the AssessmentOptions passed as context
# - List query strings are parsed into ListOptions
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from core.models import (
    AssessmentOptions,
    Choice,
    IndicatorDocument,
    ListOptions,
    ListResponse,
    QuestionDocument,
    QuestionnaireDocument,
)


# =============================================================================
# Indicator Tests
# =============================================================================

class TestIndicatorDocument:
    """Test IndicatorDocument model."""

    def test_color_assigned_when_missing(self):
        """A random light color is assigned when none is given."""
        doc = IndicatorDocument.validate_document({"subject": "Water", "topic": "Water Supply"})

        assert doc.color.startswith("#")
        assert doc.color == doc.color.upper()

    def test_color_upper_cased(self):
        doc = IndicatorDocument.validate_document(
            {"subject": "Water", "topic": "Water Supply", "color": "#aabbcc"}
        )
        assert doc.color == "#AABBCC"

    def test_strings_trimmed(self):
        doc = IndicatorDocument.validate_document({"subject": " Water ", "topic": " Water Supply "})
        assert doc.subject == "Water"
        assert doc.topic == "Water Supply"

    def test_unknown_subject_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            IndicatorDocument.validate_document({"subject": "Weather", "topic": "Rain"})
        assert exc_info.value.errors()[0]["loc"] == ("subject",)

    def test_subjects_follow_options(self):
        options = AssessmentOptions(subjects=("Weather",))

        doc = IndicatorDocument.validate_document({"subject": "Weather", "topic": "Rain"}, options)
        assert doc.subject == "Weather"

        with pytest.raises(ValidationError):
            IndicatorDocument.validate_document({"subject": "Water", "topic": "Rain"}, options)

    def test_topic_required(self):
        with pytest.raises(ValidationError):
            IndicatorDocument.validate_document({"subject": "Water"})

    def test_populated_base_reduced_to_id(self):
        base_id = uuid4()
        doc = IndicatorDocument.validate_document(
            {"subject": "Water", "topic": "Water Quality", "base": {"id": str(base_id), "topic": "x"}}
        )
        assert doc.base == base_id

    def test_to_row_omits_unassigned_id(self):
        row = IndicatorDocument.validate_document({"subject": "Water", "topic": "Water Supply"}).to_row()

        assert "id" not in row
        assert row["base"] is None
        assert row["icon"] is None


# =============================================================================
# Question Tests
# =============================================================================

class TestQuestionDocument:
    """Test QuestionDocument model."""

    def test_name_derived_from_label(self):
        doc = QuestionDocument.validate_document(
            {"indicator": str(uuid4()), "label": "Was there water supply before?"}
        )
        assert doc.name == "was_there_water_supply_before"

    def test_explicit_name_kept(self):
        doc = QuestionDocument.validate_document(
            {"indicator": str(uuid4()), "label": "Was there water supply before?", "name": "ws_before"}
        )
        assert doc.name == "ws_before"

    def test_defaults_applied(self):
        doc = QuestionDocument.validate_document({"indicator": str(uuid4()), "label": "How many?"})

        assert doc.assess == "Other"
        assert doc.stage == "Other"
        assert doc.phase == "Response"
        assert doc.type == "text"

    def test_empty_enum_uses_default(self):
        doc = QuestionDocument.validate_document(
            {"indicator": str(uuid4()), "label": "How many?", "stage": ""}
        )
        assert doc.stage == "Other"

    def test_invalid_enum_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            QuestionDocument.validate_document(
                {"indicator": str(uuid4()), "label": "How many?", "type": "essay"}
            )
        assert exc_info.value.errors()[0]["loc"] == ("type",)

    def test_indicator_required(self):
        with pytest.raises(ValidationError):
            QuestionDocument.validate_document({"label": "How many?"})

    def test_label_without_words_fails_on_name(self):
        with pytest.raises(ValidationError) as exc_info:
            QuestionDocument.validate_document({"indicator": str(uuid4()), "label": "???"})
        assert ("name",) in [e["loc"] for e in exc_info.value.errors()]

    def test_choices_get_names(self):
        doc = QuestionDocument.validate_document(
            {
                "indicator": str(uuid4()),
                "label": "Water source?",
                "type": "select_one",
                "choices": [{"label": "Piped Water"}, {"label": "Well", "name": "w"}],
            }
        )
        assert [c.name for c in doc.choices] == ["piped_water", "w"]


class TestChoice:

    def test_label_required(self):
        with pytest.raises(ValidationError):
            Choice.model_validate({"name": "yes"})


# =============================================================================
# Questionnaire Tests
# =============================================================================

class TestQuestionnaireDocument:
    """Test QuestionnaireDocument model."""

    def test_questions_keep_order(self):
        ids = [uuid4(), uuid4(), uuid4()]
        doc = QuestionnaireDocument.validate_document(
            {"title": "Rapid Assessment", "questions": [str(i) for i in ids]}
        )
        assert doc.questions == ids

    def test_populated_questions_reduced_to_ids(self):
        question_id = uuid4()
        doc = QuestionnaireDocument.validate_document(
            {"title": "Rapid Assessment", "questions": [{"id": str(question_id), "name": "x"}]}
        )
        assert doc.questions == [question_id]

    def test_title_required(self):
        with pytest.raises(ValidationError):
            QuestionnaireDocument.validate_document({"label": "IRA"})

    def test_defaults(self):
        doc = QuestionnaireDocument.validate_document({"title": "Rapid Assessment"})
        assert doc.questions == []
        assert doc.assess == "Other"


# =============================================================================
# Listing Tests
# =============================================================================

class TestListOptions:
    """Test query string parsing."""

    def test_defaults(self):
        options = ListOptions.from_query([])

        assert options.limit == 10
        assert options.offset == 0
        assert options.sort_fields == [("updated_at", True)]

    def test_full_query(self):
        options = ListOptions.from_query(
            [
                ("q", "water"),
                ("filter[subject]", "Water"),
                ("filter[subject]", "Health"),
                ("filter[topic]", "Clinics"),
                ("select", "subject, topic"),
                ("sort", "subject,-topic"),
                ("limit", "5"),
                ("skip", "5"),
            ]
        )

        assert options.q == "water"
        assert options.filters == {"subject": ["Water", "Health"], "topic": ["Clinics"]}
        assert options.select == ["subject", "topic"]
        assert options.sort_fields == [("subject", False), ("topic", True)]
        assert options.offset == 5

    def test_page_wins_over_skip(self):
        options = ListOptions.from_query([("limit", "10"), ("skip", "3"), ("page", "3")])
        assert options.offset == 20

    @pytest.mark.parametrize("key,value", [("limit", "0"), ("limit", "101"), ("skip", "-1"), ("page", "x")])
    def test_invalid_numbers(self, key, value):
        with pytest.raises(ValidationError):
            ListOptions.from_query([(key, value)])


class TestListResponse:
    """Test pagination envelope math."""

    def test_build(self):
        data = [
            {"id": "a", "updated_at": "2024-01-01T00:00:00+00:00"},
            {"id": "b", "updated_at": "2024-03-01T00:00:00+00:00"},
        ]
        options = ListOptions(limit=2, page=2)

        response = ListResponse.build(data, total=5, options=options).to_dict()

        assert response["total"] == 5
        assert response["size"] == 2
        assert response["skip"] == 2
        assert response["page"] == 2
        assert response["pages"] == 3
        assert response["lastModified"] == "2024-03-01T00:00:00+00:00"

    def test_empty(self):
        response = ListResponse.build([], total=0, options=ListOptions()).to_dict()

        assert response["pages"] == 0
        assert response["page"] == 1
        assert response["lastModified"] is None
