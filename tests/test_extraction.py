"""
Tests for the Label Extractor.

These tests verify:
    - Every label kind is collected (page, section, question, answer)
    - Nesting of any depth is followed
    - Absent labels are skipped
    - Duplicates collapse after normalization
    - Output order is collation order and deterministic
"""

import locale

from form_i18n.model import Schema, Page, Section, Question, AnswerOption
from form_i18n.extraction import extract_labels, question_labels, NO_LABEL_PLACEHOLDER
from form_i18n.examples import build_example_registration_form


def _schema_with_questions(*questions) -> Schema:
    return Schema(uuid="s1", pages=[Page(label=None, sections=[Section(label=None, questions=list(questions))])])


class TestExtractLabels:
    """Test extract_labels()."""

    def test_no_pages_yields_empty(self):
        assert extract_labels(Schema(uuid="empty")) == []

    def test_none_schema_yields_empty(self):
        assert extract_labels(None) == []

    def test_empty_containers(self):
        """Pages without sections and sections without questions are fine."""
        schema = Schema(uuid="s", pages=[Page(label="P"), Page(label="Q", sections=[Section(label="S")])])
        assert extract_labels(schema) == ["P", "Q", "S"]

    def test_collects_all_label_kinds(self):
        schema = Schema(
            uuid="s",
            pages=[
                Page(
                    label="Page",
                    sections=[
                        Section(
                            label="Section",
                            questions=[
                                Question(label="Question", answers=[AnswerOption(label="Answer")]),
                            ],
                        )
                    ],
                )
            ],
        )
        assert extract_labels(schema) == ["Answer", "Page", "Question", "Section"]

    def test_absent_labels_skipped(self):
        """None, empty and whitespace-only labels never produce entries."""
        schema = _schema_with_questions(
            Question(label=None, answers=[AnswerOption(label=""), AnswerOption(label="   ")]),
            Question(label="Kept"),
        )
        assert extract_labels(schema) == ["Kept"]

    def test_deep_nesting(self):
        """Questions nested beyond any fixed depth are still visited."""
        innermost = Question(label="Level 0")
        question = innermost
        for level in range(1, 30):
            question = Question(label=f"Level {level}", questions=[question])
        labels = extract_labels(_schema_with_questions(question))
        assert len(labels) == 30
        assert "Level 0" in labels

    def test_nested_answers_collected(self):
        nested = Question(label="Child", answers=[AnswerOption(label="Deep answer")])
        labels = extract_labels(_schema_with_questions(Question(label="Parent", questions=[nested])))
        assert "Deep answer" in labels

    def test_duplicates_collapse_after_normalization(self):
        """The same text in different positions yields one entry."""
        schema = Schema(
            uuid="s",
            pages=[
                Page(label="Yes", sections=[
                    Section(label=" Yes ", questions=[
                        Question(label="Yes", answers=[AnswerOption(label="Yes\t")]),
                    ]),
                ]),
            ],
        )
        assert extract_labels(schema) == ["Yes"]

    def test_case_variants_are_distinct(self):
        """Extraction is case-sensitive."""
        labels = extract_labels(_schema_with_questions(
            Question(label="banana"), Question(label="Apple"), Question(label="apple "),
        ))
        assert labels == ["Apple", "apple", "banana"]

    def test_deterministic(self):
        schema = build_example_registration_form()
        assert extract_labels(schema) == extract_labels(schema)

    def test_does_not_modify_schema(self):
        schema = _schema_with_questions(Question(label="  spaced   out "))
        extract_labels(schema)
        assert schema.pages[0].sections[0].questions[0].label == "  spaced   out "

    def test_example_form(self):
        labels = extract_labels(build_example_registration_form())
        assert labels == [
            "Contact",
            "Contact details",
            "Demographics",
            "Family name",
            "Female",
            "First Name",
            "Known allergies?",
            "Male",
            "May we send SMS reminders?",
            "Medical history",
            "No",
            "Phone number",
            "Registration",
            "Sex",
            "Yes",
        ]

    def test_custom_sort_key(self):
        """A process-locale key can replace the default collation."""
        labels = extract_labels(_schema_with_questions(Question(label="b"), Question(label="a")), key=locale.strxfrm)
        assert labels == ["a", "b"]


class TestQuestionLabels:
    """Test question_labels()."""

    def test_question_and_answers(self):
        question = Question(label="Sex", answers=[AnswerOption(label="Male"), AnswerOption(label=None)])
        assert question_labels(question) == ("Sex", ["Male"])

    def test_missing_label_placeholder(self):
        label, answers = question_labels(Question())
        assert label == NO_LABEL_PLACEHOLDER
        assert answers == []
