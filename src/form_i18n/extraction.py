"""
Label Extractor — collects the translatable labels of a form schema.

Walks pages, sections, questions (recursively), and answer options,
normalizing every present label into a set.

IMPORTANT: This module does NOT modify the schema.
Each call builds a fresh result; there is no state between calls.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Set, Tuple

from form_i18n.model import Schema, Question
from form_i18n.normalization import normalize_label, collation_key

NO_LABEL_PLACEHOLDER = "No label found"


def _add_label(labels: Set[str], label: Optional[str]) -> None:
    if label:
        normalized = normalize_label(label)
        # whitespace-only labels normalize to nothing
        if normalized:
            labels.add(normalized)


def _visit_questions(questions: Iterable[Question], labels: Set[str]) -> None:
    """Recursively collect question, answer and nested question labels."""
    for question in questions:
        _add_label(labels, question.label)
        for answer in question.answers:
            _add_label(labels, answer.label)
        if question.questions:
            _visit_questions(question.questions, labels)


def extract_labels(
    schema: Optional[Schema],
    key: Callable[[str], object] = collation_key,
) -> List[str]:
    """
    Return every unique normalized label of a schema, sorted for display.

    Args:
        schema: Form schema (None yields an empty list)
        key: Sort key. Defaults to a locale-independent collation; pass
            locale.strxfrm to sort by the process locale instead.

    Returns:
        Deduplicated, case-sensitive list of normalized labels
    """
    labels: Set[str] = set()
    if schema is None:
        return []

    for page in schema.pages:
        _add_label(labels, page.label)
        for section in page.sections:
            _add_label(labels, section.label)
            _visit_questions(section.questions, labels)

    return sorted(labels, key=key)


def question_labels(question: Question) -> Tuple[str, List[str]]:
    """
    Labels of a single question as shown by a question translation dialog.

    Returns:
        (question label, answer labels). A question without a label yields
        NO_LABEL_PLACEHOLDER; answers without a label are left out.
    """
    question_label = question.label or NO_LABEL_PLACEHOLDER
    answer_labels = [answer.label for answer in question.answers if answer.label]
    return question_label, answer_labels
