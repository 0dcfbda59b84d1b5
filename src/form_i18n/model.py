"""
Core Form Model Objects

Defines the data structures shared by the extractor and the translation store.

These are pure data classes representing:
    - Answer options (selectable choices of a question)
    - Questions (recursive: a question may hold child questions)
    - Sections and pages (the containers of a form)
    - Schemas (root container)
    - Translation records (per-language label translations of one schema)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering or storage
        - Treat the schema tree as read-only input
        - Keep translation records immutable (updates build new records)
        - Are fully serializable
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import List, Optional, Mapping, Iterator


@dataclass
class AnswerOption:
    """
    A selectable answer of a question.

    Properties:
        label: Human-readable answer text (may be absent)
        concept: Identifier of the coded answer (optional, not translated)
    """

    label: Optional[str] = None
    concept: Optional[str] = None


@dataclass
class Question:
    """
    A single question of a form section.

    Questions nest: an obs-group style question holds child questions
    of exactly the same shape, to any depth.

    Properties:
        id:
            Question identifier within the form (optional)

        label:
            Human-readable question text (may be absent)

        answers:
            Answer options offered by the question, in display order

        questions:
            Nested child questions, in display order

    ARCHITECTURAL RULE:
        Nesting depth is unbounded.
        Nothing may assume a fixed number of levels.
    """

    id: Optional[str] = None
    label: Optional[str] = None
    answers: List[AnswerOption] = field(default_factory=list)
    questions: List["Question"] = field(default_factory=list)

    def walk(self) -> Iterator["Question"]:
        """Yield this question and every nested question, depth first."""
        yield self
        for child in self.questions:
            yield from child.walk()


@dataclass
class Section:
    """A labelled group of questions on a page."""

    label: Optional[str] = None
    questions: List[Question] = field(default_factory=list)


@dataclass
class Page:
    """A labelled page of a form."""

    label: Optional[str] = None
    sections: List[Section] = field(default_factory=list)


@dataclass
class Schema:
    """
    Root container of a form definition.

    Properties:
        uuid:
            Schema identity. Translation records are keyed by it.

        name:
            Display name of the form

        pages:
            Pages of the form, in display order

    INVARIANTS:
        - Labels may be missing on any node
        - Missing containers are empty lists, never None
    """

    uuid: str
    name: str = ""
    pages: List[Page] = field(default_factory=list)

    def iter_questions(self) -> Iterator[Question]:
        """Yield every question of the form, nested ones included."""
        for page in self.pages:
            for section in page.sections:
                for question in section.questions:
                    yield from question.walk()

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID, searching nested questions too.

        Args:
            question_id: Question identifier

        Returns:
            Question object or None if not found
        """
        for question in self.iter_questions():
            if question.id == question_id:
                return question
        return None


@dataclass(frozen=True)
class TranslationRecord:
    """
    Translations of one schema's labels into one language.

    Properties:
        id:
            Unique record identifier (opaque)

        form_id:
            Identifier of the owning schema

        description:
            Free text, e.g. "Translations for fr"

        language_code:
            ISO-639-1 style code. Unique within a schema's records.

        entries:
            Translation key -> translated text. Read-only view.

    ARCHITECTURAL RULE:
        Records are values. An update never mutates a record that a caller
        may still hold; it builds a new one (see with_entries).
    """

    id: str
    form_id: str
    description: str
    language_code: str
    entries: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def with_entries(self, updates: Mapping[str, str]) -> "TranslationRecord":
        """
        Return a copy of this record with `updates` merged into its entries.

        Existing keys not named in `updates` are kept; named keys are overwritten.
        """
        merged = dict(self.entries)
        merged.update(updates)
        return replace(self, entries=merged)
