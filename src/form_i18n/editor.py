"""
Headless translation editor session.

Holds what a translation builder screen or a question translation dialog
needs besides rendering: the schema's labels, the selected language, the
label/translation table, saves with user-visible notifications, and
import/export of single translation records.

The store is passed in explicitly; nothing is looked up ambiently.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

from form_i18n.catalog import Language, language_name
from form_i18n.extraction import extract_labels, question_labels
from form_i18n.model import Question, Schema, TranslationRecord
from form_i18n.notifications import Notification
from form_i18n.serialization import RecordFormatError, export_record, import_record
from form_i18n.store import TranslationStore

logger = logging.getLogger(__name__)

MISSING_SELECTION = "Please select a language and provide a translation"
NO_QUESTION_LABEL = "This question has no label to translate"

# (language code, labels) -> {label: translation}
TranslationGenerator = Callable[[str, Sequence[str]], Mapping[str, str]]


@dataclass(frozen=True)
class TranslationRow:
    """One line of the label/translation table."""

    id: str
    original_label: str
    translation: Optional[str] = None


class TranslationEditor:
    """
    Editing session over one schema and its translation store.

    Args:
        schema: Schema being translated
        store: Store of that schema's translations
    """

    def __init__(self, schema: Schema, store: TranslationStore) -> None:
        self.store = store
        self.selected_language: Optional[Language] = None
        self.schema = schema
        self.labels: List[str] = extract_labels(schema)

    def set_schema(self, schema: Schema) -> None:
        """Take a changed schema; labels are re-extracted."""
        self.schema = schema
        self.labels = extract_labels(schema)

    def select_language(self, code: Optional[str]) -> Optional[Language]:
        """Select a catalog language by code. Unknown codes clear the selection."""
        self.selected_language = None
        if code:
            for language in self.store.list_languages():
                if language.code == code:
                    self.selected_language = language
                    break
        return self.selected_language

    # ------------------------------------------------------------------
    # Table
    # ------------------------------------------------------------------

    def rows(self) -> List[TranslationRow]:
        """Table rows for the selected language; empty until one is selected."""
        if self.selected_language is None:
            return []
        code = self.selected_language.code
        missing = self.store.config.missing_translation
        rows = []
        for index, label in enumerate(self.labels):
            value = self.store.get_translation(code, label)
            rows.append(TranslationRow(
                id=f"row-{index}",
                original_label=label,
                translation=None if value == missing else value,
            ))
        return rows

    def update_translation(self, label: str, translation: str) -> Optional[TranslationRecord]:
        """Table cell edit. Ignored while no language is selected."""
        if self.selected_language is None:
            return None
        return self.store.add_or_update_translation(self.selected_language.code, label, translation)

    # ------------------------------------------------------------------
    # Question dialog
    # ------------------------------------------------------------------

    def question_labels(self, question: Question) -> Tuple[str, List[str]]:
        return question_labels(question)

    def save_question_translation(
        self, question: Question, language_code: Optional[str], translation: Optional[str]
    ) -> Notification:
        """
        Save the translation of a question's label.

        Returns:
            A success notification, or a warning when the language, the
            text, or the question label is missing (nothing is saved then)
        """
        if not language_code or not translation:
            return Notification.warning(MISSING_SELECTION)
        if not question.label or not question.label.strip():
            return Notification.warning(NO_QUESTION_LABEL)
        self.store.add_or_update_translation(language_code, question.label, translation)
        return Notification.success("Success!")

    def save_answer_translation(
        self, language_code: Optional[str], answer_label: str, translation: Optional[str]
    ) -> Notification:
        if not language_code or not translation:
            return Notification.warning(MISSING_SELECTION)
        self.store.add_or_update_translation(language_code, answer_label, translation)
        return Notification.success("Success!")

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def available_translations(self) -> List[Tuple[str, TranslationRecord]]:
        """(language display name, record) for every stored language."""
        return [
            (language_name(record.language_code), record)
            for record in self.store.translations or ()
        ]

    def export_translation(
        self, language_code: str, destination: Union[str, Path]
    ) -> Tuple[Notification, Optional[Path]]:
        """
        Write the record of one language to a file.

        Args:
            language_code: Language to export
            destination: File path, or directory for translations_<code>.json

        Returns:
            (notification, written path or None)
        """
        record = self.store.find_record(language_code)
        if record is None:
            return Notification.warning("No translations available"), None
        try:
            path = export_record(record, destination)
        except OSError as e:
            logger.error("Error downloading translation: %s", e)
            return Notification.error("Failed to download translation", str(e)), None
        return Notification.success(f"Downloaded translation for {language_name(language_code)}"), path

    def import_translation(self, source: Union[str, Path]) -> Notification:
        """
        Merge a record file into the store.

        The file's entries are upserted into the record of its language;
        entries already in the store and absent from the file are kept.
        """
        try:
            record = import_record(source)
        except RecordFormatError as e:
            logger.warning("Rejected translation file: %s", e)
            return Notification.error("Invalid translation file", str(e))
        if not record.entries:
            return Notification.warning(f"No translations in {Path(source).name}")
        self.store.add_translations(record.language_code, record.entries)
        return Notification.success(
            f"Imported {len(record.entries)} translation(s) for {language_name(record.language_code)}"
        )

    def apply_generated_translations(
        self, language_code: str, generator: TranslationGenerator
    ) -> Notification:
        """
        Fill in translations produced by an external generator.

        Only labels without a translation are sent to the generator; its
        results go through the regular upsert.
        """
        missing = self.store.config.missing_translation
        todo = [
            label for label in self.labels
            if self.store.get_translation(language_code, label) == missing
        ]
        if not todo:
            return Notification.success("All labels are already translated")
        generated = {label: text for label, text in generator(language_code, todo).items() if text}
        if not generated:
            return Notification.warning("No translations were generated")
        self.store.add_translations(language_code, generated)
        return Notification.success(f"Generated {len(generated)} translation(s)")
