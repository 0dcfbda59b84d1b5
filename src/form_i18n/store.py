"""
Translation Store — per-schema, per-language label translations.

One store serves one schema. It owns that schema's translation records,
answers lookups, applies upserts, and persists the records into a
key-value storage shared with other schemas.

Persisted layout (one storage key, default "formTranslations"):
    JSON array of {"id", "form", "description", "language", "translations"}

ARCHITECTURAL RULES:
    - Records of other schemas in storage are never altered
    - Records are replaced, never mutated (copy-on-write)
    - Nothing here raises for absent data; absence is a return value
    - Storage failures are logged and retried, never propagated
"""
from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from form_i18n.catalog import Language, list_languages
from form_i18n.config import StoreConfig
from form_i18n.model import Schema, TranslationRecord
from form_i18n.normalization import translation_key
from form_i18n.notifications import Notification, Notifier
from form_i18n.serialization import (
    RecordFormatError,
    collection_to_json,
    record_from_dict,
    record_to_dict,
    records_from_json,
)
from form_i18n.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)


class TranslationStore:
    """
    Translation records of one schema, backed by a key-value storage.

    Args:
        schema_id: Identity of the active schema
        storage: Durable storage shared by all schemas
        config: Store settings (defaults if omitted)
        notify: Receives user-visible notifications, e.g. when a save
            gives up after all retries
        sleep: Wait function used between write retries

    The store loads its records on construction.
    """

    def __init__(
        self,
        schema_id: str,
        storage: KeyValueStorage,
        config: Optional[StoreConfig] = None,
        notify: Optional[Notifier] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.schema_id = schema_id
        self.storage = storage
        self.config = config or StoreConfig()
        self._notify = notify
        self._sleep = sleep
        self._lock = threading.RLock()
        self._records: Tuple[TranslationRecord, ...] = ()
        self.pending_write = False
        self.load()

    @classmethod
    def for_schema(cls, schema: Schema, storage: KeyValueStorage, **kwargs: Any) -> "TranslationStore":
        return cls(schema.uuid, storage, **kwargs)

    def __enter__(self) -> "TranslationStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def translations(self) -> Optional[Tuple[TranslationRecord, ...]]:
        """Records of the active schema, or None when there are none."""
        return self._records or None

    def find_record(self, language_code: str) -> Optional[TranslationRecord]:
        for record in self._records:
            if record.language_code == language_code:
                return record
        return None

    def load(self) -> None:
        """(Re)read the active schema's records from storage."""
        with self._lock:
            self._records = self._read_own_records()
            self.pending_write = False
        logger.debug("Loaded %d translation record(s) for form %s", len(self._records), self.schema_id)

    def _read_collection(self) -> List[Any]:
        """
        Raw persisted collection.

        Raises:
            StorageError: If the storage cannot be read
            ValueError: If the stored value is not a JSON array
        """
        raw = self.storage.get(self.config.storage_key)
        if not raw:
            return []
        return records_from_json(raw)

    def _read_own_records(self) -> Tuple[TranslationRecord, ...]:
        try:
            collection = self._read_collection()
        except (StorageError, OSError) as e:
            logger.error("Failed to read stored translations: %s", e)
            return ()
        except ValueError as e:
            logger.error("Failed to parse stored translations: %s", e)
            return ()

        records: List[TranslationRecord] = []
        seen = set()
        for item in collection:
            if not isinstance(item, dict) or item.get("form") != self.schema_id:
                continue
            try:
                record = record_from_dict(item)
            except RecordFormatError as e:
                logger.warning("Skipping malformed translation record for form %s: %s", self.schema_id, e)
                continue
            if record.language_code in seen:
                logger.warning(
                    "Ignoring duplicate '%s' translation record %s for form %s",
                    record.language_code, record.id, self.schema_id,
                )
                continue
            seen.add(record.language_code)
            records.append(record)
        return tuple(records)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_languages(self) -> Tuple[Language, ...]:
        return list_languages()

    def get_translation(self, language_code: str, label: str) -> str:
        """
        Translation of `label` in `language_code`.

        Both the stored keys and `label` are compared by translation_key
        (whitespace-collapsed, lowercased), so entries persisted before
        keys were canonicalized still match.

        Returns:
            The translated text, or config.missing_translation when there
            is no record, no entries, or no (non-empty) entry for the label
        """
        missing = self.config.missing_translation
        record = self.find_record(language_code)
        if record is None or not record.entries:
            return missing

        wanted = translation_key(label)
        value = record.entries.get(wanted)
        if value is None:
            for key, candidate in record.entries.items():
                if translation_key(key) == wanted:
                    value = candidate
                    break
        return value or missing

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def _new_record(self, language_code: str) -> TranslationRecord:
        return TranslationRecord(
            id=str(uuid.uuid4()),
            form_id=self.schema_id,
            description=f"Translations for {language_code}",
            language_code=language_code,
            entries={},
        )

    def _put(self, record: TranslationRecord) -> None:
        """Swap `record` in for the record of its language, or append it."""
        records = list(self._records)
        for index, existing in enumerate(records):
            if existing.language_code == record.language_code:
                records[index] = record
                break
        else:
            records.append(record)
        self._records = tuple(records)

    def add_translations(
        self, language_code: str, translations: Mapping[str, str]
    ) -> Optional[TranslationRecord]:
        """
        Upsert several label translations of one language at once.

        Labels that normalize to nothing are skipped with a warning.

        Returns:
            The language's updated record, or None if nothing was applied
        """
        updates: Dict[str, str] = {}
        for label, value in translations.items():
            key = translation_key(label)
            if not key:
                logger.warning("Ignoring translation for an empty label in '%s'", language_code)
                continue
            updates[key] = value
        if not updates:
            return None

        with self._lock:
            record = self.find_record(language_code)
            if record is None:
                record = self._new_record(language_code)
            updated = record.with_entries(updates)
            self._put(updated)
            self.pending_write = True
            if self.config.autosave:
                self._persist()
        return updated

    def add_or_update_translation(
        self, language_code: str, label: str, translation: str
    ) -> Optional[TranslationRecord]:
        """
        Set the translation of one label, creating the language's record
        on first use.

        Existing entries of the record are kept. Records returned earlier
        are left untouched; the store holds a new record afterwards.
        """
        return self.add_translations(language_code, {label: translation})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save_translations(self, records: Optional[Iterable[TranslationRecord]] = None) -> bool:
        """
        Persist the active schema's records.

        Args:
            records: The complete record set to keep for the active schema.
                Becomes the in-memory state too. Records are re-bound to the
                active schema. None saves the current in-memory state.

        Returns:
            True if the write reached storage
        """
        with self._lock:
            if records is not None:
                self._records = ()
                for record in records:
                    if record.form_id != self.schema_id:
                        record = replace(record, form_id=self.schema_id)
                    self._put(record)
            self.pending_write = True
            return self._persist()

    def flush(self) -> bool:
        """Write the in-memory state if storage is behind it."""
        with self._lock:
            if not self.pending_write:
                return True
            return self._persist()

    def close(self) -> None:
        if not self.flush():
            logger.error("Closing translation store for form %s with unsaved changes", self.schema_id)

    def _write_once(self) -> None:
        try:
            collection = self._read_collection()
        except (StorageError, ValueError) as e:
            # the stored value is unusable anyway; only our records can be kept
            logger.warning("Overwriting unreadable stored translations: %s", e)
            collection = []

        others = [
            item for item in collection
            if not (isinstance(item, dict) and item.get("form") == self.schema_id)
        ]
        ours = [record_to_dict(r) for r in self._records]
        payload = collection_to_json(others + ours)
        self.storage.set(self.config.storage_key, payload)

    def _persist(self) -> bool:
        policy = self.config.retry
        delays = list(policy.delays())
        last_error: Optional[Exception] = None

        for attempt in range(1, policy.attempts + 1):
            try:
                self._write_once()
            except (StorageError, OSError) as e:
                last_error = e
                logger.warning(
                    "Failed to save translations for form %s (attempt %d/%d): %s",
                    self.schema_id, attempt, policy.attempts, e,
                )
                if attempt < policy.attempts:
                    self._sleep(delays[attempt - 1])
                continue
            self.pending_write = False
            logger.debug("Saved %d translation record(s) for form %s", len(self._records), self.schema_id)
            return True

        self.pending_write = True
        logger.error("Giving up saving translations for form %s: %s", self.schema_id, last_error)
        if self._notify is not None:
            self._notify(Notification.error("Failed to save translations", str(last_error)))
        return False
