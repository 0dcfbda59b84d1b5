"""
Serialization helpers for form schemas and translation records.

Provides dict/JSON/YAML conversion via intermediate dict representation.

Schema documents use the form JSON layout:
    pages[].sections[].questions[], answers under questionOptions.answers,
    nested questions under questions.

Translation records use the persisted layout:
    {"id", "form", "description", "language", "translations"}
"""
from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from form_i18n.model import (
    Schema,
    Page,
    Section,
    Question,
    AnswerOption,
    TranslationRecord,
)


class SchemaParseError(Exception):
    """Raised when a schema document cannot be read."""
    pass


class RecordFormatError(Exception):
    """Raised when a translation record document has the wrong shape."""
    pass


# =========================================================================
# Schema
# =========================================================================


def _label(d: Dict[str, Any]) -> str | None:
    value = d.get("label")
    return value if isinstance(value, str) else None


def _mappings(items: Any, where: str) -> List[Dict[str, Any]]:
    """List entries that are mappings; anything else is skipped with a warning."""
    if items is None:
        return []
    if not isinstance(items, list):
        warnings.warn(f"Ignoring {where}: expected a list, got {type(items).__name__}", UserWarning)
        return []
    kept = []
    for index, item in enumerate(items):
        if isinstance(item, dict):
            kept.append(item)
        else:
            warnings.warn(f"Ignoring {where}[{index}]: not an object", UserWarning)
    return kept


def answer_from_dict(d: Dict[str, Any]) -> AnswerOption:
    return AnswerOption(label=_label(d), concept=d.get("concept"))


def question_from_dict(d: Dict[str, Any]) -> Question:
    options = d.get("questionOptions") or {}
    answers = options.get("answers") if isinstance(options, dict) else None
    return Question(
        id=d.get("id"),
        label=_label(d),
        answers=[answer_from_dict(a) for a in _mappings(answers, "answers")],
        questions=[question_from_dict(q) for q in _mappings(d.get("questions"), "questions")],
    )


def section_from_dict(d: Dict[str, Any]) -> Section:
    return Section(
        label=_label(d),
        questions=[question_from_dict(q) for q in _mappings(d.get("questions"), "questions")],
    )


def page_from_dict(d: Dict[str, Any]) -> Page:
    return Page(
        label=_label(d),
        sections=[section_from_dict(s) for s in _mappings(d.get("sections"), "sections")],
    )


def schema_from_dict(d: Any) -> Schema:
    if not isinstance(d, dict):
        raise SchemaParseError(f"Schema must be an object, got {type(d).__name__}")
    return Schema(
        uuid=str(d.get("uuid") or ""),
        name=d.get("name") or "",
        pages=[page_from_dict(p) for p in _mappings(d.get("pages"), "pages")],
    )


def question_to_dict(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": q.id, "label": q.label}
    if q.answers:
        d["questionOptions"] = {
            "answers": [{"label": a.label, "concept": a.concept} for a in q.answers]
        }
    if q.questions:
        d["questions"] = [question_to_dict(child) for child in q.questions]
    return d


def schema_to_dict(s: Schema) -> Dict[str, Any]:
    return {
        "uuid": s.uuid,
        "name": s.name,
        "pages": [
            {
                "label": page.label,
                "sections": [
                    {
                        "label": section.label,
                        "questions": [question_to_dict(q) for q in section.questions],
                    }
                    for section in page.sections
                ],
            }
            for page in s.pages
        ],
    }


def schema_from_json(s: str) -> Schema:
    try:
        d = json.loads(s)
    except ValueError as e:
        raise SchemaParseError(f"Invalid schema JSON: {e}")
    return schema_from_dict(d)


def schema_from_yaml(s: str) -> Schema:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise SchemaParseError(f"Invalid schema YAML: {e}")
    return schema_from_dict(d)


def load_schema(path: Union[str, Path]) -> Schema:
    """Read a schema file; .yaml/.yml files are parsed as YAML, anything else as JSON."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return schema_from_yaml(text)
    return schema_from_json(text)


# =========================================================================
# Translation records
# =========================================================================


def record_to_dict(r: TranslationRecord) -> Dict[str, Any]:
    return {
        "id": r.id,
        "form": r.form_id,
        "description": r.description,
        "language": r.language_code,
        "translations": dict(r.entries),
    }


def record_from_dict(d: Any) -> TranslationRecord:
    if not isinstance(d, dict):
        raise RecordFormatError(f"Translation record must be an object, got {type(d).__name__}")

    # older documents carry the identifier as "uuid"
    record_id = d.get("id") or d.get("uuid")
    language = d.get("language")
    entries = d.get("translations") or {}

    if not isinstance(language, str) or not language:
        raise RecordFormatError("Translation record has no language")
    if not isinstance(entries, dict):
        raise RecordFormatError(f"Translations for '{language}' must be an object")
    # YAML reads bare yes/no keys as booleans
    bad_keys = [k for k in entries if not isinstance(k, str)]
    if bad_keys:
        raise RecordFormatError(f"Non-text labels for '{language}': {bad_keys}")
    bad = [k for k, v in entries.items() if not isinstance(v, str)]
    if bad:
        raise RecordFormatError(f"Non-text translations for '{language}': {bad}")

    return TranslationRecord(
        id=str(record_id or ""),
        form_id=str(d.get("form") or ""),
        description=d.get("description") or "",
        language_code=language,
        entries=entries,
    )


def collection_to_json(items: List[Any]) -> str:
    """Serialize a persisted collection of record dicts."""
    return json.dumps(items, ensure_ascii=False)


def records_from_json(s: str) -> List[Any]:
    """
    Parse the persisted collection into raw record dicts.

    Records are returned undecoded so callers can keep entries they do
    not own (other schemas) unchanged.

    Raises:
        ValueError: If the text is not JSON or not a JSON array
    """
    d = json.loads(s)
    if not isinstance(d, list):
        raise ValueError(f"Expected a JSON array of translation records, got {type(d).__name__}")
    return d


def record_filename(r: TranslationRecord) -> str:
    return f"translations_{r.language_code}.json"


def export_record(r: TranslationRecord, path: Union[str, Path]) -> Path:
    """
    Write one record as a standalone document.

    Args:
        r: Record to export
        path: Target file, or a directory to place record_filename(r) in.
            A .yaml/.yml suffix writes YAML, anything else indented JSON.

    Returns:
        Path of the written file
    """
    path = Path(path)
    if path.is_dir():
        path = path / record_filename(r)
    if path.suffix.lower() in (".yaml", ".yml"):
        text = yaml.safe_dump(record_to_dict(r), allow_unicode=True, sort_keys=False)
    else:
        text = json.dumps(record_to_dict(r), ensure_ascii=False, indent=2)
    path.write_text(text, encoding="utf-8")
    return path


def import_record(path: Union[str, Path]) -> TranslationRecord:
    """
    Read a record document written by export_record (or by hand).

    Raises:
        RecordFormatError: If the file cannot be read or has the wrong shape
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            d = yaml.safe_load(text)
        else:
            d = json.loads(text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise RecordFormatError(f"Cannot read translation file {path.name}: {e}")
    return record_from_dict(d)
