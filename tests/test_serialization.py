"""
Tests for serialization of schemas and translation records.

These tests ensure schema documents in the form JSON layout are read
faithfully and that translation records survive file export/import.
"""

import json

import pytest
import yaml

from form_i18n.model import TranslationRecord
from form_i18n.examples import build_example_registration_form
from form_i18n.extraction import extract_labels
from form_i18n.serialization import (
    SchemaParseError,
    RecordFormatError,
    schema_from_dict,
    schema_to_dict,
    schema_from_json,
    schema_from_yaml,
    load_schema,
    record_to_dict,
    record_from_dict,
    records_from_json,
    record_filename,
    export_record,
    import_record,
)

FORM_JSON = {
    "uuid": "form-1",
    "name": "Vitals",
    "pages": [
        {
            "label": "Visit",
            "sections": [
                {
                    "label": "Vitals",
                    "questions": [
                        {
                            "id": "pregnant",
                            "label": "Pregnant?",
                            "questionOptions": {
                                "rendering": "radio",
                                "answers": [{"concept": "1065AAAA", "label": "Yes"}, {"concept": "1066AAAA"}],
                            },
                        },
                        {
                            "id": "group",
                            "label": "Measurements",
                            "questions": [{"id": "weight", "label": "Weight (kg)"}],
                        },
                    ],
                }
            ],
        }
    ],
}


def sample_record() -> TranslationRecord:
    return TranslationRecord(
        id="rec-1",
        form_id="form-1",
        description="Translations for fr",
        language_code="fr",
        entries={"pregnant?": "Enceinte ?", "weight (kg)": "Poids (kg)"},
    )


class TestSchemaFromDict:
    """Test reading the form JSON layout."""

    def test_reads_tree(self):
        schema = schema_from_dict(FORM_JSON)
        assert schema.uuid == "form-1"
        question = schema.get_question("pregnant")
        assert [a.label for a in question.answers] == ["Yes", None]
        assert schema.get_question("weight").label == "Weight (kg)"

    def test_missing_containers_are_empty(self):
        schema = schema_from_dict({"uuid": "x", "pages": [{"label": "Only page"}]})
        assert schema.pages[0].sections == []

    def test_non_object_schema_rejected(self):
        with pytest.raises(SchemaParseError):
            schema_from_dict(["not", "a", "schema"])

    def test_bad_nodes_skipped_with_warning(self):
        """A malformed node should be skipped, not fail the schema."""
        doc = {"uuid": "x", "pages": [{"label": "P", "sections": ["oops", {"label": "S"}]}]}
        with pytest.warns(UserWarning):
            schema = schema_from_dict(doc)
        assert [s.label for s in schema.pages[0].sections] == ["S"]

    def test_non_text_label_ignored(self):
        schema = schema_from_dict({"uuid": "x", "pages": [{"label": 42}]})
        assert schema.pages[0].label is None

    def test_dict_roundtrip_preserves_labels(self):
        schema = build_example_registration_form()
        restored = schema_from_dict(schema_to_dict(schema))
        assert extract_labels(restored) == extract_labels(schema)


class TestSchemaText:
    """Test JSON/YAML schema documents."""

    def test_invalid_json(self):
        with pytest.raises(SchemaParseError):
            schema_from_json("{not json")

    def test_invalid_yaml(self):
        with pytest.raises(SchemaParseError):
            schema_from_yaml("pages: [unclosed")

    def test_load_schema_by_suffix(self, tmp_path):
        json_path = tmp_path / "form.json"
        json_path.write_text(json.dumps(FORM_JSON), encoding="utf-8")
        yaml_path = tmp_path / "form.yaml"
        yaml_path.write_text(yaml.safe_dump(FORM_JSON), encoding="utf-8")
        assert extract_labels(load_schema(json_path)) == extract_labels(load_schema(yaml_path))


class TestRecordDicts:
    """Test the persisted record layout."""

    def test_record_to_dict_layout(self):
        assert record_to_dict(sample_record()) == {
            "id": "rec-1",
            "form": "form-1",
            "description": "Translations for fr",
            "language": "fr",
            "translations": {"pregnant?": "Enceinte ?", "weight (kg)": "Poids (kg)"},
        }

    def test_record_from_dict(self):
        assert record_from_dict(record_to_dict(sample_record())) == sample_record()

    def test_legacy_uuid_field(self):
        record = record_from_dict({"uuid": "old", "form": "f", "language": "de", "translations": {}})
        assert record.id == "old"

    def test_missing_translations_is_empty(self):
        record = record_from_dict({"id": "r", "form": "f", "language": "de"})
        assert dict(record.entries) == {}

    @pytest.mark.parametrize("doc", [
        [],
        {"id": "r", "form": "f"},
        {"id": "r", "form": "f", "language": "fr", "translations": ["a"]},
        {"id": "r", "form": "f", "language": "fr", "translations": {"a": 1}},
        {"id": "r", "form": "f", "language": "fr", "translations": {False: "Non"}},
    ])
    def test_malformed_records(self, doc):
        with pytest.raises(RecordFormatError):
            record_from_dict(doc)

    def test_collection_must_be_array(self):
        with pytest.raises(ValueError):
            records_from_json('{"id": "r"}')
        with pytest.raises(ValueError):
            records_from_json("not json")


class TestRecordFiles:
    """Test single-record export/import."""

    def test_filename(self):
        assert record_filename(sample_record()) == "translations_fr.json"

    def test_export_to_directory(self, tmp_path):
        path = export_record(sample_record(), tmp_path)
        assert path == tmp_path / "translations_fr.json"
        assert json.loads(path.read_text(encoding="utf-8"))["language"] == "fr"

    def test_export_keeps_unicode_readable(self, tmp_path):
        path = export_record(sample_record(), tmp_path / "fr.json")
        assert "Enceinte ?" in path.read_text(encoding="utf-8")

    def test_json_file_roundtrip(self, tmp_path):
        path = export_record(sample_record(), tmp_path / "fr.json")
        assert import_record(path) == sample_record()

    def test_yaml_file_roundtrip(self, tmp_path):
        path = export_record(sample_record(), tmp_path / "fr.yaml")
        assert import_record(path) == sample_record()

    def test_import_invalid_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(RecordFormatError):
            import_record(path)

    def test_import_missing_file(self, tmp_path):
        with pytest.raises(RecordFormatError):
            import_record(tmp_path / "absent.json")
