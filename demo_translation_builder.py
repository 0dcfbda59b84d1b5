"""
Demo: Extract the labels of the example form, translate a few into French,
persist them, reload, and export the French record.
"""

import logging
import tempfile
from pathlib import Path

from form_i18n.config import StoreConfig
from form_i18n.editor import TranslationEditor
from form_i18n.examples import build_example_registration_form
from form_i18n.storage import storage_for
from form_i18n.store import TranslationStore


def print_rows(editor):
    language = editor.selected_language
    print(f"  {'Original Label':<32} Translation in {language.display_name}")
    print(f"  {'-' * 32} {'-' * 30}")
    for row in editor.rows():
        print(f"  {row.original_label:<32} {row.translation or '-'}")
    print()


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    workdir = Path(tempfile.mkdtemp(prefix="form_i18n_demo_"))
    config = StoreConfig(storage_path=str(workdir / "storage.json"))
    storage = storage_for(config)
    schema = build_example_registration_form()

    print()
    print("=" * 70)
    print(f"TRANSLATION BUILDER: {schema.name}")
    print("=" * 70)
    print()

    with TranslationStore.for_schema(schema, storage, config=config) as store:
        editor = TranslationEditor(schema, store)
        print(f"📋 {len(editor.labels)} translatable labels")
        print(f"🌍 {len(store.list_languages())} languages available")
        print()

        editor.select_language("fr")
        editor.update_translation("First Name", "Prénom")
        editor.update_translation("Family name", "Nom de famille")
        editor.update_translation("Yes", "Oui")
        editor.update_translation("No", "Non")

        question = schema.get_question("allergies")
        note = editor.save_question_translation(question, "fr", "Allergies connues ?")
        print(f"💬 {note.kind.value}: {note.title}")
        note = editor.save_question_translation(question, None, "Allergies connues ?")
        print(f"💬 {note.kind.value}: {note.title}")
        print()

        print_rows(editor)

    reloaded = TranslationStore.for_schema(schema, storage_for(config), config=config)
    print("🔁 Reloaded from storage")
    print(f"  first  name -> {reloaded.get_translation('fr', 'first  name')}")
    print(f"  Sex         -> {reloaded.get_translation('fr', 'Sex')}")
    print()

    note, path = TranslationEditor(schema, reloaded).export_translation("fr", workdir)
    print(f"💾 {note.title}: {path}")
    print()


if __name__ == "__main__":
    main()
