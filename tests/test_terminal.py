"""
Tests for the command line, run with typer's CliRunner against a
temporary config file and data directory.
"""

import zipfile

import pytest
from typer.testing import CliRunner

from kasten.initialize import initialize
from kasten.terminal.app import app
from kasten.terminal.markdown import _read_documents

runner = CliRunner()

VALID_DOCUMENT = "---\ntitle: Osmose\ntags: [eau]\n---\n\n## Contenu\n\nPassage de l'eau."


@pytest.fixture
def cli(config_path, data_path):
    """Invoke kasten with the temporary config and data directories."""

    def invoke(*args):
        return runner.invoke(
            app,
            ["--config", str(config_path), "--data-path", str(data_path), "--no-header"]
            + list(args),
        )

    return invoke


@pytest.fixture
def reload_store(config_path, data_path):
    return lambda: initialize(config_path, data_path)


class TestNoteCommands:
    """Test note commands."""

    def test_add_and_list(self, cli, reload_store):
        result = cli("note", "add", "--title", "Osmose", "--content", "Passage", "-g", "eau")

        assert result.exit_code == 0, result.output
        notes = reload_store().notes.get_all_notes()
        assert [note["title"] for note in notes] == ["Osmose"]
        assert notes[0]["tags"] == ["eau"]

        listed = cli("n", "ls")
        assert listed.exit_code == 0
        assert "Osmose" in listed.output

    def test_show_by_id_prefix(self, cli, reload_store):
        cli("note", "add", "--title", "Osmose", "--content", "Passage de l'eau")
        note_id = reload_store().notes.get_all_notes()[0]["id"]

        result = cli("note", "show", note_id[:8])

        assert result.exit_code == 0, result.output
        assert "Passage de l'eau" in result.output

    def test_unknown_id_is_a_usage_error(self, cli):
        result = cli("note", "show", "nothing")

        assert result.exit_code == 2

    def test_empty_title_is_reported(self, cli):
        result = cli("note", "add", "--title", "  ", "--content", "x")

        assert result.exit_code == 1
        assert "title cannot be empty" in result.output

    def test_level_two_heading_in_content_is_reported(self, cli, reload_store):
        result = cli("note", "add", "--title", "Osmose", "--content", "## Annexe")

        assert result.exit_code == 1
        assert "level-two headings" in result.output
        assert reload_store().notes.get_all_notes() == []

    def test_delete_cascades(self, cli, reload_store):
        cli("note", "add", "--title", "Osmose", "--content", "x")
        note_id = reload_store().notes.get_all_notes()[0]["id"]
        cli("card", "add", note_id, "-q", "Q", "-a", "A")

        result = cli("note", "delete", note_id, "--yes")

        assert result.exit_code == 0, result.output
        store = reload_store()
        assert store.notes.get_all_notes() == []
        assert store.flashcards.get_all_flashcards() == []


class TestCardCommands:
    """Test flashcard commands."""

    def test_add_review_and_due(self, cli, reload_store):
        cli("note", "add", "--title", "Osmose", "--content", "x")
        note_id = reload_store().notes.get_all_notes()[0]["id"]

        added = cli("card", "add", note_id, "-q", "Qu'est-ce ?", "-a", "Un passage")
        assert added.exit_code == 0, added.output
        card_id = reload_store().flashcards.get_all_flashcards()[0]["id"]

        reviewed = cli("c", "review", card_id, "--remembered", "--now", "2024-01-01")
        assert reviewed.exit_code == 0, reviewed.output

        card = reload_store().flashcards.get_flashcard(card_id)
        assert card["review_count"] == 1
        assert (card["next_review_date"] - card["last_reviewed"]).in_days() == 2

    def test_review_needs_an_outcome(self, cli):
        result = cli("card", "review", "whatever")

        assert result.exit_code == 2

    def test_empty_answer_is_reported(self, cli, reload_store):
        cli("note", "add", "--title", "Osmose", "--content", "x")
        note_id = reload_store().notes.get_all_notes()[0]["id"]

        result = cli("card", "add", note_id, "-q", "Q", "-a", " ")

        assert result.exit_code == 1
        assert "answer cannot be empty" in result.output


class TestMarkdownCommands:
    """Test import, export and validate."""

    def test_import_then_export(self, cli, tmp_path, reload_store):
        source = tmp_path / "osmose.md"
        source.write_text(VALID_DOCUMENT, encoding="utf-8")

        imported = cli("import", str(source))
        assert imported.exit_code == 0, imported.output
        note_id = reload_store().notes.get_all_notes()[0]["id"]

        out = tmp_path / "out"
        out.mkdir()
        exported = cli("export", "note", note_id, "-o", str(out))
        assert exported.exit_code == 0, exported.output
        text = (out / "osmose.md").read_text(encoding="utf-8")
        assert "## Contenu\n\nPassage de l'eau." in text
        assert "## Tags\n\n- eau" in text

    def test_import_zip_archive(self, cli, tmp_path, reload_store):
        archive_path = tmp_path / "notes.zip"
        with zipfile.ZipFile(archive_path, "w") as archive:
            archive.writestr("osmose.md", VALID_DOCUMENT)
            archive.writestr("readme.txt", "not a note")

        result = cli("i", str(archive_path))

        assert result.exit_code == 0, result.output
        assert [note["title"] for note in reload_store().notes.get_all_notes()] == [
            "Osmose"
        ]

    def test_import_failure_exits_1(self, cli, tmp_path):
        source = tmp_path / "broken.md"
        source.write_text("no front matter", encoding="utf-8")

        result = cli("import", str(source))

        assert result.exit_code == 1

    def test_unreadable_files_do_not_stop_the_batch(self, cli, tmp_path, reload_store):
        good = tmp_path / "good.md"
        good.write_text(VALID_DOCUMENT, encoding="utf-8")
        latin1 = tmp_path / "latin1.md"
        latin1.write_bytes("---\ntitle: Été\n---\n\nx".encode("latin-1"))
        not_a_zip = tmp_path / "broken.zip"
        not_a_zip.write_bytes(b"plain text, not an archive")

        result = cli("import", str(latin1), str(not_a_zip), str(good))

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "latin1.md" in result.output
        assert "broken.zip" in result.output
        assert [note["title"] for note in reload_store().notes.get_all_notes()] == [
            "Osmose"
        ]

    def test_read_documents_reports_each_unreadable_file(self, tmp_path):
        good = tmp_path / "good.md"
        good.write_text(VALID_DOCUMENT, encoding="utf-8")
        latin1 = tmp_path / "latin1.md"
        latin1.write_bytes("---\ntitle: Été\n---\n\nx".encode("latin-1"))
        not_a_zip = tmp_path / "broken.zip"
        not_a_zip.write_bytes(b"plain text, not an archive")
        archive_path = tmp_path / "mixed.zip"
        with zipfile.ZipFile(archive_path, "w") as archive:
            archive.writestr("ok.md", VALID_DOCUMENT)
            archive.writestr("bad.md", "titre: é".encode("latin-1"))

        documents, failures = _read_documents([latin1, not_a_zip, good, archive_path])

        assert [name for name, _ in documents] == ["good.md", "mixed.zip:ok.md"]
        assert [failure["name"] for failure in failures] == [
            "latin1.md",
            "broken.zip",
            "mixed.zip:bad.md",
        ]

    def test_export_all_zip(self, cli, tmp_path):
        cli("note", "add", "--title", "Hello, World! 2024", "--content", "x")
        archive_path = tmp_path / "export.zip"

        result = cli("export", "all", "--zip", "-o", str(archive_path))

        assert result.exit_code == 0, result.output
        with zipfile.ZipFile(archive_path) as archive:
            assert archive.namelist() == ["hello-world-2024.md"]

    def test_export_all_without_notes(self, cli):
        result = cli("export", "all")

        assert result.exit_code == 1
        assert "No notes to export" in result.output

    def test_validate(self, cli, tmp_path):
        good = tmp_path / "good.md"
        good.write_text(VALID_DOCUMENT, encoding="utf-8")
        bad = tmp_path / "bad.md"
        bad.write_text("---\ntags: [a]\n---\n\n## Contenu\n\nx", encoding="utf-8")

        assert cli("validate", str(good)).exit_code == 0
        assert cli("v", str(bad)).exit_code == 1


class TestConfigCommands:
    """Test config view and set."""

    def test_set_and_view(self, cli, config_path, reload_store):
        result = cli("config", "set", "--log-level", "info", "--import-overwrite")

        assert result.exit_code == 0, result.output
        config = reload_store().configuration.get_config()
        assert config["log_level"] == "INFO"
        assert config["import_overwrite"] is True

        viewed = cli("cf", "view")
        assert viewed.exit_code == 0
        assert "import_overwrite" in viewed.output

    def test_unknown_log_level(self, cli):
        assert cli("config", "set", "--log-level", "loud").exit_code == 2
