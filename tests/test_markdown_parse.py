"""
Tests for Markdown parsing: the documented scenarios, fallbacks, warnings
and the export/parse round trip.
"""

import pendulum

from kasten.markdown.export import export_note
from kasten.markdown.front_matter import FrontMatter, read_front_matter
from kasten.markdown.parse import parse
from kasten.model.markdown import IssueKind, Severity

NOW = pendulum.datetime(2024, 5, 1, 12, tz="UTC")


def make_note(**overrides):
    note = {
        "id": "n1",
        "title": "Cellule",
        "content": "Unité de base du vivant.\n\nDeuxième paragraphe.",
        "tags": ["biologie", "cours"],
        "metadata": {
            "created": pendulum.datetime(2023, 9, 1, 8, tz="UTC"),
            "updated": pendulum.datetime(2023, 9, 2, 8, tz="UTC"),
            "extra": {"chapitre": 3, "auteur": "Marie"},
        },
    }
    note.update(overrides)
    return note


class TestParseScenarios:
    """Test the reference documents."""

    def test_minimal_document(self):
        document = '---\ntitle: "T"\ntags: ["x"]\n---\n\n## Contenu\nBody text'

        result = parse(document, NOW)

        assert result["success"] is True
        assert result["errors"] == []
        note = result["data"]["note"]
        assert note["title"] == "T"
        assert note["tags"] == ["x"]
        assert note["content"] == "Body text"
        assert result["data"]["flashcards"] == []

    def test_missing_opening_fence(self):
        result = parse("title: T\n---\n\n## Contenu\nBody", NOW)

        assert result["success"] is False
        assert result["data"] is None
        assert result["errors"][0]["line"] == 1
        assert result["errors"][0]["kind"] == IssueKind.MALFORMED_DOCUMENT
        assert result["errors"][0]["severity"] == Severity.ERROR


class TestParseFailures:
    """Test documents that cannot be imported."""

    def test_unclosed_front_matter(self):
        result = parse("---\ntitle: T\n\n## Contenu\nBody", NOW)

        assert result["success"] is False
        assert result["errors"][0]["line"] == 1
        assert result["errors"][0]["kind"] == IssueKind.MALFORMED_DOCUMENT

    def test_invalid_yaml(self):
        result = parse("---\ntitle: [unclosed\n---\nBody", NOW)

        assert result["success"] is False
        assert result["errors"][0]["kind"] == IssueKind.INVALID_FRONT_MATTER

    def test_front_matter_not_a_mapping(self):
        result = parse("---\n- a\n- b\n---\nBody", NOW)

        assert result["success"] is False
        assert result["errors"][0]["kind"] == IssueKind.INVALID_FRONT_MATTER

    def test_missing_title(self):
        result = parse("---\ntags: [a]\n---\n\n## Contenu\nBody", NOW)

        assert result["success"] is False
        assert result["errors"][0]["kind"] == IssueKind.INVALID_FRONT_MATTER
        assert result["errors"][0]["line"] == 3

    def test_blank_title(self):
        result = parse('---\ntitle: "   "\n---\nBody', NOW)

        assert result["success"] is False


class TestParseFallbacks:
    """Test what happens when optional sections are missing."""

    def test_content_falls_back_to_body(self):
        result = parse("---\ntitle: Flat\n---\n\nJust a body.\n", NOW)

        assert result["success"] is True
        assert result["data"]["note"]["content"] == "Just a body."

    def test_tags_section_wins_over_front_matter(self):
        document = "---\ntitle: T\ntags: [a]\n---\n\n## Tags\n\n- b\n- c\n\n## Contenu\n\nx"

        assert parse(document, NOW)["data"]["note"]["tags"] == ["b", "c"]

    def test_tags_are_deduplicated(self):
        document = "---\ntitle: T\n---\n\n## Tags\n\n- b\n- b\n\n## Contenu\n\nx"

        assert parse(document, NOW)["data"]["note"]["tags"] == ["b"]

    def test_dates_default_to_now(self):
        metadata = parse("---\ntitle: T\n---\n\nx", NOW)["data"]["note"]["metadata"]

        assert metadata["created"] == NOW
        assert metadata["updated"] == NOW

    def test_front_matter_dates_win(self):
        document = (
            "---\ntitle: T\ncreatedAt: 2022-02-02T10:00:00+00:00\n---\n\n"
            "## Contenu\n\nx\n\n## Métadonnées\n\n"
            "- Date de création : 2021-01-01T00:00:00+00:00"
        )

        metadata = parse(document, NOW)["data"]["note"]["metadata"]

        assert metadata["created"] == pendulum.datetime(2022, 2, 2, 10, tz="UTC")
        assert "createdAt" not in metadata["extra"]

    def test_unparsable_date_is_a_warning(self):
        result = parse("---\ntitle: T\nupdatedAt: someday\n---\n\nx", NOW)

        assert result["success"] is True
        assert result["errors"][0]["severity"] == Severity.WARNING
        assert result["data"]["note"]["metadata"]["updated"] == NOW

    def test_tags_not_a_list_is_a_warning(self):
        result = parse("---\ntitle: T\ntags: solo\n---\n\nx", NOW)

        assert result["success"] is True
        assert result["errors"][0]["severity"] == Severity.WARNING
        assert result["data"]["note"]["tags"] == []

    def test_crlf_and_bom(self):
        document = "\ufeff---\r\ntitle: T\r\n---\r\n\r\n## Contenu\r\n\r\nBody\r\n"

        result = parse(document, NOW)

        assert result["success"] is True
        assert result["data"]["note"]["content"] == "Body"

    def test_unknown_sections_are_ignored(self):
        document = "---\ntitle: T\n---\n\n## Contenu\n\nBody\n\n## Annexe\n\nignored"

        assert parse(document, NOW)["data"]["note"]["content"] == "Body"

    def test_unknown_section_is_a_warning(self):
        document = "---\ntitle: T\n---\n\n## Contenu\n\nBody\n\n## Annexe\n\nignored"

        result = parse(document, NOW)

        assert result["success"] is True
        assert len(result["errors"]) == 1
        assert result["errors"][0]["severity"] == Severity.WARNING
        assert result["errors"][0]["line"] == 9
        assert "Annexe" in result["errors"][0]["message"]

    def test_only_updated_date_keeps_dates_ordered(self):
        document = "---\ntitle: T\nupdatedAt: 2020-01-01T00:00:00+00:00\n---\n\nx"

        metadata = parse(document, NOW)["data"]["note"]["metadata"]

        assert metadata["updated"] == pendulum.datetime(2020, 1, 1, tz="UTC")
        assert metadata["created"] == metadata["updated"]

    def test_only_created_date_sets_updated_to_now(self):
        document = (
            "---\ntitle: T\n---\n\n## Contenu\n\nx\n\n## Métadonnées\n\n"
            "- Date de création : 2020-01-01T00:00:00+00:00"
        )

        metadata = parse(document, NOW)["data"]["note"]["metadata"]

        assert metadata["created"] == pendulum.datetime(2020, 1, 1, tz="UTC")
        assert metadata["updated"] == NOW

    def test_created_after_now_is_kept(self):
        later = pendulum.datetime(2030, 1, 1, tz="UTC")
        document = f"---\ntitle: T\ncreatedAt: {later.isoformat()}\n---\n\nx"

        metadata = parse(document, NOW)["data"]["note"]["metadata"]

        assert metadata["created"] == later
        assert metadata["updated"] == later

    def test_unreadable_metadata_date_is_a_warning(self):
        document = (
            "---\ntitle: T\n---\n\n## Contenu\n\nx\n\n## Métadonnées\n\n"
            "- Date de création : hier"
        )

        result = parse(document, NOW)

        assert result["success"] is True
        assert result["errors"][0]["severity"] == Severity.WARNING
        assert result["errors"][0]["line"] == 9
        assert "hier" in result["errors"][0]["message"]
        assert result["data"]["note"]["metadata"]["created"] == NOW


class TestParseFlashcards:
    """Test flashcard blocks."""

    def test_incomplete_blocks_are_skipped(self):
        document = (
            "---\ntitle: T\n---\n\n## Contenu\n\nx\n\n## Flashcards\n\n"
            "### Question\nQ1\n\n### Réponse\nA1\n\n"
            "### Question\nNo answer here\n\n"
            "### Question\n\n### Réponse\nA3\n\n"
            "### Question\nQ4\n\n### Réponse\nA4"
        )

        result = parse(document, NOW)

        assert result["success"] is True
        assert result["data"]["flashcards"] == [
            {"question": "Q1", "answer": "A1"},
            {"question": "Q4", "answer": "A4"},
        ]

    def test_multiline_answers(self):
        document = (
            "---\ntitle: T\n---\n\n## Contenu\n\nx\n\n## Flashcards\n\n"
            "### Question\nList them\n\n### Réponse\n- one\n- two"
        )

        flashcards = parse(document, NOW)["data"]["flashcards"]

        assert flashcards == [{"question": "List them", "answer": "- one\n- two"}]


class TestRoundTrip:
    """Test export followed by parse."""

    def test_round_trip_preserves_the_note(self):
        note = make_note()
        flashcards = [
            {"question": "Q1", "answer": "A1"},
            {"question": "Q2\nsur deux lignes", "answer": "A2"},
        ]

        result = parse(export_note(note, flashcards), NOW)

        assert result["success"] is True
        parsed = result["data"]["note"]
        assert parsed["title"] == note["title"]
        assert set(parsed["tags"]) == set(note["tags"])
        assert parsed["content"] == note["content"]
        assert parsed["metadata"]["created"] == note["metadata"]["created"]
        assert parsed["metadata"]["updated"] == note["metadata"]["updated"]
        assert parsed["metadata"]["extra"] == note["metadata"]["extra"]
        assert result["data"]["flashcards"] == flashcards

    def test_export_is_idempotent(self):
        note = make_note()
        flashcards = [{"question": "Q1", "answer": "A1"}]
        first = export_note(note, flashcards)

        parsed = parse(first, NOW)["data"]
        second = export_note(dict(parsed["note"], id="n2"), parsed["flashcards"])

        assert second == first


class TestReadFrontMatter:
    """Test the front matter reader shared by parse and validate."""

    def test_returns_block_and_values(self):
        loaded = read_front_matter("\ufeff---\r\ntitle: T\r\nlevel: 2\r\n---\r\nBody")

        assert isinstance(loaded, FrontMatter)
        assert loaded.values == {"title": "T", "level": 2}
        assert loaded.block.closing_line == 4
        assert loaded.block.body == "Body"

    def test_missing_fence_is_an_issue(self):
        loaded = read_front_matter("title: T")

        assert loaded["kind"] == IssueKind.MALFORMED_DOCUMENT
        assert loaded["severity"] == Severity.ERROR

    def test_yaml_error_is_an_issue(self):
        loaded = read_front_matter("---\ntitle: [x\n---\n")

        assert loaded["kind"] == IssueKind.INVALID_FRONT_MATTER
        assert loaded["severity"] == Severity.ERROR
