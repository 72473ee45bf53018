"""
Tests for NoteService and FlashcardService.
"""

import pendulum
import pytest

from kasten.exceptions import (
    FlashcardNotFoundError,
    NoteNotFoundError,
    ValidationError,
)


class TestNoteService:
    """Test note invariants and cascading deletes."""

    def test_create_note(self, note_service):
        note = note_service.create_note("  Titre  ", "Contenu", tags=["a", "a", "b"])

        assert note["id"] is not None
        assert note["title"] == "Titre"
        assert note["tags"] == ["a", "b"]
        assert note["metadata"]["created"] == note["metadata"]["updated"]

    @pytest.mark.parametrize("title, content", [("", "x"), ("   ", "x"), ("T", "  \n ")])
    def test_empty_fields_are_rejected(self, note_service, title, content):
        with pytest.raises(ValidationError):
            note_service.create_note(title, content)

    def test_reserved_extra_keys_are_rejected(self, note_service):
        with pytest.raises(ValidationError):
            note_service.create_note("T", "x", extra={"createdAt": "2024-01-01"})

    def test_draft_dates_must_be_ordered(self, note_service):
        draft = {
            "title": "T",
            "content": "x",
            "tags": [],
            "metadata": {
                "created": pendulum.datetime(2024, 2, 1, tz="UTC"),
                "updated": pendulum.datetime(2024, 1, 1, tz="UTC"),
                "extra": {},
            },
        }

        with pytest.raises(ValidationError):
            note_service.create_note_from_draft(draft)

    def test_update_note_keeps_other_fields(self, note_service, sample_note):
        updated = note_service.update_note(sample_note["id"], title="Chlorophylle")

        assert updated["title"] == "Chlorophylle"
        assert updated["content"] == sample_note["content"]
        assert updated["tags"] == sample_note["tags"]
        assert updated["metadata"]["updated"] >= sample_note["metadata"]["updated"]

    def test_level_two_headings_in_content_are_rejected(self, note_service, sample_note):
        with pytest.raises(ValidationError):
            note_service.create_note("T", "Intro\n\n## Details\n\nMore")
        with pytest.raises(ValidationError):
            note_service.update_note(sample_note["id"], content="## Details")

        note = note_service.create_note("T", "# Title\n\n### Detail\n\nx")
        assert note["content"] == "# Title\n\n### Detail\n\nx"

    def test_update_note_from_draft(self, note_service, sample_note):
        draft = {
            "title": "Photosynthèse",
            "content": "Legacy body\n\n## Annexe\n\nkept",
            "tags": ["biologie", "biologie"],
            "metadata": {
                "created": pendulum.datetime(2020, 1, 1, tz="UTC"),
                "updated": pendulum.datetime(2020, 1, 1, tz="UTC"),
                "extra": {"page": 12},
            },
        }

        updated = note_service.update_note_from_draft(
            sample_note["id"], draft, remove_extra_keys=["source"]
        )

        assert updated["content"] == "Legacy body\n\n## Annexe\n\nkept"
        assert updated["tags"] == ["biologie"]
        assert updated["metadata"]["extra"] == {"page": 12}
        assert updated["metadata"]["created"] == sample_note["metadata"]["created"]

    def test_delete_cascades_to_flashcards(
        self, note_service, flashcard_service, sample_note, sample_flashcards
    ):
        deleted = note_service.delete_note(sample_note["id"])

        assert deleted == 2
        assert flashcard_service.get_all_flashcards() == []
        with pytest.raises(NoteNotFoundError):
            note_service.get_note(sample_note["id"])

    def test_delete_unknown_note(self, note_service):
        with pytest.raises(NoteNotFoundError):
            note_service.delete_note("missing")

    def test_search_and_tag_filter(self, note_service, sample_note):
        note_service.create_note("Mitose", "Division cellulaire", tags=["cellule"])

        assert [n["title"] for n in note_service.search_notes("CHIMIQUE")] == []
        assert [n["title"] for n in note_service.search_notes("energy")] == [
            "Photosynthèse"
        ]
        assert [n["title"] for n in note_service.search_notes("cellul")] == ["Mitose"]
        assert [n["title"] for n in note_service.get_notes_by_tag("plantes")] == [
            "Photosynthèse"
        ]


class TestFlashcardService:
    """Test flashcard creation and reviews."""

    def test_flashcard_needs_an_existing_note(self, flashcard_service):
        with pytest.raises(NoteNotFoundError):
            flashcard_service.create_flashcard("missing", "Q", "A")

    def test_flashcard_fields_are_trimmed(self, flashcard_service, sample_note):
        flashcard = flashcard_service.create_flashcard(sample_note["id"], " Q ", " A ")

        assert flashcard["question"] == "Q"
        assert flashcard["answer"] == "A"
        assert flashcard["review_count"] == 0
        assert flashcard["next_review_date"] is None

    def test_empty_answer_is_rejected(self, flashcard_service, sample_note):
        with pytest.raises(ValidationError):
            flashcard_service.create_flashcard(sample_note["id"], "Q", "   ")

    def test_review_flashcard(self, flashcard_service, sample_flashcards, now):
        flashcard = flashcard_service.review_flashcard(
            sample_flashcards[0]["id"], True, now
        )

        assert flashcard["review_count"] == 1
        assert flashcard["last_reviewed"] == now
        assert flashcard["next_review_date"] == now.add(days=2)

    def test_review_unknown_flashcard(self, flashcard_service, now):
        with pytest.raises(FlashcardNotFoundError):
            flashcard_service.review_flashcard("missing", True, now)

    def test_cards_for_review(self, flashcard_service, sample_flashcards, now):
        flashcard_service.review_flashcard(sample_flashcards[0]["id"], True, now)

        due_now = flashcard_service.get_flashcards_for_review(now)
        due_later = flashcard_service.get_flashcards_for_review(now.add(days=2))

        assert [card["id"] for card in due_now] == [sample_flashcards[1]["id"]]
        assert [card["id"] for card in due_later] == [
            sample_flashcards[1]["id"],
            sample_flashcards[0]["id"],
        ]

    def test_review_note_flashcards(
        self, flashcard_service, sample_note, sample_flashcards, now
    ):
        reviewed = flashcard_service.review_note_flashcards(sample_note["id"], False, now)

        assert len(reviewed) == 2
        assert all(card["next_review_date"] == now.add(days=1) for card in reviewed)
