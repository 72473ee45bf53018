# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from kasten.exceptions import ValidationError
from kasten.logger import get_logger
from kasten.model.entity_id import EntityId
from kasten.model.flashcard import Flashcard, FlashcardDraft
from kasten.repository.store import Store
from kasten.service.schedule import due_flashcards, schedule_review
from kasten.template.flashcard import get_flashcard_template

logger = get_logger(__name__)


def _require_text(value: str, field: str) -> str:
    if not value.strip():
        raise ValidationError(f"{field} cannot be empty", {"field": field})
    return value.strip()


class FlashcardService:
    def __init__(self, store: Store) -> None:
        self.store = store

    def create_flashcard(
        self,
        note_id: EntityId,
        question: str,
        answer: str,
        tags: Optional[list[str]] = None,
    ) -> Flashcard:
        # Raises NoteNotFoundError for an unknown note
        self.store.notes.get_note(note_id)

        flashcard = get_flashcard_template(note_id)
        flashcard["question"] = _require_text(question, "question")
        flashcard["answer"] = _require_text(answer, "answer")
        flashcard["tags"] = tags or []

        id = self.store.flashcards.save_new_flashcard(flashcard)
        logger.info(f"Created flashcard {id} for note {note_id}")
        return self.store.flashcards.get_flashcard(id)

    def create_flashcards_from_drafts(
        self,
        note_id: EntityId,
        drafts: list[FlashcardDraft],
        tags: Optional[list[str]] = None,
    ) -> list[Flashcard]:
        return [
            self.create_flashcard(note_id, draft["question"], draft["answer"], tags)
            for draft in drafts
        ]

    def update_flashcard(
        self,
        id: EntityId,
        question: Optional[str] = None,
        answer: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Flashcard:
        if question is not None:
            question = _require_text(question, "question")
        if answer is not None:
            answer = _require_text(answer, "answer")

        self.store.flashcards.modify_flashcard(id, question, answer, tags)
        return self.store.flashcards.get_flashcard(id)

    def delete_flashcard(self, id: EntityId) -> None:
        self.store.flashcards.delete_flashcard(id)
        logger.info(f"Deleted flashcard {id}")

    def get_flashcard(self, id: EntityId) -> Flashcard:
        return self.store.flashcards.get_flashcard(id)

    def get_all_flashcards(self) -> list[Flashcard]:
        return self.store.flashcards.get_all_flashcards()

    def get_flashcards_by_note_id(self, note_id: EntityId) -> list[Flashcard]:
        self.store.notes.get_note(note_id)
        return self.store.flashcards.get_flashcards_by_note_id(note_id)

    def get_flashcards_for_review(
        self, now: Optional[pendulum.DateTime] = None
    ) -> list[Flashcard]:
        return due_flashcards(self.store.flashcards.get_all_flashcards(), now)

    def review_flashcard(
        self,
        id: EntityId,
        remembered: bool,
        now: Optional[pendulum.DateTime] = None,
    ) -> Flashcard:
        flashcard = self.store.flashcards.get_flashcard(id)
        outcome = schedule_review(flashcard, remembered, now)
        self.store.flashcards.apply_review(id, outcome)
        logger.info(
            f"Reviewed flashcard {id} (remembered={remembered}), "
            f"next review {outcome['next_review_date'].to_date_string()}"
        )
        return self.store.flashcards.get_flashcard(id)

    def review_note_flashcards(
        self,
        note_id: EntityId,
        remembered: bool,
        now: Optional[pendulum.DateTime] = None,
    ) -> list[Flashcard]:
        """Apply the same outcome to every flashcard of a note."""
        return [
            self.review_flashcard(flashcard["id"], remembered, now)
            for flashcard in self.get_flashcards_by_note_id(note_id)
            if flashcard["id"] is not None
        ]
