# SPDX-License-Identifier: MIT

from typing import Any, Optional

from kasten.exceptions import ValidationError
from kasten.logger import get_logger
from kasten.markdown.sections import SECTION_PREFIX
from kasten.model.entity_id import EntityId
from kasten.model.note import RESERVED_METADATA_KEYS, Note, NoteDraft
from kasten.repository.store import Store
from kasten.template.note import get_note_template

logger = get_logger(__name__)


def _require_text(value: str, field: str) -> str:
    if not value.strip():
        raise ValidationError(f"{field} cannot be empty", {"field": field})
    return value


def _check_extra(extra: dict[str, Any]) -> dict[str, Any]:
    reserved = [key for key in extra if key in RESERVED_METADATA_KEYS]
    if reserved:
        raise ValidationError(
            f"Reserved metadata keys cannot be set as extra metadata: {', '.join(reserved)}",
            {"keys": reserved},
        )
    return extra


def _check_content(content: str) -> str:
    _require_text(content, "content")
    headings = [line for line in content.splitlines() if line.startswith(SECTION_PREFIX)]
    if headings:
        raise ValidationError(
            f"Content cannot contain level-two headings, they would split the exported document: {headings[0]!r}",
            {"field": "content", "headings": headings},
        )
    return content


class NoteService:
    def __init__(self, store: Store) -> None:
        self.store = store

    def create_note(
        self,
        title: str,
        content: str,
        tags: Optional[list[str]] = None,
        extra: Optional[dict[str, Any]] = None,
    ) -> Note:
        note = get_note_template()
        note["title"] = _require_text(title, "title").strip()
        note["content"] = _check_content(content)
        note["tags"] = tags or []
        note["metadata"]["extra"] = _check_extra(dict(extra or {}))

        id = self.store.notes.save_new_note(note)
        logger.info(f"Created note {id}: {note['title']}")
        return self.store.notes.get_note(id)

    def create_note_from_draft(self, draft: NoteDraft) -> Note:
        """Create a note keeping the draft's timestamps (used by imports)."""
        _require_text(draft["title"], "title")
        _require_text(draft["content"], "content")
        metadata = draft["metadata"]
        if metadata["updated"] < metadata["created"]:
            raise ValidationError(
                "updatedAt cannot be earlier than createdAt",
                {"title": draft["title"]},
            )

        note: Note = {
            "id": None,
            "title": draft["title"].strip(),
            "content": draft["content"],
            "tags": list(draft["tags"]),
            "metadata": {
                "created": metadata["created"],
                "updated": metadata["updated"],
                "extra": _check_extra(dict(metadata["extra"])),
            },
        }
        id = self.store.notes.save_new_note(note)
        logger.info(f"Created note {id} from document: {note['title']}")
        return self.store.notes.get_note(id)

    def update_note(
        self,
        id: EntityId,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[list[str]] = None,
        extra: Optional[dict[str, Any]] = None,
        remove_extra_keys: Optional[list[str]] = None,
    ) -> Note:
        if title is not None:
            title = _require_text(title, "title").strip()
        if content is not None:
            _check_content(content)
        if extra is not None:
            _check_extra(extra)

        self.store.notes.modify_note(
            id,
            title=title,
            content=content,
            tags=tags,
            extra=extra,
            remove_extra_keys=remove_extra_keys,
        )
        logger.info(f"Updated note {id}")
        return self.store.notes.get_note(id)

    def update_note_from_draft(
        self,
        id: EntityId,
        draft: NoteDraft,
        remove_extra_keys: Optional[list[str]] = None,
    ) -> Note:
        """Replace a note's fields with a parsed draft (used by overwriting imports)."""
        _require_text(draft["title"], "title")
        _require_text(draft["content"], "content")
        extra = _check_extra(dict(draft["metadata"]["extra"]))

        self.store.notes.modify_note(
            id,
            title=draft["title"].strip(),
            content=draft["content"],
            tags=list(draft["tags"]),
            extra=extra,
            remove_extra_keys=remove_extra_keys,
        )
        logger.info(f"Updated note {id} from document")
        return self.store.notes.get_note(id)

    def delete_note(self, id: EntityId) -> int:
        """Delete a note and its flashcards. Returns the number of flashcards deleted."""
        # Raises NoteNotFoundError before anything is removed
        self.store.notes.get_note(id)

        deleted_flashcards = self.store.flashcards.delete_flashcards_by_note_id(id)
        self.store.notes.delete_note(id)
        logger.info(f"Deleted note {id} and {deleted_flashcards} flashcard(s)")
        return deleted_flashcards

    def get_note(self, id: EntityId) -> Note:
        return self.store.notes.get_note(id)

    def get_all_notes(self) -> list[Note]:
        return self.store.notes.get_all_notes()

    def find_note_by_title(self, title: str) -> Optional[Note]:
        return self.store.notes.find_note_by_title(title)

    def search_notes(self, term: str) -> list[Note]:
        """Case-insensitive substring match on title, content and tags."""
        wanted = term.lower()
        return [
            note
            for note in self.store.notes.get_all_notes()
            if wanted in note["title"].lower()
            or wanted in note["content"].lower()
            or any(wanted in tag.lower() for tag in note["tags"])
        ]

    def get_notes_by_tag(self, tag: str) -> list[Note]:
        return [note for note in self.store.notes.get_all_notes() if tag in note["tags"]]
