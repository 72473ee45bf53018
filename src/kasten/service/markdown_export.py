# SPDX-License-Identifier: MIT

import zipfile
from pathlib import Path
from typing import Optional, Sequence

from kasten.logger import get_logger
from kasten.markdown.export import (
    CollectionExport,
    export_archive_entries,
    export_collection,
    export_note,
    filename_for,
)
from kasten.model.entity_id import EntityId
from kasten.model.flashcard import Flashcard
from kasten.model.markdown import ExportBatch, ExportEntry
from kasten.model.note import Note
from kasten.repository.store import Store

logger = get_logger(__name__)

ARCHIVE_NAME = "notes-export.zip"


def unique_member_names(entries: Sequence[ExportEntry]) -> list[ExportEntry]:
    """Suffix repeated file names with -2, -3, ... so archive members never collide."""
    seen: set[str] = set()
    unique: list[ExportEntry] = []
    for entry in entries:
        filename = entry.filename
        stem = filename.removesuffix(".md")
        counter = 2
        while filename in seen:
            filename = f"{stem}-{counter}.md"
            counter += 1
        seen.add(filename)
        unique.append(ExportEntry(filename, entry.document))
    return unique


class ExportService:
    def __init__(self, store: Store) -> None:
        self.store = store

    def __select_notes(self, note_ids: Optional[list[EntityId]]) -> list[Note]:
        if note_ids is None:
            return self.store.notes.get_all_notes()
        # Unknown ids are dropped, the way a bulk export ignores missing notes
        return [
            self.store.notes.get_note(note_id)
            for note_id in note_ids
            if self.store.notes.note_exists(note_id)
        ]

    def __flashcards_by_note_id(
        self, notes: list[Note]
    ) -> dict[Optional[EntityId], list[Flashcard]]:
        return {
            note["id"]: self.store.flashcards.get_flashcards_by_note_id(note["id"])
            for note in notes
            if note["id"] is not None
        }

    def export_note(self, note_id: EntityId) -> ExportEntry:
        note = self.store.notes.get_note(note_id)
        flashcards = self.store.flashcards.get_flashcards_by_note_id(note_id)
        return ExportEntry(filename_for(note), export_note(note, flashcards))

    def export_all(self, note_ids: Optional[list[EntityId]] = None) -> CollectionExport:
        notes = self.__select_notes(note_ids)
        result = export_collection(notes, self.__flashcards_by_note_id(notes))
        logger.info(
            f"Exported {len(notes) - len(result['failures'])} note(s) as one document"
        )
        return result

    def export_entries(self, note_ids: Optional[list[EntityId]] = None) -> ExportBatch:
        notes = self.__select_notes(note_ids)
        batch = export_archive_entries(notes, self.__flashcards_by_note_id(notes))
        batch["entries"] = unique_member_names(batch["entries"])
        return batch

    def write_archive(
        self, path: Path, note_ids: Optional[list[EntityId]] = None
    ) -> ExportBatch:
        batch = self.export_entries(note_ids)
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for entry in batch["entries"]:
                archive.writestr(entry.filename, entry.document.encode("utf-8"))
        logger.info(f"Wrote {len(batch['entries'])} note(s) to {path}")
        return batch
