# SPDX-License-Identifier: MIT

from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import Dumper, SafeLoader as Loader  # type: ignore[assignment]

from kasten import time
from kasten.exceptions import NoteNotFoundError
from kasten.logger import get_logger
from kasten.model.entity_id import EntityId, generate_entity_id
from kasten.model.note import Note
from kasten.repository.literal import LiteralString

logger = get_logger(__name__)


class NoteRepository:
    """Notes kept in memory, one YAML file per note in notes_dir."""

    def __init__(self, notes_dir: Path) -> None:
        self.notes_dir = notes_dir
        self._notes: Optional[list[Note]] = None
        self.is_dirty = False
        self._dirty_ids: set[str] = set()
        self._deleted_ids: set[str] = set()

    @property
    def notes(self) -> list[Note]:
        if self._notes is None:
            self.__load_data()
        if self._notes is None:
            raise ValueError()
        return self._notes

    def __load_data(self) -> None:
        self._notes = []
        if not self.notes_dir.is_dir():
            return
        for file_path in sorted(self.notes_dir.iterdir()):
            if file_path.suffix != ".yaml":
                continue
            raw_note = load(file_path.read_text(encoding="utf-8"), Loader=Loader)
            if raw_note is not None:
                self._notes.append(self.__convert_note_for_deserialization(raw_note))
        logger.debug(f"Loaded {len(self._notes)} notes from {self.notes_dir}")

    def __save_data(self) -> None:
        self.notes_dir.mkdir(parents=True, exist_ok=True)

        for note in self.notes:
            if note["id"] in self._dirty_ids:
                serializable_note = self.__convert_note_for_serialization(
                    deepcopy(note)
                )
                file_path = self.notes_dir / f"{note['id']}.yaml"
                file_path.write_text(
                    dump(serializable_note, Dumper=Dumper, allow_unicode=True),
                    encoding="utf-8",
                )

        for entity_id in self._deleted_ids:
            file_path = self.notes_dir / f"{entity_id}.yaml"
            if file_path.exists():
                file_path.unlink()

        logger.debug(
            f"Flushed {len(self._dirty_ids)} notes, removed {len(self._deleted_ids)}"
        )
        self._dirty_ids.clear()
        self._deleted_ids.clear()

    def flush(self) -> bool:
        if self._notes is not None and self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def __convert_note_for_serialization(self, note: Note) -> dict[str, Any]:
        return {
            "id": note["id"],
            "title": note["title"],
            "content": LiteralString(note["content"]),
            "tags": note["tags"],
            "metadata": {
                "created": time.datetime_to_iso_str(note["metadata"]["created"]),
                "updated": time.datetime_to_iso_str(note["metadata"]["updated"]),
                "extra": note["metadata"]["extra"],
            },
        }

    def __convert_note_for_deserialization(self, note: dict[str, Any]) -> Note:
        metadata = note.get("metadata") or {}
        deserializable_note = {
            "id": note["id"],
            "title": note["title"],
            "content": note.get("content") or "",
            "tags": note.get("tags") or [],
            "metadata": {
                "created": time.datetime_from_value(metadata["created"]),
                "updated": time.datetime_from_value(metadata["updated"]),
                "extra": metadata.get("extra") or {},
            },
        }
        return cast(Note, deserializable_note)

    def __find(self, id: EntityId) -> Note:
        for note in self.notes:
            if note["id"] == id:
                return note
        raise NoteNotFoundError(id)

    def save_new_note(self, note: Note) -> EntityId:
        self.is_dirty = True

        note["id"] = generate_entity_id()

        # Deduplicate tags
        note["tags"] = list(dict.fromkeys(note["tags"]))

        self.notes.append(note)
        self._dirty_ids.add(note["id"])

        return note["id"]

    def modify_note(
        self,
        id: EntityId,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[list[str]] = None,
        extra: Optional[dict[str, Any]] = None,
        remove_extra_keys: Optional[list[str]] = None,
    ) -> None:
        note = self.__find(id)

        self.is_dirty = True
        self._dirty_ids.add(id)

        if title is not None:
            note["title"] = title
        if content is not None:
            note["content"] = content
        if tags is not None:
            note["tags"] = list(dict.fromkeys(tags))
        if extra is not None:
            note["metadata"]["extra"].update(extra)
        if remove_extra_keys is not None:
            for key in remove_extra_keys:
                note["metadata"]["extra"].pop(key, None)

        # Always refresh 'updated'
        note["metadata"]["updated"] = time.now_utc()

    def delete_note(self, id: EntityId) -> None:
        note = self.__find(id)

        self.is_dirty = True
        self.notes.remove(note)
        self._dirty_ids.discard(id)
        self._deleted_ids.add(id)

    def get_all_notes(self) -> list[Note]:
        return deepcopy(self.notes)

    def get_note(self, id: EntityId) -> Note:
        return deepcopy(self.__find(id))

    def note_exists(self, id: EntityId) -> bool:
        return any(note["id"] == id for note in self.notes)

    def find_note_by_title(self, title: str) -> Optional[Note]:
        """Case-insensitive exact title lookup."""
        wanted = title.strip().lower()
        for note in self.notes:
            if note["title"].strip().lower() == wanted:
                return deepcopy(note)
        return None
