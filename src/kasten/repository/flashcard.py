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
from kasten.exceptions import FlashcardNotFoundError
from kasten.logger import get_logger
from kasten.model.entity_id import EntityId, generate_entity_id
from kasten.model.flashcard import Flashcard, ReviewOutcome
from kasten.repository.literal import LiteralString

logger = get_logger(__name__)


class FlashcardRepository:
    """Flashcards kept in memory, one YAML file per card in flashcards_dir."""

    def __init__(self, flashcards_dir: Path) -> None:
        self.flashcards_dir = flashcards_dir
        self._flashcards: Optional[list[Flashcard]] = None
        self.is_dirty = False
        self._dirty_ids: set[str] = set()
        self._deleted_ids: set[str] = set()

    @property
    def flashcards(self) -> list[Flashcard]:
        if self._flashcards is None:
            self.__load_data()
        if self._flashcards is None:
            raise ValueError()
        return self._flashcards

    def __load_data(self) -> None:
        self._flashcards = []
        if not self.flashcards_dir.is_dir():
            return
        for file_path in sorted(self.flashcards_dir.iterdir()):
            if file_path.suffix != ".yaml":
                continue
            raw_flashcard = load(file_path.read_text(encoding="utf-8"), Loader=Loader)
            if raw_flashcard is not None:
                self._flashcards.append(
                    self.__convert_flashcard_for_deserialization(raw_flashcard)
                )
        logger.debug(
            f"Loaded {len(self._flashcards)} flashcards from {self.flashcards_dir}"
        )

    def __save_data(self) -> None:
        self.flashcards_dir.mkdir(parents=True, exist_ok=True)

        for flashcard in self.flashcards:
            if flashcard["id"] in self._dirty_ids:
                serializable_flashcard = self.__convert_flashcard_for_serialization(
                    deepcopy(flashcard)
                )
                file_path = self.flashcards_dir / f"{flashcard['id']}.yaml"
                file_path.write_text(
                    dump(serializable_flashcard, Dumper=Dumper, allow_unicode=True),
                    encoding="utf-8",
                )

        for entity_id in self._deleted_ids:
            file_path = self.flashcards_dir / f"{entity_id}.yaml"
            if file_path.exists():
                file_path.unlink()

        self._dirty_ids.clear()
        self._deleted_ids.clear()

    def flush(self) -> bool:
        if self._flashcards is not None and self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def __convert_flashcard_for_serialization(
        self, flashcard: Flashcard
    ) -> dict[str, Any]:
        serializable_flashcard = cast(dict[str, Any], flashcard)
        serializable_flashcard["question"] = LiteralString(flashcard["question"])
        serializable_flashcard["answer"] = LiteralString(flashcard["answer"])
        serializable_flashcard["last_reviewed"] = time.datetime_to_iso_str_optional(
            flashcard["last_reviewed"]
        )
        serializable_flashcard["next_review_date"] = (
            time.datetime_to_iso_str_optional(flashcard["next_review_date"])
        )
        serializable_flashcard["created"] = time.datetime_to_iso_str(
            flashcard["created"]
        )
        serializable_flashcard["updated"] = time.datetime_to_iso_str(
            flashcard["updated"]
        )
        return serializable_flashcard

    def __convert_flashcard_for_deserialization(
        self, flashcard: dict[str, Any]
    ) -> Flashcard:
        deserializable_flashcard = flashcard
        deserializable_flashcard["tags"] = flashcard.get("tags") or []
        deserializable_flashcard["review_count"] = int(
            flashcard.get("review_count") or 0
        )
        deserializable_flashcard["last_reviewed"] = time.datetime_from_str_optional(
            flashcard.get("last_reviewed")
        )
        deserializable_flashcard["next_review_date"] = (
            time.datetime_from_str_optional(flashcard.get("next_review_date"))
        )
        deserializable_flashcard["created"] = time.datetime_from_value(
            flashcard["created"]
        )
        deserializable_flashcard["updated"] = time.datetime_from_value(
            flashcard["updated"]
        )
        return cast(Flashcard, deserializable_flashcard)

    def __find(self, id: EntityId) -> Flashcard:
        for flashcard in self.flashcards:
            if flashcard["id"] == id:
                return flashcard
        raise FlashcardNotFoundError(id)

    def save_new_flashcard(self, flashcard: Flashcard) -> EntityId:
        self.is_dirty = True

        flashcard["id"] = generate_entity_id()
        flashcard["tags"] = list(dict.fromkeys(flashcard["tags"]))

        self.flashcards.append(flashcard)
        self._dirty_ids.add(flashcard["id"])

        return flashcard["id"]

    def modify_flashcard(
        self,
        id: EntityId,
        question: Optional[str] = None,
        answer: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> None:
        flashcard = self.__find(id)

        self.is_dirty = True
        self._dirty_ids.add(id)

        if question is not None:
            flashcard["question"] = question
        if answer is not None:
            flashcard["answer"] = answer
        if tags is not None:
            flashcard["tags"] = list(dict.fromkeys(tags))

        flashcard["updated"] = time.now_utc()

    def apply_review(self, id: EntityId, outcome: ReviewOutcome) -> None:
        flashcard = self.__find(id)

        self.is_dirty = True
        self._dirty_ids.add(id)

        flashcard["review_count"] = outcome["review_count"]
        flashcard["last_reviewed"] = outcome["last_reviewed"]
        flashcard["next_review_date"] = outcome["next_review_date"]
        flashcard["updated"] = time.now_utc()

    def delete_flashcard(self, id: EntityId) -> None:
        flashcard = self.__find(id)

        self.is_dirty = True
        self.flashcards.remove(flashcard)
        self._dirty_ids.discard(id)
        self._deleted_ids.add(id)

    def delete_flashcards_by_note_id(self, note_id: EntityId) -> int:
        owned_ids = [
            flashcard["id"]
            for flashcard in self.flashcards
            if flashcard["source_note_id"] == note_id
        ]
        for flashcard_id in owned_ids:
            if flashcard_id is not None:
                self.delete_flashcard(flashcard_id)
        return len(owned_ids)

    def get_all_flashcards(self) -> list[Flashcard]:
        return deepcopy(self.flashcards)

    def get_flashcard(self, id: EntityId) -> Flashcard:
        return deepcopy(self.__find(id))

    def get_flashcards_by_note_id(self, note_id: EntityId) -> list[Flashcard]:
        return deepcopy(
            [
                flashcard
                for flashcard in self.flashcards
                if flashcard["source_note_id"] == note_id
            ]
        )
