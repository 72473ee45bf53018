# SPDX-License-Identifier: MIT

from kasten.model.entity_id import EntityId
from kasten.model.flashcard import Flashcard
from kasten.time import now_utc


def get_flashcard_template(source_note_id: EntityId) -> Flashcard:
    now = now_utc()
    return {
        "id": None,
        "question": "",
        "answer": "",
        "tags": [],
        "source_note_id": source_note_id,
        "review_count": 0,
        "last_reviewed": None,
        "next_review_date": None,
        "created": now,
        "updated": now,
    }
