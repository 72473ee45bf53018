# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from kasten.model.entity_id import EntityId


class Flashcard(TypedDict):
    id: Optional[EntityId]
    question: str
    answer: str
    tags: list[str]
    source_note_id: EntityId
    review_count: int
    last_reviewed: Optional[pendulum.DateTime]
    next_review_date: Optional[pendulum.DateTime]
    created: pendulum.DateTime
    updated: pendulum.DateTime


class FlashcardDraft(TypedDict):
    question: str
    answer: str


class ReviewOutcome(TypedDict):
    review_count: int
    last_reviewed: pendulum.DateTime
    next_review_date: pendulum.DateTime
