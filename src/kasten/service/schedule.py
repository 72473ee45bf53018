# SPDX-License-Identifier: MIT

"""
Spaced-repetition scheduling.

A remembered card is pushed back 2^n days, n being its review count after
this review, capped at 2^10. A forgotten card comes back the next day.
"""

from typing import Iterable, Optional

import pendulum

from kasten.model.flashcard import Flashcard, ReviewOutcome
from kasten.time import add_days, now_utc

MAX_INTERVAL_EXPONENT = 10
FAILED_REVIEW_INTERVAL_DAYS = 1


def next_interval_days(review_count: int, remembered: bool) -> int:
    """Interval for a review whose post-increment count is review_count."""
    if not remembered:
        return FAILED_REVIEW_INTERVAL_DAYS
    return 2 ** min(review_count, MAX_INTERVAL_EXPONENT)


def schedule_review(
    card: Flashcard, remembered: bool, now: Optional[pendulum.DateTime] = None
) -> ReviewOutcome:
    """
    Compute the review statistics to persist after one review of card.

    Does not touch card; the caller applies the returned values.
    """
    if now is None:
        now = now_utc()

    review_count = card["review_count"] + 1
    days = next_interval_days(review_count, remembered)

    return {
        "review_count": review_count,
        "last_reviewed": now,
        "next_review_date": add_days(now, days),
    }


def is_due(card: Flashcard, now: Optional[pendulum.DateTime] = None) -> bool:
    if card["next_review_date"] is None:
        return True
    if now is None:
        now = now_utc()
    return card["next_review_date"] <= now


def due_flashcards(
    cards: Iterable[Flashcard], now: Optional[pendulum.DateTime] = None
) -> list[Flashcard]:
    """Cards due at now, never-reviewed ones first, then oldest due date first."""
    if now is None:
        now = now_utc()
    due = [card for card in cards if is_due(card, now)]
    return sorted(
        due,
        key=lambda card: (
            card["next_review_date"] is not None,
            card["next_review_date"] or now,
        ),
    )
