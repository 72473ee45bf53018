# SPDX-License-Identifier: MIT

import datetime
from typing import Any, Optional

import pendulum

from kasten.markdown.front_matter import (
    CREATED_AT_KEY,
    UPDATED_AT_KEY,
    FrontMatter,
    check_front_matter,
    read_front_matter,
    read_title,
)
from kasten.markdown.sections import (
    CONTENT_SECTION,
    CREATED_LABEL,
    FLASHCARDS_SECTION,
    METADATA_SECTION,
    TAGS_SECTION,
    UPDATED_LABEL,
    check_sections,
    find_section,
    parse_list_items,
    parse_metadata_items,
    split_flashcard_blocks,
    split_sections,
)
from kasten.model.flashcard import FlashcardDraft
from kasten.model.markdown import ParseResult, Severity
from kasten.model.note import RESERVED_METADATA_KEYS, NoteDraft, NoteMetadata
from kasten.time import datetime_from_value, is_datetime_value, now_utc


def _normalize_extra_value(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    return value


def _pick_datetime(
    front_matter_value: Any, section_value: Optional[str]
) -> Optional[pendulum.DateTime]:
    for candidate in (front_matter_value, section_value):
        if candidate is not None and is_datetime_value(candidate):
            return datetime_from_value(candidate)
    return None


def _note_dates(
    created: Optional[pendulum.DateTime],
    updated: Optional[pendulum.DateTime],
    now: pendulum.DateTime,
) -> tuple[pendulum.DateTime, pendulum.DateTime]:
    """Fill missing dates from the one that is known, never ordering updated before created."""
    if created is None and updated is None:
        return now, now
    if created is None:
        return min(updated, now), updated
    if updated is None:
        return created, max(created, now)
    return created, updated


def parse(document: str, now: Optional[pendulum.DateTime] = None) -> ParseResult:
    """
    Parse a Markdown document into a note draft and its flashcard drafts.

    Never raises for problems in the document: a document that cannot be
    read yields success False, no data and at least one error. Warnings
    (bad tags type, unreadable dates, ignored sections) are reported
    alongside the data.
    """
    if now is None:
        now = now_utc()

    loaded = read_front_matter(document)
    if not isinstance(loaded, FrontMatter):
        return {"success": False, "data": None, "errors": [loaded]}
    block, front_matter = loaded

    issues = check_front_matter(front_matter, block.closing_line)
    title = read_title(front_matter)
    if title is None or any(issue["severity"] == Severity.ERROR for issue in issues):
        return {"success": False, "data": None, "errors": issues}

    sections = split_sections(block.body, first_line=block.closing_line + 1)
    issues.extend(check_sections(sections))

    tags_section = find_section(sections, TAGS_SECTION)
    tags: list[str]
    if tags_section is not None:
        tags = parse_list_items(tags_section.content)
    elif isinstance(front_matter.get("tags"), list):
        tags = [str(tag) for tag in front_matter["tags"] if tag is not None]
    else:
        tags = []

    content_section = find_section(sections, CONTENT_SECTION)
    if content_section is not None:
        content = content_section.content
    else:
        content = block.body.strip()

    flashcards: list[FlashcardDraft] = []
    flashcards_section = find_section(sections, FLASHCARDS_SECTION)
    if flashcards_section is not None:
        flashcards = split_flashcard_blocks(flashcards_section.content).flashcards

    metadata_section = find_section(sections, METADATA_SECTION)
    metadata_items = (
        parse_metadata_items(metadata_section.content)
        if metadata_section is not None
        else {}
    )
    created, updated = _note_dates(
        _pick_datetime(front_matter.get(CREATED_AT_KEY), metadata_items.get(CREATED_LABEL)),
        _pick_datetime(front_matter.get(UPDATED_AT_KEY), metadata_items.get(UPDATED_LABEL)),
        now,
    )
    metadata: NoteMetadata = {
        "created": created,
        "updated": updated,
        "extra": {
            key: _normalize_extra_value(value)
            for key, value in front_matter.items()
            if key not in RESERVED_METADATA_KEYS
        },
    }

    note: NoteDraft = {
        "title": title,
        "content": content,
        "tags": list(dict.fromkeys(tags)),
        "metadata": metadata,
    }

    return {
        "success": True,
        "data": {"note": note, "flashcards": flashcards},
        "errors": issues,
    }
