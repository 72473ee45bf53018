# SPDX-License-Identifier: MIT

from typing import Optional

from kasten.model.entity_id import EntityId

SHORT_ID_LENGTH = 8


def format_tags(tags: Optional[list[str]]) -> str:
    """Format a list of tags as a comma-separated string without brackets or quotes."""
    if tags is None or len(tags) == 0:
        return ""
    return ", ".join(tags)


def short_id(id: Optional[EntityId]) -> str:
    if id is None:
        return ""
    return id[:SHORT_ID_LENGTH]


def first_line(text: str) -> str:
    lines = text.strip().split("\n")
    return lines[0].strip() if lines else ""
