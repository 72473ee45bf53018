# SPDX-License-Identifier: MIT

from typing import Any, Optional, TypeAlias, TypedDict

import pendulum

from kasten.model.entity_id import EntityId

MetadataValue: TypeAlias = Any

# Keys owned by the note itself; never stored in NoteMetadata["extra"]
RESERVED_METADATA_KEYS = ("title", "tags", "createdAt", "updatedAt")


class NoteMetadata(TypedDict):
    created: pendulum.DateTime
    updated: pendulum.DateTime
    extra: dict[str, MetadataValue]


class Note(TypedDict):
    id: Optional[EntityId]
    title: str
    content: str
    tags: list[str]
    metadata: NoteMetadata


class NoteDraft(TypedDict):
    """A note as produced by the Markdown parser, before it has an id."""

    title: str
    content: str
    tags: list[str]
    metadata: NoteMetadata
