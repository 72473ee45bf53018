# SPDX-License-Identifier: MIT

from enum import StrEnum
from typing import NamedTuple, Optional, TypedDict

from kasten.model.entity_id import EntityId
from kasten.model.flashcard import FlashcardDraft
from kasten.model.note import Note, NoteDraft


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class IssueKind(StrEnum):
    MALFORMED_DOCUMENT = "malformed_document"
    INVALID_FRONT_MATTER = "invalid_front_matter"
    INVALID_FIELD = "invalid_field"


class ParseIssue(TypedDict):
    line: int
    message: str
    severity: Severity
    kind: IssueKind


class ParsedDocument(TypedDict):
    note: NoteDraft
    flashcards: list[FlashcardDraft]


class ParseResult(TypedDict):
    success: bool
    data: Optional[ParsedDocument]
    errors: list[ParseIssue]


class ExportEntry(NamedTuple):
    filename: str
    document: str


class ExportFailure(TypedDict):
    note_id: Optional[EntityId]
    title: Optional[str]
    message: str


class ExportBatch(TypedDict):
    entries: list[ExportEntry]
    failures: list[ExportFailure]


class ImportOptions(TypedDict):
    overwrite: bool
    skip_duplicates: bool


class ImportFailure(TypedDict):
    name: str
    messages: list[str]


class ImportSummary(TypedDict):
    success: int
    skipped: int
    failed: int
    notes: list[Note]
    failures: list[ImportFailure]
