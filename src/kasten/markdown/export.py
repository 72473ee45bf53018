# SPDX-License-Identifier: MIT

import re
from typing import Any, Iterator, Mapping, Optional, Sequence, TypedDict, Union

import yaml

from kasten.exceptions import EmptyExportError
from kasten.logger import get_logger
from kasten.markdown.front_matter import FENCE, dump_front_matter
from kasten.markdown.sections import (
    ANSWER_MARKER,
    CONTENT_SECTION,
    CREATED_LABEL,
    FLASHCARDS_SECTION,
    METADATA_SECTION,
    QUESTION_MARKER,
    SECTION_PREFIX,
    TAGS_SECTION,
    UPDATED_LABEL,
)
from kasten.model.entity_id import EntityId
from kasten.model.flashcard import Flashcard, FlashcardDraft
from kasten.model.markdown import ExportBatch, ExportEntry, ExportFailure
from kasten.model.note import RESERVED_METADATA_KEYS, Note
from kasten.time import datetime_to_iso_str

logger = get_logger(__name__)

COLLECTION_SEPARATOR = "\n\n---\n\n"
DEFAULT_FILENAME_STEM = "note"

# Errors a malformed note can raise while being rendered
_EXPORT_ERRORS = (KeyError, TypeError, AttributeError, ValueError, yaml.YAMLError)


class CollectionExport(TypedDict):
    document: str
    failures: list[ExportFailure]


def filename_for(note: Note) -> str:
    """
    Derive a file name from the note title.

    "Hello, World! 2024" -> "hello-world-2024.md". Titles that differ only
    in punctuation map to the same name.
    """
    stem = re.sub(r"[^a-z0-9]+", "-", note["title"].lower()).strip("-")
    if not stem:
        stem = DEFAULT_FILENAME_STEM
    return f"{stem}.md"


def format_metadata_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_metadata_value(item) for item in value)
    return str(value)


def format_flashcards(flashcards: Sequence[Union[Flashcard, FlashcardDraft]]) -> str:
    return "\n\n".join(
        f"{QUESTION_MARKER}\n{flashcard['question'].strip()}\n\n"
        f"{ANSWER_MARKER}\n{flashcard['answer'].strip()}"
        for flashcard in flashcards
    )


def export_note(note: Note, flashcards: Sequence[Union[Flashcard, FlashcardDraft]]) -> str:
    lines = [
        FENCE,
        dump_front_matter(note),
        FENCE,
        "",
        f"# {note['title']}",
        "",
    ]

    if note["tags"]:
        lines.append(f"{SECTION_PREFIX}{TAGS_SECTION}")
        lines.append("")
        lines.append("\n".join(f"- {tag}" for tag in note["tags"]))
        lines.append("")

    if any(line.startswith(SECTION_PREFIX) for line in note["content"].splitlines()):
        logger.warning(
            f"Note {note['id']} has level-two headings in its content, "
            "they will be read back as separate sections"
        )
    lines.append(f"{SECTION_PREFIX}{CONTENT_SECTION}")
    lines.append("")
    lines.append(note["content"].strip())

    if flashcards:
        lines.append("")
        lines.append(f"{SECTION_PREFIX}{FLASHCARDS_SECTION}")
        lines.append("")
        lines.append(format_flashcards(flashcards))

    metadata = note["metadata"]
    lines.append("")
    lines.append(f"{SECTION_PREFIX}{METADATA_SECTION}")
    lines.append("")
    lines.append(f"- {CREATED_LABEL} : {datetime_to_iso_str(metadata['created'])}")
    lines.append(f"- {UPDATED_LABEL} : {datetime_to_iso_str(metadata['updated'])}")
    for key, value in metadata["extra"].items():
        if key not in RESERVED_METADATA_KEYS:
            lines.append(f"- {key} : {format_metadata_value(value)}")

    return "\n".join(lines)


def _export_each(
    notes: Sequence[Note],
    flashcards_by_note_id: Mapping[Optional[EntityId], Sequence[Flashcard]],
) -> Iterator[tuple[Optional[ExportEntry], Optional[ExportFailure]]]:
    if len(notes) == 0:
        raise EmptyExportError()

    for note in notes:
        note_id = note.get("id")
        try:
            document = export_note(note, flashcards_by_note_id.get(note_id, []))
            entry = ExportEntry(filename_for(note), document)
        except _EXPORT_ERRORS as e:
            logger.warning(f"Skipping note {note_id} in export: {e!r}")
            yield (
                None,
                {
                    "note_id": note_id,
                    "title": note.get("title"),
                    "message": str(e) or type(e).__name__,
                },
            )
            continue
        yield entry, None


def export_collection(
    notes: Sequence[Note],
    flashcards_by_note_id: Mapping[Optional[EntityId], Sequence[Flashcard]],
) -> CollectionExport:
    """All notes in one document, separated by a horizontal rule."""
    documents: list[str] = []
    failures: list[ExportFailure] = []
    for entry, failure in _export_each(notes, flashcards_by_note_id):
        if failure is not None:
            failures.append(failure)
        elif entry is not None:
            documents.append(entry.document)

    return {
        "document": COLLECTION_SEPARATOR.join(documents),
        "failures": failures,
    }


def export_archive_entries(
    notes: Sequence[Note],
    flashcards_by_note_id: Mapping[Optional[EntityId], Sequence[Flashcard]],
) -> ExportBatch:
    """One (filename, document) pair per note, for writing into an archive."""
    entries: list[ExportEntry] = []
    failures: list[ExportFailure] = []
    for entry, failure in _export_each(notes, flashcards_by_note_id):
        if failure is not None:
            failures.append(failure)
        elif entry is not None:
            entries.append(entry)

    return {"entries": entries, "failures": failures}
