# SPDX-License-Identifier: MIT

from enum import StrEnum
from typing import NamedTuple, Optional, Sequence

import pendulum

from kasten.exceptions import DuplicateNoteError, KastenError, MarkdownImportError
from kasten.logger import get_logger
from kasten.markdown.parse import parse
from kasten.model.flashcard import Flashcard, FlashcardDraft
from kasten.model.markdown import ImportOptions, ImportSummary, ParsedDocument, Severity
from kasten.model.note import Note
from kasten.repository.store import Store
from kasten.service.flashcard import FlashcardService
from kasten.service.note import NoteService

logger = get_logger(__name__)


class ImportStatus(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


class ImportOutcome(NamedTuple):
    status: ImportStatus
    note: Note


def get_default_import_options(store: Store) -> ImportOptions:
    config = store.configuration.get_config()
    return {
        "overwrite": config["import_overwrite"],
        "skip_duplicates": config["import_skip_duplicates"],
    }


class ImportService:
    def __init__(
        self,
        store: Store,
        note_service: Optional[NoteService] = None,
        flashcard_service: Optional[FlashcardService] = None,
    ) -> None:
        self.store = store
        self.note_service = note_service or NoteService(store)
        self.flashcard_service = flashcard_service or FlashcardService(store)

    def import_document(
        self,
        name: str,
        document: str,
        options: Optional[ImportOptions] = None,
        now: Optional[pendulum.DateTime] = None,
    ) -> ImportOutcome:
        """
        Import one Markdown document.

        Duplicate titles (case-insensitive): skipped when skip_duplicates is
        set, otherwise overwritten when overwrite is set, otherwise refused.

        Raises:
            MarkdownImportError: If the document cannot be parsed
            DuplicateNoteError: If the title exists and neither option allows it
            ValidationError: If the parsed note breaks a note invariant
        """
        if options is None:
            options = get_default_import_options(self.store)

        result = parse(document, now)
        data = result["data"]
        if not result["success"] or data is None:
            raise MarkdownImportError(
                name,
                [
                    issue
                    for issue in result["errors"]
                    if issue["severity"] == Severity.ERROR
                ],
            )
        for warning in result["errors"]:
            logger.warning(f"{name}: line {warning['line']}: {warning['message']}")

        existing = self.note_service.find_note_by_title(data["note"]["title"])
        if existing is not None and existing["id"] is not None:
            if options["skip_duplicates"]:
                logger.info(f"Skipped {name}: note '{existing['title']}' exists")
                return ImportOutcome(ImportStatus.SKIPPED, existing)
            if not options["overwrite"]:
                raise DuplicateNoteError(data["note"]["title"])
            return ImportOutcome(
                ImportStatus.UPDATED, self.__overwrite(existing["id"], data)
            )

        note = self.note_service.create_note_from_draft(data["note"])
        if note["id"] is not None:
            self.flashcard_service.create_flashcards_from_drafts(
                note["id"], data["flashcards"]
            )
        logger.info(f"Imported {name} as note {note['id']}")
        return ImportOutcome(ImportStatus.CREATED, note)

    def __overwrite(self, note_id: str, data: ParsedDocument) -> Note:
        draft = data["note"]
        current = self.note_service.get_note(note_id)
        stale_extra_keys = [
            key
            for key in current["metadata"]["extra"]
            if key not in draft["metadata"]["extra"]
        ]
        note = self.note_service.update_note_from_draft(
            note_id, draft, remove_extra_keys=stale_extra_keys
        )
        self.__reconcile_flashcards(
            note_id,
            self.flashcard_service.get_flashcards_by_note_id(note_id),
            data["flashcards"],
        )
        logger.info(f"Overwrote note {note_id}")
        return note

    def __reconcile_flashcards(
        self,
        note_id: str,
        existing: list[Flashcard],
        drafts: list[FlashcardDraft],
    ) -> None:
        """Keep cards whose question/answer is unchanged, add new ones, drop the rest."""
        unmatched = {
            (flashcard["question"], flashcard["answer"]): flashcard
            for flashcard in existing
        }
        for draft in drafts:
            key = (draft["question"], draft["answer"])
            if key in unmatched:
                del unmatched[key]
            else:
                self.flashcard_service.create_flashcard(
                    note_id, draft["question"], draft["answer"]
                )
        for flashcard in unmatched.values():
            if flashcard["id"] is not None:
                self.flashcard_service.delete_flashcard(flashcard["id"])

    def import_documents(
        self,
        documents: Sequence[tuple[str, str]],
        options: Optional[ImportOptions] = None,
        now: Optional[pendulum.DateTime] = None,
    ) -> ImportSummary:
        """Import (name, text) pairs; a failing document does not stop the batch."""
        if options is None:
            options = get_default_import_options(self.store)

        summary: ImportSummary = {
            "success": 0,
            "skipped": 0,
            "failed": 0,
            "notes": [],
            "failures": [],
        }

        for name, document in documents:
            try:
                outcome = self.import_document(name, document, options, now)
            except MarkdownImportError as e:
                summary["failed"] += 1
                summary["failures"].append(
                    {
                        "name": name,
                        "messages": [
                            f"line {issue['line']}: {issue['message']}"
                            for issue in e.issues
                        ],
                    }
                )
                logger.warning(e.message)
                continue
            except KastenError as e:
                summary["failed"] += 1
                summary["failures"].append({"name": name, "messages": [e.message]})
                logger.warning(f"Unable to import {name}: {e.message}")
                continue

            if outcome.status == ImportStatus.SKIPPED:
                summary["skipped"] += 1
            else:
                summary["success"] += 1
                summary["notes"].append(outcome.note)

        logger.info(
            f"Import finished: {summary['success']} imported, "
            f"{summary['skipped']} skipped, {summary['failed']} failed"
        )
        return summary
