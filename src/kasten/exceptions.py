# SPDX-License-Identifier: MIT

"""
Exception hierarchy for kasten.

Everything raised on purpose by kasten inherits from KastenError, so the
terminal layer can catch one type and report it.
"""

from typing import Any, Optional


class KastenError(Exception):
    """Base exception for all kasten errors."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(KastenError):
    """Input does not satisfy an entity invariant (empty title, empty answer, ...)."""

    pass


class NotFoundError(KastenError):
    pass


class NoteNotFoundError(NotFoundError):
    def __init__(self, note_id: str):
        super().__init__(f"Note not found: {note_id}", {"note_id": note_id})


class FlashcardNotFoundError(NotFoundError):
    def __init__(self, flashcard_id: str):
        super().__init__(
            f"Flashcard not found: {flashcard_id}", {"flashcard_id": flashcard_id}
        )


class DuplicateNoteError(KastenError):
    """A note with the same title exists and the import options forbid touching it."""

    def __init__(self, title: str):
        super().__init__(
            f"A note titled '{title}' already exists", {"title": title}
        )


class MarkdownError(KastenError):
    pass


class MalformedDocumentError(MarkdownError):
    """The document does not open with a front matter fence, or the fence is never closed."""

    def __init__(self, message: str, line: int = 1):
        super().__init__(message, {"line": line})
        self.line = line


class InvalidFrontMatterError(MarkdownError):
    """The front matter is not valid YAML, not a mapping, or has no title."""

    def __init__(self, message: str, line: int):
        super().__init__(message, {"line": line})
        self.line = line


class MarkdownImportError(MarkdownError):
    """A document could not be imported; carries the parser's issues."""

    def __init__(self, name: str, issues: list[Any]):
        messages = [f"line {issue['line']}: {issue['message']}" for issue in issues]
        super().__init__(
            f"Unable to import {name}: " + "; ".join(messages),
            {"name": name, "issues": issues},
        )
        self.issues = issues


class EmptyExportError(MarkdownError):
    def __init__(self) -> None:
        super().__init__("No notes to export")
