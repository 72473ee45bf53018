# SPDX-License-Identifier: MIT

import unicodedata
from typing import NamedTuple, Optional

from kasten.model.flashcard import FlashcardDraft
from kasten.model.markdown import IssueKind, ParseIssue, Severity
from kasten.time import is_datetime_value

SECTION_PREFIX = "## "
TAGS_SECTION = "Tags"
CONTENT_SECTION = "Contenu"
FLASHCARDS_SECTION = "Flashcards"
METADATA_SECTION = "Métadonnées"

QUESTION_MARKER = "### Question"
ANSWER_MARKER = "### Réponse"

CREATED_LABEL = "Date de création"
UPDATED_LABEL = "Dernière modification"

KNOWN_SECTIONS = (TAGS_SECTION, CONTENT_SECTION, FLASHCARDS_SECTION, METADATA_SECTION)


class Section(NamedTuple):
    title: str
    content: str
    # 1-based line of the "## " header within the text given to split_sections
    line: int


class FlashcardBlocks(NamedTuple):
    flashcards: list[FlashcardDraft]
    skipped: int


def _nfc(text: str) -> str:
    # Files written on some systems store "é" decomposed
    return unicodedata.normalize("NFC", text)


def split_sections(body: str, first_line: int = 1) -> list[Section]:
    """Split body on "## " headers. Text before the first header is dropped."""
    sections: list[Section] = []
    title: Optional[str] = None
    header_line = 0
    buffer: list[str] = []

    for offset, line in enumerate(body.split("\n")):
        if line.startswith(SECTION_PREFIX):
            if title is not None:
                sections.append(Section(title, "\n".join(buffer).strip(), header_line))
            title = _nfc(line[len(SECTION_PREFIX) :].strip())
            header_line = first_line + offset
            buffer = []
        elif title is not None:
            buffer.append(line)

    if title is not None:
        sections.append(Section(title, "\n".join(buffer).strip(), header_line))

    return sections


def find_section(sections: list[Section], title: str) -> Optional[Section]:
    for section in sections:
        if section.title == title:
            return section
    return None


def parse_list_items(content: str) -> list[str]:
    items = []
    for line in content.split("\n"):
        stripped = line.strip()
        if not stripped.startswith("-"):
            continue
        item = stripped[1:].strip()
        if item:
            items.append(item)
    return items


def split_flashcard_blocks(content: str) -> FlashcardBlocks:
    """
    Read question/answer pairs from a Flashcards section.

    A block runs from one "### Question" line to the next. Blocks without a
    "### Réponse" line, or with an empty question or answer, are skipped.
    """
    flashcards: list[FlashcardDraft] = []
    skipped = 0
    blocks: list[list[str]] = []

    for line in content.split("\n"):
        if _nfc(line.strip()) == QUESTION_MARKER:
            blocks.append([])
        elif blocks:
            blocks[-1].append(line)

    for block in blocks:
        answer_index = next(
            (
                index
                for index, line in enumerate(block)
                if _nfc(line.strip()) == ANSWER_MARKER
            ),
            None,
        )
        if answer_index is None:
            skipped += 1
            continue
        question = "\n".join(block[:answer_index]).strip()
        answer = "\n".join(block[answer_index + 1 :]).strip()
        if not question or not answer:
            skipped += 1
            continue
        flashcards.append({"question": question, "answer": answer})

    return FlashcardBlocks(flashcards, skipped)


def parse_metadata_items(content: str) -> dict[str, str]:
    """Read "- label : value" lines of a Métadonnées section."""
    metadata: dict[str, str] = {}
    for item in parse_list_items(content):
        if " : " in item:
            label, _, value = item.partition(" : ")
        elif ":" in item:
            label, _, value = item.partition(":")
        else:
            continue
        metadata[_nfc(label.strip())] = value.strip()
    return metadata


def check_sections(sections: list[Section]) -> list[ParseIssue]:
    """
    Warnings about sections whose text will not reach the note.

    Next to a "## Contenu" section, unknown "## " headers are dropped on
    import together with the text under them. Without one the whole body
    becomes the content, so nothing is dropped. Unreadable creation or
    modification dates fall back.
    """
    issues: list[ParseIssue] = []

    has_content = find_section(sections, CONTENT_SECTION) is not None
    for section in sections:
        if has_content and section.title not in KNOWN_SECTIONS:
            issues.append(
                {
                    "line": section.line,
                    "message": f"Unknown section '{SECTION_PREFIX}{section.title}' is ignored, its text is not imported",
                    "severity": Severity.WARNING,
                    "kind": IssueKind.INVALID_FIELD,
                }
            )

    metadata_section = find_section(sections, METADATA_SECTION)
    if metadata_section is not None:
        metadata = parse_metadata_items(metadata_section.content)
        for label in (CREATED_LABEL, UPDATED_LABEL):
            if label in metadata and not is_datetime_value(metadata[label]):
                issues.append(
                    {
                        "line": metadata_section.line,
                        "message": f"{label} is not a valid date: {metadata[label]!r}",
                        "severity": Severity.WARNING,
                        "kind": IssueKind.INVALID_FIELD,
                    }
                )

    return issues
