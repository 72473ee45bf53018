# SPDX-License-Identifier: MIT

from kasten.markdown.front_matter import (
    FrontMatter,
    check_front_matter,
    read_front_matter,
)
from kasten.markdown.sections import (
    CONTENT_SECTION,
    FLASHCARDS_SECTION,
    check_sections,
    find_section,
    split_flashcard_blocks,
    split_sections,
)
from kasten.model.markdown import IssueKind, ParseIssue, Severity


def validate(document: str) -> list[ParseIssue]:
    """
    Report structural problems of a document without importing it.

    Errors block an import, warnings do not.
    """
    loaded = read_front_matter(document)
    if not isinstance(loaded, FrontMatter):
        return [loaded]
    block, front_matter = loaded

    issues = check_front_matter(front_matter, block.closing_line)

    sections = split_sections(block.body, first_line=block.closing_line + 1)
    if find_section(sections, CONTENT_SECTION) is None:
        issues.append(
            {
                "line": block.closing_line,
                "message": f"No '## {CONTENT_SECTION}' section, the whole body will be used as content",
                "severity": Severity.WARNING,
                "kind": IssueKind.INVALID_FIELD,
            }
        )

    flashcards_section = find_section(sections, FLASHCARDS_SECTION)
    if flashcards_section is not None:
        skipped = split_flashcard_blocks(flashcards_section.content).skipped
        if skipped:
            issues.append(
                {
                    "line": flashcards_section.line,
                    "message": f"{skipped} flashcard block(s) without a question or an answer will be skipped",
                    "severity": Severity.WARNING,
                    "kind": IssueKind.INVALID_FIELD,
                }
            )

    issues.extend(check_sections(sections))
    return issues
