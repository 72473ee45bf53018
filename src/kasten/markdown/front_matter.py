# SPDX-License-Identifier: MIT

"""Front matter handling shared by the Markdown parser, validator and exporter."""

from typing import Any, NamedTuple, Optional, Union

import yaml
from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import Dumper, SafeLoader as Loader  # type: ignore[assignment]

from kasten.exceptions import InvalidFrontMatterError, MalformedDocumentError
from kasten.model.markdown import IssueKind, ParseIssue, Severity
from kasten.model.note import RESERVED_METADATA_KEYS, Note
from kasten.time import is_datetime_value

FENCE = "---"
CREATED_AT_KEY = "createdAt"
UPDATED_AT_KEY = "updatedAt"


class FrontMatterBlock(NamedTuple):
    text: str
    body: str
    # 1-based line number of the closing fence
    closing_line: int


def normalize_document(document: str) -> str:
    if document.startswith("\ufeff"):
        document = document[1:]
    return document.replace("\r\n", "\n").replace("\r", "\n")


def split_front_matter(document: str) -> FrontMatterBlock:
    """
    Split a normalized document into its front matter text and body.

    Raises:
        MalformedDocumentError: If the first line is not a fence or the
            fence is never closed
    """
    lines = document.split("\n")
    if lines[0].rstrip() != FENCE:
        raise MalformedDocumentError(
            "The document must start with a YAML front matter fence (---)"
        )

    for index in range(1, len(lines)):
        if lines[index].rstrip() == FENCE:
            return FrontMatterBlock(
                text="\n".join(lines[1:index]),
                body="\n".join(lines[index + 1 :]),
                closing_line=index + 1,
            )

    raise MalformedDocumentError("The front matter is never closed (missing ---)")


def load_front_matter(block: FrontMatterBlock) -> dict[str, Any]:
    """
    Parse the front matter YAML into a mapping with string keys.

    Raises:
        InvalidFrontMatterError: If the YAML is invalid or not a mapping
    """
    try:
        front_matter = load(block.text, Loader=Loader)
    except yaml.YAMLError as e:
        line = block.closing_line
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            # YAML lines are counted from the line after the opening fence
            line = mark.line + 2
        problem = getattr(e, "problem", None) or str(e)
        raise InvalidFrontMatterError(
            f"Invalid YAML in front matter: {problem}", line
        ) from e

    if front_matter is None:
        return {}
    if not isinstance(front_matter, dict):
        raise InvalidFrontMatterError(
            "The front matter must be a mapping of keys to values",
            block.closing_line,
        )
    return {str(key): value for key, value in front_matter.items()}


def read_title(front_matter: dict[str, Any]) -> Optional[str]:
    title = front_matter.get("title")
    if isinstance(title, bool) or title is None:
        return None
    if isinstance(title, (int, float)):
        return str(title)
    if isinstance(title, str) and title.strip():
        return title.strip()
    return None


def check_front_matter(front_matter: dict[str, Any], line: int) -> list[ParseIssue]:
    """Field-level checks of a loaded front matter."""
    issues: list[ParseIssue] = []

    if read_title(front_matter) is None:
        issues.append(
            {
                "line": line,
                "message": "A non-empty title is required in the front matter",
                "severity": Severity.ERROR,
                "kind": IssueKind.INVALID_FRONT_MATTER,
            }
        )

    if "tags" in front_matter and not isinstance(front_matter["tags"], list):
        issues.append(
            {
                "line": line,
                "message": "tags must be a list",
                "severity": Severity.WARNING,
                "kind": IssueKind.INVALID_FIELD,
            }
        )

    for key in (CREATED_AT_KEY, UPDATED_AT_KEY):
        if key in front_matter and not is_datetime_value(front_matter[key]):
            issues.append(
                {
                    "line": line,
                    "message": f"{key} is not a valid date: {front_matter[key]!r}",
                    "severity": Severity.WARNING,
                    "kind": IssueKind.INVALID_FIELD,
                }
            )

    return issues


def dump_front_matter(note: Note) -> str:
    """YAML for the front matter: title, tags and the extra metadata keys."""
    front_matter: dict[str, Any] = {
        "title": note["title"],
        "tags": list(note["tags"]),
    }
    for key, value in note["metadata"]["extra"].items():
        if key not in RESERVED_METADATA_KEYS:
            front_matter[key] = value

    return dump(
        front_matter,
        Dumper=Dumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=4096,
    ).strip()


class FrontMatter(NamedTuple):
    block: FrontMatterBlock
    values: dict[str, Any]


def read_front_matter(document: str) -> Union[FrontMatter, ParseIssue]:
    """
    Normalize a document, split off its front matter and load it.

    A missing fence or unreadable YAML comes back as a single error issue
    instead of an exception.
    """
    document = normalize_document(document)

    try:
        block = split_front_matter(document)
    except MalformedDocumentError as e:
        return {
            "line": e.line,
            "message": e.message,
            "severity": Severity.ERROR,
            "kind": IssueKind.MALFORMED_DOCUMENT,
        }

    try:
        values = load_front_matter(block)
    except InvalidFrontMatterError as e:
        return {
            "line": e.line,
            "message": e.message,
            "severity": Severity.ERROR,
            "kind": IssueKind.INVALID_FRONT_MATTER,
        }

    return FrontMatter(block, values)
