# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kasten.model.flashcard import Flashcard
from kasten.service.schedule import is_due
from kasten.time import (
    datetime_to_display_local_date_str,
    datetime_to_display_local_datetime_str_optional,
)
from kasten.view.util import first_line, format_tags, short_id
from kasten.view.views.header import header


def _next_review(flashcard: Flashcard) -> str:
    if flashcard["next_review_date"] is None:
        return "now"
    return datetime_to_display_local_date_str(flashcard["next_review_date"])


def flashcards_report(
    report_name: str,
    flashcards: list[Flashcard],
    now: Optional[pendulum.DateTime] = None,
    columns: list[str] = [
        "id",
        "note",
        "question",
        "tags",
        "reviews",
        "next_review",
        "due",
    ],
) -> None:
    header(report_name)

    flashcards_table = Table(box=box.SIMPLE)
    for column in columns:
        flashcards_table.add_column(column)

    for flashcard in flashcards:
        row = []
        for column in columns:
            column_value = ""
            if column == "id":
                column_value = short_id(flashcard["id"])
            elif column == "note":
                column_value = short_id(flashcard["source_note_id"])
            elif column == "question":
                column_value = first_line(flashcard["question"])
            elif column == "tags":
                column_value = format_tags(flashcard["tags"])
            elif column == "reviews":
                column_value = str(flashcard["review_count"])
            elif column == "next_review":
                column_value = _next_review(flashcard)
            elif column == "due":
                column_value = "X" if is_due(flashcard, now) else ""
            row.append(column_value)
        flashcards_table.add_row(*row)

    console = Console()
    console.print(flashcards_table)


def single_flashcard_report(flashcard: Flashcard, show_answer: bool = True) -> None:
    header("flashcard")

    flashcard_table = Table(box=box.SIMPLE)
    flashcard_table.add_column("property")
    flashcard_table.add_column("value")

    flashcard_table.add_row("id", flashcard["id"] or "")
    flashcard_table.add_row("note", flashcard["source_note_id"])
    flashcard_table.add_row("tags", format_tags(flashcard["tags"]))
    flashcard_table.add_row("reviews", str(flashcard["review_count"]))
    flashcard_table.add_row(
        "last_reviewed",
        datetime_to_display_local_datetime_str_optional(flashcard["last_reviewed"])
        or "",
    )
    flashcard_table.add_row("next_review", _next_review(flashcard))

    console = Console()
    console.print(flashcard_table)
    console.print(Panel(flashcard["question"], title="Question", border_style="cyan"))
    if show_answer:
        console.print(Panel(flashcard["answer"], title="Réponse", border_style="green"))
