# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kasten.model.flashcard import Flashcard
from kasten.model.note import Note
from kasten.time import datetime_to_display_local_date_str
from kasten.view.util import first_line, format_tags, short_id
from kasten.view.views.header import header


def notes_report(
    report_name: str,
    notes: list[Note],
    flashcard_counts: dict[str, int],
    columns: list[str] = [
        "id",
        "title",
        "first_line",
        "tags",
        "flashcards",
        "updated",
    ],
) -> None:
    header(report_name)

    notes_table = Table(box=box.SIMPLE)
    for column in columns:
        notes_table.add_column(column)

    for note in notes:
        row = []
        for column in columns:
            column_value = ""
            if column == "id":
                column_value = short_id(note["id"])
            elif column == "title":
                column_value = note["title"]
            elif column == "first_line":
                column_value = first_line(note["content"])
            elif column == "tags":
                column_value = format_tags(note["tags"])
            elif column == "flashcards":
                column_value = str(flashcard_counts.get(note["id"] or "", 0))
            elif column == "created":
                column_value = datetime_to_display_local_date_str(
                    note["metadata"]["created"]
                )
            elif column == "updated":
                column_value = datetime_to_display_local_date_str(
                    note["metadata"]["updated"]
                )
            row.append(column_value)
        notes_table.add_row(*row)

    console = Console()
    console.print(notes_table)


def single_note_report(note: Note, flashcards: list[Flashcard]) -> None:
    header("note")

    note_table = Table(box=box.SIMPLE)
    note_table.add_column("property")
    note_table.add_column("value")

    note_table.add_row("id", note["id"] or "")
    note_table.add_row("title", note["title"])
    note_table.add_row("tags", format_tags(note["tags"]))
    note_table.add_row("flashcards", str(len(flashcards)))
    note_table.add_row(
        "created", datetime_to_display_local_date_str(note["metadata"]["created"])
    )
    note_table.add_row(
        "updated", datetime_to_display_local_date_str(note["metadata"]["updated"])
    )
    for key, value in note["metadata"]["extra"].items():
        note_table.add_row(key, str(value))

    console = Console()
    console.print(note_table)

    if note["content"]:
        console.print("\n")
        console.print(Panel(note["content"], title=note["title"], border_style="blue"))
