# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console

from kasten.model.entity_id import EntityId
from kasten.service.flashcard import FlashcardService
from kasten.service.note import NoteService
from kasten.terminal.context import get_store
from kasten.terminal.custom_typer import AliasedTyperGroup
from kasten.terminal.parse import parse_datetime, resolve_id
from kasten.time import datetime_to_display_local_date_str
from kasten.view.views import flashcard as flashcard_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

console = Console()


def _flashcard_id(service: FlashcardService, id: str) -> EntityId:
    return resolve_id(
        id, [flashcard["id"] for flashcard in service.get_all_flashcards()], "flashcard"
    )


def _note_id(ctx: typer.Context, id: str) -> EntityId:
    notes = NoteService(get_store(ctx)).get_all_notes()
    return resolve_id(id, [note["id"] for note in notes], "note")


@app.command("add, a")
def add(
    ctx: typer.Context,
    note_id: Annotated[str, typer.Argument(help="source note id")],
    question: Annotated[str, typer.Option("--question", "-q")],
    answer: Annotated[str, typer.Option("--answer", "-a")],
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-g", help="accepts multiple tag options"),
    ] = None,
) -> None:
    """Create a flashcard for a note."""
    service = FlashcardService(get_store(ctx))
    flashcard = service.create_flashcard(_note_id(ctx, note_id), question, answer, tags)
    console.print(f"Created flashcard [cyan]{flashcard['id']}[/cyan]")


@app.command("list, ls")
def list_flashcards(
    ctx: typer.Context,
    note_id: Annotated[
        Optional[str], typer.Option("--note", "-n", help="only this note's cards")
    ] = None,
) -> None:
    """List flashcards."""
    service = FlashcardService(get_store(ctx))
    if note_id is not None:
        flashcards = service.get_flashcards_by_note_id(_note_id(ctx, note_id))
    else:
        flashcards = service.get_all_flashcards()
    flashcard_report.flashcards_report("flashcards", flashcards)


@app.command("due")
def due(
    ctx: typer.Context,
    now: Annotated[
        Optional[pendulum.DateTime],
        typer.Option(
            "--now",
            parser=parse_datetime,
            help="valid inputs: YYYY-MM-DD, now, today, tomorrow, or day offset like 1, -1",
        ),
    ] = None,
) -> None:
    """List the flashcards due for review."""
    service = FlashcardService(get_store(ctx))
    flashcards = service.get_flashcards_for_review(now)
    flashcard_report.flashcards_report("due", flashcards, now)


@app.command("show, s")
def show(
    ctx: typer.Context,
    id: Annotated[str, typer.Argument()],
    hide_answer: Annotated[bool, typer.Option("--hide-answer")] = False,
) -> None:
    """Show one flashcard."""
    service = FlashcardService(get_store(ctx))
    flashcard = service.get_flashcard(_flashcard_id(service, id))
    flashcard_report.single_flashcard_report(flashcard, show_answer=not hide_answer)


@app.command("review, r")
def review(
    ctx: typer.Context,
    id: Annotated[str, typer.Argument()],
    remembered: Annotated[
        bool,
        typer.Option(
            "--remembered/--forgot",
            help="whether the answer was recalled",
        ),
    ],
    now: Annotated[
        Optional[pendulum.DateTime],
        typer.Option(
            "--now",
            parser=parse_datetime,
            help="review time; defaults to the current time",
        ),
    ] = None,
) -> None:
    """Record a review and schedule the next one."""
    service = FlashcardService(get_store(ctx))
    flashcard = service.review_flashcard(_flashcard_id(service, id), remembered, now)
    next_review_date = flashcard["next_review_date"]
    if next_review_date is not None:
        console.print(
            f"Next review of [cyan]{flashcard['id']}[/cyan] on "
            f"{datetime_to_display_local_date_str(next_review_date)}"
        )


@app.command("review-note, rn")
def review_note(
    ctx: typer.Context,
    note_id: Annotated[str, typer.Argument()],
    remembered: Annotated[bool, typer.Option("--remembered/--forgot")],
    now: Annotated[
        Optional[pendulum.DateTime],
        typer.Option("--now", parser=parse_datetime),
    ] = None,
) -> None:
    """Record the same review outcome for every flashcard of a note."""
    service = FlashcardService(get_store(ctx))
    flashcards = service.review_note_flashcards(_note_id(ctx, note_id), remembered, now)
    console.print(f"Reviewed {len(flashcards)} flashcard(s)")


@app.command("modify, m")
def modify(
    ctx: typer.Context,
    id: Annotated[str, typer.Argument()],
    question: Annotated[Optional[str], typer.Option("--question", "-q")] = None,
    answer: Annotated[Optional[str], typer.Option("--answer", "-a")] = None,
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-g", help="replaces the tags; accepts multiple"),
    ] = None,
) -> None:
    """Change a flashcard's question, answer or tags."""
    service = FlashcardService(get_store(ctx))
    flashcard = service.update_flashcard(
        _flashcard_id(service, id), question, answer, tags
    )
    console.print(f"Updated flashcard [cyan]{flashcard['id']}[/cyan]")


@app.command("delete, d")
def delete(ctx: typer.Context, id: Annotated[str, typer.Argument()]) -> None:
    """Delete a flashcard."""
    service = FlashcardService(get_store(ctx))
    flashcard_id = _flashcard_id(service, id)
    service.delete_flashcard(flashcard_id)
    console.print(f"Deleted flashcard [cyan]{flashcard_id}[/cyan]")
