# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console

from kasten.exceptions import ValidationError
from kasten.model.entity_id import EntityId
from kasten.service.note import NoteService
from kasten.terminal.context import get_store
from kasten.terminal.custom_typer import AliasedTyperGroup
from kasten.terminal.parse import open_editor_for_text, resolve_id
from kasten.view.views import note as note_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

console = Console()


def _note_id(service: NoteService, id: str) -> EntityId:
    return resolve_id(id, [note["id"] for note in service.get_all_notes()], "note")


def _parse_extra(extra: Optional[list[str]]) -> Optional[dict[str, str]]:
    if extra is None:
        return None
    parsed = {}
    for item in extra:
        key, separator, value = item.partition("=")
        if not separator or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{item}'")
        parsed[key.strip()] = value.strip()
    return parsed


@app.command("add, a")
def add(
    ctx: typer.Context,
    title: Annotated[str, typer.Option("--title", "-t", help="Note title")],
    content: Annotated[
        Optional[str],
        typer.Option(
            "--content", "-c", help="Note body; opens $EDITOR when omitted"
        ),
    ] = None,
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-g", help="accepts multiple tag options"),
    ] = None,
    extra: Annotated[
        Optional[list[str]],
        typer.Option("--meta", "-m", help="extra metadata as key=value"),
    ] = None,
) -> None:
    """Create a note."""
    if content is None:
        content = open_editor_for_text()
        if content is None:
            typer.echo("Note creation cancelled (no text provided)")
            return

    service = NoteService(get_store(ctx))
    note = service.create_note(title, content, tags, _parse_extra(extra))
    console.print(f"Created note [cyan]{note['id']}[/cyan]: {note['title']}")


@app.command("list, ls")
def list_notes(
    ctx: typer.Context,
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-s", help="match title, content or tags"),
    ] = None,
    tag: Annotated[
        Optional[str], typer.Option("--tag", "-g", help="only notes with this tag")
    ] = None,
) -> None:
    """List notes."""
    store = get_store(ctx)
    service = NoteService(store)

    notes = service.search_notes(search) if search else service.get_all_notes()
    if tag is not None:
        notes = [note for note in notes if tag in note["tags"]]
    notes = sorted(notes, key=lambda note: note["metadata"]["updated"], reverse=True)

    flashcard_counts: dict[str, int] = {}
    for flashcard in store.flashcards.get_all_flashcards():
        source = flashcard["source_note_id"]
        flashcard_counts[source] = flashcard_counts.get(source, 0) + 1

    note_report.notes_report("notes", notes, flashcard_counts)


@app.command("show, s")
def show(ctx: typer.Context, id: Annotated[str, typer.Argument()]) -> None:
    """Show one note with its metadata and content."""
    store = get_store(ctx)
    service = NoteService(store)
    note = service.get_note(_note_id(service, id))
    flashcards = store.flashcards.get_flashcards_by_note_id(note["id"] or "")
    note_report.single_note_report(note, flashcards)


@app.command("modify, m")
def modify(
    ctx: typer.Context,
    id: Annotated[str, typer.Argument()],
    title: Annotated[Optional[str], typer.Option("--title", "-t")] = None,
    content: Annotated[Optional[str], typer.Option("--content", "-c")] = None,
    edit: Annotated[
        bool, typer.Option("--edit", "-e", help="edit the content in $EDITOR")
    ] = False,
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-g", help="replaces the tags; accepts multiple"),
    ] = None,
    add_tags: Annotated[
        Optional[list[str]], typer.Option("--add-tag", "-at")
    ] = None,
    remove_tags: Annotated[
        Optional[list[str]], typer.Option("--remove-tag", "-rt")
    ] = None,
    extra: Annotated[
        Optional[list[str]],
        typer.Option("--meta", "-m", help="set extra metadata as key=value"),
    ] = None,
    remove_extra: Annotated[
        Optional[list[str]],
        typer.Option("--remove-meta", "-rm", help="extra metadata key to drop"),
    ] = None,
) -> None:
    """Change a note; only the given fields are touched."""
    service = NoteService(get_store(ctx))
    note_id = _note_id(service, id)
    note = service.get_note(note_id)

    if edit:
        if content is not None:
            raise typer.BadParameter("--content and --edit cannot be combined")
        content = open_editor_for_text(note["content"])
        if content is None:
            raise ValidationError("content cannot be empty", {"field": "content"})

    new_tags = tags
    if add_tags is not None or remove_tags is not None:
        new_tags = list(tags if tags is not None else note["tags"])
        for tag in add_tags or []:
            if tag not in new_tags:
                new_tags.append(tag)
        new_tags = [tag for tag in new_tags if tag not in (remove_tags or [])]

    note = service.update_note(
        note_id,
        title=title,
        content=content,
        tags=new_tags,
        extra=_parse_extra(extra),
        remove_extra_keys=remove_extra,
    )
    console.print(f"Updated note [cyan]{note['id']}[/cyan]: {note['title']}")


@app.command("delete, d")
def delete(
    ctx: typer.Context,
    id: Annotated[str, typer.Argument()],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="do not ask for confirmation")
    ] = False,
) -> None:
    """Delete a note and its flashcards."""
    service = NoteService(get_store(ctx))
    note_id = _note_id(service, id)
    note = service.get_note(note_id)

    if not yes:
        typer.confirm(f"Delete note '{note['title']}'?", abort=True)

    deleted_flashcards = service.delete_note(note_id)
    console.print(
        f"Deleted note [cyan]{note_id}[/cyan] and {deleted_flashcards} flashcard(s)"
    )
