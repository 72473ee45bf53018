# SPDX-License-Identifier: MIT

import zipfile
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from kasten.logger import get_logger
from kasten.markdown.validate import validate
from kasten.model.markdown import ImportFailure, ImportOptions, Severity
from kasten.service.markdown_export import ARCHIVE_NAME, ExportService
from kasten.service.markdown_import import ImportService, get_default_import_options
from kasten.service.note import NoteService
from kasten.terminal.context import get_store
from kasten.terminal.custom_typer import AliasedTyperGroup
from kasten.terminal.parse import resolve_id
from kasten.view.views import markdown as markdown_report

export_app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

logger = get_logger(__name__)

console = Console()

MARKDOWN_SUFFIX = ".md"
ZIP_SUFFIX = ".zip"


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise typer.BadParameter(f"{path} is not a UTF-8 text file")


def _read_documents(
    paths: list[Path],
) -> tuple[list[tuple[str, str]], list[ImportFailure]]:
    """
    (name, text) pairs; a zip archive contributes each of its .md members.

    A file or member that cannot be read is returned as a failure and the
    remaining paths are still read.
    """
    documents: list[tuple[str, str]] = []
    failures: list[ImportFailure] = []
    for path in paths:
        if path.suffix.lower() != ZIP_SUFFIX:
            try:
                documents.append((path.name, path.read_bytes().decode("utf-8")))
            except UnicodeDecodeError:
                failures.append(
                    {"name": path.name, "messages": ["not a UTF-8 text file"]}
                )
            continue

        try:
            archive = zipfile.ZipFile(path)
        except zipfile.BadZipFile as e:
            failures.append({"name": path.name, "messages": [str(e)]})
            continue

        with archive:
            for member in archive.namelist():
                if not member.lower().endswith(MARKDOWN_SUFFIX):
                    continue
                name = f"{path.name}:{member}"
                try:
                    documents.append((name, archive.read(member).decode("utf-8")))
                except UnicodeDecodeError:
                    failures.append({"name": name, "messages": ["not a UTF-8 text file"]})
                except zipfile.BadZipFile as e:
                    failures.append({"name": name, "messages": [str(e)]})

    for failure in failures:
        logger.warning(f"Unable to read {failure['name']}: {failure['messages'][0]}")
    return documents, failures


@export_app.command("note, n")
def export_note(
    ctx: typer.Context,
    id: Annotated[str, typer.Argument()],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="file or directory to write; prints the document when omitted",
        ),
    ] = None,
) -> None:
    """Export one note and its flashcards as a Markdown document."""
    store = get_store(ctx)
    notes = NoteService(store).get_all_notes()
    note_id = resolve_id(id, [note["id"] for note in notes], "note")

    entry = ExportService(store).export_note(note_id)
    if output is None:
        typer.echo(entry.document)
        return

    if output.is_dir():
        output = output / entry.filename
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(entry.document, encoding="utf-8")
    console.print(f"Wrote {output}")


@export_app.command("all, a")
def export_all(
    ctx: typer.Context,
    as_zip: Annotated[
        bool,
        typer.Option("--zip", "-z", help="one .md file per note inside a zip archive"),
    ] = False,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="file to write; a directory gets the default archive name",
        ),
    ] = None,
) -> None:
    """Export every note, as one document or as a zip archive."""
    service = ExportService(get_store(ctx))

    if as_zip:
        if output is None:
            output = Path(ARCHIVE_NAME)
        elif output.is_dir():
            output = output / ARCHIVE_NAME
        batch = service.write_archive(output)
        console.print(f"Wrote {len(batch['entries'])} note(s) to {output}")
        markdown_report.export_failures_report(batch["failures"])
        return

    collection = service.export_all()
    if output is None:
        typer.echo(collection["document"])
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(collection["document"], encoding="utf-8")
        console.print(f"Wrote {output}")
    markdown_report.export_failures_report(collection["failures"])


def import_files(
    ctx: typer.Context,
    files: Annotated[
        list[Path],
        typer.Argument(
            exists=True,
            dir_okay=False,
            readable=True,
            help="Markdown files or zip archives of Markdown files",
        ),
    ],
    overwrite: Annotated[
        Optional[bool],
        typer.Option(
            "--overwrite/--no-overwrite",
            help="update notes whose title already exists",
        ),
    ] = None,
    skip_duplicates: Annotated[
        Optional[bool],
        typer.Option(
            "--skip-duplicates/--no-skip-duplicates",
            help="leave notes whose title already exists untouched",
        ),
    ] = None,
) -> None:
    """Import notes and flashcards from Markdown documents."""
    store = get_store(ctx)

    options: ImportOptions = get_default_import_options(store)
    if overwrite is not None:
        options["overwrite"] = overwrite
        # --overwrite alone means duplicates should be replaced, not skipped
        if overwrite and skip_duplicates is None:
            options["skip_duplicates"] = False
    if skip_duplicates is not None:
        options["skip_duplicates"] = skip_duplicates

    documents, unreadable = _read_documents(files)
    summary = ImportService(store).import_documents(documents, options)
    summary["failed"] += len(unreadable)
    summary["failures"] = unreadable + summary["failures"]
    markdown_report.import_summary_report(summary)
    if summary["failed"] > 0:
        raise typer.Exit(1)


def validate_file(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True),
    ],
) -> None:
    """Check a Markdown document without importing it."""
    issues = validate(_read_text(file))
    markdown_report.validation_report(file.name, issues)
    if any(issue["severity"] == Severity.ERROR for issue in issues):
        raise typer.Exit(1)
