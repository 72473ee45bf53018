# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer

from kasten import configuration as app_configuration
from kasten.cleanup import register_cleanup
from kasten.initialize import initialize
from kasten.terminal import card, configuration, markdown, note
from kasten.terminal.custom_typer import KastenTyperGroup
from kasten.view import state as view_state

app = typer.Typer(
    cls=KastenTyperGroup,
    help="kasten - Zettelkasten notes and flashcards in the CLI",
    no_args_is_help=True,
)
app.add_typer(note.app, name="note, n", help="Create, list and edit notes")
app.add_typer(card.app, name="card, c", help="Flashcards and reviews")
app.add_typer(markdown.export_app, name="export, e", help="Export notes to Markdown")
app.add_typer(configuration.app, name="config, cf", help="View or change settings")
app.command(name="import, i")(markdown.import_files)
app.command(name="validate, v")(markdown.validate_file)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            envvar=app_configuration.CONFIG_PATH_ENV,
            help="Path of config.yaml",
        ),
    ] = None,
    data_path: Annotated[
        Optional[Path],
        typer.Option(
            "--data-path",
            envvar=app_configuration.DATA_PATH_ENV,
            help="Directory holding the notes and flashcards",
        ),
    ] = None,
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
) -> None:
    """
    kasten - Zettelkasten notes and flashcards in the CLI

    Global options that apply to all commands.
    """
    store = initialize(config_path, data_path)
    ctx.obj = store
    register_cleanup(ctx, store)
    if no_header:
        view_state.set_show_header(False)


def run() -> None:
    app()
