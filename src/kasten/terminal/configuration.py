# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from kasten.terminal.context import get_store
from kasten.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _enabled(value: bool) -> str:
    return "✓ Enabled" if value else "✗ Disabled"


@app.command("view, v")
def view(ctx: typer.Context) -> None:
    """Display current configuration settings."""
    store = get_store(ctx)
    config = store.configuration.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("config_path", str(store.configuration.config_path))
    table.add_row("data_path", str(store.data_paths["root"]))
    table.add_row("log_level", config["log_level"])
    table.add_row("log_to_file", _enabled(config["log_to_file"]))
    table.add_row("show_header", _enabled(config["show_header"]))
    table.add_row("import_overwrite", _enabled(config["import_overwrite"]))
    table.add_row("import_skip_duplicates", _enabled(config["import_skip_duplicates"]))

    console.print(table)

    yaml_library_type = "untested"
    try:
        from yaml import CDumper as Dumper  # noqa: F401
        from yaml import CSafeLoader as Loader  # noqa: F401

        yaml_library_type = "C"
    except ImportError:
        yaml_library_type = "Python"

    console.print()
    console.print(f"YAML Library Type: {yaml_library_type}")


@app.command("set, s")
def set(
    ctx: typer.Context,
    data_path: Annotated[
        Optional[str],
        typer.Option(
            "--data-path",
            help="Directory for notes and flashcards (None = platform data directory)",
        ),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option(
            "--remove-data-path",
            help="Reset data path to None (use the platform data directory)",
        ),
    ] = False,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help=f"One of {', '.join(LOG_LEVELS)}"),
    ] = None,
    log_to_file: Annotated[
        Optional[bool],
        typer.Option(
            "--log-to-file/--no-log-to-file",
            help="Also write logs to the platform log directory",
        ),
    ] = None,
    show_header: Annotated[
        Optional[bool],
        typer.Option("--show-header/--no-show-header", help="Show report headers"),
    ] = None,
    import_overwrite: Annotated[
        Optional[bool],
        typer.Option(
            "--import-overwrite/--no-import-overwrite",
            help="Default for import --overwrite",
        ),
    ] = None,
    import_skip_duplicates: Annotated[
        Optional[bool],
        typer.Option(
            "--import-skip-duplicates/--no-import-skip-duplicates",
            help="Default for import --skip-duplicates",
        ),
    ] = None,
) -> None:
    """Update configuration settings."""
    if data_path is not None and remove_data_path:
        raise typer.BadParameter("--data-path and --remove-data-path cannot be combined")
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        raise typer.BadParameter(f"Unknown log level '{log_level}'")

    store = get_store(ctx)
    store.configuration.update_config(
        data_path=data_path,
        remove_data_path=remove_data_path,
        log_level=log_level,
        log_to_file=log_to_file,
        show_header=show_header,
        import_overwrite=import_overwrite,
        import_skip_duplicates=import_skip_duplicates,
    )

    console = Console()
    console.print("Configuration updated")
