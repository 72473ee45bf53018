# SPDX-License-Identifier: MIT

import re
from typing import Any, Optional

import click
import typer
import typer.core
from rich.console import Console

from kasten.exceptions import KastenError

error_console = Console(stderr=True)


class AliasedTyperGroup(typer.core.TyperGroup):
    """Custom TyperGroup that supports comma-separated command aliases"""

    _CMD_SPLIT_P = re.compile(r" ?, ?")

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Resolve an alias to the full command name"""
        cmd_name = self._group_cmd_name(cmd_name)
        return super().get_command(ctx, cmd_name)

    def _group_cmd_name(self, default_name: str) -> str:
        for cmd in self.commands.values():
            name = cmd.name
            if name and default_name in self._CMD_SPLIT_P.split(name):
                return name
        return default_name

    def add_command(self, cmd: click.Command, name: Optional[str] = None) -> None:
        if name is None:
            name = cmd.name

        existing_name = self._group_cmd_name(name or "")
        if existing_name in self.commands and existing_name != name:
            return

        super().add_command(cmd, name)

    def invoke(self, ctx: click.Context) -> Any:
        """Report domain errors in red and exit with status 1"""
        try:
            return super().invoke(ctx)
        except KastenError as e:
            error_console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)


class KastenTyperGroup(AliasedTyperGroup):
    """Top-level group listing commands in workflow order"""

    def list_commands(self, ctx: click.Context) -> list[str]:
        desired_order = [
            "note, n",
            "card, c",
            "export, e",
            "import, i",
            "validate, v",
            "config, cf",
        ]

        result = []
        for cmd_name in desired_order:
            if cmd_name in self.commands:
                result.append(cmd_name)

        for cmd_name in self.commands.keys():
            if cmd_name not in result:
                result.append(cmd_name)

        return result
