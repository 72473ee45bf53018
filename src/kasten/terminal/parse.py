# SPDX-License-Identifier: MIT

import os
import re
import subprocess
import tempfile
from typing import Optional, Sequence

import pendulum
import typer

from kasten.model.entity_id import EntityId
from kasten.time import datetime_from_str_utc


def parse_datetime(datetime_param: Optional[str | int]) -> Optional[pendulum.DateTime]:
    if datetime_param is None:
        return None

    datetime = str(datetime_param)

    # Match YYYY-MM-DD format (with optional time component)
    if re.match(r"\d{4}-\d{2}-\d{2}", datetime):
        try:
            return datetime_from_str_utc(datetime)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date: {e}")

    # Numeric input is a day offset from today (e.g., "1", "-1", "365")
    if re.match(r"^-?\d+$", datetime):
        return pendulum.today().add(days=int(datetime)).in_tz("UTC")

    if datetime == "now" or datetime == "n":
        return pendulum.now().in_tz("UTC")
    if datetime == "today" or datetime == "t":
        return pendulum.today().start_of("day").in_tz("UTC")
    if datetime == "tomorrow" or datetime == "o":
        return pendulum.tomorrow().start_of("day").in_tz("UTC")
    raise typer.BadParameter("Incorrect datetime format")


def resolve_id(id_prefix: str, ids: Sequence[Optional[EntityId]], kind: str) -> EntityId:
    """
    Expand a (possibly shortened) id to the full id it prefixes.

    Raises:
        typer.BadParameter: If no id or more than one id matches
    """
    id_prefix = id_prefix.strip()
    if not id_prefix:
        raise typer.BadParameter(f"An empty {kind} id is not valid")

    matches = [id for id in ids if id is not None and id.startswith(id_prefix)]
    if id_prefix in matches:
        return id_prefix
    if len(matches) == 0:
        raise typer.BadParameter(f"No {kind} matches id '{id_prefix}'")
    if len(matches) > 1:
        raise typer.BadParameter(
            f"'{id_prefix}' matches {len(matches)} {kind}s, use more characters"
        )
    return matches[0]


def open_editor_for_text(initial_text: Optional[str] = None) -> Optional[str]:
    """
    Open the user's preferred editor.
    Returns the edited text with trailing newlines removed, or None if empty.
    """
    editor = os.environ.get("EDITOR", "nano")

    with tempfile.NamedTemporaryFile(mode="w+", suffix=".md") as tf:
        if initial_text is not None:
            tf.write(initial_text)
            tf.flush()

        subprocess.run([editor, tf.name], check=True)
        tf.seek(0)
        text = tf.read()
        if not text.strip():
            return None
        return text.rstrip("\n")
