# SPDX-License-Identifier: MIT

import click

from kasten.repository.store import Store


def register_cleanup(ctx: click.Context, store: Store) -> None:
    """Write dirty entities when the command finishes, even if it failed."""
    ctx.call_on_close(store.flush)
