# SPDX-License-Identifier: MIT

import typer

from kasten.repository.store import Store


def get_store(ctx: typer.Context) -> Store:
    """The Store built by the app callback for this invocation."""
    store = ctx.find_object(Store)
    if store is None:
        raise RuntimeError("kasten store is not initialized")
    return store
