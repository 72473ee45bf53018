# SPDX-License-Identifier: MIT

from kasten.model.note import Note
from kasten.time import now_utc


def get_note_template() -> Note:
    now = now_utc()
    return {
        "id": None,
        "title": "",
        "content": "",
        "tags": [],
        "metadata": {
            "created": now,
            "updated": now,
            "extra": {},
        },
    }
