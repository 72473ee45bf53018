"""
Shared test fixtures: a store on a temporary data directory, the services
built on it, and a fixed clock.
"""

import pendulum
import pytest

from kasten.initialize import initialize
from kasten.service.flashcard import FlashcardService
from kasten.service.markdown_export import ExportService
from kasten.service.markdown_import import ImportService
from kasten.service.note import NoteService


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep tests away from the user's real config and data directories."""
    monkeypatch.delenv("KASTEN_CONFIG", raising=False)
    monkeypatch.delenv("KASTEN_DATA_PATH", raising=False)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config" / "config.yaml"


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(config_path, data_path):
    """Store backed by a temporary data directory."""
    return initialize(config_path, data_path)


@pytest.fixture
def note_service(store):
    return NoteService(store)


@pytest.fixture
def flashcard_service(store):
    return FlashcardService(store)


@pytest.fixture
def import_service(store):
    return ImportService(store)


@pytest.fixture
def export_service(store):
    return ExportService(store)


@pytest.fixture
def now():
    """Fixed review time."""
    return pendulum.datetime(2024, 1, 1, 9, 30, tz="UTC")


@pytest.fixture
def sample_note(note_service):
    """Note with tags, extra metadata and two flashcards' worth of content."""
    return note_service.create_note(
        "Photosynthèse",
        "Light energy is turned into chemical energy.",
        tags=["biologie", "plantes"],
        extra={"source": "manuel"},
    )


@pytest.fixture
def sample_flashcards(flashcard_service, sample_note):
    return [
        flashcard_service.create_flashcard(
            sample_note["id"], "Où a lieu la photosynthèse ?", "Dans les chloroplastes."
        ),
        flashcard_service.create_flashcard(
            sample_note["id"], "Quel gaz est libéré ?", "Le dioxygène."
        ),
    ]
