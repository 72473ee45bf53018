# SPDX-License-Identifier: MIT

from kasten.configuration import DataPaths
from kasten.repository.configuration import ConfigurationRepository
from kasten.repository.flashcard import FlashcardRepository
from kasten.repository.note import NoteRepository


class Store:
    """
    All repositories of one kasten data directory.

    Built once by the composition root (kasten.initialize) and handed to
    the services; nothing reaches it through module globals.
    """

    def __init__(
        self, configuration_repo: ConfigurationRepository, data_paths: DataPaths
    ) -> None:
        self.data_paths = data_paths
        self.configuration = configuration_repo
        self.notes = NoteRepository(data_paths["notes"])
        self.flashcards = FlashcardRepository(data_paths["flashcards"])

    def flush(self) -> None:
        self.configuration.flush()
        self.notes.flush()
        self.flashcards.flush()
