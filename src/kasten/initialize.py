# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional

from kasten import configuration
from kasten.logger import get_logger, setup_logging
from kasten.repository.configuration import ConfigurationRepository
from kasten.repository.store import Store
from kasten.view import state as view_state

logger = get_logger(__name__)


def initialize(
    config_path: Optional[Path] = None, data_path: Optional[Path] = None
) -> Store:
    """
    Build the Store for this run: load the config, configure logging and
    make sure the data directories exist.
    """
    configuration_repo = ConfigurationRepository(
        configuration.resolve_config_path(config_path)
    )
    configuration_repo.ensure_file()
    config = configuration_repo.get_config()

    setup_logging(
        level=config["log_level"],
        log_to_file=config["log_to_file"],
        log_dir=configuration.DEFAULT_LOG_PATH,
    )

    data_paths = configuration.resolve_data_paths(config, data_path)
    __ensure_data_dirs(data_paths)

    view_state.set_show_header(config["show_header"])

    logger.debug(f"Using data directory {data_paths['root']}")
    return Store(configuration_repo, data_paths)


def __ensure_data_dirs(data_paths: configuration.DataPaths) -> None:
    data_paths["notes"].mkdir(parents=True, exist_ok=True)
    data_paths["flashcards"].mkdir(parents=True, exist_ok=True)
