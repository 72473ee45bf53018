# SPDX-License-Identifier: MIT

import os
from pathlib import Path
from typing import Optional, TypedDict

import platformdirs

APP_NAME = "kasten"

CONFIG_PATH_ENV = "KASTEN_CONFIG"
DATA_PATH_ENV = "KASTEN_DATA_PATH"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"
DEFAULT_DATA_PATH = platformdirs.user_data_path(APP_NAME)
DEFAULT_LOG_PATH = platformdirs.user_log_path(APP_NAME)

NOTES_DIR_NAME = "notes"
FLASHCARDS_DIR_NAME = "flashcards"


class Configuration(TypedDict):
    data_path: Optional[str]
    log_level: str
    log_to_file: bool
    show_header: bool
    import_overwrite: bool
    import_skip_duplicates: bool


class DataPaths(TypedDict):
    root: Path
    notes: Path
    flashcards: Path


def get_default_configuration() -> Configuration:
    return {
        "data_path": None,
        "log_level": "WARNING",
        "log_to_file": False,
        "show_header": True,
        "import_overwrite": False,
        "import_skip_duplicates": True,
    }


def resolve_config_path(config_path_option: Optional[Path] = None) -> Path:
    """
    Pick the config file to use.

    Priority:
    1. --config option
    2. KASTEN_CONFIG environment variable
    3. platform config directory
    """
    if config_path_option is not None:
        return config_path_option.expanduser()
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return APP_CONFIG_PATH


def resolve_data_paths(
    config: Configuration, data_path_option: Optional[Path] = None
) -> DataPaths:
    """
    Pick the data directory to use.

    Priority:
    1. --data-path option
    2. KASTEN_DATA_PATH environment variable
    3. data_path setting in config.yaml
    4. platform data directory
    """
    root: Path
    env_path = os.environ.get(DATA_PATH_ENV)
    if data_path_option is not None:
        root = data_path_option
    elif env_path:
        root = Path(env_path)
    elif config["data_path"] is not None:
        root = Path(config["data_path"])
    else:
        root = DEFAULT_DATA_PATH

    root = root.expanduser()
    return {
        "root": root,
        "notes": root / NOTES_DIR_NAME,
        "flashcards": root / FLASHCARDS_DIR_NAME,
    }
