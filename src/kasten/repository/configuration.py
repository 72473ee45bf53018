# SPDX-License-Identifier: MIT

from copy import deepcopy
from pathlib import Path
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import Dumper, SafeLoader as Loader  # type: ignore[assignment]

from kasten import configuration
from kasten.logger import get_logger

logger = get_logger(__name__)


class ConfigurationRepository:
    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        defaults = configuration.get_default_configuration()
        if not self.config_path.is_file():
            self._config = defaults
            return

        loaded = load(self.config_path.read_text(), Loader=Loader) or {}

        # Back-fill settings added after the file was written
        for key, value in defaults.items():
            if key not in loaded:
                loaded[key] = value
        self._config = loaded
        logger.debug(f"Loaded configuration from {self.config_path}")

    def __save_data(self, config: configuration.Configuration) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(dump(dict(config), Dumper=Dumper, sort_keys=False))

    def ensure_file(self) -> None:
        if not self.config_path.is_file():
            self.__save_data(self.config)

    def flush(self) -> bool:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False
            return True
        return False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        log_level: Optional[str] = None,
        log_to_file: Optional[bool] = None,
        show_header: Optional[bool] = None,
        import_overwrite: Optional[bool] = None,
        import_skip_duplicates: Optional[bool] = None,
    ) -> None:
        self.is_dirty = True

        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if log_level is not None:
            self.config["log_level"] = log_level.upper()
        if log_to_file is not None:
            self.config["log_to_file"] = log_to_file
        if show_header is not None:
            self.config["show_header"] = show_header
        if import_overwrite is not None:
            self.config["import_overwrite"] = import_overwrite
        if import_skip_duplicates is not None:
            self.config["import_skip_duplicates"] = import_skip_duplicates
