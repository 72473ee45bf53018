# SPDX-License-Identifier: MIT

"""Logging configuration using Loguru."""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger


def setup_logging(
    level: str = "WARNING",
    log_to_file: bool = False,
    log_dir: Optional[Path] = None,
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
) -> None:
    """Configure the stderr sink and, optionally, a rotating file sink."""
    logger.remove()

    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True,
    )

    if log_to_file and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "kasten_{time:YYYY-MM-DD}.log",
            level=level.upper(),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation=file_rotation,
            retention=file_retention,
        )


def get_logger(name: str) -> Any:
    """Get a logger instance for a module."""
    return logger.bind(module=name)
