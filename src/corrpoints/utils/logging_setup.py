"""Configure loguru sinks from the logging section of the config."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from corrpoints.config import LoggingConfig


def configure_logging(config: LoggingConfig) -> None:
    logger.remove()
    if config.output == "stdout":
        logger.add(sys.stdout, level=config.level)
    elif config.output == "stderr":
        logger.add(sys.stderr, level=config.level)
    else:
        path = Path(config.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(path, level=config.level)
    logger.debug(f"Logging configured at {config.level} to {config.output}")
