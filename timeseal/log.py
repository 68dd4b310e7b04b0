"""Logging setup shared by the service and the CLI."""

import logging
from typing import Union


def setup(level: Union[int, str] = logging.INFO) -> logging.Logger:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return logging.getLogger("timeseal")
