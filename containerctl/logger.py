import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "containerctl"


def setup_logger(
    verbose: bool = False,
    *,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    formatter = logging.Formatter(
        fmt="[%(levelname)s] %(name)s: %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
