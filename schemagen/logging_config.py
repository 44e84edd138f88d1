"""Logging configuration for schemagen.

All modules obtain their loggers through :func:`get_logger` so that output
ends up under the ``schemagen`` logger hierarchy.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "schemagen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package root logger.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: int | str = logging.INFO,
    use_rich: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the package root logger.

    Calling this more than once replaces the previously installed handler.

    Args:
        level: Log level name or number.
        use_rich: Use a rich handler instead of a plain stream handler.
        console: Console for the rich handler (defaults to stderr).

    Returns:
        The configured root logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    if use_rich:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    logger.addHandler(handler)
    return logger
