"""Logging configuration for rpc-typegen.

All modules obtain their logger through :func:`get_logger`, which keeps
everything under the ``rpc_typegen`` namespace. The library itself only
attaches a ``NullHandler``; the CLI decides where records go.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "rpc_typegen"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger scoped under the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: int = logging.WARNING,
    use_rich: bool = True,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Install a single handler on the package logger.

    Calling this again replaces the previously installed handler, so the
    CLI can reconfigure verbosity without duplicating output.

    Args:
        level: Minimum level to emit.
        use_rich: Use ``RichHandler`` instead of a plain stream handler.
        console: Console for the rich handler (defaults to stderr).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(levelname)s %(name)s: %(message)s")
        )

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
