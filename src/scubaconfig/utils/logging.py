"""Logging setup for scubaconfig.

Log lines go to stderr so that documents written to stdout stay clean.
Every record carries a ``source`` field naming the document being
processed. ConfigStore.load_file binds it for the duration of a load;
elsewhere it reads ``-``.
"""

import logging
import sys

from loguru import logger

from scubaconfig.settings import LoggingConfig

NO_SOURCE = "-"

CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{extra[source]}</cyan> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[source]} | {message}"


class _StdlibBridge(logging.Handler):
    """Forward records from libraries that use the logging module.

    The stdlib logger name stands in for the document source.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(source=record.name).opt(exception=record.exc_info).log(level, record.getMessage())


def configure_logging(config: LoggingConfig) -> None:
    """
    Replace loguru's sinks with the ones described by ``config``.

    Args:
        config: LoggingConfig with level, format, and optional file settings.
    """
    logger.remove()
    logger.configure(extra={"source": NO_SOURCE})

    serialize = config.format == "json"
    logger.add(
        sys.stderr,
        format="{message}" if serialize else CONSOLE_FORMAT,
        level=config.level,
        serialize=serialize,
        colorize=not serialize,
    )

    if config.file:
        logger.add(
            config.file,
            format=FILE_FORMAT,
            level=config.level,
            serialize=serialize,
            rotation=config.rotation,
            retention=config.retention,
            compression="gz",
        )

    # Third-party chatter below WARNING is not useful for a config tool
    logging.basicConfig(handlers=[_StdlibBridge()], level=logging.WARNING, force=True)
