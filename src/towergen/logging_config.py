"""
Logging Configuration
Sets up the logger for the ``towergen`` namespace.

Library modules only ever call ``logging.getLogger(__name__)``; the command
line front end (or an embedding application) decides where records go.
The CLI sends them to stderr so that ``--json`` output on stdout stays
parseable.
"""
import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO,
                  log_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configures the logger for the 'towergen' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        stream: Console stream; defaults to stdout.
    """
    logger = logging.getLogger("towergen")
    logger.setLevel(level)

    # Replacing handlers keeps repeated calls from duplicating records
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized (level %s).", logging.getLevelName(level))
    return logger
