"""Logging setup for running Blogit on its own, as in scripts and tests.

Host applications usually own logging. Blogit's modules only ever call
`logging.getLogger(__name__)`, so they follow whatever the host configures.
"""

import logging
import os
import sys

DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s: %(message)s"

#: Loggers that report every storage read and write at DEBUG
CHATTY_LOGGERS = ["blogit.adapters", "blogit.core", "blogit.port"]


def configure_logging(level=None, format_string=None):
    """Send Blogit's log records to stdout.

    :param level: level name like `DEBUG`. Falls back to the `BLOGIT_LOG_LEVEL`
                  environment variable, then to `INFO`. Unknown names mean `INFO`.
    :param format_string: a `logging` format. DEBUG gets one with logger names.
    """
    level_name = (level or os.environ.get("BLOGIT_LOG_LEVEL") or "INFO").upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    if format_string is None:
        format_string = DEBUG_FORMAT if numeric_level == logging.DEBUG else DEFAULT_FORMAT

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    storage_level = logging.DEBUG if numeric_level == logging.DEBUG else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(storage_level)
