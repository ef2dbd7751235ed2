"""
Logging setup for Daggerboard.

setup_logging() is called once from the FastAPI lifespan handler; source
modules use ``logger = logging.getLogger(__name__)``.

What each level carries:
  DEBUG   – individual mutations and broadcasts
  INFO    – campaign lifecycle, migrations, legacy import
  WARNING – fallbacks, stale selector repair, suspicious input
  ERROR   – failed broadcast handlers, storage failures
"""

import logging
import sys

PLAIN_FORMAT = "[%(name)s] %(message)s"
# Commands arrive on worker threads, one per window request
DEBUG_FORMAT = "%(asctime)s %(threadName)s [%(name)s] %(levelname)s %(message)s"

_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure the root logger.

    With debug, lines carry timestamps and thread names and SQL statements
    are logged; otherwise SQLAlchemy and HTTP client chatter is held at
    WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=DEBUG_FORMAT if debug else PLAIN_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
