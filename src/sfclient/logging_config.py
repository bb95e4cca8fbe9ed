from __future__ import annotations

import logging
import re
from typing import Optional

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"

# Third-party loggers held at or above these levels whatever -v/-vv asks for.
_QUIET_LOGGERS = {
    "urllib3.connectionpool": logging.WARNING,
    "urllib3.connection": logging.ERROR,
}

_BEARER_RE = re.compile(r"(Bearer\s+)[^\s'\"]+")


class RedactBearerFilter(logging.Filter):
    """Mask ``Bearer <token>`` values in formatted log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BEARER_RE.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: Optional[int]) -> None:
    """Set up root logging for the sfclient CLI.

    The first call installs a stream handler; later calls only change the
    level. Every root handler gets a :class:`RedactBearerFilter`.
    """
    lvl = level if level is not None else logging.WARNING
    root = logging.getLogger()

    if not root.handlers:
        logging.basicConfig(level=lvl, format=_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT)
    root.setLevel(lvl)

    for handler in root.handlers:
        if not any(isinstance(f, RedactBearerFilter) for f in handler.filters):
            handler.addFilter(RedactBearerFilter())

    for name, floor in _QUIET_LOGGERS.items():
        lib_logger = logging.getLogger(name)
        if lib_logger.level < floor:
            lib_logger.setLevel(floor)
