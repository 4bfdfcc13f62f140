"""
Logging setup for the record service.

Application modules log through ``logging.getLogger(__name__)``; the root
logger gets one console handler. pymongo's own loggers (connection pool,
server selection, command monitoring) are held at WARNING so request logs
stay readable at INFO or DEBUG.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
QUIET_LOGGERS = ("pymongo",)
HANDLER_NAME = "rail-records-console"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger at ``level``; later calls only adjust levels."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if any(handler.get_name() == HANDLER_NAME for handler in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)
