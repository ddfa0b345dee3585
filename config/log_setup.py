"""Root logger setup for the entry points (CLI and HTTP API).

Library modules only ever call logging.getLogger(__name__). Handlers are
installed here, once, by whichever entry point is running.
"""

import logging
import logging.handlers
import pathlib

from rich.logging import RichHandler

LOG_FILE = pathlib.Path(__file__).parents[1] / "remediation_planner.log"
LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: int = logging.INFO,
    log_file: pathlib.Path | None = LOG_FILE,
    console: bool = False,
) -> None:
    """Attach a rotating file handler and, optionally, a Rich console handler.

    Args:
        level:    Root log level.
        log_file: Where to write the rotating log. None disables file logging.
        console:  Also log to the terminal through Rich.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if log_file is not None:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(file_handler)

    if console:
        root.addHandler(RichHandler(show_path=False, markup=False))
