import logging
import sys
from typing import Iterable

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers kept at WARNING unless the app runs at DEBUG
NOISY_LOGGERS = ("httpx", "uvicorn.access")


def setup_logging(level: str = "INFO", quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    """
    Configure application logging to stdout.

    Unknown level names fall back to INFO.
    """
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if resolved > logging.DEBUG:
        for name in quiet:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve a logger under the ledgermap namespace.
    """
    if name.startswith("ledgermap"):
        return logging.getLogger(name)
    return logging.getLogger(f"ledgermap.{name}")
