from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidInput

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

DEFAULT_LOAN_PERIOD_DAYS = 7
DEFAULT_FINE_PER_DAY = 1
DEFAULT_RECENT_WINDOW = 5


@dataclass(frozen=True)
class LibraryConfig:
    """
    Runtime settings for a library instance.

    Attributes:
        loan_period_days (int): Days between issue and due date.
        fine_per_day (int): Fine in whole currency units per started day late.
        data_dir (Optional[str]): Directory for JSON collections; None keeps
            everything in memory.
        recent_window (int): How many loans the recent-activity view shows.
    """
    loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS
    fine_per_day: int = DEFAULT_FINE_PER_DAY
    data_dir: Optional[str] = None
    recent_window: int = DEFAULT_RECENT_WINDOW

    def __post_init__(self) -> None:
        if self.loan_period_days <= 0:
            raise InvalidInput("loan_period_days must be positive")
        if self.fine_per_day < 0:
            raise InvalidInput("fine_per_day cannot be negative")
        if self.recent_window <= 0:
            raise InvalidInput("recent_window must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LibraryConfig":
        env = os.environ if environ is None else environ

        def _int(name: str, default: int) -> int:
            raw = env.get(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                raise InvalidInput(f"{name} must be an integer, got {raw!r}") from None

        return cls(
            loan_period_days=_int("SHELFWISE_LOAN_DAYS", DEFAULT_LOAN_PERIOD_DAYS),
            fine_per_day=_int("SHELFWISE_FINE_PER_DAY", DEFAULT_FINE_PER_DAY),
            data_dir=env.get("SHELFWISE_DATA_DIR") or None,
            recent_window=_int("SHELFWISE_RECENT_WINDOW", DEFAULT_RECENT_WINDOW),
        )


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the ``shelfwise`` logger (safe to call twice)."""
    logger = logging.getLogger("shelfwise")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
