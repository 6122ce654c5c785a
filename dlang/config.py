"""Interpreter configuration and logging setup."""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_RECURSION_LIMIT = 5000
LOG_LEVEL_ENV = "DLANG_LOG_LEVEL"


def setup_logging(level: str = DEFAULT_LOG_LEVEL, stream=None) -> None:
    """
    Configure logging for the interpreter. Logs go to stderr by default so they never mix with program output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Optional stream to log to instead of stderr.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream if stream is not None else sys.stderr,
    )
    logging.getLogger("dlang").setLevel(numeric_level)

    logging.debug("Logging initialized at %s level", level.upper())


@dataclass
class Config:
    log_level: str = DEFAULT_LOG_LEVEL
    recursion_limit: int = DEFAULT_RECURSION_LIMIT
    diagnose: bool = False

    @classmethod
    def from_args(cls, args) -> "Config":
        """Builds a Config from an argparse namespace. Missing options fall back to the environment, then defaults."""
        log_level: Optional[str] = getattr(args, "log_level", None)
        recursion_limit: Optional[int] = getattr(args, "recursion_limit", None)

        return cls(
            log_level=log_level or os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
            recursion_limit=recursion_limit or DEFAULT_RECURSION_LIMIT,
            diagnose=bool(getattr(args, "diagnose", False)),
        )

    def apply(self) -> None:
        """Configures logging and the host recursion limit (dlang calls recurse on the Python stack)."""
        setup_logging(self.log_level)
        sys.setrecursionlimit(max(self.recursion_limit, 1000))
