"""
Logging setup for the shardwise CLI.

Every module asks get_logger() for a logger under the "shardwise." namespace;
the CLI callback calls setup_logging() once with the level and destinations
from the tool configuration.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

_CONFIGURED = False

_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_VERBOSE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

def setup_logging(level: str = "INFO",
                  log_file: Optional[Path] = None,
                  verbose: bool = False
                  ) -> None:
    """
    Route shardwise logs to stderr and, optionally, a file.

    :param level: Level name, case-insensitive.
    :param log_file: Extra destination; its directory is created on demand.
    :param verbose: Prefix each record with logger name and line number.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=_VERBOSE_FORMAT if verbose else _FORMAT,
        datefmt="%H:%M:%S",
        handlers=handlers,
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, e.g. get_logger("scheduler") -> "shardwise.scheduler"."""
    return logging.getLogger(f"shardwise.{name}")
