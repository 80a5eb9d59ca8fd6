from __future__ import annotations

"""
Logging Configuration Models.

Holds the record the CLI hands to configure_logging, the fixed record
formats of the console and file sinks, and the severity name mapping.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Terminal records stay short; files carry the emitting module and a timestamp
CONSOLE_FORMAT: str = "%(levelname)s | %(message)s"
FILE_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging setup requested by one CLI run.

    Attributes:
        level: Minimum severity name ('DEBUG', 'INFO', ...).
        console: Whether records are echoed on stderr.
        log_file: Rotating log file, or None for console only.
        max_bytes: Rollover threshold of the log file.
        backup_count: Rotated log files kept next to the active one.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 1024 * 1024
    backup_count: int = 2
