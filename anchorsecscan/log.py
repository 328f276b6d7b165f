"""Logging setup for the command line entry point."""

import logging
import sys
from typing import Optional

LOG_FILE = "anchorsecscan.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, log_file: Optional[str] = LOG_FILE) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        verbose: Enable verbose logging (debug level, echoed to stderr)
        log_file: File to append log records to, or None to skip the file

    Returns:
        Configured logger instance
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr) if verbose else logging.NullHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, delay=True))
    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers)
    return logging.getLogger("anchorsecscan")
