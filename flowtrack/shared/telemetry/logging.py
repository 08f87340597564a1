"""Logging setup for processes that host flowtrack (dashboard, scripts).

The library itself never configures handlers; it only attaches a
NullHandler to the "flowtrack" logger (see flowtrack/__init__.py).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Configure root logging to stdout; DEBUG when debug is True, else INFO."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
