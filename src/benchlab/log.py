from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LIBRARIES = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger.

    Calling it again replaces the handler instead of stacking a second one.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(numeric_level)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_benchlab", False):
            root.removeHandler(existing)
    handler._benchlab = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in _NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
