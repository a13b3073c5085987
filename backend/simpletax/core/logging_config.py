# simpletax/core/logging_config.py
import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Send application logs to stdout."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
