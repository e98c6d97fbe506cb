# config.py
import logging
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TIME_ZONE = os.getenv("BANDWIDTH_DEFAULT_TIME_ZONE", "UTC")
DEFAULT_PERSONA = os.getenv("BANDWIDTH_DEFAULT_PERSONA", "balanced")
LOG_LEVEL = os.getenv("BANDWIDTH_LOG_LEVEL", "INFO").upper()

_logging_configured = False


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging with a console handler (idempotent)."""
    global _logging_configured
    if _logging_configured:
        return

    log_level = getattr(logging, level, logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # Reduce noise from libraries
    logging.getLogger("streamlit").setLevel(logging.WARNING)
    logging.getLogger("watchdog").setLevel(logging.WARNING)

    _logging_configured = True
