"""
Central logging configuration.

- LOG_LEVEL from env, else the configured level (default INFO).
- Records go through rich's handler so they render alongside CLI tables.
"""
import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level_name: Optional[str] = None) -> None:
    """Configure the root logger once; calling again replaces the handler."""
    level_name = (os.getenv("LOG_LEVEL") or level_name or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    # Avoid duplicate handlers when reconfiguring
    for h in root.handlers[:]:
        if isinstance(h, RichHandler):
            root.removeHandler(h)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # google-genai and yfinance are chatty at INFO
    for noisy in ("httpx", "google_genai", "yfinance", "urllib3"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))
