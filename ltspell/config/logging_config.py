"""
Logging setup and log-safe rendering of user text.
"""
import logging
import sys
from typing import Optional

from ltspell.config import settings

LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s — %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the hosting process (stdout, LOG_LEVEL)."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )


def loggable_text(text: str) -> str:
    """
    Render fragment text for a log line.

    Users type private content, so the text is either redacted entirely
    (LOG_FRAGMENT_TEXT=false) or truncated to MAX_FRAGMENT_LOG_CHARS.
    """
    if not settings.LOG_FRAGMENT_TEXT:
        return f"<redacted {len(text)} chars>"
    limit = settings.MAX_FRAGMENT_LOG_CHARS
    if len(text) > limit:
        return text[:limit] + "…"
    return text
