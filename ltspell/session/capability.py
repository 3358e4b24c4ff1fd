"""
Platform capability gate for sentence-level checking.
"""
from typing import Optional

from ltspell.config import settings
from ltspell.config.constants import SENTENCE_CHECK_MIN_API_LEVEL


class CapabilityUnavailable(Exception):
    """Sentence-level checking is not available on this runtime."""

    def __init__(self, api_level: int, required: int = SENTENCE_CHECK_MIN_API_LEVEL) -> None:
        self.api_level = api_level
        self.required = required
        super().__init__(
            f"Sentence spell check is not supported on this platform "
            f"(API level {api_level} < {required})"
        )


def _resolve_api_level(api_level: Optional[int]) -> int:
    return settings.PLATFORM_API_LEVEL if api_level is None else api_level


def is_sentence_check_supported(api_level: Optional[int] = None) -> bool:
    return _resolve_api_level(api_level) >= SENTENCE_CHECK_MIN_API_LEVEL


def require_sentence_check(api_level: Optional[int] = None) -> None:
    """
    Raises:
        CapabilityUnavailable: when *api_level* (default PLATFORM_API_LEVEL)
            is below SENTENCE_CHECK_MIN_API_LEVEL.
    """
    api_level = _resolve_api_level(api_level)
    if not is_sentence_check_supported(api_level):
        raise CapabilityUnavailable(api_level)
