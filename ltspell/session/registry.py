"""
Reported-Span Registry — per-session memory of every substring flagged so far.

Why content and not positions
-----------------------------
The host re-submits growing and shrinking windows of the sentence being
typed and never says which earlier fragment a new one continues. Example:

    request 1: 'Hi ha "cotxes'                  → unpaired quote, "cotxes flagged
    request 2: 'Hi ha "cotxes" blaus al carrer' → clean, but the host still
                                                  shows the old marker

Markers are not expired by the host, so every fragment is first scanned for
the literal text of everything reported earlier, and those spans are asked
to be removed before the fresh results are attached.

The registry is append-only and bounded. It is never cleared mid-session:
a cleared entry could reappear in a fragment whose relation to the earlier
one is unknown and leave a stale marker behind. Once full, new errors are
still annotated but will not be retracted later.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List

from ltspell.config.constants import MAX_REPORTED_ERRORS_STORED
from ltspell.config.logging_config import loggable_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Retraction:
    """One occurrence of a previously reported substring in a new fragment."""

    matched_text: str
    position: int
    length: int


class ReportedSpanRegistry:
    """Fixed-capacity, insertion-ordered set of flagged substrings. No eviction."""

    def __init__(self, capacity: int = MAX_REPORTED_ERRORS_STORED):
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._entries: Dict[str, None] = {}

    def find_retractions(self, text: str) -> List[Retraction]:
        """
        Every occurrence of every registered substring in *text*.

        The search restarts one character after each hit, so overlapping
        occurrences are all reported ("aaa" in "aaaa" → 0 and 1).
        """
        retractions: List[Retraction] = []
        for entry in self._entries:
            length = len(entry)
            idx = text.find(entry)
            while idx != -1:
                logger.debug("Asking to remove: '%s' at %d, %d", loggable_text(entry), idx, length)
                retractions.append(Retraction(entry, idx, length))
                idx = text.find(entry, idx + 1)
        return retractions

    def record(self, text: str) -> bool:
        """
        Remember *text* as reported.

        Returns:
            True if it was added; False when already present, empty, or the
            registry is full.
        """
        if not text or text in self._entries:
            return False
        if len(self._entries) >= self.capacity:
            return False
        self._entries[text] = None
        logger.debug("Reported errors stored: %d", len(self._entries))
        return True

    def size(self) -> int:
        return len(self._entries)

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    def entries(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: object) -> bool:
        return text in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
