"""
Suggestion — one error span reported by the checking service.
"""
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Suggestion:
    """
    A flagged span of a fragment and its replacement candidates.

    ``position`` and ``length`` are Python string indices into the fragment
    text (the adapter has already converted the service's UTF-16 offsets).
    """

    position: int
    length: int
    replacements: Tuple[str, ...] = field(default=())

    @property
    def end(self) -> int:
        return self.position + self.length

    def fits(self, text: str) -> bool:
        """True when the span lies inside *text*."""
        return self.position >= 0 and self.length > 0 and self.end <= len(text)

    def __repr__(self) -> str:
        return f"Suggestion([{self.position},{self.end}], {list(self.replacements)!r})"
