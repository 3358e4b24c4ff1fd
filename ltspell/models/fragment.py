"""
Fragment and CorrelationId — one text submission from the host.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class CorrelationId:
    """Opaque (cookie, sequence) pair echoed back on every derived annotation."""

    cookie: int
    sequence: int

    def to_dict(self) -> dict:
        return {"cookie": self.cookie, "sequence": self.sequence}


@dataclass(frozen=True)
class Fragment:
    """Text handed in by the host for a single check pass."""

    text: str
    correlation_id: CorrelationId = CorrelationId(0, 0)

    @classmethod
    def of(cls, text: str, cookie: int = 0, sequence: int = 0) -> "Fragment":
        return cls(text=text, correlation_id=CorrelationId(cookie, sequence))

    def __len__(self) -> int:
        return len(self.text)
