"""
Annotation, FragmentResult and BatchResult — what the session hands back to the host.

The host consumes each fragment's annotations as separate parallel arrays
(kinds / attributes / offsets / lengths / suggestions); all of them are
derived from the same ordered ``annotations`` tuple, so they stay
index-aligned by construction.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ltspell.config.constants import REMOVE_SPAN, RESULT_ATTR_LOOKS_LIKE_TYPO
from ltspell.models.fragment import CorrelationId


class AnnotationKind(str, Enum):
    TYPO = "TYPO"
    RETRACT = "RETRACT"


@dataclass(frozen=True)
class Annotation:
    """A single newly found error (TYPO) or the removal of an earlier one (RETRACT)."""

    kind: AnnotationKind
    position: int
    length: int
    correlation_id: CorrelationId
    payload: Tuple[str, ...] = field(default=())

    @classmethod
    def typo(
        cls,
        position: int,
        length: int,
        replacements: Tuple[str, ...],
        correlation_id: CorrelationId,
    ) -> "Annotation":
        return cls(AnnotationKind.TYPO, position, length, correlation_id, tuple(replacements))

    @classmethod
    def retract(cls, position: int, length: int, correlation_id: CorrelationId) -> "Annotation":
        return cls(AnnotationKind.RETRACT, position, length, correlation_id)

    @property
    def attributes(self) -> int:
        """Host result attribute flags for this annotation."""
        if self.kind is AnnotationKind.TYPO:
            return RESULT_ATTR_LOOKS_LIKE_TYPO
        return REMOVE_SPAN

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "offset": self.position,
            "length": self.length,
            "attributes": self.attributes,
            "suggestions": list(self.payload),
            **self.correlation_id.to_dict(),
        }


@dataclass(frozen=True)
class FragmentResult:
    """
    Outcome of processing one fragment.

    A failed fragment (``error`` set) carries no annotations: it is
    "could not be checked", which the host must not read as "clean".
    """

    correlation_id: CorrelationId
    annotations: Tuple[Annotation, ...] = field(default=())
    error: Optional[str] = None

    @classmethod
    def failed(cls, correlation_id: CorrelationId, error: str) -> "FragmentResult":
        return cls(correlation_id=correlation_id, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def retractions(self) -> List[Annotation]:
        return [a for a in self.annotations if a.kind is AnnotationKind.RETRACT]

    @property
    def typos(self) -> List[Annotation]:
        return [a for a in self.annotations if a.kind is AnnotationKind.TYPO]

    @property
    def kinds(self) -> List[AnnotationKind]:
        return [a.kind for a in self.annotations]

    @property
    def attributes(self) -> List[int]:
        return [a.attributes for a in self.annotations]

    @property
    def offsets(self) -> List[int]:
        return [a.position for a in self.annotations]

    @property
    def lengths(self) -> List[int]:
        return [a.length for a in self.annotations]

    @property
    def payloads(self) -> List[List[str]]:
        return [list(a.payload) for a in self.annotations]

    def to_dict(self) -> dict:
        return {
            **self.correlation_id.to_dict(),
            "ok": self.ok,
            "error": self.error,
            "kinds": [k.value for k in self.kinds],
            "attributes": self.attributes,
            "offsets": self.offsets,
            "lengths": self.lengths,
            "suggestions": self.payloads,
        }


@dataclass(frozen=True)
class BatchResult:
    """Per-fragment results of one batch call, in input order."""

    supported: bool
    fragments: Tuple[FragmentResult, ...] = field(default=())

    @classmethod
    def unsupported(cls) -> "BatchResult":
        return cls(supported=False)

    def __len__(self) -> int:
        return len(self.fragments)

    def __iter__(self):
        return iter(self.fragments)

    def to_dict(self) -> dict:
        return {
            "supported": self.supported,
            "fragments": [f.to_dict() for f in self.fragments],
        }
