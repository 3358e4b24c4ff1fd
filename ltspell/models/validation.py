"""
ValidationResult — outcome of checking a suggestion list against its fragment.
"""
from dataclasses import dataclass, field
from typing import List


@dataclass
class ValidationResult:
    """Result of suggestion span validation."""

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
