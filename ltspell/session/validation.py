"""
Suggestion validation — bounds checking against the checked fragment.

A span outside the fragment is a broken contract on the checker's side.
The whole fragment is dropped rather than emitting an out-of-bounds
annotation or registering a truncated substring.
"""
import logging
from typing import Sequence

from ltspell.checker.errors import MalformedSuggestion
from ltspell.models.suggestion import Suggestion
from ltspell.models.validation import ValidationResult

logger = logging.getLogger(__name__)


def validate_suggestions(suggestions: Sequence[Suggestion], text: str) -> ValidationResult:
    """
    Check every suggestion span against *text*.

    Errors:   span out of bounds, non-positive length, negative position.
    Warnings: suggestion without replacement candidates.
    """
    errors = []
    warnings = []

    for i, s in enumerate(suggestions):
        if not s.fits(text):
            errors.append(
                f"Suggestion #{i} span [{s.position},+{s.length}] out of bounds "
                f"for text length {len(text)}"
            )
        elif not s.replacements:
            warnings.append(f"Suggestion #{i} at {s.position} has no replacements")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def ensure_valid_suggestions(suggestions: Sequence[Suggestion], text: str) -> None:
    """
    Raise MalformedSuggestion if any span does not fit *text*.

    Raises:
        MalformedSuggestion: with all bounds errors joined.
    """
    result = validate_suggestions(suggestions, text)
    for warning in result.warnings:
        logger.debug(warning)
    if not result.valid:
        raise MalformedSuggestion("; ".join(result.errors))
