"""
Fragment Processor — turns one fragment into its ordered annotation list.

Executes the 3-stage flow:
    1. Retraction pass: every earlier-reported substring found in the text
    2. Fetch pass: ask the checker, validate spans against the text
    3. Typo pass: one TYPO annotation per suggestion + registry update

Output order is all RETRACT annotations (registry order) followed by all
TYPO annotations (checker order). A failed fetch yields a failed result with
no annotations at all, and leaves the registry untouched.
"""
import logging
from typing import Callable, List, Sequence

from ltspell.checker.errors import UpstreamCheckFailure
from ltspell.config.logging_config import loggable_text
from ltspell.models.annotation import Annotation, AnnotationKind, FragmentResult
from ltspell.models.fragment import Fragment
from ltspell.models.suggestion import Suggestion
from ltspell.session.metrics import (
    record_annotations,
    record_fragment_outcome,
    record_registry_rejection,
    timed_check,
)
from ltspell.session.registry import ReportedSpanRegistry
from ltspell.session.validation import ensure_valid_suggestions

logger = logging.getLogger(__name__)

# checker(text, locale) -> suggestions in checker order
Checker = Callable[[str, str], Sequence[Suggestion]]


def process_fragment(
    fragment: Fragment,
    registry: ReportedSpanRegistry,
    checker: Checker,
    locale: str,
    suggestion_limit: int = 0,
) -> FragmentResult:
    """
    Process a single fragment.

    Args:
        fragment: Text plus the host's correlation id.
        registry: The owning session's reported-span registry.
        checker: Function(text, locale) → Suggestions.
        locale: Session locale passed through to the checker.
        suggestion_limit: Max replacement candidates per TYPO annotation;
                          0 or less keeps all of them.

    Returns:
        FragmentResult with RETRACT annotations first, then TYPO annotations,
        or a failed FragmentResult if the checker call or its output failed.
    """
    cid = fragment.correlation_id
    text = fragment.text
    logger.debug("Processing fragment %s: %s", cid, loggable_text(text))

    if not text:
        record_fragment_outcome("ok")
        return FragmentResult(correlation_id=cid)

    # ------------------------------------------------------------------
    # Stage 1: Retraction pass
    # ------------------------------------------------------------------
    retractions: List[Annotation] = [
        Annotation.retract(r.position, r.length, cid)
        for r in registry.find_retractions(text)
    ]

    # ------------------------------------------------------------------
    # Stage 2: Fetch + bounds validation
    # ------------------------------------------------------------------
    try:
        with timed_check():
            suggestions = list(checker(text, locale))
        ensure_valid_suggestions(suggestions, text)
    except UpstreamCheckFailure as e:
        logger.error("Check failed for fragment %s (%s): %s", cid, e.reason, e.message)
        record_fragment_outcome(e.reason)
        return FragmentResult.failed(cid, e.message)
    except Exception as e:  # noqa: BLE001
        logger.error("Check failed for fragment %s: %s", cid, e)
        record_fragment_outcome("upstream_failure")
        return FragmentResult.failed(cid, str(e) or type(e).__name__)

    # ------------------------------------------------------------------
    # Stage 3: Typo annotations + registry update
    # ------------------------------------------------------------------
    typos: List[Annotation] = []
    for s in suggestions:
        payload = s.replacements[:suggestion_limit] if suggestion_limit > 0 else s.replacements
        typos.append(Annotation.typo(s.position, s.length, payload, cid))

        incorrect_text = text[s.position : s.end]
        if registry.is_full and incorrect_text not in registry:
            record_registry_rejection()
        else:
            registry.record(incorrect_text)

    record_fragment_outcome("ok")
    record_annotations(AnnotationKind.RETRACT.value, len(retractions))
    record_annotations(AnnotationKind.TYPO.value, len(typos))
    logger.debug(
        "Fragment %s: %d retraction(s), %d typo(s)", cid, len(retractions), len(typos)
    )

    return FragmentResult(correlation_id=cid, annotations=tuple(retractions + typos))
