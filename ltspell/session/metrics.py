"""
Prometheus Metrics — spell-check session observability.

Exposes counters and a histogram for:
- Fragment outcomes (ok / upstream_failure / malformed_suggestion / cancelled)
- Annotations emitted per kind (TYPO / RETRACT)
- Batches refused by the capability gate
- Substrings the full registry could not remember
- Checker call latency

Usage
-----
    from ltspell.session.metrics import record_fragment_outcome, timed_check

    with timed_check():
        suggestions = checker(text, locale)

    record_fragment_outcome("ok")
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# Processed fragments, labelled by outcome.
FRAGMENTS: Counter = Counter(
    "ltspell_fragments_total",
    "Fragments processed by outcome",
    ["outcome"],
)

# Emitted annotations, labelled by kind.
ANNOTATIONS: Counter = Counter(
    "ltspell_annotations_total",
    "Annotations emitted to the host by kind",
    ["kind"],
)

UNSUPPORTED_BATCHES: Counter = Counter(
    "ltspell_unsupported_batches_total",
    "Batch calls refused because sentence-level checking is unavailable",
)

REGISTRY_REJECTIONS: Counter = Counter(
    "ltspell_registry_rejections_total",
    "Flagged substrings not remembered because the session registry was full",
)

CHECK_LATENCY: Histogram = Histogram(
    "ltspell_check_seconds",
    "Latency of one external check call in seconds",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

def record_fragment_outcome(outcome: str) -> None:
    """Increment the fragment counter for *outcome*."""
    FRAGMENTS.labels(outcome=outcome).inc()


def record_annotations(kind: str, count: int) -> None:
    """Add *count* emitted annotations of *kind*."""
    if count > 0:
        ANNOTATIONS.labels(kind=kind).inc(count)


def record_unsupported_batch() -> None:
    UNSUPPORTED_BATCHES.inc()


def record_registry_rejection() -> None:
    REGISTRY_REJECTIONS.inc()


@contextmanager
def timed_check() -> Generator[None, None, None]:
    """
    Context manager that records checker latency.

    Usage::

        with timed_check():
            suggestions = checker(text, locale)
    """
    with CHECK_LATENCY.time():
        yield
