"""
Spell-check session — the entry point the host framework talks to.

Lifecycle:
    create_session(locale) → on_open() → on_fragment_batch(...)* → on_cancel() / on_close()

The session owns its registry, locale and (unless one is injected) its
LanguageTool client. Sessions share no mutable state with each other.
"""
import logging
import threading
from enum import Enum
from typing import Optional, Sequence

from ltspell.checker.languagetool_client import LanguageToolClient
from ltspell.config import settings
from ltspell.config.constants import MAX_REPORTED_ERRORS_STORED
from ltspell.models.annotation import BatchResult, FragmentResult
from ltspell.models.fragment import Fragment
from ltspell.session.capability import CapabilityUnavailable, require_sentence_check
from ltspell.session.metrics import record_fragment_outcome, record_unsupported_batch
from ltspell.session.processor import Checker, process_fragment
from ltspell.session.registry import ReportedSpanRegistry

logger = logging.getLogger(__name__)

CANCELLED: str = "cancelled"


class SessionState(str, Enum):
    CREATED = "created"
    OPEN = "open"
    CLOSED = "closed"


class SessionStateError(Exception):
    """A lifecycle call arrived in a state that does not allow it."""

    def __init__(self, operation: str, state: SessionState) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} a session in state '{state.value}'")


class SpellCheckSession:
    """
    One host-initiated sentence spell-check session.

    Args:
        locale: Host locale (``ca_ES``); empty means DEFAULT_LOCALE.
        checker: Function(text, locale) → Suggestions. Defaults to a
                 LanguageToolClient created on open and closed on close.
        api_level: Runtime API level for the capability gate.
                   Defaults to PLATFORM_API_LEVEL.
        capacity: Registry capacity (default MAX_REPORTED_ERRORS_STORED).
    """

    def __init__(
        self,
        locale: Optional[str] = None,
        checker: Optional[Checker] = None,
        api_level: Optional[int] = None,
        capacity: int = MAX_REPORTED_ERRORS_STORED,
    ):
        self._requested_locale = locale
        self._checker = checker
        self._api_level = api_level
        self._capacity = capacity
        self._client: Optional[LanguageToolClient] = None
        self._cancelled = threading.Event()
        # guards the batch flags and the release
        self._lock = threading.Lock()
        self._in_batch = False
        self._release_pending = False

        self.locale: Optional[str] = None
        self.registry: Optional[ReportedSpanRegistry] = None
        self.state = SessionState.CREATED

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_open(self) -> None:
        """Capture the locale and start with an empty registry."""
        if self.state is not SessionState.CREATED:
            raise SessionStateError("open", self.state)

        self.locale = (self._requested_locale or "").strip() or settings.DEFAULT_LOCALE
        self.registry = ReportedSpanRegistry(self._capacity)
        if self._checker is None:
            self._client = LanguageToolClient()
            self._checker = self._client.fetch_suggestions

        self.state = SessionState.OPEN
        logger.debug("Session opened (locale=%s)", self.locale)

    def on_cancel(self) -> None:
        """
        Stop issuing fetches and drop all session state.

        May be called from another thread while a batch runs: the fetch in
        flight completes, the remaining fragments are marked cancelled and
        the session is released when the batch returns.
        """
        logger.debug("Session cancel")
        self._cancelled.set()
        self._release_when_idle()

    def on_close(self) -> None:
        logger.debug("Session close")
        self._cancelled.set()
        self._release_when_idle()

    def _release_when_idle(self) -> None:
        with self._lock:
            if self._in_batch:
                self._release_pending = True
                return
            self._release()

    def _release(self) -> None:
        self.registry = None
        if self._client is not None:
            self._client.close()
            self._client = None
        self.state = SessionState.CLOSED

    # ------------------------------------------------------------------
    # Checking
    # ------------------------------------------------------------------

    def on_fragment_batch(
        self,
        fragments: Sequence[Fragment],
        suggestion_limit: int = 0,
    ) -> BatchResult:
        """
        Check every fragment of one host batch.

        Fragments are processed independently and in order: one fragment's
        upstream failure only marks that fragment as failed. The capability
        gate is evaluated once, and refuses the whole batch.

        Returns:
            BatchResult with one FragmentResult per input fragment, or
            BatchResult.unsupported() when sentence checking is unavailable.

        Raises:
            SessionStateError: if the session is not open.
        """
        with self._lock:
            registry = self.registry
            if self.state is not SessionState.OPEN or registry is None:
                raise SessionStateError("check fragments in", self.state)
            self._in_batch = True

        try:
            return self._check_batch(fragments, registry, suggestion_limit)
        finally:
            with self._lock:
                self._in_batch = False
                if self._release_pending:
                    self._release_pending = False
                    self._release()

    def _check_batch(
        self,
        fragments: Sequence[Fragment],
        registry: ReportedSpanRegistry,
        suggestion_limit: int,
    ) -> BatchResult:
        try:
            require_sentence_check(self._api_level)
        except CapabilityUnavailable as e:
            logger.error("%s", e)
            record_unsupported_batch()
            return BatchResult.unsupported()

        results = []
        for fragment in fragments:
            if self._cancelled.is_set():
                record_fragment_outcome(CANCELLED)
                results.append(FragmentResult.failed(fragment.correlation_id, CANCELLED))
                continue
            results.append(
                process_fragment(
                    fragment,
                    registry,
                    self._checker,
                    self.locale,
                    suggestion_limit=suggestion_limit,
                )
            )

        return BatchResult(supported=True, fragments=tuple(results))

    def on_get_suggestions(self, fragment: Fragment, suggestion_limit: int = 0) -> None:
        """Word-level checking is not offered; only sentence batches are."""
        logger.debug("on_get_suggestions call not supported")
        return None


def create_session(
    locale: Optional[str] = None,
    checker: Optional[Checker] = None,
    api_level: Optional[int] = None,
    capacity: int = MAX_REPORTED_ERRORS_STORED,
) -> SpellCheckSession:
    """Create a session; the host calls on_open() before the first batch."""
    logger.debug("create_session(locale=%s)", locale)
    return SpellCheckSession(
        locale=locale,
        checker=checker,
        api_level=api_level,
        capacity=capacity,
    )
