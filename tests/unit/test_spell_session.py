"""
Unit tests for ltspell.session.spell_session.

Covers:
- Lifecycle (create → open → batch → cancel/close) and misuse
- Batch semantics: order, isolation, capability gate, cancellation
"""
import threading

import httpx
import pytest

from ltspell.checker.errors import UpstreamCheckFailure
from ltspell.checker.languagetool_client import LanguageToolClient
from ltspell.config import settings
from ltspell.models.annotation import AnnotationKind, BatchResult
from ltspell.models.fragment import Fragment
from ltspell.models.suggestion import Suggestion
from ltspell.session import spell_session
from ltspell.session.spell_session import (
    SessionState,
    SessionStateError,
    SpellCheckSession,
    create_session,
)


@pytest.fixture
def open_session(scripted_checker, cotxes_script):
    session = create_session("ca_ES", checker=scripted_checker(cotxes_script), api_level=16)
    session.on_open()
    yield session
    session.on_close()


class TestLifecycle:
    def test_created_session_is_not_open(self):
        session = create_session("ca_ES", checker=lambda text, locale: [])
        assert session.state is SessionState.CREATED
        assert session.registry is None

    def test_open_captures_locale_and_empty_registry(self, scripted_checker):
        session = create_session("ca_ES", checker=scripted_checker())
        session.on_open()
        assert session.state is SessionState.OPEN
        assert session.locale == "ca_ES"
        assert session.registry is not None
        assert len(session.registry) == 0

    def test_empty_locale_falls_back_to_default(self, scripted_checker):
        session = create_session("", checker=scripted_checker())
        session.on_open()
        assert session.locale == settings.DEFAULT_LOCALE

    def test_open_twice_rejected(self, open_session):
        with pytest.raises(SessionStateError):
            open_session.on_open()

    def test_batch_before_open_rejected(self, scripted_checker):
        session = create_session("ca", checker=scripted_checker())
        with pytest.raises(SessionStateError, match="created"):
            session.on_fragment_batch([Fragment.of("text")])

    def test_batch_after_close_rejected(self, open_session):
        open_session.on_close()
        with pytest.raises(SessionStateError, match="closed"):
            open_session.on_fragment_batch([Fragment.of("text")])

    def test_close_releases_registry(self, open_session):
        open_session.on_close()
        assert open_session.registry is None
        assert open_session.state is SessionState.CLOSED

    def test_cancel_releases_registry(self, open_session):
        open_session.on_cancel()
        assert open_session.registry is None
        assert open_session.state is SessionState.CLOSED

    def test_close_is_idempotent(self, open_session):
        open_session.on_close()
        open_session.on_close()
        open_session.on_cancel()
        assert open_session.state is SessionState.CLOSED

    def test_default_checker_is_session_owned_client(self, monkeypatch):
        built = []

        def client_factory():
            built.append(_RecordingClient())
            return built[-1]

        monkeypatch.setattr(spell_session, "LanguageToolClient", client_factory)

        session = SpellCheckSession("ca_ES", api_level=16)
        session.on_open()
        session.on_fragment_batch([Fragment.of("Bon dia")])

        assert len(built) == 1
        assert built[0].calls == [("Bon dia", "ca_ES")]
        assert not built[0].closed
        session.on_close()
        assert built[0].closed

    def test_injected_checker_builds_no_client(self, monkeypatch, scripted_checker):
        built = []
        monkeypatch.setattr(spell_session, "LanguageToolClient", lambda: built.append(1))
        session = SpellCheckSession("ca_ES", checker=scripted_checker(), api_level=16)
        session.on_open()
        session.on_close()
        assert built == []

    def test_word_level_suggestions_not_supported(self, open_session):
        assert open_session.on_get_suggestions(Fragment.of("cotxes"), 5) is None


class TestBatch:
    def test_scenario_typo_then_retraction(self, open_session, cotxes_partial, cotxes_full):
        first = open_session.on_fragment_batch([cotxes_partial])
        second = open_session.on_fragment_batch([cotxes_full])

        assert first.supported
        (r1,) = first.fragments
        assert r1.kinds == [AnnotationKind.TYPO]
        assert (r1.offsets, r1.lengths, r1.payloads) == ([6], [7], [["cotxe"]])
        assert open_session.registry.entries() == ['"cotxes']

        (r2,) = second.fragments
        assert r2.kinds == [AnnotationKind.RETRACT]
        assert (r2.offsets, r2.lengths, r2.payloads) == ([6], [7], [[]])

    def test_output_preserves_input_order(self, open_session):
        fragments = [Fragment.of(f"frase {i}", cookie=1, sequence=i) for i in range(5)]
        result = open_session.on_fragment_batch(fragments)
        assert [r.correlation_id.sequence for r in result] == [0, 1, 2, 3, 4]
        assert len(result) == 5

    def test_locale_passed_to_checker(self, scripted_checker):
        checker = scripted_checker()
        session = create_session("ca_ES_valencia", checker=checker, api_level=16)
        session.on_open()
        session.on_fragment_batch([Fragment.of("text")])
        assert checker.calls == [("text", "ca_ES_valencia")]

    def test_fragment_isolation(self, scripted_checker):
        good = Fragment.of("bon dia mon", sequence=1)
        bad = Fragment.of("res", sequence=2)
        script = {
            good.text: [Suggestion(8, 3, ("món",))],
            bad.text: UpstreamCheckFailure("timeout"),
        }

        alone = create_session("ca", checker=scripted_checker(script), api_level=16)
        alone.on_open()
        expected = alone.on_fragment_batch([good]).fragments[0]

        mixed = create_session("ca", checker=scripted_checker(script), api_level=16)
        mixed.on_open()
        r_bad, r_good = mixed.on_fragment_batch([bad, good]).fragments

        assert not r_bad.ok
        assert r_bad.annotations == ()
        assert r_good == expected

    def test_suggestion_limit_applied(self, scripted_checker):
        checker = scripted_checker({"cotxes": [Suggestion(0, 6, ("a", "b", "c"))]})
        session = create_session("ca", checker=checker, api_level=16)
        session.on_open()
        result = session.on_fragment_batch([Fragment.of("cotxes")], suggestion_limit=1)
        assert result.fragments[0].payloads == [["a"]]

    def test_empty_batch(self, open_session):
        result = open_session.on_fragment_batch([])
        assert result.supported
        assert result.fragments == ()

    def test_registry_shared_across_batches_not_sessions(self, scripted_checker, cotxes_script, cotxes_partial, cotxes_full):
        a = create_session("ca", checker=scripted_checker(cotxes_script), api_level=16)
        b = create_session("ca", checker=scripted_checker(cotxes_script), api_level=16)
        a.on_open()
        b.on_open()

        a.on_fragment_batch([cotxes_partial])
        result_b = b.on_fragment_batch([cotxes_full])

        assert result_b.fragments[0].annotations == ()
        assert len(b.registry) == 0


class TestCapabilityGate:
    def test_unsupported_platform_refuses_whole_batch(self, scripted_checker):
        checker = scripted_checker()
        session = create_session("ca", checker=checker, api_level=15)
        session.on_open()

        result = session.on_fragment_batch([Fragment.of("u"), Fragment.of("dos"), Fragment.of("tres")])

        assert result == BatchResult.unsupported()
        assert not result.supported
        assert result.fragments == ()
        assert checker.calls == []

    def test_unsupported_even_for_empty_batch(self, scripted_checker):
        session = create_session("ca", checker=scripted_checker(), api_level=1)
        session.on_open()
        assert session.on_fragment_batch([]).supported is False


class TestCancellation:
    def test_cancel_mid_batch_stops_further_fetches(self):
        calls = []
        host = {}

        def checker(text, locale):  # noqa: ARG001
            calls.append(text)
            if text == "segon":
                host["session"].on_cancel()
            return []

        session = create_session("ca", checker=checker, api_level=16)
        host["session"] = session
        session.on_open()

        fragments = [Fragment.of(t, sequence=i) for i, t in enumerate(("primer", "segon", "tercer", "quart"))]
        result = session.on_fragment_batch(fragments)

        assert calls == ["primer", "segon"]
        assert [r.ok for r in result] == [True, True, False, False]
        assert [r.error for r in result][2:] == ["cancelled", "cancelled"]
        assert session.state is SessionState.CLOSED

    @pytest.mark.parametrize("stop", ["on_cancel", "on_close"])
    def test_stop_from_other_thread_lets_in_flight_fetch_finish(self, monkeypatch, lt_body, lt_match, stop):
        host = {}
        closes = []
        seen_during_fetch = []

        def handler(request: httpx.Request) -> httpx.Response:
            form = dict(httpx.QueryParams(request.content.decode("utf-8")))
            if form["text"] == "primer":
                timer = threading.Timer(0.01, getattr(host["session"], stop))
                timer.start()
                timer.join()
                seen_during_fetch.append((list(closes), host["session"].state))
                return httpx.Response(200, json=lt_body(lt_match(0, 6, "primera")))
            return httpx.Response(200, json=lt_body())

        http_client = httpx.Client(transport=httpx.MockTransport(handler))

        class ClosingRecorder(LanguageToolClient):
            def close(self):
                closes.append("close")
                super().close()

        monkeypatch.setattr(
            spell_session,
            "LanguageToolClient",
            lambda: ClosingRecorder(base_url="http://lt.test", http_client=http_client),
        )

        session = SpellCheckSession("ca_ES", api_level=16)
        host["session"] = session
        session.on_open()

        result = session.on_fragment_batch(
            [Fragment.of("primer", sequence=1), Fragment.of("segon", sequence=2)]
        )
        http_client.close()

        assert seen_during_fetch == [([], SessionState.OPEN)]
        first, second = result.fragments
        assert first.ok
        assert first.payloads == [["primera"]]
        assert (second.ok, second.error) == (False, "cancelled")
        assert closes == ["close"]
        assert session.state is SessionState.CLOSED
        assert session.registry is None
        with pytest.raises(SessionStateError):
            session.on_fragment_batch([Fragment.of("tercer")])


class _RecordingClient:
    """Stands in for the session-owned LanguageToolClient."""

    def __init__(self):
        self.calls = []
        self.closed = False

    def fetch_suggestions(self, text, locale):
        self.calls.append((text, locale))
        return []

    def close(self):
        self.closed = True
