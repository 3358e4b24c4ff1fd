"""
Shared test fixtures for the spell-check session test suite.
"""
import httpx
import pytest

from ltspell.checker.languagetool_client import LanguageToolClient
from ltspell.models.fragment import Fragment
from ltspell.models.suggestion import Suggestion
from ltspell.session.registry import ReportedSpanRegistry


# ==========================================================================
# Scripted checker
# ==========================================================================

class ScriptedChecker:
    """
    Stand-in for the external checker.

    ``script`` maps fragment text to either a list of Suggestions or an
    exception instance to raise. Unknown texts have no suggestions.
    Every call is recorded as (text, locale).
    """

    def __init__(self, script=None):
        self.script = dict(script or {})
        self.calls = []

    def __call__(self, text, locale):
        self.calls.append((text, locale))
        outcome = self.script.get(text, [])
        if isinstance(outcome, BaseException):
            raise outcome
        return list(outcome)


@pytest.fixture
def scripted_checker():
    """Factory: scripted_checker({text: suggestions | exception})."""
    return ScriptedChecker


@pytest.fixture
def registry():
    return ReportedSpanRegistry()


# ==========================================================================
# The "cotxes" sentence, typed in two steps
# ==========================================================================

@pytest.fixture
def cotxes_partial():
    return Fragment.of('Hi ha "cotxes', cookie=7, sequence=1)


@pytest.fixture
def cotxes_full():
    return Fragment.of('Hi ha "cotxes" blaus al carrer', cookie=7, sequence=2)


@pytest.fixture
def cotxes_script(cotxes_partial, cotxes_full):
    return {
        cotxes_partial.text: [Suggestion(position=6, length=7, replacements=("cotxe",))],
        cotxes_full.text: [],
    }


# ==========================================================================
# LanguageTool HTTP mock
# ==========================================================================

def _lt_match(offset, length, *replacements, rule_id="MORFOLOGIK_RULE_CA_ES"):
    return {
        "message": "Possible spelling mistake found.",
        "offset": offset,
        "length": length,
        "replacements": [{"value": r} for r in replacements],
        "rule": {"id": rule_id, "description": "Possible spelling mistake"},
        "context": {"text": "", "offset": 0, "length": length},
    }


def _lt_body(*matches):
    return {
        "software": {"name": "LanguageTool", "version": "6.4"},
        "language": {"name": "Catalan", "code": "ca-ES"},
        "matches": list(matches),
    }


@pytest.fixture
def lt_responses():
    """Mutable map text → (status, JSON body) served by the mock transport."""
    return {}


@pytest.fixture
def lt_requests():
    """Every request that reached the mock transport, as parsed form dicts."""
    return []


@pytest.fixture
def lt_transport(lt_responses, lt_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        form = dict(httpx.QueryParams(request.content.decode("utf-8")))
        lt_requests.append(form)
        status, body = lt_responses.get(form.get("text", ""), (200, _lt_body()))
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, content=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def lt_client(lt_transport):
    http_client = httpx.Client(transport=lt_transport)
    client = LanguageToolClient(base_url="http://lt.test", http_client=http_client)
    yield client
    http_client.close()


@pytest.fixture
def lt_match():
    """Build one LanguageTool match dict: lt_match(offset, length, *replacements)."""
    return _lt_match


@pytest.fixture
def lt_body():
    """Build a /v2/check response body: lt_body(*matches)."""
    return _lt_body
