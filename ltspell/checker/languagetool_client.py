"""
LanguageTool client — the suggestion source behind every session.

Flow for one fragment:
    1. POST text + language to {LANGUAGETOOL_URL}/v2/check
    2. Schema-check the JSON body (jsonschema)
    3. Parse into typed models (pydantic)
    4. Convert each match to a Suggestion, keeping the server's order

Every failure surfaces as UpstreamCheckFailure so that the session can drop
the one fragment and carry on with its siblings. Nothing is retried here:
retry and timeout policy belong to the transport (httpx client settings).
"""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

import httpx
from jsonschema import ValidationError, validate
from pydantic import ValidationError as ModelValidationError

from ltspell.checker.errors import MalformedSuggestion, UpstreamCheckFailure
from ltspell.checker.text_offsets import utf16_offset_to_index
from ltspell.config import settings
from ltspell.config.constants import LANGUAGETOOL_CHECK_PATH
from ltspell.config.logging_config import loggable_text
from ltspell.config.schemas import LANGUAGETOOL_CHECK_RESPONSE_SCHEMA
from ltspell.models.languagetool_io import CheckResponse
from ltspell.models.suggestion import Suggestion

logger = logging.getLogger(__name__)


def to_language_code(locale: Optional[str]) -> str:
    """
    Convert a host locale (``ca_ES``, ``ca_ES_valencia``) to a LanguageTool
    language code (``ca-ES``, ``ca-ES-valencia``).

    An empty locale falls back to DEFAULT_LOCALE.
    """
    locale = (locale or "").strip() or settings.DEFAULT_LOCALE
    return locale.replace("_", "-")


def parse_check_response(payload: Any, text: str) -> List[Suggestion]:
    """
    Turn a /v2/check response body into Suggestions for *text*.

    Args:
        payload: Decoded JSON dict, or the raw JSON string.
        text: The exact text that was checked (needed for UTF-16 conversion).

    Returns:
        Suggestions in the order LanguageTool reported them.

    Raises:
        UpstreamCheckFailure: invalid JSON, schema or model violation.
        MalformedSuggestion: a match offset that cannot be mapped into *text*.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise UpstreamCheckFailure(f"Invalid JSON from LanguageTool: {e}") from e

    try:
        validate(instance=payload, schema=LANGUAGETOOL_CHECK_RESPONSE_SCHEMA)
    except ValidationError as e:
        raise UpstreamCheckFailure(f"Schema violation: {e.message}") from e

    try:
        response = CheckResponse.model_validate(payload)
    except ModelValidationError as e:
        raise UpstreamCheckFailure(f"Model violation: {e}") from e

    suggestions: List[Suggestion] = []
    for match in response.matches:
        try:
            start = utf16_offset_to_index(text, match.offset)
            end = utf16_offset_to_index(text, match.offset + match.length)
        except ValueError as e:
            raise MalformedSuggestion(
                f"Match {match.rule_id or '?'} at [{match.offset},+{match.length}] "
                f"does not fit text: {e}"
            ) from e
        suggestions.append(
            Suggestion(
                position=start,
                length=end - start,
                replacements=tuple(r.value for r in match.replacements),
            )
        )

    return suggestions


class LanguageToolClient:
    """
    Synchronous LanguageTool HTTP client.

    An ``http_client`` can be injected (tests pass one built on
    ``httpx.MockTransport``); in that case the caller keeps ownership and
    ``close()`` leaves it open.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        user_agent: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or settings.LANGUAGETOOL_URL).rstrip("/")
        self.check_url = f"{self.base_url}{LANGUAGETOOL_CHECK_PATH}"
        timeout_ms = timeout_ms if timeout_ms is not None else settings.LANGUAGETOOL_TIMEOUT_MS

        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(
            timeout=httpx.Timeout(timeout_ms / 1000),
            headers={"User-Agent": user_agent or settings.LANGUAGETOOL_USER_AGENT},
        )

    def fetch_suggestions(self, text: str, locale: str) -> List[Suggestion]:
        """
        Check *text* in *locale* and return its suggestions.

        Raises:
            UpstreamCheckFailure: on any transport or payload problem.
        """
        language = to_language_code(locale)
        logger.debug("LanguageTool check [%s]: %s", language, loggable_text(text))

        try:
            response = self.client.post(
                self.check_url,
                data={"text": text, "language": language},
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamCheckFailure(
                f"LanguageTool returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamCheckFailure(f"LanguageTool request failed: {e}") from e

        suggestions = parse_check_response(response.content, text)
        logger.debug("LanguageTool returned %d suggestion(s)", len(suggestions))
        return suggestions

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "LanguageToolClient":
        return self

    def __exit__(self, *args) -> None:  # noqa: ANN002
        self.close()
