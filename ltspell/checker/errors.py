"""
Failures of the external checking call, scoped to a single fragment.
"""


class UpstreamCheckFailure(Exception):
    """The checking service call failed or returned unusable data."""

    def __init__(self, message: str, reason: str = "upstream_failure") -> None:
        self.message = message
        self.reason = reason
        super().__init__(message)


class MalformedSuggestion(UpstreamCheckFailure):
    """A returned span does not fit inside the fragment it was computed for."""

    def __init__(self, message: str) -> None:
        super().__init__(message, reason="malformed_suggestion")
