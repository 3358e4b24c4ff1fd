"""
Constants shared by the checker adapter and the session layer.
Pinned so that session behaviour stays reproducible across deployments.
"""

# =============================================================================
# Reported-span registry
# =============================================================================
# Upper bound of distinct flagged substrings remembered per session.
# Once reached, new errors are still annotated but no longer retracted later.
MAX_REPORTED_ERRORS_STORED: int = 100

# =============================================================================
# Platform capability
# =============================================================================
# Sentence-level suggestion APIs exist from API level 16 (Jelly Bean) on.
SENTENCE_CHECK_MIN_API_LEVEL: int = 16

# =============================================================================
# Host annotation attributes
# =============================================================================
RESULT_ATTR_LOOKS_LIKE_TYPO: int = 0x0002
REMOVE_SPAN: int = 0

# =============================================================================
# LanguageTool HTTP API
# =============================================================================
LANGUAGETOOL_CHECK_PATH: str = "/v2/check"
