"""
JSON Schemas for the LanguageTool response and the host-facing output.

Two schemas:
1. LANGUAGETOOL_CHECK_RESPONSE_SCHEMA — what /v2/check must return
   (only the fields this adapter reads; everything else is ignored)
2. SENTENCE_SUGGESTIONS_SCHEMA — BatchResult.to_dict() as handed to the host
"""

# =============================================================================
# 1. LanguageTool /v2/check response
# =============================================================================
LANGUAGETOOL_CHECK_RESPONSE_SCHEMA: dict = {
    "type": "object",
    "required": ["matches"],
    "properties": {
        "language": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "code": {"type": "string"},
            },
        },
        "matches": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["offset", "length", "replacements"],
                "properties": {
                    "message": {"type": "string"},
                    "offset": {"type": "integer", "minimum": 0},
                    "length": {"type": "integer", "minimum": 1},
                    "replacements": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["value"],
                            "properties": {"value": {"type": "string"}},
                        },
                    },
                    "rule": {
                        "type": "object",
                        "properties": {"id": {"type": "string"}},
                    },
                },
            },
        },
    },
}

# =============================================================================
# 2. Host-facing sentence suggestions (one entry per fragment)
# =============================================================================
SENTENCE_SUGGESTIONS_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": ["supported", "fragments"],
    "properties": {
        "supported": {"type": "boolean"},
        "fragments": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": [
                    "cookie", "sequence", "ok", "error",
                    "kinds", "attributes", "offsets", "lengths", "suggestions",
                ],
                "properties": {
                    "cookie": {"type": "integer"},
                    "sequence": {"type": "integer"},
                    "ok": {"type": "boolean"},
                    "error": {"type": ["string", "null"]},
                    "kinds": {
                        "type": "array",
                        "items": {"type": "string", "enum": ["TYPO", "RETRACT"]},
                    },
                    "attributes": {"type": "array", "items": {"type": "integer"}},
                    "offsets": {"type": "array", "items": {"type": "integer", "minimum": 0}},
                    "lengths": {"type": "array", "items": {"type": "integer", "minimum": 1}},
                    "suggestions": {
                        "type": "array",
                        "items": {"type": "array", "items": {"type": "string"}},
                    },
                },
            },
        },
    },
}
