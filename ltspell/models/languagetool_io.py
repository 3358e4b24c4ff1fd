"""
Typed Pydantic models for the LanguageTool /v2/check response.

Only the fields the adapter consumes are declared; LanguageTool sends many
more (context, sentence, type, …) and those are ignored.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Replacement(BaseModel):
    """One replacement candidate proposed for a match."""

    model_config = ConfigDict(extra="ignore")

    value: str


class MatchRule(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    description: Optional[str] = None


class RuleMatch(BaseModel):
    """
    A single error reported by LanguageTool.

    ``offset`` and ``length`` are UTF-16 code unit counts, because the
    server is written in Java; the client converts them to string indices.
    """

    model_config = ConfigDict(extra="ignore")

    offset: int = Field(..., ge=0)
    length: int = Field(..., ge=1)
    message: str = ""
    replacements: List[Replacement] = Field(default_factory=list)
    rule: Optional[MatchRule] = None

    @property
    def rule_id(self) -> str:
        return self.rule.id if self.rule is not None else ""


class DetectedLanguage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    code: str = ""


class CheckResponse(BaseModel):
    """Top-level /v2/check payload."""

    model_config = ConfigDict(extra="ignore")

    language: Optional[DetectedLanguage] = None
    matches: List[RuleMatch] = Field(default_factory=list)
