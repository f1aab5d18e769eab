"""
Response schemas requested from the model for each pipeline phase.

The JSON schema of each model is embedded in the matching system prompt; the
agents still read the decoded payload leniently and fill in defaults for any
missing field.
"""

from __future__ import annotations

import json
from typing import List, Type

from pydantic import BaseModel, RootModel


class SuggestedPerspective(BaseModel):
    role: str
    context: str


class PerspectiveSuggestions(RootModel[List[SuggestedPerspective]]):
    """Array of role/context pairs returned by the suggestion call."""


class DraftPayload(BaseModel):
    content: str
    keyPoint: str


class UpgradePayload(BaseModel):
    finalDraft: str
    improvedPrompt: str
    tradeOffsResolved: List[str]
    whyItIsBetter: List[str]
    generalizableInsight: str


def schema_text(model: Type[BaseModel]) -> str:
    """Compact JSON schema for ``model`` suitable for embedding in a prompt."""
    return json.dumps(model.model_json_schema(), separators=(",", ":"))
