"""DraftAgent: writes one draft from a single simulated perspective."""

from __future__ import annotations

import logging
import re

from autogen_core.models import ChatCompletionClient

from run_state_manager import Draft, Perspective

from .json_extraction import parse_json
from .llm import build_assistant, run_assistant, run_async
from .prompts import draft_prompt, draft_system_prompt

logger = logging.getLogger(__name__)

PLACEHOLDER_CONTENT = "Could not generate draft."
PLACEHOLDER_KEY_POINT = "Error generation."
DEFAULT_KEY_POINT = "Provided perspective."


class DraftAgent:
    """Generates perspective drafts.

    A failing call is replaced by a placeholder draft so one bad response does
    not sink the rest of the batch.
    """

    def __init__(self, *, model_client: ChatCompletionClient, source_char_limit: int = 1000) -> None:
        self._model_client = model_client
        self._source_char_limit = source_char_limit

    def generate(self, perspective: Perspective, goal: str, source: str = "") -> Draft:
        return run_async(self.agenerate(perspective, goal, source))

    async def agenerate(self, perspective: Perspective, goal: str, source: str = "") -> Draft:
        try:
            # A fresh assistant per call keeps concurrent drafts from sharing a model context.
            assistant = build_assistant(
                name=self._agent_name(perspective),
                model_client=self._model_client,
                system_message=draft_system_prompt(perspective),
                description=f"Drafts the goal from the perspective of {perspective.role}.",
            )
            prompt = draft_prompt(goal=goal, source=(source or "")[: self._source_char_limit])
            text = await run_assistant(assistant, prompt)
            logger.info("DraftAgent output for %s: %s", perspective.role, text)
            data = parse_json(text or "{}")
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        except Exception as exc:
            logger.warning("Draft generation failed for %s: %s", perspective.role, exc)
            return placeholder_draft(perspective)

        return Draft(
            perspective_id=perspective.id,
            perspective_role=perspective.role,
            content=data.get("content") or "",
            key_point=data.get("keyPoint") or DEFAULT_KEY_POINT,
        )

    @staticmethod
    def _agent_name(perspective: Perspective) -> str:
        slug = re.sub(r"\W+", "_", perspective.id).strip("_")
        return f"draft_writer_{slug or 'anon'}"


def placeholder_draft(perspective: Perspective) -> Draft:
    return Draft(
        perspective_id=perspective.id,
        perspective_role=perspective.role,
        content=PLACEHOLDER_CONTENT,
        key_point=PLACEHOLDER_KEY_POINT,
    )
