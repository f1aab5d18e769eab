"""PerspectiveAgent: proposes reviewer roles for a writing goal."""

from __future__ import annotations

import logging
from typing import List

from autogen_core.models import ChatCompletionClient

from run_state_manager import Perspective, now_ms

from .json_extraction import parse_json
from .llm import build_assistant, run_assistant, run_async
from .prompts import SUGGESTION_SYSTEM_PROMPT, suggestion_prompt

logger = logging.getLogger(__name__)


class PerspectiveAgent:
    """Suggests up to ``max_perspectives`` distinct roles; never raises on model failure."""

    def __init__(self, *, model_client: ChatCompletionClient, max_perspectives: int = 3) -> None:
        self._model_client = model_client
        self._max_perspectives = max(1, max_perspectives)

    def suggest(self, goal: str) -> List[Perspective]:
        return run_async(self.asuggest(goal))

    async def asuggest(self, goal: str) -> List[Perspective]:
        logger.info("PerspectiveAgent suggesting roles for goal: %s", goal)
        try:
            assistant = build_assistant(
                name="perspective_suggester",
                model_client=self._model_client,
                system_message=SUGGESTION_SYSTEM_PROMPT,
                description="Suggests diverse reviewer perspectives for a writing goal.",
            )
            text = await run_assistant(assistant, suggestion_prompt(goal))
            logger.info("PerspectiveAgent raw output: %s", text)
            data = parse_json(text or "[]")
        except Exception as exc:
            logger.error("Error suggesting perspectives: %s", exc)
            return []

        if not isinstance(data, list):
            logger.warning("PerspectiveAgent expected a JSON array, got %s", type(data).__name__)
            return []
        return self._to_perspectives(data)

    def _to_perspectives(self, data: list) -> List[Perspective]:
        stamp = now_ms()
        perspectives: List[Perspective] = []
        for idx, item in enumerate(data[: self._max_perspectives]):
            if not isinstance(item, dict):
                item = {"role": str(item)}
            perspectives.append(
                Perspective(
                    id=f"auto-{stamp}-{idx}",
                    role=_as_text(item.get("role")) or "Perspective",
                    context=_as_text(item.get("context")),
                )
            )
        return perspectives


def _as_text(value: object) -> str:
    """Model fields may come back as numbers or null; the form only holds strings."""
    if value is None:
        return ""
    return str(value).strip()
