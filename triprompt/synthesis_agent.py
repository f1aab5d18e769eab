"""SynthesisAgent: merges perspective drafts into the final draft and improved prompt."""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

from autogen_core.models import ChatCompletionClient

from run_state_manager import Draft, PromptUpgradeResult

from .errors import SynthesisError
from .json_extraction import parse_json
from .llm import build_assistant, run_assistant, run_async
from .prompts import SYNTHESIS_SYSTEM_PROMPT, synthesis_prompt

logger = logging.getLogger(__name__)


class SynthesisAgent:
    """Runs the single synthesis call of a run.

    Unlike suggestion and drafting, nothing is recovered here: any failure is
    raised as :class:`SynthesisError` and ends the run.
    """

    def __init__(self, *, model_client: ChatCompletionClient) -> None:
        self._model_client = model_client

    def synthesize(self, goal: str, drafts: Sequence[Draft]) -> PromptUpgradeResult:
        return run_async(self.asynthesize(goal, drafts))

    async def asynthesize(self, goal: str, drafts: Sequence[Draft]) -> PromptUpgradeResult:
        prompt = synthesis_prompt(goal=goal, drafts=drafts)
        try:
            assistant = build_assistant(
                name="prompt_synthesizer",
                model_client=self._model_client,
                system_message=SYNTHESIS_SYSTEM_PROMPT,
                description="Synthesizes perspective drafts into a final draft and improved prompt.",
            )
            text = await run_assistant(assistant, prompt)
            logger.info("SynthesisAgent raw output: %s", text)
            data = self._decode(text)
        except Exception as exc:
            logger.error("Error generating upgrade: %s", exc)
            raise SynthesisError() from exc

        return PromptUpgradeResult(
            final_draft=data.get("finalDraft") or "Draft generation incomplete.",
            improved_prompt=data.get("improvedPrompt") or "Prompt generation incomplete.",
            trade_offs_resolved=_string_list(data.get("tradeOffsResolved")),
            why_it_is_better=_string_list(data.get("whyItIsBetter")),
            generalizable_insight=data.get("generalizableInsight") or "Always be specific.",
            drafts=list(drafts),
        )

    @staticmethod
    def _decode(text: str) -> dict:
        try:
            data = parse_json(text or "{}")
        except ValueError:
            logger.error("JSON parse error in synthesis output: %s", text)
            raise
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return data


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]
