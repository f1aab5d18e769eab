"""
TriPrompt pipeline (AutoGen + OpenAI-compatible models)

- Suggest perspectives for a writing goal (fast model).
- Draft the goal from every active perspective concurrently (fast model).
- Synthesize the drafts into a final draft and an improved prompt (strong model).

Required env:
  - OPENAI_API_KEY (unless model clients are passed in)
  - OPENAI_API_BASE_URL (optional, any OpenAI-compatible endpoint)
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from autogen_core.models import ChatCompletionClient

from run_state_manager import Draft, Perspective, PromptUpgradeResult, RunHistoryItem

from .config import TriPromptConfig
from .draft_agent import DraftAgent
from .llm import build_openai_client, run_async
from .perspective_agent import PerspectiveAgent
from .store import RunHistory
from .synthesis_agent import SynthesisAgent

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def default_perspectives() -> List[Perspective]:
    """Personas used when the user leaves every perspective blank."""
    return [
        Perspective(id="fb1", role="Critical Skeptic", context="Focus on flaws and risks."),
        Perspective(id="fb2", role="Domain Expert", context="Focus on accuracy and depth."),
        Perspective(id="fb3", role="Layperson Audience", context="Focus on clarity and simplicity."),
    ]


class TriPromptAgent:
    """Runs suggest -> draft -> synthesize for a writing goal."""

    def __init__(
        self,
        *,
        config: Optional[TriPromptConfig] = None,
        model_client: Optional[ChatCompletionClient] = None,
        synthesis_model_client: Optional[ChatCompletionClient] = None,
        history: Optional[RunHistory] = None,
    ) -> None:
        self._config = config or TriPromptConfig()

        if model_client is None:
            model_client = build_openai_client(
                openai_model_name=self._config.fast_model,
                temperature=self._config.temperature,
            )
        if synthesis_model_client is None:
            logger.info("Initializing synthesis agent with model '%s'", self._config.synthesis_model)
            synthesis_model_client = build_openai_client(
                openai_model_name=self._config.synthesis_model,
                temperature=self._config.temperature,
            )

        self._perspectives = PerspectiveAgent(
            model_client=model_client,
            max_perspectives=self._config.max_perspectives,
        )
        self._drafts = DraftAgent(
            model_client=model_client,
            source_char_limit=self._config.source_char_limit,
        )
        self._synthesis = SynthesisAgent(model_client=synthesis_model_client)
        self._history = history

        self._last_perspectives: List[Perspective] = []
        self._last_drafts: List[Draft] = []
        self._log_dir: Optional[Path] = self._config.log_dir
        self._current_log: Optional[Dict[str, Any]] = None
        self._current_log_path: Optional[Path] = None

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    def suggest_perspectives(self, goal: str) -> List[Perspective]:
        """Ask the model for roles; an empty list means fall back to defaults."""
        return self._perspectives.suggest(goal)

    def resolve_perspectives(self, perspectives: Optional[Sequence[Perspective]]) -> List[Perspective]:
        active = [p for p in perspectives or [] if p.is_active]
        if not active:
            logger.info("No perspectives supplied; using the default personas.")
            return default_perspectives()
        if len(active) > self._config.max_perspectives:
            raise ValueError(
                f"At most {self._config.max_perspectives} perspectives are supported, got {len(active)}."
            )
        return active

    async def agenerate_drafts(
        self,
        perspectives: Sequence[Perspective],
        goal: str,
        source: str = "",
    ) -> List[Draft]:
        # gather preserves input order and fails the batch if any call raises.
        drafts = await asyncio.gather(
            *(self._drafts.agenerate(perspective, goal, source) for perspective in perspectives)
        )
        return list(drafts)

    def generate_drafts(self, perspectives: Sequence[Perspective], goal: str, source: str = "") -> List[Draft]:
        return run_async(self.agenerate_drafts(perspectives, goal, source))

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------
    def invoke(
        self,
        goal: str,
        perspectives: Optional[Sequence[Perspective]] = None,
        source: str = "",
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PromptUpgradeResult:
        return run_async(self.arun(goal, perspectives, source, on_progress=on_progress))

    async def arun(
        self,
        goal: str,
        perspectives: Optional[Sequence[Perspective]] = None,
        source: str = "",
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PromptUpgradeResult:
        if not goal or not goal.strip():
            raise ValueError("Goal must be a non-empty string.")

        active = self.resolve_perspectives(perspectives)
        self._last_perspectives = active
        self._last_drafts = []
        self._start_interaction_log(goal)
        logger.info("Received goal: %s", goal)

        result: Optional[PromptUpgradeResult] = None
        try:
            self._notify(on_progress, f"Simulating {len(active)} Perspectives...")
            self._log_step("perspectives", {"active": [p.to_dict() for p in active], "source_chars": len(source or "")})
            drafts = await self.agenerate_drafts(active, goal, source)
            self._last_drafts = drafts
            self._log_step("drafts", {"drafts": [d.to_dict() for d in drafts]})
            logger.info("Collected %d drafts.", len(drafts))

            self._notify(on_progress, "Synthesizing Insights & Upgrading Prompt...")
            result = await self._synthesis.asynthesize(goal, drafts)
            self._log_step("synthesis", result.to_dict())
        except Exception as exc:
            logger.exception("Run failed for goal: %s", goal)
            self._finalize_interaction_log(result=None, error=str(exc))
            raise

        try:
            self._persist_run(goal=goal, perspectives=active, result=result)
        except Exception as exc:
            # A failed history write still returns the result.
            logger.exception("Failed to save run to history for goal: %s", goal)
            self._log_step("history", {"error": str(exc)})
        finally:
            self._finalize_interaction_log(result=result)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _persist_run(self, *, goal: str, perspectives: List[Perspective], result: PromptUpgradeResult) -> None:
        if self._history is None:
            return
        item = RunHistoryItem(original_goal=goal, perspectives=list(perspectives), result=result)
        self._history.append(item)

    @staticmethod
    def _notify(callback: Optional[ProgressCallback], message: str) -> None:
        logger.info(message)
        if callback is not None:
            callback(message)

    @property
    def last_perspectives(self) -> List[Perspective]:
        """Return the perspectives used by the most recent run."""

        return list(self._last_perspectives)

    @property
    def last_drafts(self) -> List[Draft]:
        """Return the drafts produced by the most recent run, even if synthesis failed."""

        return list(self._last_drafts)

    @property
    def history(self) -> Optional[RunHistory]:
        return self._history

    # ------------------------------------------------------------------
    # Logging helpers
    # ------------------------------------------------------------------
    def _start_interaction_log(self, goal: str) -> None:
        if self._log_dir is None:
            return
        try:
            self._log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:  # pragma: no cover - filesystem issues
            logger.warning("Unable to create log directory %s: %s", self._log_dir, exc)
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        file_name = f"triprompt_{timestamp}_{uuid4().hex[:8]}.json"
        self._current_log_path = self._log_dir / file_name
        self._current_log = {
            "timestamp": timestamp,
            "goal": goal,
            "fast_model": self._config.fast_model,
            "synthesis_model": self._config.synthesis_model,
            "steps": [],
        }

    def _log_step(self, step: str, context: Dict[str, Any]) -> None:
        if not self._current_log:
            return
        entry = {
            "step": step,
            "timestamp": datetime.utcnow().isoformat(timespec="seconds") + "Z",
            "context": self._make_serializable(context),
        }
        self._current_log.setdefault("steps", []).append(entry)

    def _finalize_interaction_log(self, *, result: Optional[PromptUpgradeResult], error: Optional[str] = None) -> None:
        if not self._current_log or not self._current_log_path:
            return
        if result is not None:
            self._current_log["final_draft"] = result.final_draft
            self._current_log["improved_prompt"] = result.improved_prompt
        if error:
            self._current_log["error"] = error
        try:
            serialized = json.dumps(self._current_log, indent=2, ensure_ascii=False)
            self._current_log_path.write_text(serialized, encoding="utf-8")
            logger.info("Wrote interaction log to %s", self._current_log_path)
        except OSError as exc:  # pragma: no cover - filesystem issues
            logger.warning("Failed to write interaction log %s: %s", self._current_log_path, exc)
        finally:
            self._current_log = None
            self._current_log_path = None

    def _make_serializable(self, data: Any) -> Any:
        try:
            json.dumps(data)
            return data
        except TypeError:
            if isinstance(data, dict):
                return {str(key): self._make_serializable(value) for key, value in data.items()}
            if isinstance(data, (list, set, tuple)):
                return [self._make_serializable(item) for item in data]
            return repr(data)
