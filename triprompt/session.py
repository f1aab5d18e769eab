"""
UI-facing run state for the browser app and the CLI.

``RunSession`` owns the form inputs and the idle/processing/complete status so
that a failed run always lands back in an idle, retryable state with no
partial result on screen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from run_state_manager import Perspective, PromptUpgradeResult, SavedPrompt, blank_perspectives

from .config import TriPromptConfig
from .pipeline import TriPromptAgent
from .store import LocalStore, RunHistory, Toolbox

logger = logging.getLogger(__name__)

EMPTY_GOAL_MESSAGE = "Please enter a goal first."
NO_SUGGESTIONS_MESSAGE = "Could not generate perspectives. Try refining your goal."


class AppStatus(str, Enum):
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    COMPLETE = "COMPLETE"


@dataclass
class RunSession:
    agent: TriPromptAgent
    toolbox: Toolbox
    goal: str = ""
    source: str = ""
    perspectives: List[Perspective] = field(default_factory=blank_perspectives)
    status: AppStatus = AppStatus.IDLE
    progress_message: str = ""
    result: Optional[PromptUpgradeResult] = None
    error: Optional[str] = None

    @classmethod
    def from_config(cls, config: TriPromptConfig) -> "RunSession":
        """Wire the pipeline, history and toolbox to the configured data directory."""
        store = LocalStore(config.data_dir)
        agent = TriPromptAgent(config=config, history=RunHistory(store, limit=config.history_limit))
        return cls(agent=agent, toolbox=Toolbox(store))

    @property
    def is_busy(self) -> bool:
        return self.status is AppStatus.PROCESSING

    def suggest(self) -> bool:
        """Replace the perspective slots with model suggestions.

        Returns False and sets ``error`` when there is no goal or nothing came
        back; the current perspectives are kept in that case.
        """
        self.error = None
        if not self.goal.strip():
            self.error = EMPTY_GOAL_MESSAGE
            return False
        suggested = self.agent.suggest_perspectives(self.goal)
        if not suggested:
            self.error = NO_SUGGESTIONS_MESSAGE
            return False
        self.perspectives = suggested
        return True

    def update_perspective(self, index: int, *, role: Optional[str] = None, context: Optional[str] = None) -> None:
        perspective = self.perspectives[index]
        if role is not None:
            perspective.role = role
        if context is not None:
            perspective.context = context

    def run(self, on_progress: Optional[Callable[[str], None]] = None) -> bool:
        """Run the pipeline; ``on_progress`` also receives each progress message."""
        self.status = AppStatus.PROCESSING
        self.result = None
        self.error = None
        try:
            result = self.agent.invoke(
                self.goal,
                self.perspectives,
                self.source,
                on_progress=lambda message: self._set_progress(message, on_progress),
            )
        except Exception as exc:
            logger.exception("Run failed: %s", exc)
            self._fail(f"Something went wrong: {exc}")
            return False
        self.result = result
        self.status = AppStatus.COMPLETE
        return True

    def save_prompt(self, content: str) -> SavedPrompt:
        label = f"Upgrade: {self.goal[:20]}..."
        return self.toolbox.save(label, content)

    def apply_saved_prompt(self, content: str) -> None:
        self.goal = content
        self.result = None
        self.status = AppStatus.IDLE

    def reset(self) -> None:
        self.goal = ""
        self.source = ""
        self.perspectives = blank_perspectives()
        self.result = None
        self.error = None
        self.progress_message = ""
        self.status = AppStatus.IDLE

    def go_home(self) -> None:
        self.result = None
        self.status = AppStatus.IDLE

    def _set_progress(self, message: str, listener: Optional[Callable[[str], None]] = None) -> None:
        self.progress_message = message
        if listener is not None:
            listener(message)

    def _fail(self, message: str) -> None:
        self.result = None
        self.error = message
        self.progress_message = ""
        self.status = AppStatus.IDLE
