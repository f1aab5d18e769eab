"""Runtime configuration for TriPrompt, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_FAST_MODEL = "gpt-5-nano"
DEFAULT_SYNTHESIS_MODEL = "gpt-5"


@dataclass(slots=True)
class TriPromptConfig:
    """Settings shared by the pipeline, the agents and the local store."""

    # Suggestion and per-perspective drafts use the cheaper model,
    # synthesis uses the stronger one.
    fast_model: str = DEFAULT_FAST_MODEL
    synthesis_model: str = DEFAULT_SYNTHESIS_MODEL
    temperature: Optional[float] = None

    data_dir: Path = Path.home() / ".triprompt"
    log_dir: Optional[Path] = Path("logs")

    history_limit: int = 50
    source_char_limit: int = 1000
    max_perspectives: int = 3

    @classmethod
    def from_env(cls) -> "TriPromptConfig":
        """Build a config from ``TRIPROMPT_*`` variables, falling back to defaults."""
        temperature = os.getenv("TRIPROMPT_TEMPERATURE")
        data_dir = os.getenv("TRIPROMPT_DATA_DIR")
        log_dir = os.getenv("TRIPROMPT_LOG_DIR")
        config = cls(
            fast_model=os.getenv("TRIPROMPT_FAST_MODEL", DEFAULT_FAST_MODEL),
            synthesis_model=os.getenv("TRIPROMPT_SYNTHESIS_MODEL", DEFAULT_SYNTHESIS_MODEL),
            temperature=float(temperature) if temperature else None,
        )
        if data_dir:
            config.data_dir = Path(data_dir).expanduser()
        if log_dir is not None:
            # An explicitly empty value turns interaction logs off.
            config.log_dir = Path(log_dir).expanduser() if log_dir.strip() else None
        return config
