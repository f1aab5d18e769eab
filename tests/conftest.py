"""Shared fixtures for the TriPrompt test suite."""

import json
import sys
from pathlib import Path

import pytest
from autogen_ext.models.replay import ReplayChatCompletionClient

# Root-level modules (run_state_manager) sit beside the package.
sys.path.insert(0, str(Path(__file__).parent.parent))

from run_state_manager import Draft, Perspective, PromptUpgradeResult  # noqa: E402
from triprompt.config import TriPromptConfig  # noqa: E402
from triprompt.pipeline import TriPromptAgent  # noqa: E402
from triprompt.store import LocalStore, RunHistory, Toolbox  # noqa: E402

UPGRADE_PAYLOAD = {
    "finalDraft": "We are raising prices by 5% on March 1.",
    "improvedPrompt": "Write a 120-word customer email announcing a 5% price rise...",
    "tradeOffsResolved": ["Honesty about the increase vs. fear of churn"],
    "whyItIsBetter": ["Names the audience", "Sets a length", "States the tone"],
    "generalizableInsight": "When announcing bad news, lead with the date and the reason.",
}


def draft_json(content: str, key_point: str) -> str:
    return json.dumps({"content": content, "keyPoint": key_point})


@pytest.fixture
def replay_client():
    """Factory for scripted model clients: each call returns the next response."""

    def _make(*responses: str) -> ReplayChatCompletionClient:
        return ReplayChatCompletionClient(list(responses))

    return _make


@pytest.fixture
def config(tmp_path):
    return TriPromptConfig(data_dir=tmp_path / "data", log_dir=tmp_path / "logs")


@pytest.fixture
def store(config):
    return LocalStore(config.data_dir)


@pytest.fixture
def history(store):
    return RunHistory(store)


@pytest.fixture
def toolbox(store):
    return Toolbox(store)


@pytest.fixture
def make_agent(config, history, replay_client):
    """Build a TriPromptAgent backed by replay clients for the fast and synthesis models."""

    def _make(fast=(), synthesis=()):
        return TriPromptAgent(
            config=config,
            model_client=replay_client(*fast),
            synthesis_model_client=replay_client(*synthesis),
            history=history,
        )

    return _make


@pytest.fixture
def perspectives():
    return [
        Perspective(id="a", role="Chief Financial Officer", context="Cares about margin."),
        Perspective(id="b", role="Long-time Customer", context="Feels loyal but price sensitive."),
        Perspective(id="c", role="Support Lead", context="Will field the complaints."),
    ]


@pytest.fixture
def sample_result():
    drafts = [Draft(perspective_id="a", perspective_role="CFO", content="Margins first.", key_point="Protect margin.")]
    return PromptUpgradeResult(
        final_draft=UPGRADE_PAYLOAD["finalDraft"],
        improved_prompt=UPGRADE_PAYLOAD["improvedPrompt"],
        why_it_is_better=list(UPGRADE_PAYLOAD["whyItIsBetter"]),
        generalizable_insight=UPGRADE_PAYLOAD["generalizableInsight"],
        trade_offs_resolved=list(UPGRADE_PAYLOAD["tradeOffsResolved"]),
        drafts=drafts,
    )
