"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from triprompt.config import DEFAULT_FAST_MODEL, DEFAULT_SYNTHESIS_MODEL, TriPromptConfig
from triprompt.llm import build_openai_client

ENV_VARS = [
    "TRIPROMPT_FAST_MODEL",
    "TRIPROMPT_SYNTHESIS_MODEL",
    "TRIPROMPT_TEMPERATURE",
    "TRIPROMPT_DATA_DIR",
    "TRIPROMPT_LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = TriPromptConfig.from_env()
    assert config.fast_model == DEFAULT_FAST_MODEL
    assert config.synthesis_model == DEFAULT_SYNTHESIS_MODEL
    assert config.temperature is None
    assert config.log_dir == Path("logs")
    assert (config.history_limit, config.source_char_limit, config.max_perspectives) == (50, 1000, 3)


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TRIPROMPT_FAST_MODEL", "gemini-2.5-flash")
    monkeypatch.setenv("TRIPROMPT_SYNTHESIS_MODEL", "gemini-3-pro-preview")
    monkeypatch.setenv("TRIPROMPT_TEMPERATURE", "0.4")
    monkeypatch.setenv("TRIPROMPT_DATA_DIR", str(tmp_path))

    config = TriPromptConfig.from_env()

    assert config.fast_model == "gemini-2.5-flash"
    assert config.synthesis_model == "gemini-3-pro-preview"
    assert config.temperature == 0.4
    assert config.data_dir == tmp_path


def test_empty_log_dir_disables_logs(monkeypatch):
    monkeypatch.setenv("TRIPROMPT_LOG_DIR", "")
    assert TriPromptConfig.from_env().log_dir is None


def test_missing_api_key_is_reported(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(EnvironmentError, match="OPENAI_API_KEY"):
        build_openai_client(openai_model_name="gpt-5-nano")


def test_production_client_can_back_an_assistant(monkeypatch):
    from triprompt.llm import build_assistant

    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    client = build_openai_client(openai_model_name="gpt-5-nano")

    assistant = build_assistant(
        name="perspective_suggester",
        model_client=client,
        system_message="Reply with JSON.",
        description="Suggests perspectives.",
    )

    assert assistant.name == "perspective_suggester"
