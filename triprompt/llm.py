"""Shared helpers for building model clients and reading AutoGen agent output."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Coroutine, Dict, Iterable, Optional, TypeVar

from autogen_agentchat.agents import AssistantAgent
from autogen_agentchat.messages import BaseChatMessage
from autogen_core.models import ChatCompletionClient, ModelInfo
from autogen_ext.models.openai import OpenAIChatCompletionClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"

T = TypeVar("T")


def build_openai_client(*, openai_model_name: str, temperature: Optional[float] = None) -> ChatCompletionClient:
    """Create a chat completion client for any OpenAI-compatible endpoint.

    ``OPENAI_API_BASE_URL`` may point at another provider's compatibility
    endpoint, so the model capabilities are declared explicitly rather than
    looked up from the model name.
    """
    if not os.getenv("OPENAI_API_KEY"):
        raise EnvironmentError("OPENAI_API_KEY is not set.")

    model_info: ModelInfo = {
        "vision": False,
        "function_calling": False,
        "json_output": True,
        "structured_output": False,
        "family": "unknown",
    }
    client_kwargs: Dict[str, Any] = {
        "model": openai_model_name,
        "api_key": os.environ["OPENAI_API_KEY"],
        "base_url": os.getenv("OPENAI_API_BASE_URL", DEFAULT_BASE_URL),
        "include_name_in_message": False,
        "model_info": model_info,
    }
    if temperature is not None:
        client_kwargs["temperature"] = temperature
    logger.info("Building chat client for model '%s'", openai_model_name)
    return OpenAIChatCompletionClient(**client_kwargs)


def build_assistant(
    *,
    name: str,
    model_client: ChatCompletionClient,
    system_message: str,
    description: str,
) -> AssistantAgent:
    """Tool-less single-turn assistant, the shape every TriPrompt call uses."""
    return AssistantAgent(
        name=name,
        model_client=model_client,
        system_message=system_message,
        description=description,
        max_tool_iterations=1,
    )


async def run_assistant(agent: AssistantAgent, task: str) -> str:
    """Run ``agent`` once on ``task`` and return its reply text."""
    result = await agent.run(task=task)
    return extract_text(result.messages, preferred_source=agent.name)


def last_chat_message(messages: Iterable[Any], preferred_source: Optional[str] = None) -> BaseChatMessage:
    candidate: Optional[BaseChatMessage] = None
    for message in reversed(list(messages)):
        if not isinstance(message, BaseChatMessage):
            continue
        if preferred_source and getattr(message, "source", None) == preferred_source:
            return message
        if candidate is None:
            candidate = message
    if candidate:
        return candidate
    raise RuntimeError("Assistant did not produce a chat response.")


def extract_text(messages: Iterable[Any], preferred_source: Optional[str] = None) -> str:
    final_message = last_chat_message(messages, preferred_source=preferred_source)
    to_text = getattr(final_message, "to_text", None)
    if callable(to_text):
        return to_text().strip()
    return str(final_message).strip()


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Drive a pipeline coroutine to completion from synchronous code.

    Streamlit and the CLI call in from threads with no running loop.
    """
    return asyncio.run(coro)
