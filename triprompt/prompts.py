"""
Centralized prompts used by the TriPrompt agents.
"""

from __future__ import annotations

from typing import Sequence

from run_state_manager import Draft, Perspective

from .schemas import DraftPayload, PerspectiveSuggestions, UpgradePayload, schema_text

DRAFT_SNIPPET_CHARS = 300


def _json_only(schema: str) -> str:
    return f"Respond ONLY with JSON matching this schema, with no surrounding prose:\n{schema}"


SUGGESTION_SYSTEM_PROMPT: str = (
    "You pick reviewers for a piece of writing. Given a writing goal you propose distinct perspectives "
    "whose feedback would disagree in useful ways. "
    + _json_only(schema_text(PerspectiveSuggestions))
)

DRAFT_SYSTEM_PROMPT_SUFFIX: str = _json_only(schema_text(DraftPayload))

SYNTHESIS_SYSTEM_PROMPT: str = (
    "You are TriPrompt's cognitive reasoning engine. You merge several perspective drafts into one "
    "improved prompt and one publish-ready final draft. "
    + _json_only(schema_text(UpgradePayload))
)


def suggestion_prompt(goal: str) -> str:
    """Return the task for the perspective suggestion call."""

    return (
        "Task: Suggest 3 distinct perspectives (roles or personas) that would provide valuable, DIVERSE "
        f'feedback on this writing goal: "{goal}".\n'
        'Avoid generic names. Use specific roles (e.g. "Senior Engineer", "Anxious User", '
        '"Legal Compliance Officer").'
    )


def draft_system_prompt(perspective: Perspective) -> str:
    """Return the system prompt that puts the model in one perspective's shoes."""

    return f"You are: {perspective.role}\nContext: {perspective.context}\n\n{DRAFT_SYSTEM_PROMPT_SUFFIX}"


def draft_prompt(*, goal: str, source: str) -> str:
    """Return the task for one perspective draft. ``source`` is expected pre-truncated."""

    return (
        f'User Goal: "{goal}"\n'
        f'Source Material: "{source}"\n\n'
        "Task:\n"
        "1. Write a response/draft based on the User Goal from your specific perspective.\n"
        "2. If you see risks, highlight them. If you see opportunities, emphasize them.\n"
        "3. Summarize your main contribution in one sentence."
    )


def format_drafts(drafts: Sequence[Draft]) -> str:
    """Render drafts as the short evidence blocks fed to synthesis."""

    return "\n\n".join(
        f"[Perspective: {draft.perspective_role}]\n"
        f"Key Point: {draft.key_point}\n"
        f"Draft Snippet: {draft.content[:DRAFT_SNIPPET_CHARS]}..."
        for draft in drafts
    )


def synthesis_prompt(*, goal: str, drafts: Sequence[Draft]) -> str:
    """Return the task for the synthesis call."""

    return (
        f'Original User Goal: "{goal}"\n\n'
        f"We simulated {len(drafts)} perspectives to find gaps in this goal:\n"
        f"{format_drafts(drafts)}\n\n"
        "YOUR TASK (Perform in this order internally, but output ONLY the JSON structure):\n\n"
        "PHASE 1: IMPROVED PROMPT\n"
        'Create an "Improved Prompt" that the user can use to get a much better result from a general AI.\n'
        "   - The Improved Prompt must incorporate the constraints, nuance, and structure revealed by the perspectives.\n"
        "   - It should be standalone and copy-paste ready.\n\n"
        "PHASE 2: FINAL DRAFT (CRITICAL - PRIMARY PRODUCT)\n"
        'Using the Improved Prompt you just created, produce a "Final Draft" that:\n'
        "   - Fully completes the user's original writing goal.\n"
        "   - Is polished, coherent, and ready to publish/send immediately.\n"
        "   - Matches the platform, audience, and tone implied by the goal.\n"
        "   - Incorporates the best insights from the perspectives while resolving their conflicts.\n\n"
        "PHASE 3: INTELLIGENCE\n"
        'Explain "Trade-offs Resolved" (1-2 bullets): state what trade-offs between the perspectives were '
        "resolved in this final version.\n"
        'Explain "Why This Works" (3 bullet points).\n'
        'Provide "Generalizable Insight" (1 actionable lesson).\n\n'
        "Output JSON format only."
    )
