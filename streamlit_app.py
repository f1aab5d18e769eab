"""
Streamlit entry point for TriPrompt.

Collects a writing goal, optional source material and up to three
perspectives, runs the pipeline, and shows the final draft with the improved
prompt. The sidebar holds the run history and the toolbox of saved prompts.
"""

from __future__ import annotations

import logging
from datetime import datetime

import streamlit as st
from dotenv import load_dotenv

from run_state_manager import PromptUpgradeResult
from triprompt import AppStatus, RunSession, TriPromptConfig

# Ensure environment variables from .env are loaded before building the session.
load_dotenv()

LOGGER = logging.getLogger(__name__)


def _init_session_state() -> RunSession:
    """Create the RunSession stored in st.session_state on first load."""
    if "triprompt" not in st.session_state:
        st.session_state.triprompt = RunSession.from_config(TriPromptConfig.from_env())
    return st.session_state.triprompt


def _format_timestamp(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M")


def _render_result_body(result: PromptUpgradeResult) -> None:
    st.markdown(result.final_draft or "No draft available.")
    if result.trade_offs_resolved:
        st.markdown("**Trade-offs resolved**")
        for point in result.trade_offs_resolved:
            st.markdown(f"- {point}")


def _render_sidebar(session: RunSession) -> None:
    """Render the history and toolbox panels."""
    with st.sidebar:
        if st.button("+ New Run", use_container_width=True, disabled=session.is_busy):
            session.reset()
            for key in ("goal_input", "source_input"):
                st.session_state.pop(key, None)
            st.rerun()

        st.divider()
        st.header("History")
        history = session.agent.history
        runs = history.newest_first() if history is not None else []
        if not runs:
            st.caption("No runs yet.")
        for run in runs:
            with st.expander(f"{_format_timestamp(run.timestamp)} · {run.original_goal or 'No Goal'}"):
                _render_result_body(run.result)
                st.code(run.result.improved_prompt, language=None)
        if runs and st.button("Clear history", use_container_width=True):
            history.clear()
            st.rerun()

        st.divider()
        st.header("Toolbox")
        prompts = session.toolbox.newest_first()
        if not prompts:
            st.caption("No prompts saved yet.")
        for prompt in prompts:
            with st.expander(prompt.label):
                st.code(prompt.content, language=None)
                apply_col, delete_col = st.columns(2)
                if apply_col.button("Apply", key=f"apply-{prompt.id}"):
                    session.apply_saved_prompt(prompt.content)
                    st.session_state.goal_input = prompt.content
                    st.rerun()
                if delete_col.button("Delete", key=f"delete-{prompt.id}"):
                    session.toolbox.delete(prompt.id)
                    st.rerun()


def _render_inputs(session: RunSession) -> None:
    st.session_state.setdefault("goal_input", session.goal)
    st.session_state.setdefault("source_input", session.source)
    session.goal = st.text_area(
        "What do you want to write?",
        key="goal_input",
        placeholder="e.g. A LinkedIn post announcing our Series A",
    )
    session.source = st.text_area(
        "Source material (optional)",
        key="source_input",
        help="Only the first 1000 characters are shared with each perspective.",
    )

    header_col, button_col = st.columns([3, 1])
    header_col.subheader("Customize Perspectives (Optional)")
    if button_col.button("Auto-Suggest Roles", disabled=session.is_busy or not session.goal.strip()):
        with st.spinner("Thinking..."):
            session.suggest()

    for idx, perspective in enumerate(session.perspectives):
        role_col, context_col = st.columns(2)
        role = role_col.text_input(
            f"Perspective {idx + 1}",
            value=perspective.role,
            key=f"role-{perspective.id}",
            placeholder="e.g. Role or Perspective",
        )
        context = context_col.text_input(
            "Context",
            value=perspective.context,
            key=f"context-{perspective.id}",
        )
        session.update_perspective(idx, role=role, context=context)


def _render_result(session: RunSession) -> None:
    result = session.result
    if result is None:
        return
    st.subheader("Final Draft")
    st.markdown(result.final_draft)
    if st.button("Clear result"):
        session.go_home()
        st.rerun()

    st.subheader("Improved Prompt")
    st.code(result.improved_prompt, language=None)
    if st.button("Save to Toolbox"):
        session.save_prompt(result.improved_prompt)
        st.success("Saved to Toolbox!")

    if result.why_it_is_better:
        st.markdown("**Why this works**")
        for point in result.why_it_is_better:
            st.markdown(f"- {point}")
    if result.trade_offs_resolved:
        st.markdown("**Trade-offs resolved**")
        for point in result.trade_offs_resolved:
            st.markdown(f"- {point}")
    st.info(result.generalizable_insight)

    with st.expander("Supporting perspectives", expanded=False):
        for draft in result.drafts:
            st.markdown(f"**{draft.perspective_role}** · {draft.key_point}")
            st.markdown(draft.content)
            st.markdown("---")


def main() -> None:
    st.set_page_config(page_title="TriPrompt", layout="wide")
    st.title("TriPrompt")
    st.caption("Simulate three perspectives, then get a publish-ready draft and a reusable prompt.")

    try:
        session = _init_session_state()
    except Exception as exc:  # pragma: no cover - defensive guard for UI
        LOGGER.exception("Streamlit failed to initialize TriPrompt: %s", exc)
        st.error(
            "Failed to initialize TriPrompt. "
            "Verify API keys in your environment and restart the app.\n\n"
            f"Details: {exc}"
        )
        return

    _render_sidebar(session)

    input_col, result_col = st.columns([5, 7])
    with input_col:
        _render_inputs(session)
        generate = st.button("Generate", type="primary", disabled=session.is_busy, use_container_width=True)

    with result_col:
        if generate:
            with st.status("Preparing perspectives...", expanded=False) as status:
                succeeded = session.run(on_progress=lambda message: status.update(label=message))
                if succeeded:
                    status.update(label="Draft ready.", state="complete")
                else:
                    status.update(label="Run failed.", state="error")
        if session.error:
            st.error(session.error)
        if session.status is AppStatus.COMPLETE:
            _render_result(session)
        elif session.status is AppStatus.IDLE and session.result is None:
            st.caption("Your final draft and improved prompt will appear here.")


if __name__ == "__main__":
    main()
