"""
Command line interface for TriPrompt.

Loads API keys from environment variables (via `.env`), creates a RunSession,
and enters an interactive loop that turns writing goals into a final draft and
an improved prompt.
"""

import logging

from dotenv import load_dotenv

from triprompt import AppStatus, RunSession, TriPromptConfig

# --- Logging configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Type a writing goal and press Enter.\n"
    "Commands: 'history' lists past runs, 'toolbox' lists saved prompts, 'quit' exits.\n"
)


def _print_result(session: RunSession) -> None:
    result = session.result
    if result is None:
        return
    print("\n=== FINAL DRAFT ===\n")
    print(result.final_draft)
    print("\n=== IMPROVED PROMPT ===\n")
    print(result.improved_prompt)
    if result.why_it_is_better:
        print("\nWhy this works:")
        for point in result.why_it_is_better:
            print(f"  - {point}")
    if result.trade_offs_resolved:
        print("\nTrade-offs resolved:")
        for point in result.trade_offs_resolved:
            print(f"  - {point}")
    print(f"\nInsight: {result.generalizable_insight}\n")
    for draft in result.drafts:
        print(f"[{draft.perspective_role}] {draft.key_point}")
    print()


def _print_history(session: RunSession) -> None:
    history = session.agent.history
    items = history.newest_first() if history is not None else []
    if not items:
        print("No runs yet.\n")
        return
    for item in items:
        print(f"- {item.id}  {item.original_goal or 'No Goal'}")
    print()


def _print_toolbox(session: RunSession) -> None:
    prompts = session.toolbox.newest_first()
    if not prompts:
        print("No prompts saved yet.\n")
        return
    for prompt in prompts:
        print(f"- {prompt.label}\n  {prompt.content}\n")


def _ask(question: str) -> str:
    return input(question).strip()


def main() -> None:
    """Run the command line loop for TriPrompt."""
    logger.info("Loading environment variables from .env file...")
    load_dotenv()

    try:
        session = RunSession.from_config(TriPromptConfig.from_env())
    except Exception as exc:
        logger.exception("Failed to initialize TriPrompt: %s", exc)
        return

    print("\nWelcome to TriPrompt!\n" + HELP_TEXT)

    while True:
        try:
            goal = _ask("goal> ")
        except EOFError:
            logger.info("EOF received; exiting.")
            break

        if not goal:
            continue
        command = goal.lower()
        if command in {"quit", "exit", "q"}:
            logger.info("User requested exit.")
            break
        if command == "history":
            _print_history(session)
            continue
        if command == "toolbox":
            _print_toolbox(session)
            continue

        try:
            session.reset()
            session.goal = goal
            session.source = _ask("source material (optional)> ")
            if _ask("auto-suggest perspectives? [y/N]> ").lower().startswith("y"):
                if session.suggest():
                    for perspective in session.perspectives:
                        print(f"  * {perspective.role}: {perspective.context}")
                else:
                    print(f"{session.error} Using default perspectives.")
        except EOFError:
            logger.info("EOF received; exiting.")
            break

        session.run()
        if session.status is AppStatus.COMPLETE:
            _print_result(session)
            try:
                if _ask("save improved prompt to toolbox? [y/N]> ").lower().startswith("y"):
                    session.save_prompt(session.result.improved_prompt)
                    print("Saved to Toolbox!\n")
            except EOFError:
                break
        else:
            print(f"{session.error}\n")

    logger.info("Session ended. Goodbye!")
    print("Goodbye!")


if __name__ == "__main__":
    main()
