"""Tests for the suggestion, draft and synthesis agents against scripted model output."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from run_state_manager import Draft, Perspective
from tests.conftest import UPGRADE_PAYLOAD, draft_json
from triprompt.draft_agent import DraftAgent, PLACEHOLDER_CONTENT, PLACEHOLDER_KEY_POINT
from triprompt.errors import SynthesisError
from triprompt.perspective_agent import PerspectiveAgent
from triprompt.prompts import format_drafts
from triprompt.synthesis_agent import SynthesisAgent


class TestPerspectiveAgent:
    def test_parses_fenced_suggestions(self, replay_client):
        response = "```json\n" + json.dumps(
            [
                {"role": "Senior Engineer", "context": "Checks feasibility."},
                {"role": "Anxious User", "context": "Worries about data loss."},
                {"role": "Legal Compliance Officer", "context": "Flags GDPR issues."},
            ]
        ) + "\n```"
        agent = PerspectiveAgent(model_client=replay_client(response))

        perspectives = agent.suggest("Write a migration notice")

        assert [p.role for p in perspectives] == ["Senior Engineer", "Anxious User", "Legal Compliance Officer"]
        assert all(p.id.startswith("auto-") and p.id.endswith(f"-{idx}") for idx, p in enumerate(perspectives))
        assert len({p.id for p in perspectives}) == 3

    def test_missing_fields_get_defaults(self, replay_client):
        agent = PerspectiveAgent(model_client=replay_client('[{"context": "No role"}, {"role": "Editor"}]'))

        first, second = agent.suggest("goal")

        assert (first.role, first.context) == ("Perspective", "No role")
        assert (second.role, second.context) == ("Editor", "")

    def test_non_string_fields_are_coerced(self, replay_client):
        agent = PerspectiveAgent(model_client=replay_client('[{"role": 5, "context": null}, {"role": null, "context": 7}]'))

        first, second = agent.suggest("goal")

        assert (first.role, first.context) == ("5", "")
        assert (second.role, second.context) == ("Perspective", "7")
        assert first.is_active and second.is_active

    def test_caps_at_three(self, replay_client):
        payload = json.dumps([{"role": f"Role {idx}", "context": ""} for idx in range(5)])
        agent = PerspectiveAgent(model_client=replay_client(payload))
        assert len(agent.suggest("goal")) == 3

    def test_object_instead_of_array_yields_empty(self, replay_client):
        agent = PerspectiveAgent(model_client=replay_client('{"role": "Editor", "context": "x"}'))
        assert agent.suggest("goal") == []

    def test_malformed_output_yields_empty(self, replay_client):
        agent = PerspectiveAgent(model_client=replay_client("Sorry, I can't help with that."))
        assert agent.suggest("goal") == []

    def test_model_error_yields_empty(self, replay_client):
        # An exhausted replay client raises on the first call.
        agent = PerspectiveAgent(model_client=replay_client())
        assert agent.suggest("goal") == []


class TestDraftAgent:
    def test_builds_draft_for_perspective(self, replay_client, perspectives):
        agent = DraftAgent(model_client=replay_client(draft_json("Margins matter.", "Protect the margin.")))

        draft = agent.generate(perspectives[0], "Announce a price rise", "")

        assert draft == Draft(
            perspective_id="a",
            perspective_role="Chief Financial Officer",
            content="Margins matter.",
            key_point="Protect the margin.",
        )

    def test_missing_key_point_gets_default(self, replay_client, perspectives):
        agent = DraftAgent(model_client=replay_client('{"content": "Only content"}'))
        draft = agent.generate(perspectives[1], "goal")
        assert draft.key_point == "Provided perspective."
        assert draft.content == "Only content"

    def test_model_error_yields_placeholder(self, replay_client, perspectives):
        agent = DraftAgent(model_client=replay_client())

        draft = agent.generate(perspectives[2], "goal")

        assert draft.perspective_id == "c"
        assert draft.perspective_role == "Support Lead"
        assert draft.content == PLACEHOLDER_CONTENT
        assert draft.key_point == PLACEHOLDER_KEY_POINT

    def test_non_object_output_yields_placeholder(self, replay_client, perspectives):
        agent = DraftAgent(model_client=replay_client('["not", "an", "object"]'))
        assert agent.generate(perspectives[0], "goal").content == PLACEHOLDER_CONTENT

    def test_assistant_construction_error_yields_placeholder(self, replay_client, perspectives):
        agent = DraftAgent(model_client=replay_client())

        with patch("triprompt.draft_agent.build_assistant", side_effect=ValueError("bad model info")):
            draft = agent.generate(perspectives[0], "goal")

        assert (draft.perspective_id, draft.content) == ("a", PLACEHOLDER_CONTENT)

    def test_source_is_truncated(self, replay_client, perspectives):
        agent = DraftAgent(model_client=replay_client(), source_char_limit=1000)
        source = "x" * 1000 + "TAIL"
        fake_run = AsyncMock(return_value=draft_json("ok", "ok"))

        with patch("triprompt.draft_agent.run_assistant", fake_run):
            agent.generate(perspectives[0], "goal", source)

        task = fake_run.await_args.args[1]
        assert "x" * 1000 in task
        assert "TAIL" not in task

    def test_assistant_is_named_after_perspective(self, replay_client):
        perspective = Perspective(id="p1-1", role="Skeptical Investor", context="Wants numbers.")
        agent = DraftAgent(model_client=replay_client())
        fake_run = AsyncMock(return_value=draft_json("ok", "ok"))

        with patch("triprompt.draft_agent.run_assistant", fake_run):
            agent.generate(perspective, "goal")

        assistant = fake_run.await_args.args[0]
        assert assistant.name == "draft_writer_p1_1"


class TestSynthesisAgent:
    def test_parses_full_payload(self, replay_client, sample_result):
        agent = SynthesisAgent(model_client=replay_client("```json\n" + json.dumps(UPGRADE_PAYLOAD) + "\n```"))

        result = agent.synthesize("Announce a price rise", sample_result.drafts)

        assert result == sample_result

    def test_missing_fields_get_defaults(self, replay_client):
        agent = SynthesisAgent(model_client=replay_client('{"whyItIsBetter": "not a list"}'))

        result = agent.synthesize("goal", [])

        assert result.final_draft == "Draft generation incomplete."
        assert result.improved_prompt == "Prompt generation incomplete."
        assert result.generalizable_insight == "Always be specific."
        assert result.why_it_is_better == []
        assert result.trade_offs_resolved == []

    def test_malformed_json_raises_generic_error(self, replay_client):
        agent = SynthesisAgent(model_client=replay_client("The final draft is: Dear customers..."))

        with pytest.raises(SynthesisError, match="Failed to generate draft. Please try again.") as excinfo:
            agent.synthesize("goal", [])

        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_model_error_raises_generic_error(self, replay_client):
        agent = SynthesisAgent(model_client=replay_client())
        with pytest.raises(SynthesisError):
            agent.synthesize("goal", [])


class TestFormatDrafts:
    def test_snippets_are_truncated_to_300_characters(self):
        draft = Draft(perspective_id="a", perspective_role="Editor", content="y" * 400, key_point="Cut it.")

        block = format_drafts([draft])

        assert block == f"[Perspective: Editor]\nKey Point: Cut it.\nDraft Snippet: {'y' * 300}..."
