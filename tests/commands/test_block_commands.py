"""
Tests for `commands/block_commands.py` and `commands/tooling_commands.py`.

Each command is executed directly (without the orchestrator) against a temporary
workspace that holds the blocks 'cards' and 'hero'. Validation failures must return
the usage string and carry no directives; prerequisite failures must list the
available blocks.
"""

import pytest

from commands.block_commands import (
    BlockTestCommand,
    FindBlockCommand,
    NewBlockCommand,
    StartContentDrivenCommand,
)
from commands.tooling_commands import DevServerCommand, LintCommand
from core.context import (
    COMMIT_SUGGESTED,
    CONTENT_DRIVEN_ACTIVE,
    DEV_SERVER_CHECKED,
    NEEDS_LINTING,
    TESTING_COMPLETED,
)


@pytest.mark.parametrize("args", [
    ["Hero Banner"], ["Hero"], ["1hero"], ["hero_banner"], [], ["a", "b"],
    ["hero-banner\n"], ["hero\nbanner"], [""],
])
def test_new_block_rejects_invalid_arguments(context, args):
    outcome = NewBlockCommand().execute(args, context)
    assert outcome.success is False
    assert "Usage: /new-block <block-name>" in outcome.message
    assert outcome.context_patch == {}
    assert outcome.activate_skill is None
    assert outcome.reset_flags == ()


def test_new_block_refuses_existing_block(context):
    outcome = NewBlockCommand().execute(["hero"], context)
    assert outcome.success is False
    assert "already exists" in outcome.message
    assert "Available blocks:\n  - cards\n  - hero" in outcome.message
    assert outcome.context_patch == {}


def test_new_block_refuses_existing_hyphenated_block(context, workspace):
    (workspace / "blocks" / "hero-banner").mkdir()
    outcome = NewBlockCommand().execute(["hero-banner"], context)
    assert outcome.success is False
    assert "already exists" in outcome.message
    assert outcome.context_patch == {}


def test_new_block_starts_content_driven_workflow(context):
    outcome = NewBlockCommand().execute(["hero-banner"], context)
    assert outcome.success is True
    assert outcome.activate_skill == "content-driven-development"
    assert outcome.context_patch[CONTENT_DRIVEN_ACTIVE] is True
    assert outcome.context_patch["activeBlock"] == "hero-banner"
    assert set(outcome.reset_flags) == {TESTING_COMPLETED, COMMIT_SUGGESTED}
    assert "blocks/hero-banner/hero-banner.js" in outcome.enhanced_prompt
    assert outcome.run_command is None


def test_start_cdd_with_and_without_block(context):
    bare = StartContentDrivenCommand().execute([], context)
    assert bare.success is True
    assert bare.context_patch == {CONTENT_DRIVEN_ACTIVE: True, "activeWorkflow": "content-driven"}

    named = StartContentDrivenCommand().execute(["cards"], context)
    assert named.context_patch["activeBlock"] == "cards"

    invalid = StartContentDrivenCommand().execute(["Cards"], context)
    assert invalid.success is False
    assert "Usage: /start-cdd [block-name]" in invalid.message


def test_test_block_requires_existing_block(context):
    outcome = BlockTestCommand().execute(["carousel"], context)
    assert outcome.success is False
    assert "does not exist" in outcome.message
    assert "  - hero" in outcome.message
    assert outcome.run_command is None


def test_test_block_runs_block_tests(context):
    outcome = BlockTestCommand().execute(["hero"], context)
    assert outcome.success is True
    assert outcome.run_command == "npx playwright test blocks/hero"
    assert outcome.run_in_background is False
    assert outcome.activate_skill == "testing-blocks"


def test_test_block_lists_nothing_in_empty_workspace(tmp_path):
    from core.context import SessionContext

    outcome = BlockTestCommand().execute(["hero"], SessionContext.new("s", str(tmp_path)))
    assert outcome.success is False
    assert "No blocks exist yet in this project." in outcome.message


def test_find_block_activates_research_agent(context):
    outcome = FindBlockCommand().execute(["image", "carousel"], context)
    assert outcome.success is True
    assert outcome.activate_agent == "block-researcher"
    assert outcome.context_patch == {"lastBlockSearch": "image carousel"}
    assert "cards, hero" in outcome.enhanced_prompt


def test_find_block_needs_a_description(context):
    outcome = FindBlockCommand().execute([], context)
    assert outcome.success is False
    assert "Usage: /find-block <description...>" in outcome.message


@pytest.mark.parametrize("args,expected", [([], "npm run lint"), (["--fix"], "npm run lint:fix")])
def test_lint_command(context, args, expected):
    outcome = LintCommand().execute(args, context)
    assert outcome.success is True
    assert outcome.run_command == expected
    assert outcome.context_patch == {NEEDS_LINTING: False}


def test_lint_rejects_unknown_flags(context):
    outcome = LintCommand().execute(["--everything"], context)
    assert outcome.success is False
    assert outcome.run_command is None


def test_dev_server_runs_in_background(context):
    outcome = DevServerCommand().execute([], context)
    assert outcome.run_in_background is True
    assert outcome.run_command == "aem up"
    assert outcome.context_patch == {DEV_SERVER_CHECKED: True}

    assert DevServerCommand().execute(["--port", "3000"], context).success is False


def test_internal_fault_becomes_failed_outcome(context, monkeypatch):
    def explode(workspace_root, name):
        raise RuntimeError("filesystem gone")

    monkeypatch.setattr("commands.block_commands.block_exists", explode)
    outcome = NewBlockCommand().execute(["footer"], context)
    assert outcome.success is False
    assert "filesystem gone" in outcome.message
