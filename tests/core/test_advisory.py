"""
Tests for `core/advisory.py` using pytest.

Focus:
- Lint auto action when linting was scheduled by the policy gate
- Testing suggestion after block source changes
- Commit reminder fires exactly once as the file change counter grows
- lastToolSuccess and fileChangesCount bookkeeping
"""

import pytest

from core.advisory import AdvisoryEngine, COMMIT_THRESHOLD, LINT_COMMAND
from core.classifier import TESTING_SKILL
from core.context import (
    SessionContext,
    COMMIT_SUGGESTED,
    FILE_CHANGES_COUNT,
    LAST_TOOL_SUCCESS,
    NEEDS_LINTING,
    TESTING_COMPLETED,
)
from shared.models import ActionDescriptor, ActionKind


@pytest.fixture
def engine():
    return AdvisoryEngine()


@pytest.fixture
def fresh():
    return SessionContext.new("s-1", "/work")


def edit(path):
    return ActionDescriptor(kind=ActionKind.FILE_MUTATION, target=path, tool_kind="Edit")


def bash(command):
    return ActionDescriptor(kind=ActionKind.COMMAND, target=command, tool_kind="Bash")


def test_lint_auto_action_clears_needs_linting(engine, fresh):
    ctx = fresh.merge({NEEDS_LINTING: True})
    result = engine.advise(edit("styles/styles.css"), {"success": True}, ctx)
    assert [a.command for a in result.auto_actions] == [LINT_COMMAND]
    assert result.context_patch[NEEDS_LINTING] is False


def test_no_lint_auto_action_when_not_scheduled(engine, fresh):
    result = engine.advise(edit("styles/styles.css"), {"success": True}, fresh)
    assert result.auto_actions == []
    assert NEEDS_LINTING not in result.context_patch


def test_block_source_change_suggests_testing(engine, fresh):
    result = engine.advise(edit("blocks/hero/hero.js"), {"success": True}, fresh)
    assert [s.name for s in result.suggestions] == [TESTING_SKILL]


def test_always_patches_success_and_counter(engine, fresh):
    result = engine.advise(bash("ls"), {"success": False}, fresh)
    assert result.context_patch[LAST_TOOL_SUCCESS] is False
    assert result.context_patch[FILE_CHANGES_COUNT] == 0


@pytest.mark.parametrize("outcome", [None, {}, {"success": None}])
def test_absent_success_counts_as_success(engine, fresh, outcome):
    result = engine.advise(edit("README.md"), outcome, fresh)
    assert result.context_patch[LAST_TOOL_SUCCESS] is True
    assert result.context_patch[FILE_CHANGES_COUNT] == 1


def test_counter_and_single_commit_reminder(engine, fresh):
    ctx = fresh
    reminders = 0
    for i in range(COMMIT_THRESHOLD + 2):
        result = engine.advise(edit(f"docs/page-{i}.md"), {"success": True}, ctx)
        reminders += sum(1 for s in result.suggestions if s.name == "commit")
        ctx = ctx.merge(result.context_patch)
        if i == 2:
            assert ctx.file_changes_count == 3
            assert reminders == 1
    assert reminders == 1
    assert ctx.commit_suggested is True
    assert ctx.file_changes_count == COMMIT_THRESHOLD + 2


def test_rules_co_fire_in_declaration_order(engine, fresh):
    ctx = fresh.merge({NEEDS_LINTING: True, FILE_CHANGES_COUNT: COMMIT_THRESHOLD - 1})
    result = engine.advise(edit("blocks/hero/hero.js"), {"success": True}, ctx)
    assert [s.name for s in result.suggestions] == [TESTING_SKILL, "commit"]
    assert len(result.auto_actions) == 1
    assert result.context_patch[COMMIT_SUGGESTED] is True
    assert result.context_patch[NEEDS_LINTING] is False


def test_successful_test_command_marks_testing_completed(engine, fresh):
    result = engine.advise(bash("npx playwright test blocks/hero"), {"success": True}, fresh)
    assert result.context_patch[TESTING_COMPLETED] is True


def test_failed_test_command_does_not_mark_testing(engine, fresh):
    result = engine.advise(bash("npm test"), {"success": False}, fresh)
    assert TESTING_COMPLETED not in result.context_patch
