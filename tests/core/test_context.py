"""
Tests for `core/context.py` – snapshot and merge semantics of the session context.

Focus:
- Additive merging (unknown keys kept, later patches win)
- Monotonic flags never reset by a merge, only by an explicit workflow reset
- persistentKnowledge immutability after session start
- Lossless to_dict/from_dict snapshots
"""

import json

import pytest

from core.context import (
    SessionContext,
    COMMIT_SUGGESTED,
    CONTENT_DRIVEN_ACTIVE,
    DEV_SERVER_CHECKED,
    FILE_CHANGES_COUNT,
    MONOTONIC_FLAGS,
    PERSISTENT_KNOWLEDGE,
    TESTING_COMPLETED,
)


def test_new_context_has_defaults():
    ctx = SessionContext.new("s-1", "/work")
    assert ctx.session_id == "s-1"
    assert ctx.workspace_root == "/work"
    assert ctx.file_changes_count == 0
    assert ctx.version == 0
    for flag in MONOTONIC_FLAGS:
        assert ctx.flag(flag) is False


def test_later_patch_wins_for_same_key():
    ctx = SessionContext.new("s-1", "/work").merge({"a": 1}).merge({"a": 2})
    assert ctx.get("a") == 2


def test_merge_all_applies_in_order():
    ctx = SessionContext.new("s-1", "/work").merge_all([{"a": 1}, {"b": 2}, {"a": 3}])
    assert ctx.get("a") == 3
    assert ctx.get("b") == 2
    assert ctx.version == 3


def test_unknown_keys_are_kept_and_absent_keys_tolerated():
    ctx = SessionContext.new("s-1", "/work").merge({"activeBlock": "hero"})
    assert ctx.get("activeBlock") == "hero"
    assert ctx.get("activeWorkflow") is None
    assert ctx.get("activeWorkflow", "none") == "none"


def test_merge_returns_new_snapshot_and_leaves_original_untouched():
    original = SessionContext.new("s-1", "/work")
    merged = original.merge({CONTENT_DRIVEN_ACTIVE: True})
    assert original.content_driven_active is False
    assert merged.content_driven_active is True
    assert merged.version == original.version + 1


def test_empty_patch_is_a_no_op():
    ctx = SessionContext.new("s-1", "/work")
    assert ctx.merge({}) is ctx
    assert ctx.merge(None) is ctx


@pytest.mark.parametrize("flag", MONOTONIC_FLAGS)
def test_monotonic_flags_are_not_reset_by_merge(flag):
    ctx = SessionContext.new("s-1", "/work").merge({flag: True})
    ctx = ctx.merge({flag: False})
    assert ctx.flag(flag) is True


def test_reset_workflow_is_the_only_way_back_to_false():
    ctx = SessionContext.new("s-1", "/work").merge({
        TESTING_COMPLETED: True,
        COMMIT_SUGGESTED: True,
        DEV_SERVER_CHECKED: True,
        FILE_CHANGES_COUNT: 5,
    })
    reset = ctx.reset_workflow([TESTING_COMPLETED, COMMIT_SUGGESTED])
    assert reset.testing_completed is False
    assert reset.commit_suggested is False
    assert reset.dev_server_checked is True
    assert reset.file_changes_count == 0


def test_reset_workflow_ignores_non_flag_keys():
    ctx = SessionContext.new("s-1", "/work").merge({"activeBlock": "hero"})
    assert ctx.reset_workflow(["activeBlock"]) is ctx


def test_persistent_knowledge_is_immutable_once_loaded():
    docs = [{"name": "AGENTS.md", "size": 10, "firstLine": "# Guide"}]
    ctx = SessionContext.new("s-1", "/work").merge({PERSISTENT_KNOWLEDGE: docs})
    ctx = ctx.merge({PERSISTENT_KNOWLEDGE: []})
    assert ctx.persistent_knowledge == docs


def test_file_changes_count_is_clamped_at_zero():
    ctx = SessionContext.new("s-1", "/work").merge({FILE_CHANGES_COUNT: -4})
    assert ctx.file_changes_count == 0


def test_non_numeric_counter_in_patch_counts_as_zero():
    ctx = SessionContext.new("s-1", "/work").merge({FILE_CHANGES_COUNT: 2})
    ctx = ctx.merge({FILE_CHANGES_COUNT: "lots"})
    assert ctx.file_changes_count == 0


def test_from_dict_tolerates_malformed_version_and_counter():
    ctx = SessionContext.from_dict({"sessionId": "s", "version": "v2", FILE_CHANGES_COUNT: "three"})
    assert ctx.version == 0
    assert ctx.file_changes_count == 0
    assert ctx.to_dict()[FILE_CHANGES_COUNT] == 0


def test_snapshot_round_trip_is_json_serializable():
    ctx = SessionContext.new("s-1", "/work").merge({CONTENT_DRIVEN_ACTIVE: True, "activeBlock": "hero"})
    restored = SessionContext.from_dict(json.loads(json.dumps(ctx.to_dict())))
    assert restored == ctx


def test_from_dict_fills_missing_fields():
    ctx = SessionContext.from_dict({"sessionId": "s-9", "customMarker": "x"})
    assert ctx.session_id == "s-9"
    assert ctx.get("customMarker") == "x"
    assert ctx.testing_completed is False
    assert ctx.file_changes_count == 0
