"""
core/context.py

Session context store: an immutable, versioned snapshot plus merge patches.

Every pipeline stage receives the latest `SessionContext` and returns a plain
dict patch. Only the orchestrator applies patches, in event order, through
`SessionContext.merge`, which yields a new snapshot with an incremented version.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional
import copy

from config.logging_config import get_logger

logger = get_logger(__name__)

SESSION_ID = "sessionId"
WORKSPACE_ROOT = "workspaceRoot"
CONTENT_DRIVEN_ACTIVE = "contentDrivenActive"
DEV_SERVER_CHECKED = "devServerChecked"
TESTING_COMPLETED = "testingCompleted"
COMMIT_SUGGESTED = "commitSuggested"
FILE_CHANGES_COUNT = "fileChangesCount"
NEEDS_LINTING = "needsLinting"
LAST_TOOL_ATTEMPT = "lastToolAttempt"
LAST_WARNINGS = "lastWarnings"
LAST_TOOL_SUCCESS = "lastToolSuccess"
PERSISTENT_KNOWLEDGE = "persistentKnowledge"
VERSION = "version"

# Flags that only move from False to True, except through reset_workflow()
MONOTONIC_FLAGS = (
    CONTENT_DRIVEN_ACTIVE,
    DEV_SERVER_CHECKED,
    TESTING_COMPLETED,
    COMMIT_SUGGESTED,
)

DEFAULT_VALUES: Dict[str, Any] = {
    SESSION_ID: None,
    WORKSPACE_ROOT: None,
    CONTENT_DRIVEN_ACTIVE: False,
    DEV_SERVER_CHECKED: False,
    TESTING_COMPLETED: False,
    COMMIT_SUGGESTED: False,
    FILE_CHANGES_COUNT: 0,
    NEEDS_LINTING: False,
    LAST_TOOL_ATTEMPT: None,
    LAST_WARNINGS: [],
    LAST_TOOL_SUCCESS: None,
    PERSISTENT_KNOWLEDGE: [],
}

def _non_negative_int(value: Any) -> int:
    """Counter coercion for host-supplied values; anything non-numeric counts as 0."""
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric counter value %r", value)
        return 0

@dataclass(frozen=True)
class SessionContext:
    """
    Complete, serializable snapshot of one assistant session.

    The fixed fields are exposed as read-only properties; workflow markers written
    by commands (for example `activeBlock`) are read with `get()`, which tolerates
    absent keys. Instances are never mutated: `merge()` and `reset_workflow()`
    return new snapshots.
    """
    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType(copy.deepcopy(DEFAULT_VALUES)))
    version: int = 0

    @classmethod
    def new(cls, session_id: str, workspace_root: Optional[str]) -> "SessionContext":
        values = copy.deepcopy(DEFAULT_VALUES)
        values[SESSION_ID] = session_id
        values[WORKSPACE_ROOT] = workspace_root
        return cls(values=MappingProxyType(values), version=0)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SessionContext":
        """
        Restore a snapshot produced by `to_dict()` (or supplied by the host).

        Missing fixed fields get their defaults; unknown keys are preserved.
        """
        data = dict(data or {})
        version = _non_negative_int(data.pop(VERSION, 0))
        values = copy.deepcopy(DEFAULT_VALUES)
        values.update(copy.deepcopy(data))
        values[FILE_CHANGES_COUNT] = _non_negative_int(values.get(FILE_CHANGES_COUNT))
        return cls(values=MappingProxyType(values), version=version)

    def to_dict(self) -> Dict[str, Any]:
        snapshot = copy.deepcopy(dict(self.values))
        snapshot[VERSION] = self.version
        return snapshot

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def flag(self, key: str) -> bool:
        return bool(self.values.get(key, False))

    @property
    def session_id(self) -> Optional[str]:
        return self.values.get(SESSION_ID)

    @property
    def workspace_root(self) -> Optional[str]:
        return self.values.get(WORKSPACE_ROOT)

    @property
    def content_driven_active(self) -> bool:
        return self.flag(CONTENT_DRIVEN_ACTIVE)

    @property
    def dev_server_checked(self) -> bool:
        return self.flag(DEV_SERVER_CHECKED)

    @property
    def testing_completed(self) -> bool:
        return self.flag(TESTING_COMPLETED)

    @property
    def commit_suggested(self) -> bool:
        return self.flag(COMMIT_SUGGESTED)

    @property
    def needs_linting(self) -> bool:
        return self.flag(NEEDS_LINTING)

    @property
    def file_changes_count(self) -> int:
        return _non_negative_int(self.values.get(FILE_CHANGES_COUNT))

    @property
    def persistent_knowledge(self) -> list:
        return list(self.values.get(PERSISTENT_KNOWLEDGE) or [])

    def merge(self, patch: Optional[Mapping[str, Any]]) -> "SessionContext":
        """
        Additively merge a patch and return the new snapshot.

        - Keys not known to the context are kept as workflow markers.
        - A monotonic flag that is already True ignores a False in the patch.
        - `persistentKnowledge` is ignored once it has been populated.
        - `fileChangesCount` is clamped at zero.
        """
        if not patch:
            return self

        merged = dict(self.values)
        for key, value in patch.items():
            if key == VERSION:
                continue
            if key in MONOTONIC_FLAGS and self.flag(key) and not value:
                logger.debug("Ignoring reset of monotonic flag %s", key)
                continue
            if key == PERSISTENT_KNOWLEDGE and self.values.get(PERSISTENT_KNOWLEDGE):
                logger.debug("Ignoring update of persistentKnowledge after session start")
                continue
            if key == FILE_CHANGES_COUNT:
                value = _non_negative_int(value)
            merged[key] = copy.deepcopy(value)

        return SessionContext(values=MappingProxyType(merged), version=self.version + 1)

    def merge_all(self, patches: Iterable[Optional[Mapping[str, Any]]]) -> "SessionContext":
        """Apply patches strictly in the given order; later patches win for the same key."""
        context = self
        for patch in patches:
            context = context.merge(patch)
        return context

    def reset_workflow(self, flags: Iterable[str]) -> "SessionContext":
        """
        Explicit new-workflow event: the only way to set monotonic flags back to False.

        Resetting `commitSuggested` also restarts the file change counter so the
        commit reminder can fire again for the new piece of work.
        """
        flags = [f for f in flags if f in MONOTONIC_FLAGS]
        if not flags:
            return self

        merged = dict(self.values)
        for key in flags:
            merged[key] = False
        if COMMIT_SUGGESTED in flags:
            merged[FILE_CHANGES_COUNT] = 0
        logger.info("Workflow reset of flags: %s", ", ".join(flags))
        return SessionContext(values=MappingProxyType(merged), version=self.version + 1)
