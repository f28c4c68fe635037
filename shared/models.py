"""
shared/models.py

Common data models and type definitions used across the hook pipeline.

This module contains the ephemeral value types that flow between stages
(warnings, suggestions, action descriptors, command outcomes) and the pydantic
request/response schemas used by the HTTP hook endpoints. The session context
itself lives in `core/context.py` because it owns merge behavior.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple
from enum import Enum
from pydantic import BaseModel, Field

class Severity(Enum):
    """
    Severity of a policy warning.

    Severity is independent of enforcement: whether a warning stops the action is
    carried separately by `PolicyWarning.block_execution`.
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class SuggestionKind(Enum):
    SKILL = "skill"
    AGENT = "agent"
    COMMAND = "command"
    WARNING = "warning"

class ActionKind(Enum):
    """
    Kinds of tool actions the policy gate and advisory engine understand.

    - FILE_MUTATION: a write/edit of a file in the workspace
    - COMMAND: a generic shell command execution
    - OTHER: anything else (reads, searches); never gated
    """
    FILE_MUTATION = "file_mutation"
    COMMAND = "command"
    OTHER = "other"

# Host tool names mapped to the parameter that carries the action target
FILE_MUTATION_TOOLS = {
    "Write": "file_path",
    "Edit": "file_path",
    "MultiEdit": "file_path",
    "NotebookEdit": "notebook_path",
}
COMMAND_TOOLS = {
    "Bash": "command",
}

@dataclass(frozen=True)
class PolicyWarning:
    """A single warning produced by one policy evaluation."""
    severity: Severity
    message: str
    detail: str = ""
    recommended_action: str = ""
    block_execution: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'severity': self.severity.value,
            'message': self.message,
            'detail': self.detail,
            'recommendedAction': self.recommended_action,
            'blockExecution': self.block_execution,
        }

@dataclass(frozen=True)
class Suggestion:
    """A follow-up the assistant may take: activate a skill/agent, run a command, or heed a warning."""
    kind: SuggestionKind
    name: str
    reason: str
    message: str
    auto_activate: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'name': self.name,
            'reason': self.reason,
            'autoActivate': self.auto_activate,
            'message': self.message,
        }

@dataclass(frozen=True)
class AutoAction:
    """An external command the host should run right after a tool action."""
    command: str
    reason: str
    background: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'command': self.command,
            'background': self.background,
            'reason': self.reason,
        }

@dataclass(frozen=True)
class ActionDescriptor:
    """
    Normalized description of a pending or completed tool action.

    `target` is the file path (POSIX form, relative to the workspace root when
    possible) for file mutations, or the raw command string for commands.
    """
    kind: ActionKind
    target: str = ""
    tool_kind: str = ""

    @property
    def is_mutation(self) -> bool:
        return self.kind is ActionKind.FILE_MUTATION

    @classmethod
    def from_tool(cls, tool_kind: str, parameters: Optional[Dict[str, Any]], workspace_root: Optional[str] = None) -> "ActionDescriptor":
        """
        Build a descriptor from a host tool invocation.

        Unknown tools and missing parameters never raise; they produce an OTHER
        action (or an empty target) so downstream stages can ignore them.
        """
        from shared.utils import normalize_workspace_path

        parameters = parameters or {}
        if tool_kind in FILE_MUTATION_TOOLS:
            raw_path = parameters.get(FILE_MUTATION_TOOLS[tool_kind]) or ""
            return cls(
                kind=ActionKind.FILE_MUTATION,
                target=normalize_workspace_path(str(raw_path), workspace_root),
                tool_kind=tool_kind,
            )
        if tool_kind in COMMAND_TOOLS:
            return cls(
                kind=ActionKind.COMMAND,
                target=str(parameters.get(COMMAND_TOOLS[tool_kind]) or ""),
                tool_kind=tool_kind,
            )
        return cls(kind=ActionKind.OTHER, target="", tool_kind=tool_kind or "")

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind.value, 'target': self.target, 'toolKind': self.tool_kind}

@dataclass
class CommandOutcome:
    """
    Result of executing a command.

    Besides success and a human-readable message, an outcome may carry directives
    the orchestrator must honor: run an external command, activate a skill or an
    agent, replace the prompt with an enhanced one, reset workflow flags, and merge
    a context patch.
    """
    success: bool
    message: str
    run_command: Optional[str] = None
    run_in_background: bool = False
    activate_skill: Optional[str] = None
    activate_agent: Optional[str] = None
    enhanced_prompt: Optional[str] = None
    context_patch: Dict[str, Any] = field(default_factory=dict)
    reset_flags: Tuple[str, ...] = ()

    @classmethod
    def failure(cls, message: str) -> "CommandOutcome":
        return cls(success=False, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'message': self.message,
            'runCommand': self.run_command,
            'runInBackground': self.run_in_background,
            'activateSkill': self.activate_skill,
            'activateAgent': self.activate_agent,
            'enhancedPrompt': self.enhanced_prompt,
            'contextPatch': dict(self.context_patch),
            'resetFlags': list(self.reset_flags),
        }

@dataclass(frozen=True)
class KnowledgeDocument:
    """Summary of one persistent document loaded at session start."""
    name: str
    size: int
    first_line: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'size': self.size, 'firstLine': self.first_line}

# --- HTTP hook schemas ---

class SessionStartRequest(BaseModel):
    """Body of POST /hooks/session-start."""
    workspace_root: str = Field(..., description="Absolute path of the project workspace")
    session_id: Optional[str] = Field(None, description="Host session identifier; generated when omitted")
    context: Optional[Dict[str, Any]] = Field(None, description="Previously persisted context snapshot to restore")

class PromptSubmitRequest(BaseModel):
    """Body of POST /hooks/prompt-submit."""
    prompt: str
    context: Dict[str, Any] = Field(default_factory=dict)

class PreToolUseRequest(BaseModel):
    """Body of POST /hooks/pre-tool-use."""
    tool_kind: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    context: Dict[str, Any] = Field(default_factory=dict)

class PostToolUseRequest(BaseModel):
    """Body of POST /hooks/post-tool-use."""
    tool_kind: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    result: Dict[str, Any] = Field(default_factory=dict, description="Tool result; 'success' defaults to true")
    context: Dict[str, Any] = Field(default_factory=dict)

class CommandRequest(BaseModel):
    """Body of POST /commands/{name}."""
    args: List[str] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)

class HookResponse(BaseModel):
    """
    Common envelope returned by every hook endpoint.

    `context` is always the complete updated snapshot; `data` holds the
    stage-specific payload (suggestions, warnings, auto actions, outcome).
    """
    context: Dict[str, Any]
    data: Dict[str, Any] = Field(default_factory=dict)
