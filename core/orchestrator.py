"""
core/orchestrator.py

Session orchestrator for the assistant lifecycle hooks.

This module contains the coordination logic that:
1. Initializes the session context and persistent knowledge at session start
2. Classifies every user prompt and dispatches recognized slash commands
3. Runs the policy gate before every tool action
4. Runs the advisory engine after every tool action
5. Merges every stage's patch into the context, strictly in event order
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from config.logging_config import get_logger
from commands import get_command, is_registered
from monitoring.metrics import STAGE_PROCESSING_TIME, ERROR_COUNT, track_latency
from services.command_runner import CommandRunner
from services.knowledge_loader import KnowledgeLoader
from shared.models import ActionDescriptor, AutoAction, CommandOutcome, PolicyWarning, Severity, Suggestion
from shared.utils import generate_session_id, truncate_message_for_logging

from .advisory import AdvisoryEngine, AdvisoryResult
from .classifier import ClassificationResult, IntentClassifier, context_effects
from .context import (
    SessionContext,
    LAST_TOOL_ATTEMPT,
    LAST_WARNINGS,
    PERSISTENT_KNOWLEDGE,
    SESSION_ID,
    WORKSPACE_ROOT,
)
from .policy import PolicyDecision, PolicyGate

logger = get_logger(__name__)

ContextLike = Union[SessionContext, Mapping[str, Any], None]

def coerce_context(context: ContextLike) -> SessionContext:
    if isinstance(context, SessionContext):
        return context
    return SessionContext.from_dict(context)

def parse_command_invocation(prompt: str) -> Optional[Tuple[str, List[str]]]:
    """
    Recognize `/<command> arg1 arg2 ...` prompts naming a registered command.

    Returns:
        Optional[Tuple[str, List[str]]]: Command name and whitespace-tokenized
        arguments, or None when the prompt is not a registered command invocation
        (other slash words belong to the host).
    """
    text = (prompt or "").strip()
    if not text.startswith("/"):
        return None
    tokens = text[1:].split()
    if not tokens or not is_registered(tokens[0]):
        return None
    return tokens[0], tokens[1:]

@dataclass
class SessionStartResult:
    context: SessionContext
    messages: List[str] = field(default_factory=list)
    ready: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {'context': self.context.to_dict(), 'messages': list(self.messages), 'ready': self.ready}

@dataclass
class PromptResult:
    context: SessionContext
    suggestions: List[Suggestion] = field(default_factory=list)
    enhanced_prompt: str = ""
    command_outcome: Optional[CommandOutcome] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'suggestions': [s.to_dict() for s in self.suggestions],
            'enhancedPrompt': self.enhanced_prompt,
            'commandOutcome': self.command_outcome.to_dict() if self.command_outcome else None,
        }

@dataclass
class PreToolResult:
    context: SessionContext
    proceed: bool = True
    warnings: List[PolicyWarning] = field(default_factory=list)
    context_updates: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'proceed': self.proceed,
            'warnings': [w.to_dict() for w in self.warnings],
            'contextUpdates': dict(self.context_updates),
        }

@dataclass
class PostToolResult:
    context: SessionContext
    suggestions: List[Suggestion] = field(default_factory=list)
    auto_actions: List[AutoAction] = field(default_factory=list)
    context_updates: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'suggestions': [s.to_dict() for s in self.suggestions],
            'autoActions': [a.to_dict() for a in self.auto_actions],
            'contextUpdates': dict(self.context_updates),
        }

class SessionOrchestrator:
    """
    Central orchestrator that runs the pipeline stages for each hook event.

    Responsibilities:
    - Session initialization with best-effort persistent knowledge loading
    - Prompt classification and slash command dispatch
    - Policy gating before tool actions and advice after them
    - Ordered merging of every stage's context patch
    - Converting stage faults into warnings or failed outcomes

    The orchestrator keeps no session state of its own: every hook receives the
    latest context snapshot and returns the updated one.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        command_runner: Optional[CommandRunner] = None,
        knowledge_loader: Optional[KnowledgeLoader] = None,
    ):
        """
        Initialize orchestrator with configuration, stages and collaborators.

        Args:
            config (Dict[str, Any]): Global configuration dictionary
            command_runner (Optional[CommandRunner]): Executes run-a-command directives
            knowledge_loader (Optional[KnowledgeLoader]): Loads persistent documents at session start
        """
        self.config = config
        self.classifier = IntentClassifier()
        self.policy_gate = PolicyGate()
        self.advisory_engine = AdvisoryEngine()
        self.command_runner = command_runner or CommandRunner()
        self.knowledge_loader = knowledge_loader or KnowledgeLoader(
            config.get('knowledge', {}).get('documents')
        )

    @track_latency(STAGE_PROCESSING_TIME, lambda self: {'stage': 'session_start'})
    def on_session_start(
        self,
        workspace_root: str,
        context: ContextLike = None,
        session_id: Optional[str] = None,
    ) -> SessionStartResult:
        """
        Create (or restore) the session context and load persistent knowledge.

        Args:
            workspace_root (str): Project root for this session
            context (ContextLike): Snapshot persisted by the host, restored as-is when given
            session_id (Optional[str]): Host session identifier; generated when absent

        Returns:
            SessionStartResult: The initialized context, an initialization summary and the ready flag.
        """
        if context:
            ctx = coerce_context(context).merge({WORKSPACE_ROOT: workspace_root})
            if session_id or not ctx.session_id:
                ctx = ctx.merge({SESSION_ID: session_id or generate_session_id()})
            messages = [f"Restored session {ctx.session_id} (context version {ctx.version})."]
        else:
            ctx = SessionContext.new(session_id or generate_session_id(), workspace_root)
            messages = [f"Started session {ctx.session_id}."]

        logger.extra.update({'session_id': ctx.session_id, 'stage': 'session_start'})
        logger.info(f"Session start for workspace {workspace_root}")

        if ctx.persistent_knowledge:
            messages.append(f"Persistent knowledge already loaded ({len(ctx.persistent_knowledge)} document(s)).")
        else:
            try:
                documents, missing = self.knowledge_loader.load(workspace_root)
            except Exception as e:
                ERROR_COUNT.labels(type='stage', location='session_start').inc()
                logger.error(f"Knowledge loading failed: {e}", exc_info=True)
                documents, missing = [], []
                messages.append(f"Persistent knowledge could not be loaded: {e}")

            ctx = ctx.merge({PERSISTENT_KNOWLEDGE: [doc.to_dict() for doc in documents]})
            for doc in documents:
                messages.append(f"Loaded {doc.name} ({doc.size} bytes): {doc.first_line}")
            for name in missing:
                messages.append(f"Skipped {name}: not found.")

        messages.append("Workflow hooks ready. Commands: /new-block, /start-cdd, /test-block, /find-block, /lint, /dev-server.")
        return SessionStartResult(context=ctx, messages=messages, ready=True)

    @track_latency(STAGE_PROCESSING_TIME, lambda self: {'stage': 'prompt_submit'})
    def on_user_prompt_submit(self, prompt: str, context: ContextLike) -> PromptResult:
        """
        Classify the prompt, merge its context effects and dispatch a recognized command.

        Args:
            prompt (str): Raw user prompt
            context (ContextLike): Latest context snapshot

        Returns:
            PromptResult: Suggestions, the enhanced prompt, the command outcome (if any)
            and the updated context.
        """
        ctx = coerce_context(context)
        logger.extra.update({'session_id': ctx.session_id, 'stage': 'prompt_submit'})
        logger.info(f"Prompt received: '{truncate_message_for_logging(prompt or '', 50)}'")

        try:
            classification = self.classifier.classify(prompt, ctx)
        except Exception as e:
            ERROR_COUNT.labels(type='stage', location='prompt_submit').inc()
            logger.error(f"Classification failed: {e}", exc_info=True)
            classification = ClassificationResult(prompt=prompt or "", suggestions=())

        ctx = ctx.merge(context_effects(classification.suggestions))
        enhanced_prompt = classification.enhanced_prompt

        outcome = None
        invocation = parse_command_invocation(prompt)
        if invocation:
            name, args = invocation
            outcome, ctx = self.dispatch_command(name, args, ctx)
            lead = outcome.enhanced_prompt if outcome.success and outcome.enhanced_prompt else outcome.message
            enhanced_prompt = "\n\n".join([lead, enhanced_prompt])

        return PromptResult(
            context=ctx,
            suggestions=list(classification.suggestions),
            enhanced_prompt=enhanced_prompt,
            command_outcome=outcome,
        )

    @track_latency(STAGE_PROCESSING_TIME, lambda self: {'stage': 'pre_tool_use'})
    def on_pre_tool_use(self, tool_kind: str, parameters: Optional[Dict[str, Any]], context: ContextLike) -> PreToolResult:
        """
        Run the policy gate for a pending tool action.

        The returned `proceed` flag is the gate's decision; the host must not run
        the action when it is False. A gate fault becomes a low, non-blocking warning.
        """
        ctx = coerce_context(context)
        logger.extra.update({'session_id': ctx.session_id, 'stage': 'pre_tool_use'})
        action = ActionDescriptor.from_tool(tool_kind, parameters, ctx.workspace_root)

        try:
            decision = self.policy_gate.evaluate(action, ctx)
        except Exception as e:
            ERROR_COUNT.labels(type='stage', location='pre_tool_use').inc()
            logger.error(f"Policy evaluation failed: {e}", exc_info=True)
            decision = PolicyDecision(warnings=[PolicyWarning(
                severity=Severity.LOW,
                message="Policy checks could not be evaluated for this action.",
                detail=str(e),
            )])

        updates = dict(decision.context_patch)
        updates[LAST_TOOL_ATTEMPT] = action.to_dict()
        updates[LAST_WARNINGS] = [w.to_dict() for w in decision.warnings]
        ctx = ctx.merge(updates)

        logger.info(
            f"{tool_kind} on '{action.target}': proceed={decision.proceed}, warnings={len(decision.warnings)}"
        )
        return PreToolResult(
            context=ctx,
            proceed=decision.proceed,
            warnings=list(decision.warnings),
            context_updates=updates,
        )

    @track_latency(STAGE_PROCESSING_TIME, lambda self: {'stage': 'post_tool_use'})
    def on_post_tool_use(
        self,
        tool_kind: str,
        parameters: Optional[Dict[str, Any]],
        result: Optional[Mapping[str, Any]],
        context: ContextLike,
    ) -> PostToolResult:
        """Run the advisory engine for a completed tool action and merge its patch."""
        ctx = coerce_context(context)
        logger.extra.update({'session_id': ctx.session_id, 'stage': 'post_tool_use'})
        action = ActionDescriptor.from_tool(tool_kind, parameters, ctx.workspace_root)

        try:
            advice = self.advisory_engine.advise(action, result, ctx)
        except Exception as e:
            ERROR_COUNT.labels(type='stage', location='post_tool_use').inc()
            logger.error(f"Advisory evaluation failed: {e}", exc_info=True)
            advice = AdvisoryResult()

        ctx = ctx.merge(advice.context_patch)
        return PostToolResult(
            context=ctx,
            suggestions=list(advice.suggestions),
            auto_actions=list(advice.auto_actions),
            context_updates=dict(advice.context_patch),
        )

    @track_latency(STAGE_PROCESSING_TIME, lambda self: {'stage': 'command'})
    def dispatch_command(self, name: str, args: List[str], context: ContextLike) -> Tuple[CommandOutcome, SessionContext]:
        """
        Execute a registered command and honor its directives.

        Directives are applied in order: workflow resets, the context patch (plus
        activated skill/agent markers), then the external command run.

        Raises:
            UnknownCommandError: If `name` is not a registered command.
        """
        command = get_command(name)
        ctx = coerce_context(context)
        logger.extra.update({'session_id': ctx.session_id, 'stage': 'command'})

        outcome = command.execute(args, ctx)
        if not outcome.success:
            logger.info(f"/{command.name} failed: {truncate_message_for_logging(outcome.message)}")
            return outcome, ctx

        if outcome.reset_flags:
            ctx = ctx.reset_workflow(outcome.reset_flags)

        patch = dict(outcome.context_patch)
        if outcome.activate_skill:
            patch['activeSkill'] = outcome.activate_skill
        if outcome.activate_agent:
            patch['activeAgent'] = outcome.activate_agent
        ctx = ctx.merge(patch)

        if outcome.run_command:
            try:
                self.command_runner.run(
                    outcome.run_command,
                    background=outcome.run_in_background,
                    cwd=ctx.workspace_root,
                )
            except Exception as e:
                ERROR_COUNT.labels(type='command', location=command.name).inc()
                logger.error(f"Running '{outcome.run_command}' failed: {e}", exc_info=True)
                outcome.message = f"{outcome.message} (running '{outcome.run_command}' failed: {e})"

        return outcome, ctx
