"""
core/policy.py

Policy gate evaluated before every tool action.

Rules are declared in `POLICY_RULES` as (applies, effect) pairs; every applicable
rule fires and results accumulate. The gate blocks an action if and only if at
least one emitted warning has `block_execution` set. It never raises.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.logging_config import get_logger
from core.context import SessionContext, DEV_SERVER_CHECKED, NEEDS_LINTING
from monitoring.metrics import POLICY_DECISIONS, ERROR_COUNT
from shared.models import ActionDescriptor, ActionKind, PolicyWarning, Severity
from shared.utils import is_block_path, is_block_source_file, is_source_file, is_stylesheet_file

logger = get_logger(__name__)

PUBLISH_PATTERN = re.compile(
    r"\bgit\s+push\b|\bnpm\s+publish\b|\bgh\s+pr\s+create\b|\baem\s+publish\b",
    re.IGNORECASE,
)

RuleEffect = Tuple[Optional[PolicyWarning], Dict[str, Any]]

@dataclass(frozen=True)
class PolicyRule:
    name: str
    applies: Callable[[ActionDescriptor, SessionContext], bool]
    effect: Callable[[ActionDescriptor, SessionContext], RuleEffect]

@dataclass
class PolicyDecision:
    """Outcome of one policy evaluation."""
    warnings: List[PolicyWarning] = field(default_factory=list)
    context_patch: Dict[str, Any] = field(default_factory=dict)

    @property
    def proceed(self) -> bool:
        return not any(w.block_execution for w in self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'proceed': self.proceed,
            'warnings': [w.to_dict() for w in self.warnings],
            'contextUpdates': dict(self.context_patch),
        }

def _content_first_effect(action: ActionDescriptor, context: SessionContext) -> RuleEffect:
    warning = PolicyWarning(
        severity=Severity.HIGH,
        message="Content-driven development has not been started for this block.",
        detail=f"Refusing to modify {action.target} before test content exists for the block.",
        recommended_action="Run /start-cdd (or /new-block <name>) and create the block's test content first.",
        block_execution=True,
    )
    return warning, {}

def _lint_scheduling_effect(action: ActionDescriptor, context: SessionContext) -> RuleEffect:
    return None, {NEEDS_LINTING: True}

def _dev_server_effect(action: ActionDescriptor, context: SessionContext) -> RuleEffect:
    warning = PolicyWarning(
        severity=Severity.LOW,
        message="Make sure the local development server is running.",
        detail="Block changes are easiest to verify with a live preview.",
        recommended_action="Run /dev-server to start it in the background.",
    )
    return warning, {DEV_SERVER_CHECKED: True}

def _pre_publish_effect(action: ActionDescriptor, context: SessionContext) -> RuleEffect:
    warning = PolicyWarning(
        severity=Severity.MEDIUM,
        message="Publishing before tests have passed in this session.",
        detail=f"'{action.target}' pushes or publishes changes that have not been tested.",
        recommended_action="Run the block tests (/test-block <name>) before pushing.",
    )
    return warning, {}

POLICY_RULES: List[PolicyRule] = [
    PolicyRule(
        name="content_first",
        applies=lambda action, ctx: action.is_mutation
            and is_block_source_file(action.target)
            and not ctx.content_driven_active,
        effect=_content_first_effect,
    ),
    PolicyRule(
        name="lint_scheduling",
        applies=lambda action, ctx: action.is_mutation
            and (is_source_file(action.target) or is_stylesheet_file(action.target)),
        effect=_lint_scheduling_effect,
    ),
    PolicyRule(
        name="dev_server_reminder",
        applies=lambda action, ctx: action.is_mutation
            and is_block_path(action.target)
            and not ctx.dev_server_checked,
        effect=_dev_server_effect,
    ),
    PolicyRule(
        name="pre_publish_reminder",
        applies=lambda action, ctx: action.kind is ActionKind.COMMAND
            and bool(PUBLISH_PATTERN.search(action.target))
            and not ctx.testing_completed,
        effect=_pre_publish_effect,
    ),
]

class PolicyGate:
    """
    Stateless evaluator of `POLICY_RULES`.

    A rule that raises is reported as a low, non-blocking warning; it never turns
    into a block and never propagates to the caller.
    """

    def __init__(self, rules: List[PolicyRule] = None):
        self.rules = list(POLICY_RULES if rules is None else rules)

    def evaluate(self, action: ActionDescriptor, context: SessionContext) -> PolicyDecision:
        decision = PolicyDecision()
        for rule in self.rules:
            try:
                if not rule.applies(action, context):
                    continue
                warning, patch = rule.effect(action, context)
            except Exception as e:
                ERROR_COUNT.labels(type='policy_rule', location=rule.name).inc()
                logger.error(f"[PolicyGate] Rule '{rule.name}' failed: {e}", exc_info=True)
                decision.warnings.append(PolicyWarning(
                    severity=Severity.LOW,
                    message=f"Policy rule '{rule.name}' could not be evaluated.",
                    detail=str(e),
                ))
                continue

            if warning is not None:
                decision.warnings.append(warning)
            decision.context_patch.update(patch)

        POLICY_DECISIONS.labels(decision='proceed' if decision.proceed else 'block').inc()
        if not decision.proceed:
            logger.info(f"[PolicyGate] Blocked {action.kind.value} on '{action.target}'")
        return decision
