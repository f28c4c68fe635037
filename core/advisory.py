"""
core/advisory.py

Advisory engine evaluated after every completed tool action.

It proposes follow-up suggestions (testing, committing), schedules auto actions
(running the linter) and always reports the tool success flag and the updated
file change counter through its context patch.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from config import CONFIG
from config.logging_config import get_logger
from core.classifier import TESTING_SKILL
from core.context import (
    SessionContext,
    COMMIT_SUGGESTED,
    FILE_CHANGES_COUNT,
    LAST_TOOL_SUCCESS,
    NEEDS_LINTING,
    TESTING_COMPLETED,
)
from monitoring.metrics import ERROR_COUNT
from shared.models import ActionDescriptor, ActionKind, AutoAction, Suggestion, SuggestionKind
from shared.utils import is_block_source_file, is_source_file, is_stylesheet_file

logger = get_logger(__name__)

COMMIT_THRESHOLD = int(CONFIG['workflow']['commit_threshold'])
LINT_COMMAND = CONFIG['commands'].get('lint', 'npm run lint')

TEST_PATTERN = re.compile(
    r"\bnpm\s+(run\s+)?test\b|\bplaywright\s+test\b|\bjest\b|\bvitest\b",
    re.IGNORECASE,
)

@dataclass
class AdviceInput:
    """Everything an advisory rule may look at for one completed action."""
    action: ActionDescriptor
    success: bool
    context: SessionContext
    file_changes_count: int

RuleEffect = Tuple[Optional[Suggestion], Optional[AutoAction], Dict[str, Any]]

@dataclass(frozen=True)
class AdvisoryRule:
    name: str
    applies: Callable[[AdviceInput], bool]
    effect: Callable[[AdviceInput], RuleEffect]

@dataclass
class AdvisoryResult:
    suggestions: List[Suggestion] = field(default_factory=list)
    auto_actions: List[AutoAction] = field(default_factory=list)
    context_patch: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'suggestions': [s.to_dict() for s in self.suggestions],
            'autoActions': [a.to_dict() for a in self.auto_actions],
            'contextUpdates': dict(self.context_patch),
        }

def _touches_code_or_styles(item: AdviceInput) -> bool:
    return item.action.is_mutation and (
        is_source_file(item.action.target) or is_stylesheet_file(item.action.target)
    )

ADVISORY_RULES: List[AdvisoryRule] = [
    AdvisoryRule(
        name="run_linter",
        applies=lambda item: item.context.needs_linting and _touches_code_or_styles(item),
        effect=lambda item: (
            None,
            AutoAction(command=LINT_COMMAND, reason=f"{item.action.target} changed; linting it now."),
            {NEEDS_LINTING: False},
        ),
    ),
    AdvisoryRule(
        name="testing_next_step",
        applies=lambda item: item.action.is_mutation and is_block_source_file(item.action.target),
        effect=lambda item: (
            Suggestion(
                kind=SuggestionKind.SKILL,
                name=TESTING_SKILL,
                reason=f"{item.action.target} was modified",
                message="Block code changed. Test it next: run the block tests and check the page in the browser.",
            ),
            None,
            {},
        ),
    ),
    # Fires once the post-increment count reaches the threshold (>=, not >):
    # three mutations from zero give exactly one reminder.
    AdvisoryRule(
        name="commit_reminder",
        applies=lambda item: item.file_changes_count >= COMMIT_THRESHOLD and not item.context.commit_suggested,
        effect=lambda item: (
            Suggestion(
                kind=SuggestionKind.COMMAND,
                name="commit",
                reason=f"{item.file_changes_count} files changed since the workflow started",
                message="Several files have changed. Consider committing your progress once tests pass.",
            ),
            None,
            {COMMIT_SUGGESTED: True},
        ),
    ),
    AdvisoryRule(
        name="tests_passed",
        applies=lambda item: item.action.kind is ActionKind.COMMAND
            and item.success
            and bool(TEST_PATTERN.search(item.action.target)),
        effect=lambda item: (None, None, {TESTING_COMPLETED: True}),
    ),
]

class AdvisoryEngine:
    """Stateless evaluator of `ADVISORY_RULES`; runs only after an action has completed."""

    def __init__(self, rules: List[AdvisoryRule] = None):
        self.rules = list(ADVISORY_RULES if rules is None else rules)

    def advise(self, action: ActionDescriptor, outcome: Optional[Mapping[str, Any]], context: SessionContext) -> AdvisoryResult:
        """
        Produce follow-ups for a completed action.

        Args:
            action (ActionDescriptor): The action that just ran.
            outcome (Optional[Mapping[str, Any]]): Tool result; a missing or None
                'success' entry counts as success.
            context (SessionContext): Snapshot taken before this pass.

        Returns:
            AdvisoryResult: Suggestions and auto actions in rule order, plus the patch.
        """
        success = (outcome or {}).get('success')
        success = True if success is None else bool(success)
        count = context.file_changes_count + (1 if action.is_mutation else 0)
        item = AdviceInput(action=action, success=success, context=context, file_changes_count=count)

        result = AdvisoryResult()
        for rule in self.rules:
            try:
                if not rule.applies(item):
                    continue
                suggestion, auto_action, patch = rule.effect(item)
            except Exception as e:
                ERROR_COUNT.labels(type='advisory_rule', location=rule.name).inc()
                logger.error(f"[AdvisoryEngine] Rule '{rule.name}' failed: {e}", exc_info=True)
                continue
            if suggestion is not None:
                result.suggestions.append(suggestion)
            if auto_action is not None:
                result.auto_actions.append(auto_action)
            result.context_patch.update(patch)

        result.context_patch[LAST_TOOL_SUCCESS] = success
        result.context_patch[FILE_CHANGES_COUNT] = count
        return result
