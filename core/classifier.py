"""
core/classifier.py

Intent classification for prompt routing.

This module turns free-text user prompts into an ordered list of suggestions
(skills to activate, agents to call, commands to run, warnings to heed). It is
the single source of truth for prompt pattern rules: each rule is a declarative
`IntentRule` in `INTENT_RULES`, all matching rules fire, and the output order is
the declaration order.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Any, List, Tuple

from config.logging_config import get_logger
from core.context import SessionContext, CONTENT_DRIVEN_ACTIVE
from shared.models import Suggestion, SuggestionKind
from shared.utils import truncate_message_for_logging

logger = get_logger(__name__)

CONTENT_DRIVEN_SKILL = "content-driven-development"
CONTENT_MODELING_SKILL = "content-modeling"
TESTING_SKILL = "testing-blocks"
BLOCK_RESEARCH_AGENT = "block-researcher"

def contains_any(text: str, *keywords: str) -> bool:
    return any(keyword in text for keyword in keywords)

@dataclass(frozen=True)
class IntentRule:
    """
    One independent prompt pattern.

    `predicate` receives the lower-cased prompt and the (read-only) context;
    `suggestion` is emitted unchanged whenever the predicate holds.
    """
    name: str
    predicate: Callable[[str, SessionContext], bool]
    suggestion: Suggestion

@dataclass(frozen=True)
class ClassificationResult:
    """The original prompt together with the suggestions it triggered."""
    prompt: str
    suggestions: Tuple[Suggestion, ...]

    @property
    def enhanced_prompt(self) -> str:
        """Suggestion messages in order, then the original prompt, separated by blank lines."""
        if not self.suggestions:
            return self.prompt
        return "\n\n".join([s.message for s in self.suggestions] + [self.prompt])

INTENT_RULES: List[IntentRule] = [
    IntentRule(
        name="create_block",
        predicate=lambda text, ctx: contains_any(text, "create", "new", "build", "add") and "block" in text,
        suggestion=Suggestion(
            kind=SuggestionKind.SKILL,
            name=CONTENT_DRIVEN_SKILL,
            reason="Creating a block starts with content, not code",
            message="Activating content-driven development: author or locate test content for the block before writing any block code.",
            auto_activate=True,
        ),
    ),
    IntentRule(
        name="content_model",
        predicate=lambda text, ctx: contains_any(text, "content model", "authoring", "author experience")
            and contains_any(text, "block", "content"),
        suggestion=Suggestion(
            kind=SuggestionKind.SKILL,
            name=CONTENT_MODELING_SKILL,
            reason="The request concerns how authors structure block content",
            message="Consider the content-modeling skill to design an author-friendly table structure for the block.",
        ),
    ),
    IntentRule(
        name="test_block",
        predicate=lambda text, ctx: contains_any(text, "test", "verify", "check")
            and contains_any(text, "block", "page", "component"),
        suggestion=Suggestion(
            kind=SuggestionKind.SKILL,
            name=TESTING_SKILL,
            reason="The request asks to test block behavior",
            message="Use the testing-blocks skill: run the block tests and check the rendered page in the browser.",
        ),
    ),
    IntentRule(
        name="find_block",
        predicate=lambda text, ctx: contains_any(text, "find", "search", "example", "existing", "similar")
            and "block" in text,
        suggestion=Suggestion(
            kind=SuggestionKind.AGENT,
            name=BLOCK_RESEARCH_AGENT,
            reason="Existing blocks may already cover the request",
            message="The block-researcher agent can look for existing blocks to reuse before building a new one.",
        ),
    ),
    IntentRule(
        name="lint",
        predicate=lambda text, ctx: "lint" in text,
        suggestion=Suggestion(
            kind=SuggestionKind.COMMAND,
            name="lint",
            reason="The request mentions linting",
            message="Run /lint (or /lint --fix) to check code style.",
        ),
    ),
    IntentRule(
        name="dev_server",
        predicate=lambda text, ctx: contains_any(text, "dev server", "preview", "localhost"),
        suggestion=Suggestion(
            kind=SuggestionKind.COMMAND,
            name="dev-server",
            reason="The request needs a running local development server",
            message="Run /dev-server to start the local development server for previewing blocks.",
        ),
    ),
    IntentRule(
        name="publish_without_testing",
        predicate=lambda text, ctx: contains_any(text, "commit", "push", "publish", "pull request")
            and not ctx.testing_completed,
        suggestion=Suggestion(
            kind=SuggestionKind.WARNING,
            name="testing-required",
            reason="No successful test run has been recorded in this session",
            message="Testing has not been completed in this session. Run the block tests before committing or pushing.",
        ),
    ),
]

class IntentClassifier:
    """
    Stateless classifier that evaluates every rule in `INTENT_RULES` against a prompt.

    Design notes:
    - Rules are independent and non-exclusive; a prompt can trigger several
      suggestions. Callers may treat the order as a priority hint only.
    - A rule whose predicate raises is logged and skipped so that classification
      never fails the prompt-submit stage.
    """

    def __init__(self, rules: List[IntentRule] = None):
        self.rules = list(INTENT_RULES if rules is None else rules)

    def classify(self, prompt: str, context: SessionContext) -> ClassificationResult:
        """
        Classify a prompt into an ordered sequence of suggestions.

        Args:
            prompt (str): Raw user prompt; returned unmodified in the result.
            context (SessionContext): Current snapshot; read, never written.

        Returns:
            ClassificationResult: The prompt and the suggestions of all matching rules.
        """
        text = (prompt or "").lower()
        suggestions = []
        for rule in self.rules:
            try:
                matched = rule.predicate(text, context)
            except Exception as e:
                logger.error(f"[IntentClassifier] Rule '{rule.name}' failed: {e}", exc_info=True)
                continue
            if matched:
                suggestions.append(rule.suggestion)

        logger.debug(
            f"[IntentClassifier] '{truncate_message_for_logging(prompt or '', 50)}' matched "
            f"{[s.name for s in suggestions]}"
        )
        return ClassificationResult(prompt=prompt or "", suggestions=tuple(suggestions))

def context_effects(suggestions) -> Dict[str, Any]:
    """
    Context patch implied by auto-activated suggestions.

    Auto-activating content-driven development marks the workflow as started,
    which is what satisfies the content-first policy gate.
    """
    patch: Dict[str, Any] = {}
    for suggestion in suggestions:
        if not suggestion.auto_activate:
            continue
        if suggestion.name == CONTENT_DRIVEN_SKILL:
            patch[CONTENT_DRIVEN_ACTIVE] = True
            patch["activeWorkflow"] = "content-driven"
    return patch
