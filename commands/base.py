"""
Base class for all slash-style commands.

This module defines the BaseCommand abstract base class that every command must
implement. It enforces the validate-then-execute contract: arguments are checked
purely syntactically first, and nothing with a side effect runs unless validation
succeeds. Execution always ends in a `CommandOutcome`, never a raw exception.
"""

from abc import ABC, abstractmethod
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from config import CONFIG
from core.context import SessionContext
from monitoring.metrics import COMMAND_EXECUTIONS, ERROR_COUNT
from shared.models import CommandOutcome

BLOCK_NAME_PATTERN = re.compile(r"[a-z][a-z0-9-]*")

def validate_block_name(name: str) -> Optional[str]:
    """Return an error message when `name` is not a valid block identifier."""
    if not isinstance(name, str) or not BLOCK_NAME_PATTERN.fullmatch(name):
        return (
            f"'{name}' is not a valid block name. Use lowercase letters, digits and hyphens, "
            f"starting with a letter (for example 'hero-banner')."
        )
    return None

class BaseCommand(ABC):
    """
    Abstract base class for commands dispatched through the registry.

    Subclasses declare their descriptor as class attributes (`name`, `description`,
    `usage`, `category`, `arguments`) and implement `validate` and
    `_execute_internal`. The public `execute` method handles logging, metrics and
    the conversion of validation errors and internal faults into failed outcomes.
    """

    name: str = ""
    description: str = ""
    usage: str = ""
    category: str = ""
    arguments: Tuple[str, ...] = ()

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.config = CONFIG

    def descriptor(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'usage': self.usage,
            'category': self.category,
            'arguments': list(self.arguments),
        }

    @abstractmethod
    def validate(self, args: List[str]) -> Optional[str]:
        """
        Check the arguments syntactically.

        Returns:
            Optional[str]: An error message, or None when the arguments are valid.
        """
        pass

    @abstractmethod
    def _execute_internal(self, args: List[str], context: SessionContext) -> CommandOutcome:
        """Run the command; only called with validated arguments."""
        pass

    def execute(self, args: List[str], context: SessionContext) -> CommandOutcome:
        """
        Validate and execute the command.

        Args:
            args (List[str]): Whitespace-tokenized arguments.
            context (SessionContext): Current session snapshot (read-only).

        Returns:
            CommandOutcome: On validation failure, `success` is False and the message
            carries the correction hint and the usage string; no directives, no patch.
        """
        args = list(args or [])
        error = self.validate(args)
        if error:
            self.logger.info(f"[{self.name}] Validation failed: {error}")
            COMMAND_EXECUTIONS.labels(command=self.name, status='invalid').inc()
            return CommandOutcome.failure(f"{error}\nUsage: {self.usage}")

        try:
            outcome = self._execute_internal(args, context)
        except Exception as e:
            ERROR_COUNT.labels(type='command', location=self.name).inc()
            self.logger.error(f"[{self.name}] Command failed: {e}", exc_info=True)
            COMMAND_EXECUTIONS.labels(command=self.name, status='error').inc()
            return CommandOutcome.failure(f"/{self.name} failed unexpectedly: {e}")

        COMMAND_EXECUTIONS.labels(command=self.name, status='success' if outcome.success else 'failure').inc()
        self.logger.info(f"[{self.name}] Completed (success={outcome.success})")
        return outcome
