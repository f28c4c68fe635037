"""
commands/__init__.py

Slash-style commands the assistant can invoke through the orchestrator.

Each command follows the BaseCommand interface (validate, then execute into a
CommandOutcome). The registry exposes the closed set of command names:
- block workflow: new-block, start-cdd, test-block, find-block
- tooling: lint, dev-server
"""

from .base import BaseCommand
from .registry import (
    COMMANDS,
    CommandName,
    UnknownCommandError,
    get_command,
    is_registered,
    list_commands,
)

__all__ = [
    'BaseCommand',
    'COMMANDS',
    'CommandName',
    'UnknownCommandError',
    'get_command',
    'is_registered',
    'list_commands',
]
