"""
Command registry: the closed set of commands the orchestrator can dispatch.

`CommandName` enumerates every command; `COMMANDS` maps each member to its
single, immutable instance. Looking up any other name raises
`UnknownCommandError`, which is a caller/integration error and is meant to fail
loudly rather than degrade into a silent no-op.
"""

from enum import Enum
from typing import Any, Dict, List, Union

from .base import BaseCommand
from .block_commands import BlockTestCommand, FindBlockCommand, NewBlockCommand, StartContentDrivenCommand
from .tooling_commands import DevServerCommand, LintCommand

class UnknownCommandError(KeyError):
    """Raised when dispatching a command name that is not registered."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        available = ", ".join(member.value for member in CommandName)
        return f"Unknown command '{self.name}'. Available commands: {available}"

class CommandName(Enum):
    NEW_BLOCK = "new-block"
    START_CDD = "start-cdd"
    TEST_BLOCK = "test-block"
    FIND_BLOCK = "find-block"
    LINT = "lint"
    DEV_SERVER = "dev-server"

COMMANDS: Dict[CommandName, BaseCommand] = {
    CommandName.NEW_BLOCK: NewBlockCommand(),
    CommandName.START_CDD: StartContentDrivenCommand(),
    CommandName.TEST_BLOCK: BlockTestCommand(),
    CommandName.FIND_BLOCK: FindBlockCommand(),
    CommandName.LINT: LintCommand(),
    CommandName.DEV_SERVER: DevServerCommand(),
}

def resolve_command_name(name: Union[str, CommandName]) -> CommandName:
    if isinstance(name, CommandName):
        return name
    try:
        return CommandName(str(name).lstrip("/"))
    except ValueError:
        raise UnknownCommandError(str(name)) from None

def is_registered(name: str) -> bool:
    try:
        resolve_command_name(name)
    except UnknownCommandError:
        return False
    return True

def get_command(name: Union[str, CommandName]) -> BaseCommand:
    """
    Look up a command by name.

    Raises:
        UnknownCommandError: If the name is not a member of `CommandName`.
    """
    return COMMANDS[resolve_command_name(name)]

def list_commands() -> List[Dict[str, Any]]:
    """Descriptors of all registered commands, in declaration order."""
    return [COMMANDS[member].descriptor() for member in CommandName]
