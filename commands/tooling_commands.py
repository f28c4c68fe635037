"""
Tooling commands: lint and dev-server.
"""

from typing import List, Optional

from core.context import SessionContext, DEV_SERVER_CHECKED, NEEDS_LINTING
from shared.models import CommandOutcome
from .base import BaseCommand

class LintCommand(BaseCommand):
    name = "lint"
    description = "Run the project linter, optionally fixing issues"
    usage = "/lint [--fix]"
    category = "quality"
    arguments = ("[--fix]",)

    def validate(self, args: List[str]) -> Optional[str]:
        if len(args) > 1 or (args and args[0] != "--fix"):
            return f"/lint only accepts the optional flag --fix, got: {' '.join(args)}"
        return None

    def _execute_internal(self, args: List[str], context: SessionContext) -> CommandOutcome:
        fix = bool(args)
        key = 'lint_fix' if fix else 'lint'
        command = self.config['commands'].get(key, 'npm run lint:fix' if fix else 'npm run lint')
        return CommandOutcome(
            success=True,
            message="Running linter with automatic fixes." if fix else "Running linter.",
            run_command=command,
            context_patch={NEEDS_LINTING: False},
        )

class DevServerCommand(BaseCommand):
    name = "dev-server"
    description = "Start the local development server in the background"
    usage = "/dev-server"
    category = "tooling"
    arguments = ()

    def validate(self, args: List[str]) -> Optional[str]:
        if args:
            return "/dev-server takes no arguments."
        return None

    def _execute_internal(self, args: List[str], context: SessionContext) -> CommandOutcome:
        return CommandOutcome(
            success=True,
            message="Starting the development server in the background.",
            run_command=self.config['commands'].get('dev_server', 'aem up'),
            run_in_background=True,
            context_patch={DEV_SERVER_CHECKED: True},
        )
