"""
Block workflow commands: new-block, start-cdd, test-block and find-block.

These commands never write block files themselves. They check prerequisites
against the workspace, then hand directives back to the orchestrator (activate a
skill or agent, run a command, patch the context).
"""

from typing import List, Optional

from core.classifier import BLOCK_RESEARCH_AGENT, CONTENT_DRIVEN_SKILL, TESTING_SKILL
from core.context import (
    SessionContext,
    COMMIT_SUGGESTED,
    CONTENT_DRIVEN_ACTIVE,
    TESTING_COMPLETED,
)
from services.workspace import block_exists, format_block_listing, list_blocks, BLOCKS_DIR
from shared.models import CommandOutcome
from .base import BaseCommand, validate_block_name

class NewBlockCommand(BaseCommand):
    name = "new-block"
    description = "Start a new block using content-driven development"
    usage = "/new-block <block-name>"
    category = "workflow"
    arguments = ("block-name",)

    def validate(self, args: List[str]) -> Optional[str]:
        if len(args) != 1:
            return f"/new-block expects exactly one block name, got {len(args)} argument(s)."
        return validate_block_name(args[0])

    def _execute_internal(self, args: List[str], context: SessionContext) -> CommandOutcome:
        block = args[0]
        if block_exists(context.workspace_root, block):
            return CommandOutcome.failure(
                f"Block '{block}' already exists in {BLOCKS_DIR}/{block}. "
                f"Choose another name or edit the existing block.\n{format_block_listing(context.workspace_root)}"
            )

        base_path = f"{BLOCKS_DIR}/{block}/{block}"
        return CommandOutcome(
            success=True,
            message=f"Starting content-driven development for new block '{block}'.",
            activate_skill=CONTENT_DRIVEN_SKILL,
            enhanced_prompt=(
                f"Create the block '{block}'. First author test content that uses the block, "
                f"then implement {base_path}.js and {base_path}.css against that content."
            ),
            context_patch={
                CONTENT_DRIVEN_ACTIVE: True,
                "activeBlock": block,
                "activeWorkflow": "new-block",
            },
            reset_flags=(TESTING_COMPLETED, COMMIT_SUGGESTED),
        )

class StartContentDrivenCommand(BaseCommand):
    name = "start-cdd"
    description = "Activate content-driven development for the current work"
    usage = "/start-cdd [block-name]"
    category = "workflow"
    arguments = ("[block-name]",)

    def validate(self, args: List[str]) -> Optional[str]:
        if len(args) > 1:
            return f"/start-cdd takes at most one block name, got {len(args)} arguments."
        if args:
            return validate_block_name(args[0])
        return None

    def _execute_internal(self, args: List[str], context: SessionContext) -> CommandOutcome:
        patch = {CONTENT_DRIVEN_ACTIVE: True, "activeWorkflow": "content-driven"}
        target = "the current work"
        if args:
            patch["activeBlock"] = args[0]
            target = f"block '{args[0]}'"
        return CommandOutcome(
            success=True,
            message=f"Content-driven development is active for {target}.",
            activate_skill=CONTENT_DRIVEN_SKILL,
            context_patch=patch,
        )

class BlockTestCommand(BaseCommand):
    name = "test-block"
    description = "Run the tests for an existing block"
    usage = "/test-block <block-name>"
    category = "quality"
    arguments = ("block-name",)

    def validate(self, args: List[str]) -> Optional[str]:
        if len(args) != 1:
            return f"/test-block expects exactly one block name, got {len(args)} argument(s)."
        return validate_block_name(args[0])

    def _execute_internal(self, args: List[str], context: SessionContext) -> CommandOutcome:
        block = args[0]
        if not block_exists(context.workspace_root, block):
            return CommandOutcome.failure(
                f"Block '{block}' does not exist.\n{format_block_listing(context.workspace_root)}"
            )

        test_command = self.config['commands'].get('test', 'npm test').format(block=block)
        return CommandOutcome(
            success=True,
            message=f"Testing block '{block}'.",
            run_command=test_command,
            activate_skill=TESTING_SKILL,
            context_patch={"activeBlock": block, "activeWorkflow": "testing"},
        )

class FindBlockCommand(BaseCommand):
    name = "find-block"
    description = "Search for existing blocks that match a need"
    usage = "/find-block <description...>"
    category = "discovery"
    arguments = ("description...",)

    def validate(self, args: List[str]) -> Optional[str]:
        if not args:
            return "/find-block needs a short description of the block you are looking for."
        return None

    def _execute_internal(self, args: List[str], context: SessionContext) -> CommandOutcome:
        query = " ".join(args)
        local = list_blocks(context.workspace_root)
        local_text = ", ".join(local) if local else "none"
        return CommandOutcome(
            success=True,
            message=f"Searching for blocks matching '{query}'.",
            activate_agent=BLOCK_RESEARCH_AGENT,
            enhanced_prompt=(
                f"Find existing blocks that match: {query}. "
                f"Blocks already in this project: {local_text}."
            ),
            context_patch={"lastBlockSearch": query},
        )
