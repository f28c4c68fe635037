"""
Block discovery inside a project workspace.

Commands use these helpers to check prerequisites ("does this block exist?") and
to list the available blocks when a prerequisite is missing. They only read the
file system.
"""

import os
import logging
from typing import List, Optional

from config import CONFIG

logger = logging.getLogger(__name__)

BLOCKS_DIR = CONFIG['workflow']['blocks_dir']

def get_blocks_path(workspace_root: Optional[str]) -> str:
    return os.path.join(workspace_root or ".", BLOCKS_DIR)

def list_blocks(workspace_root: Optional[str]) -> List[str]:
    """
    List block names (directory names under the blocks folder), sorted.

    A missing blocks folder is not an error; it simply means there are no blocks yet.
    """
    blocks_path = get_blocks_path(workspace_root)
    if not os.path.isdir(blocks_path):
        logger.debug(f"[list_blocks] No blocks directory at {blocks_path}")
        return []
    return sorted(
        entry for entry in os.listdir(blocks_path)
        if os.path.isdir(os.path.join(blocks_path, entry)) and not entry.startswith(".")
    )

def block_exists(workspace_root: Optional[str], name: str) -> bool:
    return os.path.isdir(os.path.join(get_blocks_path(workspace_root), name))

def format_block_listing(workspace_root: Optional[str]) -> str:
    """Human-readable enumeration of the available blocks, used in failure messages."""
    blocks = list_blocks(workspace_root)
    if not blocks:
        return "No blocks exist yet in this project."
    return "Available blocks:\n" + "\n".join(f"  - {name}" for name in blocks)
