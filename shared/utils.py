"""
shared/utils.py

Shared utility functions used across multiple modules.

This module contains the path classification helpers that the policy gate and
the advisory engine both rely on, so that "is this a block source file" means
exactly the same thing before and after an action.
"""

import uuid
import logging
from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional
from config import CONFIG

logger = logging.getLogger(__name__)

BLOCKS_DIR = CONFIG['workflow']['blocks_dir']
SOURCE_EXTENSIONS = tuple(ext.lower() for ext in CONFIG['workflow']['source_extensions'])
STYLESHEET_EXTENSIONS = tuple(ext.lower() for ext in CONFIG['workflow']['stylesheet_extensions'])

def generate_session_id() -> str:
    """
    Generate a unique session identifier using UUID4.

    Returns:
        str: A UUID4 string
    """
    return str(uuid.uuid4())

def normalize_workspace_path(path: str, workspace_root: Optional[str] = None) -> str:
    """
    Normalize a tool target path to POSIX form, relative to the workspace root when inside it.

    Args:
        path (str): Raw path from the tool parameters (absolute or relative, any separator)
        workspace_root (Optional[str]): Workspace root the path should be made relative to

    Returns:
        str: Normalized path. Paths outside the workspace are returned in absolute POSIX form.
    """
    if not path:
        return ""
    posix = PurePosixPath(PureWindowsPath(path).as_posix()) if "\\" in path else PurePosixPath(path)
    if workspace_root and posix.is_absolute():
        root = PurePosixPath(PureWindowsPath(workspace_root).as_posix()) if "\\" in workspace_root else PurePosixPath(workspace_root)
        try:
            return str(posix.relative_to(root))
        except ValueError:
            pass
    return str(posix)

def is_block_path(path: str) -> bool:
    """
    True when the path lies inside the block implementation area (`blocks/<name>/...`).

    Only workspace-relative paths qualify; an absolute path left over by
    `normalize_workspace_path` is outside the workspace. A `blocks` folder
    nested elsewhere (tests, dependencies) is not the block area.
    """
    if not path:
        return False
    posix = PurePosixPath(path)
    if posix.is_absolute():
        return False
    parts = posix.parts
    return len(parts) >= 3 and parts[0] == BLOCKS_DIR

def is_source_file(path: str) -> bool:
    return bool(path) and PurePosixPath(path).suffix.lower() in SOURCE_EXTENSIONS

def is_stylesheet_file(path: str) -> bool:
    return bool(path) and PurePosixPath(path).suffix.lower() in STYLESHEET_EXTENSIONS

def is_block_source_file(path: str) -> bool:
    """True for source-code files inside the block area, e.g. `blocks/hero/hero.js`."""
    return is_block_path(path) and is_source_file(path)

def truncate_message_for_logging(message: str, max_length: int = 100) -> str:
    """
    Truncate long messages for logging purposes.

    Args:
        message (str): Message to truncate
        max_length (int): Maximum length before truncation (default: 100)

    Returns:
        str: Truncated message with ellipsis if needed
    """
    if len(message) <= max_length:
        return message
    return message[:max_length] + "..."
