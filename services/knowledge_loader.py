"""
Loads summaries of the persistent knowledge documents at session start.

Each configured document is read from the workspace root and summarized as
(name, size in bytes, first line). Documents are optional: a missing or unreadable file
is reported back as a soft miss and loading continues.
"""

import os
import logging
from typing import List, Optional, Tuple

from config import CONFIG
from shared.models import KnowledgeDocument

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENTS = CONFIG['knowledge'].get('documents', [])

class KnowledgeLoader:
    """Document-loading collaborator for the session orchestrator."""

    def __init__(self, documents: Optional[List[str]] = None):
        self.documents = list(DEFAULT_DOCUMENTS if documents is None else documents)

    def load(self, workspace_root: str) -> Tuple[List[KnowledgeDocument], List[str]]:
        """
        Summarize every configured document found under the workspace root.

        Args:
            workspace_root (str): Directory the document names are resolved against.

        Returns:
            Tuple[List[KnowledgeDocument], List[str]]: Loaded summaries in configured
            order, and the names of documents that were missing or unreadable.
        """
        loaded, missing = [], []
        for name in self.documents:
            path = os.path.join(workspace_root or ".", name)
            if not os.path.isfile(path):
                logger.info(f"[KnowledgeLoader] Document not found, skipping: {name}")
                missing.append(name)
                continue
            try:
                with open(path, 'r', encoding='utf-8', errors='replace') as f:
                    content = f.read()
                size = os.path.getsize(path)
            except OSError as e:
                logger.warning(f"[KnowledgeLoader] Could not read {name}: {e}")
                missing.append(name)
                continue

            first_line = next((line.strip() for line in content.splitlines() if line.strip()), "")
            loaded.append(KnowledgeDocument(name=name, size=size, first_line=first_line))

        logger.info(f"[KnowledgeLoader] Loaded {len(loaded)} document(s), {len(missing)} missing")
        return loaded, missing
