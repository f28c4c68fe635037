"""
Tests for `services/knowledge_loader.py` and `services/workspace.py`.

Both only read the file system, so they run against pytest's `tmp_path`.
"""

from services.knowledge_loader import KnowledgeLoader
from services.workspace import block_exists, format_block_listing, list_blocks


def test_loads_present_documents_and_reports_missing(workspace):
    loader = KnowledgeLoader(documents=["AGENTS.md", "CLAUDE.md"])

    documents, missing = loader.load(str(workspace))

    assert [d.name for d in documents] == ["AGENTS.md"]
    assert documents[0].first_line == "# Project guide"
    assert documents[0].size == len("# Project guide\n\nBlocks live in blocks/.\n")
    assert missing == ["CLAUDE.md"]


def test_size_is_reported_in_bytes(tmp_path):
    text = "# Café guide\n"
    (tmp_path / "AGENTS.md").write_text(text, encoding="utf-8")

    documents, _ = KnowledgeLoader(documents=["AGENTS.md"]).load(str(tmp_path))

    assert documents[0].size == len(text.encode("utf-8"))
    assert documents[0].size != len(text)


def test_first_line_skips_leading_blank_lines(tmp_path):
    (tmp_path / "README.md").write_text("\n\n   Title line  \nbody\n", encoding="utf-8")

    documents, missing = KnowledgeLoader(documents=["README.md"]).load(str(tmp_path))

    assert documents[0].first_line == "Title line"
    assert missing == []


def test_empty_document_has_empty_first_line(tmp_path):
    (tmp_path / "AGENTS.md").write_text("", encoding="utf-8")

    documents, _ = KnowledgeLoader(documents=["AGENTS.md"]).load(str(tmp_path))

    assert documents[0].first_line == ""
    assert documents[0].size == 0


def test_default_documents_come_from_config(tmp_path):
    documents, missing = KnowledgeLoader().load(str(tmp_path))
    assert documents == []
    assert missing == ["AGENTS.md", "CLAUDE.md", "README.md"]


def test_list_blocks_is_sorted_and_skips_files_and_hidden(workspace):
    (workspace / "blocks" / ".cache").mkdir()
    (workspace / "blocks" / "README.md").write_text("x")

    assert list_blocks(str(workspace)) == ["cards", "hero"]
    assert block_exists(str(workspace), "hero")
    assert not block_exists(str(workspace), "carousel")


def test_missing_blocks_directory_means_no_blocks(tmp_path):
    assert list_blocks(str(tmp_path)) == []
    assert format_block_listing(str(tmp_path)) == "No blocks exist yet in this project."


def test_format_block_listing(workspace):
    assert format_block_listing(str(workspace)) == "Available blocks:\n  - cards\n  - hero"
