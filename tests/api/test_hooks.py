"""
API tests for `api/hooks.py`, `api/commands.py` and `api/health.py` using FastAPI's TestClient.

Covers:
- Session start creating a context and reporting missing knowledge documents
- Prompt submission dispatching a slash command
- Pre-tool-use blocking a block source write before content-driven development
- Post-tool-use returning the updated change counter
- Command listing, dispatch, and HTTP 404 for unknown command names

Mocks:
- `core.orchestrator.CommandRunner` so that no external command is ever started
"""

import inspect
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def runner():
    with patch("core.orchestrator.CommandRunner") as mock_runner_cls:
        yield mock_runner_cls.return_value


def start_session(workspace):
    resp = client.post("/api/hooks/session-start", json={"workspace_root": str(workspace), "session_id": "api-1"})
    assert resp.status_code == 200
    return resp.json()


def test_session_start_returns_context_and_messages(workspace):
    body = start_session(workspace)

    assert body["context"]["sessionId"] == "api-1"
    assert body["context"]["persistentKnowledge"][0]["name"] == "AGENTS.md"
    assert "Skipped CLAUDE.md: not found." in body["data"]["messages"]
    assert body["data"]["ready"] is True


def test_session_start_requires_workspace_root():
    resp = client.post("/api/hooks/session-start", json={})
    assert resp.status_code == 422


def test_prompt_submit_dispatches_command(workspace):
    context = start_session(workspace)["context"]

    resp = client.post("/api/hooks/prompt-submit", json={"prompt": "/new-block hero-banner", "context": context})

    assert resp.status_code == 200
    body = resp.json()
    assert body["data"]["commandOutcome"]["success"] is True
    assert body["context"]["contentDrivenActive"] is True
    assert body["context"]["activeBlock"] == "hero-banner"
    assert body["context"]["version"] > context["version"]


def test_pre_tool_use_blocks_block_source_write(workspace):
    context = start_session(workspace)["context"]

    resp = client.post("/api/hooks/pre-tool-use", json={
        "tool_kind": "Write",
        "parameters": {"file_path": str(workspace / "blocks" / "hero" / "hero.js")},
        "context": context,
    })

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["proceed"] is False
    assert any(w["blockExecution"] and w["severity"] == "high" for w in data["warnings"])


def test_post_tool_use_counts_file_changes(workspace):
    context = start_session(workspace)["context"]

    resp = client.post("/api/hooks/post-tool-use", json={
        "tool_kind": "Edit",
        "parameters": {"file_path": "styles/styles.css"},
        "context": context,
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["context"]["fileChangesCount"] == 1
    assert body["data"]["contextUpdates"]["lastToolSuccess"] is True


def test_list_commands():
    resp = client.get("/api/commands")
    assert resp.status_code == 200
    assert "test-block" in [c["name"] for c in resp.json()]


def test_run_command_starts_dev_server(workspace, runner):
    context = start_session(workspace)["context"]

    resp = client.post("/api/commands/dev-server", json={"args": [], "context": context})

    assert resp.status_code == 200
    assert resp.json()["context"]["devServerChecked"] is True
    runner.run.assert_called_once_with("aem up", background=True, cwd=str(workspace))


def test_run_unknown_command_returns_404():
    resp = client.post("/api/commands/deploy", json={"args": []})
    assert resp.status_code == 404
    assert "Unknown command 'deploy'" in resp.json()["detail"]


@pytest.mark.parametrize("path", [
    "/api/hooks/session-start",
    "/api/hooks/prompt-submit",
    "/api/hooks/pre-tool-use",
    "/api/hooks/post-tool-use",
    "/api/commands/{name}",
])
def test_dispatching_routes_run_in_threadpool(path):
    route = next(r for r in app.routes if getattr(r, "path", None) == path)
    assert not inspect.iscoroutinefunction(route.endpoint)


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
