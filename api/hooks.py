"""
api/hooks.py (all four lifecycle hook endpoints)

The hosting assistant runtime calls these endpoints one at a time, in lifecycle
order. Every request carries the complete context snapshot and every response
returns the updated snapshot, so the service itself holds no session state.

Handlers are plain `def` functions: dispatching a command may wait on an external
process, so FastAPI runs them in its threadpool instead of on the event loop.

Endpoints:
  - POST /hooks/session-start: create or restore the context, load persistent knowledge.
  - POST /hooks/prompt-submit: classify the prompt, dispatch a recognized slash command.
  - POST /hooks/pre-tool-use: run the policy gate; `proceed` false means the host must not run the tool.
  - POST /hooks/post-tool-use: run the advisory engine after the tool completed.
"""

import logging
from fastapi import APIRouter

from config import CONFIG
from core.orchestrator import SessionOrchestrator
from shared.models import (
    HookResponse,
    PostToolUseRequest,
    PreToolUseRequest,
    PromptSubmitRequest,
    SessionStartRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/hooks/session-start", response_model=HookResponse)
def session_start(request: SessionStartRequest) -> HookResponse:
    """
    Initialize the session context for a workspace.

    A context supplied in the request (persisted by the host from a previous
    session) is restored instead of starting from defaults. Missing knowledge
    documents are listed in `data.messages` and never fail the request.
    """
    logger.info(f"[session_start] Workspace: {request.workspace_root}")
    orchestrator = SessionOrchestrator(CONFIG)
    result = orchestrator.on_session_start(
        workspace_root=request.workspace_root,
        context=request.context,
        session_id=request.session_id,
    )
    return HookResponse(
        context=result.context.to_dict(),
        data={'messages': result.messages, 'ready': result.ready},
    )

@router.post("/hooks/prompt-submit", response_model=HookResponse)
def prompt_submit(request: PromptSubmitRequest) -> HookResponse:
    orchestrator = SessionOrchestrator(CONFIG)
    result = orchestrator.on_user_prompt_submit(request.prompt, request.context)
    return HookResponse(context=result.context.to_dict(), data=result.to_dict())

@router.post("/hooks/pre-tool-use", response_model=HookResponse)
def pre_tool_use(request: PreToolUseRequest) -> HookResponse:
    orchestrator = SessionOrchestrator(CONFIG)
    result = orchestrator.on_pre_tool_use(request.tool_kind, request.parameters, request.context)
    if not result.proceed:
        logger.warning(f"[pre_tool_use] Blocked {request.tool_kind}: {[w.message for w in result.warnings if w.block_execution]}")
    return HookResponse(context=result.context.to_dict(), data=result.to_dict())

@router.post("/hooks/post-tool-use", response_model=HookResponse)
def post_tool_use(request: PostToolUseRequest) -> HookResponse:
    orchestrator = SessionOrchestrator(CONFIG)
    result = orchestrator.on_post_tool_use(
        request.tool_kind, request.parameters, request.result, request.context
    )
    return HookResponse(context=result.context.to_dict(), data=result.to_dict())
