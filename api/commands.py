"""
api/commands.py

Endpoints for listing and dispatching commands directly (outside a prompt).

Endpoints:
  - GET /commands: descriptors of every registered command.
  - POST /commands/{name}: validate and execute a command. Unknown names are an
    integration error and answer 404; validation and prerequisite failures are
    regular outcomes (HTTP 200 with `success: false`).

The dispatch handler is a plain `def` so FastAPI runs it in its threadpool; a
foreground command blocks until the external process exits.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException

from commands import UnknownCommandError, list_commands
from config import CONFIG
from core.orchestrator import SessionOrchestrator
from shared.models import CommandRequest, HookResponse

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/commands")
def get_commands() -> List[Dict[str, Any]]:
    return list_commands()

@router.post("/commands/{name}", response_model=HookResponse)
def run_command(name: str, request: CommandRequest) -> HookResponse:
    """
    Dispatch a command with the given arguments against the supplied context.

    Raises:
        HTTPException: 404 when `name` is not a registered command.
    """
    orchestrator = SessionOrchestrator(CONFIG)
    try:
        outcome, context = orchestrator.dispatch_command(name, request.args, request.context)
    except UnknownCommandError as e:
        logger.error(f"[run_command] {e}")
        raise HTTPException(status_code=404, detail=str(e))
    return HookResponse(context=context.to_dict(), data={'outcome': outcome.to_dict()})
