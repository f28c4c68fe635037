"""
Health endpoint for the hook service.

Exposes a dependency-free liveness check at "/health" reporting a static status,
the service version and a UTC timestamp.
"""

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter

from version import __version__

router = APIRouter()


@router.get("/health")
def health() -> Dict[str, str]:
    """
    Return a simple health status payload.

    Returns:
        Dict[str, str]: Keys "status", "version" and "timestamp" (ISO-8601, UTC).
    """
    return {
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
