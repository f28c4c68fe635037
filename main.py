""" main.py: FastAPI application entry point and runtime configuration.

This module builds the ASGI app, mounts the hook, command and health routers, and
exposes a Prometheus metrics endpoint. When executed directly, it starts a Uvicorn
server using host/port values from configuration.
"""

from fastapi import FastAPI
from prometheus_client import make_asgi_app
import logging
from config import CONFIG

# --- Router Imports ---
from api import hooks as hooks_router
from api import commands as commands_router
from api import health as health_router
from version import __version__

logger = logging.getLogger(__name__)

app = FastAPI(title="blockflow-hooks", version=__version__)

app.include_router(hooks_router.router, prefix="/api", tags=["Hooks"])
app.include_router(commands_router.router, prefix="/api", tags=["Commands"])
app.include_router(health_router.router, prefix="/api", tags=["Health"])

# Add Prometheus metrics endpoint
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

if __name__ == '__main__':
    import uvicorn
    logger.info("[__main__] Starting Uvicorn server for main.py")
    uvicorn.run(
        app,
        host=CONFIG.get('server', {}).get('host', '127.0.0.1'),
        port=CONFIG.get('server', {}).get('port', 8080)
    )
