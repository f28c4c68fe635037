"""
Runs external commands on behalf of the orchestrator.

Background commands (such as the dev server) are started and left running;
foreground commands are awaited up to the configured timeout. The runner returns
nothing to the core: failures and timeouts are logged, never raised, because a
failed external command must not abort a pipeline stage.
"""

import shlex
import subprocess
import logging
from typing import Optional

from config import CONFIG
from monitoring.metrics import track_errors

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = int(CONFIG['commands'].get('timeout_seconds', 300))

class CommandRunner:
    """Command-execution collaborator backed by `subprocess`."""

    def __init__(self, cwd: Optional[str] = None, timeout: int = DEFAULT_TIMEOUT):
        self.cwd = cwd
        self.timeout = timeout

    @track_errors('service', 'command_runner')
    def run(self, command: str, background: bool = False, cwd: Optional[str] = None) -> None:
        """
        Execute a command string.

        Args:
            command (str): Command line, split with shell quoting rules.
            background (bool): Start without waiting when True.
            cwd (Optional[str]): Working directory; defaults to the runner's cwd.

        Raises:
            ValueError: If the command string has unbalanced quotes.
        """
        args = shlex.split(command)
        if not args:
            logger.warning("[CommandRunner] Ignoring empty command")
            return
        workdir = cwd or self.cwd

        try:
            if background:
                subprocess.Popen(
                    args,
                    cwd=workdir,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    start_new_session=True,
                )
                logger.info(f"[CommandRunner] Started in background: {command}")
                return

            completed = subprocess.run(
                args,
                cwd=workdir,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
            if completed.returncode == 0:
                logger.info(f"[CommandRunner] Completed: {command}")
            else:
                logger.warning(
                    f"[CommandRunner] '{command}' exited with {completed.returncode}: "
                    f"{completed.stderr.strip()[:200]}"
                )
        except subprocess.TimeoutExpired:
            logger.error(f"[CommandRunner] '{command}' timed out after {self.timeout}s")
        except OSError as e:
            logger.error(f"[CommandRunner] Could not run '{command}': {e}")
