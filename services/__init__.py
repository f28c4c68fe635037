"""
services/__init__.py

External collaborators used by the orchestrator and the commands:
- workspace: Block discovery under the workspace root
- knowledge_loader: Persistent document summaries for session start
- command_runner: Execution of external commands (foreground or background)
"""
