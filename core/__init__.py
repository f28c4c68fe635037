"""
core/__init__.py

Core pipeline stages and orchestration.

This package contains the hook pipeline of the assistant extension:
- context: Immutable, versioned session context and merge rules
- classifier: Prompt intent rules producing suggestions
- policy: Policy gate evaluated before tool actions
- advisory: Advisory engine evaluated after tool actions
- orchestrator: Per-event coordination of the stages above
"""
