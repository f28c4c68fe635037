"""
shared/__init__.py

Shared utilities and models used across multiple modules.

This package contains common functionality used by the pipeline stages and
the command registry:
- models: Value types (warnings, suggestions, outcomes) and HTTP schemas
- utils: Path classification and logging helpers
"""
