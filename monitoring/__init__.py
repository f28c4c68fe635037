"""
Monitoring package initializer.

This package exposes Prometheus metrics and helper decorators for tracking hook
stage latency, policy decisions and command executions.
"""

from .metrics import (
    STAGE_PROCESSING_TIME,
    ERROR_COUNT,
    POLICY_DECISIONS,
    COMMAND_EXECUTIONS,
    track_latency,
    track_errors,
)

__all__ = [
    'STAGE_PROCESSING_TIME',
    'ERROR_COUNT',
    'POLICY_DECISIONS',
    'COMMAND_EXECUTIONS',
    'track_latency',
    'track_errors',
]
