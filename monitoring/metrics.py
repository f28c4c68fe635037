"""
Core metrics and monitoring decorators for the hook pipeline.

This module defines Prometheus metrics and decorators for tracking:
- Hook stage latency (session start, prompt submit, pre/post tool use)
- Error rates
- Policy gate decisions
- Command executions
"""

import time
import functools
import logging
from typing import Optional, Callable
from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# Stage metrics
STAGE_PROCESSING_TIME = Histogram(
    'hook_stage_duration_seconds',
    'Time spent processing a hook stage',
    ['stage'],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, float("inf")]
)

# Error metrics
ERROR_COUNT = Counter(
    'error_total',
    'Total number of errors',
    ['type', 'location']  # type: e.g., 'stage', 'command', 'policy_rule'; location: specific component
)

# Policy metrics
POLICY_DECISIONS = Counter(
    'policy_decisions_total',
    'Policy gate decisions',
    ['decision']  # 'proceed' or 'block'
)

# Command metrics
COMMAND_EXECUTIONS = Counter(
    'command_executions_total',
    'Command executions by outcome',
    ['command', 'status']  # status: 'success', 'failure'
)

def track_latency(metric: Histogram, labels: Optional[Callable] = None) -> Callable:
    """
    A decorator factory that tracks the execution time of a function using a Prometheus Histogram.

    Args:
        metric (Histogram): The Prometheus Histogram to record the timing in
        labels (Callable, optional): Function that returns metric labels dictionary

    Returns:
        Callable: The decorated function
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                if labels and args:
                    # For instance methods, first arg is 'self'
                    label_dict = labels(args[0])
                    metric.labels(**label_dict).observe(duration)
                else:
                    metric.observe(duration)

                func_name = func.__name__
                logger.debug(
                    f"Function {func_name} execution time: {duration:.4f} seconds",
                    extra={'duration': duration, 'function': func_name}
                )
        return wrapper
    return decorator

def track_errors(error_type: str, location: str) -> Callable:
    """
    A decorator factory that tracks errors occurring in a function.

    Args:
        error_type (str): Type of error (e.g., 'stage', 'command')
        location (str): Where the error occurred

    Returns:
        Callable: The decorated function

    Example:
        @track_errors('stage', 'pre_tool_use')
        def on_pre_tool_use(self, tool_kind, parameters, context):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                ERROR_COUNT.labels(
                    type=error_type,
                    location=location
                ).inc()

                logger.error(
                    f"Error in {location} ({error_type}): {str(e)}",
                    extra={
                        'error_type': error_type,
                        'location': location,
                        'error': str(e)
                    },
                    exc_info=True
                )
                raise  # Re-raise the exception after tracking
        return wrapper
    return decorator
