"""
Performance tracing decorator for the walk and closure operations.
"""

import time
import functools
from typing import Callable, Any
from goresolve.logging_config import logger


def trace(func: Callable) -> Callable:
    """
    Decorator that logs function entry, exit, and execution time.

    Usage:
        @trace
        def import_tree(self, root, context=None):
            ...

    Logs:
        - Entry with function name
        - Exit with function name and execution duration
        - Any exceptions raised during execution
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        func_name = func.__qualname__

        logger.debug(f"TRACE_ENTER: {func_name}")

        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.debug(
                f"TRACE_EXIT: {func_name} failed after {duration:.4f}s with {type(e).__name__}: {e}"
            )
            raise

        duration = time.perf_counter() - start_time
        logger.debug(f"TRACE_EXIT: {func_name} completed in {duration:.4f}s")
        return result

    return wrapper
