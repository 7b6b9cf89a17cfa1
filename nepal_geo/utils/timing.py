"""Timing utilities for performance monitoring."""
import time
from functools import wraps
from typing import Callable, Optional, Type
from nepal_geo.utils.logging import log_structured


def _log_timing(kind: str, name: str, elapsed: float, error: Optional[BaseException] = None,
                level: str = "info"):
    if error is None:
        log_structured(level, f"{kind} {name} completed", **{kind.lower(): name}, elapsed_seconds=elapsed)
    else:
        log_structured(
            "error",
            f"{kind} {name} failed",
            **{kind.lower(): name},
            elapsed_seconds=elapsed,
            error_type=type(error).__name__,
            error=str(error),
        )


def time_function(func: Callable) -> Callable:
    """
    Decorator logging how long each call takes.

    Successful calls are logged at debug level, failed calls at error level
    before the exception propagates.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _log_timing("Function", func.__name__, time.perf_counter() - start, error=e)
            raise
        _log_timing("Function", func.__name__, time.perf_counter() - start, level="debug")
        return result
    return wrapper


class Timer:
    """Context manager for timing code blocks."""

    def __init__(self, operation: str):
        """
        Initialize timer.

        Args:
            operation: Name of the operation being timed
        """
        self.operation = operation
        self.start = None
        self.elapsed = None
        self.failed = False

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type: Optional[Type[BaseException]], exc, tb) -> bool:
        self.elapsed = time.perf_counter() - self.start
        self.failed = exc_type is not None
        _log_timing("Operation", self.operation, self.elapsed, error=exc)
        # Never suppress the exception
        return False
