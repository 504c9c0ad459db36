"""Bounded-concurrency execution of queued requests."""

from .batch import BatchScheduler
from .cache import ResponseCache

__all__ = ["BatchScheduler", "ResponseCache"]
