"""Dining philosophers simulation with lock-based and semaphore-based tables."""

__version__ = "0.1.0"