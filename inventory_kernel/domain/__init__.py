"""
Pure domain layer.

Contains the injectable clock with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O
"""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
]
