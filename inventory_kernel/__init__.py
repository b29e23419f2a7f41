"""
Inventory Kernel

Shared infrastructure for the asset inventory core:
- Typed exceptions with machine-readable codes
- Structured JSON logging with request-scoped context
- Injectable clock
- SQLAlchemy declarative base and engine/session management
"""

__version__ = "0.1.0"
