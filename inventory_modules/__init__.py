"""
Inventory Modules.

Thin orchestration layers over the Inventory Kernel and Engines.
Each module contains:
- Domain models (the nouns)
- ORM models (persistence)
- Configuration schemas (code format and allocation policy)
- A service facade that owns the transaction boundary

Modules:
- Assets: Registration, bulk batches, code allocation, depreciation snapshots

Actual calculation logic lives in the engines.
"""

from inventory_modules import assets

__all__ = [
    "assets",
]
