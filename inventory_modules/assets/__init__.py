"""
Asset Register Module (``inventory_modules.assets``).

Responsibility
--------------
Thin glue for the asset register: registration of single assets and bulk
batches with allocated structured codes, edits, deletions and stored
straight-line depreciation snapshots.

Architecture position
---------------------
**Modules layer** -- domain models, config schema, ORM models and a service
facade that delegates sequence allocation, code rendering and depreciation
to the pure engines in ``inventory_engines``.

Invariants enforced
-------------------
* Transaction boundary owned by ``AssetRegistrationService``.
* Asset codes are unique and never regenerated once written.
* Bulk groups keep contiguous bulk sequences with exactly one parent.

Failure modes
-------------
* ``AssetValidationError`` for malformed drafts.
* ``SequenceAllocationConflictError`` when code collisions outlast retries.
"""

from inventory_modules.assets.config import InventoryConfig
from inventory_modules.assets.models import (
    Asset,
    AssetCategory,
    AssetDraft,
    AssetStatus,
    BulkAssetGroup,
    Location,
    ProcurementSource,
)
from inventory_modules.assets.service import AssetRegistrationService

__all__ = [
    "Asset",
    "AssetCategory",
    "AssetDraft",
    "AssetStatus",
    "BulkAssetGroup",
    "Location",
    "ProcurementSource",
    "InventoryConfig",
    "AssetRegistrationService",
]
