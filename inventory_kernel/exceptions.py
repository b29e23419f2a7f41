"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the registration service (HTTP controllers, CSV importers, batch
jobs) must react to failures precisely.  Parsing message strings is fragile,
so every failure has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

Example - RIGHT way:
    try:
        service.register_bulk_assets(draft, quantity=5, actor_id=actor)
    except SequenceAllocationConflictError as e:
        api_response(code=e.code, scope=e.scope, attempts=e.attempts)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- InvalidArgumentError
    |
    +-- AssetError
    |   +-- AssetNotFoundError
    |   +-- DuplicateAssetCodeError
    |   +-- AssetCodeImmutableError
    |   +-- AssetValidationError
    |
    +-- ReferenceDataError
    |   +-- CategoryNotFoundError
    |   +-- LocationNotFoundError
    |
    +-- BulkError
    |   +-- BulkGroupNotFoundError
    |   +-- BulkGroupIntegrityError
    |
    +-- ConcurrencyError
        +-- SequenceAllocationConflictError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                          | When Raised
-------------|-------------------------------|--------------------------------------
Argument     | INVALID_ARGUMENT              | count <= 0, empty code segment, ...
-------------|-------------------------------|--------------------------------------
Asset        | ASSET_NOT_FOUND               | Asset ID doesn't exist
             | DUPLICATE_ASSET_CODE          | Explicit code already in use
             | ASSET_CODE_IMMUTABLE          | Edit tried to change a stored code
             | ASSET_VALIDATION_FAILED       | Draft field fails a validation rule
-------------|-------------------------------|--------------------------------------
Reference    | CATEGORY_NOT_FOUND            | Category ID doesn't exist
             | LOCATION_NOT_FOUND            | Location ID doesn't exist
-------------|-------------------------------|--------------------------------------
Bulk         | BULK_GROUP_NOT_FOUND          | No assets carry the bulk ID
             | BULK_GROUP_INTEGRITY          | Group sequences/parent inconsistent
-------------|-------------------------------|--------------------------------------
Concurrency  | SEQUENCE_ALLOCATION_CONFLICT  | Code collisions persisted past retries

===============================================================================
DESIGN DECISIONS
===============================================================================

1. Inherit from Exception, not ValueError: domain errors are catchable as a
   group and never mix with programming errors.
2. ``code`` is a class attribute: static per type, readable without an
   instance.
3. All context is stored as attributes so it survives logging and
   serialization (see ``StructuredFormatter``).
"""

from uuid import UUID


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


class InvalidArgumentError(InventoryKernelError):
    """An argument to a pure engine or service call is out of its domain."""

    code: str = "INVALID_ARGUMENT"

    def __init__(self, argument: str, value: object, reason: str):
        self.argument = argument
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {argument}={value!r}: {reason}")


# Asset exceptions


class AssetError(InventoryKernelError):
    """Base exception for asset record errors."""

    code: str = "ASSET_ERROR"


class AssetNotFoundError(AssetError):
    """Asset with given ID was not found."""

    code: str = "ASSET_NOT_FOUND"

    def __init__(self, asset_id: str | UUID):
        self.asset_id = str(asset_id)
        super().__init__(f"Asset not found: {asset_id}")


class DuplicateAssetCodeError(AssetError):
    """An explicitly supplied asset code is already in use."""

    code: str = "DUPLICATE_ASSET_CODE"

    def __init__(self, asset_code: str):
        self.asset_code = asset_code
        super().__init__(f"Asset with code '{asset_code}' already exists")


class AssetCodeImmutableError(AssetError):
    """
    An edit attempted to change an asset code.

    Codes are computed once at creation time and never regenerated.
    """

    code: str = "ASSET_CODE_IMMUTABLE"

    def __init__(self, asset_id: str | UUID, current_code: str, attempted_code: str):
        self.asset_id = str(asset_id)
        self.current_code = current_code
        self.attempted_code = attempted_code
        super().__init__(
            f"Asset {asset_id} code is immutable: "
            f"{current_code!r} cannot become {attempted_code!r}"
        )


class AssetValidationError(AssetError):
    """A draft field failed validation."""

    code: str = "ASSET_VALIDATION_FAILED"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid asset field '{field}': {reason}")


# Reference data exceptions


class ReferenceDataError(InventoryKernelError):
    """Base exception for missing categories and locations."""

    code: str = "REFERENCE_DATA_ERROR"


class CategoryNotFoundError(ReferenceDataError):
    """Asset category with given ID was not found."""

    code: str = "CATEGORY_NOT_FOUND"

    def __init__(self, category_id: str | UUID):
        self.category_id = str(category_id)
        super().__init__(f"Category not found: {category_id}")


class LocationNotFoundError(ReferenceDataError):
    """Location with given ID was not found."""

    code: str = "LOCATION_NOT_FOUND"

    def __init__(self, location_id: str | UUID):
        self.location_id = str(location_id)
        super().__init__(f"Location not found: {location_id}")


# Bulk group exceptions


class BulkError(InventoryKernelError):
    """Base exception for bulk asset group errors."""

    code: str = "BULK_ERROR"


class BulkGroupNotFoundError(BulkError):
    """No assets carry the given bulk ID."""

    code: str = "BULK_GROUP_NOT_FOUND"

    def __init__(self, bulk_id: str | UUID):
        self.bulk_id = str(bulk_id)
        super().__init__(f"Bulk assets not found: {bulk_id}")


class BulkGroupIntegrityError(BulkError):
    """
    A bulk group violates its structural invariants.

    Bulk sequences must be unique and contiguous from 1 to the group's
    total count, with exactly one parent.
    """

    code: str = "BULK_GROUP_INTEGRITY"

    def __init__(self, bulk_id: str | UUID, reason: str):
        self.bulk_id = str(bulk_id)
        self.reason = reason
        super().__init__(f"Bulk group {bulk_id} is inconsistent: {reason}")


# Concurrency exceptions


class ConcurrencyError(InventoryKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class SequenceAllocationConflictError(ConcurrencyError):
    """
    Allocated codes kept colliding with concurrently written codes.

    Raised after the read-compute-write cycle was retried the configured
    number of times and every attempt hit the unique constraint on the
    code column.
    """

    code: str = "SEQUENCE_ALLOCATION_CONFLICT"

    def __init__(self, scope: str, attempts: int):
        self.scope = scope
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a sequence in scope {scope!r} "
            f"after {attempts} attempt(s)"
        )
