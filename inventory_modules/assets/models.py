"""
Asset Inventory Domain Models.

The nouns of the asset register: locations, categories, asset drafts,
registered assets, bulk groups and audit log entries.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from inventory_engines.codes import AssetCodeParts
from inventory_engines.depreciation import DepreciationInput, economic_life_months
from inventory_kernel.exceptions import BulkGroupIntegrityError
from inventory_kernel.logging_config import get_logger

logger = get_logger("modules.assets.models")


class AssetStatus(Enum):
    """Physical condition of an asset."""
    GOOD = "baik"
    DAMAGED = "rusak"
    UNDER_REPAIR = "dalam_perbaikan"
    INACTIVE = "tidak_aktif"


class ProcurementSource(Enum):
    """How an asset was obtained."""
    PURCHASE = "pembelian"
    AID = "bantuan"
    GRANT = "hibah"
    DONATION = "sumbangan"
    SELF_PRODUCED = "produksi_sendiri"


# Third code segment for each procurement source
DEFAULT_PROCUREMENT_CODES: dict[str, str] = {
    ProcurementSource.PURCHASE.value: "1",
    ProcurementSource.AID.value: "2",
    ProcurementSource.GRANT.value: "3",
    ProcurementSource.DONATION.value: "4",
    ProcurementSource.SELF_PRODUCED.value: "5",
}


@dataclass(frozen=True)
class Location:
    """A place where assets are kept."""
    id: UUID
    code: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class AssetCategory:
    """A category for grouping assets."""
    id: UUID
    code: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class AssetDraft:
    """
    Input for registering one asset (or every unit of a bulk batch).

    ``code`` is normally left empty so the code is allocated; an explicit
    code is stored verbatim.
    """
    name: str
    unit: str
    category_id: UUID
    acquisition_date: date
    acquisition_cost: Decimal
    economic_life_years: int = 0
    economic_life_extra_months: int = 0
    quantity: int = 1
    specification: str | None = None
    notes: str | None = None
    location_id: UUID | None = None
    procurement_source: str | None = None
    status: AssetStatus = AssetStatus.GOOD
    code: str | None = None

    @property
    def economic_life_months(self) -> int:
        return economic_life_months(
            self.economic_life_years, self.economic_life_extra_months,
        )


@dataclass(frozen=True)
class Asset:
    """A registered asset."""
    id: UUID
    code: str
    name: str
    unit: str
    category_id: UUID
    acquisition_date: date
    acquisition_cost: Decimal
    economic_life_months: int
    accumulated_depreciation: Decimal = Decimal("0")
    book_value: Decimal = Decimal("0")
    depreciation_as_of: date | None = None
    quantity: int = 1
    status: AssetStatus = AssetStatus.GOOD
    specification: str | None = None
    notes: str | None = None
    location_id: UUID | None = None
    procurement_source: str | None = None
    bulk_id: UUID | None = None
    bulk_sequence: int = 1
    bulk_total_count: int = 1
    is_bulk_parent: bool = False

    @property
    def depreciation_input(self) -> DepreciationInput:
        return DepreciationInput(
            cost=self.acquisition_cost,
            economic_life_months=self.economic_life_months,
            acquisition_date=self.acquisition_date,
        )

    @property
    def code_parts(self) -> AssetCodeParts | None:
        """Structured segments of ``code``; None for legacy or bulk-suffixed codes."""
        return AssetCodeParts.parse(self.code)

    @property
    def is_bulk_member(self) -> bool:
        return self.bulk_id is not None


@dataclass(frozen=True)
class BulkAssetGroup:
    """
    Units created together by one bulk registration.

    Guarantees:
        - ``assets`` is ordered by ``bulk_sequence``.
        - Bulk sequences are exactly ``1..total_count``.
        - Every unit records ``bulk_total_count == total_count``.
        - Exactly one unit is the parent.
    """
    bulk_id: UUID
    assets: tuple[Asset, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.assets:
            raise BulkGroupIntegrityError(self.bulk_id, "group has no assets")
        ordered = tuple(sorted(self.assets, key=lambda a: a.bulk_sequence))
        foreign = [a.code for a in ordered if a.bulk_id != self.bulk_id]
        if foreign:
            raise BulkGroupIntegrityError(
                self.bulk_id, f"assets from another group: {foreign}",
            )
        sequences = [a.bulk_sequence for a in ordered]
        if sequences != list(range(1, len(ordered) + 1)):
            raise BulkGroupIntegrityError(
                self.bulk_id, f"bulk sequences {sequences} are not 1..{len(ordered)}",
            )
        counts = {a.bulk_total_count for a in ordered}
        if counts != {len(ordered)}:
            raise BulkGroupIntegrityError(
                self.bulk_id,
                f"bulk_total_count {sorted(counts)} does not match {len(ordered)} units",
            )
        parents = [a for a in ordered if a.is_bulk_parent]
        if len(parents) != 1:
            raise BulkGroupIntegrityError(
                self.bulk_id, f"expected exactly one parent, found {len(parents)}",
            )
        object.__setattr__(self, "assets", ordered)

    @property
    def parent(self) -> Asset:
        return next(a for a in self.assets if a.is_bulk_parent)

    @property
    def total_count(self) -> int:
        return len(self.assets)

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(a.code for a in self.assets)


class AuditAction(Enum):
    """Kind of change recorded in the audit log."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class AuditLogEntry:
    """One recorded change to an asset or a bulk batch."""
    id: UUID
    entity_type: str
    entity_id: UUID
    action: AuditAction
    actor_id: UUID | None
    occurred_at: datetime
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    changes: dict[str, Any] | None = None
    description: str = ""
