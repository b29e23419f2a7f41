"""
Asset Inventory ORM Models (``inventory_modules.assets.orm``).

Responsibility
--------------
SQLAlchemy persistence models for locations, asset categories, assets,
retired asset codes and the audit log.  Maps frozen domain dataclasses
from ``models.py`` to database tables.

Invariants enforced
-------------------
* ``inventory_assets.code`` is UNIQUE.  This constraint is what turns a
  racing allocation into an ``IntegrityError`` the registration service
  can retry.
* ``inventory_retired_codes.code`` is UNIQUE; a deleted asset leaves its
  code there for good.
* ``accumulated_depreciation``, ``book_value`` and ``depreciation_as_of``
  are a denormalized snapshot for listing and reporting queries; the
  authoritative inputs are cost, economic life and acquisition date.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``inventory_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``inventory_kernel``
(except via the ORM registry).
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base, TrackedBase, UUIDString
from inventory_modules.assets.models import (
    Asset,
    AssetCategory,
    AssetStatus,
    AuditAction,
    AuditLogEntry,
    Location,
)


# ---------------------------------------------------------------------------
# LocationModel
# ---------------------------------------------------------------------------

class LocationModel(TrackedBase):
    """
    ORM model for ``Location``.

    Table: ``inventory_locations``
    """

    __tablename__ = "inventory_locations"

    code: Mapped[str] = mapped_column(String(20))
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("code", name="uq_inventory_locations_code"),
    )

    def to_dto(self) -> Location:
        return Location(
            id=self.id,
            code=self.code,
            name=self.name,
            description=self.description,
        )

    @classmethod
    def from_dto(cls, dto: Location, created_by_id: UUID) -> "LocationModel":
        return cls(
            id=dto.id,
            code=dto.code,
            name=dto.name,
            description=dto.description,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<LocationModel(id={self.id!r}, code={self.code!r})>"


# ---------------------------------------------------------------------------
# AssetCategoryModel
# ---------------------------------------------------------------------------

class AssetCategoryModel(TrackedBase):
    """
    ORM model for ``AssetCategory``.

    Table: ``inventory_categories``
    """

    __tablename__ = "inventory_categories"

    code: Mapped[str] = mapped_column(String(50))
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("code", name="uq_inventory_categories_code"),
        UniqueConstraint("name", name="uq_inventory_categories_name"),
    )

    def to_dto(self) -> AssetCategory:
        return AssetCategory(
            id=self.id,
            code=self.code,
            name=self.name,
            description=self.description,
        )

    @classmethod
    def from_dto(cls, dto: AssetCategory, created_by_id: UUID) -> "AssetCategoryModel":
        return cls(
            id=dto.id,
            code=dto.code,
            name=dto.name,
            description=dto.description,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<AssetCategoryModel(id={self.id!r}, code={self.code!r}, "
            f"name={self.name!r})>"
        )


# ---------------------------------------------------------------------------
# AssetModel
# ---------------------------------------------------------------------------

class AssetModel(TrackedBase):
    """
    ORM model for ``Asset``.

    Table: ``inventory_assets``
    """

    __tablename__ = "inventory_assets"

    code: Mapped[str] = mapped_column(String(50))
    name: Mapped[str] = mapped_column(String(255))
    specification: Mapped[str | None] = mapped_column(Text, nullable=True)
    quantity: Mapped[int] = mapped_column(default=1)
    unit: Mapped[str] = mapped_column(String(50))
    acquisition_date: Mapped[date]
    acquisition_cost: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    economic_life_months: Mapped[int] = mapped_column(default=0)
    accumulated_depreciation: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    book_value: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    depreciation_as_of: Mapped[date | None]
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("inventory_locations.id"), nullable=True,
    )
    procurement_source: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("inventory_categories.id"),
    )
    status: Mapped[str] = mapped_column(String(20), default=AssetStatus.GOOD.value)

    # Bulk grouping
    bulk_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    bulk_sequence: Mapped[int] = mapped_column(default=1)
    bulk_total_count: Mapped[int] = mapped_column(default=1)
    is_bulk_parent: Mapped[bool] = mapped_column(default=False)

    __table_args__ = (
        UniqueConstraint("code", name="uq_inventory_assets_code"),
        Index("idx_inventory_assets_bulk_id", "bulk_id"),
        Index("idx_inventory_assets_category_id", "category_id"),
    )

    def to_dto(self) -> Asset:
        return Asset(
            id=self.id,
            code=self.code,
            name=self.name,
            unit=self.unit,
            category_id=self.category_id,
            acquisition_date=self.acquisition_date,
            acquisition_cost=self.acquisition_cost,
            economic_life_months=self.economic_life_months,
            accumulated_depreciation=self.accumulated_depreciation,
            book_value=self.book_value,
            depreciation_as_of=self.depreciation_as_of,
            quantity=self.quantity,
            status=AssetStatus(self.status),
            specification=self.specification,
            notes=self.notes,
            location_id=self.location_id,
            procurement_source=self.procurement_source,
            bulk_id=self.bulk_id,
            bulk_sequence=self.bulk_sequence,
            bulk_total_count=self.bulk_total_count,
            is_bulk_parent=self.is_bulk_parent,
        )

    @classmethod
    def from_dto(cls, dto: Asset, created_by_id: UUID) -> "AssetModel":
        return cls(
            id=dto.id,
            code=dto.code,
            name=dto.name,
            unit=dto.unit,
            category_id=dto.category_id,
            acquisition_date=dto.acquisition_date,
            acquisition_cost=dto.acquisition_cost,
            economic_life_months=dto.economic_life_months,
            accumulated_depreciation=dto.accumulated_depreciation,
            book_value=dto.book_value,
            depreciation_as_of=dto.depreciation_as_of,
            quantity=dto.quantity,
            status=dto.status.value,
            specification=dto.specification,
            notes=dto.notes,
            location_id=dto.location_id,
            procurement_source=dto.procurement_source,
            bulk_id=dto.bulk_id,
            bulk_sequence=dto.bulk_sequence,
            bulk_total_count=dto.bulk_total_count,
            is_bulk_parent=dto.is_bulk_parent,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<AssetModel(id={self.id!r}, code={self.code!r}, "
            f"bulk_id={self.bulk_id!r}, bulk_sequence={self.bulk_sequence!r})>"
        )


# ---------------------------------------------------------------------------
# RetiredAssetCodeModel
# ---------------------------------------------------------------------------

class RetiredAssetCodeModel(Base):
    """
    A code whose asset was deleted.

    Table: ``inventory_retired_codes``

    Rows are read together with live codes when a scope's sequences are
    derived, so a deleted asset's sequence is never handed out again.
    """

    __tablename__ = "inventory_retired_codes"

    code: Mapped[str] = mapped_column(String(50))
    asset_id: Mapped[UUID] = mapped_column(UUIDString())
    retired_at: Mapped[datetime]
    retired_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    __table_args__ = (
        UniqueConstraint("code", name="uq_inventory_retired_codes_code"),
    )

    def __repr__(self) -> str:
        return f"<RetiredAssetCodeModel(code={self.code!r}, asset_id={self.asset_id!r})>"


# ---------------------------------------------------------------------------
# AuditLogModel
# ---------------------------------------------------------------------------

class AuditLogModel(Base):
    """
    ORM model for ``AuditLogEntry``.

    Table: ``inventory_audit_logs``

    Append-only.  ``old_values`` / ``new_values`` hold JSON snapshots of the
    audited entity; ``changes`` maps each differing field to
    ``{"from": ..., "to": ...}``.
    """

    __tablename__ = "inventory_audit_logs"

    entity_type: Mapped[str] = mapped_column(String(50))
    entity_id: Mapped[UUID] = mapped_column(UUIDString())
    action: Mapped[str] = mapped_column(String(20))
    actor_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    occurred_at: Mapped[datetime]
    old_values: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    new_values: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    changes: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    description: Mapped[str] = mapped_column(Text, default="")

    __table_args__ = (
        Index("idx_inventory_audit_logs_entity", "entity_type", "entity_id"),
        Index("idx_inventory_audit_logs_occurred_at", "occurred_at"),
    )

    def to_dto(self) -> AuditLogEntry:
        return AuditLogEntry(
            id=self.id,
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            action=AuditAction(self.action),
            actor_id=self.actor_id,
            occurred_at=self.occurred_at,
            old_values=self.old_values,
            new_values=self.new_values,
            changes=self.changes,
            description=self.description,
        )

    def __repr__(self) -> str:
        return (
            f"<AuditLogModel({self.action} {self.entity_type}:{self.entity_id})>"
        )
