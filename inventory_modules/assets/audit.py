"""
AssetAuditLog -- change history for assets and bulk batches.

Responsibility:
    Records who created, edited or deleted an asset or a bulk batch, with
    JSON snapshots of the values before and after and a field-by-field
    diff.  Answers history queries for one entity and for the most recent
    activity.

Architecture position:
    Modules > Assets -- called by ``AssetRegistrationService`` inside its
    write methods.  Adds rows to the caller's session; the caller commits,
    so an audit entry exists if and only if the change it describes does.

Invariants enforced:
    - Append-only: entries are never updated or deleted by this module.
    - ``changes`` is set only when both snapshots exist, and never lists
      ``id``, ``created_at`` or ``updated_at``.
    - Bulk entries are keyed by ``bulk_id`` under ``ENTITY_BULK``; single
      asset entries by asset id under ``ENTITY_ASSET``.
"""

from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.logging_config import get_logger
from inventory_modules.assets.models import Asset, AuditAction, AuditLogEntry
from inventory_modules.assets.orm import AuditLogModel

logger = get_logger("modules.assets.audit")

ENTITY_ASSET = "asset"
ENTITY_BULK = "asset_bulk"

UNTRACKED_FIELDS = frozenset({"id", "created_at", "updated_at"})


def _json_value(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def asset_values(asset: Asset) -> dict[str, Any]:
    """JSON-safe snapshot of every field of ``asset``."""
    return {f.name: _json_value(getattr(asset, f.name)) for f in fields(asset)}


def calculate_changes(
    old_values: dict[str, Any],
    new_values: dict[str, Any],
) -> dict[str, dict[str, Any]] | None:
    """
    Field-by-field diff of two snapshots.

    Returns ``{field: {"from": old, "to": new}}`` for every differing
    field outside ``UNTRACKED_FIELDS``, or ``None`` when nothing changed.
    """
    changes: dict[str, dict[str, Any]] = {}
    for key in sorted(set(old_values) | set(new_values)):
        if key in UNTRACKED_FIELDS:
            continue
        before, after = old_values.get(key), new_values.get(key)
        if before != after:
            changes[key] = {"from": before, "to": after}
    return changes or None


class AssetAuditLog:
    """
    Records and reads asset audit entries.

    Contract:
        ``asset_*`` and ``bulk_*`` methods add one ``AuditLogModel`` to the
        session and return it.  They never flush or commit.
    Non-goals:
        - No hash chaining or tamper evidence.
        - No retention clean-up.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()

    def _record(
        self,
        entity_type: str,
        entity_id: UUID,
        action: AuditAction,
        actor_id: UUID | None,
        description: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLogModel:
        changes = None
        if old_values is not None and new_values is not None:
            changes = calculate_changes(old_values, new_values)
        entry = AuditLogModel(
            id=uuid4(),
            entity_type=entity_type,
            entity_id=entity_id,
            action=action.value,
            actor_id=actor_id,
            occurred_at=self._clock.now(),
            old_values=old_values,
            new_values=new_values,
            changes=changes,
            description=description,
        )
        self._session.add(entry)
        logger.debug("audit_entry_recorded", extra={
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "action": action.value,
            "changed_fields": sorted(changes) if changes else [],
        })
        return entry

    # Single assets

    def asset_created(self, asset: Asset, actor_id: UUID | None) -> AuditLogModel:
        return self._record(
            ENTITY_ASSET, asset.id, AuditAction.CREATE, actor_id,
            f"Asset created: {asset.name} ({asset.code})",
            new_values=asset_values(asset),
        )

    def asset_updated(self, before: Asset, after: Asset, actor_id: UUID | None) -> AuditLogModel:
        return self._record(
            ENTITY_ASSET, after.id, AuditAction.UPDATE, actor_id,
            f"Asset updated: {after.name} ({after.code})",
            old_values=asset_values(before),
            new_values=asset_values(after),
        )

    def asset_deleted(self, asset: Asset, actor_id: UUID | None) -> AuditLogModel:
        return self._record(
            ENTITY_ASSET, asset.id, AuditAction.DELETE, actor_id,
            f"Asset deleted: {asset.name} ({asset.code})",
            old_values=asset_values(asset),
        )

    # Bulk batches

    def bulk_created(
        self, bulk_id: UUID, assets: list[Asset], actor_id: UUID | None,
    ) -> AuditLogModel:
        return self._record(
            ENTITY_BULK, bulk_id, AuditAction.CREATE, actor_id,
            f"Bulk assets created: {len(assets)} items",
            new_values={
                "bulk_count": len(assets),
                "assets": [asset_values(a) for a in assets],
            },
        )

    def bulk_updated(
        self,
        bulk_id: UUID,
        before: list[Asset],
        after: list[Asset],
        actor_id: UUID | None,
    ) -> AuditLogModel:
        return self._record(
            ENTITY_BULK, bulk_id, AuditAction.UPDATE, actor_id,
            f"Bulk assets updated: {len(after)} items",
            old_values={"assets": [asset_values(a) for a in before]},
            new_values={"assets": [asset_values(a) for a in after]},
        )

    def bulk_deleted(
        self, bulk_id: UUID, assets: list[Asset], actor_id: UUID | None,
    ) -> AuditLogModel:
        return self._record(
            ENTITY_BULK, bulk_id, AuditAction.DELETE, actor_id,
            f"Bulk assets deleted: {len(assets)} items",
            old_values={"assets": [asset_values(a) for a in assets]},
        )

    # Queries

    def history(
        self,
        entity_id: UUID,
        entity_type: str | None = None,
    ) -> tuple[AuditLogEntry, ...]:
        """Every entry for ``entity_id``, oldest first."""
        stmt = select(AuditLogModel).where(AuditLogModel.entity_id == entity_id)
        if entity_type is not None:
            stmt = stmt.where(AuditLogModel.entity_type == entity_type)
        stmt = stmt.order_by(AuditLogModel.occurred_at)
        return tuple(m.to_dto() for m in self._session.scalars(stmt))

    def recent(self, limit: int = 100) -> list[AuditLogEntry]:
        """Most recent entries across all entities, newest first."""
        stmt = (
            select(AuditLogModel)
            .order_by(AuditLogModel.occurred_at.desc())
            .limit(limit)
        )
        return [m.to_dto() for m in self._session.scalars(stmt)]
