"""
Asset Registration Service (``inventory_modules.assets.service``).

Responsibility
--------------
Registers single assets and bulk batches: resolves the code segments from
reference data, reads the codes already used in the allocation scope,
allocates sequence(s) with ``SequenceAllocator``, renders codes with
``AssetCodeBuilder``, snapshots depreciation with ``DepreciationEngine`` and
writes the new rows.  Also owns edits, deletions, depreciation refreshes
and the audit entries that record them.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``AssetRegistrationService`` is the sole
public entry point for asset writes.  It composes the stateless engines and
the SQLAlchemy session it is given.

Invariants enforced
-------------------
* Each public write method owns the transaction boundary (``commit`` on
  success, ``rollback`` on failure or exception).
* Allocation is serialised per scope: an in-process lock per scope, and
  the UNIQUE constraint on ``inventory_assets.code`` across processes.  A
  collision rolls back and re-runs the whole read-allocate-write cycle.
* Codes are written once.  Edits never regenerate a code.  Deleted codes
  are retired and keep holding their sequence.
* Bulk groups keep contiguous ``bulk_sequence`` values ``1..n`` with one
  parent, also after a member is deleted.

Failure modes
-------------
* ``AssetValidationError`` / ``InvalidArgumentError`` -- bad draft or arguments.
* ``CategoryNotFoundError`` / ``LocationNotFoundError`` -- dangling references.
* ``DuplicateAssetCodeError`` -- an explicit code is already taken or retired.
* ``SequenceAllocationConflictError`` -- collisions persisted past
  ``InventoryConfig.max_allocation_retries`` attempts.

Usage::

    service = AssetRegistrationService(session, clock=clock)
    group = service.register_bulk_assets(draft, quantity=3, actor_id=actor_id)
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, ClassVar
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory_engines.codes import AssetCodeBuilder, base_code_of, pad_segment
from inventory_engines.depreciation import (
    DepreciationEngine,
    DepreciationInput,
    DepreciationResult,
)
from inventory_engines.sequence import SequenceAllocator
from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.exceptions import (
    AssetCodeImmutableError,
    AssetNotFoundError,
    BulkGroupNotFoundError,
    CategoryNotFoundError,
    DuplicateAssetCodeError,
    InvalidArgumentError,
    LocationNotFoundError,
    SequenceAllocationConflictError,
)
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_modules.assets.audit import ENTITY_ASSET, ENTITY_BULK, AssetAuditLog
from inventory_modules.assets.config import InventoryConfig
from inventory_modules.assets.models import (
    Asset,
    AssetDraft,
    AssetStatus,
    AuditLogEntry,
    BulkAssetGroup,
)
from inventory_modules.assets.orm import (
    AssetCategoryModel,
    AssetModel,
    LocationModel,
    RetiredAssetCodeModel,
)
from inventory_modules.assets.validation import validate_draft

logger = get_logger("modules.assets.service")

GLOBAL_SCOPE = "*"

EDITABLE_FIELDS = frozenset({
    "name",
    "unit",
    "category_id",
    "acquisition_date",
    "acquisition_cost",
    "economic_life_years",
    "economic_life_extra_months",
    "quantity",
    "specification",
    "notes",
    "location_id",
    "procurement_source",
    "status",
})


@dataclass(frozen=True)
class CodeSegments:
    """Resolved first four code segments of a new asset."""

    location_code: str
    category_code: str
    source_code: str
    year: int


class _ScopeLock:
    """In-process lock for one allocation scope; weakly cached per scope."""

    __slots__ = ("_lock", "__weakref__")

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def __enter__(self) -> _ScopeLock:
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()


class AssetRegistrationService:
    """
    Registers, edits and removes assets through the pure engines.

    Contract
    --------
    * ``register_asset`` / ``register_bulk_assets`` return the created
      ``Asset`` DTOs in bulk order.
    * Read helpers (``get_asset``, ``get_bulk_group``, ``current_depreciation``,
      ``peek_next_sequence``, the history queries) never write.
    * Every create, edit and delete adds one audit entry in the same
      transaction as the change.  Depreciation snapshot refreshes are
      not audited.

    Guarantees
    ----------
    * Sequences are never reused: allocation advances past the highest
      sequence held by a live or retired code in the scope.
    * A bulk batch reserves its whole range in one cycle.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT renumber or regenerate codes after deletions.
    * Does NOT hold database locks across calls.
    """

    # Entries disappear once no thread holds or waits on the scope's lock
    _scope_locks: ClassVar[weakref.WeakValueDictionary[str, _ScopeLock]] = (
        weakref.WeakValueDictionary()
    )
    _scope_locks_guard: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        session: Session,
        config: InventoryConfig | None = None,
        clock: Clock | None = None,
        allocator: SequenceAllocator | None = None,
    ):
        self._session = session
        self._config = config or InventoryConfig.with_defaults()
        self._clock = clock or SystemClock()

        # Stateless engines
        self._allocator = allocator or SequenceAllocator()
        self._depreciation = DepreciationEngine()
        self._codes = AssetCodeBuilder(suffix_width=self._config.bulk_suffix_width)
        self._audit = AssetAuditLog(session, self._clock)

    # =========================================================================
    # Registration
    # =========================================================================

    def register_asset(self, draft: AssetDraft, actor_id: UUID) -> Asset:
        """
        Register one asset, allocating its code unless ``draft.code`` is set.
        """
        try:
            with LogContext.bind(actor_id=str(actor_id)):
                draft = self._validated(draft)
                snapshot = self._snapshot(draft)
                logger.info("asset_registration_started", extra={
                    "category_id": str(draft.category_id),
                    "cost": str(draft.acquisition_cost),
                    "economic_life_months": draft.economic_life_months,
                    "explicit_code": draft.code is not None,
                })

                def record(models: list[AssetModel]) -> None:
                    self._audit.asset_created(models[0].to_dto(), actor_id)

                if draft.code is not None:
                    models = self._commit_explicit_codes(
                        [self._new_model(draft, draft.code, snapshot, actor_id)], record,
                    )
                else:
                    segments = self._code_segments(draft)

                    def build(existing_codes: list[str]) -> list[AssetModel]:
                        sequence = self._allocator.next_sequence(existing_codes)
                        code = self._render_code(segments, sequence)
                        return [self._new_model(draft, code, snapshot, actor_id)]

                    models = self._allocate_and_commit(self._scope_of(segments), build, record)

                asset = models[0].to_dto()
                logger.info("asset_registered", extra={
                    "asset_id": str(asset.id),
                    "asset_code": asset.code,
                    "book_value": str(asset.book_value),
                })
                return asset
        except Exception:
            self._session.rollback()
            raise

    def register_bulk_assets(
        self,
        draft: AssetDraft,
        quantity: int,
        actor_id: UUID,
    ) -> list[Asset]:
        """
        Register ``quantity`` individually tracked units of one asset.

        Every unit has quantity 1 and shares a fresh ``bulk_id``; unit 1 is
        the parent.  With ``bulk_code_style == "sequence"`` each unit gets
        its own sequence from one contiguous range; with ``"suffix"`` the
        batch takes one sequence and units 2..n get ``-NNN`` suffixes.  A
        quantity of 1 registers a plain asset.

        Raises:
            InvalidArgumentError: If ``quantity`` is not a positive integer.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidArgumentError("quantity", quantity, "must be greater than 0")
        if quantity == 1:
            return [self.register_asset(draft, actor_id)]

        bulk_id = uuid4()
        try:
            with LogContext.bind(actor_id=str(actor_id), bulk_id=str(bulk_id)):
                draft = self._validated(draft)
                snapshot = self._snapshot(draft)
                logger.info("bulk_registration_started", extra={
                    "quantity": quantity,
                    "category_id": str(draft.category_id),
                    "bulk_code_style": self._config.bulk_code_style,
                })

                def record(models: list[AssetModel]) -> None:
                    self._audit.bulk_created(bulk_id, [m.to_dto() for m in models], actor_id)

                if draft.code is not None:
                    codes = self._codes.build_bulk_codes(draft.code, quantity)
                    models = self._commit_explicit_codes(
                        self._bulk_models(draft, codes, snapshot, actor_id, bulk_id), record,
                    )
                else:
                    segments = self._code_segments(draft)

                    def build(existing_codes: list[str]) -> list[AssetModel]:
                        if self._config.bulk_code_style == "suffix":
                            sequence = self._allocator.next_sequence(existing_codes)
                            base_code = self._render_code(segments, sequence)
                            codes = self._codes.build_bulk_codes(base_code, quantity)
                        else:
                            allocation = self._allocator.next_sequence_range(
                                existing_codes, quantity,
                            )
                            codes = [self._render_code(segments, s) for s in allocation]
                        return self._bulk_models(draft, codes, snapshot, actor_id, bulk_id)

                    models = self._allocate_and_commit(self._scope_of(segments), build, record)

                assets = [m.to_dto() for m in models]
                logger.info("bulk_registered", extra={
                    "quantity": quantity,
                    "first_code": assets[0].code,
                    "last_code": assets[-1].code,
                })
                return assets
        except Exception:
            self._session.rollback()
            raise

    def peek_next_sequence(self, draft: AssetDraft) -> int:
        """Sequence the next single registration of ``draft`` would take now."""
        segments = self._code_segments(draft)
        return self._allocator.next_sequence(self._existing_codes(self._scope_of(segments)))

    # =========================================================================
    # Queries
    # =========================================================================

    def get_asset(self, asset_id: UUID) -> Asset:
        return self._get_model(asset_id).to_dto()

    def get_bulk_group(self, bulk_id: UUID) -> BulkAssetGroup:
        """All units of a bulk batch, validated and ordered by bulk sequence."""
        models = self._bulk_members(bulk_id)
        if not models:
            raise BulkGroupNotFoundError(bulk_id)
        return BulkAssetGroup(bulk_id=bulk_id, assets=tuple(m.to_dto() for m in models))

    def current_depreciation(self, asset_id: UUID) -> DepreciationResult:
        """Depreciation recomputed as of today; the stored snapshot is ignored."""
        model = self._get_model(asset_id)
        return self._depreciation.compute(
            self._depreciation_input(model), self._clock.today(),
        )

    def depreciation_schedule(
        self,
        asset_id: UUID,
        through: date | None = None,
    ) -> tuple[DepreciationResult, ...]:
        """Monthly depreciation snapshots from acquisition through ``through`` (default today)."""
        model = self._get_model(asset_id)
        return self._depreciation.schedule(
            self._depreciation_input(model), through or self._clock.today(),
        )

    def asset_history(self, asset_id: UUID) -> tuple[AuditLogEntry, ...]:
        """Audit entries of one asset, oldest first.  Survives deletion."""
        return self._audit.history(asset_id, ENTITY_ASSET)

    def bulk_history(self, bulk_id: UUID) -> tuple[AuditLogEntry, ...]:
        """Audit entries recorded for a bulk batch as a whole, oldest first."""
        return self._audit.history(bulk_id, ENTITY_BULK)

    def recent_activity(self, limit: int = 100) -> list[AuditLogEntry]:
        return self._audit.recent(limit)

    # =========================================================================
    # Edits
    # =========================================================================

    def update_asset(self, asset_id: UUID, actor_id: UUID, **changes: Any) -> Asset:
        """
        Edit an asset's attributes and refresh its depreciation snapshot.

        Raises:
            AssetCodeImmutableError: If ``changes`` tries to alter the code.
            InvalidArgumentError: If ``changes`` names a non-editable field.
        """
        try:
            model = self._get_model(asset_id)
            if "code" in changes:
                attempted = changes.pop("code")
                if attempted != model.code:
                    raise AssetCodeImmutableError(asset_id, model.code, attempted)
            before = model.to_dto()
            self._apply_changes(model, actor_id, changes)
            self._audit.asset_updated(before, model.to_dto(), actor_id)
            self._session.commit()
            logger.info("asset_updated", extra={
                "asset_id": str(asset_id),
                "fields": sorted(changes),
            })
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def update_bulk_group(self, bulk_id: UUID, actor_id: UUID, **changes: Any) -> BulkAssetGroup:
        """Apply the same edit to every unit of a bulk batch."""
        try:
            models = self._bulk_members(bulk_id)
            if not models:
                raise BulkGroupNotFoundError(bulk_id)
            if "code" in changes:
                raise AssetCodeImmutableError(
                    models[0].id, models[0].code, changes["code"],
                )
            before = [m.to_dto() for m in models]
            for model in models:
                self._apply_changes(model, actor_id, dict(changes))
            self._audit.bulk_updated(bulk_id, before, [m.to_dto() for m in models], actor_id)
            self._session.commit()
            logger.info("bulk_group_updated", extra={
                "bulk_id": str(bulk_id),
                "units": len(models),
                "fields": sorted(changes),
            })
            return BulkAssetGroup(bulk_id=bulk_id, assets=tuple(m.to_dto() for m in models))
        except Exception:
            self._session.rollback()
            raise

    def refresh_depreciation_snapshots(self, actor_id: UUID) -> int:
        """
        Recompute the stored depreciation snapshot of every asset.

        Returns:
            Number of assets whose snapshot changed.
        """
        try:
            today = self._clock.today()
            updated = 0
            for model in self._session.scalars(select(AssetModel)):
                result = self._depreciation.compute(self._depreciation_input(model), today)
                if (
                    model.accumulated_depreciation != result.accumulated_depreciation
                    or model.book_value != result.book_value
                    or model.depreciation_as_of != today
                ):
                    self._store_snapshot(model, result)
                    model.touch(actor_id)
                    updated += 1
            self._session.commit()
            logger.info("depreciation_snapshots_refreshed", extra={
                "updated": updated,
                "as_of": today.isoformat(),
            })
            return updated
        except Exception:
            self._session.rollback()
            raise

    # =========================================================================
    # Deletions
    # =========================================================================

    def delete_asset(self, asset_id: UUID, actor_id: UUID | None = None) -> None:
        """
        Delete one asset.

        Its code is retired, not released: later allocations still advance
        past its sequence, even when it was the highest in the scope.
        Remaining units of its bulk batch are renumbered ``1..n-1``.
        """
        try:
            model = self._get_model(asset_id)
            bulk_id, code = model.bulk_id, model.code
            self._audit.asset_deleted(model.to_dto(), actor_id)
            self._retire(model, actor_id)
            self._session.delete(model)
            self._session.flush()
            if bulk_id is not None:
                self._repack_bulk_group(bulk_id, actor_id)
            self._session.commit()
            logger.info("asset_deleted", extra={
                "asset_id": str(asset_id),
                "asset_code": code,
                "bulk_id": str(bulk_id) if bulk_id else None,
            })
        except Exception:
            self._session.rollback()
            raise

    def delete_bulk_group(self, bulk_id: UUID, actor_id: UUID | None = None) -> int:
        """Delete every unit of a bulk batch, retiring their codes; returns the number deleted."""
        try:
            models = self._bulk_members(bulk_id)
            if not models:
                raise BulkGroupNotFoundError(bulk_id)
            self._audit.bulk_deleted(bulk_id, [m.to_dto() for m in models], actor_id)
            for model in models:
                self._retire(model, actor_id)
                self._session.delete(model)
            self._session.commit()
            logger.info("bulk_group_deleted", extra={
                "bulk_id": str(bulk_id),
                "units": len(models),
            })
            return len(models)
        except Exception:
            self._session.rollback()
            raise

    # =========================================================================
    # Allocation internals
    # =========================================================================

    @classmethod
    def _scope_lock(cls, scope: str) -> _ScopeLock:
        with cls._scope_locks_guard:
            lock = cls._scope_locks.get(scope)
            if lock is None:
                lock = _ScopeLock()
                cls._scope_locks[scope] = lock
            return lock

    def _code_segments(self, draft: AssetDraft) -> CodeSegments:
        category = self._session.get(AssetCategoryModel, draft.category_id)
        if category is None:
            raise CategoryNotFoundError(draft.category_id)
        category_code = self._config.default_category_code
        if category.code and category.code.strip():
            category_code = pad_segment(category.code, self._config.category_code_width)

        location_code = self._config.default_location_code
        if draft.location_id is not None:
            location = self._session.get(LocationModel, draft.location_id)
            if location is None:
                raise LocationNotFoundError(draft.location_id)
            if location.code and location.code.strip():
                location_code = pad_segment(location.code, self._config.location_code_width)

        return CodeSegments(
            location_code=location_code,
            category_code=category_code,
            source_code=self._config.resolve_source_code(draft.procurement_source),
            year=draft.acquisition_date.year,
        )

    def _scope_of(self, segments: CodeSegments) -> str:
        if self._config.sequence_scope == "global":
            return GLOBAL_SCOPE
        return self._codes.scope_prefix(
            segments.location_code,
            segments.category_code,
            segments.source_code,
            segments.year,
        )

    def _render_code(self, segments: CodeSegments, sequence: int) -> str:
        return self._codes.build_code(
            segments.location_code,
            segments.category_code,
            segments.source_code,
            segments.year,
            sequence,
            sequence_width=self._config.sequence_width,
        )

    def _existing_codes(self, scope: str) -> list[str]:
        """
        Codes that hold a sequence in ``scope``: live and retired codes.

        Bulk child suffixes are stripped, so ``BASE-002`` holds ``BASE``'s
        sequence even after the unit carrying ``BASE`` itself is deleted.
        """
        live = select(AssetModel.code)
        retired = select(RetiredAssetCodeModel.code)
        if scope != GLOBAL_SCOPE:
            live = live.where(AssetModel.code.startswith(scope, autoescape=True))
            retired = retired.where(
                RetiredAssetCodeModel.code.startswith(scope, autoescape=True)
            )
        codes = [*self._session.scalars(live), *self._session.scalars(retired)]
        return [base_code_of(code) for code in codes]

    def _allocate_and_commit(
        self,
        scope: str,
        build: Callable[[list[str]], list[AssetModel]],
        record: Callable[[list[AssetModel]], None],
    ) -> list[AssetModel]:
        """
        Run read-allocate-write cycles until one commits.

        Each attempt reads a fresh snapshot of the scope's codes.  A unique
        violation means another writer took one of the codes first; the
        attempt, audit entry included, is rolled back and the cycle repeats.
        """
        attempts = self._config.max_allocation_retries
        with self._scope_lock(scope):
            for attempt in range(1, attempts + 1):
                models = build(self._existing_codes(scope))
                self._session.add_all(models)
                record(models)
                try:
                    self._session.commit()
                except IntegrityError:
                    self._session.rollback()
                    logger.warning("asset_code_conflict_retry", extra={
                        "scope": scope,
                        "attempt": attempt,
                        "max_attempts": attempts,
                        "codes": [m.code for m in models],
                    })
                    continue
                logger.debug("sequence_codes_committed", extra={
                    "scope": scope,
                    "attempt": attempt,
                    "codes": [m.code for m in models],
                })
                return models

        logger.error("sequence_allocation_exhausted", extra={
            "scope": scope,
            "attempts": attempts,
        })
        raise SequenceAllocationConflictError(scope, attempts)

    def _commit_explicit_codes(
        self,
        models: list[AssetModel],
        record: Callable[[list[AssetModel]], None],
    ) -> list[AssetModel]:
        codes = [m.code for m in models]
        taken = self._session.scalars(
            select(AssetModel.code).where(AssetModel.code.in_(codes))
        ).first()
        if taken is None:
            taken = self._session.scalars(
                select(RetiredAssetCodeModel.code)
                .where(RetiredAssetCodeModel.code.in_(codes))
            ).first()
        if taken is not None:
            raise DuplicateAssetCodeError(taken)
        self._session.add_all(models)
        record(models)
        try:
            self._session.commit()
        except IntegrityError:
            self._session.rollback()
            raise DuplicateAssetCodeError(codes[0]) from None
        return models

    # =========================================================================
    # Model helpers
    # =========================================================================

    def _validated(self, draft: AssetDraft) -> AssetDraft:
        return validate_draft(
            draft,
            today=self._clock.today(),
            allow_future_acquisition=self._config.allow_future_acquisition,
        )

    def _snapshot(self, draft: AssetDraft) -> DepreciationResult:
        return self._depreciation.compute(
            DepreciationInput(
                cost=draft.acquisition_cost,
                economic_life_months=draft.economic_life_months,
                acquisition_date=draft.acquisition_date,
            ),
            self._clock.today(),
        )

    @staticmethod
    def _depreciation_input(model: AssetModel) -> DepreciationInput:
        return DepreciationInput(
            cost=model.acquisition_cost,
            economic_life_months=model.economic_life_months,
            acquisition_date=model.acquisition_date,
        )

    @staticmethod
    def _store_snapshot(model: AssetModel, result: DepreciationResult) -> None:
        model.accumulated_depreciation = result.accumulated_depreciation
        model.book_value = result.book_value
        model.depreciation_as_of = result.as_of

    def _new_model(
        self,
        draft: AssetDraft,
        code: str,
        snapshot: DepreciationResult,
        actor_id: UUID,
        *,
        bulk_id: UUID | None = None,
        bulk_sequence: int = 1,
        bulk_total_count: int = 1,
        is_bulk_parent: bool = False,
        quantity: int | None = None,
    ) -> AssetModel:
        model = AssetModel(
            id=uuid4(),
            code=code,
            name=draft.name,
            unit=draft.unit,
            category_id=draft.category_id,
            acquisition_date=draft.acquisition_date,
            acquisition_cost=draft.acquisition_cost,
            economic_life_months=draft.economic_life_months,
            quantity=draft.quantity if quantity is None else quantity,
            status=draft.status.value,
            specification=draft.specification,
            notes=draft.notes,
            location_id=draft.location_id,
            procurement_source=draft.procurement_source,
            bulk_id=bulk_id,
            bulk_sequence=bulk_sequence,
            bulk_total_count=bulk_total_count,
            is_bulk_parent=is_bulk_parent,
            created_by_id=actor_id,
        )
        self._store_snapshot(model, snapshot)
        return model

    def _bulk_models(
        self,
        draft: AssetDraft,
        codes: list[str],
        snapshot: DepreciationResult,
        actor_id: UUID,
        bulk_id: UUID,
    ) -> list[AssetModel]:
        return [
            self._new_model(
                draft,
                code,
                snapshot,
                actor_id,
                bulk_id=bulk_id,
                bulk_sequence=position,
                bulk_total_count=len(codes),
                is_bulk_parent=position == 1,
                quantity=1,
            )
            for position, code in enumerate(codes, start=1)
        ]

    def _get_model(self, asset_id: UUID) -> AssetModel:
        model = self._session.get(AssetModel, asset_id)
        if model is None:
            raise AssetNotFoundError(asset_id)
        return model

    def _bulk_members(self, bulk_id: UUID) -> list[AssetModel]:
        return list(self._session.scalars(
            select(AssetModel)
            .where(AssetModel.bulk_id == bulk_id)
            .order_by(AssetModel.bulk_sequence)
        ))

    def _retire(self, model: AssetModel, actor_id: UUID | None) -> None:
        self._session.add(RetiredAssetCodeModel(
            id=uuid4(),
            code=model.code,
            asset_id=model.id,
            retired_at=self._clock.now(),
            retired_by_id=actor_id,
        ))

    def _repack_bulk_group(self, bulk_id: UUID, actor_id: UUID | None) -> None:
        remaining = self._bulk_members(bulk_id)
        for position, model in enumerate(remaining, start=1):
            model.bulk_sequence = position
            model.bulk_total_count = len(remaining)
            model.is_bulk_parent = position == 1
            model.touch(actor_id)
        logger.debug("bulk_group_repacked", extra={
            "bulk_id": str(bulk_id),
            "units": len(remaining),
        })

    @staticmethod
    def _draft_from_model(model: AssetModel) -> AssetDraft:
        return AssetDraft(
            name=model.name,
            unit=model.unit,
            category_id=model.category_id,
            acquisition_date=model.acquisition_date,
            acquisition_cost=model.acquisition_cost,
            economic_life_years=model.economic_life_months // 12,
            economic_life_extra_months=model.economic_life_months % 12,
            quantity=model.quantity,
            specification=model.specification,
            notes=model.notes,
            location_id=model.location_id,
            procurement_source=model.procurement_source,
            status=AssetStatus(model.status),
        )

    def _apply_changes(
        self,
        model: AssetModel,
        actor_id: UUID,
        changes: dict[str, Any],
    ) -> None:
        unknown = sorted(set(changes) - EDITABLE_FIELDS)
        if unknown:
            raise InvalidArgumentError("changes", unknown, "fields cannot be edited")

        draft = self._validated(replace(self._draft_from_model(model), **changes))
        if draft.category_id != model.category_id:
            if self._session.get(AssetCategoryModel, draft.category_id) is None:
                raise CategoryNotFoundError(draft.category_id)
        if draft.location_id is not None and draft.location_id != model.location_id:
            if self._session.get(LocationModel, draft.location_id) is None:
                raise LocationNotFoundError(draft.location_id)

        model.name = draft.name
        model.unit = draft.unit
        model.category_id = draft.category_id
        model.acquisition_date = draft.acquisition_date
        model.acquisition_cost = draft.acquisition_cost
        model.economic_life_months = draft.economic_life_months
        model.quantity = draft.quantity
        model.specification = draft.specification
        model.notes = draft.notes
        model.location_id = draft.location_id
        model.procurement_source = draft.procurement_source
        model.status = draft.status.value
        model.touch(actor_id)
        self._store_snapshot(model, self._snapshot(draft))
