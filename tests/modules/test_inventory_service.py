"""
Tests for the Asset Registration Service.

Validates:
- Code allocation per scope (location, category, source, year)
- Bulk batches: contiguous sequences or suffixed child codes
- Conflict retries and exhaustion
- Explicit codes and duplicates
- Edits (immutable codes), deletions and bulk re-packing
- Depreciation snapshots and refresh
- Retired codes and the audit trail
"""

from __future__ import annotations

import gc
import inspect
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select

from inventory_engines.sequence import SequenceAllocator
from inventory_kernel.exceptions import (
    AssetCodeImmutableError,
    AssetNotFoundError,
    AssetValidationError,
    BulkGroupNotFoundError,
    CategoryNotFoundError,
    DuplicateAssetCodeError,
    InvalidArgumentError,
    LocationNotFoundError,
    SequenceAllocationConflictError,
)
from inventory_modules.assets.config import InventoryConfig
from inventory_modules.assets.models import AssetStatus, AuditAction
from inventory_modules.assets.orm import AssetModel, AuditLogModel, RetiredAssetCodeModel
from inventory_modules.assets.service import AssetRegistrationService


class StaleSnapshotAllocator(SequenceAllocator):
    """Answers the first ``stale_calls`` allocations with sequence 1."""

    def __init__(self, stale_calls: int):
        self.stale_calls = stale_calls
        self.calls = 0

    def next_sequence(self, existing_codes):
        self.calls += 1
        if self.calls <= self.stale_calls:
            return 1
        return super().next_sequence(existing_codes)


# =============================================================================
# Structural Tests
# =============================================================================


class TestAssetRegistrationServiceStructure:
    """Verify the service follows the module service pattern."""

    def test_constructor_signature(self):
        params = list(inspect.signature(AssetRegistrationService.__init__).parameters)

        assert params == ["self", "session", "config", "clock", "allocator"]

    def test_has_public_methods(self):
        for name in (
            "register_asset",
            "register_bulk_assets",
            "peek_next_sequence",
            "get_asset",
            "get_bulk_group",
            "update_asset",
            "update_bulk_group",
            "delete_asset",
            "delete_bulk_group",
            "current_depreciation",
            "depreciation_schedule",
            "refresh_depreciation_snapshots",
            "asset_history",
            "bulk_history",
            "recent_activity",
        ):
            assert callable(getattr(AssetRegistrationService, name))


# =============================================================================
# Single registration
# =============================================================================


class TestRegisterAsset:

    def test_first_asset_in_scope(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        assert asset.code == "001.10.1.24.001"
        assert asset.quantity == 1
        assert asset.bulk_id is None
        assert not asset.is_bulk_member

    def test_sequences_increase(self, service, make_draft, test_actor_id):
        codes = [service.register_asset(make_draft(), test_actor_id).code for _ in range(3)]

        assert codes == ["001.10.1.24.001", "001.10.1.24.002", "001.10.1.24.003"]

    def test_location_and_source_segments(self, service, make_draft, location, test_actor_id):
        asset = service.register_asset(
            make_draft(location_id=location.id, procurement_source="hibah"),
            test_actor_id,
        )

        assert asset.code == "002.10.3.24.001"

    def test_category_code_is_padded(
        self, service, make_draft, other_category, test_actor_id
    ):
        asset = service.register_asset(
            make_draft(category_id=other_category.id), test_actor_id,
        )

        assert asset.code == "001.07.1.24.001"

    def test_unknown_source_uses_default(self, service, make_draft, test_actor_id):
        asset = service.register_asset(
            make_draft(procurement_source="warisan"), test_actor_id,
        )

        assert asset.code.split(".")[2] == "1"

    def test_scopes_are_independent(self, service, make_draft, test_actor_id):
        service.register_asset(make_draft(), test_actor_id)
        service.register_asset(make_draft(), test_actor_id)

        other_year = service.register_asset(
            make_draft(acquisition_date=date(2023, 8, 1)), test_actor_id,
        )
        other_source = service.register_asset(
            make_draft(procurement_source="bantuan"), test_actor_id,
        )

        assert other_year.code == "001.10.1.23.001"
        assert other_source.code == "001.10.2.24.001"

    def test_deleted_sequence_not_reused(self, service, make_draft, test_actor_id):
        assets = [service.register_asset(make_draft(), test_actor_id) for _ in range(3)]
        service.delete_asset(assets[1].id)

        asset = service.register_asset(make_draft(), test_actor_id)

        assert asset.code == "001.10.1.24.004"

    def test_deleted_highest_sequence_not_reused(self, service, make_draft, test_actor_id):
        assets = [service.register_asset(make_draft(), test_actor_id) for _ in range(3)]
        service.delete_asset(assets[2].id)

        asset = service.register_asset(make_draft(), test_actor_id)

        assert asset.code == "001.10.1.24.004"
        assert service.peek_next_sequence(make_draft()) == 5

    def test_retired_explicit_code_rejected(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(code="INV/2024/77"), test_actor_id)
        service.delete_asset(asset.id, test_actor_id)

        with pytest.raises(DuplicateAssetCodeError):
            service.register_asset(make_draft(code="INV/2024/77"), test_actor_id)

    def test_legacy_codes_in_scope_ignored(
        self, service, session, make_draft, category, test_actor_id
    ):
        session.add(AssetModel(
            code="001.10.1.24.LEGACY",
            name="Legacy",
            unit="unit",
            category_id=category.id,
            acquisition_date=date(2024, 1, 1),
            acquisition_cost=Decimal("1"),
            created_by_id=test_actor_id,
        ))
        session.commit()

        asset = service.register_asset(make_draft(), test_actor_id)

        assert asset.code == "001.10.1.24.001"

    def test_depreciation_snapshot_stored(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        assert asset.economic_life_months == 48
        assert asset.accumulated_depreciation == Decimal("1250000.00")
        assert asset.book_value == Decimal("10750000.00")
        assert asset.depreciation_as_of == date(2024, 6, 15)

    def test_explicit_code_kept_verbatim(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(code="INV/2024/77"), test_actor_id)

        assert asset.code == "INV/2024/77"

    def test_duplicate_explicit_code_rejected(self, service, make_draft, test_actor_id):
        service.register_asset(make_draft(code="INV/2024/77"), test_actor_id)

        with pytest.raises(DuplicateAssetCodeError) as exc_info:
            service.register_asset(make_draft(code="INV/2024/77"), test_actor_id)

        assert exc_info.value.asset_code == "INV/2024/77"

    def test_explicit_code_advances_allocation(self, service, make_draft, test_actor_id):
        service.register_asset(make_draft(code="001.10.1.24.010"), test_actor_id)

        asset = service.register_asset(make_draft(), test_actor_id)

        assert asset.code == "001.10.1.24.011"

    def test_unknown_category(self, service, make_draft, test_actor_id):
        with pytest.raises(CategoryNotFoundError):
            service.register_asset(make_draft(category_id=uuid4()), test_actor_id)

    def test_unknown_location(self, service, make_draft, test_actor_id):
        with pytest.raises(LocationNotFoundError):
            service.register_asset(make_draft(location_id=uuid4()), test_actor_id)

    def test_invalid_draft_writes_nothing(self, service, session, make_draft, test_actor_id):
        with pytest.raises(AssetValidationError):
            service.register_asset(make_draft(name="  "), test_actor_id)

        assert session.scalars(select(AssetModel)).all() == []

    def test_registration_logged(self, service, make_draft, test_actor_id, captured_logs):
        service.register_asset(make_draft(), test_actor_id)

        records = [r for r in captured_logs() if r["message"] == "asset_registered"]
        assert len(records) == 1
        assert records[0]["asset_code"] == "001.10.1.24.001"
        assert records[0]["actor_id"] == str(test_actor_id)


class TestPeekNextSequence:

    def test_peek_does_not_write(self, service, session, make_draft, test_actor_id):
        service.register_asset(make_draft(), test_actor_id)

        assert service.peek_next_sequence(make_draft()) == 2
        assert service.peek_next_sequence(make_draft()) == 2
        assert len(session.scalars(select(AssetModel)).all()) == 1


# =============================================================================
# Global scope
# =============================================================================


class TestGlobalScope:

    def test_sequence_shared_across_scopes(
        self, session, make_draft, deterministic_clock, test_actor_id
    ):
        service = AssetRegistrationService(
            session,
            config=InventoryConfig(sequence_scope="global"),
            clock=deterministic_clock,
        )

        first = service.register_asset(make_draft(), test_actor_id)
        second = service.register_asset(
            make_draft(acquisition_date=date(2023, 2, 1)), test_actor_id,
        )

        assert first.code == "001.10.1.24.001"
        assert second.code == "001.10.1.23.002"


# =============================================================================
# Bulk registration
# =============================================================================


class TestRegisterBulkAssets:

    def test_each_unit_gets_a_sequence(self, service, make_draft, test_actor_id):
        service.register_asset(make_draft(), test_actor_id)

        assets = service.register_bulk_assets(make_draft(quantity=3), 3, test_actor_id)

        assert [a.code for a in assets] == [
            "001.10.1.24.002",
            "001.10.1.24.003",
            "001.10.1.24.004",
        ]
        assert {a.bulk_id for a in assets} == {assets[0].bulk_id}
        assert [a.bulk_sequence for a in assets] == [1, 2, 3]
        assert all(a.bulk_total_count == 3 for a in assets)
        assert [a.is_bulk_parent for a in assets] == [True, False, False]
        assert all(a.quantity == 1 for a in assets)

    def test_bulk_group_round_trip(self, service, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(), 4, test_actor_id)

        group = service.get_bulk_group(assets[0].bulk_id)

        assert group.total_count == 4
        assert group.parent.id == assets[0].id
        assert group.codes == tuple(a.code for a in assets)

    def test_suffix_style(
        self, session, make_draft, deterministic_clock, test_actor_id
    ):
        service = AssetRegistrationService(
            session,
            config=InventoryConfig(bulk_code_style="suffix"),
            clock=deterministic_clock,
        )

        assets = service.register_bulk_assets(make_draft(), 3, test_actor_id)
        following = service.register_asset(make_draft(), test_actor_id)

        assert [a.code for a in assets] == [
            "001.10.1.24.001",
            "001.10.1.24.001-002",
            "001.10.1.24.001-003",
        ]
        assert following.code == "001.10.1.24.002"

    def test_suffix_batch_after_parent_deleted(
        self, session, make_draft, deterministic_clock, test_actor_id
    ):
        service = AssetRegistrationService(
            session,
            config=InventoryConfig(bulk_code_style="suffix"),
            clock=deterministic_clock,
        )
        first = service.register_bulk_assets(make_draft(), 3, test_actor_id)
        service.delete_asset(first[0].id, test_actor_id)

        second = service.register_bulk_assets(make_draft(), 2, test_actor_id)

        assert [a.code for a in second] == ["001.10.1.24.002", "001.10.1.24.002-002"]

    def test_orphaned_suffix_children_hold_their_sequence(
        self, session, make_draft, category, deterministic_clock, test_actor_id
    ):
        session.add(AssetModel(
            code="001.10.1.24.004-002",
            name="Imported",
            unit="unit",
            category_id=category.id,
            acquisition_date=date(2024, 1, 1),
            acquisition_cost=Decimal("1"),
            created_by_id=test_actor_id,
        ))
        session.commit()
        service = AssetRegistrationService(
            session,
            config=InventoryConfig(bulk_code_style="suffix"),
            clock=deterministic_clock,
        )

        assets = service.register_bulk_assets(make_draft(), 2, test_actor_id)

        assert assets[0].code == "001.10.1.24.005"

    def test_explicit_base_code(self, service, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(code="KURSI"), 2, test_actor_id)

        assert [a.code for a in assets] == ["KURSI", "KURSI-002"]

    def test_quantity_one_is_plain_asset(self, service, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(), 1, test_actor_id)

        assert len(assets) == 1
        assert assets[0].bulk_id is None

    @pytest.mark.parametrize("quantity", [0, -3, True, 2.0])
    def test_invalid_quantity(self, service, make_draft, test_actor_id, quantity):
        with pytest.raises(InvalidArgumentError):
            service.register_bulk_assets(make_draft(), quantity, test_actor_id)

    def test_bulk_logged_with_bulk_id(self, service, make_draft, test_actor_id, captured_logs):
        assets = service.register_bulk_assets(make_draft(), 2, test_actor_id)

        records = [r for r in captured_logs() if r["message"] == "bulk_registered"]
        assert len(records) == 1
        assert records[0]["bulk_id"] == str(assets[0].bulk_id)
        assert records[0]["last_code"] == "001.10.1.24.002"

    def test_unknown_bulk_group(self, service):
        with pytest.raises(BulkGroupNotFoundError):
            service.get_bulk_group(uuid4())


# =============================================================================
# Conflicts
# =============================================================================


class TestAllocationConflicts:

    def test_conflict_is_retried(
        self, session, service, make_draft, inventory_config, deterministic_clock,
        test_actor_id, captured_logs,
    ):
        service.register_asset(make_draft(), test_actor_id)
        allocator = StaleSnapshotAllocator(stale_calls=1)
        racing = AssetRegistrationService(
            session, config=inventory_config, clock=deterministic_clock, allocator=allocator,
        )

        asset = racing.register_asset(make_draft(), test_actor_id)

        assert asset.code == "001.10.1.24.002"
        assert allocator.calls == 2
        retries = [r for r in captured_logs() if r["message"] == "asset_code_conflict_retry"]
        assert len(retries) == 1
        assert retries[0]["attempt"] == 1

    def test_conflict_exhausts_retries(
        self, session, service, make_draft, deterministic_clock, test_actor_id
    ):
        service.register_asset(make_draft(), test_actor_id)
        allocator = StaleSnapshotAllocator(stale_calls=10)
        racing = AssetRegistrationService(
            session,
            config=InventoryConfig(max_allocation_retries=2),
            clock=deterministic_clock,
            allocator=allocator,
        )

        with pytest.raises(SequenceAllocationConflictError) as exc_info:
            racing.register_asset(make_draft(), test_actor_id)

        assert exc_info.value.attempts == 2
        assert exc_info.value.scope == "001.10.1.24."
        assert allocator.calls == 2
        assert len(session.scalars(select(AssetModel)).all()) == 1


# =============================================================================
# Edits
# =============================================================================


class TestUpdateAsset:

    def test_update_fields_and_snapshot(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        updated = service.update_asset(
            asset.id,
            test_actor_id,
            name="Laptop Kantor",
            acquisition_cost=Decimal("24000000"),
            status=AssetStatus.UNDER_REPAIR,
        )

        assert updated.code == asset.code
        assert updated.name == "Laptop Kantor"
        assert updated.status is AssetStatus.UNDER_REPAIR
        assert updated.accumulated_depreciation == Decimal("2500000.00")
        assert updated.book_value == Decimal("21500000.00")

    def test_code_cannot_change(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        with pytest.raises(AssetCodeImmutableError) as exc_info:
            service.update_asset(asset.id, test_actor_id, code="001.10.1.24.999")

        assert exc_info.value.current_code == asset.code
        assert service.get_asset(asset.id).code == asset.code

    def test_same_code_is_allowed(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        updated = service.update_asset(asset.id, test_actor_id, code=asset.code, notes="ok")

        assert updated.notes == "ok"

    def test_moving_location_keeps_code(
        self, service, make_draft, location, test_actor_id
    ):
        asset = service.register_asset(make_draft(), test_actor_id)

        updated = service.update_asset(asset.id, test_actor_id, location_id=location.id)

        assert updated.location_id == location.id
        assert updated.code == "001.10.1.24.001"

    def test_unknown_field_rejected(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        with pytest.raises(InvalidArgumentError):
            service.update_asset(asset.id, test_actor_id, bulk_sequence=5)

    def test_invalid_edit_rolls_back(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        with pytest.raises(AssetValidationError):
            service.update_asset(asset.id, test_actor_id, economic_life_extra_months=12)

        assert service.get_asset(asset.id).economic_life_months == 48

    def test_unknown_asset(self, service, test_actor_id):
        with pytest.raises(AssetNotFoundError):
            service.update_asset(uuid4(), test_actor_id, name="x")

    def test_update_bulk_group(self, service, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(), 3, test_actor_id)

        group = service.update_bulk_group(
            assets[0].bulk_id, test_actor_id, status=AssetStatus.DAMAGED,
        )

        assert all(a.status is AssetStatus.DAMAGED for a in group.assets)
        assert group.codes == tuple(a.code for a in assets)

    def test_update_bulk_group_rejects_code(self, service, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(), 2, test_actor_id)

        with pytest.raises(AssetCodeImmutableError):
            service.update_bulk_group(assets[0].bulk_id, test_actor_id, code="X")


# =============================================================================
# Deletions
# =============================================================================


class TestDeletions:

    def test_delete_asset(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        service.delete_asset(asset.id)

        with pytest.raises(AssetNotFoundError):
            service.get_asset(asset.id)

    def test_delete_parent_repacks_group(self, service, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(), 3, test_actor_id)

        service.delete_asset(assets[0].id, test_actor_id)
        group = service.get_bulk_group(assets[0].bulk_id)

        assert group.total_count == 2
        assert [a.bulk_sequence for a in group.assets] == [1, 2]
        assert group.parent.id == assets[1].id
        assert group.codes == (assets[1].code, assets[2].code)

    def test_delete_last_unit_removes_group(self, service, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(), 2, test_actor_id)

        service.delete_asset(assets[0].id)
        service.delete_asset(assets[1].id)

        with pytest.raises(BulkGroupNotFoundError):
            service.get_bulk_group(assets[0].bulk_id)

    def test_delete_bulk_group(self, service, session, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(), 3, test_actor_id)

        deleted = service.delete_bulk_group(assets[0].bulk_id)

        assert deleted == 3
        assert session.scalars(select(AssetModel)).all() == []

    def test_delete_unknown_bulk_group(self, service):
        with pytest.raises(BulkGroupNotFoundError):
            service.delete_bulk_group(uuid4())

    def test_sequences_survive_group_deletion(self, service, make_draft, test_actor_id):
        assets = service.register_bulk_assets(make_draft(), 3, test_actor_id)
        service.register_asset(make_draft(), test_actor_id)
        service.delete_bulk_group(assets[0].bulk_id)

        asset = service.register_asset(make_draft(), test_actor_id)

        assert asset.code == "001.10.1.24.005"


    def test_deleted_code_is_retired(self, service, session, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        service.delete_asset(asset.id, test_actor_id)

        retired = session.scalars(select(RetiredAssetCodeModel)).one()
        assert retired.code == "001.10.1.24.001"
        assert retired.asset_id == asset.id
        assert retired.retired_by_id == test_actor_id

    def test_highest_group_deletion_keeps_sequences(
        self, service, make_draft, test_actor_id
    ):
        service.register_asset(make_draft(), test_actor_id)
        assets = service.register_bulk_assets(make_draft(), 3, test_actor_id)
        service.delete_bulk_group(assets[0].bulk_id, test_actor_id)

        asset = service.register_asset(make_draft(), test_actor_id)

        assert asset.code == "001.10.1.24.005"


# =============================================================================
# Scope locks
# =============================================================================


class TestScopeLocks:

    def test_idle_scope_lock_is_released(self, service, make_draft, test_actor_id):
        service.register_asset(make_draft(), test_actor_id)
        gc.collect()

        assert "001.10.1.24." not in AssetRegistrationService._scope_locks

    def test_held_scope_lock_is_shared(self):
        lock = AssetRegistrationService._scope_lock("001.99.1.24.")

        assert AssetRegistrationService._scope_lock("001.99.1.24.") is lock


# =============================================================================
# Audit log
# =============================================================================


class TestAuditLog:

    def test_registration_recorded(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        (entry,) = service.asset_history(asset.id)

        assert entry.action is AuditAction.CREATE
        assert entry.entity_type == "asset"
        assert entry.actor_id == test_actor_id
        assert entry.old_values is None
        assert entry.new_values["code"] == "001.10.1.24.001"
        assert entry.new_values["acquisition_cost"] == "12000000.00"
        assert entry.description == "Asset created: Laptop (001.10.1.24.001)"

    def test_update_records_changes(
        self, service, make_draft, deterministic_clock, test_actor_id
    ):
        asset = service.register_asset(make_draft(), test_actor_id)
        deterministic_clock.advance_days(1)

        service.update_asset(asset.id, test_actor_id, name="Laptop Kantor")

        created, updated = service.asset_history(asset.id)
        assert created.action is AuditAction.CREATE
        assert updated.action is AuditAction.UPDATE
        assert updated.changes["name"] == {"from": "Laptop", "to": "Laptop Kantor"}
        assert "updated_at" not in updated.changes
        assert updated.old_values["name"] == "Laptop"

    def test_deletion_recorded(
        self, service, make_draft, deterministic_clock, test_actor_id
    ):
        asset = service.register_asset(make_draft(), test_actor_id)
        deterministic_clock.advance_days(1)

        service.delete_asset(asset.id, test_actor_id)

        history = service.asset_history(asset.id)
        assert [e.action for e in history] == [AuditAction.CREATE, AuditAction.DELETE]
        assert history[-1].old_values["code"] == "001.10.1.24.001"
        assert history[-1].new_values is None

    def test_bulk_lifecycle_recorded(
        self, service, make_draft, deterministic_clock, test_actor_id
    ):
        assets = service.register_bulk_assets(make_draft(), 3, test_actor_id)
        bulk_id = assets[0].bulk_id
        deterministic_clock.advance_days(1)
        service.update_bulk_group(bulk_id, test_actor_id, name="Meja")
        deterministic_clock.advance_days(1)
        service.delete_bulk_group(bulk_id, test_actor_id)

        history = service.bulk_history(bulk_id)

        assert [e.action for e in history] == [
            AuditAction.CREATE, AuditAction.UPDATE, AuditAction.DELETE,
        ]
        assert all(e.entity_type == "asset_bulk" for e in history)
        assert history[0].new_values["bulk_count"] == 3
        assert [a["code"] for a in history[0].new_values["assets"]] == [
            a.code for a in assets
        ]
        assert history[0].description == "Bulk assets created: 3 items"
        assert history[1].changes is not None
        assert service.asset_history(assets[0].id) == ()

    def test_failed_registration_not_recorded(
        self, service, session, make_draft, test_actor_id
    ):
        with pytest.raises(AssetValidationError):
            service.register_asset(make_draft(name=""), test_actor_id)

        assert session.scalars(select(AuditLogModel)).all() == []

    def test_retried_registration_recorded_once(
        self, session, service, make_draft, inventory_config, deterministic_clock,
        test_actor_id,
    ):
        service.register_asset(make_draft(), test_actor_id)
        racing = AssetRegistrationService(
            session,
            config=inventory_config,
            clock=deterministic_clock,
            allocator=StaleSnapshotAllocator(stale_calls=1),
        )

        racing.register_asset(make_draft(), test_actor_id)

        entries = session.scalars(select(AuditLogModel)).all()
        assert len(entries) == 2
        assert sorted(e.new_values["code"] for e in entries) == [
            "001.10.1.24.001", "001.10.1.24.002",
        ]

    def test_refresh_not_recorded(
        self, service, make_draft, deterministic_clock, test_actor_id
    ):
        asset = service.register_asset(make_draft(), test_actor_id)
        deterministic_clock.advance_days(62)

        service.refresh_depreciation_snapshots(test_actor_id)

        assert len(service.asset_history(asset.id)) == 1

    def test_recent_activity_newest_first(
        self, service, make_draft, deterministic_clock, test_actor_id
    ):
        first = service.register_asset(make_draft(), test_actor_id)
        deterministic_clock.advance_days(1)
        second = service.register_asset(make_draft(), test_actor_id)

        recent = service.recent_activity(limit=1)

        assert [e.entity_id for e in recent] == [second.id]
        assert len(service.recent_activity()) == 2
        assert first.id in {e.entity_id for e in service.recent_activity()}


# =============================================================================
# Depreciation
# =============================================================================


class TestDepreciation:

    def test_current_depreciation_follows_clock(
        self, service, make_draft, deterministic_clock, test_actor_id
    ):
        asset = service.register_asset(make_draft(), test_actor_id)
        deterministic_clock.advance_days(31)

        result = service.current_depreciation(asset.id)

        assert result.elapsed_months == 6
        assert result.accumulated_depreciation == Decimal("1500000.00")
        assert service.get_asset(asset.id).accumulated_depreciation == Decimal("1250000.00")

    def test_refresh_snapshots(
        self, service, make_draft, deterministic_clock, test_actor_id
    ):
        asset = service.register_asset(make_draft(), test_actor_id)
        service.register_asset(make_draft(economic_life_years=0), test_actor_id)
        deterministic_clock.advance_days(62)

        updated = service.refresh_depreciation_snapshots(test_actor_id)

        refreshed = service.get_asset(asset.id)
        assert updated == 2
        assert refreshed.accumulated_depreciation == Decimal("1750000.00")
        assert refreshed.depreciation_as_of == date(2024, 8, 16)

    def test_refresh_is_idempotent(self, service, make_draft, test_actor_id):
        service.register_asset(make_draft(), test_actor_id)

        assert service.refresh_depreciation_snapshots(test_actor_id) == 0

    def test_schedule(self, service, make_draft, test_actor_id):
        asset = service.register_asset(make_draft(), test_actor_id)

        schedule = service.depreciation_schedule(asset.id)

        assert len(schedule) == 6
        assert schedule[-1].accumulated_depreciation == Decimal("1250000.00")
