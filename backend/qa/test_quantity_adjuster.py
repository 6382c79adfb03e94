"""
Tests for the quantity adjuster and capacity checker (WarehouseItemService)

Covers:
- quantities never go negative
- reductions against a missing (warehouse, item) row
- capacity boundary: exactly full passes, one unit more fails
- missing references
- administrative override
- locked reads see rows changed by other writers
"""
import logging
from decimal import Decimal

import pytest
from sqlalchemy import text

from shelfsync.application.services_inventory import (
    WarehouseItemService, NotFoundError, InvalidOperationError, CapacityExceededError
)
from shelfsync.domain.models_inventory import Warehouse, Item


class TestApplyQuantityChange:
    """Signed deltas against a single (warehouse, item) pair"""

    def test_positive_delta_creates_row(self, uow, make_warehouse, make_item, quantity_of):
        """A first increase creates the pair with that quantity"""
        w, i = make_warehouse(), make_item()
        service = WarehouseItemService(uow)

        assert service.apply_quantity_change(w, i, 4) == 4
        assert quantity_of(w, i) == 4

    def test_deltas_accumulate(self, uow, make_warehouse, make_item, quantity_of):
        w, i = make_warehouse(), make_item()
        service = WarehouseItemService(uow)

        service.apply_quantity_change(w, i, 6)
        service.apply_quantity_change(w, i, -2)
        service.apply_quantity_change(w, i, 3)

        assert quantity_of(w, i) == 7

    def test_reduce_to_exactly_zero_keeps_row(self, uow, make_warehouse, make_item, quantity_of):
        w, i = make_warehouse(), make_item()
        service = WarehouseItemService(uow)
        service.apply_quantity_change(w, i, 2)

        assert service.apply_quantity_change(w, i, -2) == 0
        assert quantity_of(w, i) == 0

    def test_negative_delta_without_row_fails(self, uow, make_warehouse, make_item, quantity_of):
        """Reducing a pair that was never stocked is rejected"""
        w, i = make_warehouse(), make_item()
        service = WarehouseItemService(uow)

        with pytest.raises(InvalidOperationError, match="non-existent item"):
            service.apply_quantity_change(w, i, -1)
        assert quantity_of(w, i) is None

    def test_zero_delta_without_row_is_noop(self, uow, make_warehouse, make_item, quantity_of):
        """delta == 0 on a missing pair creates nothing"""
        w, i = make_warehouse(), make_item()
        service = WarehouseItemService(uow)

        assert service.apply_quantity_change(w, i, 0) == 0
        assert quantity_of(w, i) is None

    def test_result_below_zero_fails(self, uow, make_warehouse, make_item, quantity_of):
        w, i = make_warehouse(), make_item()
        service = WarehouseItemService(uow)
        service.apply_quantity_change(w, i, 2)

        with pytest.raises(InvalidOperationError, match="Resulting quantity would be negative"):
            service.apply_quantity_change(w, i, -3)
        assert quantity_of(w, i) == 2

    def test_missing_warehouse(self, uow, make_item):
        service = WarehouseItemService(uow)
        with pytest.raises(NotFoundError):
            service.apply_quantity_change(999, make_item(), 1)

    def test_missing_item(self, uow, make_warehouse):
        service = WarehouseItemService(uow)
        with pytest.raises(NotFoundError):
            service.apply_quantity_change(make_warehouse(), 999, 1)


class TestCapacityCheck:
    """Volume limit: sum(quantity * cubic_feet) <= maximum capacity"""

    def test_exactly_full_succeeds(self, uow, make_warehouse, make_item, quantity_of):
        """used + needed == max is allowed"""
        w, i = make_warehouse("100"), make_item("10")
        service = WarehouseItemService(uow)

        service.apply_quantity_change(w, i, 10)
        assert quantity_of(w, i) == 10

    def test_one_unit_over_fails(self, uow, make_warehouse, make_item, quantity_of):
        w, i = make_warehouse("100"), make_item("10")
        service = WarehouseItemService(uow)
        service.apply_quantity_change(w, i, 10)

        with pytest.raises(CapacityExceededError) as exc_info:
            service.apply_quantity_change(w, i, 1)

        assert exc_info.value.available == Decimal("0")
        assert exc_info.value.needed == Decimal("10")
        assert quantity_of(w, i) == 10

    def test_capacity_error_is_invalid_operation(self, uow, make_warehouse, make_item):
        w, i = make_warehouse("5"), make_item("10")
        with pytest.raises(InvalidOperationError):
            WarehouseItemService(uow).apply_quantity_change(w, i, 1)

    def test_message_reports_volumes_without_ids(self, uow, make_warehouse, make_item):
        w, i = make_warehouse("25"), make_item("10")
        service = WarehouseItemService(uow)
        service.apply_quantity_change(w, i, 2)

        with pytest.raises(CapacityExceededError) as exc_info:
            service.apply_quantity_change(w, i, 1)

        message = str(exc_info.value)
        assert "Available space: 5.00 cubic feet, needed: 10.00 cubic feet" in message
        assert "warehouse_id" not in message

    def test_volume_of_other_items_counts(self, uow, make_warehouse, make_item):
        """Capacity is shared by every item in the warehouse"""
        w = make_warehouse("100")
        big, small = make_item("30"), make_item("1")
        service = WarehouseItemService(uow)
        service.apply_quantity_change(w, big, 3)

        service.apply_quantity_change(w, small, 10)
        with pytest.raises(CapacityExceededError):
            service.apply_quantity_change(w, small, 1)

    def test_decrease_never_checks_capacity(self, uow, make_warehouse, make_item, quantity_of):
        w, i = make_warehouse("100"), make_item("10")
        service = WarehouseItemService(uow)
        service.apply_quantity_change(w, i, 10)

        # Shrinking the limit below current use must not block removals
        warehouse = uow.warehouses.get(w)
        warehouse.maximum_capacity_cubic_feet = Decimal("10")
        uow.db.flush()

        service.apply_quantity_change(w, i, -5)
        assert quantity_of(w, i) == 5

    def test_zero_volume_item_always_fits(self, uow, make_warehouse, make_item, quantity_of):
        w, i = make_warehouse("0"), make_item("0")
        WarehouseItemService(uow).apply_quantity_change(w, i, 50)
        assert quantity_of(w, i) == 50

    def test_unset_capacity_skips_check(self, uow, make_item, caplog):
        """Legacy rows without a limit are tolerated with a warning"""
        i = make_item("10")
        warehouse = Warehouse(name="Legacy", maximum_capacity_cubic_feet=Decimal("1"))
        uow.warehouses.add(warehouse)
        uow.db.flush()
        warehouse.maximum_capacity_cubic_feet = None
        item = uow.items.get(i)
        service = WarehouseItemService(uow)

        with caplog.at_level(logging.WARNING, logger="shelfsync.application.services_inventory"):
            service.check_capacity(warehouse, item, 1000)

        assert "no maximum capacity" in caplog.text

    def test_unset_item_volume_skips_check(self, uow, make_warehouse):
        warehouse = uow.warehouses.get(make_warehouse("1"))
        item = Item(sku="LEGACY", name="Legacy", weight_lbs=Decimal("1"), cubic_feet=None)
        WarehouseItemService(uow).check_capacity(warehouse, item, 1000)


class TestOverrideQuantity:
    """Administrative data repair outside the ledger"""

    def test_sets_quantity(self, uow, make_warehouse, make_item, quantity_of):
        w, i = make_warehouse(), make_item("1")
        service = WarehouseItemService(uow)
        service.apply_quantity_change(w, i, 5)

        assert service.override_quantity(w, i, 2) == 2
        assert quantity_of(w, i) == 2

    def test_rejects_negative(self, uow, make_warehouse, make_item):
        with pytest.raises(InvalidOperationError):
            WarehouseItemService(uow).override_quantity(make_warehouse(), make_item(), -1)

    def test_still_enforces_capacity(self, uow, make_warehouse, make_item, quantity_of):
        w, i = make_warehouse("100"), make_item("10")
        service = WarehouseItemService(uow)

        with pytest.raises(CapacityExceededError):
            service.override_quantity(w, i, 11)
        assert quantity_of(w, i) is None

    def test_logs_warning(self, uow, make_warehouse, make_item, caplog):
        w, i = make_warehouse(), make_item("1")
        with caplog.at_level(logging.WARNING, logger="shelfsync.application.services_inventory"):
            WarehouseItemService(uow).override_quantity(w, i, 3, reason="cycle count")
        assert "outside the ledger" in caplog.text


class TestLockedReads:
    """Rows read under lock reflect the database, not the session's cached copy"""

    def test_capacity_check_uses_current_maximum(self, uow, make_warehouse, make_item, quantity_of):
        """A maximum lowered by another writer after the warehouse was loaded is enforced"""
        w, i = make_warehouse("100"), make_item("10")
        assert uow.warehouses.get(w).maximum_capacity_cubic_feet == Decimal("100")

        uow.db.connection().execute(
            text("UPDATE warehouses SET maximum_capacity_cubic_feet = 60 WHERE id = :id"), {"id": w}
        )

        assert uow.warehouses.get_for_update(w).maximum_capacity_cubic_feet == Decimal("60")
        with pytest.raises(CapacityExceededError):
            WarehouseItemService(uow).apply_quantity_change(w, i, 7)
        assert quantity_of(w, i) is None

    def test_reduction_uses_current_quantity(self, uow, make_warehouse, make_item, quantity_of):
        """A quantity lowered by another writer after the row was loaded blocks an over-reduction"""
        w, i = make_warehouse(), make_item("1")
        service = WarehouseItemService(uow)
        with uow.transaction():
            service.apply_quantity_change(w, i, 5)
        assert quantity_of(w, i) == 5

        uow.db.connection().execute(
            text("UPDATE warehouse_items SET quantity = 1 WHERE warehouse_id = :w AND item_id = :i"),
            {"w": w, "i": i}
        )

        with pytest.raises(InvalidOperationError):
            service.apply_quantity_change(w, i, -3)
        assert quantity_of(w, i) == 1
