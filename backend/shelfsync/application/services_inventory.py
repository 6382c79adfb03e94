"""
Inventory Services - Quantities and Capacity
============================================

Every change to a (warehouse, item) quantity goes through
WarehouseItemService.apply_quantity_change:
- a quantity never goes below zero
- a warehouse never holds more volume than maximum_capacity_cubic_feet
- warehouse and quantity rows are read with FOR UPDATE, so concurrent
  adjustments in other transactions wait instead of overwriting each other

The services only flush; the caller owns the transaction (UnitOfWork).
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Dict, Any
import logging

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventory import Warehouse, Item, WarehouseItem

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Base exception for the inventory module"""
    pass


class NotFoundError(InventoryError):
    """A referenced item, warehouse, employee or history entry does not exist"""
    pass


class InvalidOperationError(InventoryError):
    """The operation would break an inventory rule"""
    pass


class CapacityExceededError(InvalidOperationError):
    """Adding stock would push the warehouse past its maximum volume"""

    def __init__(self, available: Decimal, needed: Decimal):
        self.available = available
        self.needed = needed
        super().__init__(
            "Adding this quantity would exceed warehouse capacity. "
            f"Available space: {available:.2f} cubic feet, needed: {needed:.2f} cubic feet"
        )


class ConflictError(InventoryError):
    """Uniqueness violation or a record still in use"""
    pass


class WarehouseItemService:
    """
    Quantity store access, capacity checks and the quantity adjuster.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _resolve_warehouse(self, warehouse_id: Optional[int], lock: bool = False) -> Warehouse:
        if warehouse_id is None:
            raise InvalidOperationError("warehouseId is required")
        warehouse = (
            self.uow.warehouses.get_for_update(warehouse_id) if lock
            else self.uow.warehouses.get(warehouse_id)
        )
        if not warehouse:
            raise NotFoundError(f"Warehouse not found: {warehouse_id}")
        return warehouse

    def _resolve_item(self, item_id: Optional[int]) -> Item:
        if item_id is None:
            raise InvalidOperationError("itemId is required")
        item = self.uow.items.get(item_id)
        if not item:
            raise NotFoundError(f"Item not found: {item_id}")
        return item

    def check_capacity(self, warehouse: Warehouse, item: Item, delta: int) -> None:
        """
        Rejects a delta that would overfill the warehouse.

        Removals never need a check. Landing exactly on the maximum is allowed.
        """
        if delta <= 0:
            return

        max_capacity = warehouse.maximum_capacity_cubic_feet
        if max_capacity is None:
            logger.warning("Warehouse %s has no maximum capacity, skipping capacity check", warehouse.id)
            return

        if item.cubic_feet is None:
            logger.warning("Item %s has no cubic_feet, skipping capacity check", item.id)
            return

        max_capacity = Decimal(str(max_capacity))
        current_used = self.uow.warehouse_items.sum_occupied_volume(warehouse.id)
        needed = Decimal(str(item.cubic_feet)) * delta
        new_used = current_used + needed

        if new_used > max_capacity:
            logger.warning(
                "Attempted to exceed warehouse capacity: warehouse_id=%s item_id=%s used=%s max=%s needed=%s new_total=%s",
                warehouse.id, item.id, current_used, max_capacity, needed, new_used
            )
            raise CapacityExceededError(available=max_capacity - current_used, needed=needed)

    def apply_quantity_change(self, warehouse_id: int, item_id: int, delta: int) -> int:
        """
        Applies a signed delta to one (warehouse, item) quantity.

        Returns the new quantity. A zero delta on a missing row creates nothing.

        Raises:
            NotFoundError: warehouse or item does not exist
            InvalidOperationError: the quantity would become negative
            CapacityExceededError: the warehouse cannot hold the added volume
        """
        logger.debug("Applying delta=%s to warehouse_id=%s item_id=%s", delta, warehouse_id, item_id)
        warehouse = self._resolve_warehouse(warehouse_id, lock=True)
        item = self._resolve_item(item_id)

        row = self.uow.warehouse_items.get_for_update(warehouse_id, item_id)
        if row is None:
            if delta < 0:
                logger.warning(
                    "Attempted to reduce quantity of a non-existent row: warehouse_id=%s item_id=%s delta=%s",
                    warehouse_id, item_id, delta
                )
                raise InvalidOperationError("Cannot reduce quantity below zero for a non-existent item")
            if delta == 0:
                return 0
            current = 0
        else:
            current = row.quantity

        new_qty = current + delta
        if new_qty < 0:
            logger.warning(
                "Attempted to reduce quantity below zero: warehouse_id=%s item_id=%s current=%s delta=%s",
                warehouse_id, item_id, current, delta
            )
            raise InvalidOperationError("Resulting quantity would be negative")

        self.check_capacity(warehouse, item, delta)

        self.uow.warehouse_items.upsert(warehouse_id, item_id, new_qty)
        logger.info(
            "Adjusted quantity warehouse_id=%s item_id=%s delta=%s new_qty=%s",
            warehouse_id, item_id, delta, new_qty
        )
        return new_qty

    def override_quantity(self, warehouse_id: int, item_id: int, quantity: int, reason: Optional[str] = None) -> int:
        """
        Administrative data repair: sets a quantity directly, outside the ledger.

        The result no longer matches the history entries for this pair.
        Non-negativity and capacity are still enforced.
        """
        if quantity is None or quantity < 0:
            raise InvalidOperationError("Quantity must be zero or greater")

        warehouse = self._resolve_warehouse(warehouse_id, lock=True)
        item = self._resolve_item(item_id)

        row = self.uow.warehouse_items.get_for_update(warehouse_id, item_id)
        current = row.quantity if row is not None else 0
        if row is None and quantity == 0:
            return 0

        self.check_capacity(warehouse, item, quantity - current)
        self.uow.warehouse_items.upsert(warehouse_id, item_id, quantity)
        logger.warning(
            "Quantity overridden outside the ledger: warehouse_id=%s item_id=%s old_qty=%s new_qty=%s reason=%r",
            warehouse_id, item_id, current, quantity, reason
        )
        return quantity

    def get_quantity(self, warehouse_id: int, item_id: int) -> WarehouseItem:
        row = self.uow.warehouse_items.get(warehouse_id, item_id)
        if row is None:
            logger.warning("WarehouseItem not found for warehouse_id=%s item_id=%s", warehouse_id, item_id)
            raise NotFoundError(f"No inventory for warehouse {warehouse_id} and item {item_id}")
        return row

    def list_quantities(self) -> List[WarehouseItem]:
        rows = self.uow.warehouse_items.list()
        logger.debug("Fetched %s warehouse item rows", len(rows))
        return rows

    def list_warehouse_inventory(self, warehouse_id: int) -> List[WarehouseItem]:
        self._resolve_warehouse(warehouse_id)
        return self.uow.warehouse_items.list_for_warehouse(warehouse_id)

    def _capacity_for(self, warehouse: Warehouse) -> Dict[str, Any]:
        max_capacity = warehouse.maximum_capacity_cubic_feet
        used = self.uow.warehouse_items.sum_occupied_volume(warehouse.id)

        if max_capacity is not None:
            max_capacity = Decimal(str(max_capacity))
            available = max_capacity - used
        else:
            available = Decimal("0")

        utilization = Decimal("0.0")
        if max_capacity is not None and max_capacity > 0:
            utilization = (used / max_capacity * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

        return {
            "warehouse_id": warehouse.id,
            "maximum_capacity_cubic_feet": max_capacity,
            "used_capacity_cubic_feet": used,
            "available_capacity_cubic_feet": available,
            "utilization_percent": utilization,
        }

    def get_capacity(self, warehouse_id: int) -> Dict[str, Any]:
        """Maximum, used and available volume of one warehouse plus utilization %."""
        warehouse = self._resolve_warehouse(warehouse_id)
        return self._capacity_for(warehouse)

    def get_all_capacities(self) -> List[Dict[str, Any]]:
        return [self._capacity_for(w) for w in self.uow.warehouses.list()]

    def search_inventory_by_item(self, q: Optional[str]) -> List[Dict[str, Any]]:
        """
        Finds items whose SKU or name contains q and reports where they are stored.

        Returns one summary per item with its total quantity and per-warehouse locations.
        """
        if q is None or not q.strip():
            raise InvalidOperationError("Search query q is required")

        rows = self.uow.warehouse_items.search_by_item(q.strip())

        summaries: Dict[int, Dict[str, Any]] = {}
        for row in rows:
            summary = summaries.get(row.item_id)
            if summary is None:
                summary = {
                    "item_id": row.item.id,
                    "sku": row.item.sku,
                    "name": row.item.name,
                    "total_quantity": 0,
                    "locations": [],
                }
                summaries[row.item_id] = summary
            summary["total_quantity"] += row.quantity or 0
            summary["locations"].append({
                "warehouse_id": row.warehouse.id,
                "warehouse_name": row.warehouse.name,
                "quantity": row.quantity,
            })

        logger.debug("Inventory search q=%r matched %s items", q, len(summaries))
        return list(summaries.values())
