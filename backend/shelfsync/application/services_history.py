"""
Inventory History Service - Ledger Manager
==========================================

The history table is the source of truth; warehouse_items quantities are
kept in step with it:
- create: persist the entry, then apply its effect (+1)
- update: reverse the old effect (-1), set the new values, apply again (+1)
- delete: reverse the effect (-1), then remove the entry

The effect of an entry is driven only by which warehouses it names:
the source loses quantity_change units, the destination gains them.
Everything runs in the caller's transaction; any failure rolls back
both the entry and the quantities.
"""
from datetime import datetime, timezone
from typing import Optional, List, Union
import logging
import uuid

from ..config import settings as default_settings
from ..domain.enums import TransactionType
from ..domain.models_inventory import InventoryHistory, Item, Warehouse, utcnow
from ..domain.models import Employee
from ..infrastructure.unit_of_work import UnitOfWork
from .services_inventory import (
    WarehouseItemService, NotFoundError, InvalidOperationError
)

logger = logging.getLogger(__name__)

REVERSE = -1
FORWARD = 1


def to_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; aware values are converted, naive ones taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class InventoryHistoryService:
    """
    Ledger of inventory movements.
    """

    def __init__(self, uow: UnitOfWork, settings=None):
        self.uow = uow
        self.settings = settings or default_settings
        self.warehouse_items = WarehouseItemService(uow)

    def _resolve_item(self, item_id: Optional[int]) -> Item:
        if item_id is None:
            raise InvalidOperationError("itemId is required")
        item = self.uow.items.get(item_id)
        if not item:
            logger.warning("History references missing item_id=%s", item_id)
            raise NotFoundError(f"Item not found: {item_id}")
        return item

    def _resolve_warehouse(self, warehouse_id: Optional[int], label: str) -> Optional[Warehouse]:
        if warehouse_id is None:
            return None
        warehouse = self.uow.warehouses.get(warehouse_id)
        if not warehouse:
            logger.warning("History references missing %s warehouse_id=%s", label.lower(), warehouse_id)
            raise NotFoundError(f"{label} warehouse not found: {warehouse_id}")
        return warehouse

    def _resolve_employee(self, employee_id: Optional[Union[uuid.UUID, str]]) -> Optional[Employee]:
        if employee_id is None:
            return None
        if isinstance(employee_id, str):
            try:
                employee_id = uuid.UUID(employee_id)
            except ValueError:
                raise InvalidOperationError(f"Invalid employee id: {employee_id}")
        employee = self.uow.employees.get(employee_id)
        if not employee:
            logger.warning("History references missing employee_id=%s", employee_id)
            raise NotFoundError(f"Employee not found: {employee_id}")
        return employee

    def _validate_movement(
        self,
        quantity_change: Optional[int],
        transaction_type: Union[TransactionType, str, None],
        from_warehouse_id: Optional[int],
        to_warehouse_id: Optional[int]
    ) -> TransactionType:
        if quantity_change is None or quantity_change <= 0:
            raise InvalidOperationError("quantityChange must be greater than zero")
        if transaction_type is None:
            raise InvalidOperationError("transactionType is required")
        try:
            tx_type = TransactionType(transaction_type)
        except ValueError:
            raise InvalidOperationError(f"Unknown transaction type: {transaction_type}")
        error = tx_type.shape_error(from_warehouse_id, to_warehouse_id)
        if error:
            raise InvalidOperationError(error)
        return tx_type

    def apply_history_to_warehouse_items(self, history: InventoryHistory, direction: int) -> None:
        """
        Applies (direction=+1) or reverses (direction=-1) the effect of an entry.

        Source warehouse gets -quantity_change*direction, destination +quantity_change*direction.
        """
        if history.item_id is None or not history.quantity_change:
            logger.debug("History %s has no item or quantity, nothing to apply", history.id)
            return

        signed_delta = history.quantity_change * direction

        # Lock both warehouses in id order so opposite transfers cannot deadlock
        touched = {w for w in (history.from_warehouse_id, history.to_warehouse_id) if w is not None}
        for warehouse_id in sorted(touched):
            self.uow.warehouses.get_for_update(warehouse_id)

        if history.from_warehouse_id is not None:
            self.warehouse_items.apply_quantity_change(history.from_warehouse_id, history.item_id, -signed_delta)
        if history.to_warehouse_id is not None:
            self.warehouse_items.apply_quantity_change(history.to_warehouse_id, history.item_id, signed_delta)

        logger.debug(
            "Applied history %s direction=%s delta=%s from=%s to=%s",
            history.id, direction, signed_delta, history.from_warehouse_id, history.to_warehouse_id
        )

    def create(
        self,
        *,
        item_id: Optional[int],
        quantity_change: Optional[int],
        transaction_type: Union[TransactionType, str, None],
        from_warehouse_id: Optional[int] = None,
        to_warehouse_id: Optional[int] = None,
        reason: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
        performed_by_employee_id: Optional[Union[uuid.UUID, str]] = None
    ) -> InventoryHistory:
        """
        Records a movement and applies it to the warehouse quantities.

        Raises:
            InvalidOperationError: missing item, bad shape, negative result
            NotFoundError: item, warehouse or employee does not exist
            CapacityExceededError: destination cannot hold the units
        """
        logger.debug(
            "Creating history item_id=%s from=%s to=%s qty=%s type=%s",
            item_id, from_warehouse_id, to_warehouse_id, quantity_change, transaction_type
        )
        item = self._resolve_item(item_id)
        tx_type = self._validate_movement(quantity_change, transaction_type, from_warehouse_id, to_warehouse_id)
        from_warehouse = self._resolve_warehouse(from_warehouse_id, "From")
        to_warehouse = self._resolve_warehouse(to_warehouse_id, "To")
        employee = self._resolve_employee(performed_by_employee_id)

        history = InventoryHistory(
            item_id=item.id,
            from_warehouse_id=from_warehouse.id if from_warehouse else None,
            to_warehouse_id=to_warehouse.id if to_warehouse else None,
            quantity_change=quantity_change,
            transaction_type=tx_type.value,
            reason=reason,
            occurred_at=to_utc_naive(occurred_at) or utcnow(),
            performed_by_employee_id=employee.id if employee else None,
        )
        self.uow.history.add(history)

        self.apply_history_to_warehouse_items(history, FORWARD)

        logger.info(
            "Created history id=%s type=%s item_id=%s qty=%s",
            history.id, history.transaction_type, history.item_id, history.quantity_change
        )
        return history

    def update(
        self,
        history_id: int,
        *,
        item_id: Optional[int],
        quantity_change: Optional[int],
        transaction_type: Union[TransactionType, str, None],
        from_warehouse_id: Optional[int] = None,
        to_warehouse_id: Optional[int] = None,
        reason: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
        performed_by_employee_id: Optional[Union[uuid.UUID, str]] = None
    ) -> InventoryHistory:
        """
        Replaces an entry: undo the old effect, then apply the new one.

        Net quantities match deleting the old entry and creating the new one.
        An absent occurred_at keeps the original timestamp.
        """
        existing = self.uow.history.get(history_id)
        if not existing:
            raise NotFoundError(f"Inventory history not found: {history_id}")

        # All references resolve before anything is touched
        item = self._resolve_item(item_id)
        tx_type = self._validate_movement(quantity_change, transaction_type, from_warehouse_id, to_warehouse_id)
        from_warehouse = self._resolve_warehouse(from_warehouse_id, "From")
        to_warehouse = self._resolve_warehouse(to_warehouse_id, "To")
        employee = self._resolve_employee(performed_by_employee_id)

        logger.debug(
            "Updating history id=%s old(from=%s to=%s qty=%s) new(from=%s to=%s qty=%s)",
            history_id, existing.from_warehouse_id, existing.to_warehouse_id, existing.quantity_change,
            from_warehouse_id, to_warehouse_id, quantity_change
        )

        self.apply_history_to_warehouse_items(existing, REVERSE)

        existing.item_id = item.id
        existing.from_warehouse_id = from_warehouse.id if from_warehouse else None
        existing.to_warehouse_id = to_warehouse.id if to_warehouse else None
        existing.quantity_change = quantity_change
        existing.transaction_type = tx_type.value
        existing.reason = reason
        if occurred_at is not None:
            existing.occurred_at = to_utc_naive(occurred_at)
        existing.performed_by_employee_id = employee.id if employee else None
        self.uow.db.flush()
        self.uow.db.expire(existing, ["item", "from_warehouse", "to_warehouse", "performed_by"])

        self.apply_history_to_warehouse_items(existing, FORWARD)

        logger.info("Updated history id=%s", history_id)
        return existing

    def delete(self, history_id: int) -> None:
        """Reverses the entry's effect and removes it."""
        existing = self.uow.history.get(history_id)
        if not existing:
            raise NotFoundError(f"Inventory history not found: {history_id}")

        self.apply_history_to_warehouse_items(existing, REVERSE)
        self.uow.history.delete(existing)
        logger.info("Deleted history id=%s", history_id)

    def find_all(self) -> List[InventoryHistory]:
        return self.uow.history.list()

    def find_by_id(self, history_id: int) -> InventoryHistory:
        history = self.uow.history.get(history_id)
        if not history:
            raise NotFoundError(f"Inventory history not found: {history_id}")
        return history

    def find_by_warehouse_and_date_range(
        self,
        warehouse_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[InventoryHistory]:
        """Entries where the warehouse is source or destination, bounds inclusive, newest first."""
        start = to_utc_naive(start)
        end = to_utc_naive(end)
        if start is not None and end is not None and start > end:
            raise InvalidOperationError("start must not be after end")
        return self.uow.history.by_warehouse_and_date_range(warehouse_id, start, end)

    def find_recent_activities(self) -> List[InventoryHistory]:
        return self.uow.history.most_recent(self.settings.recent_activity_limit)
