"""
Warehouse quantities (read-only apart from the administrative override).

Normal stock changes go through /inventory-history.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...infrastructure.logging_config import get_logger
from ...application.dtos import WarehouseItemOut, QuantityOverrideIn
from ...application.services_inventory import WarehouseItemService, InventoryError
from ...domain.models_inventory import WarehouseItem
from ..errors import http_error

router = APIRouter(prefix="/warehouse-item", tags=["warehouse-item"])
logger = get_logger("api.warehouse_items")


def warehouse_item_out(row: WarehouseItem) -> WarehouseItemOut:
    return WarehouseItemOut(
        warehouse_id=row.warehouse_id,
        warehouse_name=row.warehouse.name if row.warehouse else None,
        item_id=row.item_id,
        item_sku=row.item.sku if row.item else None,
        item_name=row.item.name if row.item else None,
        quantity=row.quantity,
    )


@router.get("", response_model=List[WarehouseItemOut])
def list_warehouse_items(db: Session = Depends(get_db)):
    service = WarehouseItemService(UnitOfWork(db))
    return [warehouse_item_out(r) for r in service.list_quantities()]


@router.get("/{warehouse_id}/{item_id}", response_model=WarehouseItemOut)
def get_warehouse_item(warehouse_id: int, item_id: int, db: Session = Depends(get_db)):
    try:
        row = WarehouseItemService(UnitOfWork(db)).get_quantity(warehouse_id, item_id)
    except InventoryError as e:
        raise http_error(e)
    return warehouse_item_out(row)


@router.put("/{warehouse_id}/{item_id}", response_model=WarehouseItemOut)
def override_warehouse_item(
    warehouse_id: int,
    item_id: int,
    payload: QuantityOverrideIn,
    db: Session = Depends(get_db)
):
    """
    Administrative correction: sets the quantity directly, bypassing the ledger.

    The stored quantity will no longer match the inventory history for this pair.
    Capacity is still enforced.
    """
    uow = UnitOfWork(db)
    try:
        service = WarehouseItemService(uow)
        service.override_quantity(warehouse_id, item_id, payload.quantity, payload.reason)
        uow.commit()
        row = uow.warehouse_items.get(warehouse_id, item_id)
        if row is None:
            return WarehouseItemOut(warehouse_id=warehouse_id, item_id=item_id, quantity=0)
        return warehouse_item_out(row)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error overriding quantity %s/%s: %s", warehouse_id, item_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()
