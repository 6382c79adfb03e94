"""
Inventory History API
=====================

Ledger of inventory movements. Creating, updating or deleting an entry
adjusts the warehouse quantities in the same transaction.
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...infrastructure.logging_config import get_logger
from ...application.dtos import InventoryHistoryIn, InventoryHistoryOut
from ...application.services_history import InventoryHistoryService
from ...application.services_inventory import InventoryError
from ...domain.models_inventory import InventoryHistory
from ..errors import http_error

router = APIRouter(prefix="/inventory-history", tags=["inventory-history"])
logger = get_logger("api.inventory_history")


def history_out(entry: InventoryHistory) -> InventoryHistoryOut:
    employee = entry.performed_by
    return InventoryHistoryOut(
        id=entry.id,
        item_id=entry.item_id,
        item_sku=entry.item.sku if entry.item else None,
        item_name=entry.item.name if entry.item else None,
        from_warehouse_id=entry.from_warehouse_id,
        from_warehouse_name=entry.from_warehouse.name if entry.from_warehouse else None,
        to_warehouse_id=entry.to_warehouse_id,
        to_warehouse_name=entry.to_warehouse.name if entry.to_warehouse else None,
        quantity_change=entry.quantity_change,
        transaction_type=entry.transaction_type,
        reason=entry.reason,
        occurred_at=entry.occurred_at,
        performed_by_employee_id=entry.performed_by_employee_id,
        performed_by_name=f"{employee.first_name} {employee.last_name}" if employee else None,
    )


@router.post("", response_model=InventoryHistoryOut, status_code=201)
def create_history(payload: InventoryHistoryIn, db: Session = Depends(get_db)):
    """
    Records a movement and applies it to warehouse quantities.

    - toWarehouseId only: stock received
    - fromWarehouseId only: stock shipped
    - both: stock transferred
    """
    uow = UnitOfWork(db)
    try:
        service = InventoryHistoryService(uow)
        entry = service.create(**payload.model_dump())
        uow.commit()
        return history_out(entry)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except IntegrityError as e:
        uow.rollback()
        logger.warning("Integrity error creating inventory history: %s", e)
        raise HTTPException(status_code=409, detail="Conflicting inventory data, retry the request")
    except Exception as e:
        uow.rollback()
        logger.error("Error creating inventory history: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.get("", response_model=List[InventoryHistoryOut])
def list_history(db: Session = Depends(get_db)):
    service = InventoryHistoryService(UnitOfWork(db))
    return [history_out(h) for h in service.find_all()]


@router.get("/recent", response_model=List[InventoryHistoryOut])
def recent_activity(db: Session = Depends(get_db)):
    """Most recent movements system-wide, newest first."""
    service = InventoryHistoryService(UnitOfWork(db))
    return [history_out(h) for h in service.find_recent_activities()]


@router.get("/warehouse/{warehouse_id}", response_model=List[InventoryHistoryOut])
def history_for_warehouse(
    warehouse_id: int,
    start: Optional[datetime] = Query(default=None, description="Inclusive lower bound (ISO-8601)"),
    end: Optional[datetime] = Query(default=None, description="Inclusive upper bound (ISO-8601)"),
    db: Session = Depends(get_db)
):
    """Movements where the warehouse is source or destination, newest first."""
    service = InventoryHistoryService(UnitOfWork(db))
    try:
        entries = service.find_by_warehouse_and_date_range(warehouse_id, start, end)
    except InventoryError as e:
        raise http_error(e)
    return [history_out(h) for h in entries]


@router.get("/{history_id}", response_model=InventoryHistoryOut)
def get_history(history_id: int, db: Session = Depends(get_db)):
    service = InventoryHistoryService(UnitOfWork(db))
    try:
        entry = service.find_by_id(history_id)
    except InventoryError as e:
        raise http_error(e)
    return history_out(entry)


@router.put("/{history_id}", response_model=InventoryHistoryOut)
def update_history(history_id: int, payload: InventoryHistoryIn, db: Session = Depends(get_db)):
    """Replaces a movement: its old effect is undone and the new one applied."""
    uow = UnitOfWork(db)
    try:
        service = InventoryHistoryService(uow)
        entry = service.update(history_id, **payload.model_dump())
        uow.commit()
        return history_out(entry)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except IntegrityError as e:
        uow.rollback()
        logger.warning("Integrity error updating inventory history %s: %s", history_id, e)
        raise HTTPException(status_code=409, detail="Conflicting inventory data, retry the request")
    except Exception as e:
        uow.rollback()
        logger.error("Error updating inventory history %s: %s", history_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.delete("/{history_id}", status_code=204)
def delete_history(history_id: int, db: Session = Depends(get_db)):
    """Removes a movement and reverses its effect on quantities."""
    uow = UnitOfWork(db)
    try:
        service = InventoryHistoryService(uow)
        service.delete(history_id)
        uow.commit()
        return Response(status_code=204)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error deleting inventory history %s: %s", history_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()
