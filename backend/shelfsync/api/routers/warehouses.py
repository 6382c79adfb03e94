from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...infrastructure.logging_config import get_logger
from ...application.dtos import WarehouseIn, WarehouseOut, WarehouseCapacityOut, WarehouseItemOut
from ...application.services_catalog import CatalogService
from ...application.services_inventory import WarehouseItemService, InventoryError
from ..errors import http_error

router = APIRouter(prefix="/warehouse", tags=["warehouse"])
logger = get_logger("api.warehouses")


@router.get("", response_model=List[WarehouseOut])
def list_warehouses(db: Session = Depends(get_db)):
    return CatalogService(UnitOfWork(db)).list_warehouses()


@router.get("/capacity", response_model=List[WarehouseCapacityOut])
def all_capacities(db: Session = Depends(get_db)):
    """Capacity report for every warehouse."""
    service = WarehouseItemService(UnitOfWork(db))
    return [WarehouseCapacityOut(**c) for c in service.get_all_capacities()]


@router.get("/{warehouse_id}", response_model=WarehouseOut)
def get_warehouse(warehouse_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(UnitOfWork(db)).get_warehouse(warehouse_id)
    except InventoryError as e:
        raise http_error(e)


@router.get("/{warehouse_id}/capacity", response_model=WarehouseCapacityOut)
def warehouse_capacity(warehouse_id: int, db: Session = Depends(get_db)):
    """Maximum, used and available cubic feet plus utilization percent."""
    try:
        capacity = WarehouseItemService(UnitOfWork(db)).get_capacity(warehouse_id)
    except InventoryError as e:
        raise http_error(e)
    return WarehouseCapacityOut(**capacity)


@router.get("/{warehouse_id}/items", response_model=List[WarehouseItemOut])
def warehouse_items(warehouse_id: int, db: Session = Depends(get_db)):
    try:
        rows = WarehouseItemService(UnitOfWork(db)).list_warehouse_inventory(warehouse_id)
    except InventoryError as e:
        raise http_error(e)
    return [
        WarehouseItemOut(
            warehouse_id=r.warehouse_id,
            warehouse_name=r.warehouse.name,
            item_id=r.item_id,
            item_sku=r.item.sku,
            item_name=r.item.name,
            quantity=r.quantity,
        )
        for r in rows
    ]


@router.post("", response_model=WarehouseOut, status_code=201)
def create_warehouse(payload: WarehouseIn, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        warehouse = CatalogService(uow).create_warehouse(payload.model_dump())
        uow.commit()
        return WarehouseOut.model_validate(warehouse)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error creating warehouse: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.put("/{warehouse_id}", response_model=WarehouseOut)
def update_warehouse(warehouse_id: int, payload: WarehouseIn, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        warehouse = CatalogService(uow).update_warehouse(warehouse_id, payload.model_dump())
        uow.commit()
        return WarehouseOut.model_validate(warehouse)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error updating warehouse %s: %s", warehouse_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.delete("/{warehouse_id}", status_code=204)
def delete_warehouse(warehouse_id: int, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        CatalogService(uow).delete_warehouse(warehouse_id)
        uow.commit()
        return Response(status_code=204)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error deleting warehouse %s: %s", warehouse_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()
