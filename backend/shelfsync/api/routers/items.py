from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...infrastructure.logging_config import get_logger
from ...application.dtos import ItemIn, ItemOut
from ...application.services_catalog import CatalogService
from ...application.services_inventory import InventoryError
from ..errors import http_error

router = APIRouter(prefix="/item", tags=["item"])
logger = get_logger("api.items")


@router.get("", response_model=List[ItemOut])
def list_items(db: Session = Depends(get_db)):
    return CatalogService(UnitOfWork(db)).list_items()


@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(UnitOfWork(db)).get_item(item_id)
    except InventoryError as e:
        raise http_error(e)


@router.post("", response_model=ItemOut, status_code=201)
def create_item(payload: ItemIn, db: Session = Depends(get_db)):
    """Creates an item. SKU must be unique (409)."""
    uow = UnitOfWork(db)
    try:
        item = CatalogService(uow).create_item(payload.model_dump())
        uow.commit()
        return ItemOut.model_validate(item)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error creating item: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.put("/{item_id}", response_model=ItemOut)
def update_item(item_id: int, payload: ItemIn, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        item = CatalogService(uow).update_item(item_id, payload.model_dump())
        uow.commit()
        return ItemOut.model_validate(item)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error updating item %s: %s", item_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.delete("/{item_id}", status_code=204)
def delete_item(item_id: int, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        CatalogService(uow).delete_item(item_id)
        uow.commit()
        return Response(status_code=204)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error deleting item %s: %s", item_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()
