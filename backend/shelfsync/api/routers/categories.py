from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...infrastructure.logging_config import get_logger
from ...application.dtos import CategoryIn, CategoryOut
from ...application.services_catalog import CatalogService
from ...application.services_inventory import InventoryError
from ..errors import http_error

router = APIRouter(prefix="/category", tags=["category"])
logger = get_logger("api.categories")


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(UnitOfWork(db)).list_categories()


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(UnitOfWork(db)).get_category(category_id)
    except InventoryError as e:
        raise http_error(e)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        category = CatalogService(uow).create_category(payload.model_dump())
        uow.commit()
        return CategoryOut.model_validate(category)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error creating category: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryIn, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        category = CatalogService(uow).update_category(category_id, payload.model_dump())
        uow.commit()
        return CategoryOut.model_validate(category)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error updating category %s: %s", category_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        CatalogService(uow).delete_category(category_id)
        uow.commit()
        return Response(status_code=204)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error deleting category %s: %s", category_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()
