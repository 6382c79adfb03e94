from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...infrastructure.logging_config import get_logger
from ...application.dtos import CompanyIn, CompanyOut
from ...application.services_catalog import CatalogService
from ...application.services_inventory import InventoryError
from ..errors import http_error

router = APIRouter(prefix="/company", tags=["company"])
logger = get_logger("api.companies")


@router.get("", response_model=List[CompanyOut])
def list_companies(db: Session = Depends(get_db)):
    return CatalogService(UnitOfWork(db)).list_companies()


@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(UnitOfWork(db)).get_company(company_id)
    except InventoryError as e:
        raise http_error(e)


@router.post("", response_model=CompanyOut, status_code=201)
def create_company(payload: CompanyIn, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        company = CatalogService(uow).create_company(payload.model_dump())
        uow.commit()
        return CompanyOut.model_validate(company)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error creating company: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.put("/{company_id}", response_model=CompanyOut)
def update_company(company_id: int, payload: CompanyIn, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        company = CatalogService(uow).update_company(company_id, payload.model_dump())
        uow.commit()
        return CompanyOut.model_validate(company)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error updating company %s: %s", company_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.delete("/{company_id}", status_code=204)
def delete_company(company_id: int, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        CatalogService(uow).delete_company(company_id)
        uow.commit()
        return Response(status_code=204)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error deleting company %s: %s", company_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()
