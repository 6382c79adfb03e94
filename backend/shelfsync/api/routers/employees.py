import uuid
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...infrastructure.logging_config import get_logger
from ...application.dtos import EmployeeIn, EmployeeOut
from ...application.services_catalog import CatalogService
from ...application.services_inventory import InventoryError
from ..errors import http_error

router = APIRouter(prefix="/employee", tags=["employee"])
logger = get_logger("api.employees")


@router.get("", response_model=List[EmployeeOut])
def list_employees(db: Session = Depends(get_db)):
    return CatalogService(UnitOfWork(db)).list_employees()


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: uuid.UUID, db: Session = Depends(get_db)):
    try:
        return CatalogService(UnitOfWork(db)).get_employee(employee_id)
    except InventoryError as e:
        raise http_error(e)


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee(payload: EmployeeIn, db: Session = Depends(get_db)):
    """Creates an employee. Email must be unique (409)."""
    uow = UnitOfWork(db)
    try:
        employee = CatalogService(uow).create_employee(payload.model_dump())
        uow.commit()
        return EmployeeOut.model_validate(employee)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error creating employee: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(employee_id: uuid.UUID, payload: EmployeeIn, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        employee = CatalogService(uow).update_employee(employee_id, payload.model_dump())
        uow.commit()
        return EmployeeOut.model_validate(employee)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error updating employee %s: %s", employee_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()


@router.delete("/{employee_id}", status_code=204)
def delete_employee(employee_id: uuid.UUID, db: Session = Depends(get_db)):
    uow = UnitOfWork(db)
    try:
        CatalogService(uow).delete_employee(employee_id)
        uow.commit()
        return Response(status_code=204)
    except InventoryError as e:
        uow.rollback()
        raise http_error(e)
    except Exception as e:
        uow.rollback()
        logger.error("Error deleting employee %s: %s", employee_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected error")
    finally:
        uow.close()
