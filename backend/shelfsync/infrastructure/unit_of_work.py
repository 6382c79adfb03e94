from contextlib import contextmanager
from sqlalchemy.orm import Session
from ..db import SessionLocal
from .repositories import (
    CompanyRepository, CategoryRepository, EmployeeRepository, WarehouseRepository,
    ItemRepository, WarehouseItemRepository, InventoryHistoryRepository
)


class UnitOfWork:
    def __init__(self, db: Session = None):
        self.db: Session = db if db is not None else SessionLocal()
        self.companies = CompanyRepository(self.db)
        self.categories = CategoryRepository(self.db)
        self.employees = EmployeeRepository(self.db)
        self.warehouses = WarehouseRepository(self.db)
        self.items = ItemRepository(self.db)
        self.warehouse_items = WarehouseItemRepository(self.db)
        self.history = InventoryHistoryRepository(self.db)

    def commit(self): self.db.commit()
    def rollback(self): self.db.rollback()
    def close(self): self.db.close()

    @contextmanager
    def transaction(self):
        """Commits on success, rolls back everything on any error.

        The session stays open so results can still be read afterwards;
        whoever created it closes it.
        """
        try:
            yield self
            self.commit()
        except Exception:
            self.rollback()
            raise
