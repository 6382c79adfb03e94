from datetime import datetime
from decimal import Decimal
from typing import Optional
import uuid
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload
from ..domain.models import Company, Category, Employee
from ..domain.models_inventory import Warehouse, Item, WarehouseItem, InventoryHistory


class CompanyRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, c: Company): self.db.add(c); return c
    def get(self, id: int): return self.db.get(Company, id)
    def list(self): return self.db.query(Company).order_by(Company.id).all()


class CategoryRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, c: Category): self.db.add(c); return c
    def get(self, id: int): return self.db.get(Category, id)
    def list(self): return self.db.query(Category).order_by(Category.name).all()
    def by_name(self, name: str):
        return self.db.query(Category).filter(Category.name == name).first()


class EmployeeRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, e: Employee): self.db.add(e); return e
    def get(self, id: uuid.UUID): return self.db.get(Employee, id)
    def list(self): return self.db.query(Employee).order_by(Employee.last_name, Employee.first_name).all()
    def by_email(self, email: str):
        return self.db.query(Employee).filter(Employee.email == email).first()
    def exists_for_warehouse(self, warehouse_id: int) -> bool:
        return self.db.query(Employee).filter(Employee.assigned_warehouse_id == warehouse_id).first() is not None


class WarehouseRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, w: Warehouse): self.db.add(w); return w
    def get(self, id: int): return self.db.get(Warehouse, id)
    def get_for_update(self, id: int):
        # Serializes capacity checks of concurrent adjustments on the same warehouse
        return self.db.query(Warehouse).filter(Warehouse.id == id).with_for_update().populate_existing().first()
    def list(self): return self.db.query(Warehouse).order_by(Warehouse.id).all()
    def managed_by(self, employee_id: uuid.UUID):
        return self.db.query(Warehouse).filter(Warehouse.manager_employee_id == employee_id).first()


class ItemRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, i: Item): self.db.add(i); return i
    def get(self, id: int): return self.db.get(Item, id)
    def list(self): return self.db.query(Item).order_by(Item.sku).all()
    def by_sku(self, sku: str):
        return self.db.query(Item).filter(Item.sku == sku).first()
    def exists_for_company(self, company_id: int) -> bool:
        return self.db.query(Item).filter(Item.company_id == company_id).first() is not None
    def exists_for_category(self, category_id: int) -> bool:
        return self.db.query(Item).filter(Item.category_id == category_id).first() is not None


class WarehouseItemRepository:
    """Quantity store: one row per (warehouse, item). No business rules here."""

    def __init__(self, db: Session): self.db = db

    def get(self, warehouse_id: int, item_id: int) -> Optional[WarehouseItem]:
        return self.db.get(WarehouseItem, (warehouse_id, item_id))

    def get_for_update(self, warehouse_id: int, item_id: int) -> Optional[WarehouseItem]:
        return self.db.query(WarehouseItem).filter(
            WarehouseItem.warehouse_id == warehouse_id,
            WarehouseItem.item_id == item_id
        ).with_for_update().populate_existing().first()

    def upsert(self, warehouse_id: int, item_id: int, quantity: int) -> WarehouseItem:
        row = self.get(warehouse_id, item_id)
        if row is None:
            row = WarehouseItem(warehouse_id=warehouse_id, item_id=item_id, quantity=quantity)
            self.db.add(row)
        else:
            row.quantity = quantity
        self.db.flush()
        return row

    def sum_occupied_volume(self, warehouse_id: int) -> Decimal:
        total = self.db.query(
            func.sum(WarehouseItem.quantity * Item.cubic_feet)
        ).join(Item, Item.id == WarehouseItem.item_id).filter(
            WarehouseItem.warehouse_id == warehouse_id
        ).scalar()
        return Decimal(str(total or 0))

    def list(self):
        return self.db.query(WarehouseItem).options(
            joinedload(WarehouseItem.warehouse),
            joinedload(WarehouseItem.item)
        ).order_by(WarehouseItem.warehouse_id, WarehouseItem.item_id).all()

    def list_for_warehouse(self, warehouse_id: int):
        return self.db.query(WarehouseItem).options(
            joinedload(WarehouseItem.item)
        ).filter(WarehouseItem.warehouse_id == warehouse_id).order_by(WarehouseItem.item_id).all()

    def list_for_item(self, item_id: int):
        return self.db.query(WarehouseItem).filter(WarehouseItem.item_id == item_id).all()

    def search_by_item(self, text: str):
        pattern = f"%{text.lower()}%"
        return self.db.query(WarehouseItem).join(Item, Item.id == WarehouseItem.item_id).options(
            joinedload(WarehouseItem.warehouse),
            joinedload(WarehouseItem.item)
        ).filter(
            or_(func.lower(Item.sku).like(pattern), func.lower(Item.name).like(pattern))
        ).order_by(Item.sku, WarehouseItem.warehouse_id).all()

    def exists_for_item(self, item_id: int) -> bool:
        return self.db.query(WarehouseItem).filter(WarehouseItem.item_id == item_id).first() is not None

    def exists_for_warehouse(self, warehouse_id: int) -> bool:
        return self.db.query(WarehouseItem).filter(WarehouseItem.warehouse_id == warehouse_id).first() is not None


class InventoryHistoryRepository:
    def __init__(self, db: Session): self.db = db

    def add(self, h: InventoryHistory):
        self.db.add(h)
        self.db.flush()
        return h

    def get(self, id: int): return self.db.get(InventoryHistory, id)

    def delete(self, h: InventoryHistory):
        self.db.delete(h)
        self.db.flush()

    def list(self):
        return self.db.query(InventoryHistory).order_by(
            InventoryHistory.occurred_at.desc(), InventoryHistory.id.desc()
        ).all()

    def by_warehouse_and_date_range(
        self,
        warehouse_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ):
        query = self.db.query(InventoryHistory).filter(
            or_(
                InventoryHistory.from_warehouse_id == warehouse_id,
                InventoryHistory.to_warehouse_id == warehouse_id
            )
        )
        if start is not None:
            query = query.filter(InventoryHistory.occurred_at >= start)
        if end is not None:
            query = query.filter(InventoryHistory.occurred_at <= end)
        return query.order_by(InventoryHistory.occurred_at.desc(), InventoryHistory.id.desc()).all()

    def most_recent(self, limit: int):
        return self.db.query(InventoryHistory).order_by(
            InventoryHistory.occurred_at.desc(), InventoryHistory.id.desc()
        ).limit(limit).all()

    def exists_for_item(self, item_id: int) -> bool:
        return self.db.query(InventoryHistory).filter(InventoryHistory.item_id == item_id).first() is not None

    def exists_for_warehouse(self, warehouse_id: int) -> bool:
        return self.db.query(InventoryHistory).filter(
            or_(
                InventoryHistory.from_warehouse_id == warehouse_id,
                InventoryHistory.to_warehouse_id == warehouse_id
            )
        ).first() is not None

    def exists_for_employee(self, employee_id: uuid.UUID) -> bool:
        return self.db.query(InventoryHistory).filter(
            InventoryHistory.performed_by_employee_id == employee_id
        ).first() is not None
