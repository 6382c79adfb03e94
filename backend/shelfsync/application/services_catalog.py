"""
Master data: companies, categories, employees, warehouses and items.

Thin CRUD around the inventory core. Uniqueness and in-use checks raise
ConflictError; dangling references raise NotFoundError.
"""
from decimal import Decimal
from typing import Any, Dict, List
import logging
import uuid

from ..domain.models import Company, Category, Employee
from ..domain.models_inventory import Warehouse, Item
from ..infrastructure.unit_of_work import UnitOfWork
from .services_inventory import NotFoundError, InvalidOperationError, ConflictError

logger = logging.getLogger(__name__)


def _assign(obj, data: Dict[str, Any]):
    for key, value in data.items():
        setattr(obj, key, value)
    return obj


class CatalogService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    # ===== COMPANIES =====

    def list_companies(self) -> List[Company]:
        return self.uow.companies.list()

    def get_company(self, company_id: int) -> Company:
        company = self.uow.companies.get(company_id)
        if not company:
            raise NotFoundError(f"Company not found: {company_id}")
        return company

    def create_company(self, data: Dict[str, Any]) -> Company:
        company = self.uow.companies.add(_assign(Company(), data))
        self.uow.db.flush()
        logger.info("Created company id=%s", company.id)
        return company

    def update_company(self, company_id: int, data: Dict[str, Any]) -> Company:
        company = _assign(self.get_company(company_id), data)
        self.uow.db.flush()
        return company

    def delete_company(self, company_id: int) -> None:
        company = self.get_company(company_id)
        if self.uow.items.exists_for_company(company_id):
            raise ConflictError("Company is referenced by items and cannot be deleted")
        self.uow.db.delete(company)
        self.uow.db.flush()
        logger.info("Deleted company id=%s", company_id)

    # ===== CATEGORIES =====

    def list_categories(self) -> List[Category]:
        return self.uow.categories.list()

    def get_category(self, category_id: int) -> Category:
        category = self.uow.categories.get(category_id)
        if not category:
            raise NotFoundError(f"Category not found: {category_id}")
        return category

    def _check_category_name(self, name: str, category_id: int = None):
        existing = self.uow.categories.by_name(name)
        if existing and existing.id != category_id:
            raise ConflictError("Category name must be unique")

    def create_category(self, data: Dict[str, Any]) -> Category:
        self._check_category_name(data["name"])
        category = self.uow.categories.add(_assign(Category(), data))
        self.uow.db.flush()
        logger.info("Created category id=%s", category.id)
        return category

    def update_category(self, category_id: int, data: Dict[str, Any]) -> Category:
        category = self.get_category(category_id)
        self._check_category_name(data["name"], category_id)
        _assign(category, data)
        self.uow.db.flush()
        return category

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        if self.uow.items.exists_for_category(category_id):
            raise ConflictError("Category is referenced by items and cannot be deleted")
        self.uow.db.delete(category)
        self.uow.db.flush()
        logger.info("Deleted category id=%s", category_id)

    # ===== EMPLOYEES =====

    def list_employees(self) -> List[Employee]:
        return self.uow.employees.list()

    def get_employee(self, employee_id: uuid.UUID) -> Employee:
        employee = self.uow.employees.get(employee_id)
        if not employee:
            raise NotFoundError(f"Employee not found: {employee_id}")
        return employee

    def _check_employee_refs(self, data: Dict[str, Any], employee_id: uuid.UUID = None):
        email = data.get("email")
        if email:
            existing = self.uow.employees.by_email(email)
            if existing and existing.id != employee_id:
                raise ConflictError("Employee email must be unique")
        warehouse_id = data.get("assigned_warehouse_id")
        if warehouse_id is not None and not self.uow.warehouses.get(warehouse_id):
            raise NotFoundError(f"Warehouse not found: {warehouse_id}")

    def create_employee(self, data: Dict[str, Any]) -> Employee:
        self._check_employee_refs(data)
        employee = self.uow.employees.add(_assign(Employee(), data))
        self.uow.db.flush()
        logger.info("Created employee id=%s", employee.id)
        return employee

    def update_employee(self, employee_id: uuid.UUID, data: Dict[str, Any]) -> Employee:
        employee = self.get_employee(employee_id)
        self._check_employee_refs(data, employee_id)
        _assign(employee, data)
        self.uow.db.flush()
        return employee

    def delete_employee(self, employee_id: uuid.UUID) -> None:
        employee = self.get_employee(employee_id)
        if self.uow.warehouses.managed_by(employee_id):
            raise ConflictError("Employee manages a warehouse and cannot be deleted")
        if self.uow.history.exists_for_employee(employee_id):
            raise ConflictError("Employee is referenced by inventory history and cannot be deleted")
        self.uow.db.delete(employee)
        self.uow.db.flush()
        logger.info("Deleted employee id=%s", employee_id)

    # ===== WAREHOUSES =====

    def list_warehouses(self) -> List[Warehouse]:
        return self.uow.warehouses.list()

    def get_warehouse(self, warehouse_id: int) -> Warehouse:
        warehouse = self.uow.warehouses.get(warehouse_id)
        if not warehouse:
            raise NotFoundError(f"Warehouse not found: {warehouse_id}")
        return warehouse

    def _check_manager(self, data: Dict[str, Any]):
        manager_id = data.get("manager_employee_id")
        if manager_id is not None and not self.uow.employees.get(manager_id):
            raise NotFoundError(f"Employee not found: {manager_id}")

    def create_warehouse(self, data: Dict[str, Any]) -> Warehouse:
        self._check_manager(data)
        warehouse = self.uow.warehouses.add(_assign(Warehouse(), data))
        self.uow.db.flush()
        logger.info("Created warehouse id=%s max=%s", warehouse.id, warehouse.maximum_capacity_cubic_feet)
        return warehouse

    def update_warehouse(self, warehouse_id: int, data: Dict[str, Any]) -> Warehouse:
        warehouse = self.uow.warehouses.get_for_update(warehouse_id)
        if not warehouse:
            raise NotFoundError(f"Warehouse not found: {warehouse_id}")
        self._check_manager(data)

        new_max = data.get("maximum_capacity_cubic_feet")
        if new_max is not None:
            used = self.uow.warehouse_items.sum_occupied_volume(warehouse_id)
            if Decimal(str(new_max)) < used:
                logger.warning(
                    "Rejected capacity reduction below used volume: warehouse_id=%s used=%s new_max=%s",
                    warehouse_id, used, new_max
                )
                raise InvalidOperationError(
                    f"Maximum capacity cannot be lower than the used capacity ({used:.2f} cubic feet)"
                )

        _assign(warehouse, data)
        self.uow.db.flush()
        return warehouse

    def delete_warehouse(self, warehouse_id: int) -> None:
        warehouse = self.get_warehouse(warehouse_id)
        if self.uow.warehouse_items.exists_for_warehouse(warehouse_id):
            raise ConflictError("Warehouse still holds inventory and cannot be deleted")
        if self.uow.employees.exists_for_warehouse(warehouse_id):
            raise ConflictError("Warehouse has assigned employees and cannot be deleted")
        if self.uow.history.exists_for_warehouse(warehouse_id):
            raise ConflictError("Warehouse is referenced by inventory history and cannot be deleted")
        self.uow.db.delete(warehouse)
        self.uow.db.flush()
        logger.info("Deleted warehouse id=%s", warehouse_id)

    # ===== ITEMS =====

    def list_items(self) -> List[Item]:
        return self.uow.items.list()

    def get_item(self, item_id: int) -> Item:
        item = self.uow.items.get(item_id)
        if not item:
            raise NotFoundError(f"Item not found: {item_id}")
        return item

    def _check_item_refs(self, data: Dict[str, Any], item_id: int = None):
        existing = self.uow.items.by_sku(data["sku"])
        if existing and existing.id != item_id:
            raise ConflictError("SKU must be unique")
        category_id = data.get("category_id")
        if category_id is not None and not self.uow.categories.get(category_id):
            raise NotFoundError(f"Category not found: {category_id}")
        company_id = data.get("company_id")
        if company_id is not None and not self.uow.companies.get(company_id):
            raise NotFoundError(f"Company not found: {company_id}")

    def create_item(self, data: Dict[str, Any]) -> Item:
        self._check_item_refs(data)
        item = self.uow.items.add(_assign(Item(), data))
        self.uow.db.flush()
        logger.info("Created item id=%s sku=%s", item.id, item.sku)
        return item

    def update_item(self, item_id: int, data: Dict[str, Any]) -> Item:
        """
        Updates an item. A larger unit volume must still fit every warehouse holding the item.
        """
        item = self.get_item(item_id)
        self._check_item_refs(data, item_id)

        new_cubic_feet = data.get("cubic_feet")
        if new_cubic_feet is not None and item.cubic_feet is not None:
            growth = Decimal(str(new_cubic_feet)) - Decimal(str(item.cubic_feet))
            if growth > 0:
                for row in self.uow.warehouse_items.list_for_item(item_id):
                    warehouse = self.uow.warehouses.get_for_update(row.warehouse_id)
                    if warehouse.maximum_capacity_cubic_feet is None:
                        continue
                    used = self.uow.warehouse_items.sum_occupied_volume(warehouse.id)
                    if used + growth * row.quantity > Decimal(str(warehouse.maximum_capacity_cubic_feet)):
                        logger.warning(
                            "Rejected cubic_feet change for item_id=%s: warehouse_id=%s would exceed capacity",
                            item_id, warehouse.id
                        )
                        raise InvalidOperationError(
                            "New cubic feet would exceed the capacity of a warehouse holding this item"
                        )

        _assign(item, data)
        self.uow.db.flush()
        return item

    def delete_item(self, item_id: int) -> None:
        item = self.get_item(item_id)
        if self.uow.warehouse_items.exists_for_item(item_id):
            raise ConflictError("Item is stored in a warehouse and cannot be deleted")
        if self.uow.history.exists_for_item(item_id):
            raise ConflictError("Item is referenced by inventory history and cannot be deleted")
        self.uow.db.delete(item)
        self.uow.db.flush()
        logger.info("Deleted item id=%s", item_id)
