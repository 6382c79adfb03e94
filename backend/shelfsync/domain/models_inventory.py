"""
Inventory Domain Models
=======================

- Warehouse: storage location with a volumetric capacity
- Item: stock keeping unit with its volume per unit
- WarehouseItem: current quantity per (warehouse, item), maintained from the ledger
- InventoryHistory: ledger of inventory movements (source of truth for quantities)
"""
from decimal import Decimal
from sqlalchemy import Integer, String, ForeignKey, Numeric, DateTime, CheckConstraint, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import datetime, timezone
import uuid
from ..db import Base


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Warehouse(Base):
    """
    Warehouse
    Total occupied volume (sum of quantity * item.cubic_feet) never exceeds
    maximum_capacity_cubic_feet.
    """
    __tablename__ = "warehouses"
    __table_args__ = (
        CheckConstraint("maximum_capacity_cubic_feet >= 0", name="ck_warehouse_capacity_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip: Mapped[str | None] = mapped_column(String(20), nullable=True)
    manager_employee_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("employees.id", use_alter=True, name="fk_warehouse_manager"), nullable=True, index=True
    )
    maximum_capacity_cubic_feet: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    # Relations
    manager = relationship("Employee", foreign_keys=[manager_employee_id])
    employees = relationship("Employee", foreign_keys="Employee.assigned_warehouse_id", back_populates="assigned_warehouse")
    stock = relationship("WarehouseItem", back_populates="warehouse")


class Item(Base):
    """
    Item
    SKU is unique. cubic_feet is the volume of one unit and drives capacity checks.
    """
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("cubic_feet >= 0", name="ck_item_cubic_feet_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id"), nullable=True, index=True)
    company_id: Mapped[int | None] = mapped_column(ForeignKey("companies.id"), nullable=True, index=True)
    weight_lbs: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    cubic_feet: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Relations
    category = relationship("Category", back_populates="items")
    company = relationship("Company", back_populates="items")
    stock = relationship("WarehouseItem", back_populates="item")


class WarehouseItem(Base):
    """
    Quantity of an item held in a warehouse.
    Derived from the ledger: only the inventory services write it.
    """
    __tablename__ = "warehouse_items"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_warehouse_item_quantity_non_negative"),
    )

    warehouse_id: Mapped[int] = mapped_column(ForeignKey("warehouses.id"), primary_key=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("items.id"), primary_key=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relations
    warehouse = relationship("Warehouse", back_populates="stock")
    item = relationship("Item", back_populates="stock")


class InventoryHistory(Base):
    """
    Inventory movement
    - from_warehouse only: stock leaves the warehouse (OUTBOUND)
    - to_warehouse only: stock enters the warehouse (INBOUND)
    - both: stock moves between warehouses (TRANSFER)
    quantity_change is always a positive magnitude.
    """
    __tablename__ = "inventory_history"
    __table_args__ = (
        CheckConstraint("quantity_change > 0", name="ck_history_quantity_change_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("items.id"), nullable=False, index=True)
    from_warehouse_id: Mapped[int | None] = mapped_column(ForeignKey("warehouses.id"), nullable=True, index=True)
    to_warehouse_id: Mapped[int | None] = mapped_column(ForeignKey("warehouses.id"), nullable=True, index=True)
    quantity_change: Mapped[int] = mapped_column(Integer, nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)
    performed_by_employee_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("employees.id"), nullable=True, index=True
    )

    # Relations
    item = relationship("Item")
    from_warehouse = relationship("Warehouse", foreign_keys=[from_warehouse_id])
    to_warehouse = relationship("Warehouse", foreign_keys=[to_warehouse_id])
    performed_by = relationship("Employee")
