"""
Master data: companies, categories and employees.
"""
import uuid
from sqlalchemy import Integer, String, ForeignKey, DateTime, Uuid
from datetime import datetime
from sqlalchemy.orm import relationship, Mapped, mapped_column
from ..db import Base


class Company(Base):
    __tablename__ = "companies"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    items = relationship("Item", back_populates="company")


class Category(Base):
    __tablename__ = "categories"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    items = relationship("Item", back_populates="category")


class Employee(Base):
    """Warehouse staff. Can manage a warehouse and perform inventory movements."""
    __tablename__ = "employees"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    assigned_warehouse_id: Mapped[int | None] = mapped_column(ForeignKey("warehouses.id"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    assigned_warehouse = relationship("Warehouse", foreign_keys=[assigned_warehouse_id], back_populates="employees")
