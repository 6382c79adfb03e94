from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import uuid

from ..domain.enums import TransactionType


class CamelModel(BaseModel):
    """JSON uses camelCase (warehouseId, quantityChange); snake_case is accepted on input too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ===== MASTER DATA =====

class CompanyIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = None
    email: Optional[str] = None
    contact_person: Optional[str] = None


class CompanyOut(CamelModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    contact_person: Optional[str] = None


class CategoryIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


class CategoryOut(CamelModel):
    id: int
    name: str


class EmployeeIn(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    assigned_warehouse_id: Optional[int] = None


class EmployeeOut(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    phone: str
    email: Optional[str] = None
    assigned_warehouse_id: Optional[int] = None


class WarehouseIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    manager_employee_id: Optional[uuid.UUID] = None
    maximum_capacity_cubic_feet: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)


class WarehouseOut(CamelModel):
    id: int
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    manager_employee_id: Optional[uuid.UUID] = None
    maximum_capacity_cubic_feet: float


class ItemIn(CamelModel):
    sku: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    category_id: Optional[int] = None
    company_id: Optional[int] = None
    weight_lbs: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    cubic_feet: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

    @field_validator("sku")
    @classmethod
    def strip_sku(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("sku must not be blank")
        return v


class ItemOut(CamelModel):
    id: int
    sku: str
    name: str
    category_id: Optional[int] = None
    company_id: Optional[int] = None
    weight_lbs: float
    cubic_feet: float


# ===== INVENTORY =====

class InventoryHistoryIn(CamelModel):
    item_id: Optional[int] = None
    from_warehouse_id: Optional[int] = None
    to_warehouse_id: Optional[int] = None
    quantity_change: int = Field(..., gt=0, description="Units moved, always positive")
    transaction_type: TransactionType
    reason: Optional[str] = Field(default=None, max_length=500)
    occurred_at: Optional[datetime] = None
    performed_by_employee_id: Optional[uuid.UUID] = None

    @field_validator("transaction_type", mode="before")
    @classmethod
    def parse_transaction_type(cls, v):
        # Accepts lowercase and the RECEIVE/SHIP aliases
        if isinstance(v, str):
            return TransactionType(v)
        return v

    @model_validator(mode="after")
    def check_movement_shape(self):
        error = self.transaction_type.shape_error(self.from_warehouse_id, self.to_warehouse_id)
        if error:
            raise ValueError(error)
        return self


class InventoryHistoryOut(CamelModel):
    id: int
    item_id: int
    item_sku: Optional[str] = None
    item_name: Optional[str] = None
    from_warehouse_id: Optional[int] = None
    from_warehouse_name: Optional[str] = None
    to_warehouse_id: Optional[int] = None
    to_warehouse_name: Optional[str] = None
    quantity_change: int
    transaction_type: str
    reason: Optional[str] = None
    occurred_at: datetime
    performed_by_employee_id: Optional[uuid.UUID] = None
    performed_by_name: Optional[str] = None


class WarehouseItemOut(CamelModel):
    warehouse_id: int
    warehouse_name: Optional[str] = None
    item_id: int
    item_sku: Optional[str] = None
    item_name: Optional[str] = None
    quantity: int


class QuantityOverrideIn(CamelModel):
    quantity: int = Field(..., ge=0)
    reason: Optional[str] = None


class WarehouseCapacityOut(CamelModel):
    warehouse_id: int
    maximum_capacity_cubic_feet: Optional[float] = None
    used_capacity_cubic_feet: float
    available_capacity_cubic_feet: float
    utilization_percent: float


class ItemLocationOut(CamelModel):
    warehouse_id: int
    warehouse_name: str
    quantity: int


class ItemInventorySummaryOut(CamelModel):
    item_id: int
    sku: str
    name: str
    total_quantity: int
    locations: List[ItemLocationOut]
