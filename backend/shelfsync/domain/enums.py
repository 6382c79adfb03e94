from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"
    TRANSFER = "TRANSFER"
    ADJUSTMENT = "ADJUSTMENT"

    @classmethod
    def _missing_(cls, value):
        # RECEIVE/SHIP are older names for the same movements
        if isinstance(value, str):
            normalized = value.strip().upper()
            normalized = _ALIASES.get(normalized, normalized)
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    def shape_error(self, from_warehouse_id: Optional[int], to_warehouse_id: Optional[int]) -> Optional[str]:
        """Returns why the warehouse references don't fit this type, or None."""
        has_from = from_warehouse_id is not None
        has_to = to_warehouse_id is not None
        if not has_from and not has_to:
            return "At least one of fromWarehouseId or toWarehouseId is required"
        if self is TransactionType.INBOUND and (has_from or not has_to):
            return "INBOUND requires toWarehouseId only"
        if self is TransactionType.OUTBOUND and (has_to or not has_from):
            return "OUTBOUND requires fromWarehouseId only"
        if self is TransactionType.TRANSFER:
            if not (has_from and has_to):
                return "TRANSFER requires both fromWarehouseId and toWarehouseId"
            if from_warehouse_id == to_warehouse_id:
                return "TRANSFER requires two different warehouses"
        if self is TransactionType.ADJUSTMENT and has_from and has_to:
            return "ADJUSTMENT requires exactly one of fromWarehouseId or toWarehouseId"
        return None


_ALIASES = {
    "RECEIVE": "INBOUND",
    "SHIP": "OUTBOUND",
}
