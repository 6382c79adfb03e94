from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...application.dtos import ItemInventorySummaryOut
from ...application.services_inventory import WarehouseItemService, InventoryError
from ..errors import http_error

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/search", response_model=List[ItemInventorySummaryOut])
def search_inventory(
    q: Optional[str] = Query(default=None, description="Text contained in the SKU or item name"),
    db: Session = Depends(get_db)
):
    """Where is an item stored? Totals and per-warehouse quantities for each matching item."""
    try:
        summaries = WarehouseItemService(UnitOfWork(db)).search_inventory_by_item(q)
    except InventoryError as e:
        raise http_error(e)
    return [ItemInventorySummaryOut(**s) for s in summaries]
