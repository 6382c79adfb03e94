from fastapi import HTTPException

from ..application.services_inventory import (
    InventoryError, NotFoundError, InvalidOperationError, ConflictError
)


def http_error(exc: InventoryError) -> HTTPException:
    """Maps an inventory error to its HTTP response: 404, 409 or 400; anything else is 500."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, InvalidOperationError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail="Unexpected error")
