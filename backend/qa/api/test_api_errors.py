"""
API tests - inventory error to HTTP status mapping
"""
from decimal import Decimal

import pytest

from shelfsync.api.errors import http_error
from shelfsync.application.services_inventory import (
    InventoryError, NotFoundError, InvalidOperationError, CapacityExceededError, ConflictError
)


@pytest.mark.parametrize("exc,status", [
    (NotFoundError("Item not found"), 404),
    (ConflictError("SKU already exists"), 409),
    (InvalidOperationError("Resulting quantity would be negative"), 400),
    (CapacityExceededError(available=Decimal("0"), needed=Decimal("10")), 400),
    (InventoryError("unclassified"), 500),
])
def test_status_codes(exc, status):
    assert http_error(exc).status_code == status


def test_detail_carries_message():
    assert http_error(NotFoundError("Warehouse not found")).detail == "Warehouse not found"
