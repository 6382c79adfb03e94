"""
Global pytest configuration for the inventory tests.

Every test gets a fresh in-memory SQLite database.
"""
import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add the backend root to the path for imports
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_TO_FILE"] = "false"

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shelfsync.db import init_db
from shelfsync.domain.models import Employee
from shelfsync.domain.models_inventory import Warehouse, Item
from shelfsync.infrastructure.unit_of_work import UnitOfWork


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def uow(db):
    return UnitOfWork(db)


@pytest.fixture
def make_warehouse(uow):
    """Creates and commits a warehouse; returns its id."""
    def _make(max_capacity="100", name="Main"):
        warehouse = Warehouse(name=name, maximum_capacity_cubic_feet=Decimal(max_capacity))
        uow.warehouses.add(warehouse)
        uow.commit()
        return warehouse.id
    return _make


@pytest.fixture
def make_item(uow):
    """Creates and commits an item; returns its id."""
    counter = {"n": 0}

    def _make(cubic_feet="10", sku=None, name=None):
        counter["n"] += 1
        item = Item(
            sku=sku or f"SKU-{counter['n']:03d}",
            name=name or f"Game {counter['n']}",
            weight_lbs=Decimal("1.5"),
            cubic_feet=Decimal(cubic_feet),
        )
        uow.items.add(item)
        uow.commit()
        return item.id
    return _make


@pytest.fixture
def make_employee(uow):
    def _make(email="clerk@example.com"):
        employee = Employee(first_name="Dana", last_name="Reyes", phone="555-0100", email=email)
        uow.employees.add(employee)
        uow.commit()
        return employee.id
    return _make


@pytest.fixture
def quantity_of(uow):
    """Current quantity of a (warehouse, item) pair, None when no row exists."""
    def _get(warehouse_id, item_id):
        row = uow.warehouse_items.get(warehouse_id, item_id)
        return row.quantity if row is not None else None
    return _get
