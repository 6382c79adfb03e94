import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import settings

if settings.database_url.startswith("sqlite:///./data/"):
    os.makedirs("./data", exist_ok=True)

_connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(settings.database_url, echo=settings.sql_echo, future=True, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def _import_all_models():
    """Imports every model module so Base.metadata knows all tables."""
    from .domain import models  # noqa: F401 - Company, Category, Employee
    from .domain import models_inventory  # noqa: F401 - Warehouse, Item, WarehouseItem, InventoryHistory


def init_db(bind=None):
    """Create tables if they do not exist (normal startup)."""
    _import_all_models()
    Base.metadata.create_all(bind=bind or engine)

