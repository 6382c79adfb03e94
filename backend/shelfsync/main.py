import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from .db import init_db
from .api.routers import (
    health, inventory_history, warehouses, warehouse_items, inventory,
    items, companies, categories, employees
)
from .infrastructure.logging_config import setup_logging
from .config import settings as app_settings

# Configure logging on startup
setup_logging()
logger = logging.getLogger(__name__)

# Initialize the database (do not fail if the connection is not configured yet)
try:
    init_db()
except Exception as e:
    logger.warning("Could not initialize the database: %s. It may need configuration.", e)

app = FastAPI(
    title="ShelfSync - Warehouse Inventory",
    version="0.1.0",
    debug=app_settings.debug,
    description="Warehouse inventory ledger with per-warehouse quantities and capacity control",
    docs_url="/docs" if app_settings.environment != "production" else None,
    redoc_url="/redoc" if app_settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Requested-With"],
)

# HTTP security headers
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    # HSTS only in production behind HTTPS
    if app_settings.environment == "production":
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    return response

app.include_router(health.router)
app.include_router(inventory_history.router)
app.include_router(warehouses.router)
app.include_router(warehouse_items.router)
app.include_router(inventory.router)
app.include_router(items.router)
app.include_router(companies.router)
app.include_router(categories.router)
app.include_router(employees.router)
