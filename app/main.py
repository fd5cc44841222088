import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.db import models  # noqa: F401  registers every table
from app.core.db.engine import check_database_connection
from app.core.error_handler import global_exception_handler
from app.core.response_interceptor import (
    SuccessResponseInterceptor,
    CustomAPIRoute,
)
from app.modules.users.router import router as users_router
from app.modules.settings.router import router as settings_router
from app.modules.currency.router import router as currency_router
from app.modules.orders.router import router as orders_router
from app.modules.inventory.router import router as inventory_router
from app.modules.finance.router import router as finance_router
from app.modules.shipping.router import router as shipping_router
from app.modules.dashboard.router import router as dashboard_router

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)
logger.info("Starting Dealership Dashboard API...")

app = FastAPI(
    title="Dealership Dashboard API",
    description="Orders, inventory, finance and shipping forms for a car-import dealership",
    version="1.0.0",
)

# Override the default route class to support skip_interceptor decorator
app.router.route_class = CustomAPIRoute

# Add global exception handler
app.add_exception_handler(Exception, global_exception_handler)

# Middlewares
origins = [
    "http://localhost",
    "http://localhost:5173",
    "tauri://localhost",  # desktop shell
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add Success Response Interceptor (must be added after CORS)
app.add_middleware(SuccessResponseInterceptor)

# Include routers with /api prefix
app.include_router(users_router, prefix="/api")
app.include_router(settings_router, prefix="/api")
app.include_router(currency_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(inventory_router, prefix="/api")
app.include_router(finance_router, prefix="/api")
app.include_router(shipping_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")


@app.get("/health")
async def health() -> dict[str, str]:
    database_ok = await check_database_connection()
    return {"status": "ok" if database_ok else "degraded", "database": "up" if database_ok else "down"}
