from app.routers.customers import router as customers_router
from app.routers.health import router as health_router
from app.routers.orders import router as orders_router
from app.routers.products import router as products_router

__all__ = [
    "customers_router",
    "health_router",
    "orders_router",
    "products_router",
]
