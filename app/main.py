import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, get_settings
from app.core.handlers import register_exception_handlers
from app.core.logging import setup_logging
from app.core.routing import assert_unique_routes
from app.database import Base, check_store, engine
from app.models import import_all_models
from app.routers import (
    customers_router,
    health_router,
    orders_router,
    products_router,
)

logger = logging.getLogger(__name__)

setup_logging()
settings: Settings = get_settings()

import_all_models()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    status = check_store(engine)
    if not status.ok:
        raise RuntimeError(f"Store unavailable: {status.error}")
    Base.metadata.create_all(bind=engine)
    logger.info("%s connected to store (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    yield
    engine.dispose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(products_router)
app.include_router(orders_router)
app.include_router(customers_router)

assert_unique_routes(app)


__all__ = ["app"]
