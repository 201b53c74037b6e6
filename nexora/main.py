
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from nexora.api import cur_version
from nexora.api.routers import public_routers,admin_routers
from nexora.common.custom_exceptions import register_all_exceptions
from nexora.common.logging_setup import setup_logging, stop_logging
from nexora.common.routes import root_router
from nexora.config.admin_config import admin_config
from nexora.config.settings import config_settings
from nexora.db.connection import async_engine
from nexora.db.schema import create_tables
from nexora.middlewares.request_id_middleware import RequestIdMiddleware
from metrics.custom_instrumentator import mount_metrics


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    app_logger = setup_logging()

    if config_settings.AUTO_CREATE_TABLES:
        await create_tables()

    app_logger.info("app.startup", extra={"env": admin_config.ENV})
    try:
        yield
    finally:
        await async_engine.dispose()
        app_logger.info("app.shutdown")
        stop_logging()


def create_app():
    app=FastAPI(
        title="Nexora",
        version=cur_version,
        lifespan=app_lifespan)

    app.include_router(root_router)
    app.include_router(public_routers)

    if admin_config.ENABLE_ADMIN:
        app.include_router(admin_routers)      # mounts /api/v1/admin

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_middleware(RequestIdMiddleware)
    register_all_exceptions(app)

    if config_settings.ENABLE_METRICS:
        mount_metrics(app)

    return app

app=create_app()
