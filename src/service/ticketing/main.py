"""
Ticket Reservation Service - Main Application
Handles user authentication, event management and ticket purchases.

Run with:
    uvicorn src.service.ticketing.main:app
"""

from contextlib import asynccontextmanager
import os

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('[Ticket Reservation] Starting up...')

    tracing = TracingConfig(service_name=os.getenv('SERVICE_NAME', settings.PROJECT_NAME))
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('[Ticket Reservation] OpenTelemetry tracing configured')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('[Ticket Reservation] Dependency injection wired')

    Logger.base.info('[Ticket Reservation] Startup complete')

    yield

    Logger.base.info('[Ticket Reservation] Shutting down...')

    await dispose_engine()
    tracing.shutdown()
    container.unwire()
    cleanup()

    Logger.base.info('[Ticket Reservation] Shutdown complete')


app = create_app(lifespan=lifespan)
