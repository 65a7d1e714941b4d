"""
FastAPI app assembly shared by the service entry point and the test app.

The caller supplies the lifespan (what starts and stops with the process);
everything else, routers, error rendering, CORS and the operational
endpoints, is identical in both.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.constant.route_constant import EVENT_BASE, TICKET_BASE, USER_BASE
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.ticketing.driving_adapter.http_controller.event_controller import (
    router as event_router,
)
from src.service.ticketing.driving_adapter.http_controller.ticket_controller import (
    router as ticket_router,
)
from src.service.ticketing.driving_adapter.http_controller.user_controller import (
    router as user_router,
)


# (router, prefix, tag)
ROUTERS: tuple[tuple[APIRouter, str, str], ...] = (
    (user_router, USER_BASE, 'user'),
    (event_router, EVENT_BASE, 'event'),
    (ticket_router, TICKET_BASE, 'ticket'),
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Event ticket reservation service',
    instrument: bool = True,
) -> FastAPI:
    """
    Args:
        lifespan: startup/shutdown context for the process
        title_suffix: appended to the OpenAPI title, e.g. ' (Test)'
        instrument: attach OpenTelemetry request spans
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Instrumentation wraps the ASGI app, so it goes on before any route
    if instrument:
        TracingConfig(service_name=settings.PROJECT_NAME).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)

    for router, prefix, tag in ROUTERS:
        app.include_router(router, prefix=prefix, tags=[tag])
    app.include_router(_operational_router())

    return app


def _operational_router() -> APIRouter:
    router = APIRouter(tags=['ops'])

    @router.get('/health')
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @router.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus scrape endpoint"""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return router
