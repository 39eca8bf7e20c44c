"""
Shared FastAPI App Factory

Common app setup for the production and test applications.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.cinema_booking.driving_adapter.http_controller.concession_controller import (
    router as concession_router,
)
from src.service.cinema_booking.driving_adapter.http_controller.promo_code_controller import (
    router as promo_code_router,
)
from src.service.cinema_booking.driving_adapter.http_controller.reservation_controller import (
    router as reservation_router,
)
from src.service.cinema_booking.driving_adapter.http_controller.screening_controller import (
    router as screening_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Cinema seat booking engine',
    service_name: str = 'cinema-booking',
) -> FastAPI:
    """
    Args:
        lifespan: Async context manager for app startup/shutdown
        title_suffix: Optional suffix for the app title (e.g. " (Test)")
        description: App description
        service_name: Service name for tracing
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Must run before routes are mounted
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(reservation_router, prefix='/api/reservation', tags=['reservation'])
    app.include_router(screening_router, prefix='/api/screening', tags=['screening'])
    app.include_router(promo_code_router, prefix='/api/promo_code', tags=['promo_code'])
    app.include_router(concession_router, prefix='/api/concession', tags=['concession'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    @app.get('/health')
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
