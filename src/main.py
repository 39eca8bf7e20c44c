"""
Production FastAPI Application

Cinema booking engine with the background hold sweeper.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.cinema_booking.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)
from src.service.cinema_booking.driven_adapter.repo.demo_catalog import seed_demo_catalog
from src.service.cinema_booking.driving_adapter.hold_sweeper import run_hold_sweeper


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Cinema Booking] Starting up...')

    tracing = TracingConfig(service_name='cinema-booking')
    tracing.setup()
    Logger.base.info('📊 [Cinema Booking] OpenTelemetry tracing configured')

    # Wire dependency injection for all modules
    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Cinema Booking] Dependency injection wired')

    if settings.SEED_DEMO_CATALOG:
        await seed_demo_catalog(container.persistence_store())
        Logger.base.info('🎬 [Cinema Booking] Demo catalog seeded')

    expire_stale_holds = ExpireStaleHoldsUseCase(
        store=container.persistence_store(),
        seat_inventory=container.seat_inventory(),
        reservation_locks=container.reservation_locks(),
    )

    # Task group for the hold sweeper
    async with anyio.create_task_group() as tg:
        tg.start_soon(lambda: run_hold_sweeper(use_case=expire_stale_holds))
        Logger.base.info('✅ [Cinema Booking] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Cinema Booking] Shutting down...')
        tg.cancel_scope.cancel()

    # Flush remaining spans
    tracing.shutdown()
    Logger.base.info('📊 [Cinema Booking] Tracing shutdown complete')

    container.unwire()
    cleanup()

    Logger.base.info('👋 [Cinema Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
