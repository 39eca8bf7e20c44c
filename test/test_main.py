"""
Test-specific FastAPI Application

Same routers and error handling as production, without tracing export or
the background hold sweeper. Always seeds the demo catalog.
Uses shared app factory for common setup.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.driven_adapter.repo.demo_catalog import seed_demo_catalog


@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🧪 [Test App] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Test App] Dependency injection wired')

    await seed_demo_catalog(container.persistence_store())
    Logger.base.info('🎬 [Test App] Demo catalog seeded')

    yield

    container.unwire()
    Logger.base.info('🛑 [Test App] Shutdown complete')


app = create_app(
    lifespan=lifespan_for_tests,
    title_suffix=' (Test)',
    description='Cinema booking engine - test instance',
    service_name='cinema-booking-test',
)
