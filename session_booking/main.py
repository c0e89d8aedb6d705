"""
Session Booking - Main Application

Run with:
    uvicorn session_booking.main:app --reload
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from session_booking.platform.app_factory import create_app
from session_booking.platform.config.core_setting import settings
from session_booking.platform.config.di import container
from session_booking.platform.config.wire_modules import WIRE_MODULES
from session_booking.platform.database.scylla_setting import (
    close_all_scylla_sessions,
    warmup_scylla_session,
)
from session_booking.platform.logging.loguru_io import Logger
from session_booking.platform.logging.loguru_io_config import intercept_stdlib_logging
from session_booking.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Session Booking] Starting up...')

    intercept_stdlib_logging()

    tracing = TracingConfig(service_name='session-booking')
    tracing.setup()
    Logger.base.info('📊 [Session Booking] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Session Booking] Dependency injection wired')

    use_scylla = settings.SESSION_STORE_BACKEND == 'scylla'
    if use_scylla:
        if not await warmup_scylla_session():
            raise RuntimeError('ScyllaDB is not reachable')
    else:
        Logger.base.warning('🧪 [Session Booking] Using in-memory session store')

    Logger.base.info('✅ [Session Booking] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Session Booking] Shutting down...')

    if use_scylla:
        await close_all_scylla_sessions()

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Session Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
