from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from fastapi import FastAPI

from app.api import router
from app.web import router as web_router
from logging_config import configure_logging
from sensors.interface import SensorError
from services.reader import SensorReader, build_default_reader
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

ReaderFactory = Callable[[Settings], SensorReader]


def create_app(
    settings: Optional[Settings] = None,
    reader_factory: ReaderFactory = build_default_reader,
) -> FastAPI:
    """Build the exporter application.

    The sensor is opened when the lifespan starts and closed when it ends. An
    open failure is re-raised so the server refuses to start.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            reader = reader_factory(settings)
        except SensorError as exc:
            logger.critical(
                "Unable to open sensor",
                extra={
                    "sensor": settings.sensor,
                    "i2c_bus": settings.i2c_bus,
                    "i2c_address": f"0x{settings.i2c_address:02x}",
                    "reason": str(exc),
                },
            )
            raise
        app.state.reader = reader
        try:
            yield
        finally:
            reader.close()

    app = FastAPI(
        title="BME280 Exporter",
        description="Prometheus exporter for BME280 temperature, humidity and pressure.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(web_router)
    return app
