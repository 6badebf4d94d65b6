"""Serialized access to the process-wide sensor handle."""

from __future__ import annotations

import logging
import time
from threading import Lock
from types import TracebackType
from typing import Optional, Type

from models.readings import EnvironmentalReading
from sensors.bmx280 import Bme280Sensor
from sensors.interface import Sensor, SensorError
from sensors.simulated import SimulatedSensor
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


class SensorReader:
    """Owns one open sensor and guards it with a lock.

    The bus does not support overlapping transactions, so ``sense`` holds the
    lock for the whole measurement. Nothing is cached between calls.
    """

    def __init__(self, sensor: Sensor) -> None:
        self.sensor = sensor
        self.read_count = 0
        self.error_count = 0
        self._closed = False
        self._lock = Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def sense(self) -> EnvironmentalReading:
        """Perform one sensor transaction and convert it to display units."""
        with self._lock:
            if self._closed:
                raise SensorError("Sensor handle is closed.")
            start_time = time.perf_counter()
            try:
                sample = self.sensor.sense()
            except SensorError as exc:
                self.error_count += 1
                logger.warning(
                    "Sensor read failed",
                    extra={
                        "sensor": self.sensor.name,
                        "reason": str(exc),
                        "read_errors": self.error_count,
                    },
                )
                raise
            self.read_count += 1
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

        logger.debug(
            "Sensor read",
            extra={"sensor": self.sensor.name, "duration_ms": duration_ms},
        )
        return EnvironmentalReading.from_sample(sample)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self.sensor.close()

    def __enter__(self) -> SensorReader:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


def build_default_reader(settings: Optional[Settings] = None) -> SensorReader:
    """Open the sensor selected by ``settings`` and wrap it in a reader."""
    settings = settings or get_settings()
    if settings.sensor == "simulated":
        sensor: Sensor = SimulatedSensor()
    elif settings.sensor == "bme280":
        sensor = Bme280Sensor(bus_number=settings.i2c_bus, address=settings.i2c_address)
    else:
        raise SensorError(f"Unknown sensor kind {settings.sensor!r}.")
    return SensorReader(sensor)
