from __future__ import annotations

from typing import Protocol

from models.readings import SensorSample


class SensorError(RuntimeError):
    """Raised when the sensor cannot be opened or a measurement fails."""


class Sensor(Protocol):
    """
    Minimal interface every sensor driver implements.

    One instance owns one open device handle. ``sense`` performs exactly one
    bus transaction and is not safe to call concurrently; callers serialize
    access through ``services.reader.SensorReader``.
    """

    name: str

    def sense(self) -> SensorSample:
        ...

    def close(self) -> None:
        ...
