"""Hardware-free sensor producing plausible indoor climate values."""

from __future__ import annotations

import logging
import random
from typing import Optional

from models.readings import SensorSample
from sensors.interface import SensorError

logger = logging.getLogger(__name__)

# (start, step, low, high) in the driver's raw units
_TEMPERATURE = (21.0, 0.05, 15.0, 30.0)
_HUMIDITY = (4500, 20, 2000, 8000)
_PRESSURE = (101325, 5, 98000, 104000)


def _walk(rng: random.Random, value: float, step: float, low: float, high: float) -> float:
    candidate = value + rng.uniform(-step, step)
    return min(max(candidate, low), high)


class SimulatedSensor:
    """Bounded random walk around room conditions.

    Passing ``fixed`` pins every reading to that sample, which keeps tests
    deterministic.
    """

    name = "simulated"

    def __init__(self, seed: Optional[int] = None, fixed: Optional[SensorSample] = None) -> None:
        self._rng = random.Random(seed)
        self._fixed = fixed
        self._temperature = _TEMPERATURE[0]
        self._humidity = float(_HUMIDITY[0])
        self._pressure = float(_PRESSURE[0])
        self._closed = False
        logger.info("Simulated sensor ready", extra={"sensor": self.name})

    def sense(self) -> SensorSample:
        if self._closed:
            raise SensorError("Simulated sensor is closed.")
        if self._fixed is not None:
            return self._fixed

        self._temperature = _walk(self._rng, self._temperature, *_TEMPERATURE[1:])
        self._humidity = _walk(self._rng, self._humidity, *_HUMIDITY[1:])
        self._pressure = _walk(self._rng, self._pressure, *_PRESSURE[1:])
        return SensorSample(
            temperature=round(self._temperature, 2),
            humidity=int(round(self._humidity)),
            pressure=int(round(self._pressure)),
        )

    def close(self) -> None:
        self._closed = True
