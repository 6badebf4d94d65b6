"""Bosch BME280 / BMP280 driver over I²C.

Calibration and compensation are delegated to the ``RPi.bme280`` package;
this module owns the bus handle, identifies the chip and maps bus failures
onto ``SensorError``.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

import bme280
import smbus2

from models.readings import SensorSample
from sensors.interface import SensorError

logger = logging.getLogger(__name__)

CHIP_ID_REGISTER = 0xD0
BME280_CHIP_ID = 0x60
BMP280_CHIP_IDS = frozenset({0x56, 0x57, 0x58})


class Bme280Sensor:

    def __init__(
        self,
        bus_number: int = 1,
        address: int = 0x76,
        bus_factory: Callable[[int], smbus2.SMBus] = smbus2.SMBus,
    ) -> None:
        self.bus_number = bus_number
        self.address = address
        try:
            self._bus = bus_factory(bus_number)
        except OSError as exc:
            raise SensorError(f"Unable to open I2C bus {bus_number}: {exc}") from exc

        try:
            chip_id = self._bus.read_byte_data(address, CHIP_ID_REGISTER)
            if chip_id == BME280_CHIP_ID:
                self.name = "bme280"
            elif chip_id in BMP280_CHIP_IDS:
                self.name = "bmp280"
            else:
                raise SensorError(
                    f"Unexpected chip id 0x{chip_id:02x} at address 0x{address:02x}."
                )
            self._calibration = bme280.load_calibration_params(self._bus, address)
        except OSError as exc:
            self._bus.close()
            raise SensorError(
                f"No response from device 0x{address:02x} on I2C bus {bus_number}: {exc}"
            ) from exc
        except SensorError:
            self._bus.close()
            raise

        logger.info(
            "Sensor opened",
            extra={"sensor": self.name, "i2c_bus": bus_number, "i2c_address": f"0x{address:02x}"},
        )

    def sense(self) -> SensorSample:
        """Trigger one forced-mode measurement and return the compensated sample."""
        try:
            data = bme280.sample(self._bus, self.address, self._calibration)
        except OSError as exc:
            raise SensorError(f"I2C transaction with {self.name} failed: {exc}") from exc

        # BMP280 has no humidity channel
        humidity = data.humidity if self.name == "bme280" else 0.0
        values = (data.temperature, humidity, data.pressure)
        if not all(math.isfinite(value) for value in values):
            raise SensorError(f"{self.name} returned a malformed measurement: {values!r}")

        return SensorSample(
            temperature=float(data.temperature),
            humidity=int(round(humidity * 100)),
            pressure=int(round(data.pressure * 100)),
        )

    def close(self) -> None:
        self._bus.close()
        logger.info("Sensor closed", extra={"sensor": self.name})
