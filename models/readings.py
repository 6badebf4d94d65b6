"""Measurement value types shared by the sensor drivers and the HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SensorSample:
    """A single measurement in the fixed-point units delivered by a driver.

    ``humidity`` is expressed in hundredths of a percent of relative humidity
    and ``pressure`` in pascals.
    """

    temperature: float
    humidity: int
    pressure: int


@dataclass(frozen=True, slots=True)
class EnvironmentalReading:
    """Temperature in degrees Celsius, relative humidity in %, pressure in hPa."""

    temperature: float
    humidity: float
    pressure: float

    @classmethod
    def from_sample(cls, sample: SensorSample) -> EnvironmentalReading:
        return cls(
            temperature=float(sample.temperature),
            humidity=sample.humidity / 100.0,
            pressure=sample.pressure / 100.0,
        )
