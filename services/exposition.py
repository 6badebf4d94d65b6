"""Prometheus text exposition of a single environmental reading."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Gauge, generate_latest

from models.readings import EnvironmentalReading

CONTENT_TYPE = CONTENT_TYPE_LATEST

# (metric name, help text, reading attribute)
GAUGES = (
    ("bme280_temperature", "Temperature in degrees Celsius", "temperature"),
    ("bme280_humidity", "Relative humidity %", "humidity"),
    ("bme280_pressure", "Pressure in hPa", "pressure"),
)


def build_registry(reading: EnvironmentalReading) -> CollectorRegistry:
    """Return a throwaway registry holding only the three sensor gauges.

    A fresh registry per scrape keeps process and platform collectors out of
    the output and guarantees no value survives past its request.
    """
    registry = CollectorRegistry()
    for name, documentation, attribute in GAUGES:
        gauge = Gauge(name, documentation, registry=registry)
        gauge.set(getattr(reading, attribute))
    return registry


def render_metrics(reading: EnvironmentalReading) -> bytes:
    return generate_latest(build_registry(reading))
