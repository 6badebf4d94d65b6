from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_LISTEN_ADDRESS_ENV = "BME280_LISTEN_ADDRESS"
_SENSOR_ENV = "BME280_SENSOR"
_I2C_BUS_ENV = "BME280_I2C_BUS"
_I2C_ADDRESS_ENV = "BME280_I2C_ADDRESS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_LISTEN_ADDRESS = ":9529"
SENSOR_KINDS = ("bme280", "simulated")


@dataclass(frozen=True)
class Settings:
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    sensor: str = "bme280"
    i2c_bus: int = 1
    i2c_address: int = 0x76
    log_level: str = "INFO"


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        # base 0 accepts "118" as well as "0x76"
        parsed = int(candidate, 0)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_sensor(default: str) -> str:
    candidate = _read_str_env(_SENSOR_ENV, default).lower()
    return candidate if candidate in SENSOR_KINDS else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``":9529"``) binds every interface. IPv6 hosts must be
    bracketed, e.g. ``"[::1]:9529"``.
    """
    candidate = address.strip()
    host, sep, port_text = candidate.rpartition(":")
    if not sep:
        raise ValueError(f"Listen address {address!r} is missing a port.")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"IPv6 host in {address!r} must be enclosed in brackets.")
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ValueError(f"Invalid port in listen address {address!r}.") from exc
    if not 0 <= port <= 65535:
        raise ValueError(f"Port {port} in listen address {address!r} is out of range.")
    return host or "0.0.0.0", port


@lru_cache
def get_settings() -> Settings:
    return Settings(
        listen_address=_read_str_env(_LISTEN_ADDRESS_ENV, DEFAULT_LISTEN_ADDRESS),
        sensor=_read_sensor("bme280"),
        i2c_bus=_read_int_env(_I2C_BUS_ENV, 1),
        i2c_address=_read_int_env(_I2C_ADDRESS_ENV, 0x76),
        log_level=_read_log_level("INFO"),
    )
