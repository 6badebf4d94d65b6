from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from models.readings import SensorSample
from sensors.interface import SensorError
from sensors.simulated import SimulatedSensor
from services.reader import SensorReader, build_default_reader
from settings import Settings


class OverlapDetectingSensor:
    name = "overlap"

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = 0

    def sense(self) -> SensorSample:
        with self._guard:
            self.in_flight += 1
            self.calls += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        time.sleep(0.01)
        with self._guard:
            self.in_flight -= 1
        return SensorSample(temperature=20.0, humidity=5000, pressure=100000)

    def close(self) -> None:
        pass


def test_sense_converts_sample(fake_sensor) -> None:
    reader = SensorReader(fake_sensor)

    reading = reader.sense()

    assert (reading.temperature, reading.humidity, reading.pressure) == (21.5, 45.0, 1013.25)
    assert reader.read_count == 1
    assert reader.error_count == 0


def test_every_call_hits_the_sensor(sensor_factory) -> None:
    sensor = sensor_factory(
        samples=[
            SensorSample(temperature=20.0, humidity=4000, pressure=100000),
            SensorSample(temperature=22.0, humidity=4100, pressure=100100),
        ]
    )
    reader = SensorReader(sensor)

    first = reader.sense()
    second = reader.sense()

    assert sensor.calls == 2
    assert first.temperature == 20.0
    assert second.temperature == 22.0
    assert second.pressure == 1001.0


def test_sensor_error_is_counted_and_reraised(sensor_factory) -> None:
    sensor = sensor_factory(error=SensorError("bus timeout"))
    reader = SensorReader(sensor)

    with pytest.raises(SensorError, match="bus timeout"):
        reader.sense()
    with pytest.raises(SensorError):
        reader.sense()

    assert sensor.calls == 2
    assert reader.error_count == 2
    assert reader.read_count == 0


def test_concurrent_reads_are_serialized() -> None:
    sensor = OverlapDetectingSensor()
    reader = SensorReader(sensor)

    with ThreadPoolExecutor(max_workers=8) as pool:
        readings = list(pool.map(lambda _: reader.sense(), range(16)))

    assert len(readings) == 16
    assert sensor.calls == 16
    assert sensor.max_in_flight == 1


def test_close_is_idempotent_and_blocks_reads(fake_sensor) -> None:
    reader = SensorReader(fake_sensor)

    reader.close()
    reader.close()

    assert reader.closed is True
    assert fake_sensor.close_calls == 1
    with pytest.raises(SensorError, match="closed"):
        reader.sense()
    assert fake_sensor.calls == 0


def test_context_manager_closes_sensor(fake_sensor) -> None:
    with pytest.raises(SensorError):
        with SensorReader(fake_sensor) as reader:
            reader.sense()
            fake_sensor.error = SensorError("device not ready")
            reader.sense()

    assert fake_sensor.close_calls == 1


def test_build_default_reader_simulated() -> None:
    reader = build_default_reader(Settings(sensor="simulated"))
    try:
        assert isinstance(reader.sensor, SimulatedSensor)
        reading = reader.sense()
        assert 15.0 <= reading.temperature <= 30.0
    finally:
        reader.close()


def test_build_default_reader_rejects_unknown_sensor() -> None:
    with pytest.raises(SensorError, match="Unknown sensor"):
        build_default_reader(Settings(sensor="dht22"))
