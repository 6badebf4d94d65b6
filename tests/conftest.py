from __future__ import annotations

from typing import Iterator, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from models.readings import SensorSample
from sensors.interface import SensorError
from services.reader import SensorReader
from settings import Settings

DEFAULT_SAMPLE = SensorSample(temperature=21.5, humidity=4500, pressure=101325)


class FakeSensor:
    """In-memory sensor that replays samples and counts transactions."""

    name = "fake"

    def __init__(
        self,
        samples: Optional[Sequence[SensorSample]] = None,
        error: Optional[SensorError] = None,
    ) -> None:
        self.samples = list(samples or [DEFAULT_SAMPLE])
        self.error = error
        self.calls = 0
        self.close_calls = 0

    def sense(self) -> SensorSample:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.samples[min(self.calls, len(self.samples)) - 1]

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def sensor_factory() -> type[FakeSensor]:
    return FakeSensor


@pytest.fixture
def fake_sensor() -> FakeSensor:
    return FakeSensor()


@pytest.fixture
def api_client(fake_sensor: FakeSensor) -> Iterator[TestClient]:
    app = create_app(
        Settings(sensor="simulated"),
        reader_factory=lambda _settings: SensorReader(fake_sensor),
    )
    with TestClient(app) as client:
        yield client
