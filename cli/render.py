from __future__ import annotations

from typing import Any, Iterable, Mapping

import typer

from models.readings import EnvironmentalReading
from services.exposition import GAUGES


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(reading: EnvironmentalReading, sensor: str) -> None:
    echo_heading(f"Reading from {sensor}")
    echo_key_values(
        [
            ("temperature", f"{reading.temperature:.2f} °C"),
            ("humidity", f"{reading.humidity:.2f} %"),
            ("pressure", f"{reading.pressure:.2f} hPa"),
        ]
    )


def render_gauges(values: Mapping[str, float], source: str) -> None:
    echo_heading(f"Gauges from {source}")
    echo_key_values((name, values[name]) for name, _, _ in GAUGES)
