from __future__ import annotations

import dataclasses
import logging
from typing import Optional

import typer
import uvicorn

from app.main import create_app
from cli.client import ExporterClient
from cli.config import load_config
from cli.render import render_gauges, render_reading
from logging_config import configure_logging
from sensors.interface import SensorError
from services.reader import build_default_reader
from settings import SENSOR_KINDS, Settings, get_settings, parse_listen_address

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Prometheus exporter for BME280 temperature, humidity and pressure.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)

_SENSOR_HELP = f"Sensor driver to use ({', '.join(SENSOR_KINDS)})."


def _resolve_settings(
    sensor: Optional[str] = None,
    bus: Optional[int] = None,
    address: Optional[str] = None,
    log_level: Optional[str] = None,
    listen_address: Optional[str] = None,
) -> Settings:
    overrides: dict[str, object] = {}
    if sensor is not None:
        kind = sensor.strip().lower()
        if kind not in SENSOR_KINDS:
            raise typer.BadParameter(f"Unknown sensor {sensor!r}.", param_hint="--sensor")
        overrides["sensor"] = kind
    if bus is not None:
        overrides["i2c_bus"] = bus
    if address is not None:
        try:
            overrides["i2c_address"] = int(address, 0)
        except ValueError as exc:
            raise typer.BadParameter(f"Invalid I2C address {address!r}.", param_hint="--address") from exc
    if log_level is not None:
        overrides["log_level"] = log_level.upper()
    if listen_address is not None:
        overrides["listen_address"] = listen_address
    return dataclasses.replace(get_settings(), **overrides)


@app.command("serve")
def serve_command(
    listen_address: Optional[str] = typer.Option(
        None,
        "--listen-address",
        "-l",
        help="The address to listen on for HTTP requests (defaults to BME280_LISTEN_ADDRESS or :9529).",
    ),
    sensor: Optional[str] = typer.Option(None, "--sensor", help=_SENSOR_HELP),
    bus: Optional[int] = typer.Option(None, "--bus", help="I2C bus number."),
    address: Optional[str] = typer.Option(None, "--address", help="I2C device address, e.g. 0x76."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level."),
) -> None:
    """Serve /metrics until interrupted."""
    settings = _resolve_settings(sensor, bus, address, log_level, listen_address)
    try:
        host, port = parse_listen_address(settings.listen_address)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--listen-address") from exc

    configure_logging(settings.log_level)
    logger.info("Listening", extra={"listen_address": settings.listen_address})
    # lifespan="on" turns a sensor open failure into a startup failure
    uvicorn.run(
        create_app(settings),
        host=host,
        port=port,
        lifespan="on",
        log_config=None,
        log_level=settings.log_level.lower(),
    )


@app.command("read")
def read_command(
    sensor: Optional[str] = typer.Option(None, "--sensor", help=_SENSOR_HELP),
    bus: Optional[int] = typer.Option(None, "--bus", help="I2C bus number."),
    address: Optional[str] = typer.Option(None, "--address", help="I2C device address, e.g. 0x76."),
) -> None:
    """Take a single reading and print it."""
    settings = _resolve_settings(sensor, bus, address)
    configure_logging(settings.log_level)
    try:
        with build_default_reader(settings) as reader:
            reading = reader.sense()
            sensor_name = reader.sensor.name
    except SensorError as exc:
        typer.secho(f"Sensor read failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    render_reading(reading, sensor_name)


@app.command("probe")
def probe_command(
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="Exporter base URL (defaults to BME280_EXPORTER_URL env or http://localhost:9529).",
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds."),
) -> None:
    """Scrape a running exporter and print its gauges."""
    config = load_config(base_url=url, timeout=timeout)
    client = ExporterClient(config)
    try:
        values = client.scrape()
    finally:
        client.close()
    render_gauges(values, config.base_url)
