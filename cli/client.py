from __future__ import annotations

from typing import Dict

import httpx
import typer
from prometheus_client.parser import text_string_to_metric_families

from cli.config import ProbeConfig
from services.exposition import GAUGES


class ExporterClient:
    """Scrapes a running exporter the way Prometheus would."""

    def __init__(self, config: ProbeConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def scrape(self) -> Dict[str, float]:
        """Fetch ``/metrics`` and return the sensor gauges by name."""
        try:
            response = self._client.get("/metrics")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.HTTPError as exc:
            typer.secho(f"Unable to reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

        values: Dict[str, float] = {}
        for family in text_string_to_metric_families(response.text):
            for sample in family.samples:
                values[sample.name] = sample.value

        missing = [name for name, _, _ in GAUGES if name not in values]
        if missing:
            typer.secho(
                f"Exporter response is missing gauges: {', '.join(missing)}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        return {name: values[name] for name, _, _ in GAUGES}

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
