"""HTTP route definitions for the exporter."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.schemas import HealthResponse
from sensors.interface import SensorError
from services.exposition import CONTENT_TYPE, render_metrics
from services.reader import SensorReader

router = APIRouter()


def get_reader(request: Request) -> SensorReader:
    return request.app.state.reader


@router.get(
    "/metrics",
    summary="Read the sensor and expose its values in Prometheus text format.",
    response_class=Response,
    include_in_schema=False,
)
def metrics(reader: SensorReader = Depends(get_reader)) -> Response:
    # sync handler: FastAPI runs it in the threadpool, the reader lock
    # serializes overlapping scrapes
    try:
        reading = reader.sense()
    except SensorError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Sensor read failed: {exc}",
        ) from exc
    return Response(content=render_metrics(reading), media_type=CONTENT_TYPE)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(reader: SensorReader = Depends(get_reader)) -> HealthResponse:
    return HealthResponse(
        sensor=reader.sensor.name,
        reads=reader.read_count,
        read_errors=reader.error_count,
    )
