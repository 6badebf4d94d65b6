"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness payload with the reader's running totals."""

    status: str = "ok"
    sensor: str = Field(..., description="Driver name of the open sensor.")
    reads: int = Field(..., ge=0, description="Successful sensor transactions since startup.")
    read_errors: int = Field(..., ge=0, description="Failed sensor transactions since startup.")
