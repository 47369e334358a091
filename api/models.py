"""
Pydantic response models for the API.

Field names follow the JSON the badge widget consumes (``asOf``), with
snake_case attributes on the Python side.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MetricOut(BaseModel):
    """One published fiscal figure."""
    model_config = ConfigDict(populate_by_name=True)

    as_of: str = Field(..., alias="asOf", description="Reporting period label copied from the source table", examples=["2025-Q1"])
    value: float = Field(..., ge=0, description="Magnitude in dollars (sign dropped)", examples=[23000000000.0])


class ErrorResponse(BaseModel):
    """Error body returned with HTTP 500 when a metric cannot be resolved."""
    error: str = Field(..., description="Error message", examples=["Table_7 CSV not found in ZIP"])


class HealthOut(BaseModel):
    """Liveness response with table cache statistics."""
    status: str = Field(..., examples=["ok"])
    package_id: str = Field(..., description="Open-data package the tables come from")
    table_cache: dict[str, int] = Field(..., description="hits, misses, size, in_flight")
