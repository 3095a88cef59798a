"""Pydantic schemas for the HTTP API."""

from copilot.schemas.api import (
    BookingSchema,
    HealthCheckResponse,
    HotelSchema,
    VectorRecordSchema,
    VectorSearchResultSchema,
)

__all__ = [
    "BookingSchema",
    "HealthCheckResponse",
    "HotelSchema",
    "VectorRecordSchema",
    "VectorSearchResultSchema",
]
