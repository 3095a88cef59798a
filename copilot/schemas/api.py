"""
Pydantic schemas for the HTTP API.

Defines response models for the hotel, vector and health endpoints.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Hotels
# ============================================================================

class HotelSchema(BaseModel):
    """Hotel as returned by /Hotels."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    city: Optional[str] = None
    country: Optional[str] = None


class BookingSchema(BaseModel):
    """Booking as returned by the /Hotels/{hotel_id}/Bookings endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    hotel_id: int
    customer_name: str
    stay_begin_date: datetime
    stay_end_date: datetime
    number_of_guests: int


# ============================================================================
# Vector search
# ============================================================================

class VectorRecordSchema(BaseModel):
    id: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class VectorSearchResultSchema(BaseModel):
    """A matched record with its cosine similarity to the query."""

    record: VectorRecordSchema
    score: float = Field(..., ge=-1.0, le=1.0, description="Cosine similarity (-1 to 1)")


# ============================================================================
# Health
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str = Field(..., description="Overall health status")
    service: str
    version: str
    database: bool = Field(..., description="Database connectivity")
    embedding_service: bool = Field(..., description="Embedding service availability")
    indexed_requests: int = Field(..., description="Maintenance requests in the similarity index")
    registered_tools: int = Field(..., description="Tools available to the copilot")
