"""
Hotel and booking endpoints.

- GET /Hotels - List all hotels
- GET /Hotels/{hotel_id}/Bookings/ - Bookings for a hotel
- GET /Hotels/{hotel_id}/Bookings/{min_date} - Bookings starting on or after a date
"""
import logging
from datetime import datetime
from typing import Annotated, List

from fastapi import APIRouter, Depends

from copilot.dependencies import get_database_service
from copilot.errors import InvalidInput
from copilot.schemas.api import BookingSchema, HotelSchema
from copilot.services.database import DatabaseService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Hotels"])

DatabaseDep = Annotated[DatabaseService, Depends(get_database_service)]


@router.get("/Hotels", response_model=List[HotelSchema], summary="List hotels")
async def get_hotels(database: DatabaseDep) -> List[HotelSchema]:
    logger.info("Received request to retrieve hotels")
    hotels = await database.get_hotels()
    logger.info(f"Retrieved {len(hotels)} hotels")
    return [HotelSchema.model_validate(hotel) for hotel in hotels]


@router.get(
    "/Hotels/{hotel_id}/Bookings/",
    response_model=List[BookingSchema],
    summary="List bookings for a hotel",
)
async def get_bookings_for_hotel(hotel_id: int, database: DatabaseDep) -> List[BookingSchema]:
    logger.info(f"Received request to retrieve bookings for hotel {hotel_id}")
    bookings = await database.get_bookings_for_hotel(hotel_id)
    logger.info(f"Retrieved {len(bookings)} bookings for hotel {hotel_id}")
    return [BookingSchema.model_validate(booking) for booking in bookings]


@router.get(
    "/Hotels/{hotel_id}/Bookings/{min_date}",
    response_model=List[BookingSchema],
    summary="List bookings for a hotel from a date",
    description="Bookings whose stay begins on or after `min_date` (ISO 8601 date or datetime).",
)
async def get_recent_bookings_for_hotel(
    hotel_id: int,
    min_date: str,
    database: DatabaseDep,
) -> List[BookingSchema]:
    try:
        parsed = datetime.fromisoformat(min_date)
    except ValueError as e:
        raise InvalidInput(f"min_date must be an ISO 8601 date, got '{min_date}'") from e

    logger.info(f"Received request to retrieve bookings for hotel {hotel_id} after {parsed}")
    bookings = await database.get_bookings_by_hotel_and_minimum_date(hotel_id, parsed)
    logger.info(f"Retrieved {len(bookings)} bookings for hotel {hotel_id} after {parsed}")
    return [BookingSchema.model_validate(booking) for booking in bookings]
