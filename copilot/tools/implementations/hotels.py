"""Read-only hotel and booking lookup tools."""
from datetime import datetime
from typing import Any, Dict

from copilot.services.database import DatabaseService
from copilot.tools.base import ToolDefinition, ToolEffect
from copilot.tools.registry import ToolRegistry

GET_HOTELS = ToolDefinition(
    name="get_hotels",
    description="Get all hotels with their id, name, city and country.",
    input_schema={"type": "object", "properties": {}, "additionalProperties": False},
    effect=ToolEffect.READ_ONLY,
)

GET_BOOKINGS_FOR_HOTEL = ToolDefinition(
    name="get_bookings_for_hotel",
    description="Get all bookings for a hotel.",
    input_schema={
        "type": "object",
        "properties": {
            "hotel_id": {"type": "integer", "description": "The ID of the hotel"},
        },
        "required": ["hotel_id"],
        "additionalProperties": False,
    },
    effect=ToolEffect.READ_ONLY,
)

GET_BOOKINGS_BY_HOTEL_AND_MIN_DATE = ToolDefinition(
    name="get_bookings_by_hotel_and_min_date",
    description="Get bookings for a hotel whose stay begins on or after a date.",
    input_schema={
        "type": "object",
        "properties": {
            "hotel_id": {"type": "integer", "description": "The ID of the hotel"},
            "min_date": {
                "type": "string",
                "description": "Earliest stay begin date, ISO 8601 (YYYY-MM-DD)",
            },
        },
        "required": ["hotel_id", "min_date"],
        "additionalProperties": False,
    },
    effect=ToolEffect.READ_ONLY,
)


def register_hotel_tools(registry: ToolRegistry, database: DatabaseService) -> None:
    """Register the hotel lookup tools against a database service."""

    async def get_hotels(arguments: Dict[str, Any]) -> Dict[str, Any]:
        hotels = await database.get_hotels()
        return {"hotels": [hotel.to_dict() for hotel in hotels]}

    async def get_bookings_for_hotel(arguments: Dict[str, Any]) -> Dict[str, Any]:
        bookings = await database.get_bookings_for_hotel(arguments["hotel_id"])
        return {"bookings": [booking.to_dict() for booking in bookings]}

    async def get_bookings_by_hotel_and_min_date(arguments: Dict[str, Any]) -> Dict[str, Any]:
        min_date = datetime.fromisoformat(arguments["min_date"])
        bookings = await database.get_bookings_by_hotel_and_minimum_date(
            arguments["hotel_id"], min_date
        )
        return {"bookings": [booking.to_dict() for booking in bookings]}

    registry.register(GET_HOTELS, get_hotels)
    registry.register(GET_BOOKINGS_FOR_HOTEL, get_bookings_for_hotel)
    registry.register(GET_BOOKINGS_BY_HOTEL_AND_MIN_DATE, get_bookings_by_hotel_and_min_date)
