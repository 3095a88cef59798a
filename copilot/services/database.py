"""
Database service for hotels, bookings and maintenance requests.

This is the persistence store the copilot's tools talk to. Each method opens
its own session so the service can be shared across concurrent requests.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from copilot.db.session import AsyncSessionLocal
from copilot.models import Booking, Hotel, MaintenanceRequest

logger = logging.getLogger(__name__)


class DatabaseService:
    """Queries and saves hotel data through async SQLAlchemy sessions."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self.session_factory = session_factory or AsyncSessionLocal

    async def get_hotels(self) -> List[Hotel]:
        """Get all hotels ordered by id."""
        async with self.session_factory() as session:
            result = await session.execute(select(Hotel).order_by(Hotel.id))
            return list(result.scalars().all())

    async def get_hotel(self, hotel_id: int) -> Optional[Hotel]:
        async with self.session_factory() as session:
            return await session.get(Hotel, hotel_id)

    async def get_bookings_for_hotel(self, hotel_id: int) -> List[Booking]:
        """Get all bookings for a hotel."""
        async with self.session_factory() as session:
            stmt = (
                select(Booking)
                .where(Booking.hotel_id == hotel_id)
                .order_by(Booking.stay_begin_date, Booking.id)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_bookings_by_hotel_and_minimum_date(
        self,
        hotel_id: int,
        min_date: datetime,
    ) -> List[Booking]:
        """Get bookings for a hotel whose stay begins on or after `min_date`."""
        async with self.session_factory() as session:
            stmt = (
                select(Booking)
                .where(Booking.hotel_id == hotel_id)
                .where(Booking.stay_begin_date >= min_date)
                .order_by(Booking.stay_begin_date, Booking.id)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def save_maintenance_request(
        self,
        hotel_id: int,
        hotel: str,
        room_number: int,
        details: str,
        source: str = "guest",
        embedding: Optional[List[float]] = None,
    ) -> MaintenanceRequest:
        """Persist a maintenance request and return it with its assigned id."""
        async with self.session_factory() as session:
            request = MaintenanceRequest(
                hotel_id=hotel_id,
                hotel=hotel,
                room_number=room_number,
                source=source,
                details=details,
                embedding=embedding,
            )
            session.add(request)
            await session.commit()
            await session.refresh(request)

        logger.info(
            f"Saved maintenance request {request.id} for hotel {hotel_id}, room {room_number}"
        )
        return request

    async def get_maintenance_requests(self, embedded_only: bool = False) -> List[MaintenanceRequest]:
        """Get maintenance requests in insertion order."""
        async with self.session_factory() as session:
            stmt = select(MaintenanceRequest).order_by(MaintenanceRequest.id)
            if embedded_only:
                stmt = stmt.where(MaintenanceRequest.embedding.isnot(None))
            result = await session.execute(stmt)
            return list(result.scalars().all())
