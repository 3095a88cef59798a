"""
SQLAlchemy models for hotels and their bookings.
"""
from datetime import datetime
from sqlalchemy import String, DateTime, Integer, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from copilot.db.session import Base


class Hotel(Base):
    """
    A hotel in the Contoso Suites portfolio.

    Attributes:
        id: Unique hotel identifier (primary key)
        name: Hotel name
        city: City the hotel is located in
        country: Country the hotel is located in
    """

    __tablename__ = "hotels"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name='{self.name}')>"

    def to_dict(self) -> dict:
        """Convert model to dictionary for API and tool responses."""
        return {
            "id": self.id,
            "name": self.name,
            "city": self.city,
            "country": self.country,
        }


class Booking(Base):
    """
    A guest booking at a hotel.

    Attributes:
        id: Unique booking identifier
        hotel_id: Foreign key to Hotel
        customer_name: Name of the booking customer
        stay_begin_date: Check-in date
        stay_end_date: Check-out date
        number_of_guests: Guests on the booking
    """

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    hotel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    stay_begin_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    stay_end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("ix_bookings_hotel_begin", "hotel_id", "stay_begin_date"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, hotel_id={self.hotel_id})>"

    def to_dict(self) -> dict:
        """Convert model to dictionary for API and tool responses."""
        return {
            "id": self.id,
            "hotel_id": self.hotel_id,
            "customer_name": self.customer_name,
            "stay_begin_date": self.stay_begin_date.isoformat(),
            "stay_end_date": self.stay_end_date.isoformat(),
            "number_of_guests": self.number_of_guests,
        }
