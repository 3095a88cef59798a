"""
SQLAlchemy model for maintenance requests.
"""
from datetime import datetime, timezone
from typing import Optional, List
from sqlalchemy import String, Text, DateTime, JSON, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from copilot.db.session import Base


class MaintenanceRequest(Base):
    """
    A maintenance request raised by a guest or staff member.

    The embedding of `details` is stored alongside the row so the in-memory
    similarity index can be rebuilt on startup without re-embedding.

    Attributes:
        id: Unique request identifier
        hotel_id: Foreign key to Hotel
        hotel: Denormalized hotel name
        room_number: Affected room
        source: Who raised the request (guest, staff, ...)
        details: Free-text description of the problem
        embedding: Vector embedding of `details`
        created_at: When the request was saved
    """

    __tablename__ = "maintenance_requests"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    hotel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hotel: Mapped[str] = mapped_column(String(255), nullable=False)
    room_number: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(100), nullable=False, default="guest")
    details: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[Optional[List[float]]] = mapped_column(JSON(none_as_null=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    def __repr__(self) -> str:
        return f"<MaintenanceRequest(id={self.id}, hotel_id={self.hotel_id}, room={self.room_number})>"

    def to_dict(self) -> dict:
        """Convert model to dictionary (without the embedding)."""
        return {
            "id": self.id,
            "hotel_id": self.hotel_id,
            "hotel": self.hotel,
            "room_number": self.room_number,
            "source": self.source,
            "details": self.details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
