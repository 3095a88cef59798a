"""Database models."""

from copilot.models.hotel import Hotel, Booking
from copilot.models.maintenance import MaintenanceRequest

__all__ = ["Hotel", "Booking", "MaintenanceRequest"]
