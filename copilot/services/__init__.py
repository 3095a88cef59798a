"""Services package."""

from copilot.services.database import DatabaseService

__all__ = ["DatabaseService"]
