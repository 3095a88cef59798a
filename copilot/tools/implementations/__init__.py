"""Tool implementations exposed to the copilot."""

from copilot.tools.implementations.hotels import register_hotel_tools
from copilot.tools.implementations.maintenance import (
    index_saved_requests,
    register_maintenance_tools,
)

__all__ = [
    "register_hotel_tools",
    "register_maintenance_tools",
    "index_saved_requests",
]
