"""HTTP routers."""

from copilot.api import chat, hotels, vector

__all__ = ["chat", "hotels", "vector"]
