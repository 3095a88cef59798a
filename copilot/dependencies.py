"""
Application wiring.

Builds the shared services once per process. FastAPI routes depend on these
getters, so tests swap any of them through `app.dependency_overrides`.
"""
from functools import lru_cache

from copilot.agent.completion import CompletionClient
from copilot.agent.copilot import MaintenanceCopilot
from copilot.agent.sessions import InMemorySessionStore
from copilot.services.database import DatabaseService
from copilot.tools.implementations import register_hotel_tools, register_maintenance_tools
from copilot.tools.registry import ToolRegistry
from copilot.vector.search_service import VectorSearchService, get_vector_search_service


@lru_cache()
def get_database_service() -> DatabaseService:
    return DatabaseService()


def get_search_service() -> VectorSearchService:
    return get_vector_search_service()


def build_tool_registry(
    database: DatabaseService,
    search_service: VectorSearchService,
) -> ToolRegistry:
    """Registry holding every tool the copilot can call."""
    registry = ToolRegistry()
    register_hotel_tools(registry, database)
    register_maintenance_tools(registry, database, search_service)
    return registry


@lru_cache()
def get_tool_registry() -> ToolRegistry:
    return build_tool_registry(get_database_service(), get_search_service())


@lru_cache()
def get_copilot() -> MaintenanceCopilot:
    return MaintenanceCopilot(
        completion=CompletionClient(),
        registry=get_tool_registry(),
        sessions=InMemorySessionStore(),
    )
