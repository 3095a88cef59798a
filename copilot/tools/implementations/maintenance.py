"""Maintenance request tools: save (mutating) and semantic search (read-only)."""
import logging
from typing import Any, Dict

from copilot.config import settings
from copilot.services.database import DatabaseService
from copilot.tools.base import ToolDefinition, ToolEffect
from copilot.tools.registry import ToolRegistry
from copilot.vector.index import IndexRecord
from copilot.vector.search_service import VectorSearchService

logger = logging.getLogger(__name__)

SAVE_MAINTENANCE_REQUEST = ToolDefinition(
    name="save_maintenance_request",
    description=(
        "Save a maintenance request to the database so the maintenance team can "
        "address it. Only call this after the user has confirmed."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "hotel_id": {"type": "integer", "description": "The ID of the hotel"},
            "hotel": {"type": "string", "minLength": 1, "description": "The name of the hotel"},
            "room_number": {"type": "integer", "description": "The affected room number"},
            "details": {
                "type": "string",
                "minLength": 1,
                "description": "Description of the maintenance problem",
            },
            "source": {
                "type": "string",
                "description": "Who raised the request, e.g. guest or staff",
            },
        },
        "required": ["hotel_id", "hotel", "room_number", "details"],
        "additionalProperties": False,
    },
    effect=ToolEffect.MUTATING,
    confirmation_template=(
        "save a maintenance request for room {room_number} at {hotel}: \"{details}\""
    ),
)

SEARCH_MAINTENANCE_REQUESTS = ToolDefinition(
    name="search_maintenance_requests",
    description="Find previously saved maintenance requests similar to a description.",
    input_schema={
        "type": "object",
        "properties": {
            "query": {"type": "string", "minLength": 1, "description": "Problem description"},
            "max_results": {
                "type": "integer",
                "description": "Maximum number of results, 0 for all above the threshold",
            },
            "minimum_similarity_score": {
                "type": "number",
                "minimum": -1,
                "maximum": 1,
            },
        },
        "required": ["query"],
        "additionalProperties": False,
    },
    effect=ToolEffect.READ_ONLY,
)


def register_maintenance_tools(
    registry: ToolRegistry,
    database: DatabaseService,
    search_service: VectorSearchService,
) -> None:
    """Register the maintenance request tools."""

    async def save_maintenance_request(arguments: Dict[str, Any]) -> Dict[str, Any]:
        # Embed before saving so a failed embedding leaves nothing half-written
        embedding = await search_service.embed_with_retry(arguments["details"])
        request = await database.save_maintenance_request(
            hotel_id=arguments["hotel_id"],
            hotel=arguments["hotel"],
            room_number=arguments["room_number"],
            details=arguments["details"],
            source=arguments.get("source", "guest"),
            embedding=embedding,
        )
        search_service.index.insert(
            IndexRecord(id=str(request.id), vector=embedding, payload=request.to_dict())
        )
        return {"id": request.id, "status": "saved"}

    async def search_maintenance_requests(arguments: Dict[str, Any]) -> Dict[str, Any]:
        results = await search_service.search_text(
            arguments["query"],
            max_results=arguments.get("max_results", settings.DEFAULT_MAX_RESULTS),
            min_score=arguments.get(
                "minimum_similarity_score", settings.DEFAULT_SIMILARITY_THRESHOLD
            ),
        )
        return {
            "results": [
                {"request": result.record.payload, "score": round(result.score, 4)}
                for result in results
            ]
        }

    registry.register(SAVE_MAINTENANCE_REQUEST, save_maintenance_request)
    registry.register(SEARCH_MAINTENANCE_REQUESTS, search_maintenance_requests)


async def index_saved_requests(
    database: DatabaseService,
    search_service: VectorSearchService,
) -> int:
    """Load every embedded maintenance request from the store into the index."""
    requests = await database.get_maintenance_requests(embedded_only=True)
    records = [
        IndexRecord(id=str(request.id), vector=request.embedding, payload=request.to_dict())
        for request in requests
        if str(request.id) not in search_service.index
    ]
    return search_service.load_records(records)
