"""
Vector endpoints.

- GET /Vectorize - Embed a text string
- POST /VectorSearch - Rank indexed maintenance requests against a query vector
"""
import logging
from typing import Annotated, List

from fastapi import APIRouter, Body, Depends, Query

from copilot.config import settings
from copilot.dependencies import get_search_service
from copilot.schemas.api import VectorRecordSchema, VectorSearchResultSchema
from copilot.vector.search_service import VectorSearchService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Vector Search"])

SearchServiceDep = Annotated[VectorSearchService, Depends(get_search_service)]


@router.get("/Vectorize", response_model=List[float], summary="Vectorize text")
async def vectorize(
    search_service: SearchServiceDep,
    text: str = Query(..., description="Text to embed"),
) -> List[float]:
    logger.info("Received request to vectorize text")
    embedding = await search_service.vectorize(text)
    logger.info(f"Generated {len(embedding)}-dimensional embedding")
    return embedding


@router.post(
    "/VectorSearch",
    response_model=List[VectorSearchResultSchema],
    summary="Vector similarity search",
    description=(
        "Return indexed records whose cosine similarity to the query vector is at least "
        "`minimum_similarity_score`, best first. `max_results` of 0 returns every match."
    ),
)
async def vector_search(
    search_service: SearchServiceDep,
    query_vector: List[float] = Body(..., description="Query embedding"),
    max_results: int = Query(settings.DEFAULT_MAX_RESULTS),
    minimum_similarity_score: float = Query(settings.DEFAULT_SIMILARITY_THRESHOLD),
) -> List[VectorSearchResultSchema]:
    logger.info("Received request to perform vector search")
    results = search_service.search(
        query_vector,
        max_results=max_results,
        min_score=minimum_similarity_score,
    )
    logger.info(f"Performed vector search and retrieved {len(results)} results")
    return [
        VectorSearchResultSchema(
            record=VectorRecordSchema(id=result.record.id, payload=result.record.payload),
            score=result.score,
        )
        for result in results
    ]
