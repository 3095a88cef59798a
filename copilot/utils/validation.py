"""Input validation helpers shared by the vector and tool layers."""

import logging
import math
import re
from typing import Any, Dict, List, Optional

import jsonschema

from copilot.errors import CopilotError, DimensionMismatch, InvalidInput, SchemaViolation

logger = logging.getLogger(__name__)


def validate_text(text: str, max_length: int = 8000) -> str:
    """Validate free text sent to a model service."""
    if not isinstance(text, str):
        raise InvalidInput("Text must be a string")

    if not text.strip():
        raise InvalidInput("Text cannot be empty")

    if len(text) > max_length:
        raise InvalidInput(f"Text cannot exceed {max_length} characters")

    return text


def validate_embedding_vector(
    embedding: List[float],
    dimension: Optional[int] = None,
) -> List[float]:
    """Validate embedding vector format and values."""
    if not isinstance(embedding, (list, tuple)):
        raise InvalidInput("Embedding must be a list of floats")

    if not embedding:
        raise InvalidInput("Embedding cannot be empty")

    if dimension is not None and len(embedding) != dimension:
        raise DimensionMismatch(
            f"Embedding dimension {len(embedding)} doesn't match "
            f"expected dimension {dimension}"
        )

    validated_embedding = []
    for i, value in enumerate(embedding):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInput(f"Embedding element at index {i} is not a number")

        if math.isnan(value) or math.isinf(value):
            raise InvalidInput(f"Embedding element at index {i} is not finite")

        validated_embedding.append(float(value))

    return validated_embedding


def validate_tool_name(name: str) -> str:
    """Validate tool name format.

    Names are sent to the completion service as function names, so they
    follow its identifier rules.
    """
    if not isinstance(name, str):
        raise SchemaViolation("Tool name must be a string")

    name = name.strip()

    if not name:
        raise SchemaViolation("Tool name cannot be empty")

    if len(name) > 64:
        raise SchemaViolation("Tool name cannot exceed 64 characters")

    if not re.match(r'^[a-zA-Z0-9_\-]+$', name):
        raise SchemaViolation(
            "Tool name can only contain letters, numbers, hyphens and underscores"
        )

    return name


def validate_json_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Validate JSON schema format."""
    if not isinstance(schema, dict):
        raise SchemaViolation("Schema must be a dictionary")

    if schema.get("type") != "object":
        raise SchemaViolation("Tool input schema must have type 'object'")

    try:
        jsonschema.Draft7Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise SchemaViolation(f"Invalid JSON Schema: {e.message}")

    return schema


def validate_similarity_threshold(threshold: float) -> float:
    """Validate a cosine similarity threshold."""
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise InvalidInput("Similarity threshold must be a number")

    threshold = float(threshold)

    if math.isnan(threshold) or not -1.0 <= threshold <= 1.0:
        raise InvalidInput("Similarity threshold must be between -1.0 and 1.0")

    return threshold


def validate_tool_arguments(arguments: Dict[str, Any], input_schema: Dict[str, Any]) -> Dict[str, Any]:
    """Validate tool arguments against input schema."""
    if not isinstance(arguments, dict):
        raise SchemaViolation("Arguments must be a dictionary")

    try:
        jsonschema.validate(
            instance=arguments,
            schema=input_schema,
            format_checker=jsonschema.Draft7Validator.FORMAT_CHECKER
        )
    except jsonschema.ValidationError as e:
        raise SchemaViolation(f"Argument validation failed: {e.message}")

    return arguments


def create_safe_error_response(error: Exception, include_details: bool = False) -> Dict[str, Any]:
    """Create an error body that doesn't expose unexpected internals."""
    error_type = type(error).__name__

    if isinstance(error, CopilotError):
        logger.warning(f"{error_type}: {error}")
        return {"error": error_type, "message": str(error)}

    logger.exception(f"Error occurred: {error_type}: {error}")

    response = {
        "error": error_type,
        "message": "An internal error occurred"
    }
    if include_details:
        response["message"] = str(error)

    return response
