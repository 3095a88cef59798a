"""Utility package for the maintenance copilot."""

from .validation import (
    validate_text,
    validate_embedding_vector,
    validate_tool_name,
    validate_json_schema,
    validate_similarity_threshold,
    validate_tool_arguments,
    create_safe_error_response,
)
from .http import (
    get_ssl_verify,
    create_http_client,
    build_auth_headers,
    post_json,
    DEFAULT_CUSTOM_CERT_PATH,
)

__all__ = [
    # Validation utilities
    "validate_text",
    "validate_embedding_vector",
    "validate_tool_name",
    "validate_json_schema",
    "validate_similarity_threshold",
    "validate_tool_arguments",
    "create_safe_error_response",
    # HTTP utilities
    "get_ssl_verify",
    "create_http_client",
    "build_auth_headers",
    "post_json",
    "DEFAULT_CUSTOM_CERT_PATH",
]
