"""HTTP utility functions for calls to the external model services."""

import os
from functools import lru_cache
from typing import Dict, Optional, Union

import httpx

from copilot.errors import ProviderUnavailable

# Default custom certificate path for corporate/enterprise environments
DEFAULT_CUSTOM_CERT_PATH = "/etc/ssl/certs/ca-custom.pem"


@lru_cache(maxsize=1)
def get_ssl_verify() -> Union[str, bool]:
    """
    Get SSL verification setting for HTTP clients.

    Returns the path to a custom CA certificate if it exists at the default location,
    otherwise True for default verification.
    """
    if os.path.exists(DEFAULT_CUSTOM_CERT_PATH):
        return DEFAULT_CUSTOM_CERT_PATH
    return True


def create_http_client(
    timeout: float = 30.0,
    **kwargs
) -> httpx.AsyncClient:
    """
    Create an httpx AsyncClient with SSL verification and timeout settings.

    Usage:
        async with create_http_client(timeout=60.0) as client:
            response = await client.post(url, json=payload)
    """
    return httpx.AsyncClient(
        verify=get_ssl_verify(),
        timeout=httpx.Timeout(timeout),
        **kwargs
    )


def build_auth_headers(api_key: Optional[str], header_name: str = "Authorization") -> Dict[str, str]:
    """Build auth headers for OpenAI (bearer) or Azure OpenAI (api-key) endpoints."""
    headers = {"Content-Type": "application/json"}
    if not api_key:
        return headers
    if header_name.lower() == "authorization":
        headers["Authorization"] = f"Bearer {api_key}"
    else:
        headers[header_name] = api_key
    return headers


async def post_json(
    url: str,
    payload: dict,
    headers: Dict[str, str],
    timeout: float,
    service: str,
) -> dict:
    """
    POST a JSON payload to a model service and return the decoded response.

    Timeouts, transport errors, non-2xx statuses and undecodable bodies all
    surface as ProviderUnavailable.
    """
    async with create_http_client(timeout=timeout) as client:
        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise ProviderUnavailable(f"{service} timed out after {timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise ProviderUnavailable(
                f"{service} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"Failed to reach {service} at {url}: {e}") from e
        except ValueError as e:
            raise ProviderUnavailable(f"{service} returned an invalid JSON body") from e
