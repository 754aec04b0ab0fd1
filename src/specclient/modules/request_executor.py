"""HTTP Request Executor Module.

Sends transport configs built by the request builder through an
``httpx.AsyncClient``. No retry logic: transport errors propagate.
"""

import logging
import time
from typing import Any

import httpx


logger = logging.getLogger("specclient.executor")


async def execute_request(
    client: httpx.AsyncClient,
    transport_config: dict[str, Any],
) -> httpx.Response:
    """Execute a request and return the raw response.

    Args:
        client: Transport to send the request with.
        transport_config: Keyword arguments for ``client.request``; an
            optional ``base_url`` key replaces the client's base URL for
            this request only.

    Returns:
        The httpx response, body uninterpreted.

    Raises:
        httpx.HTTPError: If the request fails at the network level.
    """
    request_kwargs = dict(transport_config)
    base_url = request_kwargs.pop("base_url", None)
    if base_url:
        request_kwargs["url"] = f"{base_url}{request_kwargs.get('url', '')}"

    method = request_kwargs.pop("method", "GET")
    url = request_kwargs.pop("url", "")

    # Execute request with timing
    start_time = time.perf_counter()
    response = await client.request(method, url, **request_kwargs)
    elapsed_ms = (time.perf_counter() - start_time) * 1000

    logger.debug(f"{method} {response.request.url} -> {response.status_code} ({elapsed_ms:.0f}ms)")
    return response


def create_transport(
    transport_defaults: dict[str, Any] | None = None,
    base_url: str | None = None,
) -> httpx.AsyncClient:
    """Create the AsyncClient requests are sent with.

    Args:
        transport_defaults: Keyword arguments for ``httpx.AsyncClient``.
        base_url: Used unless the defaults already carry a ``base_url``.

    Returns:
        Configured AsyncClient.
    """
    client_kwargs = dict(transport_defaults or {})
    if base_url and not client_kwargs.get("base_url"):
        client_kwargs["base_url"] = base_url
    return httpx.AsyncClient(**client_kwargs)
