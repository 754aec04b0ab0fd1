"""Request Assembler.

Composes bound arguments, the rendered path, the serialized query and
the base URL into a RequestConfig, and turns that into keyword
arguments for ``httpx.AsyncClient.request``.
"""

import copy
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from specclient.types import Operation, RequestConfig

from .argument_binder import bind_arguments
from .path_template import path_param_names, render_path, stringify_path_value
from .server_resolver import expand_server_url


logger = logging.getLogger("specclient.request")


def serialize_query(query: Mapping[str, Any]) -> str:
    """Serialize query parameters, repeating the key for each list element.

    Examples:
        {"ids": [1, 2], "q": "a b"} -> "ids=1&ids=2&q=a+b"
    """
    return str(httpx.QueryParams(drop_none(query)))


def drop_none(query: Mapping[str, Any]) -> dict[str, Any]:
    """Drop None values, including None elements of list values."""
    cleaned: dict[str, Any] = {}
    for name, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = [item for item in value if item is not None]
        cleaned[name] = value
    return cleaned


def build_request_config(
    operation: Operation,
    base_url: str | None,
    params: Any = None,
    data: Any = None,
    config: dict[str, Any] | None = None,
) -> RequestConfig:
    """Build the request descriptor for an operation call.

    Args:
        operation: The operation being called.
        base_url: Resolved origin; None renders as an empty prefix.
        params: Parameters in any shape accepted by ``bind_arguments``.
        data: Request body payload.
        config: Raw transport override (not part of the descriptor).

    Returns:
        RequestConfig describing the complete request.

    Raises:
        ParameterBindingError: If the arguments cannot be bound.
    """
    bound = bind_arguments(operation, params, data, config)

    # Every placeholder gets a value, missing ones included
    for name in path_param_names(operation.path):
        if name not in bound.path_params:
            logger.warning(
                f"No value bound for path parameter '{name}' of {operation.display_name}"
            )
            bound.path_params[name] = None
    path_params = {name: stringify_path_value(value) for name, value in bound.path_params.items()}
    path = render_path(operation.path, path_params)

    query_string = serialize_query(bound.query)
    url = f"{base_url or ''}{path}{'?' + query_string if query_string else ''}"

    return RequestConfig(
        method=operation.method,
        url=url,
        path=path,
        path_params=path_params,
        query=bound.query,
        query_string=query_string,
        headers=bound.headers,
        cookies=bound.cookies,
        payload=bound.payload,
    )


def build_transport_config(
    operation: Operation,
    request: RequestConfig,
    config: dict[str, Any] | None = None,
    server_variables: Mapping[str, str | int] | None = None,
) -> dict[str, Any]:
    """Turn a request descriptor into ``httpx.AsyncClient.request`` kwargs.

    ``base_url`` is only set when the operation declares its own servers;
    otherwise the client's base URL applies. The raw override is merged
    last and wins key by key.

    Args:
        operation: The operation being called.
        request: Descriptor from ``build_request_config``.
        config: Raw transport override.
        server_variables: Variables for templated operation servers.

    Returns:
        Keyword arguments for the transport.
    """
    headers = {name: _header_value(value) for name, value in drop_none(request.headers).items()}
    cookies = drop_none(request.cookies)
    if cookies:
        headers["Cookie"] = "; ".join(
            f"{name}={_header_value(value)}" for name, value in cookies.items()
        )

    transport_config: dict[str, Any] = {
        "method": request.method.value.upper(),
        "url": request.path,
        "params": drop_none(request.query),
        "headers": headers,
    }

    if isinstance(request.payload, (str, bytes)):
        transport_config["content"] = request.payload
    elif request.payload is not None:
        transport_config["json"] = request.payload

    if operation.servers:
        transport_config["base_url"] = expand_server_url(operation.servers[0], server_variables)

    return deep_merge(transport_config, config) if config else transport_config


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base.

    Nested mappings are merged; lists and scalars from override replace
    the base value wholesale.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _header_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (list, tuple)):
        return ",".join(_header_value(item) for item in value)
    return str(value)
