"""Operation Catalog.

Flattens the ``paths -> method -> operation`` tree of a description
into a list of Operation records.
"""

import logging
from typing import Any

from specclient.types import HttpMethod, Operation

from .document_loader import resolve_refs


logger = logging.getLogger("specclient.catalog")

HTTP_METHODS = [method.value for method in HttpMethod]


def get_operations(definition: dict[str, Any] | None) -> list[Operation]:
    """Flatten a description into a list of operations.

    Path-level parameters and servers are appended after the
    operation's own, so operation-level declarations win on lookup.

    Args:
        definition: Parsed OpenAPI description (None yields no operations).

    Returns:
        Operations in path order, methods in HttpMethod order.
    """
    if not definition:
        return []

    operations: list[Operation] = []
    paths = definition.get("paths") or {}

    for path, path_item in paths.items():
        path_item = path_item or {}
        shared_parameters = resolve_refs(path_item.get("parameters") or [], definition)
        shared_servers = path_item.get("servers") or []

        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not operation:
                continue

            parameters = resolve_refs(operation.get("parameters") or [], definition)
            servers = operation.get("servers") or []
            operations.append(
                Operation.model_validate(
                    {
                        **operation,
                        "path": path,
                        "method": method,
                        "parameters": [*parameters, *shared_parameters],
                        "servers": [*servers, *shared_servers],
                    }
                )
            )

    return operations


def get_operation(definition: dict[str, Any] | None, operation_id: str) -> Operation | None:
    """Get the first operation with a matching operationId, or None."""
    for operation in get_operations(definition):
        if operation.operation_id == operation_id:
            return operation
    return None


def find_operation(
    definition: dict[str, Any] | None,
    path: str,
    method: HttpMethod | str,
) -> Operation | None:
    """Find an operation by its literal path pattern and HTTP method.

    Args:
        definition: Parsed OpenAPI description.
        path: Path pattern as written in the description (e.g. "/pets/{id}").
        method: HTTP method, case-insensitive.

    Returns:
        Matching Operation or None.
    """
    method = HttpMethod(method.lower()) if isinstance(method, str) else method
    for operation in get_operations(definition):
        if operation.path == path and operation.method == method:
            return operation
    return None


def index_operations(operations: list[Operation]) -> dict[str, Operation]:
    """Index operations by operationId.

    Operations without an id are left out. When two operations share
    an id the later one wins and a warning is logged.
    """
    index: dict[str, Operation] = {}
    for operation in operations:
        if not operation.operation_id:
            continue
        if operation.operation_id in index:
            previous = index[operation.operation_id]
            logger.warning(
                f"Duplicate operationId '{operation.operation_id}': "
                f"{operation.method.value.upper()} {operation.path} replaces "
                f"{previous.method.value.upper()} {previous.path}"
            )
        index[operation.operation_id] = operation
    return index
