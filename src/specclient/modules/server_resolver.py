"""Base URL Resolver.

Chooses the origin prefixed to every request path. Operation-level
servers win; otherwise the default server selector decides.
"""

import re
from collections.abc import Mapping
from typing import Any

from specclient.types import Operation, Server


SERVER_VARIABLE_PATTERN = re.compile(r"\{([^{}]+)\}")

ServerRef = int | str | Server | Mapping[str, Any]


class ServerSelector:
    """The default server selector and its URL template variables.

    ``server`` is one of:
        - an index into the description's ``servers`` list,
        - a string matched against each server's ``description``,
        - an explicit Server (or mapping with a ``url``) used verbatim.

    Shared by every request built from the same client. ``use`` is not
    synchronised: callers changing the server while requests are being
    built concurrently must serialise that themselves.
    """

    def __init__(
        self,
        server: ServerRef = 0,
        variables: dict[str, str | int] | None = None,
    ) -> None:
        self._server = server
        self._variables = dict(variables or {})

    @property
    def server(self) -> ServerRef:
        return self._server

    @property
    def variables(self) -> dict[str, str | int]:
        return self._variables

    def use(self, server: ServerRef, variables: dict[str, str | int] | None = None) -> None:
        """Replace the selected server and its variables."""
        self._server = server
        self._variables = dict(variables or {})

    def select(self, servers: list[Server]) -> Server | None:
        """Pick the selected server out of the description's list."""
        server = self._server
        # bool is an int subclass but never a valid index
        if isinstance(server, int) and not isinstance(server, bool):
            if 0 <= server < len(servers):
                return servers[server]
            return None
        if isinstance(server, str):
            for candidate in servers:
                if candidate.description == server:
                    return candidate
            return None
        if isinstance(server, Server):
            return server
        if isinstance(server, Mapping) and server.get("url"):
            return Server.model_validate(server)
        return None


def expand_server_url(server: Server, variables: Mapping[str, str | int] | None = None) -> str:
    """Substitute ``{name}`` variables in a server URL.

    Explicit variables win over the server's declared defaults; unknown
    names are left in place.

    Examples:
        url "https://{region}.example.com", {"region": "eu"} -> "https://eu.example.com"
    """
    variables = variables or {}

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        if name in server.variables:
            return server.variables[name].default
        return match.group(0)

    return SERVER_VARIABLE_PATTERN.sub(substitute, server.url)


def get_servers(definition: dict[str, Any] | None) -> list[Server]:
    """Top-level servers of a description."""
    if not definition:
        return []
    return [Server.model_validate(server) for server in definition.get("servers") or []]


def resolve_base_url(
    definition: dict[str, Any] | None,
    selector: ServerSelector,
    operation: Operation | None = None,
) -> str | None:
    """Resolve the base URL for a request.

    Args:
        definition: Parsed OpenAPI description, None if not loaded yet.
        selector: Default server selector.
        operation: Operation whose own servers take precedence.

    Returns:
        The origin URL, or None when nothing resolves.
    """
    if not definition:
        return None

    if operation is not None and operation.servers:
        return expand_server_url(operation.servers[0], selector.variables)

    target_server = selector.select(get_servers(definition))
    if target_server is None:
        return None

    return expand_server_url(target_server, selector.variables)
