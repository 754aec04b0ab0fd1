"""Core type definitions for specclient.

All types use Pydantic so that descriptions loaded from JSON/YAML
are normalised into the same shapes the request builder works with.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Enums
# ============================================================================


class HttpMethod(str, Enum):
    """HTTP methods that may key an operation under a path item."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParamLocation(str, Enum):
    """Where a named value is placed in the final request."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


# ============================================================================
# Description Types
# ============================================================================


class Parameter(BaseModel):
    """A declared operation or path-level parameter."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    name: str
    location: ParamLocation = Field(alias="in")
    required: bool = False


class ServerVariable(BaseModel):
    """A substitution variable of a templated server URL."""

    model_config = ConfigDict(extra="allow", frozen=True)

    default: str
    enum: list[str] | None = None
    description: str | None = None


class Server(BaseModel):
    """A server origin, optionally templated (``https://{region}.example.com``)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    url: str
    description: str | None = None
    variables: dict[str, ServerVariable] = Field(default_factory=dict)


class Operation(BaseModel):
    """One HTTP-method-bound action of the description.

    Path-level parameters and servers are already merged in.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    path: str
    method: HttpMethod
    operation_id: str | None = Field(default=None, alias="operationId")
    summary: str | None = None
    description: str | None = None
    parameters: list[Parameter] = Field(default_factory=list)
    servers: list[Server] = Field(default_factory=list)
    request_body: dict[str, Any] | None = Field(default=None, alias="requestBody")

    @property
    def display_name(self) -> str:
        """Operation id when present, otherwise ``METHOD /path``."""
        return self.operation_id or f"{self.method.value.upper()} {self.path}"


# ============================================================================
# Argument Types
# ============================================================================


class ParamSpec(BaseModel):
    """An explicit (name, value, location) triple passed by the caller."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    value: Any = None
    location: ParamLocation | None = Field(default=None, alias="in")


class BoundArguments(BaseModel):
    """Caller arguments resolved to their request locations."""

    path_params: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, Any] = Field(default_factory=dict)
    cookies: dict[str, Any] = Field(default_factory=dict)
    payload: Any | None = None
    config: dict[str, Any] | None = None


# ============================================================================
# Request Types
# ============================================================================


class RequestConfig(BaseModel):
    """A fully resolved, transport-ready request descriptor."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    url: str
    path: str
    path_params: dict[str, str] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    query_string: str = ""
    headers: dict[str, Any] = Field(default_factory=dict)
    cookies: dict[str, Any] = Field(default_factory=dict)
    payload: Any | None = None


# ============================================================================
# Configuration Types
# ============================================================================


class ClientOptions(BaseModel):
    """Options accepted by ``OpenAPIClient.from_options``."""

    definition: str | dict[str, Any] = Field(
        description="URL, file path, JSON/YAML text or parsed description",
    )
    strict: bool = Field(
        default=False,
        description="Raise on validation errors instead of logging a warning",
    )
    transport_defaults: dict[str, Any] = Field(
        default_factory=dict,
        description="Keyword arguments for the underlying httpx.AsyncClient",
    )
    with_server: int | str | Server = Field(
        default=0,
        description="Index, description or explicit server used as default origin",
    )
    base_url_variables: dict[str, str | int] = Field(default_factory=dict)
