"""OpenAPI client.

Loads a description and exposes one async callable per operation:

    async with OpenAPIClient("https://api.example.com/openapi.json") as api:
        response = await api.getPet({"id": 1})
        response = await api.paths["/pets/{id}"]["get"](1)

Each callable takes ``(params=None, data=None, config=None)``: params in
any shape ``bind_arguments`` accepts, the request body, and a raw
override merged into the httpx request kwargs last.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator
from typing import Any

import httpx

from specclient.errors import DefinitionValidationError, UnknownOperationError
from specclient.modules.document_loader import load_document, load_local_document, validate_definition
from specclient.modules.operation_catalog import find_operation, get_operations, index_operations
from specclient.modules.request_builder import build_request_config, build_transport_config
from specclient.modules.request_executor import create_transport, execute_request
from specclient.modules.server_resolver import ServerRef, ServerSelector, resolve_base_url
from specclient.types import ClientOptions, HttpMethod, Operation, RequestConfig


logger = logging.getLogger("specclient.client")

OperationMethod = Callable[..., Awaitable[httpx.Response]]


class OperationMethods:
    """Operation methods keyed by operationId.

    Supports both ``methods.getPet(...)`` and ``methods["getPet"](...)``.
    """

    def __init__(self, methods: dict[str, OperationMethod] | None = None) -> None:
        self._methods = dict(methods or {})

    def __getattr__(self, name: str) -> OperationMethod:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, name: str) -> OperationMethod:
        try:
            return self._methods[name]
        except KeyError:
            raise UnknownOperationError(f"Unknown operation '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __iter__(self) -> Iterator[str]:
        return iter(self._methods)

    def __len__(self) -> int:
        return len(self._methods)

    def __dir__(self) -> list[str]:
        return [*super().__dir__(), *self._methods]


class OpenAPIClient:
    """Callable operation methods for an OpenAPI description.

    Args:
        definition: URL, file path, YAML/JSON text or parsed description.
        strict: Raise on validation errors instead of logging a warning.
        transport_defaults: Keyword arguments for the httpx.AsyncClient.
        with_server: Default server: index, description, or explicit server.
        base_url_variables: Values for templated server URLs.
    """

    def __init__(
        self,
        definition: str | dict[str, Any],
        *,
        strict: bool = False,
        transport_defaults: dict[str, Any] | None = None,
        with_server: ServerRef = 0,
        base_url_variables: dict[str, str | int] | None = None,
    ) -> None:
        self.source = definition
        self.strict = strict
        self.transport_defaults = dict(transport_defaults or {})
        self.selector = ServerSelector(with_server, base_url_variables)

        self.definition: dict[str, Any] | None = None
        self.initialized = False
        self.operations = OperationMethods()
        self.paths: dict[str, dict[str, OperationMethod]] = {}

        self._operations: list[Operation] = []
        self._operations_by_id: dict[str, Operation] = {}
        self._http: httpx.AsyncClient | None = None

    @classmethod
    def from_options(cls, options: ClientOptions) -> "OpenAPIClient":
        return cls(
            options.definition,
            strict=options.strict,
            transport_defaults=options.transport_defaults,
            with_server=options.with_server,
            base_url_variables=options.base_url_variables,
        )

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    async def init(self) -> "OpenAPIClient":
        """Load and validate the description, then build operation methods."""
        document = await load_document(self.source)
        self._set_definition(document)
        return self

    def init_sync(self) -> "OpenAPIClient":
        """Like ``init`` for descriptions that need no network access."""
        document = load_local_document(self.source)
        self._set_definition(document)
        return self

    async def get_client(self) -> "OpenAPIClient":
        """Initialize on first use and return self."""
        if not self.initialized:
            return await self.init()
        return self

    def _set_definition(self, document: dict[str, Any]) -> None:
        try:
            self.definition = validate_definition(document)
        except DefinitionValidationError as e:
            if self.strict:
                raise
            logger.warning(f"Using OpenAPI document despite {len(e.errors)} validation errors")
            self.definition = document

        self._operations = get_operations(self.definition)
        self._operations_by_id = index_operations(self._operations)
        self._create_operation_methods()
        self.initialized = True
        logger.debug(
            f"Loaded {len(self._operations)} operations "
            f"({len(self._operations_by_id)} with operationId)"
        )

    def _create_operation_methods(self) -> None:
        self.operations = OperationMethods(
            {
                operation_id: self.create_operation_method(operation)
                for operation_id, operation in self._operations_by_id.items()
            }
        )

        # Example: api.paths["/pets/{id}"]["get"]({"id": 1})
        self.paths = {}
        for operation in self._operations:
            self.paths.setdefault(operation.path, {})[operation.method.value] = (
                self.create_operation_method(operation)
            )

    def create_operation_method(self, operation: Operation) -> OperationMethod:
        """Create the async callable for an operation."""

        async def operation_method(
            params: Any = None,
            data: Any = None,
            config: dict[str, Any] | None = None,
        ) -> httpx.Response:
            return await self.request(operation, params, data, config)

        operation_method.__name__ = operation.operation_id or "operation_method"
        operation_method.__doc__ = operation.summary or operation.description
        return operation_method

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @property
    def http(self) -> httpx.AsyncClient:
        """The httpx.AsyncClient requests are sent with, created lazily."""
        if self._http is None:
            self._http = create_transport(self.transport_defaults, self.get_base_url())
        return self._http

    async def request(
        self,
        operation: Operation | str,
        params: Any = None,
        data: Any = None,
        config: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Build and send the request for an operation."""
        await self.get_client()
        transport_config = self.get_transport_config(operation, params, data, config)
        return await execute_request(self.http, transport_config)

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "OpenAPIClient":
        return await self.get_client()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Catalog and request building
    # ------------------------------------------------------------------

    def get_operations(self) -> list[Operation]:
        return list(self._operations)

    def get_operation(self, operation_id: str) -> Operation | None:
        """First operation with this operationId, or None."""
        for operation in self._operations:
            if operation.operation_id == operation_id:
                return operation
        return None

    def find_operation(self, path: str, method: HttpMethod | str) -> Operation | None:
        """Operation declared at a literal path and method, or None."""
        return find_operation(self.definition, path, method)

    def get_base_url(self, operation: Operation | str | None = None) -> str | None:
        """Base URL for an operation, or the default server's when omitted."""
        if isinstance(operation, str):
            operation = self._require_operation(operation)
        return resolve_base_url(self.definition, self.selector, operation)

    def with_server(
        self,
        server: ServerRef,
        variables: dict[str, str | int] | None = None,
    ) -> None:
        """Change the default server for subsequent requests.

        Not synchronised with requests being built concurrently.
        """
        self.selector.use(server, variables)
        if self._http is not None and not self.transport_defaults.get("base_url"):
            # An unresolved server leaves requests without an origin
            self._http.base_url = self.get_base_url() or ""

    def get_request_config(
        self,
        operation: Operation | str,
        params: Any = None,
        data: Any = None,
        config: dict[str, Any] | None = None,
    ) -> RequestConfig:
        """Build the request descriptor for an operation call."""
        if isinstance(operation, str):
            operation = self._require_operation(operation)
        return build_request_config(operation, self.get_base_url(operation), params, data, config)

    def get_transport_config(
        self,
        operation: Operation | str,
        params: Any = None,
        data: Any = None,
        config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Build the httpx request kwargs for an operation call."""
        if isinstance(operation, str):
            operation = self._require_operation(operation)
        request = self.get_request_config(operation, params, data, config)
        return build_transport_config(operation, request, config, self.selector.variables)

    def _require_operation(self, operation_id: str) -> Operation:
        operation = self.get_operation(operation_id)
        if operation is None:
            raise UnknownOperationError(f"Unknown operation '{operation_id}'")
        return operation

    def __getattr__(self, name: str) -> OperationMethod:
        # Only reached when normal lookup fails: fall back to operation methods
        operations = self.__dict__.get("operations")
        if name.startswith("_") or operations is None:
            raise AttributeError(name)
        return getattr(operations, name)
