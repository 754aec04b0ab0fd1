"""specclient - callable operation methods for OpenAPI descriptions."""

from specclient.client import OpenAPIClient, OperationMethods
from specclient.errors import (
    DefinitionValidationError,
    DocumentLoadError,
    ParameterBindingError,
    SpecClientError,
    UnknownOperationError,
)
from specclient.types import (
    ClientOptions,
    HttpMethod,
    Operation,
    Parameter,
    ParamLocation,
    ParamSpec,
    RequestConfig,
    Server,
)

__version__ = "0.1.0"

__all__ = [
    "ClientOptions",
    "DefinitionValidationError",
    "DocumentLoadError",
    "HttpMethod",
    "OpenAPIClient",
    "Operation",
    "OperationMethods",
    "Parameter",
    "ParamLocation",
    "ParamSpec",
    "ParameterBindingError",
    "RequestConfig",
    "Server",
    "SpecClientError",
    "UnknownOperationError",
]
