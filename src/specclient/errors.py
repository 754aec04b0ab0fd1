"""Exceptions raised by specclient."""

import json
from typing import Any


class SpecClientError(Exception):
    pass


class DocumentLoadError(SpecClientError):
    """The description could not be fetched or parsed."""


class DefinitionValidationError(SpecClientError):
    """The description is not valid OpenAPI.

    All violations are reported together in ``errors``.
    """

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        pretty_errors = json.dumps(errors, indent=2, default=str)
        super().__init__(
            f"Document is not valid OpenAPI. {len(errors)} validation errors:\n{pretty_errors}"
        )


class ParameterBindingError(SpecClientError, ValueError):
    """A bare argument could not be bound to any declared parameter."""


class UnknownOperationError(SpecClientError, AttributeError, KeyError):
    """No operation method is registered under the requested name."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
