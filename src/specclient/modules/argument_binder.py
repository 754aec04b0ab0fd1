"""Parameter Classifier and Argument Binder.

Resolves the caller's variably-shaped arguments to (name, location)
pairs. The first argument may be:

    - a list/tuple of explicit ParamSpec triples,
    - a mapping of parameter name to value,
    - a single scalar, bound to the first required (else first) parameter,
    - None, binding nothing.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from specclient.errors import ParameterBindingError
from specclient.types import BoundArguments, Operation, Parameter, ParamLocation, ParamSpec


# ============================================================================
# Argument Variants
# ============================================================================


@dataclass(frozen=True)
class ParamsArray:
    items: list[ParamSpec]


@dataclass(frozen=True)
class ParamsMapping:
    values: Mapping[str, Any]


@dataclass(frozen=True)
class ParamsScalar:
    value: Any


@dataclass(frozen=True)
class NoParams:
    pass


ParamsArgument = Union[ParamsArray, ParamsMapping, ParamsScalar, NoParams]


def to_param_spec(item: Any) -> ParamSpec:
    """Normalise one explicit parameter into a ParamSpec.

    Accepts ParamSpec, ``(name, value)``, ``(name, value, location)``
    and mappings with ``name``/``value``/``in`` keys.
    """
    if isinstance(item, ParamSpec):
        return item
    if isinstance(item, Mapping):
        return ParamSpec.model_validate(item)
    if isinstance(item, (list, tuple)) and len(item) in (2, 3):
        name, value, *rest = item
        return ParamSpec(name=name, value=value, location=rest[0] if rest else None)
    raise ParameterBindingError(f"Cannot interpret {item!r} as a (name, value, location) parameter")


def classify_arguments(params: Any) -> ParamsArgument:
    """Turn the first call argument into an explicit variant."""
    if params is None:
        return NoParams()
    if isinstance(params, (list, tuple)):
        return ParamsArray([to_param_spec(item) for item in params])
    if isinstance(params, Mapping):
        return ParamsMapping(params)
    return ParamsScalar(params)


# ============================================================================
# Parameter Classifier
# ============================================================================


def classify_parameter(operation: Operation, name: str) -> ParamLocation:
    """Get the declared location of a parameter.

    Names the operation does not declare default to the query string.
    """
    for parameter in operation.parameters:
        if parameter.name == name:
            return parameter.location
    return ParamLocation.QUERY


def get_first_operation_param(operation: Operation) -> Parameter | None:
    """First required parameter, else first declared one, else None."""
    for parameter in operation.parameters:
        if parameter.required:
            return parameter
    if operation.parameters:
        return operation.parameters[0]
    return None


# ============================================================================
# Argument Binder
# ============================================================================


def bind_arguments(
    operation: Operation,
    params: Any = None,
    data: Any = None,
    config: dict[str, Any] | None = None,
) -> BoundArguments:
    """Bind call arguments to request locations.

    Args:
        operation: The operation being called.
        params: Parameters in any of the supported shapes.
        data: Request body payload, passed through as-is.
        config: Raw transport override, merged last by the request builder.

    Returns:
        BoundArguments with every value placed in its location.

    Raises:
        ParameterBindingError: If a scalar is given and the operation
            declares no parameters.
    """
    bound = BoundArguments(payload=data, config=config)
    targets = {
        ParamLocation.PATH: bound.path_params,
        ParamLocation.QUERY: bound.query,
        ParamLocation.HEADER: bound.headers,
        ParamLocation.COOKIE: bound.cookies,
    }

    def set_param(name: str, value: Any, location: ParamLocation) -> None:
        # A name lives in exactly one location per request
        for target in targets.values():
            target.pop(name, None)
        targets[location][name] = value

    argument = classify_arguments(params)

    if isinstance(argument, ParamsArray):
        for spec in argument.items:
            set_param(spec.name, spec.value, spec.location or classify_parameter(operation, spec.name))
    elif isinstance(argument, ParamsMapping):
        for name, value in argument.values.items():
            if not _is_unset(value):
                set_param(name, value, classify_parameter(operation, name))
    elif isinstance(argument, ParamsScalar):
        first_param = get_first_operation_param(operation)
        if first_param is None:
            raise ParameterBindingError(
                f"No parameters found for operation {operation.display_name}"
            )
        set_param(first_param.name, argument.value, first_param.location)

    return bound


def _is_unset(value: Any) -> bool:
    """Mapping values that are not forwarded: None, False, 0 and ""."""
    if value is None or value is False:
        return True
    return isinstance(value, (int, float, str)) and not value
