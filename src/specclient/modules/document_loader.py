"""OpenAPI description loader and validator.

Fetches the description (URL, file, raw text or dict), parses
JSON/YAML, and validates it against the OpenAPI grammar.
"""

import logging
from pathlib import Path
from typing import Any

import httpx
import yaml
from openapi_pydantic import OpenAPI
from openapi_pydantic.v3.v3_0 import OpenAPI as OpenAPI_30
from pydantic import ValidationError

from specclient.errors import DefinitionValidationError, DocumentLoadError


logger = logging.getLogger("specclient.loader")


async def load_document(
    source: str | dict[str, Any],
    timeout: float = 30.0,
) -> dict[str, Any]:
    """Load an OpenAPI description.

    Args:
        source: http(s) URL, path to a YAML/JSON file, raw YAML/JSON
            text, or an already-parsed description.
        timeout: Request timeout in seconds when fetching a URL.

    Returns:
        The parsed description.

    Raises:
        DocumentLoadError: If the source is unreachable or unparsable.
    """
    if isinstance(source, str) and is_url(source):
        logger.debug(f"Fetching description from {source}")
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(source)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise DocumentLoadError(f"Failed to fetch OpenAPI document {source}: {e}") from e
        return parse_document(response.text)

    return load_local_document(source)


def load_local_document(source: str | dict[str, Any]) -> dict[str, Any]:
    """Load a description without network access.

    Args:
        source: Parsed description, raw YAML/JSON text, or a file path.

    Returns:
        The parsed description.

    Raises:
        DocumentLoadError: If the source is a URL or cannot be parsed.
    """
    if isinstance(source, dict):
        return source
    if is_url(source):
        raise DocumentLoadError(f"Cannot load {source} synchronously, fetch it with init()")

    # Inline JSON/YAML text, otherwise a local file path
    if "\n" in source or source.lstrip().startswith("{"):
        return parse_document(source)
    return load_document_from_file(Path(source))


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_document_from_file(file_path: str | Path) -> dict[str, Any]:
    """Load and parse an OpenAPI description from a file.

    Args:
        file_path: Path to YAML or JSON description file.

    Returns:
        The parsed description.
    """
    logger.debug(f"Reading description from {file_path}")
    try:
        with open(file_path, encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise DocumentLoadError(f"Cannot read OpenAPI document {file_path}: {e}") from e
    return parse_document(content)


def parse_document(content: str) -> dict[str, Any]:
    """Parse YAML or JSON text (JSON is valid YAML)."""
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"OpenAPI document is not valid JSON or YAML: {e}") from e

    if not isinstance(document, dict):
        raise DocumentLoadError("OpenAPI document must be a mapping at the top level")
    return document


def validate_definition(document: dict[str, Any]) -> dict[str, Any]:
    """Validate a parsed description against the OpenAPI grammar.

    OpenAPI 3.0.x documents are checked with the 3.0 models, anything
    else with the 3.1 models.

    Args:
        document: Parsed OpenAPI description.

    Returns:
        The same document, unchanged.

    Raises:
        DefinitionValidationError: Listing every violation found.
    """
    openapi_version = str(document.get("openapi", ""))
    model = OpenAPI_30 if openapi_version.startswith("3.0") else OpenAPI

    try:
        model.model_validate(document)
    except ValidationError as e:
        errors = [
            {
                "loc": list(error["loc"]),
                "msg": error["msg"],
                "type": error["type"],
            }
            for error in e.errors()
        ]
        raise DefinitionValidationError(errors) from e

    return document


def resolve_refs(value: Any, full_spec: dict[str, Any]) -> Any:
    """Recursively resolve local $ref references.

    Args:
        value: Fragment that may contain $ref references.
        full_spec: Full OpenAPI description for resolving references.

    Returns:
        The fragment with all references resolved.
    """
    if isinstance(value, list):
        return [resolve_refs(item, full_spec) for item in value]
    if not isinstance(value, dict):
        return value

    if "$ref" in value:
        resolved = _resolve_ref_path(value["$ref"], full_spec)
        result = resolve_refs(resolved, full_spec)
        # Sibling keys next to $ref override the referenced ones
        for key, item in value.items():
            if key != "$ref":
                result[key] = item
        return result

    return {key: resolve_refs(item, full_spec) for key, item in value.items()}


def _resolve_ref_path(ref_path: str, full_spec: dict[str, Any]) -> dict[str, Any]:
    """Resolve a $ref path like ``#/components/parameters/Limit``.

    Raises:
        ValueError: If the reference cannot be resolved.
    """
    if not ref_path.startswith("#/"):
        raise ValueError(f"External references not supported: {ref_path}")

    current: Any = full_spec
    for part in ref_path[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            raise ValueError(f"Cannot resolve reference: {ref_path}")

    if not isinstance(current, dict):
        raise ValueError(f"Reference does not resolve to an object: {ref_path}")

    return current
