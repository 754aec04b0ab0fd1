"""Integration tests for loading and validating descriptions."""

import asyncio
import json

import httpx
import pytest
import respx

from specclient.errors import DefinitionValidationError, DocumentLoadError
from specclient.modules.document_loader import (
    load_document,
    load_local_document,
    validate_definition,
)


SAMPLE_DOCUMENT = {
    "openapi": "3.0.3",
    "info": {"title": "Test API", "version": "1.0.0"},
    "servers": [{"url": "https://api.example.com"}],
    "paths": {
        "/users/{user_id}": {
            "get": {
                "operationId": "getUser",
                "parameters": [
                    {"name": "user_id", "in": "path", "required": True, "schema": {"type": "integer"}},
                ],
                "responses": {"200": {"description": "User found"}},
            },
        },
    },
}

SAMPLE_YAML = """
openapi: "3.0.3"
info:
  title: Test API
  version: "1.0.0"
paths:
  /items:
    get:
      operationId: listItems
      responses:
        "200":
          description: List of items
"""


class TestLoadDocument:
    """Tests for loading descriptions from different sources."""

    @respx.mock
    def test_load_from_url(self):
        """JSON descriptions are fetched over HTTP."""
        respx.get("https://example.com/openapi.json").mock(
            return_value=httpx.Response(200, json=SAMPLE_DOCUMENT)
        )

        document = asyncio.run(load_document("https://example.com/openapi.json"))

        assert document == SAMPLE_DOCUMENT

    @respx.mock
    def test_load_yaml_from_url(self):
        """YAML descriptions are fetched over HTTP."""
        respx.get("https://example.com/openapi.yaml").mock(
            return_value=httpx.Response(200, text=SAMPLE_YAML)
        )

        document = asyncio.run(load_document("https://example.com/openapi.yaml"))

        assert document["info"]["title"] == "Test API"

    @respx.mock
    def test_load_from_url_not_found(self):
        """A non-2xx response is a load failure."""
        respx.get("https://example.com/missing.json").mock(return_value=httpx.Response(404))

        with pytest.raises(DocumentLoadError, match="missing.json"):
            asyncio.run(load_document("https://example.com/missing.json"))

    @respx.mock
    def test_load_from_url_unreachable(self):
        """Network errors are load failures."""
        respx.get("https://example.com/openapi.json").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(DocumentLoadError):
            asyncio.run(load_document("https://example.com/openapi.json"))

    def test_load_from_file(self, tmp_path):
        """Files are read from disk."""
        spec_file = tmp_path / "openapi.json"
        spec_file.write_text(json.dumps(SAMPLE_DOCUMENT), encoding="utf-8")

        document = asyncio.run(load_document(str(spec_file)))

        assert document == SAMPLE_DOCUMENT

    def test_load_missing_file(self, tmp_path):
        """A missing file is a load failure."""
        with pytest.raises(DocumentLoadError):
            load_local_document(str(tmp_path / "nope.yaml"))

    def test_load_inline_text(self):
        """YAML and JSON text are parsed directly."""
        assert load_local_document(SAMPLE_YAML)["paths"]["/items"]["get"]["operationId"] == "listItems"
        assert load_local_document(json.dumps(SAMPLE_DOCUMENT)) == SAMPLE_DOCUMENT

    def test_load_dict(self):
        """Parsed descriptions are returned as-is."""
        assert load_local_document(SAMPLE_DOCUMENT) is SAMPLE_DOCUMENT

    def test_invalid_yaml(self):
        """Unparsable text is a load failure."""
        with pytest.raises(DocumentLoadError):
            load_local_document("openapi: [unclosed\npaths: {")

    def test_not_a_mapping(self):
        """A top-level list is not a description."""
        with pytest.raises(DocumentLoadError, match="mapping"):
            load_local_document("- a\n- b\n")

    def test_url_needs_async_load(self):
        """URLs cannot be loaded synchronously."""
        with pytest.raises(DocumentLoadError):
            load_local_document("https://example.com/openapi.json")


class TestValidateDefinition:
    """Tests for OpenAPI grammar validation."""

    def test_valid_document_unchanged(self):
        """A valid description is returned unchanged."""
        assert validate_definition(SAMPLE_DOCUMENT) is SAMPLE_DOCUMENT

    def test_valid_31_document(self):
        """3.1 descriptions are validated with the 3.1 models."""
        document = {
            "openapi": "3.1.0",
            "info": {"title": "Test API", "version": "1.0.0"},
            "paths": {},
        }

        assert validate_definition(document) is document

    def test_errors_aggregated(self):
        """All violations are reported in one error."""
        document = {
            "openapi": "3.0.3",
            "paths": {
                "/items": {
                    "get": {
                        "parameters": [{"name": "x", "in": "body"}],
                        "responses": {"200": {"description": "ok"}},
                    },
                },
            },
        }

        with pytest.raises(DefinitionValidationError) as exc_info:
            validate_definition(document)

        error = exc_info.value
        assert len(error.errors) >= 2
        assert any(e["loc"] == ["info"] for e in error.errors)
        assert f"{len(error.errors)} validation errors" in str(error)
