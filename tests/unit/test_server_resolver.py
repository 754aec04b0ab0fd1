"""Unit tests for the Base URL Resolver."""

from specclient.modules.server_resolver import ServerSelector, expand_server_url, resolve_base_url
from specclient.types import HttpMethod, Operation, Server


DEFINITION = {
    "openapi": "3.0.3",
    "info": {"title": "Servers", "version": "1.0.0"},
    "servers": [
        {"url": "https://default", "description": "prod"},
        {"url": "https://staging.example.com", "description": "staging"},
        {
            "url": "https://{region}.example.com/{version}",
            "description": "regional",
            "variables": {
                "region": {"default": "us", "enum": ["us", "eu"]},
                "version": {"default": "v1"},
            },
        },
    ],
    "paths": {},
}

PLAIN = Operation(path="/pets", method=HttpMethod.GET, operation_id="listPets")
OVERRIDDEN = Operation.model_validate({
    "path": "/pets",
    "method": "post",
    "operationId": "createPet",
    "servers": [{"url": "https://op-override"}, {"url": "https://ignored"}],
})


class TestResolveBaseUrl:
    """Tests for choosing the request origin."""

    def test_default_index(self):
        """Index 0 selects the first server."""
        assert resolve_base_url(DEFINITION, ServerSelector(0)) == "https://default"

    def test_operation_server_wins(self):
        """Operation-level servers beat the default selector."""
        selector = ServerSelector(0)

        assert resolve_base_url(DEFINITION, selector, OVERRIDDEN) == "https://op-override"
        assert resolve_base_url(DEFINITION, selector, PLAIN) == "https://default"

    def test_description_match(self):
        """A string selects by description, not URL."""
        selector = ServerSelector("staging")

        assert resolve_base_url(DEFINITION, selector) == "https://staging.example.com"

    def test_description_no_match(self):
        """An unmatched description resolves to None."""
        assert resolve_base_url(DEFINITION, ServerSelector("https://default")) is None

    def test_index_out_of_range(self):
        """An index past the server list resolves to None."""
        assert resolve_base_url(DEFINITION, ServerSelector(9)) is None

    def test_explicit_server(self):
        """An explicit server is used verbatim."""
        selector = ServerSelector(Server(url="https://explicit.example.com"))

        assert resolve_base_url(DEFINITION, selector) == "https://explicit.example.com"

    def test_explicit_mapping(self):
        """A mapping with a url counts as an explicit server."""
        selector = ServerSelector({"url": "https://mapped.example.com"})

        assert resolve_base_url(DEFINITION, selector) == "https://mapped.example.com"

    def test_no_definition(self):
        """Nothing resolves before a description is loaded."""
        assert resolve_base_url(None, ServerSelector(0)) is None
        assert resolve_base_url(None, ServerSelector(0), OVERRIDDEN) is None

    def test_no_servers(self):
        """A description without servers resolves to None."""
        definition = {**DEFINITION, "servers": []}

        assert resolve_base_url(definition, ServerSelector(0)) is None


class TestServerVariables:
    """Tests for templated server URLs."""

    def test_defaults(self):
        """Declared defaults fill unset variables."""
        selector = ServerSelector("regional")

        assert resolve_base_url(DEFINITION, selector) == "https://us.example.com/v1"

    def test_explicit_variables(self):
        """Selector variables win over declared defaults."""
        selector = ServerSelector("regional", {"region": "eu"})

        assert resolve_base_url(DEFINITION, selector) == "https://eu.example.com/v1"

    def test_unknown_variable_kept(self):
        """Variables with no value are left in place."""
        server = Server(url="https://{tenant}.example.com")

        assert expand_server_url(server, {}) == "https://{tenant}.example.com"

    def test_use_replaces_server_and_variables(self):
        """use() replaces both the server and its variables."""
        selector = ServerSelector("regional", {"region": "eu"})
        selector.use(2, {"version": "v2"})

        assert selector.server == 2
        assert selector.variables == {"version": "v2"}
        assert resolve_base_url(DEFINITION, selector) == "https://us.example.com/v2"

    def test_use_clears_variables(self):
        """Omitting variables resets them."""
        selector = ServerSelector("regional", {"region": "eu"})
        selector.use("regional")

        assert selector.variables == {}
