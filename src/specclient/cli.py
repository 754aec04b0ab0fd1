"""specclient CLI - Command-line interface.

Usage:
    specclient operations --definition <url|path>
    specclient request <operation_id> --definition <url|path> --param id=1
    specclient call <operation_id> --definition <url|path> --param id=1
"""

import asyncio
import json
import logging
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from specclient.client import OpenAPIClient
from specclient.errors import SpecClientError
from specclient.types import ParamLocation, ParamSpec

console = Console()
app = typer.Typer(
    name="specclient",
    help="Build and send requests for operations of an OpenAPI description",
    no_args_is_help=True,
)

DEFINITION_OPTION = typer.Option(
    ...,
    "--definition",
    "-d",
    help="URL or path of the OpenAPI description (YAML or JSON)",
    envvar="SPECCLIENT_DEFINITION",
)
PARAM_OPTION = typer.Option(
    None,
    "--param",
    "-p",
    help="Parameter as name=value, location taken from the description",
)
HEADER_OPTION = typer.Option(
    None,
    "--header",
    "-H",
    help="Header as name=value",
)
DATA_OPTION = typer.Option(
    None,
    "--data",
    help="Request body as JSON",
)
SERVER_OPTION = typer.Option(
    None,
    "--server",
    "-s",
    help="Server index, server description, or explicit base URL",
)
VERBOSE_OPTION = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable verbose logging",
)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )

    logging.getLogger("specclient").setLevel(level)

    # Quiet down httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_assignments(values: list[str] | None, option: str) -> list[tuple[str, str]]:
    """Split ``name=value`` pairs given on the command line."""
    pairs = []
    for value in values or []:
        name, sep, item = value.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Expected name=value, got '{value}'", param_hint=option)
        pairs.append((name, item))
    return pairs


def parse_server(server: str | None) -> int | str | dict[str, str] | None:
    """Interpret --server as an index, a base URL, or a server description."""
    if server is None:
        return None
    if server.isdigit():
        return int(server)
    if server.startswith(("http://", "https://")):
        return {"url": server}
    return server


def build_call_arguments(
    params: list[str] | None,
    headers: list[str] | None,
    data: str | None,
) -> tuple[list[ParamSpec], Any]:
    """Turn CLI options into explicit parameters and a body."""
    specs = [ParamSpec(name=name, value=value) for name, value in parse_assignments(params, "--param")]
    specs += [
        ParamSpec(name=name, value=value, location=ParamLocation.HEADER)
        for name, value in parse_assignments(headers, "--header")
    ]

    body = None
    if data is not None:
        try:
            body = json.loads(data)
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"Invalid JSON: {e}", param_hint="--data")
    return specs, body


def load_client(definition: str, server: str | None) -> OpenAPIClient:
    client = OpenAPIClient(definition)
    selected = parse_server(server)
    if selected is not None:
        client.with_server(selected)
    return client


@app.command()
def operations(
    definition: str = DEFINITION_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """List the operations of a description."""
    setup_logging(verbose=verbose)

    try:
        client = asyncio.run(load_client(definition, None).init())
    except SpecClientError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    table = Table(title=f"Operations ({len(client.get_operations())})")
    table.add_column("Operation ID")
    table.add_column("Method")
    table.add_column("Path")
    table.add_column("Summary")

    for operation in client.get_operations():
        table.add_row(
            operation.operation_id or "-",
            operation.method.value.upper(),
            operation.path,
            operation.summary or "",
        )

    console.print(table)


@app.command()
def request(
    operation_id: str = typer.Argument(..., help="operationId to build a request for"),
    definition: str = DEFINITION_OPTION,
    param: list[str] = PARAM_OPTION,
    header: list[str] = HEADER_OPTION,
    data: str = DATA_OPTION,
    server: str = SERVER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print the request an operation call would send, without sending it."""
    setup_logging(verbose=verbose)
    specs, body = build_call_arguments(param, header, data)

    try:
        client = asyncio.run(load_client(definition, server).init())
    except SpecClientError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if client.get_operation(operation_id) is None:
        console.print(f"[red]Unknown operation:[/red] {operation_id}")
        raise typer.Exit(1)

    try:
        request_config = client.get_request_config(operation_id, specs, body)
    except SpecClientError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    print(request_config.model_dump_json(indent=2))


@app.command()
def call(
    operation_id: str = typer.Argument(..., help="operationId to call"),
    definition: str = DEFINITION_OPTION,
    param: list[str] = PARAM_OPTION,
    header: list[str] = HEADER_OPTION,
    data: str = DATA_OPTION,
    server: str = SERVER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Call an operation and print the response."""
    setup_logging(verbose=verbose)
    specs, body = build_call_arguments(param, header, data)

    async def run() -> Any:
        async with load_client(definition, server) as client:
            if client.get_operation(operation_id) is None:
                return None
            return await client.request(operation_id, specs, body)

    try:
        response = asyncio.run(run())
    except SpecClientError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)
    except Exception as e:
        console.print(f"[red]Request failed:[/red] {e}")
        raise typer.Exit(2)

    if response is None:
        console.print(f"[red]Unknown operation:[/red] {operation_id}")
        raise typer.Exit(1)

    status_color = "green" if response.is_success else "red"
    console.print(Panel(
        f"[{status_color}]{response.status_code} {response.reason_phrase}[/{status_color}]\n"
        f"{response.request.method} {response.request.url}",
        title="Response",
        border_style=status_color,
    ))
    print(response.text)

    if response.is_error:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from specclient import __version__
    console.print(f"specclient version {__version__}")


if __name__ == "__main__":
    app()
