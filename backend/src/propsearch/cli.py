"""Command-line interface for propsearch."""

import asyncio
import json
import sys
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from propsearch.ai.filters import EXTRACT_FILTERS_TOOL, Filters
from propsearch.ai.gateway_client import GatewayClient
from propsearch.ai.notifications import CollectingNotifier
from propsearch.ai.query_interpreter import QueryInterpreter
from propsearch.logging_config import configure_logging, get_logger
from propsearch.settings import settings

logger = get_logger(__name__)

# Create Typer app
app = typer.Typer(
    name="propsearch",
    help="Propsearch - natural-language property search interpretation",
    no_args_is_help=True,
)

console = Console()


def _filters_table(query: str, filters: Filters) -> Table:
    table = Table(title=f"Filters for '{query}'")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    values = filters.to_dict()
    for name in ("radius", "minPrice", "maxPrice", "bedrooms", "propertyType"):
        value = values.get(name)
        table.add_row(name, "-" if value is None else str(value))
    return table


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    configure_logging("DEBUG" if verbose else None, stream=sys.stderr)


@app.command("interpret")
def interpret(
    query: Annotated[str, typer.Argument(help="Free-text property search")],
    gateway_url: Annotated[str, typer.Option("--gateway", "-g", help="Gateway endpoint")] = settings.interpret_gateway_url,
    as_json: Annotated[bool, typer.Option("--json", help="Print raw JSON filters")] = False,
) -> None:
    """Interpret a query through the edge gateway."""
    notifier = CollectingNotifier()

    async def _run() -> Filters | None:
        async with QueryInterpreter(gateway=GatewayClient(url=gateway_url), notifier=notifier) as interpreter:
            return await interpreter.interpret(query)

    filters = asyncio.run(_run())

    for notification in notifier.notifications:
        console.print(f"[bold red]✗[/bold red] {notification.message}")
        if notification.description:
            console.print(f"  {notification.description}")

    if filters is None:
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps({"filters": filters.to_dict()}))
    else:
        console.print(_filters_table(query, filters))


@app.command("schema")
def schema() -> None:
    """Print the tool definition sent to the language-model backend."""
    console.print_json(json.dumps(EXTRACT_FILTERS_TOOL, ensure_ascii=False))


@app.command("serve")
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Bind port")] = 8000,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes")] = False,
) -> None:
    """Run the interpret-search gateway."""
    import uvicorn

    if not settings.ai_gateway_api_key:
        console.print("[bold yellow]![/bold yellow] AI_GATEWAY_API_KEY is not set; requests will fail with 500")

    logger.info("gateway_serving", host=host, port=port)
    uvicorn.run("propsearch.api.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
