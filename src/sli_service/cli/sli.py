"""Ad hoc SLI query commands.

Build or run the same queries the worker would, without Temporal:

    sli-service sli build error_rate -p sockshop -s dev -S carts \\
        --start 2024-01-01T10:00:00Z --end 2024-01-01T10:05:00Z \\
        --filter handler=ItemsController
"""

from pathlib import Path  # noqa: TC003
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sli_service.activities.configuration import parse_sli_config
from sli_service.errors import SLIError
from sli_service.models import DEFAULT_PROMETHEUS_URL, QueryContext, SLIFilter, SLIResult
from sli_service.prometheus import PrometheusClient
from sli_service.query import TimeWindow, build_query
from sli_service.retrieval import retrieve_sli_results

app = typer.Typer(no_args_is_help=True)
console = Console()

ProjectOption = Annotated[str, typer.Option("--project", "-p", help="Project name")]
StageOption = Annotated[str, typer.Option("--stage", "-s", help="Stage name")]
ServiceOption = Annotated[str, typer.Option("--service", "-S", help="Service name")]
StartOption = Annotated[str, typer.Option("--start", help="Window start (RFC3339 or Unix seconds)")]
EndOption = Annotated[str, typer.Option("--end", help="Window end (RFC3339 or Unix seconds)")]
FilterOption = Annotated[
    list[str] | None,
    typer.Option("--filter", "-f", help="Label filter key=value, repeatable"),
]
SLIFileOption = Annotated[
    Path | None,
    typer.Option("--sli-file", help="sli.yaml with custom indicator queries"),
]


def _parse_filters(filters: list[str] | None) -> list[SLIFilter]:
    """Parse key=value strings; the value keeps any operator (e.g. ``handler=!=Health``)."""
    parsed = []
    for item in filters or []:
        if "=" not in item:
            console.print(f"[red]Invalid filter format: '{item}'. Use key=value[/red]")
            raise typer.Exit(1)
        key, value = item.split("=", 1)
        parsed.append(SLIFilter(key=key.strip(), value=value))
    return parsed


def _load_custom_queries(sli_file: Path | None) -> dict[str, str]:
    if sli_file is None:
        return {}
    if not sli_file.exists():
        console.print(f"[red]Error:[/red] SLI file not found: {sli_file}")
        raise typer.Exit(1)
    try:
        return parse_sli_config(sli_file.read_text())
    except SLIError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


def _context(
    project: str,
    stage: str,
    service: str,
    filters: list[str] | None,
    sli_file: Path | None,
) -> QueryContext:
    return QueryContext(
        project=project,
        stage=stage,
        service=service,
        filters=_parse_filters(filters),
        custom_queries=_load_custom_queries(sli_file),
    )


@app.command()
def build(
    indicator: Annotated[str, typer.Argument(help="SLI name, e.g. error_rate")],
    project: ProjectOption,
    stage: StageOption,
    service: ServiceOption,
    start: StartOption,
    end: EndOption,
    filters: FilterOption = None,
    sli_file: SLIFileOption = None,
) -> None:
    """Print the PromQL query for an indicator."""
    context = _context(project, stage, service, filters, sli_file)
    try:
        query = build_query(indicator, context, TimeWindow.parse(start, end))
    except SLIError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    console.print(query, markup=False, highlight=False, soft_wrap=True)


@app.command()
def query(
    indicators: Annotated[list[str], typer.Argument(help="SLI names to fetch")],
    project: ProjectOption,
    stage: StageOption,
    service: ServiceOption,
    start: StartOption,
    end: EndOption,
    filters: FilterOption = None,
    sli_file: SLIFileOption = None,
    url: Annotated[
        str, typer.Option("--url", "-u", help="Prometheus base URL")
    ] = DEFAULT_PROMETHEUS_URL,
    timeout: Annotated[float, typer.Option("--timeout", help="Per-query timeout (s)")] = 30.0,
    insecure: Annotated[
        bool, typer.Option("--insecure", help="Skip TLS certificate verification")
    ] = False,
) -> None:
    """Fetch indicator values from Prometheus and print them."""
    import anyio

    context = _context(project, stage, service, filters, sli_file)

    async def _run() -> list[SLIResult]:
        async with PrometheusClient(url, timeout=timeout, verify_tls=not insecure) as client:
            return await retrieve_sli_results(client, indicators, context, start, end)

    with console.status(f"[bold green]Querying {url}..."):
        results = anyio.run(_run)

    table = Table(title=f"SLIs for {service} ({project}/{stage})")
    table.add_column("Indicator", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Status")
    table.add_column("Message")
    for result in results:
        status = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        table.add_row(escape(result.metric), f"{result.value:g}", status, escape(result.message))
    console.print(table)

    if not all(result.success for result in results):
        raise typer.Exit(1)
