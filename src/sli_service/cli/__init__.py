"""Prometheus SLI service CLI."""

import typer

from sli_service.cli.run import app as run_app
from sli_service.cli.sli import app as sli_app

app = typer.Typer(
    name="sli-service",
    help="Prometheus SLI service - retrieve SLI values for quality-gate evaluations",
    no_args_is_help=True,
)

app.add_typer(sli_app, name="sli", help="Build and run SLI queries")
app.add_typer(run_app, name="run", help="Run the event receiver or the Temporal worker")


@app.callback()
def main() -> None:
    """Prometheus SLI service CLI."""
    pass


if __name__ == "__main__":
    app()
