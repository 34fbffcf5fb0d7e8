"""Process commands: event receiver and Temporal worker."""

import logging
from typing import Annotated

import typer

app = typer.Typer(no_args_is_help=True)


@app.command()
def api(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "0.0.0.0",
    port: Annotated[
        int, typer.Option("--port", "-p", help="Listen port (default: RCV_PORT)")
    ] = 0,
) -> None:
    """Receive get-sli.triggered CloudEvents over HTTP."""
    import uvicorn

    from sli_service.api import create_app
    from sli_service.models import get_settings

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = get_settings()
    uvicorn.run(create_app(settings=settings), host=host, port=port or settings.receiver_port)


@app.command()
def worker() -> None:
    """Run the Temporal worker hosting GetSLIWorkflow."""
    from sli_service.worker import main

    main()
