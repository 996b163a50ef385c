from __future__ import annotations

import logging

import typer

from formstash.config import Settings
from formstash.seed import seed_demo_data
from formstash.storage import init_storage

cli = typer.Typer(add_completion=False)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_server(host: str | None, port: int | None) -> None:
    import uvicorn

    from formstash.app import create_app

    settings = Settings()
    configure_logging(settings.log_level)
    resolved_host = host or settings.host
    resolved_port = port if port is not None else settings.port
    uvicorn.run(create_app(settings), host=resolved_host, port=resolved_port)


@cli.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Address to bind"),
    port: int | None = typer.Option(None, help="Port to bind"),
) -> None:
    ctx.obj = {"host": host, "port": port}
    if ctx.invoked_subcommand is None:
        run_server(host, port)


@cli.command()
def run(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Address to bind"),
    port: int | None = typer.Option(None, help="Port to bind"),
) -> None:
    """Start the HTTP server."""
    base = ctx.obj or {}
    resolved_host = host or base.get("host")
    resolved_port = port if port is not None else base.get("port")
    run_server(resolved_host, resolved_port)


@cli.command()
def seed() -> None:
    """Insert the demo submissions if the store is empty."""
    settings = Settings()
    configure_logging(settings.log_level)
    if settings.storage_backend == "memory":
        typer.echo("memory storage does not outlive this command; nothing to seed")
        raise typer.Exit(code=1)
    storage = init_storage(settings)
    try:
        inserted = seed_demo_data(storage.submissions)
    finally:
        storage.close()
    typer.echo(f"inserted {inserted} submissions")


if __name__ == "__main__":
    cli()
