from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Annotated, Optional

import typer
import uvicorn
from dotenv import load_dotenv

from app import create_app
from settings import get_settings
from tls import generate_self_signed_cert

logger = logging.getLogger(__name__)

cli = typer.Typer(help="Namespaced JSON document server", add_completion=False)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def serve(
    persist_file: Annotated[
        Optional[str],
        typer.Option("--file", "-f", help="Persist resource state to this file (empty string disables)"),
    ] = None,
    host: Annotated[Optional[str], typer.Option("--host", "-h", help="Host part of address to listen on")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Port part of address to listen on")] = None,
    secure: Annotated[
        Optional[bool],
        typer.Option("--secure/--insecure", "-s", help="Enable HTTPS with a self-signed certificate"),
    ] = None,
    grace: Annotated[
        Optional[float],
        typer.Option("--grace", help="Seconds in-flight requests may take to finish on shutdown"),
    ] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Logging level")] = None,
) -> None:
    """Serve the document store until SIGINT/SIGTERM, then write the snapshot."""
    load_dotenv("local.env")
    settings = get_settings().with_overrides(
        persist_file=persist_file,
        host=host,
        port=port,
        secure=secure,
        shutdown_grace_seconds=grace,
        log_level=log_level,
    )
    _configure_logging(settings.log_level)

    app = create_app(settings)

    with tempfile.TemporaryDirectory(prefix="docstore-tls-") as tls_dir:
        ssl_options: dict[str, str] = {}
        if settings.secure:
            certfile, keyfile = generate_self_signed_cert(settings.host, Path(tls_dir))
            ssl_options = {"ssl_certfile": str(certfile), "ssl_keyfile": str(keyfile)}

        config = uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            lifespan="on",
            log_level=settings.log_level,
            timeout_graceful_shutdown=settings.shutdown_grace_seconds,
            **ssl_options,
        )
        server = uvicorn.Server(config)

        proto = "https" if settings.secure else "http"
        logger.info("server listening on %s://%s:%d", proto, settings.host, settings.port)
        try:
            server.run()
        finally:
            # The lifespan normally persists; this covers a forced exit that skipped it.
            app.state.snapshots.persist_once()

    if not server.started:
        logger.error("server failed to start")
        raise typer.Exit(code=1)
    logger.info("server exited properly")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
