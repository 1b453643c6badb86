from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

import typer

from httpwrap.api.config import load_config

app = typer.Typer(help="HTTP access-log, recovery and admission-guard middleware")


def _normalize_header(h: Optional[str]) -> Optional[str]:
    if h is None:
        return None
    h2 = h.strip().lower()
    if h2 == "accept":
        return "accept"
    if h2 in ("content-type", "content_type", "ctype"):
        return "content-type"
    raise typer.BadParameter("negotiation header must be one of: accept, content-type")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: HTTPWRAP_HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default: HTTPWRAP_PORT or 8000)"),
    content_type: Optional[str] = typer.Option(None, help="Fixed response Content-Type"),
    accept: Optional[str] = typer.Option(None, help="Only fulfil requests declaring this media type (406 otherwise)"),
    allow: Optional[List[str]] = typer.Option(None, help="Allowed HTTP method; repeat for more (405 otherwise)"),
    negotiation_header: Optional[str] = typer.Option(None, help="Header checked for --accept: accept/content-type"),
    log_format: Optional[str] = typer.Option(None, help="Access log template (str.format fields)"),
    log_level: Optional[str] = typer.Option(None, help="Log level: DEBUG/INFO/WARNING/ERROR"),
    log_path: Optional[str] = typer.Option(None, help="Also write logs to this file"),
):
    """
    Serve the wrapped API with uvicorn.
    """
    import uvicorn  # local import to keep `--help` fast

    from httpwrap.api.app import create_app

    cfg = load_config()
    overrides = {
        "host": host,
        "port": port,
        "content_type": content_type,
        "accept_type": accept,
        "allowed_methods": [m.upper() for m in allow] if allow else None,
        "negotiation_header": _normalize_header(negotiation_header),
        "log_format": log_format,
        "log_level": log_level,
        "log_path": log_path,
    }
    cfg = replace(cfg, **{k: v for k, v in overrides.items() if v is not None})

    uvicorn.run(create_app(cfg), host=cfg.host, port=cfg.port, access_log=False)


@app.command()
def version() -> None:
    from httpwrap import __version__

    typer.echo(__version__)


if __name__ == "__main__":
    app()
