#!/usr/bin/env python3
"""
MyNote command line.

Usage:
    python cli.py --help
    python cli.py serve --port 5001 --reload
    python cli.py health
    python cli.py config
    python cli.py init-db
    python cli.py info
"""

import asyncio
import sys

import click
import structlog
import uvicorn

from mynote.backend.core.config import get_app_config, get_settings, validate_project_root
from mynote.backend.core.logging import get_logger, setup_logging

APP_IMPORT_PATH = "mynote.backend.main:app"


def _mark(passed: bool) -> str:
    return click.style("PASS", fg="green") if passed else click.style("FAIL", fg="red")


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    if title:
        click.echo(f"\n{title}:")
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_section("", value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


async def _with_engine(coro):
    """Run one database coroutine and release the pool afterwards."""
    from mynote.backend.core.database import dispose_engine

    try:
        return await coro
    finally:
        await dispose_engine()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """MyNote notes backend."""
    validate_project_root()

    level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=level, format_type="console", enable_file_logging=False)
    structlog.contextvars.bind_contextvars(source="cli")

    ctx.obj = get_logger("cli")


@cli.command()
@click.option("--host", default=None, help="Bind address (default from application.yaml).")
@click.option("--port", default=None, type=int, help="Port (default from application.yaml).")
@click.option("--reload", is_flag=True, help="Restart on code changes.")
@click.pass_obj
def serve(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Run the API server."""
    server = get_app_config().application.server
    host = host or server.host
    port = port or server.port

    logger.info("Starting server", extra={"host": host, "port": port, "reload": reload})
    click.echo(f"Notes API on http://{host}:{port}")
    uvicorn.run(APP_IMPORT_PATH, host=host, port=port, reload=reload)


@cli.command()
@click.pass_obj
def health(logger) -> None:
    """Check configuration, admin credentials, JWT secret and database."""
    from mynote.backend.api.health import check_database
    from mynote.backend.core.startup_checks import collect_startup_errors

    try:
        app_config = get_app_config()
        settings = get_settings()
    except Exception as e:
        logger.error("Configuration failed", extra={"error": str(e)})
        click.echo(f"{_mark(False)}  configuration ({e})")
        click.echo("Secrets come from config/.env, see config/.env.example.")
        sys.exit(1)

    click.echo(f"{_mark(True)}  configuration ({app_config.application.environment})")

    errors = collect_startup_errors(app_config, settings)
    admin_errors = [e for e in errors if e.startswith("ADMIN_")]
    jwt_errors = [e for e in errors if e.startswith("JWT_SECRET")]
    other_errors = [e for e in errors if e not in admin_errors and e not in jwt_errors]

    click.echo(
        f"{_mark(not admin_errors)}  admin account "
        f"({'; '.join(admin_errors) or settings.admin_username})"
    )
    click.echo(
        f"{_mark(not jwt_errors)}  JWT secret "
        f"({'; '.join(jwt_errors) or f'{len(settings.jwt_secret)} chars'})"
    )
    for error in other_errors:
        click.echo(f"{_mark(False)}  {error}")

    db = asyncio.run(_with_engine(check_database()))
    db_ok = db["status"] == "healthy"
    detail = f"{db['latency_ms']} ms" if db_ok else db.get("error")
    click.echo(f"{_mark(db_ok)}  database {app_config.database.driver} ({detail})")

    if errors or not db_ok:
        logger.warning("Health check failed", extra={"errors": errors, "database": db["status"]})
        sys.exit(1)


@cli.command("config")
def show_config() -> None:
    """Print the validated YAML settings. Secrets are never printed."""
    app_config = get_app_config()
    _echo_section("application", app_config.application.model_dump())
    _echo_section("database", app_config.database.model_dump())
    _echo_section("logging", app_config.logging.model_dump())
    _echo_section("features", app_config.features.model_dump())
    _echo_section("security", app_config.security.model_dump())


@cli.command("init-db")
@click.pass_obj
def init_db(logger) -> None:
    """Create missing tables."""
    from mynote.backend.core.database import init_models

    db_config = get_app_config().database
    try:
        asyncio.run(_with_engine(init_models()))
    except Exception as e:
        logger.error("Database initialization failed", extra={"error": str(e)})
        click.echo(click.style(f"Could not create tables: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Tables ready in {db_config.driver}:{db_config.name}")


@cli.command()
def info() -> None:
    """Show application name, version and API prefix."""
    app = get_app_config().application
    click.echo(f"{app.name} {app.version}")
    click.echo(app.description)
    click.echo(f"API prefix: {app.api_prefix}")
    click.echo(f"Environment: {app.environment}")


if __name__ == "__main__":
    cli()
