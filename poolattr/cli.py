"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from contextlib import closing
from pathlib import Path

import typer

from poolattr import presentation
from poolattr.core.catalog import CATALOG
from poolattr.core.config import load_settings
from poolattr.core.errors import NotFoundError, PersistenceError, PoolAttrError
from poolattr.core.model import ValueKind
from poolattr.core.service import AttributeService

app = typer.Typer(help="Manage mode-config attributes handed out from an IP address pool database")

_STRING_OPT = typer.Option(None, "--string", help="Value is a text string")
_HEX_OPT = typer.Option(None, "--hex", help="Value is raw hex, e.g. 0a000001")
_SERVER_OPT = typer.Option(None, "--server", help="Value is an IPv4 or IPv6 address")
_SUBNET_OPT = typer.Option(None, "--subnet", help="Value is an IPv4 subnet, e.g. 10.0.0.0/255.255.255.0")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="Path to config.yaml"),
    database: str | None = typer.Option(None, "--database", help="Path to the SQLite pool database"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    ctx.obj = {"config": config, "database": database, "verbose": verbose}


def _build_service(ctx: typer.Context) -> AttributeService:
    options = ctx.obj or {}
    settings = load_settings(options.get("config"), database=options.get("database"))
    level = "DEBUG" if options.get("verbose") else settings.log_level
    logging.basicConfig(level=getattr(logging, level), format="%(levelname)s %(name)s: %(message)s")
    return AttributeService.from_settings(settings)


def _value_option(
    string: str | None,
    hex_value: str | None,
    server: str | None,
    subnet: str | None,
) -> tuple[str | None, ValueKind]:
    given = [
        (value, kind)
        for value, kind in (
            (string, ValueKind.STRING),
            (hex_value, ValueKind.HEX),
            (server, ValueKind.ADDRESS),
            (subnet, ValueKind.SUBNET),
        )
        if value is not None
    ]
    if len(given) > 1:
        raise typer.BadParameter("Use only one of --string, --hex, --server or --subnet")
    if not given:
        return None, ValueKind.NONE
    return given[0]


@app.command("add")
def add_attribute(
    ctx: typer.Context,
    keyword: str,
    string: str | None = _STRING_OPT,
    hex_value: str | None = _HEX_OPT,
    server: str | None = _SERVER_OPT,
    subnet: str | None = _SUBNET_OPT,
) -> None:
    """Add an attribute entry; KEYWORD is a catalog keyword or numeric type."""
    value, kind = _value_option(string, hex_value, server, subnet)
    try:
        with closing(_build_service(ctx)) as service:
            record = service.add_attribute(keyword, value, kind)
        typer.echo(presentation.format_added(keyword, record))
    except PoolAttrError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("delete")
def delete_attribute(
    ctx: typer.Context,
    keyword: str,
    string: str | None = _STRING_OPT,
    hex_value: str | None = _HEX_OPT,
    server: str | None = _SERVER_OPT,
    subnet: str | None = _SUBNET_OPT,
) -> None:
    """Delete attribute entries; without a value all entries of KEYWORD are removed."""
    value, kind = _value_option(string, hex_value, server, subnet)
    service: AttributeService | None = None
    try:
        with closing(_build_service(ctx)) as service:
            result = service.delete_attribute(keyword, value, kind)
        for line in presentation.format_delete_result(result):
            typer.echo(line)
    except NotFoundError as exc:
        typer.echo(presentation.format_not_found(exc), err=True)
        raise typer.Exit(code=1) from None
    except PersistenceError as exc:
        display_kind = service.display_kind(keyword) if service is not None else ValueKind.HEX
        for record in exc.deleted:
            typer.echo(presentation.format_deleted_record(keyword, display_kind, record))
        typer.echo(presentation.format_delete_failure(keyword, display_kind, exc), err=True)
        raise typer.Exit(code=1) from None
    except PoolAttrError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("list")
def list_attributes(ctx: typer.Context) -> None:
    """Show all attribute entries ordered by type."""
    try:
        with closing(_build_service(ctx)) as service:
            first = True
            for record in service.list_attributes():
                if first:
                    typer.echo(presentation.STATUS_HEADER)
                    first = False
                typer.echo(presentation.format_status_line(record, service.kind_for_type(record.type_code)))
        if first:
            typer.echo("No attributes stored")
    except PoolAttrError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("keywords")
def describe_catalog() -> None:
    """Show all supported attribute keywords."""
    for definition in CATALOG.all():
        typer.echo(presentation.format_catalog_entry(definition))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
