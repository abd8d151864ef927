from __future__ import annotations

from pathlib import Path
from typing import Iterable

import typer

from jvm_harvester import __version__
from jvm_harvester.config import HarvesterSettings, load_settings
from jvm_harvester.errors import HarvesterError
from jvm_harvester.export import export_partitions, parse_filters, write_partition
from jvm_harvester.log_utils import configure_logging, write_jsonl
from jvm_harvester.orchestrator import run_fetch
from jvm_harvester.providers.registry import default_registry
from jvm_harvester.store import SqliteRecordStore

app = typer.Typer(
    help="Crawl JVM vendors into one canonical, exportable release catalog",
    no_args_is_help=True,
)
export_app = typer.Typer(help="Export stored JVM data", no_args_is_help=True)
ls_app = typer.Typer(help="List stored values", no_args_is_help=True)
app.add_typer(export_app, name="export")
app.add_typer(ls_app, name="ls")


def _split(values: Iterable[str] | None) -> list[str]:
    """Flatten repeated and comma-delimited option values."""

    items: list[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def _settings(ctx: typer.Context, **overrides: object) -> HarvesterSettings:
    obj = ctx.obj or {}
    try:
        return load_settings(obj.get("config"), **overrides)
    except HarvesterError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML settings file (defaults to $JVM_HARVESTER_CONFIG)",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
) -> None:
    configure_logging(verbose)
    ctx.obj = {"config": config}


@app.command()
def fetch(
    ctx: typer.Context,
    vendors: list[str] = typer.Argument(
        None,
        help="Vendors to fetch e.g.: oracle, zulu (all when omitted)",
        metavar="VENDOR",
    ),
    database: Path | None = typer.Option(None, help="SQLite database path"),
    max_workers: int | None = typer.Option(None, help="Concurrent vendor tasks"),
    task_timeout: float | None = typer.Option(
        None,
        help="Seconds before a vendor task is reported as timed out",
    ),
    http_timeout: float | None = typer.Option(None, help="Per-request timeout (s)"),
    manifest: Path | None = typer.Option(
        None,
        help="Write one JSON line per vendor outcome to this file",
    ),
) -> None:
    """Fetch data from JVM vendors.

    Will crawl data from all vendors if none are specified.
    """

    settings = _settings(
        ctx,
        database_path=database,
        max_workers=max_workers,
        task_timeout=task_timeout,
        http_timeout=http_timeout,
    )
    summary = run_fetch(
        default_registry(),
        _split(vendors),
        SqliteRecordStore(settings.database_path),
        options=settings.http_options(),
        max_workers=settings.max_workers,
        task_timeout=settings.task_timeout,
    )
    if manifest is not None:
        write_jsonl(manifest, [outcome.to_dict() for outcome in summary.outcomes])
    for outcome in summary.outcomes:
        status = "ok" if outcome.ok else f"failed ({outcome.error})"
        typer.echo(f" - {outcome.name}: {len(outcome.records)} records, {status}")
    typer.echo(
        f"fetched {len(summary.records)} unique records "
        f"in {summary.elapsed_s:.2f} seconds"
    )


@export_app.command("vendor")
def export_vendor(
    ctx: typer.Context,
    vendors: list[str] = typer.Option(
        None, "--vendors", "-v", help="Vendors e.g.: corretto, oracle, zulu"
    ),
    os: list[str] = typer.Option(
        None, "--os", "-o", help="Operating systems e.g.: linux, macosx, windows"
    ),
    arch: list[str] = typer.Option(
        None, "--arch", "-a", help="Architectures e.g.: aarch64, arm32, x86_64"
    ),
    include: list[str] = typer.Option(
        None, "--include", "-i", help="Properties e.g.: architecture, os, vendor"
    ),
    exclude: list[str] = typer.Option(
        None, "--exclude", "-e", help="Properties e.g.: checksum_url, size"
    ),
    filters: list[str] = typer.Option(
        None,
        "--filters",
        "-f",
        help="Filters e.g.: file_type=tar.gz,zip&features=musl,javafx,lite",
    ),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty print JSON"),
    export_path: Path | None = typer.Option(
        None, help="Export root (defaults to export.path setting)"
    ),
    database: Path | None = typer.Option(None, help="SQLite database path"),
) -> None:
    """Export by {vendor}/{os}/{architecture}.

    Writes {vendor}/{os}/{arch}.json files below the configured export path.
    """

    settings = _settings(ctx, export_path=export_path, database_path=database)
    try:
        filter_map = parse_filters(filters or [])
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--filters") from exc

    try:
        root = settings.require_export_path()
        store = SqliteRecordStore(settings.database_path)
        with store.connection() as session:
            partitions = list(
                export_partitions(
                    session,
                    _split(vendors),
                    _split(os),
                    _split(arch),
                    include=_split(include),
                    exclude=_split(exclude),
                    filters=filter_map,
                )
            )
        for partition in partitions:
            write_partition(root, partition, pretty=pretty)
    except HarvesterError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
    typer.echo(f"exported {len(partitions)} partitions to {root}")


def _distinct(ctx: typer.Context, field: str, database: Path | None) -> list[str]:
    settings = _settings(ctx, database_path=database)
    try:
        return SqliteRecordStore(settings.database_path).distinct(field)
    except HarvesterError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc


@ls_app.command("vendor")
def ls_vendor(
    ctx: typer.Context,
    database: Path | None = typer.Option(None, help="SQLite database path"),
) -> None:
    """List stored vendors that are still supported."""

    registry = default_registry()
    for vendor in _distinct(ctx, "vendor", database):
        if vendor in registry:
            typer.echo(vendor)


@ls_app.command("os")
def ls_os(
    ctx: typer.Context,
    database: Path | None = typer.Option(None, help="SQLite database path"),
) -> None:
    """List stored operating systems."""

    for value in _distinct(ctx, "os", database):
        typer.echo(value)


@ls_app.command("arch")
def ls_arch(
    ctx: typer.Context,
    database: Path | None = typer.Option(None, help="SQLite database path"),
) -> None:
    """List stored architectures."""

    for value in _distinct(ctx, "architecture", database):
        typer.echo(value)


@app.command("providers")
def providers() -> None:
    """List registered vendors."""

    for entry in default_registry().entries():
        typer.echo(
            " - {name}: {title} | transport={transport}".format(
                name=entry.info.name,
                title=entry.info.title,
                transport=entry.info.transport,
            )
        )


@app.command()
def version() -> None:
    """Print the version."""

    typer.echo(f"jvm-harvester {__version__}")


def run() -> None:
    app()


__all__ = ["app", "export_vendor", "fetch", "providers", "run", "version"]


if __name__ == "__main__":
    run()
