"""Spectral CLI: load, query, and export spectral object catalogs."""

import json
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from spectral import __version__
from spectral.config import EXPORT_FORMATS, load_settings
from spectral.log import init_logging
from spectral.registry.models import ValidationError
from spectral.registry.reality_model import SpectralRealityModel

console = Console()


def _load_catalog(files: tuple) -> SpectralRealityModel:
    """Build a fresh catalog by upserting every document in ``files`` in order."""
    from spectral.sync.export import load_documents

    model = SpectralRealityModel()
    for path in files:
        try:
            documents = load_documents(path)
        except (OSError, ValueError) as e:
            console.print(f"  [red]Failed to read {path}:[/] {e}")
            sys.exit(1)
        for document in documents:
            if not isinstance(document, dict):
                console.print(f"  [red]x[/] {path}: skipping non-mapping document")
                continue
            try:
                model.upsert(document)
            except ValidationError as e:
                console.print(f"  [red]x[/] {path}: {e}")
                sys.exit(1)
    return model


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="YAML settings file")
@click.pass_context
def main(ctx: click.Context, config_path: str | None):
    """Spectral: catalog observed artifacts with provenance and drift metrics.

    Every command loads record documents (JSON, NDJSON or YAML) into a
    fresh in-memory catalog, upserting them in the order given.
    """
    try:
        settings = load_settings(config_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Invalid settings:[/] {e}")
        sys.exit(1)
    init_logging(settings.log_level)
    ctx.obj = settings


# ── Catalog ──────────────────────────────────────────────────────────


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--kind", "-k", default=None, help="Only objects of this kind")
@click.option("--domain", "-d", default=None, help="Only objects from this origin domain")
@click.option("--high-stability", is_flag=True, help="Only stable, low-drift objects")
@click.option("--threshold", type=float, default=None, help="Stability threshold")
@click.pass_obj
def catalog(settings, files: tuple, kind: str | None, domain: str | None,
            high_stability: bool, threshold: float | None):
    """List catalogued objects, optionally filtered. Filters combine."""
    model = _load_catalog(files)

    selected = list(model)
    if kind is not None:
        ids = {obj.id for obj in model.list_by_kind(kind)}
        selected = [obj for obj in selected if obj.id in ids]
    if domain is not None:
        ids = {obj.id for obj in model.list_by_origin_domain(domain)}
        selected = [obj for obj in selected if obj.id in ids]
    if high_stability or threshold is not None:
        cutoff = threshold if threshold is not None else settings.high_stability_threshold
        ids = {obj.id for obj in model.list_high_stability(cutoff)}
        selected = [obj for obj in selected if obj.id in ids]

    if not selected:
        console.print("[yellow]No matching spectral objects.[/]")
        return

    table = Table(title=f"Spectral Objects ({len(selected)} of {len(model)})")
    table.add_column("ID", style="cyan")
    table.add_column("Kind")
    table.add_column("Domain")
    table.add_column("Stability", justify="right", style="green")
    table.add_column("Drift", justify="right", style="red")
    table.add_column("Confidence", justify="right")

    for obj in selected:
        origin_domain = obj.origin.get("domain", "") if isinstance(obj.origin, dict) else ""
        table.add_row(
            str(obj.id),
            str(obj.kind),
            str(origin_domain),
            f"{obj.stability:.2f}",
            f"{obj.drift:.2f}",
            f"{obj.confidence:.2f}",
        )

    console.print(table)


# ── Show ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("object_id")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True))
def show(object_id: str, files: tuple):
    """Print a single spectral object as JSON."""
    model = _load_catalog(files)
    obj = model.get_by_id(object_id)
    if obj is None:
        console.print(f"[red]No spectral object with id '{object_id}'.[/]")
        sys.exit(1)

    console.print(Panel(escape(json.dumps(obj.to_dict(), indent=2)), title=f"{obj.kind}: {obj.id}"))


# ── Export ───────────────────────────────────────────────────────────


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--output", "-o", required=True, help="Output file")
@click.option("--format", "fmt", default=None, type=click.Choice(EXPORT_FORMATS),
              help="Output format (default from settings)")
@click.pass_obj
def export(settings, files: tuple, output: str, fmt: str | None):
    """Write a snapshot of the loaded catalog."""
    from spectral.sync.export import write_snapshot

    model = _load_catalog(files)
    path = write_snapshot(model.snapshot(), output, fmt or settings.export_format)
    console.print(f"[green]Exported {len(model)} spectral objects to:[/] {path}")


# ── Excavate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--output", "-o", default="spectral_sniffing.ndjson", help="NDJSON output file")
def excavate(files: tuple, output: str):
    """Excavate scored spectral documents into an NDJSON sniffing view."""
    from spectral.sync.excavator import GovernanceFlags, excavate_into
    from spectral.sync.export import load_documents, write_ndjson

    console.print(f"\n[bold blue]Spectral[/] — Excavating {len(files)} file(s)\n")

    model = SpectralRealityModel()
    flags = GovernanceFlags()
    for path in files:
        try:
            excavate_into(model, load_documents(path), flags)
        except (OSError, ValueError) as e:
            console.print(f"  [red]x[/] {path}: {e}")
            sys.exit(1)
        console.print(f"  [green]v[/] {path}")

    write_ndjson(model.snapshot(), output)
    console.print(f"\n[green]{len(model)} spectral objects written to:[/] {output}")


if __name__ == "__main__":
    main()
