"""Typer CLI application."""

import json
from pathlib import Path
from typing import Optional

import typer

from schemagraph.config.logging import setup_logging
from schemagraph.config.settings import get_settings
from schemagraph.errors import SchemaError
from schemagraph.generation import generate_schemas
from schemagraph.ir.node import ArrayOf
from schemagraph.normalization import normalize as normalize_payload
from schemagraph.normalization import to_frames, write_frames
from schemagraph.utils.schema_io import load_schemas_from_json

app = typer.Typer(help="schemagraph: entity schemas, relations and normalization")


def _load_nodes(schema_file: Path):
    try:
        return generate_schemas(load_schemas_from_json(schema_file))
    except (FileNotFoundError, ValueError, SchemaError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def describe(schema_file: Path):
    """
    Print every schema with its relations and discovered back-references.

    Args:
        schema_file: Path to schema JSON file
    """
    setup_logging()
    nodes = _load_nodes(schema_file)

    for name, node in nodes.items():
        typer.echo(f"{name} (key: {node.id_attribute})")
        for prop, slot in node.relation_slots():
            if isinstance(slot, ArrayOf):
                related, target = slot.get_item_schema(), f"[{slot.get_item_schema().name}]"
            else:
                related, target = slot, slot.name
            back = related.related_through(node)
            suffix = f" (back-reference: {back})" if back else ""
            marker = " internal" if prop in node.internal else ""
            typer.echo(f"  {prop} -> {target}{marker}{suffix}")
        if node.computed:
            typer.echo(f"  computed: {', '.join(node.computed)}")


@app.command()
def normalize(
    schema_file: Path,
    payload_file: Path,
    schema: str = typer.Option(..., "--schema", "-s", help="Schema of the top-level payload"),
    many: bool = typer.Option(False, "--many", help="Payload is a list of entities"),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", "-o", help="Output directory"),
    fmt: str = typer.Option("json", "--format", "-f", help="json or csv"),
):
    """
    Flatten a nested JSON payload into one table per entity.

    Args:
        schema_file: Path to schema JSON file
        payload_file: Path to payload JSON file
    """
    setup_logging()
    settings = get_settings()

    if fmt not in ("json", "csv"):
        typer.echo(f"Error: unsupported format {fmt!r} (expected json or csv)", err=True)
        raise typer.Exit(1)

    nodes = _load_nodes(schema_file)
    if schema not in nodes:
        typer.echo(f"Error: unknown schema {schema!r}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Reading payload from {payload_file}")
    try:
        payload = json.loads(Path(payload_file).read_text(encoding="utf-8"))
        normalized = normalize_payload(payload, [nodes[schema]] if many else nodes[schema])
    except (OSError, json.JSONDecodeError, SchemaError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    target = out_dir or settings.output_dir
    try:
        written = write_frames(to_frames(normalized), target, fmt=fmt)
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    for name, path in written.items():
        typer.echo(f"  {name}: {path}")
    typer.echo(f"✓ Complete! {len(written)} table(s) written to {target}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
