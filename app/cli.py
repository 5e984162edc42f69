from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from adapters.filesystem.layout_repository import layout_path_for
from app.config import AppSettings, load_settings
from app.wiring import build_diagram_repository, build_layout_repository, build_pipeline
from domain.errors import LayoutError
from domain.services.transforms.base import GraphTransform

app = typer.Typer(no_args_is_help=True)
console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _settings(config: Optional[Path]) -> AppSettings:
    try:
        settings = load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        raise typer.Exit(code=1) from exc
    configure_logging(settings.log_level)
    return settings


@app.command("layout")
def layout(
    input_dir: Optional[Path] = typer.Option(None, help="Directory with diagram model JSON files."),
    output_dir: Optional[Path] = typer.Option(None, help="Directory to write layout JSON files."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = _settings(config)
    source_dir = input_dir or settings.output.input_dir
    target_dir = output_dir or settings.output.output_dir
    repository = build_diagram_repository()
    layouts = build_layout_repository(settings)
    pipeline = build_pipeline(settings)

    paths = repository.iter_paths(source_dir)
    if not paths:
        console.print(f"[yellow]No diagram files found in {source_dir}[/]")
        raise typer.Exit(code=0)

    failures = 0
    for path in paths:
        target_path = layout_path_for(path, target_dir)
        try:
            result = pipeline.layout(repository.load_by_path(path))
            layouts.save(result, target_path)
        except (LayoutError, OSError) as exc:
            failures += 1
            console.print(f"[red]Failed[/] {path}: {escape(str(exc))}")
            continue
        console.print(f"[green]Wrote[/] {target_path}")

    if failures:
        console.print(f"[red]{failures} of {len(paths)} diagram(s) failed[/]")
        raise typer.Exit(code=1)


@app.command("validate")
def validate(
    input_path: Path = typer.Argument(..., help="Diagram model JSON file to validate."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    settings = _settings(config)
    pipeline = build_pipeline(settings)
    try:
        model = build_diagram_repository().load_by_path(input_path)
        result = pipeline.layout(model)
    except LayoutError as exc:
        console.print(f"[red]Validation failed:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    console.print(
        f"[green]Valid {result.kind} diagram:[/] {input_path} "
        f"({len(result.all_nodes())} nodes, {len(result.edges)} edges)"
    )


@app.command("kinds")
def kinds(config: Optional[Path] = typer.Option(None, help="YAML settings file.")) -> None:
    settings = _settings(config)
    pipeline = build_pipeline(settings)
    table = Table(title="Supported diagram kinds")
    table.add_column("Kind")
    table.add_column("Strategy")
    table.add_column("Graph engine")
    for kind, transform in pipeline.transforms.items():
        engine = transform.layout_engine.name if isinstance(transform, GraphTransform) else "-"
        table.add_row(kind.value, type(transform).__name__, engine)
    console.print(table)


if __name__ == "__main__":
    app()
