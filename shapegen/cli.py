"""
Command-line interface for shapegen.

Loads a model, runs the Go generator and writes the resulting files.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .codegen import ConfigError, GenerationResult, generate_client, load_settings
from .codegen.core.errors import ModelError
from .codegen.core.model import Model
from .logging_config import configure_logging, get_logger
from .utils import ModelLoadError, load_model

logger = get_logger(__name__)

console = Console()


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shapegen",
        description="Generate Go client modules from service shape models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  shapegen generate model.json --settings smithy-build.json
  shapegen generate model.json --module github.com/example/weather \\
      --service example.weather#Weather --output ./weather
  shapegen shapes model.json --service example.weather#Weather
        """.strip(),
    )
    parser.add_argument("--log-file", metavar="FILE", help="Also write logs to FILE")

    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Generate a Go client module")
    generate.add_argument("model", help="Model file path or http(s) URL")
    generate.add_argument("--settings", "-s", metavar="FILE", help="JSON settings file")
    generate.add_argument("--module", metavar="PATH", help="Go module path")
    generate.add_argument("--service", metavar="ID", help="Service shape id")
    generate.add_argument("--package-name", metavar="NAME", help="Go package name")
    generate.add_argument("--protocol", metavar="ID", help="Protocol trait id to use")
    generate.add_argument(
        "--output", "-o", metavar="DIR", help="Output directory (default: settings or '.')"
    )
    generate.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be written without writing them",
    )
    generate.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging and metadata"
    )
    generate.set_defaults(func=_handle_generate)

    shapes = subparsers.add_parser("shapes", help="List the shapes of a model")
    shapes.add_argument("model", help="Model file path or http(s) URL")
    shapes.add_argument(
        "--service", metavar="ID", help="Only list shapes reachable from this service"
    )
    shapes.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    shapes.set_defaults(func=_handle_shapes)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point; returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=getattr(args, "verbose", False),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _handle_generate(args: argparse.Namespace) -> int:
    model = _load_model(args.model)

    overrides = {
        "module_name": args.module,
        "service": args.service,
        "package_name": args.package_name,
        "protocol": args.protocol,
        "output_dir": args.output,
    }
    try:
        settings = load_settings(overrides, args.settings)
    except ConfigError as e:
        raise CLIError(str(e)) from e

    with console.status(f"Generating {settings.module_name}..."):
        result = generate_client(model, settings)

    if not result.success:
        console.print(f"[red]✗ Generation failed:[/red] {result.error_message}")
        return 1

    for warning in result.warnings:
        console.print(f"[yellow]⚠️  {warning}[/yellow]")

    output_dir = Path(settings.output_dir or ".")
    if args.dry_run:
        _print_file_table(result, output_dir, title="📋 Files (dry run)")
        return 0

    logger.info("Writing %d files to %s", len(result.manifest), output_dir)
    try:
        result.manifest.write(output_dir)
    except OSError as e:
        raise CLIError(f"Failed to write output to {output_dir}: {e}") from e

    _print_file_table(result, output_dir, title="✅ Generated files")
    if args.verbose:
        _print_metadata(result)
    return 0


def _handle_shapes(args: argparse.Namespace) -> int:
    model = _load_model(args.model)

    try:
        shapes = model.walk(args.service) if args.service else model.shapes()
    except ModelError as e:
        raise CLIError(str(e)) from e

    table = Table(title="📋 Shapes", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Shape", style="bold green", no_wrap=True)
    table.add_column("Type", style="cyan")
    table.add_column("Traits", style="dim")

    for shape in shapes:
        if shape.id.namespace == "smithy.api":
            continue
        traits = ", ".join(t.split("#", 1)[-1] for t in sorted(shape.traits))
        table.add_row(str(shape.id), shape.type.value, traits or "[dim]none[/dim]")

    console.print(table)
    return 0


def _load_model(source: str) -> Model:
    try:
        return load_model(source)
    except (ModelLoadError, FileNotFoundError) as e:
        raise CLIError(f"Failed to load model: {e}") from e


def _print_file_table(result: GenerationResult, output_dir: Path, title: str) -> None:
    table = Table(title=title, box=box.SIMPLE, header_style="bold cyan")
    table.add_column("File", style="green")
    table.add_column("Lines", justify="right")
    for generated in result.files:
        table.add_row(str(output_dir / generated.path), str(generated.content.count("\n")))
    console.print(table)


def _print_metadata(result: GenerationResult) -> None:
    lines = [f"[bold]{key}:[/bold] {value}" for key, value in result.metadata.items()]
    console.print(Panel("\n".join(lines), title="Generation metadata", border_style="blue"))


if __name__ == "__main__":
    sys.exit(main())
