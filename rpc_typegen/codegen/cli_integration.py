"""
CLI integration for code generation functionality.

Provides the ``generate`` and ``scan`` commands.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from ..logging_config import get_logger
from .core.config import (
    ConfigError,
    GeneratorConfig,
    discover_config,
    get_config_manager,
    load_config,
)
from .core.diagnostics import GeneratorError
from .core.generator import GenerationResult
from .core.model import Manifest
from .pipeline import CompilationResult, compile_paths, generate_manifest

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Status, warnings and errors go to stderr; stdout carries only the artifact
console = Console(stderr=True)
output_console = Console()


def _add_verbose_arg(parser: argparse.ArgumentParser):
    # SUPPRESS keeps the top-level --verbose value when the flag is absent here
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Show generation metadata and debug logging",
    )


def add_generate_args(parser: argparse.ArgumentParser):
    """Add code generation arguments to a command parser."""
    _add_verbose_arg(parser)
    parser.add_argument(
        "units",
        nargs="+",
        metavar="UNIT.json",
        help="Syntax-tree documents produced by the front-end parser",
    )

    parser.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="Output file for generated code (default: stdout)",
    )

    parser.add_argument(
        "--config",
        metavar="FILE",
        help="JSON configuration file (default: nearest rpc-typegen.json)",
    )

    parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=1,
        metavar="N",
        help="Extract units on N worker threads (default: 1)",
    )

    ts_group = parser.add_argument_group("TypeScript options")
    ts_group.add_argument(
        "--field-naming",
        choices=["preserve", "camelCase"],
        help="Naming policy for fields without explicit renames",
    )
    ts_group.add_argument(
        "--preserve-docs",
        action="store_true",
        help="Carry doc comments into the generated file",
    )
    ts_group.add_argument(
        "--branded-newtypes",
        action="store_true",
        help="Emit single-element tuple records as branded aliases",
    )
    ts_group.add_argument(
        "--type-override",
        action="append",
        default=[],
        metavar="NAME=TYPE",
        help="Map a source type name to a literal TypeScript type (repeatable)",
    )
    ts_group.add_argument(
        "--bigint-type",
        action="append",
        default=[],
        metavar="NAME",
        help="Map an integer type to bigint (repeatable)",
    )


def add_scan_args(parser: argparse.ArgumentParser):
    """Add manifest scanning arguments to a command parser."""
    _add_verbose_arg(parser)
    parser.add_argument(
        "units",
        nargs="+",
        metavar="UNIT.json",
        help="Syntax-tree documents produced by the front-end parser",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the manifest as JSON instead of tables",
    )
    parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=1,
        metavar="N",
        help="Extract units on N worker threads (default: 1)",
    )


def _parse_overrides(values: List[str]) -> Dict[str, str]:
    overrides = {}
    for value in values:
        name, sep, target = value.partition("=")
        if not sep or not name.strip() or not target.strip():
            raise CLIError(f"Invalid --type-override '{value}', expected NAME=TYPE")
        overrides[name.strip()] = target.strip()
    return overrides


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from the config file and CLI arguments."""
    config_file: Optional[Path] = Path(args.config) if args.config else None
    if config_file is None and args.units:
        config_file = discover_config(Path(args.units[0]).resolve().parent)

    if config_file:
        logger.debug("Using configuration file %s", config_file)

    try:
        base_config = load_config(config_file=config_file)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    config_dict: Dict[str, Any] = base_config.to_dict()

    if args.output:
        config_dict["output_file"] = args.output

    if args.field_naming:
        config_dict["field_naming"] = args.field_naming

    if args.preserve_docs:
        config_dict["preserve_docs"] = True

    if args.branded_newtypes:
        config_dict["branded_newtypes"] = True

    if args.type_override:
        overrides = dict(config_dict.get("type_overrides") or {})
        overrides.update(_parse_overrides(args.type_override))
        config_dict["type_overrides"] = overrides

    if args.bigint_type:
        bigints = list(config_dict.get("bigint_types") or [])
        bigints.extend(b for b in args.bigint_type if b not in bigints)
        config_dict["bigint_types"] = bigints

    try:
        config = load_config(custom_config=config_dict)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    for warning in get_config_manager().validate_config(config):
        console.print(f"[yellow]⚠️  Config:[/yellow] {warning}")
    return config


def _compile(args: argparse.Namespace) -> CompilationResult:
    if args.jobs < 1:
        raise CLIError("--jobs must be at least 1")
    return compile_paths(args.units, jobs=args.jobs)


def handle_generate_command(args: argparse.Namespace) -> int:
    """
    Handle the generate command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        config = _build_config(args)
        return _generate_and_output(args, config)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _generate_and_output(args: argparse.Namespace, config: GeneratorConfig) -> int:
    """Compile, generate and handle output with rich formatting."""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            scan_task = progress.add_task(
                f"[cyan]Extracting {len(args.units)} unit(s)...", total=None
            )
            compilation = _compile(args)
            progress.remove_task(scan_task)

            gen_task = progress.add_task(
                "[green]Generating TypeScript...", total=None
            )
            result = generate_manifest(compilation.manifest, config)
            progress.remove_task(gen_task)

    except GeneratorError as e:
        console.print(f"[red]✗[/red] {e}")
        return 1

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        if result.exception:
            console.print(f"[dim]Details: {result.exception}[/dim]")
        return 1

    result.warnings = [str(d) for d in compilation.diagnostics] + result.warnings

    output_file = config.output_file
    if output_file:
        output_path = Path(output_file)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(result.code, encoding="utf-8")
        except OSError as e:
            console.print(f"[red]✗ Failed to write to {output_path}:[/red] {e}")
            return 1
        console.print(
            f"[green]✓[/green] Generated TypeScript saved to [cyan]{output_path}[/cyan]"
        )
    else:
        _write_code(result.code)

    if getattr(args, "verbose", False) and result.metadata:
        _print_metadata(result)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    return 0


def _write_code(code: str):
    """Highlight code on a terminal; otherwise write it to stdout unchanged."""
    if sys.stdout.isatty():
        output_console.print(Syntax(code, "typescript", theme="monokai"))
    else:
        sys.stdout.write(code)
        sys.stdout.flush()


def _print_metadata(result: GenerationResult):
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in result.metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


def handle_scan_command(args: argparse.Namespace) -> int:
    """
    Handle the scan command: show what a compilation pass discovers.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        compilation = _compile(args)
    except (CLIError, GeneratorError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1

    if args.json:
        data = compilation.manifest.to_dict()
        data["diagnostics"] = [d.to_dict() for d in compilation.diagnostics]
        output_console.out(
            json.dumps(data, indent=2, ensure_ascii=False), highlight=False
        )
        return 0

    _print_manifest(compilation.manifest)

    if compilation.diagnostics:
        console.print("\n[yellow]⚠️  Diagnostics:[/yellow]")
        for diagnostic in compilation.diagnostics:
            console.print(f"  [yellow]•[/yellow] {diagnostic}")
    return 0


def _print_manifest(manifest: Manifest):
    """Render the discovered declarations as rich tables."""
    proc_table = Table(title="🔌 Procedures", box=box.ROUNDED, title_style="bold cyan")
    proc_table.add_column("Name", style="bold green", no_wrap=True)
    proc_table.add_column("Kind", style="cyan")
    proc_table.add_column("Input", style="blue")
    proc_table.add_column("Output", style="blue")
    proc_table.add_column("Timeout", style="dim")
    proc_table.add_column("Source", style="dim")

    for proc in manifest.procedures:
        proc_table.add_row(
            proc.name,
            proc.kind.value,
            proc.input.display() if proc.input else "()",
            proc.output.display() if proc.output else "()",
            f"{proc.timeout_ms} ms" if proc.timeout_ms else "-",
            proc.source_file,
        )

    type_table = Table(title="📦 Types", box=box.ROUNDED, title_style="bold cyan")
    type_table.add_column("Name", style="bold green", no_wrap=True)
    type_table.add_column("Kind", style="cyan")
    type_table.add_column("Members", style="blue")
    type_table.add_column("Source", style="dim")

    for record in manifest.records:
        members = len(record.tuple_fields) if record.is_tuple else len(record.fields)
        kind = "tuple struct" if record.is_tuple else "struct"
        type_table.add_row(record.name, kind, str(members), record.source_file)

    for sum_spec in manifest.sums:
        kind = f"enum ({sum_spec.tagging.kind.value})"
        type_table.add_row(
            sum_spec.name, kind, str(len(sum_spec.variants)), sum_spec.source_file
        )

    output_console.print()
    output_console.print(proc_table)
    output_console.print()
    output_console.print(type_table)
    output_console.print(
        Panel(
            f"[bold]{len(manifest.queries())}[/bold] queries, "
            f"[bold]{len(manifest.mutations())}[/bold] mutations, "
            f"[bold]{len(manifest.records)}[/bold] structs, "
            f"[bold]{len(manifest.sums)}[/bold] enums",
            title="Summary",
            border_style="blue",
        )
    )


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """
    Create the ``generate`` subcommand parser.

    Args:
        subparsers: Subparser group from main parser

    Returns:
        Configured subparser for the generate command
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate TypeScript declarations from syntax-tree documents",
        description="Compile procedures and serializable types into one TypeScript file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rpc-typegen generate api.json models.json -o bindings.ts
  rpc-typegen generate src/*.json --field-naming camelCase --preserve-docs
  rpc-typegen generate api.json --type-override Uuid=string --bigint-type u64
        """.strip(),
    )
    add_generate_args(parser)
    parser.set_defaults(func=handle_generate_command)
    return parser


def create_scan_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``scan`` subcommand parser."""
    parser = subparsers.add_parser(
        "scan",
        help="List the procedures and types discovered in syntax-tree documents",
        description="Run extraction only and report what would be generated",
    )
    add_scan_args(parser)
    parser.set_defaults(func=handle_scan_command)
    return parser
