"""
Command-line interface for 42-c-format.

This module provides CLI commands for formatting files, checking them
against the norm, previewing and restoring, and for using the formatter
as an editor pipe.
"""

import os
import sys
import json
import click
import logging
from pathlib import Path
from typing import List
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.panel import Panel

from .. import __version__
from ..core.config import NormConfig, NormFormatterError
from ..core.scanner import SourceScanner, SOURCE_SUFFIXES
from ..core.formatter import AutoFormatter
from ..core.aggregator import FileAggregator, FileStatus
from ..core.pipeline import FormatPipeline

console = Console()
error_console = Console(stderr=True)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def limit_options(func):
    """Shared options that override the norm limits."""
    func = click.option('--max-line-length', type=int, default=None, help='Column limit (default 80)')(func)
    func = click.option('--max-function-lines', type=int, default=None, help='Function body limit (default 25)')(func)
    func = click.option('--max-functions', type=int, default=None, help='Functions per file (default 5)')(func)
    return func


def build_config(**options) -> NormConfig:
    try:
        return NormConfig.from_dict(options)
    except NormFormatterError as e:
        raise click.BadParameter(str(e))


def collect_sources(path: str, recursive: bool) -> List[str]:
    if os.path.isfile(path):
        return [path]
    pattern = "**/*" if recursive else "*"
    sources = [str(p) for p in sorted(Path(path).glob(pattern)) if p.suffix in SOURCE_SUFFIXES]
    logger.debug(f"Collected {len(sources)} C sources under {path}")
    return sources


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose):
    """42-c-format - format C sources to the 42 norm and report violations."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        console.print("[dim]Verbose mode enabled[/dim]")


@main.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--recursive/--no-recursive', '-r', default=True, help='Process directories recursively')
@click.option('--backup/--no-backup', default=True, help='Create backups before formatting')
@click.option('--dry-run', is_flag=True, help='Show what would change without writing files')
@click.option('--check-formatted', is_flag=True, help='Report diagnostics for the formatted text')
@limit_options
def format(path, recursive, backup, dry_run, check_formatted, **limits):
    """Format files in place."""
    console.print(f"[bold yellow]Formatting:[/bold yellow] {path}")
    config = build_config(check_formatted=check_formatted, **limits)
    formatter = AutoFormatter(backup_enabled=backup, config=config)
    files = collect_sources(path, recursive)

    if not files:
        console.print("[yellow]No C source files found[/yellow]")
        return

    if dry_run:
        console.print("[dim]Running in dry-run mode - no changes will be made[/dim]")
        display_dry_run_results(formatter, files)
        return

    format_files(formatter, files)


@main.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--recursive/--no-recursive', '-r', default=True, help='Scan directories recursively')
@click.option('--output', '-o', type=click.Path(), help='Output file for results (JSON format)')
@click.option('--show-details', is_flag=True, help='Show every diagnostic')
@click.option('--check-formatted', is_flag=True, help='Check files as they would be after formatting')
@limit_options
def check(path, recursive, output, show_details, check_formatted, **limits):
    """Check files against the norm without changing them."""
    console.print(f"[bold blue]Checking:[/bold blue] {path}")
    scanner = SourceScanner(build_config(check_formatted=check_formatted, **limits))
    aggregator = FileAggregator()

    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"),
                  console=console) as progress:
        task = progress.add_task("Checking files...", total=None)
        if os.path.isfile(path):
            results = [scanner.scan_file(path)]
        else:
            results = scanner.scan_directory(path, recursive=recursive)

        progress.update(task, description="Aggregating results...")
        for result in results:
            aggregator.add_scan_result(result)

    display_check_results(aggregator, show_details)

    if output:
        with open(output, 'w') as f:
            json.dump(aggregator.export_report(), f, indent=2)
        console.print(f"[green]Results saved to {output}[/green]")

    if any(result.error_count for result in results):
        sys.exit(1)


@main.command()
@click.argument('filepath', type=click.Path(exists=True, dir_okay=False))
@limit_options
def preview(filepath, **limits):
    """Preview the formatted content of a file."""
    console.print(f"[bold magenta]Preview for:[/bold magenta] {filepath}")
    formatter = AutoFormatter(backup_enabled=False, config=build_config(**limits))

    preview_content = formatter.get_format_preview(filepath)
    if preview_content is None:
        console.print("[red]Failed to generate preview[/red]")
        sys.exit(1)

    console.print(Panel(preview_content, title="Formatted Code", border_style="green"))


@main.command()
@click.argument('filepath', type=click.Path(exists=True, dir_okay=False))
def restore(filepath):
    """Restore a file from its latest backup."""
    console.print(f"[bold orange1]Restoring:[/bold orange1] {filepath}")
    formatter = AutoFormatter()

    if formatter.restore_from_backup(filepath):
        console.print(f"[green]Successfully restored {filepath} from backup[/green]")
    else:
        console.print(f"[red]Failed to restore {filepath} - no backup found or restore failed[/red]")
        sys.exit(1)


@main.command()
@click.option('--start-line', type=int, default=None, help='First line of the requested range (1-based)')
@click.option('--end-line', type=int, default=None, help='Last line of the requested range (inclusive)')
@limit_options
def pipe(start_line, end_line, **limits):
    """
    Format stdin to stdout for editors.

    Diagnostics go to stderr, one per line. A range request still formats
    and returns the whole document.
    """
    pipeline = FormatPipeline(build_config(**limits))
    text = click.get_text_stream('stdin').read()

    try:
        if start_line is not None or end_line is not None:
            start = start_line or 1
            result = pipeline.run_range(text, start, end_line if end_line is not None else start)
        else:
            result = pipeline.run(text)
    except NormFormatterError as e:
        logger.error(f"Pipe request rejected: {e}")
        error_console.print(f"[red]{e}[/red]")
        sys.exit(2)

    click.echo(result.formatted_text, nl=False)
    for diagnostic in result.diagnostics:
        click.echo(str(diagnostic), err=True)


@main.command()
@click.option('--host', default='127.0.0.1', help='Host to bind to')
@click.option('--port', default=8080, help='Port to bind to')
@click.option('--debug', is_flag=True, help='Enable debug mode')
def dashboard(host, port, debug):
    """Serve the formatting API over HTTP."""
    try:
        from ..dashboard.app import create_app
    except ImportError as e:
        console.print(f"[red]The dashboard needs the 'web' extra: {e}[/red]")
        sys.exit(1)

    console.print(f"[bold green]Starting dashboard at http://{host}:{port}[/bold green]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    try:
        app = create_app()
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        console.print("\n[yellow]Dashboard stopped[/yellow]")


def display_check_results(aggregator, show_details):
    """Display check results as a summary panel and a file table."""
    summary = aggregator.generate_project_summary()
    summary_text = f"""
Total Files: {summary.total_files}
OK Files: {summary.ok_files}
Files with violations: {summary.total_files - summary.ok_files}
Success Rate: {summary.success_rate:.1f}%
Total Diagnostics: {summary.total_errors}
    """.strip()

    console.print(Panel(summary_text, title="Check Summary", border_style="blue"))

    if not aggregator.files:
        console.print("[yellow]No C source files found[/yellow]")
        return

    table = Table(title="Files")
    table.add_column("File", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Diagnostics", justify="center")
    table.add_column("Rules", style="dim")

    status_styles = {
        FileStatus.OK: "green",
        FileStatus.WARNING: "yellow",
        FileStatus.ERROR: "red",
        FileStatus.CRITICAL: "bold red"
    }

    for file_info in aggregator.files:
        style = status_styles.get(file_info.status, "white")
        table.add_row(
            file_info.filename,
            f"[{style}]{file_info.status.value}[/{style}]",
            str(file_info.error_count),
            ", ".join(sorted(file_info.rules)) or "None"
        )

    console.print(table)

    if show_details:
        for filepath, result in aggregator.scan_results.items():
            for diagnostic in result.diagnostics:
                console.print(f"{filepath}:{diagnostic.line}: [{diagnostic.rule}] {diagnostic.message}")


def display_dry_run_results(formatter, files):
    """Display which files formatting would change."""
    table = Table(title="Files to Format")
    table.add_column("File", style="cyan")
    table.add_column("Would change", justify="center")
    table.add_column("Diagnostics", justify="center")

    for filepath in files:
        content = formatter._read_file(filepath)
        if content is None:
            table.add_row(Path(filepath).name, "[red]unreadable[/red]", "-")
            continue
        result = formatter.pipeline.run(content)
        changed = "yes" if result.formatted_text != content else "no"
        table.add_row(Path(filepath).name, changed, str(len(result.diagnostics)))

    console.print(table)


def format_files(formatter, files):
    """Format the given files and print a summary."""
    total_changes = 0
    successful_files = 0

    with Progress(console=console) as progress:
        task = progress.add_task("Formatting files...", total=len(files))

        for filepath, result in formatter.format_multiple_files(files).items():
            filename = Path(filepath).name
            if result.success:
                total_changes += result.changes_made
                successful_files += 1
                console.print(f"[green]✓[/green] {filename}: {result.changes_made} changes, "
                              f"{len(result.diagnostics)} diagnostics")
            else:
                console.print(f"[red]✗[/red] {filename}: {result.message}")
            progress.advance(task)

    console.print("\n[bold]Formatting complete![/bold]")
    console.print(f"Successfully formatted: {successful_files}/{len(files)} files")
    console.print(f"Total changes made: {total_changes}")

    if successful_files < len(files):
        sys.exit(1)


if __name__ == '__main__':
    main()
