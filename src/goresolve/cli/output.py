"""
CLI Output Utilities

Machine-aware output functions: rich tables for humans, JSON for machines.
"""

import json
from typing import Any, Iterable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from goresolve.cli.config import CLIConfig
from goresolve.schemas import ImportFailure, PackageSummary

_console = Console()
_err_console = Console(stderr=True)


def get_console() -> Console:
    return _console


def print_json(data: Any) -> None:
    """
    Print JSON data. Minified in machine mode, indented otherwise.
    """
    if CLIConfig.is_machine_mode():
        typer.echo(json.dumps(data, separators=(",", ":")))
    else:
        typer.echo(json.dumps(data, indent=2))


def print_error(message: str, input_value: Optional[str] = None) -> None:
    """
    Print an error message respecting machine mode.
    """
    if CLIConfig.is_machine_mode():
        error_obj = {"status": "error", "message": message}
        if input_value:
            error_obj["input"] = input_value
        typer.echo(json.dumps(error_obj, separators=(",", ":")), err=True)
    else:
        _err_console.print(f"[red]Error:[/red] {message}", highlight=False)


def print_packages(title: str, packages: Iterable[PackageSummary], json_output: bool = False,
                   failures: Optional[List[ImportFailure]] = None) -> None:
    """Print package summaries as a table, or as JSON."""
    packages = list(packages)
    failures = failures or []
    if json_output or CLIConfig.is_machine_mode():
        print_json({
            "packages": [p.model_dump() for p in packages],
            "errors": [f.model_dump() for f in failures],
        })
        return

    table = Table(title=title)
    table.add_column("Import path", style="green")
    table.add_column("Name", style="cyan")
    table.add_column("Files", justify="right", style="yellow")
    table.add_column("Imports", justify="right", style="magenta")
    table.add_column("Std", justify="center")
    for p in packages:
        table.add_row(p.import_path, p.name, str(len(p.files)), str(len(p.imports)), "✓" if p.goroot else "")
    _console.print(table)

    for failure in failures:
        print_error(failure.error, failure.target)


def print_lines(title: str, lines: Iterable[str], json_output: bool = False, key: str = "items") -> None:
    """Print a plain list of strings, one per line, or as JSON under key."""
    lines = list(lines)
    if json_output or CLIConfig.is_machine_mode():
        print_json({key: lines})
        return
    _console.print(f"[bold]{title}[/bold] ({len(lines)})", highlight=False)
    for line in lines:
        typer.echo(line)
