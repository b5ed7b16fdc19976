"""stubsync CLI Tool - Main entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from stubsync import __version__
from stubsync.availability import is_valid_for_current_version
from stubsync.cli_utils import (
    EXIT_USER_ERROR,
    EXIT_VALIDATION_FAILED,
    ensure_file_exists,
    json_option,
    php_version_option,
    quiet_option,
    verbose_option,
    wire_config,
)
from stubsync.config import StubsyncConfig
from stubsync.context import ResolverContext
from stubsync.elements import DeclaredElement, resolve_types
from stubsync.loader import (
    LoadedDeclaration,
    LoaderError,
    build_elements,
    build_reflection_elements,
    load_declarations,
)
from stubsync.logging import configure_logging
from stubsync.muted import load_muted_problems_file
from stubsync.validators import ValidationRunner
from stubsync.versions import format_version

app = typer.Typer(
    name="stubsync",
    help="stubsync - Version-aware type and availability resolver for PHP stubs.",
    add_completion=False,
)

# Rich consoles for output
console = Console()
err_console = Console(stderr=True)


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _output_success(message: str, quiet: bool = False) -> None:
    """Print a success message."""
    if not quiet:
        console.print(f"[green]Success:[/green] {message}")


def _output_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error:[/red] {message}")


def _output_warning(message: str, quiet: bool = False) -> None:
    """Print a warning message."""
    if not quiet:
        err_console.print(f"[yellow]Warning:[/yellow] {message}")


def _exit_error(message: str, exit_code: int = EXIT_USER_ERROR) -> None:
    """Print error and exit."""
    _output_error(message)
    raise typer.Exit(code=exit_code)


def _format_types(types: list[str]) -> str:
    return "|".join(types) if types else "-"


def _format_range(element: DeclaredElement) -> str:
    if element.available_range is None:
        return "all"
    bounds = element.available_range.as_dict()
    upper = format_version(bounds["to"]) if "to" in bounds else ""
    return f"{format_version(bounds['from'])}..{upper}"


# -----------------------------------------------------------------------------
# Loading Helpers
# -----------------------------------------------------------------------------


def _load_muted(config: StubsyncConfig) -> list[Any] | dict[str, Any] | None:
    path = config.get_muted_problems_path()
    if path is None:
        return None
    try:
        return load_muted_problems_file(path)
    except FileNotFoundError:
        _exit_error(f"Muted problems file not found: {path}")
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        _exit_error(f"Invalid muted problems file {path}: {e}")
    return None


def _load(file: Path, context: ResolverContext) -> list[LoadedDeclaration]:
    ensure_file_exists(file, "Declarations file")
    try:
        return load_declarations(file, context.separator)
    except LoaderError as e:
        _exit_error(str(e))
    return []


def _build(
    declarations: list[LoadedDeclaration],
    context: ResolverContext,
    config: StubsyncConfig,
) -> list[DeclaredElement]:
    muted_data = _load_muted(config)
    try:
        return build_elements(declarations, context, muted_data)
    except ValueError as e:
        _exit_error(f"Invalid muted problems file {config.get_muted_problems_path()}: {e}")
    return []


# -----------------------------------------------------------------------------
# Version and Main Callbacks
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"stubsync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """stubsync - Version-aware type and availability resolver for PHP stubs."""
    pass


# -----------------------------------------------------------------------------
# Versions Command
# -----------------------------------------------------------------------------


@app.command()
def versions(
    php_version: str | None = php_version_option(),
    json_output: bool = json_option(),
) -> None:
    """List the known runtime versions.

    Marks the first and latest known versions and the version checks run
    against.
    """
    config = wire_config(php_version=php_version)
    context = ResolverContext.from_config(config)
    registry = context.registry

    if json_output:
        console.print_json(
            json.dumps({
                "versions": [format_version(v) for v in registry],
                "first": format_version(registry.first()),
                "latest": format_version(registry.latest()),
                "current": context.current_key,
            })
        )
        return

    table = Table(title="Known Versions")
    table.add_column("Version", style="cyan")
    table.add_column("Notes")
    for version in registry:
        notes = []
        if version == registry.first():
            notes.append("first")
        if version == registry.latest():
            notes.append("latest")
        if version == context.version:
            notes.append("[green]current[/green]")
        table.add_row(format_version(version), ", ".join(notes))
    console.print(table)


# -----------------------------------------------------------------------------
# Resolve Command
# -----------------------------------------------------------------------------


@app.command()
def resolve(
    file: Path = typer.Argument(..., help="Declarations file (YAML or JSON)."),
    php_version: str | None = php_version_option(),
    json_output: bool = json_option(),
    quiet: bool = quiet_option(),
    verbose: bool = verbose_option(),
) -> None:
    """Resolve declared types and availability for the current version.

    For each declaration shows the types at the current version (from
    version-conditional markers when present, otherwise from the signature),
    the types reported by reflection, the availability range and whether the
    declaration exists in the current version.
    """
    configure_logging(verbose=verbose)
    config = wire_config(php_version=php_version)
    context = ResolverContext.from_config(config)

    declarations = _load(file, context)
    elements = _build(declarations, context, config)
    reflected = build_reflection_elements(declarations)

    rows: list[dict[str, Any]] = []
    for element in elements:
        reflection = reflected.get(element.name)
        rows.append({
            "name": element.name,
            "kind": element.kind.value,
            "types": resolve_types(element, context),
            "reflection_types": resolve_types(reflection, context) if reflection else None,
            "range": element.available_range.as_dict() if element.available_range else None,
            "available": is_valid_for_current_version(element, context),
            "duplicate": element.duplicate_other_element,
            "parse_error": str(element.parse_error) if element.parse_error else None,
        })

    if json_output:
        console.print_json(json.dumps({"php_version": context.current_key, "elements": rows}))
        return

    table = Table(title=f"Declarations for PHP {context.current_key}")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Types")
    table.add_column("Reflection")
    table.add_column("Range")
    table.add_column("Available")
    for element, row in zip(elements, rows):
        name = row["name"] or "[red](empty)[/red]"
        if row["duplicate"]:
            name += " [dim](dup)[/dim]"
        available = "[green]yes[/green]" if row["available"] else "[yellow]no[/yellow]"
        reflection_types = row["reflection_types"]
        table.add_row(
            name,
            row["kind"],
            _format_types(row["types"]),
            _format_types(reflection_types) if reflection_types is not None else "",
            _format_range(element),
            available,
        )
    if not quiet:
        console.print(table)

    for row in rows:
        if row["parse_error"]:
            _output_warning(f"{row['name']}: {row['parse_error']}", quiet)
    _output_success(f"Resolved {len(rows)} declarations", quiet)


# -----------------------------------------------------------------------------
# Validate Command
# -----------------------------------------------------------------------------


@app.command()
def validate(
    file: Path = typer.Argument(..., help="Declarations file (YAML or JSON)."),
    php_version: str | None = php_version_option(),
    muted: str | None = typer.Option(
        None,
        "--muted",
        "-m",
        help="Muted-problems JSON file.",
    ),
    json_output: bool = json_option(),
    quiet: bool = quiet_option(),
    verbose: bool = verbose_option(),
) -> None:
    """Check resolved declarations for data-quality problems.

    Runs the parse-errors, names, types and duplicates validators. Problems
    muted for the current version are skipped.

    Exits with code 2 if validation fails (errors found).
    Warnings do not cause validation failure.
    """
    configure_logging(verbose=verbose)
    config = wire_config(php_version=php_version, muted_problems=muted)
    context = ResolverContext.from_config(config)

    declarations = _load(file, context)
    elements = _build(declarations, context, config)

    runner = ValidationRunner(elements, context)
    validation_result = runner.run_all()

    if json_output:
        console.print_json(
            json.dumps({
                "valid": validation_result.errors == 0,
                "php_version": context.current_key,
                "summary": {
                    "validators_run": validation_result.validators_run,
                    "errors": validation_result.errors,
                    "warnings": validation_result.warnings,
                },
                "checks": [
                    {"name": vr.name, "passed": vr.status == "pass"}
                    for vr in validation_result.results
                ],
                "issues": [
                    {
                        "element": issue.element,
                        "check": issue.check,
                        "severity": issue.severity,
                        "message": issue.message,
                        "file": issue.file,
                    }
                    for issue in validation_result.all_issues
                ],
            })
        )
    else:
        if validation_result.errors == 0:
            _output_success(f"Validation passed for PHP {context.current_key}", quiet)
        else:
            _output_error(f"Validation failed for PHP {context.current_key}")

        if not quiet:
            for vr in validation_result.results:
                status = "[green]PASS[/green]" if vr.status == "pass" else "[red]FAIL[/red]"
                console.print(f"  {status} {vr.name}")

            for issue in validation_result.all_issues:
                location = f" ({issue.file})" if issue.file else ""
                if issue.severity == "error":
                    _output_error(f"{issue.message}{location}")
                elif issue.severity == "warning":
                    _output_warning(f"{issue.message}{location}")

    if validation_result.errors:
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)


if __name__ == "__main__":
    app()
