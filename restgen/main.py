"""CLI entry point for restgen."""

from __future__ import annotations

import importlib
import sys

import click
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from restgen.formats.declarations import InterfaceDeclaration
from restgen.helpers.console import configure_logging, console, truncate

load_dotenv()


@click.group()
@click.version_option(version="0.1.0", prog_name="restgen")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Generate REST client implementations from interface declarations."""
    configure_logging(verbose)


@cli.command()
@click.argument("sources", nargs=-1, type=click.Path(exists=True))
@click.option("-m", "--module", "modules", multiple=True, help="Python module declaring @rest_interface classes")
@click.option("-o", "--output", required=True, help="Output package directory")
def generate(sources: tuple[str, ...], modules: tuple[str, ...], output: str) -> None:
    """Generate client modules and the factory module into OUTPUT."""
    from restgen.errors import GenerationError
    from restgen.generate.pipeline import run_generation, write_generated

    declarations = _load(sources, modules)

    try:
        result = run_generation(declarations)
    except GenerationError as e:
        console.print(f"[red]Generation failed: {escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(1)

    for error in result.errors:
        console.print(f"[red]Rejected {escape(str(error))}[/red]", soft_wrap=True)

    written = write_generated(result, output)
    console.print(
        f"[green]Generated {len(result.clients)} clients in {escape(output)} "
        f"({len(written)} files written, {len(result.files) - len(written)} unchanged)[/green]",
        soft_wrap=True,
    )
    if result.errors:
        sys.exit(1)


@cli.command()
@click.argument("sources", nargs=-1, type=click.Path(exists=True))
@click.option("-m", "--module", "modules", multiple=True, help="Python module declaring @rest_interface classes")
def inspect(sources: tuple[str, ...], modules: tuple[str, ...]) -> None:
    """Show analyzed interfaces and rejected declarations."""
    from restgen.analyze.analyzer import analyze_declarations

    descriptors, errors = analyze_declarations(_load(sources, modules))

    table = Table(title="REST Interfaces")
    table.add_column("Interface", style="cyan")
    table.add_column("Method")
    table.add_column("Verb")
    table.add_column("Route")
    table.add_column("Parameters")
    table.add_column("Returns")
    for descriptor in descriptors:
        for method in descriptor.methods:
            params = ", ".join(f"{p.name}:{p.role.value}" for p in method.parameters)
            table.add_row(
                descriptor.key,
                method.name,
                method.verb,
                escape(method.route),
                escape(truncate(params, 60)),
                escape(method.returns.type),
            )
    console.print(table)

    for error in errors:
        console.print(f"[red]Rejected {escape(str(error))}[/red]", soft_wrap=True)
    if errors:
        sys.exit(1)


def _load(sources: tuple[str, ...], modules: tuple[str, ...]) -> list[InterfaceDeclaration]:
    """Load declaration files and Python modules, exiting on unreadable input."""
    from restgen.declare import collect_declarations
    from restgen.formats.declarations import load_declarations

    declarations: list[InterfaceDeclaration] = []
    for path in sources:
        try:
            declarations.extend(load_declarations(path).interfaces)
        except (ValidationError, ValueError, yaml.YAMLError) as e:
            console.print(f"[red]Invalid declaration file {escape(path)}: {escape(str(e))}[/red]", soft_wrap=True)
            sys.exit(1)
    for name in modules:
        try:
            module = importlib.import_module(name)
        except ImportError as e:
            console.print(f"[red]Cannot import {escape(name)}: {escape(str(e))}[/red]", soft_wrap=True)
            sys.exit(1)
        try:
            declarations.extend(collect_declarations(module).interfaces)
        except (TypeError, NameError) as e:
            console.print(f"[red]Cannot read declarations from {escape(name)}: {escape(str(e))}[/red]", soft_wrap=True)
            sys.exit(1)

    if not declarations:
        console.print("[red]No interface declarations found[/red]", soft_wrap=True)
        sys.exit(1)
    return declarations


if __name__ == "__main__":
    cli()
