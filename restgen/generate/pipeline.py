"""Generation run: declarations -> analyzed descriptors -> generated files."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from restgen.analyze.analyzer import analyze_declarations
from restgen.errors import AnalysisError, GenerationError
from restgen.formats.declarations import DeclarationSet, InterfaceDeclaration
from restgen.formats.descriptors import GeneratedClientDescriptor, InterfaceDescriptor
from restgen.generate.client import client_module_name, synthesize_client
from restgen.generate.factory import FACTORY_MODULE, build_factory_module, build_package_init

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Output of one generation run.

    ``files`` maps file names to source text, sorted by name. Interfaces that
    failed analysis are listed in ``errors`` and have no file.
    """

    descriptors: list[InterfaceDescriptor] = field(default_factory=lambda: list[InterfaceDescriptor]())
    clients: list[GeneratedClientDescriptor] = field(default_factory=lambda: list[GeneratedClientDescriptor]())
    errors: list[AnalysisError] = field(default_factory=lambda: list[AnalysisError]())
    files: dict[str, str] = field(default_factory=lambda: dict[str, str]())


def run_generation(declarations: DeclarationSet | Iterable[InterfaceDeclaration]) -> GenerationResult:
    """Analyze, synthesize and build the factory for a set of declarations.

    Raises:
        GenerationError: If two clients collide on interface key, or still collide on
            class or module name after scope qualification.
    """
    descriptors, errors = analyze_declarations(declarations)
    # interfaces sharing a short name get scope-qualified class and module names
    short_names = Counter(client_module_name(d) for d in descriptors)
    clients = [synthesize_client(d, qualified=short_names[client_module_name(d)] > 1) for d in descriptors]
    check_collisions(clients)

    files = {client.filename: client.source for client in clients}
    files[f"{FACTORY_MODULE}.py"] = build_factory_module(clients)
    files["__init__.py"] = build_package_init()

    logger.debug("Generated %d clients, %d interfaces rejected", len(clients), len(errors))
    return GenerationResult(
        descriptors=descriptors,
        clients=clients,
        errors=errors,
        files=dict(sorted(files.items())),
    )


def check_collisions(clients: list[GeneratedClientDescriptor]) -> None:
    reserved = {FACTORY_MODULE, "__init__"}
    keys: set[str] = set()
    class_names: dict[str, str] = {}
    module_names: dict[str, str] = {}
    for client in clients:
        key = client.interface_key
        if key in keys:
            raise GenerationError(f"{key} is declared twice")
        if client.class_name in class_names:
            raise GenerationError(
                f"{key} and {class_names[client.class_name]} both generate class {client.class_name}"
            )
        if client.module_name in module_names or client.module_name in reserved:
            other = module_names.get(client.module_name, "the factory package")
            raise GenerationError(f"{key} and {other} both generate module {client.module_name}")
        keys.add(key)
        class_names[client.class_name] = key
        module_names[client.module_name] = key


def write_generated(result: GenerationResult, output_dir: str | Path) -> list[Path]:
    """Write generated files, leaving files whose content is unchanged untouched.

    Returns the paths actually written.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for filename, source in result.files.items():
        path = output_dir / filename
        if path.exists() and path.read_text() == source:
            logger.debug("%s is up to date", path)
            continue
        path.write_text(source)
        written.append(path)
    return written
