"""Emit the factory module that registers every generated client."""

from __future__ import annotations

import json
from collections.abc import Sequence

from restgen.errors import GenerationError
from restgen.formats.descriptors import GeneratedClientDescriptor

FACTORY_MODULE = "rest_client_factory"


def build_factory_module(clients: Sequence[GeneratedClientDescriptor]) -> str:
    """Build the registration module for a set of generated clients.

    Importing the module runs ``register_clients`` exactly once on a fresh
    registry and seals it. Bindings are emitted sorted by interface key so
    the same client set always yields the same text.
    """
    seen: set[str] = set()
    for client in clients:
        if client.interface_key in seen:
            raise GenerationError(f"{client.interface_key} would be registered twice")
        seen.add(client.interface_key)

    ordered = sorted(clients, key=lambda c: c.interface_key)

    lines = [
        '"""Auto-generated REST client factory. Do not edit."""',
        "",
        "from __future__ import annotations",
        "",
        "from restgen.runtime.factory import RestClientFactory",
        "from restgen.runtime.registry import FactoryRegistry",
        "",
    ]
    for client in sorted(clients, key=lambda c: c.module_name):
        lines.append(f"from .{client.module_name} import {client.class_name}")
    lines.extend([
        "",
        "",
        "def register_clients(registry: FactoryRegistry) -> None:",
        '    """Bind every generated client to its interface key."""',
    ])
    for client in ordered:
        lines.append(f"    registry.set_rest_client({json.dumps(client.interface_key)}, {client.class_name})")
    lines.extend([
        "",
        "",
        "registry = FactoryRegistry.build(register_clients)",
        "rest_client_factory = RestClientFactory(registry)",
        "for_ = rest_client_factory.for_",
    ])
    return "\n".join(lines) + "\n"


def build_package_init() -> str:
    """Build the ``__init__.py`` exposing the factory of a generated package."""
    lines = [
        '"""Auto-generated REST clients. Do not edit."""',
        "",
        "from __future__ import annotations",
        "",
        f"from .{FACTORY_MODULE} import (",
        "    for_ as for_,",
        "    register_clients as register_clients,",
        "    registry as registry,",
        "    rest_client_factory as rest_client_factory,",
        ")",
        "",
        '__all__ = ["for_", "register_clients", "registry", "rest_client_factory"]',
    ]
    return "\n".join(lines) + "\n"
