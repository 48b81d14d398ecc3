"""Python codegen naming utilities shared across generators."""

from __future__ import annotations

import re

_SCALAR_TYPES = frozenset({"str", "int", "float", "bool"})

_BUILTIN_NAMES = frozenset({
    "None", "Any", "str", "int", "float", "bool", "bytes",
    "list", "tuple", "set", "frozenset", "dict", "object",
})

_DOTTED_NAME = re.compile(r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)+")


def to_identifier(name: str, *, fallback: str = "unknown") -> str:
    """Clean a name into a valid Python identifier (snake_case).

    Strips non-alphanumeric chars, collapses underscores, strips leading/trailing.
    Returns *fallback* if the result is empty.
    """
    name = re.sub(r"[^a-zA-Z0-9_]", "_", name)
    name = re.sub(r"_+", "_", name).strip("_")
    return name or fallback


def to_snake_case(name: str) -> str:
    """Convert a PascalCase or camelCase name to snake_case.

    Acronym runs stay together: ``IApi04`` becomes ``i_api04``.
    """
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return to_identifier(name.lower())


def is_scalar_type(type_expr: str) -> bool:
    """True for ``str``/``int``/``float``/``bool``, optionally ``| None``."""
    parts = [p.strip() for p in type_expr.split("|")]
    parts = [p for p in parts if p != "None"]
    return len(parts) == 1 and parts[0] in _SCALAR_TYPES


def is_optional_type(type_expr: str) -> bool:
    return "None" in (p.strip() for p in type_expr.split("|"))


def referenced_modules(type_expr: str) -> set[str]:
    """Modules that must be imported for a type expression to evaluate.

    ``list[blog.models.Post]`` references ``blog.models``. Bare names
    (builtins) reference nothing.
    """
    modules = set()
    for dotted in _DOTTED_NAME.findall(type_expr):
        module, _, _ = dotted.rpartition(".")
        modules.add(module)
    return modules


def is_builtin_name(name: str) -> bool:
    return name in _BUILTIN_NAMES
