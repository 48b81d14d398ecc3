"""Synthesize a Python REST client class from an interface descriptor."""

from __future__ import annotations

import ast
import json
import logging
import re

from restgen.errors import GenerationError
from restgen.formats.descriptors import (
    GeneratedClientDescriptor,
    InterfaceDescriptor,
    MethodDescriptor,
    ParameterBinding,
    ParameterRole,
)
from restgen.helpers.naming import is_optional_type, referenced_modules, to_snake_case

logger = logging.getLogger(__name__)

_RESERVED_MEMBERS = frozenset({
    "base_url", "settings", "transport", "close", "interface_key", "interface_headers",
    "_request",
})

_TYPING_ANY = re.compile(r"(?<![\w.])Any\b")


def synthesize_client(descriptor: InterfaceDescriptor, *, qualified: bool = False) -> GeneratedClientDescriptor:
    """Build the client class for one interface.

    The output only depends on the descriptor: generating twice from the same
    descriptor yields byte-identical source. With *qualified*, class and module
    names are prefixed with the interface scope.
    """
    class_name = client_class_name(descriptor, qualified=qualified)
    module_name = client_module_name(descriptor, qualified=qualified)
    source = build_client_source(descriptor, class_name)
    logger.debug("Synthesized %s.%s for %s", module_name, class_name, descriptor.key)
    return GeneratedClientDescriptor(
        interface_key=descriptor.key,
        interface_name=descriptor.name,
        class_name=class_name,
        module_name=module_name,
        source=source,
    )


def client_class_name(descriptor: InterfaceDescriptor, *, qualified: bool = False) -> str:
    """``PostsApiRestClient``, or ``BlogApiPostsApiRestClient`` when qualified by scope ``blog.api``."""
    prefix = ""
    if qualified:
        prefix = "".join(part[:1].upper() + part[1:] for part in re.split(r"[._]", descriptor.scope) if part)
    return f"{prefix}{descriptor.name}RestClient"


def client_module_name(descriptor: InterfaceDescriptor, *, qualified: bool = False) -> str:
    if qualified and descriptor.scope:
        return f"{to_snake_case(descriptor.scope)}_{to_snake_case(descriptor.name)}_client"
    return f"{to_snake_case(descriptor.name)}_client"


def build_client_source(descriptor: InterfaceDescriptor, class_name: str) -> str:
    """Build Python client source code from an interface descriptor."""
    type_exprs = [m.returns.type for m in descriptor.methods]
    type_exprs += [p.type for m in descriptor.methods for p in m.parameters]
    modules = sorted(set().union(*(referenced_modules(t) for t in type_exprs)))

    lines = [
        '"""Auto-generated REST client for ' + descriptor.key + '. Do not edit."""',
        "",
        "from __future__ import annotations",
        "",
    ]
    if any(_TYPING_ANY.search(t) for t in type_exprs):
        lines.extend(["from typing import Any", ""])
    if modules:
        lines.extend(f"import {module}" for module in modules)
        lines.append("")
    lines.extend([
        "from restgen.runtime.client import RestClient",
        "",
        "",
        f"class {class_name}(RestClient):",
        f'    """REST client implementing {descriptor.key}."""',
        "",
        f"    interface_key = {_literal(descriptor.key)}",
    ])

    if descriptor.headers:
        lines.append("    interface_headers = (")
        for name, value in descriptor.headers:
            lines.append(f"        ({_literal(name)}, {_literal(value)}),")
        lines.append("    )")

    module_roots = {module.split(".")[0] for module in modules}
    for method in descriptor.methods:
        _check_method_names(descriptor, method, module_roots)
        lines.append("")
        lines.extend(_build_method(method))

    return "\n".join(lines) + "\n"


def _build_method(method: MethodDescriptor) -> list[str]:
    """Build a Python method for one REST method descriptor."""
    params = ["self"] + _signature(method.parameters)
    returns = method.returns.type if method.returns.has_content else "None"
    sig = f"    def {method.name}({', '.join(params)}) -> {returns}:"

    lines = [sig]
    lines.append(f'        """{method.verb} {_docstring_safe(method.route)}"""')

    req = _request_variable(method)
    lines.append(f"        {req} = self._request({_literal(method.verb)}, {_literal(method.route)})")

    for name, value in method.headers:
        lines.append(f"        {req}.with_header({_literal(name)}, {_literal(value)})")

    # Path, then query, then header bindings, each in declaration order
    for role, call in (
        (ParameterRole.PATH, "with_path"),
        (ParameterRole.QUERY, "with_query"),
        (ParameterRole.HEADER, "with_header"),
    ):
        for p in method.bindings(role):
            lines.append(f"        {req}.{call}({_literal(p.wire_name)}, {p.name})")

    for p in method.bindings(ParameterRole.BODY):
        lines.append(f"        {req}.with_body({p.name})")

    if method.returns.has_content:
        lines.append(f"        return {req}.read_as({method.returns.type})")
    else:
        lines.append(f"        {req}.send()")

    return lines


def _signature(parameters: tuple[ParameterBinding, ...]) -> list[str]:
    """Parameters in declaration order.

    Optional parameters default to None. When a required parameter follows an
    optional one, everything from the first optional parameter on becomes
    keyword-only.
    """
    first_optional = next((i for i, p in enumerate(parameters) if p.optional), None)
    needs_star = first_optional is not None and any(not p.optional for p in parameters[first_optional:])

    params: list[str] = []
    for i, p in enumerate(parameters):
        if needs_star and i == first_optional:
            params.append("*")
        if p.optional:
            hint = p.type if is_optional_type(p.type) else f"{p.type} | None"
            params.append(f"{p.name}: {hint} = None")
        else:
            params.append(f"{p.name}: {p.type}")
    return params


def _request_variable(method: MethodDescriptor) -> str:
    names = {p.name for p in method.parameters}
    for candidate in ("request", "rest_request", "_request"):
        if candidate not in names:
            return candidate
    raise GenerationError(f"{method.name}: no free name for the request variable")


def _check_method_names(descriptor: InterfaceDescriptor, method: MethodDescriptor, module_roots: set[str]) -> None:
    if method.name in _RESERVED_MEMBERS or method.name.startswith("__"):
        raise GenerationError(
            f"{descriptor.key}.{method.name} collides with a RestClient member"
        )
    type_names: set[str] = set()
    for type_expr in [method.returns.type, *(p.type for p in method.parameters)]:
        tree = ast.parse(type_expr, mode="eval")
        type_names.update(node.id for node in ast.walk(tree) if isinstance(node, ast.Name))
    for p in method.parameters:
        if p.name in module_roots:
            raise GenerationError(
                f"{descriptor.key}.{method.name}: parameter {p.name!r} shadows imported module {p.name!r}"
            )
        if p.name in type_names:
            raise GenerationError(
                f"{descriptor.key}.{method.name}: parameter {p.name!r} shadows a name used in its type annotations"
            )


def _literal(value: str) -> str:
    """Double-quoted Python string literal."""
    return json.dumps(value)


def _docstring_safe(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
