"""Interface analyzer: declarations -> validated descriptor model.

The analyzer is the only producer of InterfaceDescriptor. It either returns
a descriptor for a well-formed REST interface or raises AnalysisError naming
the violated rule. It never touches the network or the filesystem.
"""

from __future__ import annotations

import ast
import keyword
import logging
from collections.abc import Iterable

from restgen.analyze.routes import RouteSyntaxError, join_route, parse_route
from restgen.errors import AnalysisError
from restgen.formats.declarations import (
    DeclarationSet,
    InterfaceDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
)
from restgen.formats.descriptors import (
    InterfaceDescriptor,
    MethodDescriptor,
    ParameterBinding,
    ParameterRole,
    ReturnShape,
)
from restgen.helpers.naming import is_builtin_name, is_scalar_type

logger = logging.getLogger(__name__)

HTTP_VERBS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})

_COLLECTION_TYPES = frozenset({"list", "tuple", "set", "frozenset"})

_TYPE_NODES = (
    ast.Expression, ast.Name, ast.Attribute, ast.Subscript, ast.Tuple,
    ast.List, ast.BinOp, ast.BitOr, ast.Constant, ast.Load,
)


def analyze_declarations(
    declarations: DeclarationSet | Iterable[InterfaceDeclaration],
) -> tuple[list[InterfaceDescriptor], list[AnalysisError]]:
    """Analyze every interface independently.

    A rejected interface is reported in the error list and does not prevent
    the others from being analyzed.
    """
    if isinstance(declarations, DeclarationSet):
        declarations = declarations.interfaces

    descriptors: list[InterfaceDescriptor] = []
    errors: list[AnalysisError] = []
    for declaration in declarations:
        try:
            descriptors.append(analyze_interface(declaration))
        except AnalysisError as e:
            logger.debug("Rejected %s: %s", e.interface, e)
            errors.append(e)
    return descriptors, errors


def analyze_interface(declaration: InterfaceDeclaration) -> InterfaceDescriptor:
    """Validate one interface declaration and build its descriptor."""
    interface = f"{declaration.scope}.{declaration.name}" if declaration.scope else declaration.name

    _check_identifier(interface, "interface", declaration.name)
    for part in declaration.scope.split(".") if declaration.scope else []:
        _check_identifier(interface, "scope", part)

    methods: list[MethodDescriptor] = []
    for method in declaration.methods:
        if method.verb is None:
            logger.debug("%s.%s carries no HTTP verb, skipping", interface, method.name)
            continue
        if any(m.name == method.name for m in methods):
            raise AnalysisError(interface, "duplicate-method", f"method {method.name!r} is declared twice")
        methods.append(_analyze_method(interface, declaration, method))

    if not methods:
        raise AnalysisError(
            interface,
            "no-rest-methods",
            "not a REST interface: no method carries an HTTP verb",
        )

    return InterfaceDescriptor(
        name=declaration.name,
        scope=declaration.scope,
        methods=tuple(methods),
        headers=tuple(declaration.headers.items()),
    )


def _analyze_method(
    interface: str,
    declaration: InterfaceDeclaration,
    method: MethodDeclaration,
) -> MethodDescriptor:
    _check_identifier(interface, "method", method.name)

    verb = (method.verb or "").upper()
    if verb not in HTTP_VERBS:
        raise AnalysisError(interface, "unknown-verb", f"{method.name}: unknown HTTP verb {method.verb!r}")

    try:
        route = parse_route(join_route(declaration.route_prefix, method.route))
    except RouteSyntaxError as e:
        raise AnalysisError(interface, e.rule, f"{method.name}: {e}") from e

    returns = _return_shape(interface, method)

    bindings: list[ParameterBinding] = []
    for param in method.parameters:
        _check_identifier(interface, f"parameter of {method.name}", param.name)
        if param.name == "self":
            raise AnalysisError(interface, "invalid-name", f"{method.name}: parameter name 'self' is reserved")
        if any(b.name == param.name for b in bindings):
            raise AnalysisError(
                interface, "duplicate-parameter", f"{method.name}: parameter {param.name!r} is declared twice"
            )
        _check_type(interface, f"{method.name}({param.name})", param.type)

        wire_name = param.alias or param.name
        role = _resolve_role(interface, method.name, param, wire_name, route.placeholders)
        if role == ParameterRole.PATH and param.optional:
            raise AnalysisError(
                interface, "optional-path-parameter", f"{method.name}: path parameter {param.name!r} cannot be optional"
            )
        bindings.append(
            ParameterBinding(
                name=param.name,
                role=role,
                type=param.type,
                wire_name=wire_name,
                optional=param.optional,
            )
        )

    body = [b.name for b in bindings if b.role == ParameterRole.BODY]
    if len(body) > 1:
        raise AnalysisError(
            interface, "duplicate-body", f"{method.name}: more than one body parameter ({', '.join(body)})"
        )

    path_names = [b.wire_name for b in bindings if b.role == ParameterRole.PATH]
    for placeholder in route.placeholders:
        if placeholder not in path_names:
            raise AnalysisError(
                interface, "unbound-placeholder", f"{method.name}: no path parameter for {{{placeholder}}}"
            )
    for name in path_names:
        if name not in route.placeholders:
            raise AnalysisError(
                interface, "unmatched-path-parameter", f"{method.name}: path parameter {name!r} has no placeholder"
            )
        if path_names.count(name) > 1:
            raise AnalysisError(
                interface, "unmatched-path-parameter", f"{method.name}: placeholder {{{name}}} is bound twice"
            )

    return MethodDescriptor(
        name=method.name,
        verb=verb,
        route=route.template,
        returns=returns,
        parameters=tuple(bindings),
        headers=tuple(method.headers.items()),
    )


def _resolve_role(
    interface: str,
    method: str,
    param: ParameterDeclaration,
    wire_name: str,
    placeholders: tuple[str, ...],
) -> ParameterRole:
    """Explicit role, else path when a placeholder matches, else query for scalars."""
    if param.role is not None:
        return ParameterRole(param.role)
    if wire_name in placeholders:
        return ParameterRole.PATH
    if is_scalar_type(param.type):
        logger.debug("%s.%s: inferring query role for %s", interface, method, param.name)
        return ParameterRole.QUERY
    raise AnalysisError(
        interface,
        "unassigned-role",
        f"{method}: parameter {param.name!r} has no role and none can be inferred for type {param.type!r}",
    )


def _return_shape(interface: str, method: MethodDeclaration) -> ReturnShape:
    type_expr = method.returns.strip() or "None"
    if type_expr == "None":
        return ReturnShape()
    tree = _check_type(interface, f"{method.name} return", type_expr)
    node = tree.body
    if isinstance(node, ast.Subscript) and isinstance(node.value, ast.Name) and node.value.id in _COLLECTION_TYPES:
        return ReturnShape(kind="collection", type=type_expr)
    return ReturnShape(kind="value", type=type_expr)


def _check_type(interface: str, where: str, type_expr: str) -> ast.Expression:
    """Type expressions must only use builtin names or dotted module paths.

    Dotted paths become imports in the generated module; any other bare name
    could not be resolved there.
    """
    try:
        tree = ast.parse(type_expr, mode="eval")
    except SyntaxError as e:
        raise AnalysisError(interface, "malformed-type", f"{where}: {type_expr!r} is not a type expression") from e

    attribute_roots = {id(node.value) for node in ast.walk(tree) if isinstance(node, ast.Attribute)}
    # constants, tuples and lists only as subscript arguments, as in typing.Literal["a"]
    in_slice = {
        id(inner) for node in ast.walk(tree) if isinstance(node, ast.Subscript) for inner in ast.walk(node.slice)
    }
    for node in ast.walk(tree):
        if not isinstance(node, _TYPE_NODES):
            raise AnalysisError(interface, "malformed-type", f"{where}: {type_expr!r} is not a type expression")
        if isinstance(node, (ast.Constant, ast.Tuple, ast.List)) and id(node) not in in_slice:
            if not (isinstance(node, ast.Constant) and node.value is None):
                raise AnalysisError(interface, "malformed-type", f"{where}: {type_expr!r} is not a type expression")
        if isinstance(node, ast.BinOp) and not isinstance(node.op, ast.BitOr):
            raise AnalysisError(interface, "malformed-type", f"{where}: {type_expr!r} is not a type expression")
        if isinstance(node, ast.Name) and id(node) not in attribute_roots and not is_builtin_name(node.id):
            raise AnalysisError(
                interface,
                "unresolvable-type",
                f"{where}: {node.id!r} must be a builtin or a dotted module path",
            )
    return tree


def _check_identifier(interface: str, what: str, name: str) -> None:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise AnalysisError(interface, "invalid-name", f"{what} name {name!r} is not a valid identifier")
