"""Declare REST interfaces as Python classes.

Example::

    @rest_interface(route="/api", headers={"Accept": "application/json"})
    class PostsApi(Protocol):
        @get("/posts/{id}")
        def get_post(self, id: int) -> blog.models.Post: ...

        @get("/posts")
        def list_posts(self, tag: Annotated[str | None, Query("tag")] = None) -> list[blog.models.Post]: ...

        @post("/posts")
        def create_post(self, post: Annotated[blog.models.Post, Body()]) -> None: ...

``declaration_from_class`` turns such a class into an InterfaceDeclaration,
the same schema declaration files use. Parameters without a marker get the
analyzer's inferred role.
"""

from __future__ import annotations

import inspect
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, TypeVar, Union

from restgen.formats.declarations import (
    DeclarationSet,
    InterfaceDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
)

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)


@dataclass(frozen=True)
class Path:
    alias: str | None = None
    role: ClassVar[str] = "path"


@dataclass(frozen=True)
class Query:
    alias: str | None = None
    role: ClassVar[str] = "query"


@dataclass(frozen=True)
class Header:
    alias: str | None = None
    role: ClassVar[str] = "header"


@dataclass(frozen=True)
class Body:
    role: ClassVar[str] = "body"


_MARKERS = (Path, Query, Header, Body)


def rest_interface(
    cls: C | None = None,
    *,
    route: str = "",
    headers: dict[str, str] | None = None,
    key: str | None = None,
) -> Any:
    """Mark a class as a REST interface.

    Args:
        route: Prefix joined to every method route.
        headers: Constant headers sent by every method.
        key: Registry key; defaults to ``module.QualifiedName``.
    """

    def decorator(cls: C) -> C:
        cls.__rest_interface__ = {"route": route, "headers": dict(headers or {})}  # type: ignore[attr-defined]
        cls.__rest_interface_key__ = key or f"{cls.__module__}.{cls.__qualname__}"  # type: ignore[attr-defined]
        return cls

    if cls is None:
        return decorator
    return decorator(cls)


def _make_http_method_decorator(verb: str) -> Callable[..., Callable[[F], F]]:
    """Factory for HTTP method decorators (@get, @post, etc.)."""

    def method_decorator(route: str, *, headers: dict[str, str] | None = None) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            func.__rest_verb__ = verb  # type: ignore[attr-defined]
            func.__rest_route__ = route  # type: ignore[attr-defined]
            func.__rest_headers__ = dict(headers or {})  # type: ignore[attr-defined]
            return func

        return decorator

    return method_decorator


get = _make_http_method_decorator("GET")
post = _make_http_method_decorator("POST")
put = _make_http_method_decorator("PUT")
patch = _make_http_method_decorator("PATCH")
delete = _make_http_method_decorator("DELETE")
head = _make_http_method_decorator("HEAD")


def declaration_from_class(cls: type) -> InterfaceDeclaration:
    """Read an interface declaration from a (possibly undecorated) class.

    Methods keep their definition order. Undecorated methods are declared
    without a verb, so a class with no decorated method is rejected by the
    analyzer as not being a REST interface.
    """
    options = cls.__dict__.get("__rest_interface__", {})
    key = cls.__dict__.get("__rest_interface_key__") or f"{cls.__module__}.{cls.__qualname__}"
    scope, _, name = key.rpartition(".")

    methods = [
        _method_declaration(attr_name, func)
        for attr_name, func in cls.__dict__.items()
        if inspect.isfunction(func) and not attr_name.startswith("_")
    ]
    return InterfaceDeclaration(
        name=name,
        scope=scope,
        route_prefix=options.get("route", ""),
        headers=options.get("headers", {}),
        methods=methods,
    )


def collect_declarations(module: types.ModuleType) -> DeclarationSet:
    """Declarations of every ``@rest_interface`` class defined in *module*."""
    interfaces = [
        declaration_from_class(obj)
        for obj in vars(module).values()
        if inspect.isclass(obj)
        and obj.__module__ == module.__name__
        and "__rest_interface__" in obj.__dict__
    ]
    return DeclarationSet(interfaces=interfaces)


def _method_declaration(name: str, func: Callable[..., Any]) -> MethodDeclaration:
    hints = typing.get_type_hints(func, include_extras=True)
    parameters: list[ParameterDeclaration] = []
    for param in list(inspect.signature(func).parameters.values())[1:]:
        annotation = hints.get(param.name, str)
        marker = _marker(annotation)
        parameters.append(
            ParameterDeclaration(
                name=param.name,
                type=type_name(annotation),
                role=marker.role if marker else None,
                alias=getattr(marker, "alias", None),
                optional=param.default is not inspect.Parameter.empty,
            )
        )
    return MethodDeclaration(
        name=name,
        verb=getattr(func, "__rest_verb__", None),
        route=getattr(func, "__rest_route__", ""),
        returns=type_name(hints["return"]) if "return" in hints else "Any",
        parameters=parameters,
        headers=getattr(func, "__rest_headers__", {}),
    )


def _marker(annotation: Any) -> Path | Query | Header | Body | None:
    if typing.get_origin(annotation) is not Annotated:
        return None
    for meta in annotation.__metadata__:
        if isinstance(meta, _MARKERS):
            return meta
        if isinstance(meta, type) and issubclass(meta, _MARKERS):
            return meta()
    return None


def type_name(tp: Any) -> str:
    """Render an annotation as a type expression with dotted module paths.

    ``list[blog.models.Post] | None`` for ``Optional[list[Post]]``.
    """
    if tp is None or tp is type(None):
        return "None"
    if tp is Any:
        return "Any"
    origin = typing.get_origin(tp)
    if origin is Annotated:
        return type_name(typing.get_args(tp)[0])
    if origin is Union or origin is types.UnionType:
        return " | ".join(type_name(arg) for arg in typing.get_args(tp))
    if origin is not None:
        args = typing.get_args(tp)
        base = type_name(origin)
        return f"{base}[{', '.join(type_name(arg) for arg in args)}]" if args else base
    if isinstance(tp, type):
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    raise TypeError(f"Unsupported annotation {tp!r}")
