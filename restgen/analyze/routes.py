"""Route template parsing: ``/api/posts/{id}`` -> placeholders ``("id",)``."""

from __future__ import annotations

import re
from dataclasses import dataclass

_PLACEHOLDER_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")


class RouteSyntaxError(ValueError):
    """Raised when a route template is not well-formed."""

    def __init__(self, rule: str, message: str):
        super().__init__(message)
        self.rule = rule


@dataclass(frozen=True)
class RouteTemplate:
    template: str
    placeholders: tuple[str, ...] = ()


def join_route(prefix: str, route: str) -> str:
    """Join an interface route prefix and a method route with exactly one slash."""
    if not prefix:
        return route
    if not route:
        return prefix
    return prefix.rstrip("/") + "/" + route.lstrip("/")


def parse_route(template: str) -> RouteTemplate:
    """Extract placeholder names in order of appearance.

    Braces must be balanced and not nested, names must be non-empty and
    unique, and placeholders may only appear in the path (before ``?``).
    Names start like an identifier and may also contain ``.`` and ``-``;
    such placeholders are bound through a parameter alias.
    """
    placeholders: list[str] = []
    start: int | None = None
    query_start = template.find("?")

    for i, char in enumerate(template):
        if not char.isprintable():
            raise RouteSyntaxError("malformed-route", f"control character at {i} in {template!r}")
        if char == "{":
            if start is not None:
                raise RouteSyntaxError("malformed-route", f"nested '{{' at {i} in {template!r}")
            start = i
        elif char == "}":
            if start is None:
                raise RouteSyntaxError("malformed-route", f"unmatched '}}' at {i} in {template!r}")
            name = template[start + 1 : i]
            if not _PLACEHOLDER_NAME.fullmatch(name):
                raise RouteSyntaxError("malformed-route", f"invalid placeholder {{{name}}} in {template!r}")
            if 0 <= query_start < start:
                raise RouteSyntaxError("malformed-route", f"placeholder {{{name}}} in query string of {template!r}")
            if name in placeholders:
                raise RouteSyntaxError("duplicate-placeholder", f"placeholder {{{name}}} appears twice in {template!r}")
            placeholders.append(name)
            start = None

    if start is not None:
        raise RouteSyntaxError("malformed-route", f"unclosed '{{' at {start} in {template!r}")

    return RouteTemplate(template=template, placeholders=tuple(placeholders))
