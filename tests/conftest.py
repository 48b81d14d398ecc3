"""Shared test fixtures for restgen tests."""

from __future__ import annotations

import importlib
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path
from types import ModuleType

import pytest

from restgen.formats.declarations import (
    InterfaceDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
)
from restgen.generate.pipeline import run_generation, write_generated
from restgen.runtime.settings import RestSettings
from restgen.testing import MockTransport

BASE_URL = "http://example.org"


def make_posts_declaration(**overrides: object) -> InterfaceDeclaration:
    """Helper to create the PostsApi declaration used across tests."""
    fields: dict[str, object] = {
        "name": "PostsApi",
        "scope": "blog.api",
        "route_prefix": "/api",
        "headers": {"Accept": "application/json"},
        "methods": [
            MethodDeclaration(
                name="get_post",
                verb="GET",
                route="/posts/{id}",
                returns="tests.blog_models.Post",
                parameters=[ParameterDeclaration(name="id", type="int")],
            ),
            MethodDeclaration(
                name="list_posts",
                verb="GET",
                route="/posts",
                returns="list[tests.blog_models.Post]",
                parameters=[
                    ParameterDeclaration(name="name", type="str", role="query", optional=True),
                ],
            ),
            MethodDeclaration(
                name="create_post",
                verb="POST",
                route="/posts",
                returns="tests.blog_models.Post",
                parameters=[
                    ParameterDeclaration(name="post", type="tests.blog_models.Post", role="body"),
                ],
            ),
            MethodDeclaration(
                name="delete_post",
                verb="DELETE",
                route="/posts/{id}",
                headers={"X-Reason": "cleanup"},
                parameters=[
                    ParameterDeclaration(name="id", type="int"),
                    ParameterDeclaration(name="first", role="header", alias="A"),
                    ParameterDeclaration(name="second", role="header", alias="A"),
                ],
            ),
            MethodDeclaration(name="describe", returns="str"),
        ],
    }
    fields.update(overrides)
    return InterfaceDeclaration.model_validate(fields)


def make_method(name: str = "op", verb: str | None = "GET", route: str = "/items", **kwargs: object) -> MethodDeclaration:
    """Helper to create a single method declaration."""
    return MethodDeclaration.model_validate({"name": name, "verb": verb, "route": route, **kwargs})


def make_interface(*methods: MethodDeclaration, name: str = "ItemsApi", scope: str = "shop.api") -> InterfaceDeclaration:
    """Helper to wrap methods into an interface declaration."""
    return InterfaceDeclaration(name=name, scope=scope, methods=list(methods))


@pytest.fixture
def mock_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def settings(mock_transport: MockTransport) -> RestSettings:
    return RestSettings(transport_factory=lambda: mock_transport)


@pytest.fixture
def load_generated(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Callable[[Iterable[InterfaceDeclaration]], ModuleType]:
    """Generate a client package into tmp_path and import it."""

    def load(declarations: Iterable[InterfaceDeclaration]) -> ModuleType:
        package = f"generated_{uuid.uuid4().hex[:12]}"
        write_generated(run_generation(declarations), tmp_path / package)
        monkeypatch.syspath_prepend(str(tmp_path))
        importlib.invalidate_caches()
        return importlib.import_module(package)

    return load
