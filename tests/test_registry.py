"""Tests for the factory registry."""

import pytest

from restgen.errors import RegistrationError, ResolutionError
from restgen.runtime.registry import FactoryRegistry


class _Client:
    pass


class _OtherClient:
    pass


class TestFactoryRegistry:
    def test_build_runs_routine_and_seals(self):
        calls = []

        def routine(registry: FactoryRegistry) -> None:
            calls.append(registry)
            registry.set_rest_client("blog.api.PostsApi", _Client)

        registry = FactoryRegistry.build(routine)

        assert len(calls) == 1
        assert registry.sealed
        assert registry.resolve("blog.api.PostsApi") is _Client

    def test_duplicate_registration_fails(self):
        registry = FactoryRegistry()
        registry.set_rest_client("blog.api.PostsApi", _Client)
        with pytest.raises(RegistrationError, match="already registered"):
            registry.set_rest_client("blog.api.PostsApi", _OtherClient)

    def test_duplicate_inside_build_fails(self):
        def routine(registry: FactoryRegistry) -> None:
            registry.set_rest_client("blog.api.PostsApi", _Client)
            registry.set_rest_client("blog.api.PostsApi", _Client)

        with pytest.raises(RegistrationError):
            FactoryRegistry.build(routine)

    def test_register_after_seal_fails(self):
        registry = FactoryRegistry.build(lambda r: None)
        with pytest.raises(RegistrationError, match="sealed"):
            registry.set_rest_client("blog.api.PostsApi", _Client)

    def test_resolve_before_seal_fails(self):
        registry = FactoryRegistry()
        registry.set_rest_client("blog.api.PostsApi", _Client)
        with pytest.raises(ResolutionError, match="not initialized"):
            registry.resolve("blog.api.PostsApi")

    def test_resolve_unknown_key(self):
        registry = FactoryRegistry.build(lambda r: r.set_rest_client("blog.api.PostsApi", _Client))
        with pytest.raises(ResolutionError, match="is not a REST interface") as exc_info:
            registry.resolve("tests.blog_api.IApi04")
        assert exc_info.value.interface_key == "tests.blog_api.IApi04"
        assert isinstance(exc_info.value, ValueError)

    def test_container_protocol(self):
        def routine(registry: FactoryRegistry) -> None:
            registry.set_rest_client("shop.api.OrdersApi", _OtherClient)
            registry.set_rest_client("blog.api.PostsApi", _Client)

        registry = FactoryRegistry.build(routine)

        assert list(registry) == ["blog.api.PostsApi", "shop.api.OrdersApi"]
        assert len(registry) == 2
        assert "blog.api.PostsApi" in registry
        assert "blog.api.Missing" not in registry

    def test_sealed_snapshot_ignores_later_mutation(self):
        registry = FactoryRegistry.build(lambda r: r.set_rest_client("blog.api.PostsApi", _Client))
        with pytest.raises(TypeError):
            registry._sealed["x"] = _OtherClient  # type: ignore[index]
