"""Tests for the client synthesizer."""

import ast
import json

import pytest

from restgen.analyze.analyzer import analyze_interface
from restgen.errors import GenerationError
from restgen.formats.declarations import ParameterDeclaration
from restgen.formats.descriptors import (
    InterfaceDescriptor,
    MethodDescriptor,
    ParameterBinding,
    ParameterRole,
    ReturnShape,
)
from restgen.generate.client import build_client_source, synthesize_client
from tests.conftest import make_interface, make_method, make_posts_declaration


def _posts_source() -> str:
    return synthesize_client(analyze_interface(make_posts_declaration())).source


class TestSynthesizeClient:
    def test_descriptor_names(self):
        client = synthesize_client(analyze_interface(make_posts_declaration()))

        assert client.interface_key == "blog.api.PostsApi"
        assert client.interface_name == "PostsApi"
        assert client.class_name == "PostsApiRestClient"
        assert client.module_name == "posts_api_client"
        assert client.filename == "posts_api_client.py"

    def test_deterministic(self):
        first = synthesize_client(analyze_interface(make_posts_declaration()))
        second = synthesize_client(analyze_interface(make_posts_declaration()))
        assert first == second
        assert first.source == second.source

    def test_source_is_valid_python(self):
        ast.parse(_posts_source())

    @pytest.mark.parametrize("route", ['/items"', '/items/"""/x', "/items\\", "/items/caf\u00e9"])
    def test_quotes_in_route_compile(self, route: str):
        source = synthesize_client(analyze_interface(make_interface(make_method(route=route)))).source

        compile(source, "items_api_client.py", "exec")
        assert f"self._request(\"GET\", {json.dumps(route)})" in source

    def test_class_structure(self):
        code = _posts_source()
        assert "from restgen.runtime.client import RestClient" in code
        assert "class PostsApiRestClient(RestClient):" in code
        assert 'interface_key = "blog.api.PostsApi"' in code
        assert '("Accept", "application/json"),' in code

    def test_imports_referenced_modules(self):
        code = _posts_source()
        assert "import tests.blog_models\n" in code

    def test_methods_in_declaration_order(self):
        code = _posts_source()
        positions = [code.index(f"def {name}(") for name in ("get_post", "list_posts", "create_post", "delete_post")]
        assert positions == sorted(positions)
        assert "def describe(" not in code

    def test_path_binding(self):
        code = _posts_source()
        assert "def get_post(self, id: int) -> tests.blog_models.Post:" in code
        assert 'request = self._request("GET", "/api/posts/{id}")' in code
        assert 'request.with_path("id", id)' in code
        assert "return request.read_as(tests.blog_models.Post)" in code

    def test_optional_query_binding(self):
        code = _posts_source()
        assert "def list_posts(self, name: str | None = None) -> list[tests.blog_models.Post]:" in code
        assert 'request.with_query("name", name)' in code

    def test_body_binding(self):
        code = _posts_source()
        assert "request.with_body(post)" in code

    def test_headers_in_declaration_order(self):
        code = _posts_source()
        reason = code.index('request.with_header("X-Reason", "cleanup")')
        first = code.index('request.with_header("A", first)')
        second = code.index('request.with_header("A", second)')
        assert reason < first < second

    def test_no_content_return(self):
        code = _posts_source()
        assert "def delete_post(self, id: int, first: str, second: str) -> None:" in code
        assert "        request.send()" in code

    def test_any_imported_when_used(self):
        descriptor = analyze_interface(make_interface(make_method(returns="dict[str, Any]")))
        code = synthesize_client(descriptor).source
        assert "from typing import Any" in code

    def test_any_not_imported_otherwise(self):
        assert "from typing import Any" not in _posts_source()

    def test_imports_sorted(self):
        descriptor = analyze_interface(
            make_interface(
                make_method(name="b", returns="zeta.models.Z"),
                make_method(name="a", returns="alpha.models.A"),
            )
        )
        code = synthesize_client(descriptor).source
        assert code.index("import alpha.models") < code.index("import zeta.models")


class TestSignature:
    def test_required_after_optional_becomes_keyword_only(self):
        method = make_method(
            parameters=[
                ParameterDeclaration(name="page", type="int", optional=True),
                ParameterDeclaration(name="token", role="header", alias="Authorization"),
            ]
        )
        code = synthesize_client(analyze_interface(make_interface(method))).source
        assert "def op(self, *, page: int | None = None, token: str) -> None:" in code
        ast.parse(code)

    def test_request_variable_avoids_parameter_names(self):
        method = make_method(parameters=[ParameterDeclaration(name="request")])
        code = synthesize_client(analyze_interface(make_interface(method))).source
        assert 'rest_request = self._request("GET", "/items")' in code
        assert 'rest_request.with_query("request", request)' in code


class TestGenerationErrors:
    def test_reserved_member_name(self):
        descriptor = analyze_interface(make_interface(make_method(name="close")))
        with pytest.raises(GenerationError, match="close"):
            synthesize_client(descriptor)

    def test_parameter_shadows_imported_module(self):
        descriptor = InterfaceDescriptor(
            name="ItemsApi",
            methods=(
                MethodDescriptor(
                    name="op",
                    verb="GET",
                    route="/items",
                    returns=ReturnShape(kind="value", type="shop.models.Item"),
                    parameters=(ParameterBinding(name="shop", role=ParameterRole.QUERY, wire_name="shop"),),
                ),
            ),
        )
        with pytest.raises(GenerationError, match="shadows"):
            build_client_source(descriptor, "ItemsApiRestClient")

    @pytest.mark.parametrize(
        "returns, param_type",
        [("str", "int"), ("list[str]", "int"), ("None", "str")],
    )
    def test_parameter_shadows_type_name(self, returns: str, param_type: str):
        method = make_method(returns=returns, parameters=[ParameterDeclaration(name="str", type=param_type)])
        descriptor = analyze_interface(make_interface(method))
        with pytest.raises(GenerationError, match="'str' shadows a name used in its type annotations"):
            synthesize_client(descriptor)

    def test_literal_value_does_not_shadow(self):
        method = make_method(
            returns="typing.Literal['kind']",
            parameters=[ParameterDeclaration(name="kind", type="str")],
        )
        code = synthesize_client(analyze_interface(make_interface(method))).source
        assert "def op(self, kind: str) -> typing.Literal['kind']:" in code
