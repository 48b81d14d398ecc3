"""Base class of every generated REST client and its request builder."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from requests.structures import CaseInsensitiveDict

from restgen.errors import RequestError
from restgen.helpers.http import build_url, format_value, is_sequence_value, quote_path_segment
from restgen.runtime.settings import RestSettings
from restgen.runtime.transport import HttpRequest, HttpResponse, Transport

logger = logging.getLogger(__name__)


class RestClient:
    """Holds the base URL, settings and transport shared by generated methods.

    Generated subclasses set ``interface_key`` and implement one method per
    declared REST method, each building a RestRequest through ``_request``.
    """

    interface_key: ClassVar[str] = ""
    interface_headers: ClassVar[tuple[tuple[str, str], ...]] = ()

    def __init__(self, base_url: str, settings: RestSettings, transport: Transport):
        if not base_url:
            raise ValueError("base_url must not be empty")
        self._base_url = base_url.rstrip("/")
        self._settings = settings
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def settings(self) -> RestSettings:
        return self._settings

    @property
    def transport(self) -> Transport:
        return self._transport

    def _request(self, method: str, route: str) -> RestRequest:
        request = RestRequest(self, method, route)
        for name, value in self._settings.default_headers.items():
            request.with_header(name, value)
        for name, value in self.interface_headers:
            request.with_header(name, value)
        return request

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._base_url!r})"


class RestRequest:
    """Builds one HTTP request from bound parameters and maps its response.

    Path values replace their ``{placeholder}``. Query pairs keep call order
    and ``None`` omits the parameter. Headers are case-insensitive and a
    later value replaces an earlier one.
    """

    def __init__(self, client: RestClient, method: str, route: str):
        self._client = client
        self._method = method
        self._target = route
        self._query: list[tuple[str, str]] = []
        self._headers: CaseInsensitiveDict[str] = CaseInsensitiveDict()
        self._body: bytes | None = None

    def with_path(self, name: str, value: Any) -> RestRequest:
        self._target = self._target.replace("{" + name + "}", quote_path_segment(value))
        return self

    def with_query(self, name: str, value: Any) -> RestRequest:
        if value is None:
            return self
        for item in value if is_sequence_value(value) else [value]:
            if item is not None:
                self._query.append((name, format_value(item)))
        return self

    def with_header(self, name: str, value: Any) -> RestRequest:
        if value is None:
            return self
        self._headers[name] = format_value(value)
        return self

    def with_body(self, value: Any) -> RestRequest:
        if value is None:
            return self
        codec = self._client.settings.codec
        self._body = codec.serialize(value)
        if "Content-Type" not in self._headers:
            self._headers["Content-Type"] = codec.content_type
        return self

    def build(self) -> HttpRequest:
        return HttpRequest(
            method=self._method,
            url=build_url(self._client.base_url, self._target, self._query),
            headers=dict(self._headers),
            body=self._body,
        )

    def send(self) -> None:
        """Dispatch and discard the body of a successful response."""
        self._exchange()

    def read_as(self, type_: Any) -> Any:
        """Dispatch and deserialize a successful response as *type_*."""
        response = self._exchange()
        try:
            return self._client.settings.codec.deserialize(response.body, type_)
        except ValueError as e:
            raise RequestError(
                response.status_code,
                response.text,
                f"Could not read {self._method} {self._target} response as {type_!r}: {e}",
            ) from e

    def _exchange(self) -> HttpResponse:
        request = self.build()
        logger.debug("Dispatching %s %s", request.method, request.url)
        response = self._client.transport.send(request)
        if not response.is_success:
            raise RequestError(
                response.status_code,
                response.text,
                f"{request.method} {request.url} failed with status {response.status_code}",
            )
        return response
