"""Request-matching, response-stubbing transport for tests.

Usage::

    transport = MockTransport()
    transport.expect("GET", "http://example.org/api/posts/42").respond(200, b'{"id": 42}')
    settings = RestSettings(transport_factory=lambda: transport)
    ...
    transport.verify_no_outstanding_expectation()

Expectations are matched once each, in the order they were declared.
Definitions registered with ``when`` match any number of times. Requests
matching neither get a 404 response.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from typing import Any

from requests.structures import CaseInsensitiveDict

from restgen.runtime.transport import HttpRequest, HttpResponse


@dataclass
class MockedRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=lambda: dict[str, str]())
    response: HttpResponse = field(default_factory=lambda: HttpResponse(status_code=200))

    def with_headers(self, headers: dict[str, str]) -> MockedRequest:
        self.headers.update(headers)
        return self

    def respond(
        self,
        status_code: int = 200,
        body: bytes | str | Any = b"",
        headers: dict[str, str] | None = None,
    ) -> MockedRequest:
        """Stub the response. Non-bytes, non-str bodies are encoded as JSON."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        elif not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        self.response = HttpResponse(
            status_code=status_code,
            headers=CaseInsensitiveDict(headers or {}),
            body=body,
        )
        return self

    def matches(self, request: HttpRequest) -> bool:
        if self.method.upper() != request.method.upper():
            return False
        url = request.url if "?" in self.url else request.url.split("?", 1)[0]
        if url != self.url:
            return False
        sent = CaseInsensitiveDict(request.headers)
        return all(sent.get(name) == value for name, value in self.headers.items())


class MockTransport:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._expectations: list[MockedRequest] = []
        self._definitions: list[MockedRequest] = []
        self.requests: list[HttpRequest] = []
        self.closed = False

    def expect(self, method: str, url: str) -> MockedRequest:
        mocked = MockedRequest(method=method, url=url)
        self._expectations.append(mocked)
        return mocked

    def when(self, method: str, url: str) -> MockedRequest:
        mocked = MockedRequest(method=method, url=url)
        self._definitions.append(mocked)
        return mocked

    @property
    def outstanding(self) -> list[MockedRequest]:
        return list(self._expectations)

    def send(self, request: HttpRequest) -> HttpResponse:
        with self._lock:
            self.requests.append(request)
            if self._expectations and self._expectations[0].matches(request):
                return self._expectations.pop(0).response
            for definition in self._definitions:
                if definition.matches(request):
                    return definition.response
        return HttpResponse(status_code=404, body=b"No matching mock handler")

    def verify_no_outstanding_expectation(self) -> None:
        if self._expectations:
            pending = ", ".join(f"{e.method} {e.url}" for e in self._expectations)
            raise AssertionError(f"Outstanding expectations: {pending}")

    def close(self) -> None:
        self.closed = True
