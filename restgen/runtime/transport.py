"""Transport abstraction: one HTTP exchange, request in, response out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import requests
from requests.structures import CaseInsensitiveDict

logger = logging.getLogger(__name__)


@dataclass
class HttpRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=lambda: dict[str, str]())
    body: bytes | None = None


@dataclass
class HttpResponse:
    status_code: int
    headers: CaseInsensitiveDict[str] = field(default_factory=lambda: CaseInsensitiveDict())
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """The only component that touches the network.

    Implementations shared between clients must be safe for concurrent use.
    """

    def send(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None: ...


class RequestsTransport:
    """Production transport backed by a ``requests.Session``."""

    def __init__(self, *, timeout: float | None = None, session: requests.Session | None = None):
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def session(self) -> requests.Session:
        return self._session

    def send(self, request: HttpRequest) -> HttpResponse:
        logger.debug("%s %s", request.method, request.url)
        resp = self._session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            timeout=self._timeout,
        )
        return HttpResponse(
            status_code=resp.status_code,
            headers=CaseInsensitiveDict(resp.headers),
            body=resp.content,
        )

    def close(self) -> None:
        self._session.close()
