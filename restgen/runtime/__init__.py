"""Runtime support imported by generated REST clients."""

from __future__ import annotations

from restgen.runtime.client import (
    RestClient as RestClient,
    RestRequest as RestRequest,
)
from restgen.runtime.codec import (
    Codec as Codec,
    JsonCodec as JsonCodec,
)
from restgen.runtime.factory import (
    RestClientFactory as RestClientFactory,
    interface_key as interface_key,
)
from restgen.runtime.registry import FactoryRegistry as FactoryRegistry
from restgen.runtime.settings import RestSettings as RestSettings
from restgen.runtime.transport import (
    HttpRequest as HttpRequest,
    HttpResponse as HttpResponse,
    RequestsTransport as RequestsTransport,
    Transport as Transport,
)

__all__ = [
    "Codec",
    "FactoryRegistry",
    "HttpRequest",
    "HttpResponse",
    "JsonCodec",
    "RequestsTransport",
    "RestClient",
    "RestClientFactory",
    "RestRequest",
    "RestSettings",
    "Transport",
    "interface_key",
]
