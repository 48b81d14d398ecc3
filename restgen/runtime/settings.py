"""Per-call configuration consumed by ``RestClientFactory.for_``."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from restgen.runtime.codec import Codec, JsonCodec
from restgen.runtime.transport import RequestsTransport, Transport


@dataclass
class RestSettings:
    transport_factory: Callable[[], Transport] | None = None  # overrides the requests transport
    default_headers: dict[str, str] = field(default_factory=lambda: dict[str, str]())
    codec: Codec = field(default_factory=JsonCodec)
    timeout: float | None = None  # only handed to the default transport

    def create_transport(self) -> Transport:
        if self.transport_factory is not None:
            return self.transport_factory()
        return RequestsTransport(timeout=self.timeout)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RestSettings:
        """Build settings from ``RESTGEN_TIMEOUT`` and ``RESTGEN_DEFAULT_HEADERS``.

        ``RESTGEN_DEFAULT_HEADERS`` is a JSON object of header names to values.
        """
        env = os.environ if environ is None else environ
        settings = cls()

        timeout = env.get("RESTGEN_TIMEOUT")
        if timeout:
            try:
                settings.timeout = float(timeout)
            except ValueError:
                raise ValueError(f"RESTGEN_TIMEOUT must be a number, got {timeout!r}") from None

        headers = env.get("RESTGEN_DEFAULT_HEADERS")
        if headers:
            parsed = json.loads(headers)
            if not isinstance(parsed, dict):
                raise ValueError("RESTGEN_DEFAULT_HEADERS must be a JSON object")
            settings.default_headers = {str(k): str(v) for k, v in parsed.items()}

        return settings
