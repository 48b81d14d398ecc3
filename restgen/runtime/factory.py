"""Runtime dispatcher: interface -> ready-to-use REST client."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast, overload

from restgen.runtime.registry import FactoryRegistry
from restgen.runtime.settings import RestSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def interface_key(interface: type[Any] | str) -> str:
    """Stable registry key of an interface.

    Strings are used as-is. Classes use the key stamped by ``@rest_interface``
    when present, otherwise ``module.QualifiedName``.
    """
    if isinstance(interface, str):
        return interface
    key = interface.__dict__.get("__rest_interface_key__")
    if key:
        return key
    return f"{interface.__module__}.{interface.__qualname__}"


class RestClientFactory:
    def __init__(self, registry: FactoryRegistry):
        self._registry = registry

    @property
    def registry(self) -> FactoryRegistry:
        return self._registry

    @overload
    def for_(self, interface: type[T], base_url: str, settings: RestSettings | None = None) -> T: ...

    @overload
    def for_(self, interface: str, base_url: str, settings: RestSettings | None = None) -> Any: ...

    def for_(self, interface: type[Any] | str, base_url: str, settings: RestSettings | None = None) -> Any:
        """Build the REST client registered for *interface*.

        The registry lookup happens before any transport is created: an
        unregistered interface raises ResolutionError without network activity,
        and an empty *base_url* raises ValueError before a transport exists.
        """
        key = interface_key(interface)
        constructor = self._registry.resolve(key)
        if not base_url:
            raise ValueError("base_url must not be empty")
        settings = settings or RestSettings()
        transport = settings.create_transport()
        logger.debug("Resolved %s for %s", getattr(constructor, "__name__", constructor), base_url)
        return cast(Any, constructor(base_url, settings, transport))
