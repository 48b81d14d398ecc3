"""Factory registry binding interface keys to REST client constructors.

A registry has two states. While open, ``set_rest_client`` adds bindings;
``seal`` freezes it and only lookups are allowed from then on. Generated
factory modules build their registry once, at import time, through
``FactoryRegistry.build``. Sealed registries are read-only and can be shared
between threads without locking.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from types import MappingProxyType
from typing import Any

from restgen.errors import RegistrationError, ResolutionError

logger = logging.getLogger(__name__)

ClientConstructor = Callable[..., Any]


class FactoryRegistry:
    def __init__(self) -> None:
        self._factories: dict[str, ClientConstructor] = {}
        self._sealed: MappingProxyType[str, ClientConstructor] | None = None

    @classmethod
    def build(cls, routine: Callable[[FactoryRegistry], None]) -> FactoryRegistry:
        """Run a registration routine on a fresh registry and seal it."""
        registry = cls()
        routine(registry)
        registry.seal()
        return registry

    @property
    def sealed(self) -> bool:
        return self._sealed is not None

    def set_rest_client(self, interface_key: str, factory: ClientConstructor) -> None:
        """Bind one interface key to its client constructor.

        Raises:
            RegistrationError: If the registry is sealed or the key is already bound.
        """
        if self._sealed is not None:
            raise RegistrationError(f"Registry is sealed, cannot register {interface_key}")
        if interface_key in self._factories:
            raise RegistrationError(f"{interface_key} is already registered")
        self._factories[interface_key] = factory
        logger.debug("Registered %s -> %s", interface_key, getattr(factory, "__name__", factory))

    def seal(self) -> None:
        if self._sealed is None:
            self._sealed = MappingProxyType(dict(self._factories))

    def resolve(self, interface_key: str) -> ClientConstructor:
        """Return the constructor bound to *interface_key*.

        Raises:
            ResolutionError: If the registry is not populated yet or the key is unknown.
        """
        if self._sealed is None:
            raise ResolutionError(interface_key, f"Registry is not initialized, cannot resolve {interface_key}")
        try:
            return self._sealed[interface_key]
        except KeyError:
            raise ResolutionError(interface_key) from None

    def __contains__(self, interface_key: object) -> bool:
        return interface_key in (self._sealed if self._sealed is not None else self._factories)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._sealed if self._sealed is not None else self._factories))

    def __len__(self) -> int:
        return len(self._factories)
