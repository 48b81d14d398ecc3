"""Descriptor model produced by the analyzer and consumed by the generators.

Every dataclass here is frozen: descriptors are built once per generation
run and never change afterwards. Only the analyzer should construct
InterfaceDescriptor instances, so a descriptor always describes a valid
REST interface.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class ParameterRole(str, enum.Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"


@dataclass(frozen=True)
class ParameterBinding:
    name: str
    role: ParameterRole
    type: str = "str"
    wire_name: str = ""
    optional: bool = False


@dataclass(frozen=True)
class ReturnShape:
    kind: str = "none"  # "none" | "value" | "collection"
    type: str = "None"

    @property
    def has_content(self) -> bool:
        return self.kind != "none"


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    verb: str
    route: str
    returns: ReturnShape = field(default_factory=ReturnShape)
    parameters: tuple[ParameterBinding, ...] = ()
    headers: tuple[tuple[str, str], ...] = ()

    def bindings(self, role: ParameterRole) -> list[ParameterBinding]:
        return [p for p in self.parameters if p.role == role]


@dataclass(frozen=True)
class InterfaceDescriptor:
    name: str
    scope: str = ""
    methods: tuple[MethodDescriptor, ...] = ()
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def key(self) -> str:
        """Stable interface identity used as the factory registry key."""
        return f"{self.scope}.{self.name}" if self.scope else self.name


@dataclass(frozen=True)
class GeneratedClientDescriptor:
    interface_key: str
    interface_name: str
    class_name: str
    module_name: str
    source: str = ""

    @property
    def filename(self) -> str:
        return f"{self.module_name}.py"
