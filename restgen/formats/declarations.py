"""Pydantic models for interface declaration files (.json / .yaml)."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

Role = Literal["path", "query", "header", "body"]


class ParameterDeclaration(BaseModel):
    name: str
    type: str = "str"
    role: Role | None = None
    alias: str | None = None  # placeholder, query key or header name on the wire
    optional: bool = False


class MethodDeclaration(BaseModel):
    name: str
    verb: str | None = None  # None: not an HTTP method
    route: str = ""
    returns: str = "None"
    parameters: list[ParameterDeclaration] = []
    headers: dict[str, str] = Field(default_factory=dict)


class InterfaceDeclaration(BaseModel):
    name: str
    scope: str = ""
    route_prefix: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    methods: list[MethodDeclaration] = []


class DeclarationSet(BaseModel):
    interfaces: list[InterfaceDeclaration] = []


def load_declarations(path: str | Path) -> DeclarationSet:
    """Load a declaration file. ``.yaml``/``.yml`` are parsed as YAML, anything else as JSON."""
    path = Path(path)
    text = path.read_text()
    if path.suffix in (".yaml", ".yml"):
        return DeclarationSet.model_validate(yaml.safe_load(text) or {})
    return DeclarationSet.model_validate_json(text)
