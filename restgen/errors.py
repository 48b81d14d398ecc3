"""Exceptions raised by the generator and the runtime."""

from __future__ import annotations


class RestGenError(Exception):
    """Base class for every restgen error."""


class AnalysisError(RestGenError):
    """Raised when an interface declaration is not a valid REST interface."""

    def __init__(self, interface: str, rule: str, message: str):
        super().__init__(f"{interface}: {message} [{rule}]")
        self.interface = interface
        self.rule = rule


class GenerationError(RestGenError):
    """Raised when synthesized identifiers collide; fatal for the whole run."""


class RegistrationError(RestGenError):
    """Raised when a factory registry binding is rejected."""


class ResolutionError(RestGenError, ValueError):
    """Raised when an interface has no registered REST client."""

    def __init__(self, interface_key: str, message: str | None = None):
        super().__init__(message or f"{interface_key} is not a REST interface")
        self.interface_key = interface_key


class RequestError(RestGenError):
    """Raised when a request fails or its response cannot be mapped."""

    def __init__(self, status_code: int, body: str, message: str | None = None):
        super().__init__(message or f"Request failed with status {status_code}")
        self.status_code = status_code
        self.body = body
