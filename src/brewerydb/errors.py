"""Error kinds raised by the BreweryDB client.

Errors fall into two categories so callers can handle them separately:

* ``UsageError``: the call was rejected before any network activity
  (``ConfigurationError``, ``UnsupportedMethod``).
* ``RemoteError``: the call reached the transport (``TransportError``,
  ``ServiceError``, ``DecodeError``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .executor import ApiRequest, ApiResponse


class BreweryDBError(Exception):
    """Base class for every error raised by this package."""


class UsageError(BreweryDBError):
    """The request could not be built from the given inputs."""


class ConfigurationError(UsageError, ValueError):
    """Invalid combination of inputs, detected before any network call."""


class UnsupportedMethod(UsageError):
    """The HTTP verb is not supported by the API (PUT, DELETE)."""

    def __init__(self, verb: str):
        self.verb = verb
        super().__init__(f"{verb} not supported")


class RemoteError(BreweryDBError):
    """The transfer was attempted and failed or returned an error."""

    def __init__(
        self,
        message: str,
        request: ApiRequest | None = None,
        response: ApiResponse | None = None,
    ):
        self.message = message
        self.request = request
        self.response = response
        super().__init__(message)


class TransportError(RemoteError):
    """The HTTP transport failed (network, TLS, timeout)."""


class ServiceError(RemoteError):
    """The service answered with an application-level ``error`` entry."""

    PREFIX = "Brewerydb Service Error: "

    def __init__(
        self,
        service_message: str,
        request: ApiRequest | None = None,
        response: ApiResponse | None = None,
    ):
        self.service_message = service_message
        super().__init__(self.PREFIX + service_message, request, response)


class DecodeError(RemoteError):
    """The response body could not be parsed (strict decoding only)."""
