"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigurationError
from .formats import ResponseFormat, coerce_format
from .networking.config import HttpClientConfig
from .xml_normalizer import DEFAULT_MAX_DEPTH

BASE_URL = "http://www.brewerydb.com/api"
DEFAULT_TIMEOUT_SECONDS = 30.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True)
class BreweryDBConfig:
    """Settings shared by every request a client makes.

    ``format`` is coerced on construction: anything other than ``json`` or
    ``xml`` becomes ``json``. ``strict_decoding`` turns unparseable response
    bodies into :class:`~brewerydb.errors.DecodeError` instead of an empty
    result.
    """

    api_key: str
    format: ResponseFormat = ResponseFormat.JSON
    base_url: str = BASE_URL
    strict_decoding: bool = False
    max_xml_depth: int = DEFAULT_MAX_DEPTH
    verify_tls: bool = True
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS
    connect_timeout_seconds: float | None = None
    read_timeout_seconds: float | None = None
    user_agent: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict)
    allow_redirects: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_key", str(self.api_key))
        object.__setattr__(self, "format", coerce_format(self.format))
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(
            self, "default_headers", MappingProxyType(dict(self.default_headers))
        )
        if self.max_xml_depth < 0:
            raise ValueError("max_xml_depth must be >= 0")
        # validates the transport settings
        self.http_config()

    def http_config(self) -> HttpClientConfig:
        return HttpClientConfig(
            user_agent=self.user_agent,
            default_headers=self.default_headers,
            allow_redirects=self.allow_redirects,
            verify_tls=self.verify_tls,
            timeout_seconds=self.timeout_seconds,
            connect_timeout_seconds=self.connect_timeout_seconds,
            read_timeout_seconds=self.read_timeout_seconds,
        )

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> "BreweryDBConfig":
        """Build a config from ``BREWERYDB_*`` environment variables."""
        env = os.environ if environ is None else environ
        api_key = env.get("BREWERYDB_API_KEY")
        if not api_key:
            raise ConfigurationError("BREWERYDB_API_KEY is not set")

        timeout: float | None = DEFAULT_TIMEOUT_SECONDS
        raw_timeout = env.get("BREWERYDB_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ConfigurationError(
                    f"BREWERYDB_TIMEOUT must be a number, got {raw_timeout!r}"
                ) from exc

        return cls(
            api_key=api_key,
            format=env.get("BREWERYDB_FORMAT", ResponseFormat.JSON),
            base_url=env.get("BREWERYDB_BASE_URL", BASE_URL),
            strict_decoding=_env_flag(env, "BREWERYDB_STRICT_DECODING", False),
            verify_tls=_env_flag(env, "BREWERYDB_VERIFY_TLS", True),
            timeout_seconds=timeout,
        )
