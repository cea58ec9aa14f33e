"""Client library for the BreweryDB web API."""

from .client import BreweryDB
from .config import BASE_URL, BreweryDBConfig
from .errors import (
    BreweryDBError,
    ConfigurationError,
    DecodeError,
    RemoteError,
    ServiceError,
    TransportError,
    UnsupportedMethod,
    UsageError,
)
from .executor import ApiRequest, ApiResponse, RequestExecutor, Verb
from .formats import ResponseFormat
from .xml_normalizer import XmlNormalization, normalize_xml

__all__ = [
    "BASE_URL",
    "ApiRequest",
    "ApiResponse",
    "BreweryDB",
    "BreweryDBConfig",
    "BreweryDBError",
    "ConfigurationError",
    "DecodeError",
    "RemoteError",
    "RequestExecutor",
    "ResponseFormat",
    "ServiceError",
    "TransportError",
    "UnsupportedMethod",
    "UsageError",
    "Verb",
    "XmlNormalization",
    "normalize_xml",
]
