"""Synchronous HTTP transport."""

from .client import HttpClient
from .config import HttpClientConfig

__all__ = ["HttpClient", "HttpClientConfig"]
