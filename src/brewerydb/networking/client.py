"""Synchronous HTTP client used by the BreweryDB request executor.

Every call performs exactly one transfer. Transport failures are not
raised; they come back as an ``Err`` holding a networking error plus the
request metadata, and the caller decides how to surface them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, TypeVar

import requests

from .config import HttpClientConfig
from .errors import ConnectionFailedError, HttpClientError, RequestTimeoutError
from .types import Err, Ok, Result

logger = logging.getLogger(__name__)

ResponseValue = TypeVar("ResponseValue")


class HttpClient:
    """Thin wrapper over a ``requests.Session``.

    Methods return a Result that contains either the response body or an
    error, plus request metadata (method, url, status, elapsed time).
    """

    def __init__(self, config: HttpClientConfig) -> None:
        """Create a new HttpClient.

        Args:
            config: Configuration for timeouts, headers, and TLS settings.
        """
        self._config = config
        self._session = requests.Session()
        if self._config.user_agent:
            self._session.headers["User-Agent"] = self._config.user_agent
        self._session.headers.update(self._config.default_headers)
        if not self._config.verify_tls:
            logger.warning(
                "TLS certificate verification is disabled for this client"
            )

    def close(self) -> None:
        self._session.close()

    def _get_timeout(self) -> float | tuple[float, float] | None:
        """Resolve timeout preference: connect/read pair, then total."""
        if (
            self._config.connect_timeout_seconds is not None
            and self._config.read_timeout_seconds is not None
        ):
            return (
                self._config.connect_timeout_seconds,
                self._config.read_timeout_seconds,
            )
        return self._config.timeout_seconds

    def _build_meta(
        self,
        method: str,
        request_url: str,
        response: requests.Response | None,
        context: Mapping[str, Any] | None,
        timeout: float | tuple[float, float] | None,
        final_error: str | None = None,
    ) -> dict[str, Any]:
        """Construct metadata dictionary from response and context."""
        meta: dict[str, Any] = {}
        meta["method"] = method
        meta["url"] = request_url
        meta["timeout_s"] = timeout
        if context:
            context_dict = dict(context)
            meta["context"] = context_dict
            for key, value in context_dict.items():
                meta.setdefault(key, value)

        if response is not None:
            meta["status_code"] = response.status_code
            meta["url"] = response.url
            meta["reason"] = response.reason
            try:
                meta["elapsed_s"] = response.elapsed.total_seconds()
            except AttributeError:
                pass
        if final_error is not None:
            meta["final_error"] = final_error

        return meta

    def _handle_request_exception(
        self,
        method: str,
        request_url: str,
        e: requests.exceptions.RequestException,
        context: Mapping[str, Any] | None,
        timeout: float | tuple[float, float] | None,
    ) -> Err[HttpClientError]:
        """Map requests exceptions to networking errors."""
        meta = self._build_meta(
            method,
            request_url,
            e.response,
            context,
            timeout,
            final_error=type(e).__name__,
        )

        if isinstance(e, requests.exceptions.Timeout):
            return Err(RequestTimeoutError(str(e)), meta=meta)

        # SSLError and ProxyError are ConnectionError subclasses
        if isinstance(e, requests.exceptions.ConnectionError):
            return Err(ConnectionFailedError(str(e)), meta=meta)

        return Err(HttpClientError(str(e)), meta=meta)

    def _request(
        self,
        method: str,
        url: str,
        *,
        context: Mapping[str, Any] | None,
        timeout: float | tuple[float, float] | None,
        request_fn: Callable[[], requests.Response],
        value_builder: Callable[[requests.Response], ResponseValue],
    ) -> Result[ResponseValue, HttpClientError]:
        """Execute a single request and normalize its metadata."""
        try:
            response = request_fn()
        except requests.exceptions.RequestException as exc:
            logger.debug("%s request failed: %s", method, type(exc).__name__)
            return self._handle_request_exception(
                method=method,
                request_url=url,
                e=exc,
                context=context,
                timeout=timeout,
            )
        logger.debug("%s request -> %s", method, response.status_code)
        return Ok(
            value_builder(response),
            meta=self._build_meta(
                method=method,
                request_url=url,
                response=response,
                context=context,
                timeout=timeout,
            ),
        )

    @staticmethod
    def _content_value(response: requests.Response) -> bytes:
        return response.content

    def get(
        self,
        url: str,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> Result[bytes, HttpClientError]:
        """Perform an HTTP GET request.

        Args:
            url: Absolute URL to request.
            context: Optional caller context carried into the metadata.

        Returns:
            Result containing response bytes on success, or an error on failure.
        """
        resolved_timeout = self._get_timeout()
        return self._request(
            method="GET",
            url=url,
            context=context,
            timeout=resolved_timeout,
            request_fn=lambda: self._session.get(
                url,
                timeout=resolved_timeout,
                allow_redirects=self._config.allow_redirects,
                verify=self._config.verify_tls,
            ),
            value_builder=self._content_value,
        )

    def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        data: Any | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Result[bytes, HttpClientError]:
        """Perform an HTTP POST request.

        Args:
            url: Absolute URL to request.
            headers: Optional per-request headers merged with defaults.
            data: Optional form/body payload.
            context: Optional caller context carried into the metadata.

        Returns:
            Result containing response bytes on success, or an error on failure.
        """
        resolved_timeout = self._get_timeout()
        return self._request(
            method="POST",
            url=url,
            context=context,
            timeout=resolved_timeout,
            request_fn=lambda: self._session.post(
                url,
                headers=headers,
                data=data,
                timeout=resolved_timeout,
                allow_redirects=self._config.allow_redirects,
                verify=self._config.verify_tls,
            ),
            value_builder=self._content_value,
        )
