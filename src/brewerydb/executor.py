"""Request executor: builds, sends and decodes one API call."""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping

from .errors import DecodeError, ServiceError, TransportError, UnsupportedMethod
from .formats import ResponseFormat
from .networking.client import HttpClient
from .params import encode_params, strip_empty
from .xml_normalizer import ATTRIBUTES_KEY, DEFAULT_MAX_DEPTH, normalize_xml

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class Verb(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ApiRequest:
    """A fully prepared request.

    ``params`` already contains ``apikey`` and ``format`` and has had its
    empty entries removed. ``uri`` carries the query string for GET only;
    POST parameters travel in ``body``.
    """

    endpoint: str
    verb: Verb
    format: ResponseFormat
    params: Mapping[str, Any]
    uri: str
    body: str | None = None

    @property
    def redacted_uri(self) -> str:
        """``uri`` with the API key left out, for logging."""
        if self.verb is not Verb.GET:
            return self.uri
        base = self.uri.split("?", 1)[0]
        visible = {k: v for k, v in self.params.items() if k != "apikey"}
        return f"{base}?{encode_params(visible)}"


@dataclass(frozen=True)
class ApiResponse:
    """Diagnostic record of one completed transfer."""

    request: ApiRequest
    status_code: int | None
    raw: str
    parsed: Any
    truncated_paths: tuple[str, ...] = field(default=())
    meta: Mapping[str, Any] = field(default_factory=dict)

    @property
    def uri(self) -> str:
        return self.request.uri


def _service_error_message(parsed: Any) -> str | None:
    if not isinstance(parsed, Mapping):
        return None
    error = parsed.get("error")
    if error is None:
        return None
    if isinstance(error, Mapping):
        return str(error.get("message", ""))
    return str(error)


def _strip_root_attributes(parsed: dict[str, Any]) -> dict[str, Any]:
    """Remove ``@attributes`` at the top level and on the root element."""
    stripped = {k: v for k, v in parsed.items() if k != ATTRIBUTES_KEY}
    if len(stripped) == 1:
        (root_tag, root_value), = stripped.items()
        if isinstance(root_value, dict) and ATTRIBUTES_KEY in root_value:
            stripped[root_tag] = {
                k: v for k, v in root_value.items() if k != ATTRIBUTES_KEY
            }
    return stripped


class RequestExecutor:
    """Turns an endpoint and parameters into a decoded API response.

    The executor holds no per-call state: every call returns its own
    :class:`ApiResponse`, and errors raised after the transfer carry the
    request (and, where there was a body, the response) that produced them.
    """

    def __init__(
        self,
        http: HttpClient,
        base_url: str,
        *,
        strict_decoding: bool = False,
        max_xml_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._strict_decoding = strict_decoding
        self._max_xml_depth = max_xml_depth

    def build_request(
        self,
        endpoint: str,
        params: Mapping[str, Any],
        verb: Verb | str = Verb.GET,
        fmt: ResponseFormat = ResponseFormat.JSON,
        api_key: str = "",
    ) -> ApiRequest:
        """Prepare a request without sending it.

        Raises:
            UnsupportedMethod: For PUT, DELETE or any unknown verb.
        """
        try:
            verb = Verb(verb.upper())
        except ValueError:
            raise UnsupportedMethod(str(verb)) from None
        if verb not in (Verb.GET, Verb.POST):
            raise UnsupportedMethod(verb.value)

        fmt = ResponseFormat(fmt)
        args = dict(params)
        args["apikey"] = api_key
        args["format"] = fmt.value
        # an empty api key is dropped here like any other empty value
        args = strip_empty(args)

        url = f"{self._base_url}/{endpoint.strip('/')}/"
        encoded = encode_params(args)
        if verb is Verb.GET:
            return ApiRequest(endpoint, verb, fmt, args, f"{url}?{encoded}")
        return ApiRequest(endpoint, verb, fmt, args, url, body=encoded)

    def execute(
        self,
        endpoint: str,
        params: Mapping[str, Any],
        verb: Verb | str = Verb.GET,
        fmt: ResponseFormat = ResponseFormat.JSON,
        api_key: str = "",
    ) -> ApiResponse:
        """Send one request and return its decoded response.

        Raises:
            UnsupportedMethod: Before any network activity, for PUT/DELETE.
            TransportError: The HTTP transfer failed.
            DecodeError: The body did not parse and strict decoding is on.
            ServiceError: The decoded body holds an ``error`` entry.
        """
        request = self.build_request(endpoint, params, verb, fmt, api_key)
        logger.debug("%s %s", request.verb.value, request.redacted_uri)
        context = {"endpoint": request.endpoint}

        if request.verb is Verb.GET:
            result = self._http.get(request.uri, context=context)
        else:
            result = self._http.post(
                request.uri,
                headers={"Content-Type": FORM_CONTENT_TYPE},
                data=request.body,
                context=context,
            )
        if not result.ok:
            raise TransportError(
                f"Transport error: {result.error}", request=request
            ) from result.error

        content = result.value or b""
        raw = content.decode("utf-8", errors="replace")
        response = ApiResponse(
            request=request,
            status_code=result.meta.get("status_code"),
            raw=raw,
            parsed=None,
            meta=result.meta,
        )
        parsed, truncated = self._decode(content, response)
        response = replace(response, parsed=parsed, truncated_paths=truncated)

        message = _service_error_message(parsed)
        if message is None and request.format is ResponseFormat.XML:
            # the normalizer nests everything under the root tag
            if isinstance(parsed, dict) and len(parsed) == 1:
                message = _service_error_message(next(iter(parsed.values())))
        if message is not None:
            raise ServiceError(message, request=request, response=response)

        if request.format is ResponseFormat.XML and isinstance(parsed, dict):
            response = replace(response, parsed=_strip_root_attributes(parsed))
        return response

    def _decode(
        self, content: bytes, response: ApiResponse
    ) -> tuple[Any, tuple[str, ...]]:
        request = response.request
        if request.format is ResponseFormat.XML:
            try:
                normalized = normalize_xml(content, max_depth=self._max_xml_depth)
            except ET.ParseError as exc:
                return self._decode_failed("XML", exc, response, {}), ()
            if normalized.truncated:
                logger.warning(
                    "XML response from %s exceeded depth %d at %s",
                    request.endpoint,
                    self._max_xml_depth,
                    ", ".join(normalized.truncated_paths),
                )
            return normalized.value, normalized.truncated_paths

        try:
            return json.loads(response.raw), ()
        except ValueError as exc:
            return self._decode_failed("JSON", exc, response, None), ()

    def _decode_failed(
        self, kind: str, exc: Exception, response: ApiResponse, fallback: Any
    ) -> Any:
        if self._strict_decoding:
            raise DecodeError(
                f"Malformed {kind} response: {exc}",
                request=response.request,
                response=response,
            ) from exc
        logger.warning(
            "Could not decode %s response from %s: %s",
            kind,
            response.request.endpoint,
            exc,
        )
        return fallback
