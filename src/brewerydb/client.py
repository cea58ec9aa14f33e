"""BreweryDB API client.

Each resource method marshals its arguments and delegates to the shared
:class:`~brewerydb.executor.RequestExecutor`. Calls block for one HTTP
round trip. The ``last_*`` accessors describe the most recent call on this
instance and are overwritten by every call, so an instance should not be
shared between threads without external locking.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping, Sequence

from .config import BreweryDBConfig
from .errors import ConfigurationError, RemoteError
from .executor import ApiResponse, RequestExecutor, Verb
from .formats import ResponseFormat, coerce_format
from .networking.client import HttpClient

logger = logging.getLogger(__name__)

SEARCH_TYPES = ("", "beer", "brewery")


def _since_param(since: str | date | None) -> str | None:
    """Format ``since`` as the UTC date the API expects (YYYY-MM-DD)."""
    if isinstance(since, datetime) and since.tzinfo is not None:
        since = since.astimezone(timezone.utc)
    if isinstance(since, date):
        return since.strftime("%Y-%m-%d")
    return since


class BreweryDB:
    """Client for the BreweryDB web API.

    Args:
        api_key: API key sent with every request. An empty key is not
            rejected; like any empty parameter it is left out of the request.
        format: ``"json"`` (default) or ``"xml"``; anything else means JSON.
        config: Full configuration. When given, ``api_key`` and ``format``
            must be omitted.
        http: Transport to use instead of one built from the config.
    """

    def __init__(
        self,
        api_key: str | None = None,
        format: ResponseFormat | str = ResponseFormat.JSON,
        *,
        config: BreweryDBConfig | None = None,
        http: HttpClient | None = None,
    ) -> None:
        if config is None:
            if api_key is None:
                raise ConfigurationError("an API key or a config is required")
            config = BreweryDBConfig(api_key=api_key, format=format)
        elif api_key is not None:
            raise ConfigurationError("pass either api_key or config, not both")

        self._config = config
        self._format = config.format
        self._owns_http = http is None
        self._http = http if http is not None else HttpClient(config.http_config())
        self._executor = RequestExecutor(
            self._http,
            config.base_url,
            strict_decoding=config.strict_decoding,
            max_xml_depth=config.max_xml_depth,
        )
        self._last_response: ApiResponse | None = None
        self._last_request_uri: str | None = None
        self._last_raw_response: str | None = None
        self._last_parsed_response: Any = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BreweryDB":
        return cls(config=BreweryDBConfig.from_env(environ))

    def close(self) -> None:
        """Release the transport, unless it was passed in by the caller."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "BreweryDB":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def api_key(self) -> str:
        return self._config.api_key

    @property
    def format(self) -> ResponseFormat:
        return self._format

    @format.setter
    def format(self, value: ResponseFormat | str) -> None:
        self._format = coerce_format(value)

    # -- diagnostics -------------------------------------------------------

    @property
    def last_response(self) -> ApiResponse | None:
        return self._last_response

    @property
    def last_request_uri(self) -> str | None:
        return self._last_request_uri

    @property
    def last_raw_response(self) -> str | None:
        return self._last_raw_response

    @property
    def last_parsed_response(self) -> Any:
        return self._last_parsed_response

    def _record(self, response: ApiResponse | None, uri: str | None) -> None:
        self._last_response = response
        self._last_request_uri = uri
        self._last_raw_response = response.raw if response else None
        self._last_parsed_response = response.parsed if response else None

    def _request(
        self,
        endpoint: str,
        args: Mapping[str, Any],
        verb: Verb = Verb.GET,
    ) -> Any:
        self._record(None, None)
        try:
            response = self._executor.execute(
                endpoint, args, verb, self._format, self._config.api_key
            )
        except RemoteError as exc:
            self._record(exc.response, exc.request.uri if exc.request else None)
            raise
        self._record(response, response.uri)
        return response.parsed

    # -- breweries ---------------------------------------------------------

    def get_breweries(
        self,
        page: int = 1,
        metadata: bool = True,
        since: str | date | None = None,
        geo: bool = False,
        lat: float | None = None,
        lng: float | None = None,
        radius: float = 50,
        units: str = "miles",
    ) -> Any:
        """List breweries, 50 per page.

        Args:
            page: Page number to fetch.
            metadata: Whether to include brewery metadata.
            since: Only breweries created since this UTC date.
            geo: Restrict to breweries within ``radius`` of ``lat``/``lng``.
            lat: Latitude, required when ``geo`` is set.
            lng: Longitude, required when ``geo`` is set.
            radius: Search radius for a geo search.
            units: Unit of ``radius`` (``miles`` or ``km``).

        Raises:
            ConfigurationError: ``geo`` was requested without lat and lng.
        """
        if geo and (lat is None or lng is None):
            raise ConfigurationError(
                "If doing a geo search, lat and lng values are required"
            )

        args: dict[str, Any] = {"page": page, "metadata": metadata}
        if since is not None:
            args["since"] = _since_param(since)
        if geo:
            args.update(geo=1, lat=lat, lng=lng, radius=radius, units=units)
        return self._request("breweries", args)

    def get_breweries_by_bounding_boxes(
        self,
        boxes: str | Sequence[Any] | Mapping[str, Any],
        metadata: bool = True,
    ) -> Any:
        """List breweries inside any of the given lat/lng bounding boxes.

        The boxes are posted as the ``b`` parameter. A single box may be
        given as one string; a mapping is sent as ``b[key]=...``.

        Raises:
            ConfigurationError: ``boxes`` is empty.
        """
        if not boxes:
            raise ConfigurationError(
                "If doing a map route search, an array of lat and lng "
                "bounds are required"
            )
        if isinstance(boxes, str):
            b: Any = [boxes]
        elif isinstance(boxes, Mapping):
            b = dict(boxes)
        else:
            b = list(boxes)
        args = {"b": b, "metadata": metadata}
        return self._request("maproute", args, Verb.POST)

    def get_brewery(self, brewery_id: int | str, metadata: bool = True) -> Any:
        return self._request(f"breweries/{brewery_id}", {"metadata": metadata})

    # -- beers -------------------------------------------------------------

    def get_beers_for_brewery(
        self,
        brewery_id: int | str,
        page: int = 1,
        metadata: bool = True,
        since: str | date | None = None,
    ) -> Any:
        args: dict[str, Any] = {
            "brewery_id": brewery_id,
            "page": page,
            "metadata": metadata,
        }
        if since is not None:
            args["since"] = _since_param(since)
        return self._request("beers", args)

    def get_all_beers(
        self,
        page: int = 1,
        metadata: bool = True,
        since: str | date | None = None,
    ) -> Any:
        args: dict[str, Any] = {"page": page, "metadata": metadata}
        if since is not None:
            args["since"] = _since_param(since)
        return self._request("beers", args)

    def get_beer(self, beer_id: int | str, metadata: bool = True) -> Any:
        return self._request(f"beers/{beer_id}", {"metadata": metadata})

    # -- styles, categories, glassware -------------------------------------

    def get_all_styles(self) -> Any:
        return self._request("styles", {})

    def get_style(self, style_id: int | str) -> Any:
        return self._request(f"styles/{style_id}", {})

    def get_all_categories(self) -> Any:
        return self._request("categories", {})

    def get_category(self, category_id: int | str) -> Any:
        return self._request(f"categories/{category_id}", {})

    def get_all_glassware(self) -> Any:
        return self._request("glassware", {})

    def get_glassware(self, glassware_id: int | str) -> Any:
        return self._request(f"glassware/{glassware_id}", {})

    # -- search & featured -------------------------------------------------

    def search(
        self,
        query: str,
        type: str = "",
        metadata: bool = True,
        page: int = 1,
    ) -> Any:
        """Full-text search over beers and breweries.

        Args:
            query: Text to search for.
            type: ``"beer"``, ``"brewery"`` or ``""`` for both.
            metadata: Whether to include metadata in the results.
            page: Page number to fetch.

        Raises:
            ConfigurationError: ``type`` is not one of the accepted values.
        """
        type = (type or "").lower()
        if type not in SEARCH_TYPES:
            raise ConfigurationError(
                'Type must be either "beer", "brewery", or empty'
            )

        args: dict[str, Any] = {"q": query, "page": page, "metadata": metadata}
        if type:
            args["type"] = type
        return self._request("search", args)

    def get_featured(self) -> Any:
        """Return the currently featured brewery and beer."""
        return self._request("featured", {})
