"""Transport-level errors reported by HttpClient."""


class HttpClientError(Exception):
    """Base class for failures of the underlying HTTP transfer."""


class RequestTimeoutError(HttpClientError):
    """The request did not complete within the configured timeout."""


class ConnectionFailedError(HttpClientError):
    """Connection could not be established (DNS, refused, TLS handshake)."""
