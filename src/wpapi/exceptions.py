"""Exception hierarchy for wpapi.

All exceptions inherit from :class:`WPAPIError`. Configuration and route
registration problems are raised synchronously, at the moment the client
is constructed or a route map is merged, never deferred to the point a
request is issued. Transport errors wrap the HTTP status of a failed
request.

Subclass hierarchy::

    WPAPIError
    +-- ConfigurationError
    +-- UnknownNamespaceError
    +-- DescriptorError
    +-- RouteLoadError
    +-- DiscoveryError
    +-- ConnectionError_
    +-- HTTPError
        +-- AuthError      (401 / 403)
        +-- NotFoundError  (404)
        +-- ServerError    (5xx)
"""

from __future__ import annotations


class WPAPIError(Exception):
    """Base exception for all wpapi errors."""


class ConfigurationError(WPAPIError):
    """Raised for invalid client options (missing or non-string endpoint, bad transport)."""


class UnknownNamespaceError(WPAPIError):
    """Raised when a namespace is requested that was never bootstrapped."""


class DescriptorError(WPAPIError):
    """Raised for malformed route descriptors or unparseable path templates."""


class RouteLoadError(WPAPIError):
    """Raised when a route map cannot be read from a file, URL, or stdin."""


class DiscoveryError(WPAPIError):
    """Raised when the API root cannot be located or its index fetched."""


class ConnectionError_(WPAPIError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """


class HTTPError(WPAPIError):
    """Raised when the API answers with an error status.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status code of the response.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(HTTPError):
    """Raised when authentication or authorisation fails (HTTP 401 / 403)."""


class NotFoundError(HTTPError):
    """Raised when the API returns HTTP 404 (resource not found)."""


class ServerError(HTTPError):
    """Raised when the API returns an HTTP 5xx server error."""
