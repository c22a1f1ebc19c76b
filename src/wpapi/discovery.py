"""Locate a site's REST API and fetch its route map.

WordPress advertises its API root on every front-end response with::

    Link: <https://example.com/wp-json/>; rel="https://api.w.org/"

:func:`locate_api_root` reads that header (``HEAD`` first, falling back to
``GET`` for servers that strip headers from ``HEAD`` responses), and
:func:`discover` fetches the index document at the root and returns its
route map, ready for :meth:`wpapi.client.WPAPI.bootstrap`.
"""

from __future__ import annotations

from typing import Any

import httpx

from wpapi.exceptions import DiscoveryError, RouteLoadError
from wpapi.output import get_output
from wpapi.routes.loader import extract_routes

API_LINK_REL = "https://api.w.org/"

_TIMEOUT = 30.0


def _make_client() -> httpx.Client:
    """Create the :class:`httpx.Client` used for discovery requests."""
    return httpx.Client(timeout=_TIMEOUT, follow_redirects=True)


def _api_link(response: httpx.Response) -> str | None:
    link = response.links.get(API_LINK_REL)
    if link and link.get("url"):
        return link["url"]
    return None


def locate_api_root(url: str) -> str:
    """Return the API root advertised by the site at *url*.

    Raises:
        DiscoveryError: If the site cannot be reached or advertises no
            API link.
    """
    output = get_output()
    try:
        with _make_client() as client:
            response = client.head(url)
            root = _api_link(response)
            if root is None:
                output.debug(f"No API link on HEAD {url}; retrying with GET")
                response = client.get(url)
                root = _api_link(response)
    except httpx.RequestError as exc:
        raise DiscoveryError(f"Could not reach {url}: {exc}") from exc

    if root is None:
        raise DiscoveryError(
            f"No Link header with rel={API_LINK_REL!r} found at {url}"
        )
    return root


def fetch_routes(api_root: str) -> dict[str, Any]:
    """Fetch the index at *api_root* and return its route map.

    Descriptors without a namespace (such as the index route itself) are
    dropped.

    Raises:
        DiscoveryError: If the index cannot be fetched or is not a JSON
            object with a ``routes`` member.
    """
    try:
        with _make_client() as client:
            response = client.get(api_root)
        response.raise_for_status()
        document = response.json()
    except httpx.HTTPStatusError as exc:
        raise DiscoveryError(
            f"HTTP {exc.response.status_code} fetching API index {api_root}"
        ) from exc
    except httpx.RequestError as exc:
        raise DiscoveryError(f"Could not fetch API index {api_root}: {exc}") from exc
    except ValueError as exc:
        raise DiscoveryError(f"API index at {api_root} is not valid JSON") from exc

    if not isinstance(document, dict):
        raise DiscoveryError(f"API index at {api_root} is not a JSON object")
    try:
        return extract_routes(document)
    except RouteLoadError as exc:
        raise DiscoveryError(str(exc)) from exc


def discover(url: str) -> tuple[str, dict[str, Any]]:
    """Find the API behind *url* and return ``(api_root, route_map)``.

    Raises:
        DiscoveryError: See :func:`locate_api_root` and :func:`fetch_routes`.
    """
    output = get_output()
    api_root = locate_api_root(url)
    output.info(f"Discovered API root {api_root}")
    routes = fetch_routes(api_root)
    output.debug(f"Fetched {len(routes)} route(s) from {api_root}")
    return api_root, routes
