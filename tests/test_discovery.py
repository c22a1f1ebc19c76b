"""Tests for API discovery."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from wpapi import WPAPI, discovery
from wpapi.exceptions import DiscoveryError

SITE = "https://example.com"
API_ROOT = "https://example.com/wp-json/"
API_LINK = f'<{API_ROOT}>; rel="https://api.w.org/"'

INDEX = {
    "name": "Example",
    "namespaces": ["wp/v2", "myplugin/v1"],
    "routes": {
        "/": {"namespace": "", "methods": ["GET"], "endpoints": []},
        "/wp/v2": {"namespace": "wp/v2", "methods": ["GET"], "endpoints": []},
        "/wp/v2/posts": {
            "namespace": "wp/v2",
            "methods": ["GET"],
            "endpoints": [{"methods": ["GET"], "args": {"status": {}}}],
        },
        "/myplugin/v1/books/(?P<id>\\d+)": {
            "namespace": "myplugin/v1",
            "methods": ["GET"],
            "endpoints": [],
        },
    },
}


@pytest.fixture
def mock_site(monkeypatch: pytest.MonkeyPatch) -> Callable[..., list[httpx.Request]]:
    """Serve *handler* for every discovery request and record what was sent."""

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> list[httpx.Request]:
        seen: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        monkeypatch.setattr(
            discovery,
            "_make_client",
            lambda: httpx.Client(transport=httpx.MockTransport(record)),
        )
        return seen

    return install


def _wordpress(head_link: bool = True, index: Any = INDEX, index_status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == API_ROOT:
            return httpx.Response(index_status, json=index)
        if request.method == "HEAD" and not head_link:
            return httpx.Response(200)
        return httpx.Response(200, headers={"Link": API_LINK}, text="<html></html>")

    return handler


class TestLocateApiRoot:
    def test_head_link(self, mock_site) -> None:
        seen = mock_site(_wordpress())
        assert discovery.locate_api_root(SITE) == API_ROOT
        assert [r.method for r in seen] == ["HEAD"]

    def test_falls_back_to_get(self, mock_site) -> None:
        seen = mock_site(_wordpress(head_link=False))
        assert discovery.locate_api_root(SITE) == API_ROOT
        assert [r.method for r in seen] == ["HEAD", "GET"]

    def test_no_link(self, mock_site) -> None:
        mock_site(lambda request: httpx.Response(200, text="plain site"))
        with pytest.raises(DiscoveryError, match="No Link header"):
            discovery.locate_api_root(SITE)

    def test_unreachable(self, mock_site) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        mock_site(fail)
        with pytest.raises(DiscoveryError, match="Could not reach"):
            discovery.locate_api_root(SITE)


class TestFetchRoutes:
    def test_drops_routes_without_namespace(self, mock_site) -> None:
        mock_site(_wordpress())
        routes = discovery.fetch_routes(API_ROOT)
        assert "/" not in routes
        assert "/wp/v2/posts" in routes

    def test_http_error(self, mock_site) -> None:
        mock_site(_wordpress(index_status=500))
        with pytest.raises(DiscoveryError, match="HTTP 500"):
            discovery.fetch_routes(API_ROOT)

    def test_invalid_json(self, mock_site) -> None:
        mock_site(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(DiscoveryError, match="not valid JSON"):
            discovery.fetch_routes(API_ROOT)

    def test_not_an_object(self, mock_site) -> None:
        mock_site(_wordpress(index=[1, 2]))
        with pytest.raises(DiscoveryError, match="not a JSON object"):
            discovery.fetch_routes(API_ROOT)

    def test_routes_not_an_object(self, mock_site) -> None:
        mock_site(_wordpress(index={"routes": "nope"}))
        with pytest.raises(DiscoveryError, match="must be an object"):
            discovery.fetch_routes(API_ROOT)


class TestDiscover:
    def test_returns_root_and_routes(self, mock_site) -> None:
        mock_site(_wordpress())
        api_root, routes = discovery.discover(SITE)
        assert api_root == API_ROOT
        assert "/myplugin/v1/books/(?P<id>\\d+)" in routes

    def test_client_discover(self, mock_site) -> None:
        mock_site(_wordpress())
        client = WPAPI.discover(SITE)
        assert client.options.endpoint == API_ROOT
        assert str(client.posts().status("draft")) == f"{API_ROOT}wp/v2/posts?status=draft"
        assert str(client.namespace("myplugin/v1").books(3)) == f"{API_ROOT}myplugin/v1/books/3"
        assert not hasattr(client, "pages")
