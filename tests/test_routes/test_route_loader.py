"""Tests for wpapi.routes.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from wpapi.exceptions import RouteLoadError
from wpapi.routes.loader import (
    _parse_content,
    extract_routes,
    load_default_routes,
    load_routes,
)

_ROUTE_MAP = {
    "/ns/v1/things": {"namespace": "ns/v1", "methods": ["GET"], "endpoints": []},
}


def _response(text: str, content_type: str = "application/json", status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        headers={"content-type": content_type},
        text=text,
        request=httpx.Request("GET", "https://example.com/wp-json/"),
    )


# ---------------------------------------------------------------------------
# load_routes dispatch
# ---------------------------------------------------------------------------


class TestLoadRoutes:
    def test_loads_bare_route_map_from_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.json"
        path.write_text(json.dumps(_ROUTE_MAP), encoding="utf-8")
        assert load_routes(str(path)) == _ROUTE_MAP

    def test_loads_index_document(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text(
            json.dumps({"name": "Site", "namespaces": ["ns/v1"], "routes": _ROUTE_MAP}),
            encoding="utf-8",
        )
        assert load_routes(str(path)) == _ROUTE_MAP

    def test_loads_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.yaml"
        path.write_text(
            textwrap.dedent("""\
                /ns/v1/things:
                  namespace: ns/v1
                  methods: [GET]
                  endpoints: []
            """),
            encoding="utf-8",
        )
        assert load_routes(str(path)) == _ROUTE_MAP

    def test_loads_from_stdin(self) -> None:
        with patch("sys.stdin", io.StringIO(json.dumps(_ROUTE_MAP))):
            assert load_routes("-") == _ROUTE_MAP

    def test_loads_from_url(self) -> None:
        with patch("wpapi.routes.loader.httpx.get", return_value=_response(json.dumps(_ROUTE_MAP))) as mock_get:
            assert load_routes("https://example.com/wp-json/") == _ROUTE_MAP
        mock_get.assert_called_once()


class TestLoadRoutesErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RouteLoadError, match="not found"):
            load_routes(str(tmp_path / "missing.json"))

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        path.write_text("  \n", encoding="utf-8")
        with pytest.raises(RouteLoadError, match="empty"):
            load_routes(str(path))

    def test_invalid_json_with_json_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RouteLoadError, match="Invalid JSON"):
            load_routes(str(path))

    def test_empty_stdin(self) -> None:
        with patch("sys.stdin", io.StringIO("")):
            with pytest.raises(RouteLoadError, match="No input"):
                load_routes("-")

    def test_http_error(self) -> None:
        with patch("wpapi.routes.loader.httpx.get", return_value=_response("{}", status_code=404)):
            with pytest.raises(RouteLoadError, match="HTTP 404"):
                load_routes("https://example.com/wp-json/")

    def test_network_error(self) -> None:
        with patch("wpapi.routes.loader.httpx.get", side_effect=httpx.ConnectError("refused")):
            with pytest.raises(RouteLoadError, match="Failed to fetch"):
                load_routes("https://example.com/wp-json/")

    def test_index_route_without_namespace_dropped(self, tmp_path: Path) -> None:
        index_route = {"namespace": "", "methods": ["GET"], "endpoints": []}
        path = tmp_path / "index.json"
        path.write_text(json.dumps({"routes": {"/": index_route, **_ROUTE_MAP}}), encoding="utf-8")
        assert load_routes(str(path)) == _ROUTE_MAP

    def test_bare_map_kept_as_is(self) -> None:
        route_map = {"/": {"namespace": ""}, **_ROUTE_MAP}
        assert extract_routes(route_map) == route_map

    def test_routes_member_must_be_object(self) -> None:
        with pytest.raises(RouteLoadError, match="must be an object"):
            extract_routes({"routes": ["not", "a", "map"]})


class TestParseContent:
    def test_json_array_rejected(self) -> None:
        with pytest.raises(RouteLoadError, match="must be a JSON/YAML object"):
            _parse_content("[1, 2]")

    def test_yaml_fallback_without_hint(self) -> None:
        assert _parse_content("a: 1") == {"a": 1}

    def test_unparseable(self) -> None:
        with pytest.raises(RouteLoadError, match="Failed to parse"):
            _parse_content("key: [unclosed")


class TestDefaultRoutes:
    def test_bundled_routes_cover_core_resources(self) -> None:
        routes = load_default_routes()
        for resource in ("posts", "pages", "media", "categories", "tags", "users", "comments"):
            assert f"/wp/v2/{resource}" in routes

    def test_returns_independent_copies(self) -> None:
        first = load_default_routes()
        first.clear()
        assert load_default_routes()
