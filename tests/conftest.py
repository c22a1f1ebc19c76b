"""Shared test fixtures for wpapi.

Provides small route maps, a client bootstrapped from them, and a
transport table of mocks. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from wpapi import WPAPI
from wpapi.output import OutputManager, reset_output, set_output
from wpapi.transport import table
from wpapi.transport.table import TransportTable


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a quiet OutputManager for each test and drop it afterwards.

    The OutputManager caches a reference to sys.stderr at creation time.
    When pytest swaps the stream for capture and the test finishes, the
    cached reference becomes stale. Resetting forces a fresh manager to be
    created on next use.
    """
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Route maps
# ---------------------------------------------------------------------------


def _descriptor(namespace: str, methods: list[str], args: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "namespace": namespace,
        "methods": methods,
        "endpoints": [{"methods": methods, "args": args or {}}],
    }


@pytest.fixture
def custom_routes() -> dict[str, Any]:
    """A plugin namespace with a parameterised endpoint."""
    return {
        "/myplugin/v1": _descriptor("myplugin/v1", ["GET"], {"namespace": {}}),
        "/myplugin/v1/customendpoint/(?P<thing>[\\w-]+)": {
            "namespace": "myplugin/v1",
            "methods": ["GET", "POST"],
            "endpoints": [
                {"methods": ["GET"], "args": {"parent": {"required": False}}},
                {"methods": ["POST"], "args": {"title": {"required": True}}},
            ],
        },
    }


@pytest.fixture
def posts_routes() -> dict[str, Any]:
    """A trimmed ``wp/v2`` map with posts, revisions and users."""
    return {
        "/wp/v2": _descriptor("wp/v2", ["GET"]),
        "/wp/v2/posts": _descriptor(
            "wp/v2",
            ["GET", "POST"],
            {"filter": {}, "status": {}, "before": {}, "categories": {}, "_fields": {}},
        ),
        "/wp/v2/posts/(?P<id>[\\d]+)": _descriptor(
            "wp/v2", ["GET", "PUT", "DELETE"], {"id": {}, "force": {}}
        ),
        "/wp/v2/posts/(?P<parent>[\\d]+)/revisions": _descriptor("wp/v2", ["GET"]),
        "/wp/v2/posts/(?P<parent>[\\d]+)/revisions/(?P<id>[\\d]+)": _descriptor(
            "wp/v2", ["GET", "DELETE"]
        ),
        "/wp/v2/users": _descriptor("wp/v2", ["GET", "POST"], {"roles": {}}),
        "/wp/v2/users/(?P<id>[\\d]+)": _descriptor("wp/v2", ["GET"]),
        "/wp/v2/users/me": _descriptor("wp/v2", ["GET"]),
    }


@pytest.fixture
def site(posts_routes: dict[str, Any]) -> WPAPI:
    """A client for ``endpoint/url/`` bootstrapped with :func:`posts_routes`."""
    return WPAPI.site("endpoint/url", posts_routes)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


@pytest.fixture
def default_transport(monkeypatch: pytest.MonkeyPatch) -> TransportTable:
    """Replace the process-wide default transport with MagicMocks."""
    mocks = TransportTable(
        get=MagicMock(name="default_get", return_value="default get"),
        head=MagicMock(name="default_head", return_value="default head"),
        post=MagicMock(name="default_post", return_value="default post"),
        put=MagicMock(name="default_put", return_value="default put"),
        delete=MagicMock(name="default_delete", return_value="default delete"),
    )
    monkeypatch.setattr(table, "DEFAULT_TRANSPORT", mocks)
    return mocks
