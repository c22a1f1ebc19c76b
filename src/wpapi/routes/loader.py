"""Load route maps from a URL, local file, or stdin.

A route map is either the ``routes`` object of an API index document (as
served at ``/wp-json/``) or a bare mapping from path template to route
descriptor. Both JSON and YAML are accepted, with format detection from
the file extension or ``Content-Type`` header.

The public functions are:

* :func:`load_routes` -- Load a route map from any supported source.
* :func:`load_default_routes` -- The bundled ``wp/v2`` route map used
  when a client is constructed without explicit routes.
"""

from __future__ import annotations

import copy
import json
import sys
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx
import yaml

from wpapi.exceptions import RouteLoadError

_DEFAULT_ROUTES_PATH = Path(__file__).resolve().parent.parent / "data" / "default-routes.json"


def load_routes(source: str) -> dict[str, Any]:
    """Load a route map from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        Mapping from path template to raw descriptor dict. When the
        document is a full API index, its ``routes`` member is returned.

    Raises:
        RouteLoadError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        document = _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        document = _load_from_url(source)
    else:
        document = _load_from_file(source)
    return extract_routes(document)


def extract_routes(document: Mapping[str, Any]) -> dict[str, Any]:
    """Return the route map held by *document*.

    An API index carries its routes under a ``routes`` key next to
    ``name``, ``namespaces``, ``authentication`` etc.; anything else is
    assumed to already be a route map. Index routes without a namespace
    (the ``/`` index route itself) are dropped.
    """
    if "routes" not in document:
        return dict(document)
    routes = document["routes"]
    if not isinstance(routes, Mapping):
        raise RouteLoadError(
            f"Route map must be an object (got {type(routes).__name__})"
        )
    return {
        template: descriptor
        for template, descriptor in routes.items()
        if not isinstance(descriptor, Mapping) or descriptor.get("namespace")
    }


@lru_cache(maxsize=1)
def _read_default_routes() -> dict[str, Any]:
    return _load_from_file(str(_DEFAULT_ROUTES_PATH))


def load_default_routes() -> dict[str, Any]:
    """Return a copy of the bundled ``wp/v2`` route map."""
    return copy.deepcopy(_read_default_routes())


def _load_from_stdin() -> dict[str, Any]:
    """Read a route map from stdin.

    Raises:
        RouteLoadError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise RouteLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise RouteLoadError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a route map or API index from *url*.

    Raises:
        RouteLoadError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise RouteLoadError(
            f"HTTP {exc.response.status_code} fetching routes from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise RouteLoadError(f"Failed to fetch routes from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a route map from a local .json/.yaml/.yml file.

    Raises:
        RouteLoadError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise RouteLoadError(f"Route file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RouteLoadError(f"Failed to read route file {path}: {exc}") from exc

    if not content.strip():
        raise RouteLoadError(f"Route file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.

    Raises:
        RouteLoadError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise RouteLoadError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise RouteLoadError(
                    f"Route document must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if not isinstance(result, dict):
            raise RouteLoadError(
                "Route document must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result

    msg = "Failed to parse routes as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise RouteLoadError(msg)
