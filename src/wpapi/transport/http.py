"""Default HTTP transport functions backed by :mod:`httpx`.

Each function takes a request builder, materializes its URL via
``request.to_string()``, and performs one HTTP call:

* :func:`get` returns the decoded body; JSON lists come back as a
  :class:`~wpapi.transport.response.PagedList`.
* :func:`head` returns the response headers as a ``dict``.
* :func:`post`, :func:`put` and :func:`delete` send ``data`` as a JSON
  body (or as multipart form fields alongside an attached file) and
  return the decoded body.

Credentials come from the builder's options: HTTP Basic auth when
``auth`` is set together with a username and password, and an
``X-WP-Nonce`` header when ``auth`` is set together with a nonce.

When a ``callback`` is passed it is called with the result, and the
result is also returned. Errors are raised, never handed to the callback.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional

import httpx

from wpapi.exceptions import ConnectionError_
from wpapi.output import get_output
from wpapi.transport.response import build_result, extract_response_data, raise_for_status

if TYPE_CHECKING:
    from wpapi.request import Request

Callback = Optional[Callable[[Any], Any]]

_TIMEOUT = 30.0


def _make_client() -> httpx.Client:
    """Create the :class:`httpx.Client` used for a single call."""
    return httpx.Client(timeout=_TIMEOUT, follow_redirects=True)


def _build_kwargs(method: str, request: Request, data: Any) -> dict[str, Any]:
    options = request.options
    headers: dict[str, str] = {"Accept": "application/json"}
    headers.update(options.headers)
    kwargs: dict[str, Any] = {"headers": headers}

    if options.auth:
        if options.username and options.password:
            kwargs["auth"] = httpx.BasicAuth(options.username, options.password)
        if options.nonce:
            headers["X-WP-Nonce"] = options.nonce

    attachment = request.attachment
    if method == "POST" and attachment is not None:
        content, name = attachment
        if isinstance(content, (str, Path)):
            path = Path(content)
            content = path.read_bytes()
            name = name or path.name
        kwargs["files"] = {"file": (name or "upload", content)}
        if data:
            kwargs["data"] = {key: str(value) for key, value in data.items()}
    elif data is not None:
        kwargs["json"] = data
    return kwargs


def _send(method: str, request: Request, data: Any = None) -> httpx.Response:
    """Perform *method* against *request*'s URL and raise on error statuses.

    Raises:
        ConnectionError_: On network / timeout errors.
        HTTPError: (or a subclass) on 4xx / 5xx responses.
    """
    url = request.to_string()
    kwargs = _build_kwargs(method, request, data)
    get_output().debug(f"{method} {url}")

    try:
        with _make_client() as client:
            response = client.request(method, url, **kwargs)
    except httpx.RequestError as exc:
        raise ConnectionError_(f"{method} {url} failed: {exc}") from exc

    raise_for_status(response)
    return response


def _finish(result: Any, callback: Callback) -> Any:
    if callback is not None:
        callback(result)
    return result


def get(request: Request, callback: Callback = None) -> Any:
    """Send a GET request and return the decoded body."""
    response = _send("GET", request)
    return _finish(build_result(response, request), callback)


def head(request: Request, callback: Callback = None) -> dict[str, str]:
    """Send a HEAD request and return the response headers."""
    response = _send("HEAD", request)
    return _finish(dict(response.headers), callback)


def post(request: Request, data: Any = None, callback: Callback = None) -> Any:
    """Send a POST request with *data* and return the decoded body."""
    response = _send("POST", request, data)
    return _finish(extract_response_data(response), callback)


def put(request: Request, data: Any = None, callback: Callback = None) -> Any:
    """Send a PUT request with *data* and return the decoded body."""
    response = _send("PUT", request, data)
    return _finish(extract_response_data(response), callback)


def delete(request: Request, data: Any = None, callback: Callback = None) -> Any:
    """Send a DELETE request with *data* and return the decoded body."""
    response = _send("DELETE", request, data)
    return _finish(extract_response_data(response), callback)
