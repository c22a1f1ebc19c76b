"""Response handling for the default HTTP transport.

Maps an :class:`httpx.Response` onto the values transport functions
return:

* :func:`extract_response_data` -- decoded JSON, raw text, or ``None``.
* :func:`parse_paging` -- ``X-WP-Total`` / ``X-WP-TotalPages`` headers
  and ``Link`` relations, with ``next``/``prev`` turned into request
  builders.
* :class:`PagedList` -- a ``list`` of collection items carrying its
  :class:`~wpapi.models.Paging`.
* :func:`raise_for_status` -- typed exceptions for 4xx/5xx statuses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import httpx

from wpapi.exceptions import AuthError, HTTPError, NotFoundError, ServerError
from wpapi.models import Paging

if TYPE_CHECKING:
    from wpapi.request import Request


class PagedList(list):
    """A page of collection results.

    Behaves exactly like the decoded JSON list, with the pagination
    metadata attached as :attr:`paging`.
    """

    def __init__(self, items: list[Any], paging: Optional[Paging] = None) -> None:
        super().__init__(items)
        self.paging = paging or Paging()


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first. If that fails (e.g. the
    response is HTML or plain text), returns the raw text. Returns
    ``None`` for responses with no content.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _int_header(response: httpx.Response, name: str) -> Optional[int]:
    value = response.headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_paging(response: httpx.Response, request: Request) -> Paging:
    """Build :class:`~wpapi.models.Paging` from a collection response.

    ``next`` and ``prev`` are derived from *request* so they keep its
    credentials, headers and transport.
    """
    links = {
        rel: link["url"]
        for rel, link in response.links.items()
        if link.get("url")
    }
    return Paging(
        total=_int_header(response, "X-WP-Total"),
        total_pages=_int_header(response, "X-WP-TotalPages"),
        links=links,
        next=request.derive(links["next"]) if "next" in links else None,
        prev=request.derive(links["prev"]) if "prev" in links else None,
    )


def build_result(response: httpx.Response, request: Request) -> Any:
    """Return the decoded body, wrapping list bodies in a :class:`PagedList`."""
    data = extract_response_data(response)
    if isinstance(data, list):
        return PagedList(data, parse_paging(response, request))
    return data


def raise_for_status(response: httpx.Response) -> None:
    """Raise a typed exception for error HTTP status codes.

    WordPress error bodies look like ``{"code": ..., "message": ...}``;
    the message is included in the exception text when present.

    Raises:
        AuthError: On 401 / 403.
        NotFoundError: On 404.
        ServerError: On 5xx.
        HTTPError: On any other 4xx.
    """
    status = response.status_code
    if status < 400:
        return

    try:
        detail = response.json()
        if isinstance(detail, dict):
            msg = detail.get("message") or detail.get("error") or detail.get("code") or ""
        else:
            msg = str(detail)
    except ValueError:
        msg = response.text[:200] if response.text else ""

    prefix = f"HTTP {status}"
    full_msg = f"{prefix}: {msg}" if msg else prefix

    if status in (401, 403):
        raise AuthError(full_msg, status_code=status)
    if status == 404:
        raise NotFoundError(full_msg, status_code=status)
    if status >= 500:
        raise ServerError(full_msg, status_code=status)
    raise HTTPError(full_msg, status_code=status)
