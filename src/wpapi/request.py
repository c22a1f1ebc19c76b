"""Chainable request builder.

A :class:`Request` accumulates everything needed to address one API
resource: the client endpoint, a namespace, an ordered set of *path
levels*, and query parameters. ``str(request)`` materializes the URL::

    <endpoint><namespace>/<level 0>/<level 1>/...?<sorted query>

Unset levels are omitted. Query keys are sorted; mapping values render as
``key[sub]=v``, sequences as ``key[]=v``, booleans in lower case, and
square brackets are left unescaped.

The verb methods (:meth:`Request.get`, :meth:`Request.create`, ...) do
not perform I/O themselves: each resolves a transport function through
:func:`~wpapi.transport.table.resolve_transport` and passes the builder
to it. Handler factories generated from a route map produce *subclasses*
of :class:`Request` that add path setters and argument mixins; see
:mod:`wpapi.handlers`.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Optional, Union

import httpx

from wpapi.models import RequestOptions
from wpapi.transport import table


def apply_credentials(
    options: RequestOptions,
    username_or_opts: Union[str, Mapping[str, Any], None] = None,
    password: Optional[str] = None,
) -> None:
    """Enable authentication on *options* and record any credentials given.

    * No arguments: only ``auth`` is switched on.
    * Two strings: ``username`` and ``password`` are set.
    * One mapping: whichever of ``username``, ``password`` and ``nonce``
      it contains are copied.

    Previously stored values are overwritten, never merged.
    """
    options.auth = True
    if isinstance(username_or_opts, Mapping):
        for key in ("username", "password", "nonce"):
            if key in username_or_opts:
                setattr(options, key, username_or_opts[key])
        return
    if username_or_opts is not None:
        options.username = username_or_opts
    if password is not None:
        options.password = password


def merge_headers(
    options: RequestOptions,
    headers_or_name: Union[str, Mapping[str, str]],
    value: Optional[str] = None,
) -> None:
    """Merge one header, or a mapping of headers, into *options*."""
    if isinstance(headers_or_name, Mapping):
        options.headers.update({k: str(v) for k, v in headers_or_name.items()})
    elif value is not None:
        options.headers[headers_or_name] = str(value)


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def _flatten_param(key: str, value: Any) -> list[tuple[str, str]]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        pairs: list[tuple[str, str]] = []
        for sub in sorted(value):
            pairs.extend(_flatten_param(f"{key}[{sub}]", value[sub]))
        return pairs
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        return [(f"{key}[]", _render_value(item)) for item in items]
    return [(key, _render_value(value))]


class Request:
    """A chainable builder for one API request.

    Args:
        options: The whitelisted options this request was created with.
            The builder owns this record; mutating it (e.g. through
            :meth:`auth`) never affects the client it came from.
        transport: The owning client's live transport override dict, or
            ``None`` to always use the default transport table.
        namespace: Namespace path inserted between the endpoint and the
            path levels (e.g. ``"wp/v2"``).

    Example::

        request = Request(RequestOptions(endpoint="https://example.com/wp-json/"))
        request.namespace("wp/v2").set_path_part(0, "posts").page(2)
        str(request)  # 'https://example.com/wp-json/wp/v2/posts?page=2'
    """

    #: Upper-cased verbs the route declared; informational only.
    supported_methods: frozenset[str] = frozenset(
        {"HEAD", "GET", "POST", "PUT", "PATCH", "DELETE"}
    )
    #: Resource key of the generated handler, ``None`` on plain requests.
    resource: Optional[str] = None
    #: Path levels filled by positional factory arguments, in order.
    path_param_levels: tuple[int, ...] = ()
    #: Literal-only levels filled implicitly between positional path values.
    implicit_literals: Mapping[int, str] = {}
    #: Names accepted as keyword arguments by a handler factory.
    setter_names: frozenset[str] = frozenset(
        {"page", "per_page", "offset", "order", "orderby", "search",
         "include", "exclude", "slug", "context"}
    )

    def __init__(
        self,
        options: RequestOptions,
        transport: Optional[Mapping[str, Callable[..., Any]]] = None,
        namespace: str = "",
    ) -> None:
        self._options = options
        self._transport = transport
        self._namespace = namespace
        self._path: dict[int, str] = {}
        self._params: dict[str, Any] = {}
        self._attachment: Optional[tuple[Any, Optional[str]]] = None

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def options(self) -> RequestOptions:
        """The options record owned by this request."""
        return self._options

    @property
    def transport(self) -> Optional[Mapping[str, Callable[..., Any]]]:
        """The live transport override dict this request dispatches through."""
        return self._transport

    @property
    def params(self) -> dict[str, Any]:
        """A copy of the query parameters set so far."""
        return dict(self._params)

    @property
    def attachment(self) -> Optional[tuple[Any, Optional[str]]]:
        """The ``(content, filename)`` pair set by :meth:`file`, if any."""
        return self._attachment

    # ------------------------------------------------------------------ #
    # Path and query setters
    # ------------------------------------------------------------------ #

    def namespace(self, namespace: str) -> Request:
        """Set the namespace inserted before the path levels."""
        self._namespace = namespace.strip("/")
        return self

    def set_path_part(self, level: int, value: Any) -> Request:
        """Set path *level* to *value* (stringified)."""
        self._path[level] = str(value)
        return self

    def param(
        self,
        name_or_params: Union[str, Mapping[str, Any]],
        value: Any = None,
    ) -> Request:
        """Set one query parameter, or several from a mapping.

        A ``None`` value leaves the parameter untouched.
        """
        if isinstance(name_or_params, Mapping):
            for key, val in name_or_params.items():
                self.param(key, val)
            return self
        if value is None:
            return self
        self._params[name_or_params] = value
        return self

    def page(self, number: int) -> Request:
        """Request the given 1-based page of a collection."""
        return self.param("page", number)

    def per_page(self, count: int) -> Request:
        """Set the maximum number of items per page."""
        return self.param("per_page", count)

    def offset(self, count: int) -> Request:
        """Skip *count* items before the first returned item."""
        return self.param("offset", count)

    def order(self, direction: str) -> Request:
        """Set the sort direction (``asc`` or ``desc``)."""
        return self.param("order", direction)

    def orderby(self, field: str) -> Request:
        """Set the field collections are sorted by."""
        return self.param("orderby", field)

    def search(self, term: str) -> Request:
        return self.param("search", term)

    def include(self, ids: Any) -> Request:
        return self.param("include", ids)

    def exclude(self, ids: Any) -> Request:
        return self.param("exclude", ids)

    def slug(self, slug: str) -> Request:
        return self.param("slug", slug)

    def context(self, context: str) -> Request:
        """Set the response context (``view``, ``embed`` or ``edit``)."""
        return self.param("context", context)

    def edit(self) -> Request:
        """Shorthand for ``context("edit")``."""
        return self.context("edit")

    def embed(self) -> Request:
        """Ask the server to embed linked resources (``_embed``)."""
        return self.param("_embed", True)

    # ------------------------------------------------------------------ #
    # Credentials, headers, attachments
    # ------------------------------------------------------------------ #

    def auth(
        self,
        username_or_opts: Union[str, Mapping[str, Any], None] = None,
        password: Optional[str] = None,
    ) -> Request:
        """Enable authentication for this request only.

        Accepts the same arguments as :meth:`wpapi.client.WPAPI.auth`.
        """
        apply_credentials(self._options, username_or_opts, password)
        return self

    def set_headers(
        self,
        headers_or_name: Union[str, Mapping[str, str]],
        value: Optional[str] = None,
    ) -> Request:
        """Add headers sent with this request only."""
        merge_headers(self._options, headers_or_name, value)
        return self

    def file(self, content: Union[str, Path, bytes], name: Optional[str] = None) -> Request:
        """Attach a file to upload with the next :meth:`create` call.

        Args:
            content: A filesystem path or raw bytes.
            name: The filename to send; defaults to the path's basename.
        """
        self._attachment = (content, name)
        return self

    # ------------------------------------------------------------------ #
    # URL materialization
    # ------------------------------------------------------------------ #

    def _render_path(self) -> str:
        parts = [self._namespace] + [self._path[level] for level in sorted(self._path)]
        return "/".join(part for part in parts if part)

    def _render_query(self) -> str:
        pairs: list[tuple[str, str]] = []
        for key in sorted(self._params):
            pairs.extend(_flatten_param(key, self._params[key]))
        if not pairs:
            return ""
        query = str(httpx.QueryParams(pairs))
        return query.replace("%5B", "[").replace("%5D", "]")

    def to_string(self) -> str:
        """Return the fully materialized URL for this request."""
        url = self._options.endpoint + self._render_path()
        query = self._render_query()
        if query:
            url += ("&" if "?" in url else "?") + query
        return url

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.to_string()}>"

    def derive(self, url: str) -> Request:
        """Return a plain request for *url* that shares this request's
        credentials, headers and transport."""
        return Request(
            self._options.model_copy(update={"endpoint": url}, deep=True),
            transport=self._transport,
        )

    # ------------------------------------------------------------------ #
    # Verbs
    # ------------------------------------------------------------------ #

    def get(self, callback: Optional[Callable[[Any], Any]] = None) -> Any:
        """Issue a GET through the ``get`` transport."""
        return table.resolve_transport("get", self._transport)(self, callback)

    def head(self, callback: Optional[Callable[[Any], Any]] = None) -> Any:
        """Issue a HEAD through the ``head`` transport."""
        return table.resolve_transport("head", self._transport)(self, callback)

    def create(self, data: Any = None, callback: Optional[Callable[[Any], Any]] = None) -> Any:
        """Issue a POST with *data* through the ``post`` transport."""
        return table.resolve_transport("post", self._transport)(self, data, callback)

    def update(self, data: Any = None, callback: Optional[Callable[[Any], Any]] = None) -> Any:
        """Issue a PUT with *data* through the ``put`` transport."""
        return table.resolve_transport("put", self._transport)(self, data, callback)

    def delete(self, data: Any = None, callback: Optional[Callable[[Any], Any]] = None) -> Any:
        """Issue a DELETE with *data* through the ``delete`` transport."""
        return table.resolve_transport("delete", self._transport)(self, data, callback)
