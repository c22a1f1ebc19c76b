"""Canonical Pydantic models shared across all wpapi modules.

The models fall into three groups:

**Route map models**: the declarative description of an API, as served
by a WordPress-style index endpoint under its ``routes`` key:
    :class:`ArgSchema`, :class:`EndpointVariant`, and
    :class:`RouteDescriptor`.

**Path template tokens**: produced by
:func:`~wpapi.routes.template.parse_template`:
    :class:`PathLiteral` and :class:`PathParam`.

**Option records**: per-client and per-request configuration:
    :class:`RequestOptions`, :class:`ClientOptions`, and :class:`Paging`.

Route map models use ``extra="allow"`` so that keys the engine does not
interpret (``_links``, ``schema``, ...) survive a round trip.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Route map models ---


class ArgSchema(BaseModel):
    """Schema of a single argument accepted by an endpoint variant.

    Only ``required`` is part of the route contract; the remaining fields
    are carried for introspection. Values passed to argument mixins are
    never validated against this schema.
    """

    model_config = ConfigDict(extra="allow")

    required: bool = False
    description: Optional[str] = None
    type: Optional[Union[str, list[str]]] = None
    default: Any = None
    enum: Optional[list[Any]] = None


class EndpointVariant(BaseModel):
    """One verb-specific variant of a route (e.g. the ``GET`` or ``POST`` form)."""

    model_config = ConfigDict(extra="allow")

    methods: list[str] = Field(default_factory=list)
    args: dict[str, ArgSchema] = Field(default_factory=dict)


class RouteDescriptor(BaseModel):
    """Declarative record of one API path.

    A route map is a mapping from a path template (e.g.
    ``/wp/v2/posts/(?P<id>[\\d]+)``) to one of these descriptors.

    Example::

        RouteDescriptor(
            namespace="wp/v2",
            methods=["GET"],
            endpoints=[EndpointVariant(methods=["GET"], args={"filter": {}})],
        )
    """

    model_config = ConfigDict(extra="allow")

    namespace: str = Field(min_length=1)
    methods: list[str] = Field(default_factory=list)
    endpoints: list[EndpointVariant] = Field(default_factory=list)

    @field_validator("namespace")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        stripped = value.strip().strip("/")
        if not stripped:
            raise ValueError("namespace must not be blank")
        return stripped


# --- Path template tokens ---


class PathLiteral(BaseModel):
    """A literal path segment, e.g. ``posts`` in ``/wp/v2/posts``."""

    model_config = ConfigDict(frozen=True)

    value: str


class PathParam(BaseModel):
    """A named, pattern-constrained path parameter, e.g. ``(?P<id>[\\d]+)``."""

    model_config = ConfigDict(frozen=True)

    name: str
    pattern: str


# --- Option records ---

# Keys copied from a client's options onto every request it creates.
REQUEST_OPTION_KEYS = frozenset(
    {"endpoint", "auth", "username", "password", "nonce", "headers"}
)


class RequestOptions(BaseModel):
    """Options carried by a single request builder.

    Holds only the whitelisted keys from :data:`REQUEST_OPTION_KEYS`;
    anything else is dropped on construction so that arbitrary
    client-level passthrough keys never reach a request.
    """

    endpoint: str
    auth: bool = False
    username: Optional[str] = None
    password: Optional[str] = None
    nonce: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)


class ClientOptions(RequestOptions):
    """Mutable per-client option record.

    Created when a :class:`~wpapi.client.WPAPI` is constructed, mutated
    in place by ``auth()``, ``transport()`` and ``set_headers()``.
    Unknown constructor keys are preserved and accessible via
    ``model_extra``.

    ``endpoint`` is normalized to end with exactly one ``/``.
    """

    model_config = ConfigDict(extra="allow")

    transport: dict[str, Callable[..., Any]] = Field(default_factory=dict)

    @field_validator("endpoint")
    @classmethod
    def _normalize_endpoint(cls, value: str) -> str:
        return value if value.endswith("/") else value + "/"

    def request_options(self, **overrides: Any) -> RequestOptions:
        """Snapshot the whitelisted subset of these options for a new request."""
        data = self.model_dump(include=set(REQUEST_OPTION_KEYS))
        data.update(overrides)
        return RequestOptions.model_validate(data)


class Paging(BaseModel):
    """Pagination metadata parsed from a collection response.

    ``next`` and ``prev`` are request builders bound to the adjacent pages
    when the server advertises them in its ``Link`` header.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    total: Optional[int] = None
    total_pages: Optional[int] = None
    links: dict[str, str] = Field(default_factory=dict)
    next: Any = None
    prev: Any = None
