"""The :class:`WPAPI` client.

A client owns two things and shares neither with any other client:

* a :class:`~wpapi.models.ClientOptions` record (endpoint, credentials,
  default headers, transport overrides, passthrough keys), mutated in
  place by :meth:`WPAPI.auth`, :meth:`WPAPI.transport` and
  :meth:`WPAPI.set_headers`;
* a :class:`~wpapi.namespaces.NamespaceRegistry` holding the handler
  factories generated for every bootstrapped route.

Handlers of :attr:`WPAPI.default_namespace` are also set as attributes
of the client itself, so ``client.posts`` and
``client.namespace("wp/v2").posts`` are the same factory object.

Example::

    site = WPAPI(endpoint="https://example.com/wp-json")
    site.auth("admin", "app-password")
    drafts = site.posts().status("draft").per_page(5).get()
    site.posts(42).update({"title": "Renamed"})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from wpapi import config, discovery
from wpapi.exceptions import ConfigurationError, DescriptorError
from wpapi.handlers import HandlerFactory
from wpapi.models import ClientOptions, PathParam
from wpapi.namespaces import Namespace, NamespaceRegistry
from wpapi.output import get_output
from wpapi.request import Request, apply_credentials, merge_headers
from wpapi.routes.loader import extract_routes, load_default_routes, load_routes
from wpapi.routes.template import parse_template
from wpapi.transport import table

RouteSource = Union[str, Mapping[str, Any], None]

# Instance attributes that generated handlers must never replace.
_RESERVED = frozenset({"options"})


class WPAPI:
    """Client for a WordPress-style REST API.

    Args:
        options: Mapping of client options. Merged with ``kwargs``, which
            take precedence.
        **kwargs: Client options:

            * ``endpoint`` (required) -- the API root URL.
            * ``username``, ``password``, ``nonce``, ``auth``, ``headers``.
            * ``transport`` -- partial mapping of verb to transport function.
            * ``routes`` -- route map (mapping, file path or URL) to bootstrap
              instead of the bundled ``wp/v2`` routes.
            * any other key is kept on :attr:`options` as passthrough.

    Raises:
        ConfigurationError: If ``endpoint`` is missing, empty or not a
            string, or any other option is invalid.
    """

    #: Process-wide default transport table (immutable).
    default_transport = table.DEFAULT_TRANSPORT
    #: Namespace whose handlers are exposed directly on the client.
    default_namespace = "wp/v2"

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        if options is not None and not isinstance(options, Mapping):
            raise ConfigurationError(
                f"Client options must be a mapping, got {type(options).__name__}"
            )
        settings: dict[str, Any] = dict(options or {})
        settings.update(kwargs)

        endpoint = settings.get("endpoint")
        if not isinstance(endpoint, str) or not endpoint:
            raise ConfigurationError(
                "An 'endpoint' option (a non-empty string) is required, "
                f"got {type(endpoint).__name__}"
            )
        routes = settings.pop("routes", None)
        settings["transport"] = table.validate_overrides(settings.get("transport"))

        try:
            self.options = ClientOptions(**settings)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid client options: {exc}") from exc
        self._registry = NamespaceRegistry(self.options)
        self.bootstrap(routes)

    def __repr__(self) -> str:
        return f"<WPAPI endpoint={self.options.endpoint!r} namespaces={self._registry.names}>"

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def auth(
        self,
        username_or_opts: Union[str, Mapping[str, Any], None] = None,
        password: Optional[str] = None,
    ) -> WPAPI:
        """Enable authentication for every request created from now on.

        ``auth()`` only switches authentication on; ``auth(user, pwd)``
        and ``auth({"username": user, "password": pwd})`` also set the
        credentials, and a mapping may carry a ``nonce``. Calling again
        overwrites the stored credentials.
        """
        apply_credentials(self.options, username_or_opts, password)
        return self

    def transport(self, overrides: Optional[Mapping[str, Callable[..., Any]]] = None) -> WPAPI:
        """Replace individual transport verbs for this client.

        Verbs absent from *overrides* keep their current function. The
        change is visible to every request of this client, including
        requests created before the call.

        Raises:
            ConfigurationError: On an unknown verb or non-callable value.
        """
        self.options.transport.update(table.validate_overrides(overrides))
        return self

    def set_headers(
        self,
        headers_or_name: Union[str, Mapping[str, str]],
        value: Optional[str] = None,
    ) -> WPAPI:
        """Add default headers sent with every subsequent request."""
        merge_headers(self.options, headers_or_name, value)
        return self

    # ------------------------------------------------------------------ #
    # Ad hoc requests
    # ------------------------------------------------------------------ #

    def url(self, url: str) -> Request:
        """Return a request for the absolute *url*, outside any route."""
        return Request(
            self.options.request_options(endpoint=url),
            transport=self.options.transport,
        )

    def root(self, path: str = "") -> Request:
        """Return a request for ``endpoint + path``."""
        request = Request(self.options.request_options(), transport=self.options.transport)
        path = path.lstrip("/")
        if path:
            request.set_path_part(0, path)
        return request

    # ------------------------------------------------------------------ #
    # Routes
    # ------------------------------------------------------------------ #

    def namespace(self, name: Optional[str] = None) -> Namespace:
        """Return the handlers bootstrapped under *name*.

        Raises:
            UnknownNamespaceError: If *name* is omitted or unknown.
        """
        return self._registry.get(name)

    def bootstrap(self, routes: RouteSource = None) -> WPAPI:
        """Merge a route map into this client.

        Args:
            routes: A route map, an API index document, or a file path /
                URL to load one from. ``None`` merges the bundled ``wp/v2``
                routes.

        Raises:
            DescriptorError: On a malformed descriptor; nothing is merged.
            RouteLoadError: If *routes* names a source that cannot be read.
        """
        if routes is None:
            route_map = load_default_routes()
        elif isinstance(routes, str):
            route_map = load_routes(routes)
        elif isinstance(routes, Mapping):
            route_map = extract_routes(routes)
        else:
            raise ConfigurationError(
                f"Routes must be a mapping, path or URL, got {type(routes).__name__}"
            )
        self._expose(self._registry.merge(route_map))
        return self

    def register_route(
        self,
        namespace: str,
        rest_base: str,
        *,
        params: Optional[list[str]] = None,
        methods: Optional[list[str]] = None,
        mixins: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> HandlerFactory:
        """Register one route and return its handler factory.

        Args:
            namespace: Namespace of the route, e.g. ``"myplugin/v1"``.
            rest_base: Path below the namespace; may contain named groups,
                e.g. ``"/author/(?P<id>\\d+)"``.
            params: Query argument names to expose as mixins.
            methods: HTTP verbs the route accepts. Defaults to ``GET``.
            mixins: Extra methods for the generated request class, called
                as ``fn(request, *args)``.

        Raises:
            DescriptorError: If the template is malformed or does not
                start with a literal segment.
        """
        ns = namespace.strip("/") if isinstance(namespace, str) else ""
        if not ns:
            raise DescriptorError("register_route() requires a namespace")
        template = f"/{ns}/{rest_base.strip('/')}"
        tokens = parse_template(template)[len(ns.split("/")) :]
        if not tokens or isinstance(tokens[0], PathParam):
            raise DescriptorError(
                f"Route {template!r} must start with a literal segment after {ns!r}"
            )
        key = tokens[0].value

        verbs = list(methods or ["GET"])
        descriptor = {
            "namespace": ns,
            "methods": verbs,
            "endpoints": [
                {"methods": verbs, "args": {name: {} for name in params or ()}},
            ],
        }
        extra = {(ns, key): dict(mixins)} if mixins else None
        self._expose(self._registry.merge({template: descriptor}, extra))
        return self._registry.get(ns)[key]

    def _expose(self, rebuilt: list[tuple[str, str, HandlerFactory]]) -> None:
        for ns, name, factory in rebuilt:
            if ns != self.default_namespace:
                continue
            if name in _RESERVED or name.startswith("_") or hasattr(type(self), name):
                get_output().debug(
                    f"Handler {name!r} clashes with a client attribute; "
                    f"use namespace({ns!r}).{name}"
                )
                continue
            setattr(self, name, factory)

    # ------------------------------------------------------------------ #
    # Alternate constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def site(cls, endpoint: str, routes: RouteSource = None) -> WPAPI:
        """Return a client for *endpoint*, bootstrapped with *routes*.

        Without *routes* the bundled ``wp/v2`` routes are used.
        """
        return cls(endpoint=endpoint, routes=routes)

    @classmethod
    def discover(cls, url: str) -> WPAPI:
        """Return a client bootstrapped from the live API behind *url*.

        Raises:
            DiscoveryError: If no API can be located or its index fetched.
        """
        api_root, routes = discovery.discover(url)
        return cls(endpoint=api_root, routes=routes)

    @classmethod
    def from_env(cls, **overrides: Any) -> WPAPI:
        """Return a client configured from ``WPAPI_*`` environment variables.

        Keyword *overrides* take precedence over the environment. When a
        username, password or nonce is present, authentication is enabled.
        """
        settings: dict[str, Any] = dict(config.options_from_env())
        settings.update(overrides)
        credentials = {
            key: settings.pop(key)
            for key in ("username", "password", "nonce")
            if settings.get(key)
        }
        client = cls(settings)
        if credentials:
            client.auth(credentials)
        return client


