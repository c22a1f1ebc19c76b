"""Namespace registry: per-client handler factories grouped by namespace.

Each :class:`~wpapi.client.WPAPI` owns exactly one
:class:`NamespaceRegistry`, created empty at construction and bound to
that client's :class:`~wpapi.models.ClientOptions`. Nothing here is
shared between clients, so factories closing over one client's options
can never be reached from another.

Merging is additive and atomic: :meth:`NamespaceRegistry.merge` stages
the route map against a copy of the current tree and only commits once
every descriptor has validated, so a :class:`~wpapi.exceptions.DescriptorError`
leaves the registry exactly as it was.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from typing import Any, Callable, Optional

from wpapi.exceptions import UnknownNamespaceError
from wpapi.handlers import HandlerFactory, build_request_class, make_factory
from wpapi.models import ClientOptions
from wpapi.output import get_output
from wpapi.routes.template import to_identifier
from wpapi.routes.tree import RouteTree, merge_route_map


class Namespace:
    """The handler factories registered under one namespace.

    Handlers are reachable as attributes (``ns.posts``) and as items
    (``ns["posts"]``, which also accepts the wire name, e.g.
    ``ns["block-types"]``). ``str(ns)`` is the namespace path.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._handlers: dict[str, HandlerFactory] = {}

    def _register(self, key: str, factory: HandlerFactory) -> None:
        self._handlers[to_identifier(key)] = factory

    def __getattr__(self, key: str) -> HandlerFactory:
        handlers = self.__dict__.get("_handlers", {})
        try:
            return handlers[key]
        except KeyError:
            raise AttributeError(
                f"Namespace {self.__dict__.get('_name')!r} has no handler {key!r}"
            ) from None

    def __getitem__(self, key: str) -> HandlerFactory:
        if key in self._handlers:
            return self._handlers[key]
        return self._handlers[to_identifier(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and (
            key in self._handlers or to_identifier(key) in self._handlers
        )

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._handlers))

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"<Namespace {self._name!r} handlers={sorted(self._handlers)}>"


class NamespaceRegistry:
    """Route tree, request classes and handler factories for one client.

    Args:
        options: The owning client's live option record. Every factory
            built here reads it at call time.
    """

    def __init__(self, options: ClientOptions) -> None:
        self._options = options
        self._tree: RouteTree = {}
        self._namespaces: dict[str, Namespace] = {}
        self._mixins: dict[tuple[str, str], dict[str, Callable[..., Any]]] = {}

    @property
    def names(self) -> list[str]:
        """Registered namespace names, in registration order."""
        return list(self._namespaces)

    def merge(
        self,
        route_map: Mapping[str, Any],
        mixins: Optional[Mapping[tuple[str, str], dict[str, Callable[..., Any]]]] = None,
    ) -> list[tuple[str, str, HandlerFactory]]:
        """Merge *route_map* into the registry.

        Args:
            route_map: Mapping from path template to route descriptor.
            mixins: Extra methods per ``(namespace, resource_key)``,
                remembered so later merges that rebuild the resource keep
                them.

        Returns:
            ``(namespace, handler_name, factory)`` for every handler that
            was created or rebuilt, in a stable order.

        Raises:
            DescriptorError: If any descriptor or template is malformed;
                the registry is left unchanged.
        """
        staged = copy.deepcopy(self._tree)
        touched = merge_route_map(staged, route_map)
        self._tree = staged
        for (ns, key), extra in (mixins or {}).items():
            self._mixins.setdefault((ns, key), {}).update(extra)

        for name in self._tree:
            if name not in self._namespaces:
                self._namespaces[name] = Namespace(name)

        rebuilt: list[tuple[str, str, HandlerFactory]] = []
        for ns, key in sorted(touched):
            resource = self._tree[ns][key]
            request_class = build_request_class(resource, self._mixins.get((ns, key)))
            factory = make_factory(request_class, self._options, ns)
            self._namespaces[ns]._register(key, factory)
            rebuilt.append((ns, to_identifier(key), factory))

        output = get_output()
        for name in sorted({ns for ns, _, _ in rebuilt}):
            count = sum(1 for ns, _, _ in rebuilt if ns == name)
            output.debug(f"Registered {count} handler(s) under {name!r}")
        return rebuilt

    def get(self, name: Optional[str] = None) -> Namespace:
        """Return the handler set for *name*.

        Raises:
            UnknownNamespaceError: If *name* is omitted, empty, or was
                never bootstrapped.
        """
        if not name:
            raise UnknownNamespaceError("A namespace name is required")
        key = name.strip("/")
        try:
            return self._namespaces[key]
        except KeyError:
            registered = ", ".join(sorted(self._namespaces)) or "(none)"
            raise UnknownNamespaceError(
                f"Namespace {name!r} is not registered. Registered namespaces: {registered}"
            ) from None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip("/") in self._namespaces
