"""Group route map entries into per-namespace resource trees.

Every path template below a namespace starts with a literal *resource
key* (``posts`` in ``/wp/v2/posts/(?P<id>[\\d]+)``). All templates that
share a namespace and resource key are merged into one :class:`Resource`,
whose *levels* record which components may appear at each path depth::

    /wp/v2/posts
    /wp/v2/posts/(?P<id>[\\d]+)
    /wp/v2/posts/(?P<parent>[\\d]+)/revisions/(?P<id>[\\d]+)

becomes::

    level 0: posts
    level 1: id | parent
    level 2: revisions
    level 3: id

The union of every endpoint variant's ``args`` is collected on the
resource so a single request class can expose all of them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from wpapi.exceptions import DescriptorError
from wpapi.models import ArgSchema, PathLiteral, PathParam, RouteDescriptor
from wpapi.output import get_output
from wpapi.routes.template import Token, parse_template


@dataclass
class Component:
    """One named component allowed at a resource level.

    Attributes:
        name: The wire name (literal segment text or parameter name).
        pattern: The regex source for parameters, ``None`` for literals.
    """

    name: str
    pattern: Optional[str] = None

    @property
    def is_param(self) -> bool:
        return self.pattern is not None


@dataclass
class Resource:
    """All routes of one namespace that share a resource key."""

    namespace: str
    key: str
    levels: list[dict[str, Component]] = field(default_factory=list)
    args: dict[str, ArgSchema] = field(default_factory=dict)
    methods: set[str] = field(default_factory=set)
    templates: list[str] = field(default_factory=list)

    def add_route(
        self,
        template: str,
        tokens: list[Token],
        descriptor: RouteDescriptor,
    ) -> None:
        """Merge one template's tokens and descriptor into this resource.

        Components already present at a level keep their first-seen
        pattern; args and methods are unioned.
        """
        for depth, token in enumerate(tokens):
            if depth == len(self.levels):
                self.levels.append({})
            level = self.levels[depth]
            if isinstance(token, PathParam):
                level.setdefault(token.name, Component(token.name, token.pattern))
            else:
                level.setdefault(token.value, Component(token.value))

        self.methods.update(m.upper() for m in descriptor.methods)
        for endpoint in descriptor.endpoints:
            self.methods.update(m.upper() for m in endpoint.methods)
            for arg_name, schema in endpoint.args.items():
                self.args.setdefault(arg_name, schema)
        self.templates.append(template)

    def path_params(self) -> list[Component]:
        """Return the first parameter component of each level, in level order."""
        params: list[Component] = []
        for level in self.levels:
            for component in level.values():
                if component.is_param:
                    params.append(component)
                    break
        return params


RouteTree = dict[str, dict[str, Resource]]


def coerce_descriptor(template: str, raw: Any) -> RouteDescriptor:
    """Validate *raw* as a :class:`~wpapi.models.RouteDescriptor`.

    Raises:
        DescriptorError: If the descriptor is not a mapping, lacks a
            namespace, or otherwise fails validation.
    """
    if isinstance(raw, RouteDescriptor):
        return raw
    try:
        return RouteDescriptor.model_validate(raw)
    except ValidationError as exc:
        raise DescriptorError(
            f"Invalid route descriptor for {template!r}: {exc}"
        ) from exc


def merge_route_map(
    tree: RouteTree,
    route_map: Mapping[str, Any],
) -> set[tuple[str, str]]:
    """Merge every entry of *route_map* into *tree* in place.

    Args:
        tree: Existing namespace -> resource key -> :class:`Resource`
            mapping. Namespaces seen for the first time are added, even
            when they only declare their root route.
        route_map: Mapping from path template to a descriptor (a dict or
            a :class:`~wpapi.models.RouteDescriptor`).

    Returns:
        The ``(namespace, resource_key)`` pairs that were created or
        extended, so the caller can rebuild their handlers.

    Raises:
        DescriptorError: On a malformed descriptor or template, or a
            template that does not live under its declared namespace.
    """
    touched: set[tuple[str, str]] = set()

    for template, raw in route_map.items():
        descriptor = coerce_descriptor(template, raw)
        namespace = descriptor.namespace
        tokens = parse_template(template)

        ns_tokens = [PathLiteral(value=part) for part in namespace.split("/")]
        if tokens[: len(ns_tokens)] != ns_tokens:
            raise DescriptorError(
                f"Route {template!r} is not under its namespace {namespace!r}"
            )

        resources = tree.setdefault(namespace, {})
        rest = tokens[len(ns_tokens) :]
        if not rest:
            # Namespace root: registers the namespace only.
            continue
        if isinstance(rest[0], PathParam):
            get_output().debug(
                f"Skipping {template!r}: no literal resource segment after {namespace!r}"
            )
            continue

        key = rest[0].value
        resource = resources.get(key)
        if resource is None:
            resource = resources[key] = Resource(namespace=namespace, key=key)
        resource.add_route(template, rest, descriptor)
        touched.add((namespace, key))

    return touched


def build_route_tree(route_map: Mapping[str, Any]) -> RouteTree:
    """Build a fresh :data:`RouteTree` from *route_map*.

    Example::

        tree = build_route_tree({
            "/wp/v2/posts": {"namespace": "wp/v2", "methods": ["GET"], "endpoints": []},
        })
        tree["wp/v2"]["posts"].levels  # [{"posts": Component("posts")}]
    """
    tree: RouteTree = {}
    merge_route_map(tree, route_map)
    return tree
