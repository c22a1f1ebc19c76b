"""Build request classes and handler factories from resource trees.

This is the core of wpapi. For every :class:`~wpapi.routes.tree.Resource`
the registry asks this module for two things:

1. :func:`build_request_class` -- a :class:`~wpapi.request.Request`
   subclass, built **once per resource**, whose class namespace holds:

   * a *path setter* per level component. Parameter setters
     (``id(5)``) fill their level. Literal setters (``revisions()``) fill
     their level with the literal, and when given a value also fill the
     following level if it holds exactly one parameter
     (``revisions(7)``). When two levels share a component name, the
     shallower level wins.
   * an *argument mixin* per name in the resource's unioned ``args``
     (see :mod:`wpapi.mixins`), unless a path setter or a core
     :class:`~wpapi.request.Request` attribute already uses the name.

   Because these are class attributes, they are reachable on every
   builder instance yet never appear in ``vars(builder)``.

2. :func:`make_factory` -- a closure over one client's live
   :class:`~wpapi.models.ClientOptions`. Each call snapshots the
   whitelisted options, shares the client's transport override dict,
   sets level 0 to the resource key, and applies positional path values
   and keyword setters.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from wpapi.mixins import make_arg_mixin
from wpapi.models import ClientOptions
from wpapi.output import get_output
from wpapi.request import Request
from wpapi.routes.template import to_identifier
from wpapi.routes.tree import Resource

HandlerFactory = Callable[..., Request]


def _can_define(name: str, defined: dict[str, Any]) -> bool:
    """Whether *name* is free for a generated method.

    Query helpers such as ``slug`` or ``search`` may be replaced by a
    path setter of the same name; every other core attribute is kept.
    """
    if name in defined:
        return False
    return not hasattr(Request, name) or name in Request.setter_names


def _make_param_setter(level: int) -> Callable[..., Request]:
    def setter(self: Request, value: Any) -> Request:
        return self.set_path_part(level, value)

    return setter


def _make_literal_setter(
    level: int,
    literal: str,
    child_level: Optional[int],
) -> Callable[..., Request]:
    def setter(self: Request, value: Any = None) -> Request:
        self.set_path_part(level, literal)
        if value is not None and child_level is not None:
            self.set_path_part(child_level, value)
        return self

    return setter


def _single_param_child(resource: Resource, depth: int) -> Optional[int]:
    """Return ``depth + 1`` when that level holds exactly one parameter."""
    if depth + 1 >= len(resource.levels):
        return None
    params = [c for c in resource.levels[depth + 1].values() if c.is_param]
    return depth + 1 if len(params) == 1 else None


def _class_name(key: str) -> str:
    return "".join(part.capitalize() for part in to_identifier(key).split("_") if part) + "Request"


def build_request_class(
    resource: Resource,
    mixins: Optional[dict[str, Callable[..., Any]]] = None,
) -> type[Request]:
    """Create the :class:`~wpapi.request.Request` subclass for *resource*.

    Args:
        resource: A merged resource from
            :func:`~wpapi.routes.tree.merge_route_map`.
        mixins: Extra methods to attach (from ``register_route``), keyed by
            attribute name. Names that collide with generated setters or
            core request attributes are skipped.

    Returns:
        A new class whose instances are ready to be bound to a client.
    """
    methods: dict[str, Callable[..., Any]] = {}

    for depth, level in enumerate(resource.levels):
        if depth == 0:
            # Level 0 is the resource key and is always set by the factory.
            continue
        for component in level.values():
            name = to_identifier(component.name)
            if not _can_define(name, methods):
                continue
            if component.is_param:
                setter = _make_param_setter(depth)
                setter.__doc__ = f"Set the ``{component.name}`` path segment (``{component.pattern}``)."
            else:
                setter = _make_literal_setter(
                    depth, component.name, _single_param_child(resource, depth)
                )
                setter.__doc__ = f"Address the ``{component.name}`` sub-resource."
            setter.__name__ = setter.__qualname__ = name
            methods[name] = setter

    for arg_name in resource.args:
        name = to_identifier(arg_name)
        if _can_define(name, methods):
            methods[name] = make_arg_mixin(arg_name)

    for name, fn in (mixins or {}).items():
        if _can_define(name, methods):
            methods[name] = fn
        else:
            get_output().warning(
                f"Mixin {name!r} on {resource.namespace}/{resource.key} shadows an existing method; skipped"
            )

    path_param_levels = tuple(
        depth
        for depth, level in enumerate(resource.levels)
        if any(c.is_param for c in level.values())
    )
    implicit_literals = {
        depth: next(iter(level.values())).name
        for depth, level in enumerate(resource.levels)
        if depth > 0 and len(level) == 1 and not next(iter(level.values())).is_param
    }

    attrs: dict[str, Any] = dict(methods)
    attrs.update(
        {
            "__module__": __name__,
            "__doc__": f"Request builder for ``{resource.namespace}/{resource.key}``.",
            "resource": resource.key,
            "supported_methods": frozenset(resource.methods) or Request.supported_methods,
            "path_param_levels": path_param_levels,
            "implicit_literals": implicit_literals,
            "setter_names": Request.setter_names | frozenset(methods),
        }
    )
    return type(_class_name(resource.key), (Request,), attrs)


def make_factory(
    request_class: type[Request],
    options: ClientOptions,
    namespace: str,
) -> HandlerFactory:
    """Return a handler factory bound to one client's *options*.

    The factory signature is ``factory(*values, **setters)``:

    * ``values`` fill the resource's parameter levels in order. A literal
      level between two filled parameter levels is filled implicitly
      when it has a single literal component, so ``posts(5, 7)`` addresses
      ``posts/5/revisions/7``.
    * ``setters`` call the named path setter, argument mixin or query
      helper with the given value.

    Raises:
        TypeError: On more positional values than parameter levels, or
            an unknown keyword.

    Example::

        factory = make_factory(PostsRequest, client.options, "wp/v2")
        str(factory(5))           # '<endpoint>wp/v2/posts/5'
        str(factory(status="draft"))
    """
    key = to_identifier(request_class.resource or "root")

    def factory(*values: Any, **setters: Any) -> Request:
        levels = request_class.path_param_levels
        if len(values) > len(levels):
            raise TypeError(
                f"{key}() takes at most {len(levels)} path value(s) ({len(values)} given)"
            )

        request = request_class(
            options.request_options(),
            transport=options.transport,
            namespace=namespace,
        )
        request.set_path_part(0, request_class.resource)

        previous = 0
        for level, value in zip(levels, values):
            for gap in range(previous + 1, level):
                literal = request_class.implicit_literals.get(gap)
                if literal is not None:
                    request.set_path_part(gap, literal)
            request.set_path_part(level, value)
            previous = level

        for name, value in setters.items():
            if name not in request_class.setter_names:
                raise TypeError(f"{key}() got an unexpected keyword argument {name!r}")
            getattr(request, name)(value)
        return request

    factory.__name__ = factory.__qualname__ = key
    factory.__doc__ = request_class.__doc__
    factory.request_class = request_class  # type: ignore[attr-defined]
    return factory
