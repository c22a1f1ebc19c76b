"""Route maps -- load them, tokenize their path templates, and group them into resources.

Typical usage::

    from wpapi.routes import build_route_tree, load_routes

    route_map = load_routes("https://example.com/wp-json/")
    tree = build_route_tree(route_map)
    tree["wp/v2"]["posts"].args.keys()

Sub-modules:

* :mod:`~wpapi.routes.loader` -- I/O layer (URL, file, stdin) plus the
  bundled default ``wp/v2`` route map.
* :mod:`~wpapi.routes.template` -- Path template tokenizer and wire-name
  to identifier mapping.
* :mod:`~wpapi.routes.tree` -- Groups templates into per-namespace
  :class:`~wpapi.routes.tree.Resource` trees.
"""

from wpapi.routes.loader import load_default_routes, load_routes
from wpapi.routes.template import parse_template, to_identifier
from wpapi.routes.tree import build_route_tree, merge_route_map

__all__ = [
    "load_routes",
    "load_default_routes",
    "parse_template",
    "to_identifier",
    "build_route_tree",
    "merge_route_map",
]
