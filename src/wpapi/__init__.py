"""wpapi -- A dynamically generated client for WordPress-style REST APIs.

Instead of hand-written per-endpoint code, wpapi reads the API's route map
(the ``routes`` object served at ``/wp-json/``) and generates chainable
request builders for every route: a setter per path parameter and a method
per declared query argument.

Typical usage::

    from wpapi import WPAPI

    site = WPAPI(endpoint="https://example.com/wp-json")
    site.posts().search("hello").per_page(5).get()
    site.namespace("wp/v2").categories(7).get()

    discovered = WPAPI.discover("https://example.com")

Modules:
    client: The :class:`WPAPI` client.
    request: The chainable :class:`~wpapi.request.Request` builder.
    handlers: Request classes and factories generated per resource.
    namespaces: Per-client registry of handlers grouped by namespace.
    routes: Route map loading, template parsing and resource trees.
    transport: Default and per-client transport tables, httpx transport.
    discovery: API root lookup via the ``Link`` header.
    exceptions: Exception hierarchy.
    output: Diagnostic output on stderr.
"""

from wpapi.client import WPAPI
from wpapi.request import Request

__version__ = "1.0.0"

__all__ = ["WPAPI", "Request", "__version__"]
