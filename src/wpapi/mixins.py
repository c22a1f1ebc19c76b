"""Argument mixins attached to generated request classes.

Every argument a route declares in its ``args`` schema becomes a method
of the same (identifier-safe) name on the route's request class, so that
``site.posts().status("draft")`` sets the ``status`` query parameter.
The methods are created once per request class and live on the class,
not on each instance.

Most arguments map straight onto :meth:`~wpapi.request.Request.param`.
A few get dedicated behavior:

* ``filter`` -- accepts a mapping or a key/value pair and merges into a
  nested ``filter[key]=value`` parameter.
* date arguments (``before``, ``after``, ``modified_before``,
  ``modified_after``) -- accept :class:`datetime.date` /
  :class:`datetime.datetime` values and send them in ISO 8601 form.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from wpapi.routes.template import to_identifier

_DATE_ARGS = frozenset({"before", "after", "modified_before", "modified_after"})


def _filter_mixin(
    self: Any,
    props: Union[str, Mapping[str, Any]],
    value: Optional[Any] = None,
) -> Any:
    """Merge entries into the ``filter`` query parameter.

    ``filter("name", "my-slug")`` and ``filter({"name": "my-slug"})``
    both produce ``filter[name]=my-slug``.
    """
    current = dict(self.params.get("filter") or {})
    if isinstance(props, Mapping):
        current.update(props)
    elif value is not None:
        current[props] = value
    return self.param("filter", current)


def _make_date_mixin(arg_name: str) -> Callable[..., Any]:
    def date_mixin(self: Any, value: Union[str, datetime.date]) -> Any:
        if isinstance(value, datetime.date):
            value = value.isoformat()
        return self.param(arg_name, value)

    date_mixin.__doc__ = f"Set ``{arg_name}`` from an ISO 8601 string, date, or datetime."
    return date_mixin


def _make_param_mixin(arg_name: str) -> Callable[..., Any]:
    def param_mixin(self: Any, value: Any) -> Any:
        return self.param(arg_name, value)

    param_mixin.__doc__ = f"Set the ``{arg_name}`` query parameter."
    return param_mixin


def make_arg_mixin(arg_name: str) -> Callable[..., Any]:
    """Return the method implementing the argument *arg_name*.

    The returned function is named after :func:`to_identifier` of the
    argument, ready to be placed in a request class namespace.
    """
    if arg_name == "filter":
        mixin = _filter_mixin
    elif arg_name in _DATE_ARGS:
        mixin = _make_date_mixin(arg_name)
    else:
        mixin = _make_param_mixin(arg_name)
    if mixin is not _filter_mixin:
        mixin.__name__ = mixin.__qualname__ = to_identifier(arg_name)
    return mixin
