"""Transport layer for wpapi.

Request builders never talk to the network themselves: each verb method
looks up a transport function with
:func:`~wpapi.transport.table.resolve_transport` and hands itself over.

Sub-modules:

* :mod:`~wpapi.transport.table` -- the frozen default table, override
  validation, and per-verb resolution.
* :mod:`~wpapi.transport.http` -- the default :mod:`httpx`-backed
  functions.
* :mod:`~wpapi.transport.response` -- body extraction, pagination, and
  error-status mapping.
"""

from wpapi.transport.table import (
    DEFAULT_TRANSPORT,
    VERBS,
    TransportTable,
    resolve_transport,
    validate_overrides,
)

__all__ = [
    "DEFAULT_TRANSPORT",
    "VERBS",
    "TransportTable",
    "resolve_transport",
    "validate_overrides",
]
