"""Default and per-client transport tables.

A transport function performs one HTTP verb for a request builder. Its
shape is ``fn(request, callback)`` for ``get`` and ``head``, and
``fn(request, data, callback)`` for ``post``, ``put`` and ``delete``.

Two tables take part in every lookup:

* :data:`DEFAULT_TRANSPORT` -- a process-wide, frozen
  :class:`TransportTable` backed by :mod:`wpapi.transport.http`.
  Assigning to one of its verbs raises :class:`pydantic.ValidationError`.
* a per-client *override* dict held in
  :attr:`~wpapi.models.ClientOptions.transport`, containing only the
  verbs that client replaced.

:func:`resolve_transport` consults the override dict first and falls back
to the default table, so overriding ``get`` never disturbs ``put``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict

from wpapi.exceptions import ConfigurationError
from wpapi.transport import http

VERBS: tuple[str, ...] = ("get", "head", "post", "put", "delete")


class TransportTable(BaseModel):
    """Immutable mapping of the five HTTP verbs to transport functions.

    Supports both attribute (``table.get``) and item (``table["get"]``)
    access.
    """

    model_config = ConfigDict(frozen=True)

    get: Callable[..., Any]
    head: Callable[..., Any]
    post: Callable[..., Any]
    put: Callable[..., Any]
    delete: Callable[..., Any]

    def __getitem__(self, verb: str) -> Callable[..., Any]:
        if verb not in VERBS:
            raise KeyError(verb)
        return getattr(self, verb)


DEFAULT_TRANSPORT = TransportTable(
    get=http.get,
    head=http.head,
    post=http.post,
    put=http.put,
    delete=http.delete,
)


def validate_overrides(overrides: Optional[Mapping[str, Any]]) -> dict[str, Callable[..., Any]]:
    """Check a partial verb -> function mapping and return it as a plain dict.

    Raises:
        ConfigurationError: If *overrides* is not a mapping, names a verb
            outside :data:`VERBS`, or maps a verb to a non-callable.
    """
    if overrides is None:
        return {}
    if not isinstance(overrides, Mapping):
        raise ConfigurationError(
            f"Transport overrides must be a mapping, got {type(overrides).__name__}"
        )
    unknown = sorted(set(overrides) - set(VERBS))
    if unknown:
        raise ConfigurationError(
            f"Unknown transport verb(s): {', '.join(unknown)}. "
            f"Supported verbs: {', '.join(VERBS)}"
        )
    for verb, fn in overrides.items():
        if not callable(fn):
            raise ConfigurationError(f"Transport for {verb!r} must be callable")
    return dict(overrides)


def resolve_transport(
    verb: str,
    overrides: Optional[Mapping[str, Callable[..., Any]]] = None,
) -> Callable[..., Any]:
    """Return the function that should perform *verb*.

    Args:
        verb: One of :data:`VERBS`.
        overrides: The owning client's live override dict, if any.

    Returns:
        The override for *verb* when present, otherwise the entry from
        :data:`DEFAULT_TRANSPORT`.
    """
    if overrides:
        override = overrides.get(verb)
        if override is not None:
            return override
    return DEFAULT_TRANSPORT[verb]
