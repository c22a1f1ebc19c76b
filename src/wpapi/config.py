"""Client configuration from environment variables.

Recognised variables:

* ``WPAPI_ENDPOINT`` -- the API root, e.g. ``https://example.com/wp-json/``.
* ``WPAPI_USERNAME`` / ``WPAPI_PASSWORD`` -- HTTP Basic credentials
  (typically a WordPress application password).
* ``WPAPI_NONCE`` -- a ``wp_rest`` nonce for cookie authentication.

Empty values are treated as unset. See
:meth:`wpapi.client.WPAPI.from_env` for the constructor that consumes
these.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Optional

ENV_PREFIX = "WPAPI_"

_ENV_KEYS = ("endpoint", "username", "password", "nonce")


def env_var_name(key: str) -> str:
    """Return the environment variable that holds option *key*."""
    return f"{ENV_PREFIX}{key.upper()}"


def options_from_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Collect client options from the environment.

    Args:
        environ: Mapping to read from. Defaults to :data:`os.environ`.

    Returns:
        A dict holding only the options whose variables are set to a
        non-empty value.
    """
    env = os.environ if environ is None else environ
    options: dict[str, str] = {}
    for key in _ENV_KEYS:
        value = env.get(env_var_name(key), "")
        if value:
            options[key] = value
    return options
