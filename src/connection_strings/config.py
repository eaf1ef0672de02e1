"""Resolve named connection strings from the environment or a ``.env`` file."""

from __future__ import annotations

import logging
import os
import pathlib
from typing import Mapping, Protocol

import dotenv

from .connection_string import ITEM_SEPARATOR, KEY_VALUE_SEPARATOR, ConnectionString

LOG = logging.getLogger(__name__)

_DEFAULT_ENV_PATH = pathlib.Path(".env")


class ConnectionStringSource(Protocol):
    """Read-only lookup of raw connection strings by variable name."""

    def get(self, name: str) -> str | None: ...


class EnvConnectionStringSource:
    """Source backed by the process environment, falling back to a ``.env`` file.

    The ``.env`` file (default ``./.env``) is read with ``dotenv_values`` on
    each lookup and never written into ``os.environ``.
    """

    def __init__(
        self,
        env_path: pathlib.Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._env_path = env_path or _DEFAULT_ENV_PATH
        self._environ = os.environ if environ is None else environ

    def get(self, name: str) -> str | None:
        value = self._environ.get(name)
        if value:
            return value
        if not self._env_path.exists():
            return None
        LOG.debug("%s not set in environment, reading %s", name, self._env_path)
        return dotenv.dotenv_values(self._env_path).get(name) or None


def load_connection_string(
    name: str,
    *,
    source: ConnectionStringSource | None = None,
    env_path: pathlib.Path | None = None,
    environ: Mapping[str, str] | None = None,
    item_separator: str = ITEM_SEPARATOR,
    key_value_separator: str = KEY_VALUE_SEPARATOR,
) -> ConnectionString | None:
    """Return the connection string stored under *name*, or ``None`` if unset.

    Looks in *source* when given, otherwise in the environment and then
    *env_path*. Parse errors propagate.
    """
    _source = source or EnvConnectionStringSource(env_path, environ)
    raw = _source.get(name)
    if not raw:
        return None
    return ConnectionString.from_string(raw, item_separator, key_value_separator)
