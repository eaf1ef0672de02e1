"""Mutable record for Azure-style ``key=value;key=value`` connection strings."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any, Callable, Protocol, TypeVar, Union, runtime_checkable

from .keys import studly

LOG = logging.getLogger(__name__)

ITEM_SEPARATOR = ";"
KEY_VALUE_SEPARATOR = "="

_T = TypeVar("_T", bound="ConnectionString")

Default = Union[str, Callable[[], Any], None]


class ConnectionStringError(Exception):
    """Base class for connection string errors."""


class InvalidInputError(ConnectionStringError, TypeError):
    """Raised when a value cannot be converted to a connection string."""


class MalformedEntryError(ConnectionStringError, ValueError):
    """Raised when a segment of a connection string is not a ``key=value`` pair."""

    def __init__(self, segment: str, index: int, reason: str) -> None:
        super().__init__(f"Malformed entry {index} {segment!r}: {reason}")
        self.segment = segment
        self.index = index


@runtime_checkable
class MappingConvertible(Protocol):
    """Object that can export itself as an ordered key-value mapping."""

    def to_dict(self) -> Mapping[Any, Any]: ...


class ConnectionString(MutableMapping[str, str]):
    """Ordered map of normalized property keys to string values.

    Keys are stored in StudlyCase (see :func:`connection_strings.keys.studly`),
    so ``cs["account-key"]`` and ``cs["AccountKey"]`` address the same entry.
    Build instances through the ``from_*`` factories::

        cs = ConnectionString.from_string("AccountName=dev;AccountKey=abc")
        cs.set("endpoint-suffix", "core.windows.net")
        str(cs)  # 'AccountName=dev;AccountKey=abc;EndpointSuffix=core.windows.net'
    """

    def __init__(self) -> None:
        self._properties: dict[str, str] = {}

    # --- factories ---

    @classmethod
    def from_string(
        cls: type[_T],
        connection_string: str,
        item_separator: str = ITEM_SEPARATOR,
        key_value_separator: str = KEY_VALUE_SEPARATOR,
    ) -> _T:
        """Parse *connection_string* into a new instance.

        Empty segments are skipped. Each other segment is split on the first
        *key_value_separator*, so values may contain it. Raises
        ``MalformedEntryError`` (and parses nothing) if any segment has no
        separator or an empty key.
        """
        _check_separators(item_separator, key_value_separator)
        instance = cls()
        for index, segment in enumerate(connection_string.split(item_separator)):
            if segment == "":
                LOG.debug("Skipping empty segment %d", index)
                continue
            key, sep, value = segment.partition(key_value_separator)
            if not sep:
                raise MalformedEntryError(
                    segment, index, f"missing separator {key_value_separator!r}",
                )
            if not studly(key):
                raise MalformedEntryError(segment, index, "empty key")
            instance._store(key, value)
        return instance

    @classmethod
    def from_instance(cls: type[_T], connection_string: ConnectionString) -> _T:
        """Return a copy of *connection_string* that shares no storage with it."""
        instance = cls()
        instance._properties = dict(connection_string._properties)
        return instance

    @classmethod
    def from_iterable(
        cls: type[_T],
        items: Iterable[Any],
        item_separator: str = ITEM_SEPARATOR,
        key_value_separator: str = KEY_VALUE_SEPARATOR,
    ) -> _T:
        """Flatten a mapping or sequence into a new instance.

        String keys become properties directly. Integer positions (list items,
        or ``int`` keys of a mapping) hold nested sources, such as a connection
        string, another iterable or an instance, which are converted with
        :meth:`from_value` and merged in; later keys overwrite earlier ones.
        Keys of any other type are ignored.
        """
        instance = cls()
        pairs = items.items() if isinstance(items, Mapping) else enumerate(items)
        for key, value in pairs:
            if isinstance(key, str):
                instance.set(key, value)
            elif isinstance(key, int) and not isinstance(key, bool) and key >= 0:
                child = cls.from_value(value, item_separator, key_value_separator)
                for child_key, child_value in child._properties.items():
                    instance._store(child_key, child_value)
            else:
                LOG.debug("Ignoring entry with %s key %r", type(key).__name__, key)
        return instance

    @classmethod
    def from_value(
        cls: type[_T],
        value: Any,
        item_separator: str = ITEM_SEPARATOR,
        key_value_separator: str = KEY_VALUE_SEPARATOR,
    ) -> _T:
        """Build an instance from a string, an instance, a mapping-convertible
        object or any other iterable, in that order of precedence.

        Raises ``InvalidInputError`` for anything else.
        """
        if isinstance(value, ConnectionString):
            return cls.from_instance(value)
        if isinstance(value, str):
            return cls.from_string(value, item_separator, key_value_separator)
        type_name = type(value).__name__
        if isinstance(value, MappingConvertible):
            value = value.to_dict()
        if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
            return cls.from_iterable(value, item_separator, key_value_separator)
        raise InvalidInputError(
            f"Could not convert {type_name} to {cls.__name__}",
        )

    # --- accessors ---

    def get(self, key: str, default: Default = None) -> Any:  # type: ignore[override]
        """Return the value for *key*, or *default* if it is not set.

        A callable *default* is only invoked on a miss.
        """
        try:
            return self._properties[studly(key)]
        except KeyError:
            return default() if callable(default) else default

    def set(self: _T, key: str, value: Any) -> _T:
        """Set *key* to ``str(value)`` in place, removing it when *value* is ``None``."""
        if value is None:
            self._properties.pop(studly(key), None)
        else:
            self._store(key, str(value))
        return self

    def has(self, key: str) -> bool:
        return studly(key) in self._properties

    def remove(self: _T, key: str) -> _T:
        """Remove *key* if present."""
        return self.set(key, None)

    def _store(self, key: str, value: str) -> None:
        normalized = studly(key)
        if normalized in self._properties:
            LOG.debug("Overwriting %s (from key %r)", normalized, key)
        self._properties[normalized] = value

    # --- serialization ---

    def to_string(
        self,
        item_separator: str = ITEM_SEPARATOR,
        key_value_separator: str = KEY_VALUE_SEPARATOR,
    ) -> str:
        return item_separator.join(
            f"{key}{key_value_separator}{value}"
            for key, value in self._properties.items()
        )

    def to_dict(self) -> dict[str, str]:
        return dict(self._properties)

    def to_json(
        self,
        item_separator: str = ITEM_SEPARATOR,
        key_value_separator: str = KEY_VALUE_SEPARATOR,
        **dumps_kwargs: Any,
    ) -> str:
        """Return the connection string text encoded as a JSON string literal.

        The result is ``"AccountKey=abc"``, never a JSON object.
        """
        return json.dumps(
            self.to_string(item_separator, key_value_separator), **dumps_kwargs,
        )

    def copy(self: _T) -> _T:
        return type(self).from_instance(self)

    __copy__ = copy

    # --- mapping protocol ---

    def __getitem__(self, key: str) -> str:
        if not isinstance(key, str):
            raise KeyError(key)
        try:
            return self._properties[studly(key)]
        except KeyError:
            raise KeyError(key) from None

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if not isinstance(key, str) or not self.has(key):
            raise KeyError(key)
        self.remove(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._properties!r})"


def _check_separators(item_separator: str, key_value_separator: str) -> None:
    if not item_separator or not key_value_separator:
        raise ValueError("Separators must be non-empty strings.")
