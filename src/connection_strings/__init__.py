"""Parse, edit and serialize Azure-style connection strings."""

from .config import ConnectionStringSource, EnvConnectionStringSource, load_connection_string
from .connection_string import (
    ConnectionString,
    ConnectionStringError,
    InvalidInputError,
    MalformedEntryError,
    MappingConvertible,
)
from .keys import studly

__all__ = [
    "ConnectionString",
    "ConnectionStringError",
    "ConnectionStringSource",
    "EnvConnectionStringSource",
    "InvalidInputError",
    "MalformedEntryError",
    "MappingConvertible",
    "load_connection_string",
    "studly",
]
