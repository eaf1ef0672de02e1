"""Key normalization for connection string properties."""

import functools
import re

_SEPARATOR_RE = re.compile(r"[\W_]+")


@functools.lru_cache(maxsize=1024)
def studly(value: str) -> str:
    """Return *value* in StudlyCase, the canonical form of a property key.

    Words are split on any run of non-alphanumeric characters. Each word gets
    an upper-case first letter; all-caps words are folded first, so
    ``account-key``, ``ACCOUNT_KEY`` and ``AccountKey`` all become
    ``AccountKey``. An all-caps result such as ``AB`` (from ``a_b``) is
    folded as well, so the returned key normalizes to itself.
    """
    result = "".join(_capitalize(word) for word in _SEPARATOR_RE.split(value) if word)
    return result.capitalize() if result.isupper() else result


def _capitalize(word: str) -> str:
    if word.isupper():
        return word.capitalize()
    return word[0].upper() + word[1:]
