"""Shared test utilities."""


class DictConnectionStringSource:
    """In-memory ConnectionStringSource for tests."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data) if data else {}

    def get(self, name: str) -> str | None:
        return self._data.get(name)


class ToDictObject:
    """Minimal object exposing ``to_dict()`` like a model or settings object."""

    def __init__(self, data: dict) -> None:
        self._data = data

    def to_dict(self) -> dict:
        return dict(self._data)
