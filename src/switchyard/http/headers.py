"""Case-insensitive HTTP header maps.

``Headers`` is the immutable request side: it stores the raw byte pairs
from the ASGI scope and decodes on access. ``MutableHeaders`` is the
response side a handler mutates before the status line is written.
"""

from collections.abc import Iterator, Mapping, MutableMapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. repeated ``Accept``).
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower().encode("latin-1")
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key_lower = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == key_lower]

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Access raw header byte pairs for ASGI compatibility."""
        return self._raw


class MutableHeaders(MutableMapping[str, str]):
    """Mutable, case-insensitive response headers.

    Keys are stored lower-cased; each key maps to a list of values so
    ``add`` can emit repeated headers (``Set-Cookie``, ``Vary``).
    ``__setitem__`` replaces every value for the key.
    """

    __slots__ = ("_data",)

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, list[str]] = {}
        if initial:
            for name, value in initial.items():
                self[name] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()][0]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key.lower()] = [value]

    def __delitem__(self, key: str) -> None:
        del self._data[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"MutableHeaders({self._data!r})"

    def add(self, key: str, value: str) -> None:
        """Append *value* without replacing existing values for *key*."""
        self._data.setdefault(key.lower(), []).append(value)

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key.lower(), []))

    def copy(self) -> "MutableHeaders":
        """Return an independent copy."""
        clone = MutableHeaders()
        clone._data = {k: list(v) for k, v in self._data.items()}
        return clone

    def raw(self) -> list[tuple[bytes, bytes]]:
        """Encode as ASGI header byte pairs, preserving repeated values."""
        return [
            (name.encode("latin-1"), value.encode("latin-1"))
            for name, values in self._data.items()
            for value in values
        ]
