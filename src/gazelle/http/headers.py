"""Immutable, case-insensitive HTTP headers.

Implements ``Mapping[str, str]`` and the ``MultiValueMapping`` protocol.
Each header name maps to an ordered list of values; updates return a
new ``Headers`` and never touch the original.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. multiple ``Vary``).

    Build from pairs or from a mapping whose values are a string or a
    list of strings::

        Headers((("Accept", "*/*"),))
        Headers.from_mapping({"Authorization": "Bearer abc"})
        Headers.from_mapping({"Vary": ["Origin", "Accept"]})
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        object.__setattr__(self, "_pairs", tuple(pairs))

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Headers is immutable; use with_value() or replace()"
        raise AttributeError(msg)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str | Iterable[str]]) -> Headers:
        pairs: list[tuple[str, str]] = []
        for name, values in mapping.items():
            if isinstance(values, str):
                pairs.append((name, values))
            else:
                pairs.extend((name, value) for value in values)
        return cls(pairs)

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Decode ASGI byte pairs."""
        return cls(
            (name.decode("latin-1"), value.decode("latin-1")) for name, value in raw
        )

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._pairs:
            if name.lower() == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name.lower() == key_lower for name, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._pairs:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self.normalized() == other.normalized()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.normalized())

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self.get_list(k)!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in the order they were added."""
        key_lower = key.lower()
        return [value for name, value in self._pairs if name.lower() == key_lower]

    # -- Copy-on-write updates --

    def with_value(self, name: str, value: str) -> Headers:
        """Return new Headers with *value* appended under *name*."""
        return Headers((*self._pairs, (name, value)))

    def replace(self, name: str, values: str | Iterable[str]) -> Headers:
        """Return new Headers where *name* holds exactly *values*."""
        key_lower = name.lower()
        kept = [(n, v) for n, v in self._pairs if n.lower() != key_lower]
        if isinstance(values, str):
            values = (values,)
        kept.extend((name, value) for value in values)
        return Headers(kept)

    def without(self, name: str) -> Headers:
        """Return new Headers with every value for *name* removed."""
        key_lower = name.lower()
        return Headers((n, v) for n, v in self._pairs if n.lower() != key_lower)

    def normalized(self) -> tuple[tuple[str, str], ...]:
        """Pairs with lower-cased names, in insertion order."""
        return tuple((name.lower(), value) for name, value in self._pairs)

    @property
    def pairs(self) -> tuple[tuple[str, str], ...]:
        """Header pairs exactly as added (original name casing)."""
        return self._pairs

    @property
    def raw(self) -> list[tuple[bytes, bytes]]:
        """Encode as ASGI byte pairs with lower-cased names."""
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._pairs
        ]
