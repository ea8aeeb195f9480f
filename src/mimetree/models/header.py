from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Tuple


class Header:
    """
    Read-only ordered multi-map of header fields.

    Field names keep their original casing but are looked up
    case-insensitively. Repeated fields are kept in document order.
    """

    def __init__(self, fields: Iterable[Tuple[str, str]] = ()) -> None:
        self._fields: Tuple[Tuple[str, str], ...] = tuple((name, value) for name, value in fields)
        # lower-cased name -> positions in _fields
        self._index: Dict[str, List[int]] = {}
        for i, (name, _) in enumerate(self._fields):
            self._index.setdefault(name.lower(), []).append(i)

    def extended(self, fields: Iterable[Tuple[str, str]]) -> "Header":
        """Return a new Header with `fields` appended after the existing ones."""
        return Header(self._fields + tuple(fields))

    def get(self, name: str, default: str = "") -> str:
        positions = self._index.get(name.lower())
        if not positions:
            return default
        return self._fields[positions[0]][1]

    def get_all(self, name: str) -> List[str]:
        return [self._fields[i][1] for i in self._index.get(name.lower(), [])]

    def items(self) -> List[Tuple[str, str]]:
        return list(self._fields)

    def keys(self) -> List[str]:
        seen: Dict[str, str] = {}
        for n, _ in self._fields:
            seen.setdefault(n.lower(), n)
        return list(seen.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Header):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self) -> int:
        return hash(self._fields)

    def __repr__(self) -> str:
        return f"Header({list(self._fields)!r})"

    def to_dict(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for name in self.keys():
            out[name] = self.get_all(name)
        return out
