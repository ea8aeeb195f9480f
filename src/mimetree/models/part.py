from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple

from mimetree.models.header import Header


@dataclass(frozen=True)
class Part:
    """
    One node of a parsed MIME tree.

    Parts live in a PartTree and point at each other by index; the
    parent/first_child/next_sibling properties resolve those indices
    through the owning tree.
    """
    index: int
    header: Header
    content_type: str
    disposition: str = ""
    file_name: str = ""
    content: bytes = b""
    parent_index: Optional[int] = None
    first_child_index: Optional[int] = None
    next_sibling_index: Optional[int] = None
    depth: int = 0
    _tree: Optional["PartTree"] = field(default=None, init=False, repr=False, compare=False)

    def _resolve(self, idx: Optional[int]) -> Optional["Part"]:
        if idx is None or self._tree is None:
            return None
        return self._tree[idx]

    @property
    def tree(self) -> Optional["PartTree"]:
        return self._tree

    @property
    def parent(self) -> Optional["Part"]:
        return self._resolve(self.parent_index)

    @property
    def first_child(self) -> Optional["Part"]:
        return self._resolve(self.first_child_index)

    @property
    def next_sibling(self) -> Optional["Part"]:
        return self._resolve(self.next_sibling_index)

    @property
    def is_multipart(self) -> bool:
        return self.content_type.startswith("multipart/")

    @property
    def children(self) -> Iterator["Part"]:
        child = self.first_child
        while child is not None:
            yield child
            child = child.next_sibling

    def walk(self) -> Iterator["Part"]:
        """Depth-first traversal in document order, starting with this part."""
        yield self
        for child in self.children:
            yield from child.walk()

    def __repr__(self) -> str:
        extra = []
        if self.disposition:
            extra.append(f"disposition={self.disposition!r}")
        if self.file_name:
            extra.append(f"file_name={self.file_name!r}")

        extra_s = (", " + ", ".join(extra)) if extra else ""
        return (
            f"Part("
            f"index={self.index!r}, "
            f"content_type={self.content_type!r}, "
            f"size={len(self.content)} bytes"
            f"{extra_s})"
        )

    def to_dict(self, *, include_content: bool = False) -> dict:
        out = {
            "content_type": self.content_type,
            "disposition": self.disposition,
            "file_name": self.file_name,
            "size": len(self.content),
            "headers": self.header.to_dict(),
            "children": [c.to_dict(include_content=include_content) for c in self.children],
        }
        if include_content:
            out["content"] = base64.b64encode(self.content).decode("ascii")
        return out


class PartTree:
    """
    Immutable arena of parts in document (pre-order) order.

    The root is always at index 0.
    """

    def __init__(self, parts: Sequence[Part]) -> None:
        if not parts:
            raise ValueError("PartTree needs at least a root part")
        self._parts: Tuple[Part, ...] = tuple(parts)
        for p in self._parts:
            # frozen=True, so use object.__setattr__
            object.__setattr__(p, "_tree", self)

    @property
    def root(self) -> Part:
        return self._parts[0]

    def __getitem__(self, idx: int) -> Part:
        return self._parts[idx]

    def __len__(self) -> int:
        return len(self._parts)

    def __iter__(self) -> Iterator[Part]:
        return iter(self._parts)

    def __repr__(self) -> str:
        return f"PartTree(parts={len(self._parts)}, root={self.root!r})"
