"""Directed-edge to owning-face lookup used by the dual operator."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from typing import List, Tuple

from .keys import Key, key2
from .polyhedron import Polyhedron

__all__ = ["OpenEdgeError", "FaceAdjacencyIndex"]


class OpenEdgeError(LookupError):
    """No face traverses the requested directed edge (open or malformed mesh)."""

    def __init__(self, v1: int, v2: int) -> None:
        super().__init__(f"No face owns directed edge ({v1}, {v2})")
        self.edge = (v1, v2)


@dataclass(frozen=True, slots=True)
class FaceAdjacencyIndex:
    """Sorted ``(directed_edge_key, face_id)`` entries, searched by bisection."""

    entries: Tuple[Tuple[Key, int], ...]

    @classmethod
    def build(cls, poly: Polyhedron) -> "FaceAdjacencyIndex":
        entries: List[Tuple[Key, int]] = []
        for face_id, face in enumerate(poly.faces):
            prev = face[-1]
            for cur in face:
                entries.append((key2(prev, cur), face_id))
                prev = cur
        entries.sort()
        return cls(entries=tuple(entries))

    def owner(self, v1: int, v2: int) -> int:
        """Face that traverses the directed edge ``v1 -> v2``."""
        target = key2(v1, v2)
        pos = bisect_left(self.entries, (target, -1))
        if pos == len(self.entries) or self.entries[pos][0] != target:
            raise OpenEdgeError(v1, v2)
        return self.entries[pos][1]

    def opposite_face(self, v1: int, v2: int) -> int:
        """Face on the other side of the edge ``v1 -> v2`` (owner of ``v2 -> v1``)."""
        return self.owner(v2, v1)

    def __len__(self) -> int:
        return len(self.entries)
