"""Symbolic vertex/face builder shared by every polyhedron operator.

An operator never allocates vertex indices itself. It *declares* vertices by
key (see :mod:`conway_poly.keys`) and describes faces either explicitly, as a
sequence of keys, or sparsely, one directed boundary step at a time through
``add_face_map``. :meth:`Flag.to_poly` then resolves the declarations in two
independent passes:

1. vertex resolution: stable sort by key, drop duplicate keys (the first
   declaration wins), assign contiguous indices in key order;
2. face resolution: face-map groups are walked as cycles (sorted by face key),
   followed by the explicit faces in declaration order.

A face-map chain that cannot be closed does not abort the operator: the face
is replaced by a degenerate 3-index placeholder and a :class:`FaceWarning` is
recorded and logged. A lookup of a key that was never declared is an operator
bug and raises :class:`MissingKeyError`.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass
from itertools import groupby
from operator import itemgetter
from typing import Dict, Iterable, List, Sequence, Tuple

from .keys import Key, key1
from .vec3 import Vector3

__all__ = [
    "MAX_FACE_STEPS",
    "MissingKeyError",
    "FaceWarning",
    "FlagResult",
    "Flag",
]

log = logging.getLogger(__name__)

# Lower bound on the number of steps a face-map walk may take before the face
# is abandoned. Groups with more directed edges than this get one step per edge.
MAX_FACE_STEPS = 30


class MissingKeyError(LookupError):
    """Raised when a face references a key no vertex was declared for."""

    def __init__(self, key: Key) -> None:
        super().__init__(f"No vertex declared for key {key}")
        self.key = key


@dataclass(frozen=True, slots=True)
class FaceWarning:
    """Diagnostic for a face-map group that could not be closed into a cycle."""

    face_key: Key
    reason: str  # "unclosed" (no successor) or "step_limit"
    steps: int
    partial: Tuple[int, ...]


@dataclass(slots=True)
class FlagResult:
    vertices: List[Vector3]
    faces: List[List[int]]
    warnings: List[FaceWarning]


class Flag:
    """Per-operator accumulator of vertex and face declarations."""

    __slots__ = ("v", "m", "fcs", "max_face_steps", "_keys")

    def __init__(self, max_face_steps: int = MAX_FACE_STEPS) -> None:
        self.v: List[Tuple[Key, Vector3]] = []
        self.m: List[Tuple[Key, Key, Key]] = []
        self.fcs: List[List[Key]] = []
        self.max_face_steps = max_face_steps
        self._keys: List[Key] = []

    # -- declarations -----------------------------------------------------

    def seed_vertices(self, vertices: Sequence[Vector3]) -> None:
        """Declare every existing vertex ``i`` under ``key1(i)``."""
        for i, point in enumerate(vertices):
            self.v.append((key1(i), point))

    def add_vertex(self, key: Key, coord: Vector3) -> None:
        self.v.append((key, coord))

    def add_face(self, keys: Iterable[Key]) -> None:
        self.fcs.append(list(keys))

    def add_face_map(self, face_key: Key, from_key: Key, to_key: Key) -> None:
        """Face ``face_key``, arriving at ``from_key``, next visits ``to_key``."""
        self.m.append((face_key, from_key, to_key))

    # -- resolution -------------------------------------------------------

    def find(self, key: Key) -> int:
        """Resolved index of ``key``; valid after vertex resolution."""
        pos = bisect_left(self._keys, key)
        if pos == len(self._keys) or self._keys[pos] != key:
            raise MissingKeyError(key)
        return pos

    def to_poly(self) -> FlagResult:
        vertices = self._resolve_vertices()
        warnings: List[FaceWarning] = []
        faces = self._resolve_face_maps(warnings)
        faces.extend([self.find(k) for k in face] for face in self.fcs)
        return FlagResult(vertices=vertices, faces=faces, warnings=warnings)

    def _resolve_vertices(self) -> List[Vector3]:
        keys: List[Key] = []
        vertices: List[Vector3] = []
        for key, group in groupby(sorted(self.v, key=itemgetter(0)), key=itemgetter(0)):
            keys.append(key)
            vertices.append(next(group)[1])
        self._keys = keys
        return vertices

    def _resolve_face_maps(self, warnings: List[FaceWarning]) -> List[List[int]]:
        faces: List[List[int]] = []
        for face_key, group in groupby(sorted(self.m), key=itemgetter(0)):
            entries = list(group)
            successor: Dict[Key, Key] = {frm: to for _, frm, to in entries}
            faces.append(self._walk(face_key, entries[0][2], successor, warnings))
        return faces

    def _walk(
        self,
        face_key: Key,
        start: Key,
        successor: Dict[Key, Key],
        warnings: List[FaceWarning],
    ) -> List[int]:
        limit = max(self.max_face_steps, len(successor))
        face: List[int] = []
        state = start
        while True:
            face.append(self.find(state))
            nxt = successor.get(state)
            if nxt is None:
                return self._degenerate(face_key, "unclosed", face, warnings)
            if nxt == start:
                return face
            if len(face) >= limit:
                return self._degenerate(face_key, "step_limit", face, warnings)
            state = nxt

    @staticmethod
    def _degenerate(
        face_key: Key, reason: str, partial: List[int], warnings: List[FaceWarning]
    ) -> List[int]:
        warning = FaceWarning(
            face_key=face_key, reason=reason, steps=len(partial), partial=tuple(partial)
        )
        warnings.append(warning)
        log.warning(
            "Face map %s could not be closed (%s after %d steps); using placeholder",
            face_key,
            reason,
            len(partial),
        )
        return (partial + [0, 0, 0])[:3]
