"""Polyhedron data model and per-face geometry queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Sequence, Tuple

from . import vec3 as v3
from .vec3 import Vector3

__all__ = [
    "Vector3",
    "Face",
    "Edge",
    "Polyhedron",
    "face_normal",
    "face_center",
    "face_area",
    "face_avg_normal",
]

Face = Tuple[int, ...]
Edge = Tuple[int, int]


def face_normal(points: Sequence[Vector3]) -> Vector3:
    """Unnormalised normal ``cross(p1 - p0, p2 - p1)`` of the first three corners.

    Its length scales with the face, and so do the operator offsets built on
    it. Not robust for non-planar faces or faces whose first three corners
    are collinear: those yield a wrong or zero normal.
    """
    if len(points) < 3:
        return v3.ZERO
    p0, p1, p2 = points[0], points[1], points[2]
    return v3.cross(v3.sub(p1, p0), v3.sub(p2, p1))


def face_center(points: Sequence[Vector3]) -> Vector3:
    """Unweighted mean of the face corners (not the area centroid)."""
    return v3.mean(points)


def face_area(points: Sequence[Vector3], normal: Vector3) -> float:
    """Area of a planar polygon projected onto ``normal`` (3D shoelace)."""
    if len(points) < 3:
        return 0.0
    total = v3.ZERO
    prev = points[-1]
    for cur in points:
        total = v3.add(total, v3.cross(prev, cur))
        prev = cur
    return abs(v3.dot(v3.normalize(normal), total)) * 0.5


def face_avg_normal(points: Sequence[Vector3]) -> Vector3:
    """Unit sum of the corner normals over every consecutive corner triple."""
    if len(points) < 3:
        return v3.ZERO
    total = v3.ZERO
    p1, p2 = points[-2], points[-1]
    for p3 in points:
        total = v3.add(total, v3.cross(v3.sub(p2, p1), v3.sub(p3, p2)))
        p1, p2 = p2, p3
    return v3.normalize(total)


@dataclass(frozen=True, slots=True)
class Polyhedron:
    """Named solid: vertex coordinates plus faces as ordered vertex indices.

    Face winding follows the right-hand rule (counter-clockwise seen from
    outside). Instances are immutable; operators always build a new one.
    ``warnings`` carries resolver diagnostics for faces that had to be
    replaced by a placeholder while this polyhedron was built.
    """

    name: str
    vertices: Tuple[Vector3, ...]
    faces: Tuple[Face, ...]
    warnings: Tuple[Any, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "vertices", tuple((float(x), float(y), float(z)) for x, y, z in self.vertices)
        )
        object.__setattr__(self, "faces", tuple(tuple(int(i) for i in f) for f in self.faces))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    # -- per-face queries -------------------------------------------------

    def face_points(self, face: Iterable[int]) -> List[Vector3]:
        return [self.vertices[i] for i in face]

    def calc_normals(self) -> List[Vector3]:
        return [face_normal(self.face_points(f)) for f in self.faces]

    def calc_centers(self) -> List[Vector3]:
        return [face_center(self.face_points(f)) for f in self.faces]

    def calc_areas(self, normals: Sequence[Vector3] | None = None) -> List[float]:
        if normals is None:
            normals = self.calc_normals()
        return [face_area(self.face_points(f), n) for f, n in zip(self.faces, normals)]

    def avg_normals(self) -> List[Vector3]:
        """Per-face normals averaged over all corners (planarity tolerant)."""
        return [face_avg_normal(self.face_points(f)) for f in self.faces]

    def vertex_normals(self) -> List[Vector3]:
        """Per-vertex unit normal: mean direction of the incident face normals."""
        sums: List[Vector3] = [v3.ZERO] * len(self.vertices)
        for face, normal in zip(self.faces, self.calc_normals()):
            for idx in face:
                sums[idx] = v3.add(sums[idx], normal)
        return [v3.normalize(s) for s in sums]

    # -- topology ---------------------------------------------------------

    def edges(self) -> List[Edge]:
        """Sorted undirected edges."""
        edge_set = set()
        for face in self.faces:
            prev = face[-1]
            for cur in face:
                edge_set.add((prev, cur) if prev < cur else (cur, prev))
                prev = cur
        return sorted(edge_set)

    def check_indices(self) -> List[Tuple[int, int]]:
        """Return ``(face_index, vertex_index)`` pairs that are out of range."""
        count = len(self.vertices)
        return [
            (fi, idx)
            for fi, face in enumerate(self.faces)
            for idx in face
            if not 0 <= idx < count
        ]

    # -- derived copies ---------------------------------------------------

    def renamed(self, name: str) -> "Polyhedron":
        return Polyhedron(name=name, vertices=self.vertices, faces=self.faces, warnings=self.warnings)

    def normalized(self) -> "Polyhedron":
        """Scale so the overall coordinate span (max - min) becomes 1."""
        if not self.vertices:
            return self
        coords = [c for p in self.vertices for c in p]
        span = abs(max(coords) - min(coords))
        if span == 0:
            return self
        return Polyhedron(
            name=self.name,
            vertices=[v3.divide(p, span) for p in self.vertices],
            faces=self.faces,
            warnings=self.warnings,
        )

    def summary(self) -> str:
        return f"{self.name}: {len(self.vertices)} vertices / {len(self.faces)} faces"
