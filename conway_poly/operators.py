"""Conway-style polyhedron operators.

Each operator walks the faces of its input, declares new vertices and faces on
a :class:`~conway_poly.flag.Flag` under composite keys, and lets the flag
resolve them into a fresh :class:`~conway_poly.polyhedron.Polyhedron`. Keys are
built so that neighbouring faces name a shared new point identically, which is
what makes the resulting mesh free of duplicate vertices.

Faces are visited either as directed edges ``(v1, v2)`` starting from
``(face[-1], face[0])`` or as corner triples ``(v1, v2, v3)`` starting from
``(face[-2], face[-1], face[0])``.

The result is named by prefixing the operator letter to the input name, so a
chain reads back as Conway notation (``ambo(dodecahedron())`` is ``"aD"``).
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Tuple

from . import vec3 as vec
from .face_map import FaceAdjacencyIndex
from .flag import Flag
from .keys import Key, edge_key, face_edge_key, key1, key2, key3, key4, tag
from .polyhedron import Face, Polyhedron

__all__ = [
    "kis_n",
    "ambo",
    "gyro",
    "propellor",
    "reflect",
    "dual",
    "chamfer",
    "whirl",
    "quinto",
    "insetn",
    "extruden",
    "loft",
    "hollow",
    "perspectiva1",
]

log = logging.getLogger(__name__)

_KIS_APEX = tag("k")
_AMBO_VERTEX_FACE = tag("d")
_GYRO_CENTER = tag("c")
_CHAMFER_FACE = tag("o")
_CHAMFER_HEX = tag("h")
_WHIRL_CENTER = tag("n")
_WHIRL_FACE = tag("e")
_INSET_VERTEX = tag("f")
_INSET_FACE = tag("x")
_HOLLOW_INSET = tag("i")
_HOLLOW_DOWN = tag("d")
_HOLLOW_VERTEX = tag("v")


def _edges(face: Face) -> Iterator[Tuple[int, int]]:
    v1 = face[-1]
    for v2 in face:
        yield v1, v2
        v1 = v2


def _corners(face: Face) -> Iterator[Tuple[int, int, int]]:
    v1, v2 = face[-2], face[-1]
    for v3 in face:
        yield v1, v2, v3
        v1, v2 = v2, v3


def _count_suffix(n: int) -> str:
    return str(n) if n else ""


def _build(name: str, flag: Flag, source: Polyhedron) -> Polyhedron:
    result = flag.to_poly()
    poly = Polyhedron(
        name=name, vertices=result.vertices, faces=result.faces, warnings=result.warnings
    )
    log.debug(
        "%s: %d faces -> %d faces, %d vertices",
        name,
        len(source.faces),
        len(poly.faces),
        len(poly.vertices),
    )
    return poly


def kis_n(poly: Polyhedron, n: int = 0, apex_dist: float = 0.1) -> Polyhedron:
    """Raise a pyramid on every ``n``-sided face (every face when ``n == 0``).

    The apex sits ``apex_dist`` times the unnormalised face normal above the
    face center, so larger faces get taller apexes.
    Faces of other sizes pass through unchanged.
    """
    flag = Flag()
    normals = poly.calc_normals()
    centers = poly.calc_centers()

    for nface, face in enumerate(poly.faces):
        apex = key2(_KIS_APEX, nface)
        matches = n == 0 or len(face) == n
        if matches:
            flag.add_vertex(apex, vec.add(centers[nface], vec.scale(normals[nface], apex_dist)))
        for v1, v2 in _edges(face):
            flag.add_vertex(key1(v2), poly.vertices[v2])
            if matches:
                flag.add_face([key1(v1), key1(v2), apex])
            else:
                flag.add_face_map(key1(nface), key1(v1), key1(v2))

    return _build(f"k{_count_suffix(n)}{poly.name}", flag, poly)


def ambo(poly: Polyhedron) -> Polyhedron:
    """Truncate to edge midpoints: one vertex per edge, a face per vertex and per face."""
    flag = Flag()

    for face in poly.faces:
        original: List[Key] = []
        for v1, v2, v3 in _corners(face):
            m12, m23 = edge_key(v1, v2), edge_key(v2, v3)
            flag.add_vertex(m12, vec.midpoint(poly.vertices[v1], poly.vertices[v2]))
            original.append(m12)
            # Face of the truncated vertex v2.
            flag.add_face_map(key2(_AMBO_VERTEX_FACE, v2), m23, m12)
        flag.add_face(original)

    return _build(f"a{poly.name}", flag, poly)


def gyro(poly: Polyhedron) -> Polyhedron:
    """Replace every face by a fan of pentagons around its center."""
    flag = Flag()
    flag.seed_vertices(poly.vertices)
    centers = poly.calc_centers()

    for nface, face in enumerate(poly.faces):
        # Three slots so it cannot collide with the two-slot edge points below.
        center = key3(_GYRO_CENTER, nface, 0)
        flag.add_vertex(center, centers[nface])
        for v1, v2, v3 in _corners(face):
            flag.add_vertex(
                key2(v1, v2), vec.one_third(poly.vertices[v1], poly.vertices[v2])
            )
            flag.add_face([center, key2(v1, v2), key2(v2, v1), key1(v2), key2(v2, v3)])

    return _build(f"g{poly.name}", flag, poly)


def propellor(poly: Polyhedron) -> Polyhedron:
    """Twist every face, adding a quadrilateral per directed edge."""
    flag = Flag()
    flag.seed_vertices(poly.vertices)

    for nface, face in enumerate(poly.faces):
        for v1, v2, v3 in _corners(face):
            flag.add_vertex(
                key2(v1, v2), vec.one_third(poly.vertices[v1], poly.vertices[v2])
            )
            flag.add_face_map(key1(nface), key2(v1, v2), key2(v2, v3))
            flag.add_face([key2(v1, v2), key2(v2, v1), key1(v2), key2(v2, v3)])

    return _build(f"p{poly.name}", flag, poly)


def reflect(poly: Polyhedron) -> Polyhedron:
    """Point-reflect through the origin; faces are reversed to stay outward."""
    return Polyhedron(
        name=f"r{poly.name}",
        vertices=[vec.neg(p) for p in poly.vertices],
        faces=[tuple(reversed(face)) for face in poly.faces],
    )


def dual(poly: Polyhedron) -> Polyhedron:
    """One vertex per face (its center), one face per vertex.

    The face around an original vertex is assembled by linking, for each face
    touching it, the neighbouring face across the shared edge.
    """
    adjacency = FaceAdjacencyIndex.build(poly)
    centers = poly.calc_centers()
    flag = Flag()

    for nface, face in enumerate(poly.faces):
        flag.add_vertex(key1(nface), centers[nface])
        for v1, v2 in _edges(face):
            flag.add_face_map(
                key1(v1), key1(adjacency.opposite_face(v1, v2)), key1(nface)
            )

    return _build(f"d{poly.name}", flag, poly)


def chamfer(poly: Polyhedron, dist: float = 0.05) -> Polyhedron:
    """Bevel every edge into a hexagon; original faces shrink in place."""
    normals = poly.calc_normals()
    flag = Flag()

    for nface, face in enumerate(poly.faces):
        v1 = face[-1]
        v1new = key2(nface, v1)
        for v2 in face:
            # Push every old vertex away from the origin.
            flag.add_vertex(key1(v2), vec.scale(poly.vertices[v2], 1.0 + dist))
            # Face-local copy moved along the face normal.
            v2new = key2(nface, v2)
            flag.add_vertex(
                v2new, vec.add(poly.vertices[v2], vec.scale(normals[nface], dist * 1.5))
            )

            flag.add_face_map(key2(_CHAMFER_FACE, nface), v1new, v2new)

            hexagon = face_edge_key(_CHAMFER_HEX, v1, v2)
            flag.add_face_map(hexagon, key1(v2), v2new)
            flag.add_face_map(hexagon, v2new, v1new)
            flag.add_face_map(hexagon, v1new, key1(v1))

            v1, v1new = v2, v2new

    return _build(f"c{poly.name}", flag, poly)


def whirl(poly: Polyhedron) -> Polyhedron:
    """Gyro variant: a hexagon per directed edge plus a rotated copy of each face."""
    centers = poly.calc_centers()
    flag = Flag()
    flag.seed_vertices(poly.vertices)

    for nface, face in enumerate(poly.faces):
        for v1, v2, v3 in _corners(face):
            v12 = vec.one_third(poly.vertices[v1], poly.vertices[v2])
            flag.add_vertex(key2(v1, v2), v12)

            cv1 = key3(_WHIRL_CENTER, nface, v1)
            cv2 = key3(_WHIRL_CENTER, nface, v2)
            flag.add_vertex(cv1, vec.normalize(vec.one_third(centers[nface], v12)))

            flag.add_face([cv1, key2(v1, v2), key2(v2, v1), key1(v2), key2(v2, v3), cv2])
            flag.add_face_map(key2(_WHIRL_FACE, nface), cv1, cv2)

    return _build(f"w{poly.name}", flag, poly)


def quinto(poly: Polyhedron) -> Polyhedron:
    """A pentagon around every corner plus an inner copy of every face."""
    centers = poly.calc_centers()
    flag = Flag()

    for nface, face in enumerate(poly.faces):
        centroid = centers[nface]
        inner: List[Key] = []
        for v1, v2, v3 in _corners(face):
            t12, t23 = edge_key(v1, v2), edge_key(v2, v3)
            ti12 = face_edge_key(nface, v1, v2)
            ti23 = face_edge_key(nface, v2, v3)

            midpt = vec.midpoint(poly.vertices[v1], poly.vertices[v2])
            flag.add_vertex(t12, midpt)
            flag.add_vertex(ti12, vec.midpoint(midpt, centroid))
            flag.add_vertex(key1(v2), poly.vertices[v2])

            flag.add_face([ti12, t12, key1(v2), t23, ti23])
            inner.append(ti12)
        flag.add_face(inner)

    return _build(f"q{poly.name}", flag, poly)


def insetn(
    poly: Polyhedron, n: int = 0, inset_dist: float = 0.3, popout_dist: float = -0.1
) -> Polyhedron:
    """Inset every ``n``-sided face (all when ``n == 0``) and pop it along its normal."""
    flag = Flag()
    flag.seed_vertices(poly.vertices)
    normals = poly.calc_normals()
    centers = poly.calc_centers()

    found_any = False
    for nface, face in enumerate(poly.faces):
        matches = n == 0 or len(face) == n
        found_any = found_any or matches
        for v1, v2 in _edges(face):
            if matches:
                inner1 = key3(_INSET_VERTEX, nface, v1)
                inner2 = key3(_INSET_VERTEX, nface, v2)
                flag.add_vertex(
                    inner2,
                    vec.add(
                        vec.tween(poly.vertices[v2], centers[nface], inset_dist),
                        vec.scale(normals[nface], popout_dist),
                    ),
                )
                flag.add_face([key1(v1), key1(v2), inner2, inner1])
                flag.add_face_map(key2(_INSET_FACE, nface), inner1, inner2)
            else:
                flag.add_face_map(key1(nface), key1(v1), key1(v2))

    if not found_any:
        log.warning("insetn: no %d-sided faces in %s; topology unchanged", n, poly.name)

    return _build(f"n{_count_suffix(n)}{poly.name}", flag, poly)


def extruden(poly: Polyhedron, n: int = 0, popout_dist: float = 0.1) -> Polyhedron:
    """Push every ``n``-sided face outward on four-sided walls."""
    return insetn(poly, n, 0.0, popout_dist).renamed(f"x{_count_suffix(n)}{poly.name}")


def loft(poly: Polyhedron, n: int = 0, alpha: float = 0.0) -> Polyhedron:
    """Inset every ``n``-sided face in its own plane."""
    return insetn(poly, n, alpha, 0.0).renamed(f"l{_count_suffix(n)}{poly.name}")


def hollow(poly: Polyhedron, inset_dist: float = 0.2, thickness: float = 0.1) -> Polyhedron:
    """Cut a window into every face and tunnel it ``thickness`` deep.

    Each face keeps a rim towards its inset window and the window walls run
    inward along the averaged face normal. The tunnels are left open.
    """
    flag = Flag()
    flag.seed_vertices(poly.vertices)
    face_normals = poly.avg_normals()
    centers = poly.calc_centers()

    for nface, face in enumerate(poly.faces):
        for v2 in face:
            inset = vec.tween(poly.vertices[v2], centers[nface], inset_dist)
            flag.add_vertex(key4(_HOLLOW_INSET, nface, _HOLLOW_VERTEX, v2), inset)
            flag.add_vertex(
                key4(_HOLLOW_DOWN, nface, _HOLLOW_VERTEX, v2),
                vec.sub(inset, vec.scale(face_normals[nface], thickness)),
            )

        for v1, v2 in _edges(face):
            in1 = key4(_HOLLOW_INSET, nface, _HOLLOW_VERTEX, v1)
            in2 = key4(_HOLLOW_INSET, nface, _HOLLOW_VERTEX, v2)
            down1 = key4(_HOLLOW_DOWN, nface, _HOLLOW_VERTEX, v1)
            down2 = key4(_HOLLOW_DOWN, nface, _HOLLOW_VERTEX, v2)
            flag.add_face([key1(v1), key1(v2), in2, in1])
            flag.add_face([in1, in2, down2, down1])

    return _build(f"H{poly.name}", flag, poly)


def perspectiva1(poly: Polyhedron) -> Polyhedron:
    """Stellate each face inward: an inset face ringed by triangles."""
    centers = poly.calc_centers()
    flag = Flag()
    flag.seed_vertices(poly.vertices)

    for nface, face in enumerate(poly.faces):
        inner: List[Key] = []
        for v1, v2, v3 in _corners(face):
            v12, v21, v23 = key2(v1, v2), key2(v2, v1), key2(v2, v3)
            flag.add_vertex(
                v12,
                vec.midpoint(
                    vec.midpoint(poly.vertices[v1], poly.vertices[v2]), centers[nface]
                ),
            )
            inner.append(v12)
            # Remainder of the stellated face around corner v2.
            flag.add_face([v23, v12, key1(v2)])
            # One of the two triangles replacing the old edge v1 -> v2.
            flag.add_face([key1(v1), v21, v12])
        flag.add_face(inner)

    return _build(f"P{poly.name}", flag, poly)
