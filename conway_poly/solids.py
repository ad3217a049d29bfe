"""Seed polyhedra: platonic solids, pyramids, prisms, antiprisms and cupolae.

Every constructor returns faces wound counter-clockwise seen from outside, so
operator output keeps outward normals. Names are the single-letter seed codes
understood by :mod:`conway_poly.notation` (``T``, ``C``, ``O``, ``I``, ``D``,
``P<n>``, ``R<n>``, ``A<n>``, ``U<n>``, ``V<n>``).
"""

from __future__ import annotations

import re
from math import cos, pi, sin, sqrt
from typing import Callable, Dict, List

from .polyhedron import Polyhedron
from .vec3 import Vector3

__all__ = [
    "tetrahedron",
    "cube",
    "octahedron",
    "icosahedron",
    "dodecahedron",
    "pyramid",
    "prism",
    "antiprism",
    "cupola",
    "anticupola",
    "seed",
    "SEED_PATTERN",
]

SEED_PATTERN = re.compile(r"(?P<letter>[TCOID])|(?P<family>[PRAUV])(?P<sides>\d+)")


def tetrahedron() -> Polyhedron:
    return Polyhedron(
        name="T",
        vertices=[
            (1.0, 1.0, 1.0),
            (1.0, -1.0, -1.0),
            (-1.0, 1.0, -1.0),
            (-1.0, -1.0, 1.0),
        ],
        faces=[(0, 1, 2), (0, 2, 3), (0, 3, 1), (1, 3, 2)],
    )


def cube() -> Polyhedron:
    return Polyhedron(
        name="C",
        vertices=[
            (0.707, 0.707, 0.707),
            (-0.707, 0.707, 0.707),
            (-0.707, -0.707, 0.707),
            (0.707, -0.707, 0.707),
            (0.707, -0.707, -0.707),
            (0.707, 0.707, -0.707),
            (-0.707, 0.707, -0.707),
            (-0.707, -0.707, -0.707),
        ],
        faces=[
            (3, 0, 1, 2),
            (3, 4, 5, 0),
            (0, 5, 6, 1),
            (1, 6, 7, 2),
            (2, 7, 4, 3),
            (5, 4, 7, 6),
        ],
    )


def octahedron() -> Polyhedron:
    return Polyhedron(
        name="O",
        vertices=[
            (0.0, 0.0, 1.414),
            (1.414, 0.0, 0.0),
            (0.0, 1.414, 0.0),
            (-1.414, 0.0, 0.0),
            (0.0, -1.414, 0.0),
            (0.0, 0.0, -1.414),
        ],
        faces=[
            (0, 1, 2),
            (0, 2, 3),
            (0, 3, 4),
            (0, 4, 1),
            (1, 4, 5),
            (1, 5, 2),
            (2, 5, 3),
            (3, 5, 4),
        ],
    )


def icosahedron() -> Polyhedron:
    return Polyhedron(
        name="I",
        vertices=[
            (0.0, 0.0, 1.176),
            (1.051, 0.0, 0.526),
            (0.324, 1.0, 0.525),
            (-0.851, 0.618, 0.526),
            (-0.851, -0.618, 0.526),
            (0.325, -1.0, 0.526),
            (0.851, 0.618, -0.526),
            (0.851, -0.618, -0.526),
            (-0.325, 1.0, -0.526),
            (-1.051, 0.0, -0.526),
            (-0.325, -1.0, -0.526),
            (0.0, 0.0, -1.176),
        ],
        faces=[
            (0, 1, 2),
            (0, 2, 3),
            (0, 3, 4),
            (0, 4, 5),
            (0, 5, 1),
            (1, 5, 7),
            (1, 7, 6),
            (1, 6, 2),
            (2, 6, 8),
            (2, 8, 3),
            (3, 8, 9),
            (3, 9, 4),
            (4, 9, 10),
            (4, 10, 5),
            (5, 10, 7),
            (6, 7, 11),
            (6, 11, 8),
            (7, 10, 11),
            (8, 11, 9),
            (9, 11, 10),
        ],
    )


def dodecahedron() -> Polyhedron:
    return Polyhedron(
        name="D",
        vertices=[
            (0.0, 0.0, 1.07047),
            (0.713644, 0.0, 0.797878),
            (-0.356822, 0.618, 0.797878),
            (-0.356822, -0.618, 0.797878),
            (0.797878, 0.618034, 0.356822),
            (0.797878, -0.618, 0.356822),
            (-0.934172, 0.381966, 0.356822),
            (0.136294, 1.0, 0.356822),
            (0.136294, -1.0, 0.356822),
            (-0.934172, -0.381966, 0.356822),
            (0.934172, 0.381966, -0.356822),
            (0.934172, -0.381966, -0.356822),
            (-0.797878, 0.618, -0.356822),
            (-0.136294, 1.0, -0.356822),
            (-0.136294, -1.0, -0.356822),
            (-0.797878, -0.618034, -0.356822),
            (0.356822, 0.618, -0.797878),
            (0.356822, -0.618, -0.797878),
            (-0.713644, 0.0, -0.797878),
            (0.0, 0.0, -1.07047),
        ],
        faces=[
            (0, 1, 4, 7, 2),
            (0, 2, 6, 9, 3),
            (0, 3, 8, 5, 1),
            (1, 5, 11, 10, 4),
            (2, 7, 13, 12, 6),
            (3, 9, 15, 14, 8),
            (4, 10, 16, 13, 7),
            (5, 8, 14, 17, 11),
            (6, 12, 18, 15, 9),
            (10, 11, 17, 19, 16),
            (12, 13, 16, 19, 18),
            (14, 15, 18, 19, 17),
        ],
    )


def pyramid(n: int) -> Polyhedron:
    """Regular ``n``-gon based pyramid with its apex on +Z."""
    _require_sides(n, 3)
    theta = 2 * pi / n
    height = 1.0
    vertices: List[Vector3] = [(-cos(i * theta), -sin(i * theta), -0.2) for i in range(n)]
    vertices.append((0.0, 0.0, height))

    faces = [list(range(n - 1, -1, -1))]  # base
    for i in range(n):
        faces.append([i, (i + 1) % n, n])
    return Polyhedron(name=f"P{n}", vertices=vertices, faces=faces)


def prism(n: int) -> Polyhedron:
    _require_sides(n, 3)
    theta = 2 * pi / n
    h = sin(theta / 2)  # half-edge

    vertices: List[Vector3] = [(-cos(i * theta), -sin(i * theta), -h) for i in range(n)]
    vertices += [(-cos(i * theta), -sin(i * theta), h) for i in range(n)]

    faces = [list(range(n - 1, -1, -1)), list(range(n, 2 * n))]
    for i in range(n):
        faces.append([i, (i + 1) % n, (i + 1) % n + n, i + n])
    return Polyhedron(name=f"R{n}", vertices=vertices, faces=faces)


def antiprism(n: int) -> Polyhedron:
    _require_sides(n, 3)
    theta = 2 * pi / n
    h = sqrt(1 - 4 / (4 + 2 * cos(theta / 2) - 2 * cos(theta)))
    r = sqrt(1 - h * h)
    f = sqrt(h * h + (r * cos(theta / 2)) ** 2)
    # Edge midpoints (not vertices) land on the unit sphere.
    r = -r / f
    h = -h / f

    vertices: List[Vector3] = [(r * cos(i * theta), r * sin(i * theta), h) for i in range(n)]
    vertices += [
        (r * cos((i + 0.5) * theta), r * sin((i + 0.5) * theta), -h) for i in range(n)
    ]

    faces = [list(range(n - 1, -1, -1)), list(range(n, 2 * n))]
    for i in range(n):
        faces.append([i, (i + 1) % n, i + n])
        faces.append([i, i + n, (n + i - 1) % n + n])
    return Polyhedron(name=f"A{n}", vertices=vertices, faces=faces)


def cupola(n: int, alpha: float = 0.0, height: float = 0.0) -> Polyhedron:
    """``n``-gonal cupola; an empty polyhedron for ``n < 2``.

    ``height == 0`` selects ``rb - rt``; for ``3 <= n <= 5`` the regular
    (Johnson solid) height always wins.
    """
    if n < 2:
        return Polyhedron(name="", vertices=[], faces=[])

    s = 1.0
    rb = s / 2 / sin(pi / 2 / n)
    rt = s / 2 / sin(pi / n)
    if height == 0:
        height = rb - rt
    if 3 <= n <= 5:
        height = s * sqrt(1 - 1 / 4 / sin(pi / n) / sin(pi / n))

    vertices: List[Vector3] = [(0.0, 0.0, 0.0)] * (3 * n)
    for i in range(n):
        vertices[2 * i] = (
            rb * cos(pi * (2 * i) / n + pi / 2 / n + alpha),
            rb * sin(pi * (2 * i) / n + pi / 2 / n + alpha),
            0.0,
        )
        vertices[2 * i + 1] = (
            rb * cos(pi * (2 * i + 1) / n + pi / 2 / n - alpha),
            rb * sin(pi * (2 * i + 1) / n + pi / 2 / n - alpha),
            0.0,
        )
        vertices[2 * n + i] = (
            rt * cos(2 * pi * i / n),
            rt * sin(2 * pi * i / n),
            height,
        )

    faces = [list(range(2 * n - 1, -1, -1)), list(range(2 * n, 3 * n))]
    for i in range(n):
        faces.append([(2 * i + 1) % (2 * n), (2 * i + 2) % (2 * n), 2 * n + (i + 1) % n])
        faces.append([2 * i, (2 * i + 1) % (2 * n), 2 * n + (i + 1) % n, 2 * n + i])
    return Polyhedron(name=f"U{n}", vertices=vertices, faces=faces)


def anticupola(n: int, alpha: float = 0.0, height: float = 0.0) -> Polyhedron:
    """``n``-gonal anticupola; an empty polyhedron for ``n < 3``."""
    if n < 3:
        return Polyhedron(name="", vertices=[], faces=[])

    s = 1.0
    rb = s / 2 / sin(pi / 2 / n)
    rt = s / 2 / sin(pi / n)
    if height == 0:
        height = rb - rt

    vertices: List[Vector3] = [(0.0, 0.0, 0.0)] * (3 * n)
    for i in range(n):
        vertices[2 * i] = (
            rb * cos(pi * (2 * i) / n + alpha),
            rb * sin(pi * (2 * i) / n + alpha),
            0.0,
        )
        vertices[2 * i + 1] = (
            rb * cos(pi * (2 * i + 1) / n - alpha),
            rb * sin(pi * (2 * i + 1) / n - alpha),
            0.0,
        )
        vertices[2 * n + i] = (
            rt * cos(2 * pi * i / n),
            rt * sin(2 * pi * i / n),
            height,
        )

    faces = [list(range(2 * n - 1, -1, -1)), list(range(2 * n, 3 * n))]
    for i in range(n):
        faces.append([(2 * i) % (2 * n), (2 * i + 1) % (2 * n), 2 * n + i % n])
        faces.append([2 * n + (i + 1) % n, (2 * i + 1) % (2 * n), (2 * i + 2) % (2 * n)])
        faces.append([2 * n + (i + 1) % n, 2 * n + i % n, (2 * i + 1) % (2 * n)])
    return Polyhedron(name=f"V{n}", vertices=vertices, faces=faces)


_PLATONIC: Dict[str, Callable[[], Polyhedron]] = {
    "T": tetrahedron,
    "C": cube,
    "O": octahedron,
    "I": icosahedron,
    "D": dodecahedron,
}

_FAMILIES: Dict[str, Callable[[int], Polyhedron]] = {
    "P": pyramid,
    "R": prism,
    "A": antiprism,
    "U": cupola,
    "V": anticupola,
}


def seed(token: str) -> Polyhedron:
    """Build the seed polyhedron named by ``token`` (e.g. ``"D"``, ``"R5"``)."""
    match = SEED_PATTERN.fullmatch(token)
    if match is None:
        raise ValueError(f"Unknown seed polyhedron {token!r}")
    if match.group("letter"):
        return _PLATONIC[match.group("letter")]()
    return _FAMILIES[match.group("family")](int(match.group("sides")))


def _require_sides(n: int, minimum: int) -> None:
    if n < minimum:
        raise ValueError(f"Need at least {minimum} sides, got {n}")
