"""Shared 3-component vector algebra helpers (pure Python).

All functions operate on ``Vector3 = Tuple[float, float, float]`` values and
are total over finite inputs: degenerate cases (zero-length vectors) return the
zero vector instead of raising. Used by ``polyhedron.py``, ``operators.py`` and
``solids.py`` so every operator computes new points with the same arithmetic.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

__all__ = [
    "Vector3",
    "ZERO",
    "norm",
    "normalize",
    "dot",
    "cross",
    "sub",
    "add",
    "scale",
    "divide",
    "neg",
    "midpoint",
    "tween",
    "one_third",
    "lerp",
    "mean",
]

Vector3 = Tuple[float, float, float]

ZERO: Vector3 = (0.0, 0.0, 0.0)


def norm(v: Vector3) -> float:
    """Euclidean length of *v*."""
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def normalize(v: Vector3) -> Vector3:
    """Unit vector in the direction of *v*, or (0,0,0) if degenerate."""
    n = norm(v)
    if n == 0.0:
        return ZERO
    return (v[0] / n, v[1] / n, v[2] / n)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def scale(v: Vector3, s: float) -> Vector3:
    return (v[0] * s, v[1] * s, v[2] * s)


def divide(v: Vector3, s: float) -> Vector3:
    """Component-wise division; a zero divisor yields the zero vector."""
    if s == 0:
        return ZERO
    return (v[0] / s, v[1] / s, v[2] / s)


def neg(v: Vector3) -> Vector3:
    return (-v[0], -v[1], -v[2])


def midpoint(a: Vector3, b: Vector3) -> Vector3:
    return ((a[0] + b[0]) * 0.5, (a[1] + b[1]) * 0.5, (a[2] + b[2]) * 0.5)


def tween(a: Vector3, b: Vector3, t: float) -> Vector3:
    """Point ``(1 - t) * a + t * b``."""
    u = 1.0 - t
    return (
        a[0] * u + b[0] * t,
        a[1] * u + b[1] * t,
        a[2] * u + b[2] * t,
    )


def one_third(a: Vector3, b: Vector3) -> Vector3:
    return tween(a, b, 1.0 / 3.0)


def lerp(a: Vector3, b: Vector3, t: float) -> Vector3:
    """Linear interpolation between *a* and *b* at parameter *t*."""
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def mean(points: Sequence[Vector3]) -> Vector3:
    """Unweighted mean of *points*; the zero vector for an empty sequence."""
    if not points:
        return ZERO
    sx = sy = sz = 0.0
    for x, y, z in points:
        sx += x
        sy += y
        sz += z
    n = len(points)
    return (sx / n, sy / n, sz / n)
