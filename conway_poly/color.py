"""Face coloring: random HSL palettes and area-bucketed face colors."""

from __future__ import annotations

import random
from typing import List, Sequence, Tuple

from .polyhedron import Polyhedron
from .vec3 import Vector3

__all__ = ["RGB", "DEFAULT_PALETTE_SIZE", "hsl_to_rgb", "random_palette", "calc_colors"]

RGB = Tuple[float, float, float]

DEFAULT_PALETTE_SIZE = 16
AREA_DECIMALS = 6


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """Convert hue/saturation/lightness, all in ``[0, 1]``, to an RGB triple."""
    if s == 0:
        return (l, l, l)  # achromatic
    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    return (
        _hue_to_rgb(p, q, h + 1 / 3),
        _hue_to_rgb(p, q, h),
        _hue_to_rgb(p, q, h - 1 / 3),
    )


def random_palette(n: int, rng: random.Random | None = None) -> List[RGB]:
    """``n`` random, mid-saturation, light colors.

    Pass a seeded :class:`random.Random` for reproducible palettes.
    """
    rng = rng or random.Random()
    palette: List[RGB] = []
    for _ in range(n):
        h = rng.random()
        s = 0.5 * rng.random() + 0.3
        l = 0.5 * rng.random() + 0.45
        palette.append(hsl_to_rgb(h, s, l))
    return palette


def calc_colors(
    poly: Polyhedron,
    normals: Sequence[Vector3] | None = None,
    palette: Sequence[RGB] | None = None,
) -> List[RGB]:
    """One color per face; faces with equal (rounded) area share a color.

    Distinct rounded areas are numbered in ascending order and bucket ``i``
    takes ``palette[i % len(palette)]``. Zero-area faces form a bucket of
    their own like any other area.
    """
    if palette is None:
        palette = random_palette(DEFAULT_PALETTE_SIZE)
    if not palette:
        raise ValueError("Palette must contain at least one color")

    areas = [round(a, AREA_DECIMALS) for a in poly.calc_areas(normals)]
    buckets = {area: i for i, area in enumerate(sorted(set(areas)))}
    return [palette[buckets[area] % len(palette)] for area in areas]
