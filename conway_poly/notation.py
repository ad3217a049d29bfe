"""Conway notation recipes such as ``"dkD"`` or ``"k4n5R5"``.

A recipe is a run of operator tokens followed by a seed token. Operators are
applied right to left, so ``"dkD"`` is ``dual(kis_n(dodecahedron()))``. An
operator token is one letter, optionally followed by a face-size argument for
the operators that filter faces by size (``k``, ``n``, ``x``, ``l``).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from . import operators as ops
from .parallel import kis_n_chunked
from .parameters import OperatorParameters
from .polyhedron import Polyhedron
from .solids import SEED_PATTERN, seed

__all__ = [
    "RecipeError",
    "OperatorSpec",
    "OPERATORS",
    "Recipe",
    "parse_recipe",
    "apply_operator",
    "apply_recipe",
]

log = logging.getLogger(__name__)

_RECIPE_PATTERN = re.compile(r"(?P<ops>(?:[A-Za-z]\d*)*?)(?P<seed>" + SEED_PATTERN.pattern + r")")
_OP_TOKEN = re.compile(r"(?P<letter>[A-Za-z])(?P<count>\d*)")


class RecipeError(ValueError):
    """Malformed recipe: unknown operator, stray argument or missing seed."""


Apply = Callable[[Polyhedron, int, OperatorParameters], Polyhedron]


@dataclass(frozen=True, slots=True)
class OperatorSpec:
    letter: str
    name: str
    apply: Apply
    takes_count: bool = False


def _kis(poly: Polyhedron, n: int, params: OperatorParameters) -> Polyhedron:
    if params.parallel_kis:
        return kis_n_chunked(
            poly,
            n,
            params.apex_dist,
            chunk_size=params.chunk_size,
            max_workers=params.max_workers,
        )
    return ops.kis_n(poly, n, params.apex_dist)


OPERATORS: Dict[str, OperatorSpec] = {
    spec.letter: spec
    for spec in (
        OperatorSpec("k", "kis", _kis, takes_count=True),
        OperatorSpec("a", "ambo", lambda p, n, c: ops.ambo(p)),
        OperatorSpec("g", "gyro", lambda p, n, c: ops.gyro(p)),
        OperatorSpec("p", "propellor", lambda p, n, c: ops.propellor(p)),
        OperatorSpec("r", "reflect", lambda p, n, c: ops.reflect(p)),
        OperatorSpec("d", "dual", lambda p, n, c: ops.dual(p)),
        OperatorSpec("c", "chamfer", lambda p, n, c: ops.chamfer(p, c.chamfer_dist)),
        OperatorSpec("w", "whirl", lambda p, n, c: ops.whirl(p)),
        OperatorSpec("q", "quinto", lambda p, n, c: ops.quinto(p)),
        OperatorSpec(
            "n",
            "inset",
            lambda p, n, c: ops.insetn(p, n, c.inset_dist, c.popout_dist),
            takes_count=True,
        ),
        OperatorSpec(
            "x", "extrude", lambda p, n, c: ops.extruden(p, n, c.extrude_dist), takes_count=True
        ),
        OperatorSpec("l", "loft", lambda p, n, c: ops.loft(p, n, c.loft_alpha), takes_count=True),
        OperatorSpec(
            "H", "hollow", lambda p, n, c: ops.hollow(p, c.hollow_inset, c.hollow_thickness)
        ),
        OperatorSpec("P", "perspectiva1", lambda p, n, c: ops.perspectiva1(p)),
    )
}


@dataclass(frozen=True, slots=True)
class Recipe:
    """Parsed recipe; ``operations`` are listed in application order."""

    text: str
    seed: str
    operations: Tuple[Tuple[str, int], ...]


def parse_recipe(recipe: str) -> Recipe:
    text = recipe.strip()
    match = _RECIPE_PATTERN.fullmatch(text)
    if match is None:
        raise RecipeError(f"Recipe {recipe!r} does not end in a known seed")

    operations: List[Tuple[str, int]] = []
    for token in _OP_TOKEN.finditer(match.group("ops")):
        letter, count = token.group("letter"), token.group("count")
        spec = OPERATORS.get(letter)
        if spec is None:
            raise RecipeError(f"Unknown operator {letter!r} in recipe {recipe!r}")
        if count and not spec.takes_count:
            raise RecipeError(f"Operator {letter!r} takes no argument (got {token.group(0)!r})")
        operations.append((letter, int(count) if count else 0))
    operations.reverse()
    return Recipe(text=text, seed=match.group("seed"), operations=tuple(operations))


def apply_operator(
    poly: Polyhedron, letter: str, n: int = 0, params: Optional[OperatorParameters] = None
) -> Polyhedron:
    spec = OPERATORS.get(letter)
    if spec is None:
        raise RecipeError(f"Unknown operator {letter!r}")
    return spec.apply(poly, n, params or OperatorParameters())


def apply_recipe(recipe: str, params: Optional[OperatorParameters] = None) -> Polyhedron:
    """Build the polyhedron described by ``recipe``; it is named after the recipe."""
    params = params or OperatorParameters()
    parsed = parse_recipe(recipe)
    poly = seed(parsed.seed)
    for letter, n in parsed.operations:
        poly = apply_operator(poly, letter, n, params)
    log.info("%s: %s", parsed.text, poly.summary())
    return poly.renamed(parsed.text)
