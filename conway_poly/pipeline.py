"""Pipeline architecture for recipe generation.

Splits the generation flow into composable, testable steps. Each step receives
a shared ``PipelineContext`` and can read/write its fields. Steps declare their
own ``should_run`` predicate so the runner skips stages that have nothing to do.

Usage::

    from conway_poly.pipeline import PolyhedronPipeline, PipelineContext

    ctx = PipelineContext(params=OperatorParameters(recipe="dkD"))
    PolyhedronPipeline().run(ctx)
    ctx.polyhedron, ctx.report, ctx.colors
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .color import RGB, calc_colors, random_palette
from .flag import FaceWarning
from .notation import Recipe, apply_operator, parse_recipe
from .parameters import OperatorParameters
from .polyhedron import Polyhedron
from .solids import seed

__all__ = [
    "PipelineContext",
    "PipelineStep",
    "PolyhedronPipeline",
    "SeedStep",
    "TransformStep",
    "InspectionStep",
    "ColoringStep",
    "inspect_polyhedron",
    "default_steps",
]

AREA_EPSILON = 1e-12


# ---------------------------------------------------------------------------
# Pipeline context: shared state between steps
# ---------------------------------------------------------------------------


@dataclass
class PipelineContext:
    """Mutable state bag passed through every pipeline step."""

    params: OperatorParameters
    rng: random.Random | None = None  # palette randomness; seed it for repeatable colors

    # Populated by SeedStep.
    recipe: Recipe | None = None
    seed: Polyhedron | None = None

    # Populated by TransformStep.
    polyhedron: Polyhedron | None = None
    warnings: List[FaceWarning] = field(default_factory=list)

    # Populated by InspectionStep / ColoringStep.
    report: Dict[str, Any] = field(default_factory=dict)
    colors: List[RGB] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Step base class
# ---------------------------------------------------------------------------


class PipelineStep(ABC):
    """A single composable stage of the generation pipeline."""

    name: str = "unnamed"

    def should_run(self, ctx: PipelineContext) -> bool:
        """Return ``False`` to skip this step for the current context."""
        return True

    @abstractmethod
    def execute(self, ctx: PipelineContext) -> None:
        """Perform the step's work, mutating *ctx* as needed."""
        ...


# ---------------------------------------------------------------------------
# Concrete steps
# ---------------------------------------------------------------------------


class SeedStep(PipelineStep):
    """Parse the recipe and build its seed solid."""

    name = "seed"

    def execute(self, ctx: PipelineContext) -> None:
        ctx.recipe = parse_recipe(ctx.params.recipe)
        ctx.seed = seed(ctx.recipe.seed)
        ctx.polyhedron = ctx.seed
        logging.info("Seed %s", ctx.seed.summary())


class TransformStep(PipelineStep):
    """Apply the recipe's operators right to left."""

    name = "transform"

    def should_run(self, ctx: PipelineContext) -> bool:
        if ctx.recipe is None or ctx.polyhedron is None:
            logging.info("No seed available; skipping transform")
            return False
        return bool(ctx.recipe.operations)

    def execute(self, ctx: PipelineContext) -> None:
        poly = ctx.polyhedron
        for letter, n in ctx.recipe.operations:
            poly = apply_operator(poly, letter, n, ctx.params)
            ctx.warnings.extend(poly.warnings)
        ctx.polyhedron = poly.renamed(ctx.recipe.text)
        logging.info("Built %s", ctx.polyhedron.summary())


class InspectionStep(PipelineStep):
    """Report mesh statistics and anomalies; never modifies the polyhedron."""

    name = "inspection"

    def should_run(self, ctx: PipelineContext) -> bool:
        return ctx.polyhedron is not None

    def execute(self, ctx: PipelineContext) -> None:
        ctx.report = inspect_polyhedron(ctx.polyhedron, ctx.warnings)
        _log_inspection_report(ctx.report)


class ColoringStep(PipelineStep):
    """Assign one palette color per face, shared by faces of equal area."""

    name = "coloring"

    def should_run(self, ctx: PipelineContext) -> bool:
        return ctx.polyhedron is not None and bool(ctx.polyhedron.faces)

    def execute(self, ctx: PipelineContext) -> None:
        palette = random_palette(ctx.params.palette_size, ctx.rng)
        ctx.colors = calc_colors(ctx.polyhedron, palette=palette)
        logging.info(
            "Colored %d faces with %d distinct colors", len(ctx.colors), len(set(ctx.colors))
        )


# ---------------------------------------------------------------------------
# Pipeline orchestrator
# ---------------------------------------------------------------------------


def default_steps() -> List[PipelineStep]:
    """Return the standard ordered list of pipeline steps."""
    return [
        SeedStep(),
        TransformStep(),
        InspectionStep(),
        ColoringStep(),
    ]


class PolyhedronPipeline:
    """Orchestrates the generation flow.

    Users can supply a custom step list to re-order, insert, or remove stages.
    """

    def __init__(self, steps: List[PipelineStep] | None = None) -> None:
        self.steps = steps if steps is not None else default_steps()

    def run(self, ctx: PipelineContext) -> PipelineContext:
        """Execute all enabled steps in order."""
        ctx.params.validate()
        for step in self.steps:
            if step.should_run(ctx):
                logging.info("[pipeline] %s", step.name)
                step.execute(ctx)
        return ctx

    def insert_before(self, reference_name: str, step: PipelineStep) -> None:
        """Insert *step* immediately before the step named *reference_name*."""
        for i, existing in enumerate(self.steps):
            if existing.name == reference_name:
                self.steps.insert(i, step)
                return
        self.steps.append(step)

    def insert_after(self, reference_name: str, step: PipelineStep) -> None:
        """Insert *step* immediately after the step named *reference_name*."""
        for i, existing in enumerate(self.steps):
            if existing.name == reference_name:
                self.steps.insert(i + 1, step)
                return
        self.steps.append(step)

    def remove(self, step_name: str) -> None:
        """Remove the step with the given name, if present."""
        self.steps = [s for s in self.steps if s.name != step_name]

    def replace(self, step_name: str, new_step: PipelineStep) -> None:
        """Replace an existing step with *new_step*."""
        for i, existing in enumerate(self.steps):
            if existing.name == step_name:
                self.steps[i] = new_step
                return
        self.steps.append(new_step)


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


def inspect_polyhedron(
    poly: Polyhedron, warnings: List[FaceWarning] | None = None
) -> Dict[str, Any]:
    """Counts, Euler characteristic and anomalies of ``poly`` as a plain dict."""
    if warnings is None:
        warnings = list(poly.warnings)
    out_of_range = poly.check_indices()

    directed = Counter()
    for face in poly.faces:
        prev = face[-1] if face else None
        for cur in face:
            directed[(prev, cur)] += 1
            prev = cur
    unpaired = sorted(edge for edge in directed if (edge[1], edge[0]) not in directed)

    degenerate: List[int] = []
    if not out_of_range:
        for idx, area in enumerate(poly.calc_areas()):
            face = poly.faces[idx]
            if len(set(face)) < 3 or area < AREA_EPSILON:
                degenerate.append(idx)

    edge_count = len(poly.edges())
    return {
        "name": poly.name,
        "vertices": len(poly.vertices),
        "faces": len(poly.faces),
        "edges": edge_count,
        "euler_characteristic": len(poly.vertices) - edge_count + len(poly.faces),
        "face_size_histogram": dict(sorted(Counter(len(f) for f in poly.faces).items())),
        "out_of_range_indices": out_of_range,
        "unpaired_edges": unpaired,
        "degenerate_faces": degenerate,
        "warnings": [
            {"face_key": list(w.face_key), "reason": w.reason, "steps": w.steps}
            for w in warnings
        ],
    }


def _log_inspection_report(report: Dict[str, Any]) -> None:
    logging.info(
        "V=%d E=%d F=%d (Euler characteristic %d)",
        report.get("vertices", 0),
        report.get("edges", 0),
        report.get("faces", 0),
        report.get("euler_characteristic", 0),
    )
    sizes = report.get("face_size_histogram", {})
    if sizes:
        logging.info("Face size distribution: %s", sizes)
    out_of_range = report.get("out_of_range_indices", [])
    if out_of_range:
        logging.error(
            "%d face indices out of range (sample: %s)", len(out_of_range), out_of_range[:5]
        )
    unpaired = report.get("unpaired_edges", [])
    if unpaired:
        logging.warning("%d directed edges have no opposite edge", len(unpaired))
    degenerate = report.get("degenerate_faces", [])
    if degenerate:
        logging.warning("%d degenerate faces (sample: %s)", len(degenerate), degenerate[:5])
    warnings = report.get("warnings", [])
    if warnings:
        logging.warning("%d face maps fell back to placeholders", len(warnings))
