import importlib.util
import json
import logging
import random
import sys
from pathlib import Path

import pytest

from conway_poly import solids
from conway_poly.notation import RecipeError
from conway_poly.parameters import OperatorParameters
from conway_poly.pipeline import (
    PipelineContext,
    PipelineStep,
    PolyhedronPipeline,
    default_steps,
    inspect_polyhedron,
)
from conway_poly.polyhedron import Polyhedron

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run(recipe, **kwargs):
    ctx = PipelineContext(params=OperatorParameters(recipe=recipe, **kwargs), rng=random.Random(7))
    return PolyhedronPipeline().run(ctx)


class TestPipeline:
    def test_step_ordering(self):
        names = [s.name for s in default_steps()]
        assert names == ["seed", "transform", "inspection", "coloring"]

    def test_full_run_populates_context(self):
        ctx = _run("kC")
        assert ctx.seed.name == "C"
        assert ctx.polyhedron.name == "kC"
        assert ctx.report["vertices"] == 14
        assert ctx.report["faces"] == 24
        assert ctx.report["edges"] == 36
        assert ctx.report["euler_characteristic"] == 2
        assert ctx.report["face_size_histogram"] == {3: 24}
        assert len(ctx.colors) == 24
        assert ctx.warnings == []

    def test_seed_only_recipe_skips_transform(self, caplog):
        with caplog.at_level(logging.INFO):
            ctx = _run("O")
        assert ctx.polyhedron is ctx.seed
        assert "[pipeline] seed" in caplog.text
        assert "[pipeline] transform" not in caplog.text

    def test_colors_are_reproducible(self):
        assert _run("aD").colors == _run("aD").colors

    def test_parallel_kis_flag(self):
        ctx = _run("kI", parallel_kis=True, chunk_size=5)
        # Four chunks of five faces, each with its own copy of shared corners.
        assert ctx.report["faces"] == 60
        assert ctx.report["unpaired_edges"]

    def test_invalid_recipe_raises(self):
        with pytest.raises(RecipeError):
            _run("zC")

    def test_invalid_parameters_raise(self):
        ctx = PipelineContext(params=OperatorParameters(chunk_size=0))
        with pytest.raises(ValueError):
            PolyhedronPipeline().run(ctx)

    def test_custom_step_insertion(self):
        seen = []

        class RecordStep(PipelineStep):
            name = "record"

            def execute(self, ctx):
                seen.append(ctx.polyhedron.name)

        pipeline = PolyhedronPipeline()
        pipeline.insert_after("transform", RecordStep())
        pipeline.remove("coloring")
        ctx = pipeline.run(PipelineContext(params=OperatorParameters(recipe="dC")))
        assert seen == ["dC"]
        assert ctx.colors == []
        assert [s.name for s in pipeline.steps] == ["seed", "transform", "record", "inspection"]

    def test_insert_before_and_replace(self):
        seen = []

        class RecordStep(PipelineStep):
            def __init__(self, name):
                self.name = name

            def execute(self, ctx):
                seen.append((self.name, ctx.polyhedron.name if ctx.polyhedron else None))

        pipeline = PolyhedronPipeline()
        pipeline.insert_before("seed", RecordStep("before-seed"))
        pipeline.insert_before("inspection", RecordStep("before-inspection"))
        pipeline.replace("coloring", RecordStep("palette"))
        ctx = pipeline.run(PipelineContext(params=OperatorParameters(recipe="aC")))

        assert [s.name for s in pipeline.steps] == [
            "before-seed",
            "seed",
            "transform",
            "before-inspection",
            "inspection",
            "palette",
        ]
        assert seen == [("before-seed", None), ("before-inspection", "aC"), ("palette", "aC")]
        assert ctx.report["faces"] == 14
        assert ctx.colors == []

    def test_unknown_reference_appends(self):
        class NoopStep(PipelineStep):
            name = "noop"

            def execute(self, ctx):
                pass

        pipeline = PolyhedronPipeline()
        pipeline.insert_before("missing", NoopStep())
        pipeline.replace("also-missing", NoopStep())
        assert [s.name for s in pipeline.steps][-2:] == ["noop", "noop"]


def test_inspection_reports_anomalies():
    poly = Polyhedron(
        name="bad",
        vertices=[(0, 0, 0), (1, 0, 0), (2, 0, 0)],
        faces=[(0, 1, 2), (0, 1, 5)],
    )
    report = inspect_polyhedron(poly)
    assert report["out_of_range_indices"] == [(1, 5)]
    assert report["unpaired_edges"]
    assert report["warnings"] == []


def test_inspection_flags_degenerate_faces():
    poly = Polyhedron(
        name="flat",
        vertices=[(0, 0, 0), (1, 0, 0), (2, 0, 0)],
        faces=[(0, 1, 2), (2, 1, 0)],
    )
    report = inspect_polyhedron(poly)
    assert report["degenerate_faces"] == [0, 1]
    assert report["unpaired_edges"] == []


def test_inspection_of_closed_solid_is_clean():
    report = inspect_polyhedron(solids.dodecahedron())
    assert report["euler_characteristic"] == 2
    assert report["face_size_histogram"] == {5: 12}
    assert report["out_of_range_indices"] == []
    assert report["degenerate_faces"] == []
    assert report["unpaired_edges"] == []


def test_script_writes_summary(tmp_path, monkeypatch):
    spec = importlib.util.spec_from_file_location(
        "generate_polyhedron", REPO_ROOT / "scripts" / "generate_polyhedron.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    out = tmp_path / "aC.json"
    monkeypatch.setattr(sys, "argv", ["generate_polyhedron.py", "aC", "--out", str(out)])
    module.main()

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["name"] == "aC"
    assert len(data["vertices"]) == 12
    assert len(data["faces"]) == 14
    assert len(data["colors"]) == 14
    assert data["report"]["euler_characteristic"] == 2
