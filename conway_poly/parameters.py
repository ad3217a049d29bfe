"""Configuration stack for recipe generation.

Parameters are layered from lowest to highest precedence:

1. JSON file (primary): persistent configuration.
2. CLI overrides: runtime tweaks for headless runs.

The interface is plain Python; every layer ends in
:meth:`OperatorParameters.validate`.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
import logging
import json
import math

__all__ = [
    "OperatorParameters",
    "load_json_config",
    "apply_overrides",
    "parse_cli_overrides",
    "load_parameters",
]


@dataclass(slots=True)
class OperatorParameters:
    """Recipe plus the distances and switches every operator reads."""

    recipe: str = "D"
    apex_dist: float = 0.1  # scales the kis apex offset along the face normal
    chamfer_dist: float = 0.05
    inset_dist: float = 0.3  # 0 keeps the vertex, 1 collapses onto the center
    popout_dist: float = -0.1
    extrude_dist: float = 0.1
    loft_alpha: float = 0.0
    hollow_inset: float = 0.2
    hollow_thickness: float = 0.1

    # Chunked kis (see conway_poly.parallel). Chunk boundaries duplicate
    # shared vertices, so the serial path stays the default.
    parallel_kis: bool = False
    chunk_size: int = 2048
    max_workers: int | None = None

    palette_size: int = 16

    def validate(self) -> None:
        if not self.recipe or not self.recipe.strip():
            raise ValueError("Recipe must not be empty")
        for name in (
            "apex_dist",
            "chamfer_dist",
            "inset_dist",
            "popout_dist",
            "extrude_dist",
            "loft_alpha",
            "hollow_inset",
            "hollow_thickness",
        ):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be a finite number")
        if self.chunk_size < 1:
            raise ValueError("Chunk size must be at least 1")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1 when set")
        if self.palette_size < 1:
            raise ValueError("Palette size must be at least 1")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OperatorParameters":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise KeyError(f"Unknown parameter '{unknown[0]}'")
        params = cls(**{**asdict(cls()), **data})
        params.validate()
        return params


def load_json_config(path: Path | str | None) -> Dict[str, Any]:
    """Load the JSON config file or return an empty dict if no path is given."""

    if path is None:
        return {}
    json_path = Path(path)
    if not json_path.exists():
        raise FileNotFoundError(f"Config file not found: {json_path}")
    data = json.loads(json_path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError("Top-level JSON config must be an object")
    return dict(data)


def apply_overrides(
    base: OperatorParameters, overrides: Mapping[str, Any]
) -> OperatorParameters:
    """Return a copy of ``base`` with overrides applied."""

    merged = base.to_dict()
    for key, value in overrides.items():
        if key not in merged:
            raise KeyError(f"Unknown parameter '{key}'")
        merged[key] = value
    return OperatorParameters.from_dict(merged)


def parse_cli_overrides(
    args: Optional[Iterable[str]] = None,
) -> Tuple[Dict[str, Any], Any]:
    """Parse CLI-style overrides using argparse conventions."""

    import argparse

    parser = argparse.ArgumentParser(description="Conway polyhedron generator")
    parser.add_argument("--config", type=str, help="Path to JSON config", default=None)
    parser.add_argument("--out", type=str, default=None, help="Write the summary JSON here")
    parser.add_argument("recipe", nargs="?", default=None, help="Conway recipe, e.g. dkD")
    parser.add_argument("--apex-dist", type=float, help="kis apex height")
    parser.add_argument("--chamfer-dist", type=float, help="Chamfer offset")
    parser.add_argument(
        "--inset",
        type=float,
        nargs=2,
        metavar=("INSET", "POPOUT"),
        help="insetn inset fraction and popout distance",
    )
    parser.add_argument("--extrude-dist", type=float, help="Extrusion distance")
    parser.add_argument("--loft-alpha", type=float, help="Loft inset fraction")
    parser.add_argument(
        "--hollow",
        type=float,
        nargs=2,
        metavar=("INSET", "THICKNESS"),
        help="Hollow window inset fraction and wall thickness",
    )
    parser.add_argument(
        "--parallel-kis",
        action="store_true",
        help="Run kis in face chunks on a thread pool",
    )
    parser.add_argument("--chunk-size", type=int, help="Faces per kis chunk")
    parser.add_argument("--workers", type=int, help="Thread pool size for chunked kis")
    parser.add_argument("--palette-size", type=int, help="Number of palette colors")

    parsed, unknown = parser.parse_known_args(args=args)
    if unknown:
        logging.info("Ignoring unknown CLI args: %s", " ".join(unknown))
    overrides: Dict[str, Any] = {}
    if parsed.recipe is not None:
        overrides["recipe"] = parsed.recipe
    if parsed.apex_dist is not None:
        overrides["apex_dist"] = parsed.apex_dist
    if parsed.chamfer_dist is not None:
        overrides["chamfer_dist"] = parsed.chamfer_dist
    if parsed.inset is not None:
        overrides["inset_dist"], overrides["popout_dist"] = parsed.inset
    if parsed.extrude_dist is not None:
        overrides["extrude_dist"] = parsed.extrude_dist
    if parsed.loft_alpha is not None:
        overrides["loft_alpha"] = parsed.loft_alpha
    if parsed.hollow is not None:
        overrides["hollow_inset"], overrides["hollow_thickness"] = parsed.hollow
    if parsed.parallel_kis:
        overrides["parallel_kis"] = True
    if parsed.chunk_size is not None:
        overrides["chunk_size"] = parsed.chunk_size
    if parsed.workers is not None:
        overrides["max_workers"] = parsed.workers
    if parsed.palette_size is not None:
        overrides["palette_size"] = parsed.palette_size

    return overrides, parsed


def load_parameters(
    config_path: Path | str | None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> OperatorParameters:
    """Load parameters using the JSON → CLI precedence chain."""

    data = load_json_config(config_path)
    params = OperatorParameters.from_dict(data)
    if cli_overrides:
        params = apply_overrides(params, cli_overrides)
    return params
